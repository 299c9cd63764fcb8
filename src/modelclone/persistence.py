# SPDX-License-Identifier: EUPL-1.2
# Copyright (C) 2026 Dimpact
"""
Django binding of the persistence collaborator.

The duplication engine never talks to the ORM directly. Everything it needs
from the model layer goes through :class:`DjangoPersistence`:

* creating blank instances and copying attribute values
* reading the relationship metadata of a model
* reading the related records of an original
* attaching related records to an unsaved copy, without touching the database
* persisting a copy together with everything attached to it

Related records attached to an unsaved copy are kept in a pending store on the
instance itself, because Django's related managers refuse to operate on
instances without a primary key.
"""
import copy
from dataclasses import dataclass, field
from typing import Any

from django.core.exceptions import ObjectDoesNotExist
from django.db import models, transaction
from django.db.models import ForeignObjectRel

import structlog

from .constants import RelationKind

logger = structlog.stdlib.get_logger(__name__)

PENDING_ATTR = "_modelclone_pending"


@dataclass
class PendingRelation:
    relationship: Any
    instances: list = field(default_factory=list)


def _get_pending(instance) -> dict[str, PendingRelation]:
    pending = instance.__dict__.get(PENDING_ATTR)
    if pending is None:
        pending = {}
        instance.__dict__[PENDING_ATTR] = pending
    return pending


def is_unsaved(instance) -> bool:
    return instance.pk is None or instance._state.adding


class DjangoPersistence:
    def create_unsaved(self, model: type[models.Model]) -> models.Model:
        return model()

    def get_attributes(self, instance: models.Model) -> dict[str, Any]:
        """
        Return the concrete attribute values of ``instance``, keyed by attname.

        Primary keys and multi-table inheritance parent links are left out, so
        assigning the result to a blank instance yields a new record. Foreign
        keys are returned as their raw id.
        """
        attributes = {}
        for model_field in instance._meta.concrete_fields:
            if model_field.primary_key:
                continue
            if getattr(model_field.remote_field, "parent_link", False):
                continue
            # don't share mutable values (JSON, arrays) with the original
            attributes[model_field.attname] = copy.deepcopy(
                getattr(instance, model_field.attname)
            )
        return attributes

    def set_attribute(self, instance: models.Model, name: str, value) -> None:
        setattr(instance, name, value)

    def get_relationship_metadata(self, model: type[models.Model]) -> list[dict]:
        """
        Describe the relationships declared on (or inherited by) ``model``.

        Forward foreign keys are attributes and are not reported. Reverse
        relations declared against a subtype (e.g. a foreign key to a proxy
        model) are only reported for that subtype and its descendants.
        """
        metadata = []
        for model_field in model._meta.get_fields():
            if not model_field.is_relation:
                continue

            if isinstance(model_field, ForeignObjectRel):
                if not issubclass(model, model_field.model):
                    continue
                if model_field.one_to_one and model_field.parent_link:
                    continue

                remote = model_field.field
                if model_field.many_to_many:
                    through = model_field.through
                    foreign_key = remote.m2m_reverse_field_name()
                else:
                    through = None
                    foreign_key = remote.name

                metadata.append(
                    {
                        "name": model_field.get_accessor_name(),
                        "cardinality": (
                            "one_to_one"
                            if model_field.one_to_one
                            else "many_to_many"
                            if model_field.many_to_many
                            else "one_to_many"
                        ),
                        "target": model_field.related_model,
                        "through": through,
                        "foreign_key": foreign_key,
                    }
                )

            elif model_field.many_to_many:
                metadata.append(
                    {
                        "name": model_field.name,
                        "cardinality": "many_to_many",
                        "target": model_field.remote_field.model,
                        "through": model_field.remote_field.through,
                        "foreign_key": model_field.m2m_field_name(),
                    }
                )

        return metadata

    def get_related(self, instance: models.Model, relationship) -> list:
        pending = instance.__dict__.get(PENDING_ATTR, {})
        if relationship.name in pending:
            return list(pending[relationship.name].instances)

        if is_unsaved(instance):
            return []

        if relationship.kind == RelationKind.to_one:
            try:
                return [getattr(instance, relationship.name)]
            except ObjectDoesNotExist:
                return []

        manager = getattr(instance, relationship.name)
        return list(manager.order_by("pk"))

    def attach_related(self, instance: models.Model, relationship, related) -> None:
        pending = _get_pending(instance)
        slot = pending.setdefault(
            relationship.name, PendingRelation(relationship=relationship)
        )
        if relationship.is_through:
            slot.instances.append(related)
            return

        # re-parent right away, the id is picked up once the owner is saved
        setattr(related, relationship.foreign_key, instance)
        if relationship.kind == RelationKind.to_one:
            slot.instances[:] = [related]
        else:
            slot.instances.append(related)

    def clear_related(self, instance: models.Model, relationship) -> None:
        pending = _get_pending(instance)
        pending[relationship.name] = PendingRelation(relationship=relationship)

    def persist(self, instance: models.Model) -> models.Model:
        """
        Save ``instance`` and the graph attached to it in a single transaction.
        """
        saved = []
        with transaction.atomic():
            self._save_graph(instance, saved)

        for obj in saved:
            obj.__dict__.pop(PENDING_ATTR, None)

        logger.debug(
            "duplicate_persisted",
            model=instance._meta.label,
            pk=instance.pk,
            saved=len(saved),
        )
        return instance

    def _save_graph(self, instance: models.Model, saved: list) -> None:
        instance.save()
        saved.append(instance)

        pending = instance.__dict__.get(PENDING_ATTR, {})
        for slot in pending.values():
            relationship = slot.relationship

            if not relationship.is_through:
                for child in slot.instances:
                    setattr(child, relationship.foreign_key, instance)
                    self._save_graph(child, saved)
                continue

            for target in slot.instances:
                if is_unsaved(target):
                    self._save_graph(target, saved)
            if slot.instances:
                getattr(instance, relationship.name).add(*slot.instances)

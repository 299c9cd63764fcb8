# SPDX-License-Identifier: EUPL-1.2
# Copyright (C) 2026 Dimpact
from typing import Optional

from django.conf import settings
from django.db import models

import structlog

from .constants import DirectiveType, RelationKind
from .exceptions import DuplicationDepthExceeded, UnresolvableRelationship
from .persistence import DjangoPersistence
from .policies import ClonePolicy, PolicyRegistry, registry as default_registry
from .relations import Relationship, RelationshipResolver
from .transforms import apply_attribute_directives, invoke_transforms

logger = structlog.stdlib.get_logger(__name__)

DEFAULT_MAX_DEPTH = 32

default_persistence = DjangoPersistence()
default_resolver = RelationshipResolver(default_persistence)


def get_max_depth() -> int:
    return getattr(settings, "MODELCLONE_MAX_DEPTH", DEFAULT_MAX_DEPTH)


class Duplicator:
    """
    Builds an unsaved duplicate of an instance and the related records its
    clone policy asks for.

    A duplicator carries the state of a single duplication call: the policies
    resolved so far and the number of instances created. Use a fresh one per
    call, or simply :func:`duplicate`.
    """

    def __init__(
        self,
        registry: Optional[PolicyRegistry] = None,
        persistence=None,
        resolver: Optional[RelationshipResolver] = None,
        max_depth: Optional[int] = None,
    ):
        self.registry = registry if registry is not None else default_registry
        self.persistence = (
            persistence if persistence is not None else default_persistence
        )
        if resolver is None:
            resolver = (
                default_resolver
                if self.persistence is default_persistence
                else RelationshipResolver(self.persistence)
            )
        self.resolver = resolver
        self.max_depth = max_depth if max_depth is not None else get_max_depth()

        self._policies: dict[type[models.Model], Optional[ClonePolicy]] = {}
        self.created = 0

    def get_policy(self, model) -> Optional[ClonePolicy]:
        if model not in self._policies:
            self._policies[model] = self.registry.resolve(model)
        return self._policies[model]

    def run(self, original: models.Model) -> models.Model:
        copy = self.duplicate(original)
        logger.info(
            "duplication_completed",
            model=original._meta.label,
            original_pk=original.pk,
            instances=self.created,
        )
        return copy

    def duplicate(self, original: models.Model, depth: int = 0) -> models.Model:
        model = type(original)
        if depth > self.max_depth:
            raise DuplicationDepthExceeded(model, self.max_depth)

        copy = self.persistence.create_unsaved(model)
        for name, value in self.persistence.get_attributes(original).items():
            self.persistence.set_attribute(copy, name, value)
        self.created += 1

        policy = self.get_policy(model)
        if policy is None:
            logger.debug(
                "instance_duplicated", model=model._meta.label, depth=depth, policy=None
            )
            return copy

        apply_attribute_directives(policy, copy, self.persistence)
        if not policy.enabled:
            logger.debug(
                "instance_duplicated",
                model=model._meta.label,
                depth=depth,
                policy="disabled",
            )
            return copy

        invoke_transforms(policy.overrides, original, copy)

        relationships = self.resolver.get_relationships(model)
        # cloned join rows already carry the links made through their foreign key
        cloned_joins = {
            (relationship.target, relationship.foreign_key)
            for relationship in relationships
            if relationship.kind == RelationKind.to_many
            and policy.recognizes(relationship.kind)
            and policy.get_relationship_directive(relationship.name)
            == DirectiveType.clone
        }
        for relationship in relationships:
            self._duplicate_relationship(
                policy, relationship, original, copy, depth, cloned_joins
            )

        invoke_transforms(policy.customizations, original, copy)

        logger.debug(
            "instance_duplicated",
            model=model._meta.label,
            depth=depth,
            policy="enabled",
        )
        return copy

    def _duplicate_relationship(
        self,
        policy: ClonePolicy,
        relationship: Relationship,
        original,
        copy,
        depth: int,
        cloned_joins: set,
    ) -> None:
        log = logger.bind(
            model=policy.model._meta.label, relationship=relationship.name
        )

        if not policy.recognizes(relationship.kind):
            log.debug("relationship_skipped", reason="not_recognized")
            return

        directive = policy.get_relationship_directive(relationship.name)

        if directive == DirectiveType.exclude:
            log.debug("relationship_skipped", reason="excluded")
            return

        # nullify on a to-many relationship leaves the slot empty, like exclude
        if directive == DirectiveType.nullify:
            self.persistence.clear_related(copy, relationship)
            return

        if directive == DirectiveType.clone:
            for related in self.persistence.get_related(original, relationship):
                self.persistence.attach_related(
                    copy, relationship, self.duplicate(related, depth=depth + 1)
                )
            return

        if not relationship.is_through:
            log.debug("relationship_skipped", reason="no_directive")
            return

        if (relationship.through, relationship.foreign_key) in cloned_joins:
            log.debug("relationship_skipped", reason="join_model_cloned")
            return

        # share the far side records of the original
        for target in self.persistence.get_related(original, relationship):
            self.persistence.attach_related(copy, relationship, target)


def duplicate(
    instance: models.Model,
    registry: Optional[PolicyRegistry] = None,
    persistence=None,
) -> models.Model:
    """
    Return an unsaved duplicate of ``instance``.

    The duplicate is built according to the clone policy registered for the
    model of ``instance`` (or inherited from an ancestor). Nothing is written
    to the database, use :func:`persist` to save the duplicate with its
    related records.
    """
    return Duplicator(registry=registry, persistence=persistence).run(instance)


def _get_relationship(instance, name: str) -> Relationship:
    relationship = default_resolver.get_relationship(type(instance), name)
    if relationship is None:
        raise UnresolvableRelationship(type(instance), name, "unknown relationship")
    return relationship


def related(instance: models.Model, name: str) -> list:
    """
    Return the related records in slot ``name`` of ``instance``.

    For a duplicate this is what has been attached to it so far, for a saved
    instance it is read from the database.
    """
    return default_persistence.get_related(instance, _get_relationship(instance, name))


def attach(instance: models.Model, name: str, related_instance: models.Model) -> None:
    default_persistence.attach_related(
        instance, _get_relationship(instance, name), related_instance
    )


def persist(instance: models.Model) -> models.Model:
    return default_persistence.persist(instance)

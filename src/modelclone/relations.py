# SPDX-License-Identifier: EUPL-1.2
# Copyright (C) 2026 Dimpact
from dataclasses import dataclass
from typing import Optional

from django.db import models

import structlog

from .constants import RelationKind
from .exceptions import UnresolvableRelationship

logger = structlog.stdlib.get_logger(__name__)


@dataclass(frozen=True)
class Relationship:
    name: str
    kind: RelationKind
    target: type[models.Model]
    through: Optional[type[models.Model]] = None
    foreign_key: str = ""

    @property
    def is_through(self) -> bool:
        return self.kind in (RelationKind.to_many_through, RelationKind.many_to_many)


def _is_resolved(model) -> bool:
    return isinstance(model, type) and issubclass(model, models.Model)


def classify(model, record: dict) -> Relationship:
    """
    Turn one relationship metadata record into a :class:`Relationship`.

    Through associations are classified by their join model: an auto-created
    join table is a plain many-to-many, an explicit join model makes it a
    to-many-through association. Either way ``target`` is the far side.
    """
    name = record.get("name") or ""
    target = record.get("target")
    if not name:
        raise UnresolvableRelationship(model, "<unnamed>", "missing name")
    if not _is_resolved(target):
        raise UnresolvableRelationship(model, name, "missing target model")

    cardinality = record.get("cardinality")
    if cardinality == "one_to_many":
        kind = RelationKind.to_many
        through = None
    elif cardinality == "one_to_one":
        kind = RelationKind.to_one
        through = None
    elif cardinality == "many_to_many":
        through = record.get("through")
        if not _is_resolved(through):
            raise UnresolvableRelationship(model, name, "missing through model")
        kind = (
            RelationKind.many_to_many
            if through._meta.auto_created
            else RelationKind.to_many_through
        )
    else:
        raise UnresolvableRelationship(
            model, name, f"unknown cardinality {cardinality!r}"
        )

    return Relationship(
        name=name,
        kind=kind,
        target=target,
        through=through,
        foreign_key=record.get("foreign_key") or "",
    )


class RelationshipResolver:
    """
    Per model table of :class:`Relationship` descriptors.

    The table of a model is built from the persistence layer's metadata the
    first time it is asked for and reused afterwards.
    """

    def __init__(self, persistence):
        self.persistence = persistence
        self._table: dict[type[models.Model], tuple[Relationship, ...]] = {}

    def get_relationships(self, model) -> tuple[Relationship, ...]:
        if model not in self._table:
            records = self.persistence.get_relationship_metadata(model)
            self._table[model] = tuple(classify(model, record) for record in records)
            logger.debug(
                "relationships_resolved",
                model=model._meta.label,
                relationships=[rel.name for rel in self._table[model]],
            )
        return self._table[model]

    def get_relationship(self, model, name: str) -> Optional[Relationship]:
        for relationship in self.get_relationships(model):
            if relationship.name == name:
                return relationship
        return None

    def clear(self) -> None:
        self._table.clear()

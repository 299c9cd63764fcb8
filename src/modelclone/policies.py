# SPDX-License-Identifier: EUPL-1.2
# Copyright (C) 2026 Dimpact
"""
Clone policies: per model configuration of how instances are duplicated.

A policy is declared once, while the models are being set up, with the fluent
:class:`PolicyBuilder`::

    from modelclone import PolicyBuilder, define

    define(
        Parent,
        PolicyBuilder()
        .enable()
        .clone("children")
        .prepend(name="Copy of ")
        .customize(add_defaults),
    )

or with the class decorator of a registry::

    @registry.register(PolicyBuilder().enable().propagate())
    class Parent(models.Model):
        ...

The resulting :class:`ClonePolicy` is immutable and stored in a process wide
:class:`PolicyRegistry`.
"""
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterable, Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

import structlog

from .constants import (
    DEFAULT_RECOGNIZED_KINDS,
    RELATION_KIND_ALIASES,
    VALUE_DIRECTIVES,
    DirectiveType,
    RelationKind,
)
from .inheritance import find_inherited_policy

logger = structlog.stdlib.get_logger(__name__)

Callback = Callable[[Any, Any], None]

RELATIONSHIP_DIRECTIVES = (
    DirectiveType.clone,
    DirectiveType.nullify,
    DirectiveType.exclude,
)


def normalize_kind(kind) -> RelationKind:
    if isinstance(kind, RelationKind):
        return kind
    value = str(kind).lstrip(":")
    if value in RELATION_KIND_ALIASES:
        return RELATION_KIND_ALIASES[value]
    try:
        return RelationKind(value)
    except ValueError:
        raise ImproperlyConfigured(f"Unknown relationship kind: {kind!r}")


def get_default_recognized() -> frozenset:
    kinds = getattr(settings, "MODELCLONE_DEFAULT_RECOGNIZE", DEFAULT_RECOGNIZED_KINDS)
    return frozenset(normalize_kind(kind) for kind in kinds)


@dataclass(frozen=True)
class Directive:
    type: DirectiveType
    value: Any = None


# policies are compared and hashed by identity
@dataclass(frozen=True, eq=False)
class ClonePolicy:
    model: Any
    enabled: bool = False
    # ``None`` means the default set from the settings
    recognized: Optional[frozenset] = None
    propagate: bool = False
    directives: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))
    overrides: tuple = ()
    customizations: tuple = ()

    def recognizes(self, kind: RelationKind) -> bool:
        recognized = (
            self.recognized if self.recognized is not None else get_default_recognized()
        )
        return kind in recognized

    def get_directives(self, name: str) -> tuple:
        return self.directives.get(name, ())

    def get_relationship_directive(self, name: str) -> Optional[DirectiveType]:
        """
        Return the directive governing relationship ``name``, the last one wins.
        """
        types = [
            directive.type
            for directive in self.get_directives(name)
            if directive.type in RELATIONSHIP_DIRECTIVES
        ]
        return types[-1] if types else None

    def get_value_directives(self) -> list[tuple[str, Directive]]:
        return [
            (name, directive)
            for name, directives in self.directives.items()
            for directive in directives
            if directive.type in VALUE_DIRECTIVES
        ]

    def get_nullified(self) -> list[str]:
        return [
            name
            for name in self.directives
            if self.get_relationship_directive(name) == DirectiveType.nullify
        ]


class PolicyBuilder:
    def __init__(self):
        self._enabled = False
        self._recognized = None
        self._propagate = False
        self._directives: dict[str, list[Directive]] = {}
        self._overrides: list[Callback] = []
        self._customizations: list[Callback] = []

    def _add(self, name: str, directive: Directive) -> "PolicyBuilder":
        self._directives.setdefault(name, []).append(directive)
        return self

    def enable(self) -> "PolicyBuilder":
        self._enabled = True
        return self

    def disable(self) -> "PolicyBuilder":
        self._enabled = False
        return self

    def recognize(self, kinds: Iterable) -> "PolicyBuilder":
        if isinstance(kinds, (str, RelationKind)):
            kinds = [kinds]
        self._recognized = frozenset(normalize_kind(kind) for kind in kinds)
        return self

    def propagate(self, flag: bool = True) -> "PolicyBuilder":
        self._propagate = flag
        return self

    def clone(self, *names: str) -> "PolicyBuilder":
        for name in names:
            self._add(name, Directive(DirectiveType.clone))
        return self

    def nullify(self, *names: str) -> "PolicyBuilder":
        for name in names:
            self._add(name, Directive(DirectiveType.nullify))
        return self

    def exclude(self, *names: str) -> "PolicyBuilder":
        for name in names:
            self._add(name, Directive(DirectiveType.exclude))
        return self

    def prepend(self, **values: str) -> "PolicyBuilder":
        for name, value in values.items():
            self._add(name, Directive(DirectiveType.prepend, value))
        return self

    def append(self, **values: str) -> "PolicyBuilder":
        for name, value in values.items():
            self._add(name, Directive(DirectiveType.append, value))
        return self

    def set(self, **values) -> "PolicyBuilder":
        for name, value in values.items():
            self._add(name, Directive(DirectiveType.set, value))
        return self

    def regex(self, **replacements: tuple[str, str]) -> "PolicyBuilder":
        for name, (pattern, replacement) in replacements.items():
            try:
                compiled = re.compile(pattern)
            except re.error as exc:
                raise ImproperlyConfigured(
                    f"Invalid regex for '{name}': {pattern!r}"
                ) from exc
            self._add(name, Directive(DirectiveType.regex, (compiled, replacement)))
        return self

    def override(self, callback: Callback) -> "PolicyBuilder":
        self._overrides.append(callback)
        return self

    def customize(self, callback: Callback) -> "PolicyBuilder":
        self._customizations.append(callback)
        return self

    def build(self, model) -> ClonePolicy:
        return ClonePolicy(
            model=model,
            enabled=self._enabled,
            recognized=self._recognized,
            propagate=self._propagate,
            directives=MappingProxyType(
                {
                    name: tuple(directives)
                    for name, directives in self._directives.items()
                }
            ),
            overrides=tuple(self._overrides),
            customizations=tuple(self._customizations),
        )


class PolicyRegistry:
    def __init__(self):
        self._policies: dict[Any, ClonePolicy] = {}

    def __contains__(self, model) -> bool:
        return model in self._policies

    def __iter__(self):
        return iter(list(self._policies.values()))

    def __len__(self) -> int:
        return len(self._policies)

    def define(self, model, builder: Optional[PolicyBuilder] = None) -> ClonePolicy:
        if builder is None:
            builder = PolicyBuilder()
        policy = builder.build(model) if isinstance(builder, PolicyBuilder) else builder
        if policy.model is not model:
            raise ImproperlyConfigured(
                f"Policy for {policy.model!r} cannot be registered for {model!r}"
            )
        self._policies[model] = policy
        logger.debug(
            "clone_policy_defined",
            model=model._meta.label,
            enabled=policy.enabled,
            propagate=policy.propagate,
        )
        return policy

    def register(self, builder: Optional[PolicyBuilder] = None):
        def decorator(model):
            self.define(model, builder)
            return model

        return decorator

    def unregister(self, model) -> None:
        self._policies.pop(model, None)

    def clear(self) -> None:
        self._policies.clear()

    def get(self, model) -> Optional[ClonePolicy]:
        return self._policies.get(model)

    def resolve(self, model) -> Optional[ClonePolicy]:
        policy = self.get(model)
        if policy is not None:
            return policy
        return find_inherited_policy(model, self)


registry = PolicyRegistry()


def define(model, builder: Optional[PolicyBuilder] = None) -> ClonePolicy:
    return registry.define(model, builder)


def resolve(model) -> Optional[ClonePolicy]:
    return registry.resolve(model)

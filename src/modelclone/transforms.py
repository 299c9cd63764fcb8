# SPDX-License-Identifier: EUPL-1.2
# Copyright (C) 2026 Dimpact
from django.core.exceptions import FieldDoesNotExist

import structlog

from .constants import DirectiveType
from .exceptions import TransformCallbackError

logger = structlog.stdlib.get_logger(__name__)


def _get_concrete_field(instance, name: str):
    try:
        model_field = instance._meta.get_field(name)
    except FieldDoesNotExist:
        return None
    # many-to-many fields are concrete too, but hold no value of their own
    if model_field not in instance._meta.concrete_fields:
        return None
    return model_field


def _apply_value(directive, current):
    if directive.type == DirectiveType.set:
        return directive.value
    if directive.type == DirectiveType.prepend:
        return f"{directive.value}{current or ''}"
    if directive.type == DirectiveType.append:
        return f"{current or ''}{directive.value}"
    if directive.type == DirectiveType.regex:
        pattern, replacement = directive.value
        return pattern.sub(replacement, current or "")
    raise ValueError(f"Not a value directive: {directive.type}")


def apply_attribute_directives(policy, copy, persistence) -> None:
    """
    Apply the field level directives of ``policy`` to ``copy``.

    Fields are nullified first, the value directives (``set``, ``prepend``,
    ``append``, ``regex``) follow in declaration order. Names that don't refer
    to a concrete field are left to the relationship handling.
    """
    for name in policy.get_nullified():
        model_field = _get_concrete_field(copy, name)
        if model_field is not None:
            persistence.set_attribute(copy, model_field.attname, None)

    for name, directive in policy.get_value_directives():
        model_field = _get_concrete_field(copy, name)
        if model_field is None:
            logger.debug(
                "directive_ignored",
                model=copy._meta.label,
                name=name,
                directive=directive.type,
                reason="unknown_field",
            )
            continue

        current = getattr(copy, model_field.attname)
        persistence.set_attribute(
            copy, model_field.attname, _apply_value(directive, current)
        )


def invoke_transforms(callbacks, original, copy) -> None:
    """
    Run the callbacks in registration order with ``(original, copy)``.

    There is no recovery: the first failing callback aborts the duplication.
    """
    for callback in callbacks:
        try:
            callback(original, copy)
        except Exception as exc:
            logger.warning(
                "transform_callback_failed",
                model=copy._meta.label,
                callback=getattr(callback, "__qualname__", repr(callback)),
                error=str(exc),
            )
            raise TransformCallbackError(callback, type(copy)) from exc

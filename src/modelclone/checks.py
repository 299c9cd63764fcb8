# SPDX-License-Identifier: EUPL-1.2
# Copyright (C) 2026 Dimpact
from django.conf import settings
from django.core.checks import Error, Warning, register
from django.core.exceptions import FieldDoesNotExist, ImproperlyConfigured

from .duplication import DEFAULT_MAX_DEPTH, default_resolver
from .exceptions import UnresolvableRelationship
from .policies import get_default_recognized, registry


@register
def check_settings(app_configs, **kwargs):
    errors = []

    max_depth = getattr(settings, "MODELCLONE_MAX_DEPTH", DEFAULT_MAX_DEPTH)
    if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 1:
        errors.append(
            Error(
                f"The MODELCLONE_MAX_DEPTH setting ({max_depth!r}) is invalid.",
                hint="Set MODELCLONE_MAX_DEPTH to a positive integer.",
                id="modelclone.E001",
            )
        )

    try:
        get_default_recognized()
    except ImproperlyConfigured as exc:
        errors.append(
            Error(
                f"The MODELCLONE_DEFAULT_RECOGNIZE setting is invalid: {exc}",
                hint="Use to_one, to_many, to_many_through or many_to_many.",
                id="modelclone.E002",
            )
        )

    return errors


def _is_concrete_field(model, name: str) -> bool:
    try:
        return model._meta.get_field(name) in model._meta.concrete_fields
    except FieldDoesNotExist:
        return False


@register
def check_policies(app_configs, **kwargs):
    errors = []

    for policy in registry:
        label = policy.model._meta.label
        try:
            relationships = default_resolver.get_relationships(policy.model)
        except UnresolvableRelationship as exc:
            errors.append(Error(str(exc), obj=policy.model, id="modelclone.E003"))
            continue

        names = {relationship.name for relationship in relationships}
        for name in policy.directives:
            if name in names or _is_concrete_field(policy.model, name):
                continue
            errors.append(
                Warning(
                    f"The clone policy of {label} has a directive for '{name}', "
                    "which is neither a field nor a relationship.",
                    hint="The directive has no effect, check for typos.",
                    obj=policy.model,
                    id="modelclone.W001",
                )
            )

    return errors

# SPDX-License-Identifier: EUPL-1.2
# Copyright (C) 2026 Dimpact
import dataclasses
from functools import lru_cache

from django.db import models

import structlog

logger = structlog.stdlib.get_logger(__name__)


@lru_cache(maxsize=None)
def get_ancestors(model) -> tuple:
    """
    Return the ancestor models of ``model``, nearest first.

    Abstract bases, proxy parents and multi-table parents are all included,
    ``models.Model`` itself and non-model mixins are not.
    """
    return tuple(
        base
        for base in model.__mro__[1:]
        if issubclass(base, models.Model) and base is not models.Model
    )


def find_inherited_policy(model, policies):
    """
    Look up the policy ``model`` inherits from its ancestors.

    Only the nearest ancestor with a policy is considered: if that policy does
    not propagate, nothing is inherited. The returned policy is bound to
    ``model``.
    """
    for ancestor in get_ancestors(model):
        policy = policies.get(ancestor)
        if policy is None:
            continue
        if not policy.propagate:
            return None

        logger.debug(
            "clone_policy_inherited",
            model=model._meta.label,
            ancestor=ancestor._meta.label,
        )
        return dataclasses.replace(policy, model=model)

    return None

# SPDX-License-Identifier: EUPL-1.2
# Copyright (C) 2026 Dimpact
from .constants import DirectiveType, RelationKind
from .duplication import Duplicator, attach, duplicate, persist, related
from .exceptions import (
    DuplicationDepthExceeded,
    DuplicationError,
    TransformCallbackError,
    UnresolvableRelationship,
)
from .policies import ClonePolicy, PolicyBuilder, PolicyRegistry, define, registry

__all__ = (
    "ClonePolicy",
    "DirectiveType",
    "DuplicationDepthExceeded",
    "DuplicationError",
    "Duplicator",
    "PolicyBuilder",
    "PolicyRegistry",
    "RelationKind",
    "TransformCallbackError",
    "UnresolvableRelationship",
    "attach",
    "define",
    "duplicate",
    "persist",
    "registry",
    "related",
)
__version__ = "1.0.0"
__author__ = "Maykin Media"

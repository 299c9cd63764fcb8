# SPDX-License-Identifier: EUPL-1.2
# Copyright (C) 2026 Dimpact


class DuplicationError(Exception):
    pass


class UnresolvableRelationship(DuplicationError):
    def __init__(self, model, relationship: str, reason: str = ""):
        self.model = model
        self.relationship = relationship
        message = (
            f"Relationship '{relationship}' of {model._meta.label} cannot be resolved"
        )
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class TransformCallbackError(DuplicationError):
    """
    A user supplied ``override`` or ``customize`` callback raised.

    The exception raised by the callback is available as ``__cause__``.
    """

    def __init__(self, callback, model):
        self.callback = callback
        self.model = model
        name = getattr(callback, "__qualname__", repr(callback))
        super().__init__(
            f"Transform callback {name} failed while duplicating {model._meta.label}"
        )


class DuplicationDepthExceeded(DuplicationError):
    def __init__(self, model, max_depth: int):
        self.model = model
        self.max_depth = max_depth
        super().__init__(
            f"Duplicating {model._meta.label} exceeded the maximum depth of "
            f"{max_depth}, check the clone policies for cycles."
        )

"""Exception hierarchy shared across the filter model."""
from __future__ import annotations


class ModalFilterError(Exception):
    """Base class for all modal filter failures."""


class NetworkDefinitionError(ModalFilterError):
    pass


class UnknownRoadError(ModalFilterError, KeyError):
    pass


class UnknownIntersectionError(ModalFilterError, KeyError):
    pass


class InvalidFilterError(ModalFilterError):
    pass


class InvalidEditError(ModalFilterError):
    pass


class NothingToUndoError(ModalFilterError):
    pass


class NoRouteError(ModalFilterError):
    pass


class ContractViolationError(ModalFilterError):
    """Raised when a caller breaks an invariant the model relies on.

    These are programming errors rather than recoverable conditions; nothing in
    the package catches them.
    """

"""Exceptions raised by edit-guard."""


class EditGuardError(Exception):
    """Base class for edit-guard failures."""


class EventError(EditGuardError):
    """The host delivered a payload that is not a JSON object."""


class GateError(EditGuardError):
    """The type-check gate could not record its verdict."""

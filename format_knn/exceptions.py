"""
Exceptions raised by the classifier core.
"""


class InvalidInputError(ValueError):
    """A query or construction argument is malformed (e.g. wrong vector width)."""


class InvalidStateError(RuntimeError):
    """The corpus cannot support the requested operation (e.g. it is empty)."""

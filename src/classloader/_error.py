"""Error classes raised by the loader"""

__all__ = [
    "LoaderError",
    "InvalidArgumentError",
    "InvalidObjectError",
    "ResolutionError",
    "EntryPointError",
    "MissingEntryPointError",
    "InvalidEntryPointError",
    "NoMainMethodError",
]


class LoaderError(Exception):
    """Base class for every error raised while loading a source tree."""


class InvalidArgumentError(LoaderError):
    """Wrong argument type or shape given to a public operation."""


class InvalidObjectError(LoaderError):
    """A source file produced something that is not a usable object.

    Args:
        message: (str) Error description
        location: (str | None) Dotted location of the offending object

    Attributes:
        location: (str | None) Dotted location of the offending object
    """

    def __init__(self, message, location=None):
        self.location = location
        super().__init__(message)


class ResolutionError(LoaderError):
    """An import or superclass reference did not resolve to an object."""


class EntryPointError(LoaderError):
    """The configured entry point cannot be invoked."""


class MissingEntryPointError(EntryPointError):
    """The entry point location names an object no file defined."""


class InvalidEntryPointError(EntryPointError):
    """The entry point object is not a singleton."""


class NoMainMethodError(EntryPointError):
    """The entry point singleton has no Main member."""

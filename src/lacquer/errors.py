__all__ = [
    "LacquerError",
    "InvalidTargetError",
    "DefinitionNotFoundError",
    "DefinitionGoneError",
    "VersionError",
]


class LacquerError(Exception):
    """Base class for all errors raised by lacquer."""

    pass


class InvalidTargetError(LacquerError):
    """Raised when a DSL definition's target cannot be resolved to a constructible class."""

    pass


class DefinitionNotFoundError(LacquerError):
    """Raised when no registered definition matches a requested name and version requirement."""

    pass


class DefinitionGoneError(LacquerError):
    """Raised when a mixin's definition is no longer present in its registry."""

    pass


class VersionError(LacquerError):
    """Raised when a version or version requirement string is malformed."""

    pass

"""Domain models used throughout the package."""

from dataclasses import dataclass, field
from typing import Any, Callable
from uuid import UUID

from lacquer.runner import ScopedRunner
from lacquer.version import Version

__all__ = ["Definition", "DEFAULT_VERSION"]

DEFAULT_VERSION = "1.0.0"
"""Version assigned to definitions registered without an explicit version."""


@dataclass(frozen=True)
class Definition:
    """A registered DSL: a name and version bound to a constructible target class.

    Attributes:
        name: The DSL name. Several definitions may share a name at different versions.
        target: The class whose instances the DSL constructs.
        version: The definition's version.
        constructor: Callable building a new ``target`` instance from the entry point's arguments.
        rules: Configuration rules declared for the DSL. Stored, not interpreted.
        identity: Opaque identity of this definition, stable for its lifetime.
        runner: Runs configuration blocks against instances built from this definition.
    """

    name: str
    target: type
    version: Version
    constructor: Callable[..., Any]
    rules: dict[str, Any] = field(hash=False)
    identity: UUID
    runner: ScopedRunner = field(default_factory=ScopedRunner, compare=False, repr=False)

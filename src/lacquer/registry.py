"""Registration and lookup of DSL definitions."""

import builtins
import importlib
import inspect
import logging
import threading
import uuid
from typing import Any, Callable, Iterator, Mapping, Optional
from uuid import UUID

from lacquer.domain import DEFAULT_VERSION, Definition
from lacquer.errors import InvalidTargetError
from lacquer.naming import camelize, constant_to_name
from lacquer.rules import declared_rules
from lacquer.runner import ScopedRunner
from lacquer.version import Requirement, RequirementLike, Version, VersionLike

__all__ = [
    "Definition",
    "DefinitionRegistry",
]

logger = logging.getLogger(__name__)


class DefinitionRegistry:
    """Ordered registry of DSL definitions, supporting versioned lookup by name.

    Registration only ever appends: several definitions may share a name, and
    re-registering a name with a bumped version leaves the earlier definition in
    place. Lookups never modify the registry.

    Example:
        >>> registry = DefinitionRegistry()
        >>> registry.define(Photo, version="1.1")
        >>> registry.define(Photo, version="1.0")
        >>> registry.find("photo").version          # Version 1.1
        >>> registry.find("photo", "< 1.1").version  # Version 1.0
    """

    def __init__(self):
        self._definitions: list[Definition] = []
        self._lock = threading.RLock()

    def register(self, definition: Definition):
        """Register a definition explicitly.

        Args:
            definition: The Definition to be registered.
        """
        with self._lock:
            self._definitions.append(definition)
        logger.debug(
            "Registered DSL '%s' %s for %s",
            definition.name,
            definition.version,
            definition.target.__qualname__,
        )

    def define(
        self,
        type_or_name: Any,
        *,
        name: Optional[str] = None,
        target: Optional[type] = None,
        version: Optional[VersionLike] = None,
        constructor: Optional[Callable[..., Any]] = None,
        namespace: Optional[Mapping[str, Any]] = None,
        **rules: Any,
    ) -> Definition:
        """Create a definition and register it.

        Args:
            type_or_name: The target class, or a name or dotted path from which the
                target class can be resolved.
            name: Optional DSL name; defaults to the snake_cased class name.
            target: Optional explicit target class, overriding the one inferred from
                ``type_or_name``.
            version: Optional version string; defaults to ``1.0.0``.
            constructor: Optional callable building target instances; defaults to the
                target class itself.
            namespace: Mapping in which bare names are looked up; defaults to builtins.
            **rules: Configuration rules, added to any declared on the target class.

        Returns:
            The registered Definition.

        Raises:
            InvalidTargetError: If no constructible target class can be determined.
            VersionError: If the version string is malformed.
        """
        dsl_target = target if target is not None else _resolve_target(type_or_name, namespace)
        _validate_target(dsl_target, type_or_name)
        dsl_name = name or constant_to_name(type_or_name)

        definition = Definition(
            dsl_name,
            dsl_target,
            Version.parse(version or DEFAULT_VERSION),
            constructor or dsl_target,
            {**declared_rules(dsl_target), **rules},
            uuid.uuid4(),
            ScopedRunner(dsl_name),
        )
        self.register(definition)
        return definition

    def defines(
        self, name: Optional[str] = None, version: Optional[VersionLike] = None, **rules: Any
    ) -> Callable:
        """Decorator to register a class as a DSL target.

        Args:
            name: Optional DSL name; defaults to the snake_cased class name.
            version: Optional version string; defaults to ``1.0.0``.
            **rules: Configuration rules stored on the definition.

        Returns:
            A decorator that registers the class and returns it unchanged.

        Example:
            @registry.defines(version="2.0")
            class Photo:
                ...
        """
        def decorator(cls):
            self.define(cls, name=name, version=version, **rules)
            return cls

        return decorator

    def find(self, name: str, requirement: RequirementLike = None) -> Optional[Definition]:
        """Find the best definition registered under ``name``.

        Args:
            name: The DSL name to match exactly.
            requirement: Optional version requirement, e.g. ``">= 1.0, < 2.0"``.

        Returns:
            The matching definition with the highest version, preferring the most
            recently registered among equal versions, or None if nothing matches.
        """
        requirement = Requirement.parse(requirement)
        candidates = [
            definition
            for definition in self.registered_definitions(name)
            if requirement.satisfied_by(definition.version)
        ]
        if not candidates:
            return None
        return sorted(candidates, key=lambda definition: definition.version)[-1]

    def find_by_identity(self, identity: UUID) -> Optional[Definition]:
        with self._lock:
            return next((d for d in self._definitions if d.identity == identity), None)

    def registered_definitions(self, name: Optional[str] = None) -> list[Definition]:
        """Retrieve definitions in registration order, optionally only those with a given name.

        Args:
            name: A DSL name. If None, returns all definitions.

        Returns:
            A new list of the matching definitions.
        """
        with self._lock:
            if name is None:
                return list(self._definitions)
            return [d for d in self._definitions if d.name == name]

    def clear(self):
        """Remove every definition. Intended for test isolation."""
        with self._lock:
            self._definitions.clear()
        logger.debug("Cleared DSL registry")

    def __getitem__(self, name: str) -> Definition:
        definition = self.find(name)
        if definition is None:
            raise KeyError(name)
        return definition

    def __contains__(self, name: str) -> bool:
        return len(self.registered_definitions(name)) > 0

    def __iter__(self) -> Iterator[Definition]:
        return iter(self.registered_definitions())

    def __len__(self) -> int:
        with self._lock:
            return len(self._definitions)


def _resolve_target(reference: Any, namespace: Optional[Mapping[str, Any]]) -> Any:
    """Resolve a type reference to the object it names.

    Classes resolve to themselves. Dotted strings are imported; bare names are
    looked up in ``namespace`` as given and camelized.

    Example:
        >>> _resolve_target("collections.OrderedDict", None)  # OrderedDict
        >>> _resolve_target("photo", globals())               # Photo, if defined
        >>> _resolve_target("does_not_exist", None)           # None
    """
    if inspect.isclass(reference):
        return reference
    if not isinstance(reference, str):
        return None

    if "." in reference:
        return _import_dotted(reference)

    lookup = vars(builtins) if namespace is None else namespace
    candidate = lookup.get(reference)
    if inspect.isclass(candidate):
        return candidate
    return lookup.get(camelize(reference), candidate)


def _import_dotted(reference: str) -> Any:
    """Import the longest importable module prefix of ``reference`` and look up the rest.

    Example:
        >>> _import_dotted("collections.OrderedDict")  # OrderedDict
        >>> _import_dotted("photos.Album.Page")        # nested class Album.Page

    Raises:
        InvalidTargetError: If the path is relative or has empty segments, or if no
            prefix of it can be imported.
    """
    parts = reference.split(".")
    if not all(parts):
        raise InvalidTargetError(f"Invalid DSL target: {reference!r} is not an absolute dotted path")

    import_error: Optional[ImportError] = None
    for split in range(len(parts) - 1, 0, -1):
        try:
            found = importlib.import_module(".".join(parts[:split]))
        except ImportError as e:
            import_error = import_error or e
            continue
        for attribute in parts[split:]:
            found = getattr(found, attribute, None)
        return found

    raise InvalidTargetError(
        f"Invalid DSL target: {reference!r} (module {parts[0]!r} could not be imported)"
    ) from import_error


def _validate_target(target: Any, reference: Any):
    if not inspect.isclass(target):
        raise InvalidTargetError(f"Invalid DSL target: {(target or reference)!r}")
    if inspect.isabstract(target):
        raise InvalidTargetError(f"Invalid DSL target: {target!r} is abstract")

"""High level entry points for defining and resolving DSLs.

Every function here takes an optional ``registry``. When it is omitted, the
process-wide registry returned by :func:`default_registry` is used.
"""

import logging
from typing import Any, Callable, Mapping, Optional

from lacquer.domain import Definition
from lacquer.errors import DefinitionNotFoundError
from lacquer.mixin import Mixin, to_mixin
from lacquer.naming import constant_to_name
from lacquer.registry import DefinitionRegistry
from lacquer.version import Requirement, RequirementLike, VersionLike

__all__ = [
    "define_dsl",
    "resolve_mixin",
    "Lacquered",
    "default_registry",
    "reset",
]

logger = logging.getLogger(__name__)

_default_registry: Optional[DefinitionRegistry] = None


def default_registry() -> DefinitionRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _default_registry
    if _default_registry is None:
        _default_registry = DefinitionRegistry()
    return _default_registry


def reset():
    """Clear the process-wide registry. Intended for tests only."""
    default_registry().clear()


def _registry_or_default(registry: Optional[DefinitionRegistry]) -> DefinitionRegistry:
    # an empty registry is falsy, so test against None
    return registry if registry is not None else default_registry()


def define_dsl(
    type_or_name: Any,
    *,
    name: Optional[str] = None,
    target: Optional[type] = None,
    version: Optional[VersionLike] = None,
    constructor: Optional[Callable[..., Any]] = None,
    namespace: Optional[Mapping[str, Any]] = None,
    registry: Optional[DefinitionRegistry] = None,
    **rules: Any,
) -> Definition:
    """Define a DSL and register it.

    Args:
        type_or_name: The target class, or a name or dotted path naming it.
        name: Optional DSL name; defaults to the snake_cased class name.
        target: Optional explicit target class, for DSL names that do not name a class.
        version: Optional version string; defaults to ``1.0.0``.
        constructor: Optional callable building target instances.
        namespace: Mapping in which bare names are looked up; defaults to builtins.
        registry: Registry to register in; defaults to the process-wide registry.
        **rules: Configuration rules stored on the definition.

    Returns:
        The registered :class:`~lacquer.domain.Definition`.

    Raises:
        InvalidTargetError: If no constructible target class can be determined. Nothing
            is registered in that case.

    Example:
        >>> define_dsl(Photo)                                # DSL 'photo' for Photo
        >>> define_dsl("snapshot", target=Photo)             # DSL 'snapshot' for Photo
        >>> define_dsl("collections.OrderedDict")            # DSL 'ordered_dict'
        >>> define_dsl("does_not_exist")                     # raises InvalidTargetError
    """
    return _registry_or_default(registry).define(
        type_or_name,
        name=name,
        target=target,
        version=version,
        constructor=constructor,
        namespace=namespace,
        **rules,
    )


def resolve_mixin(
    name: str,
    requirement: RequirementLike = None,
    registry: Optional[DefinitionRegistry] = None,
) -> Mixin:
    """Create a :class:`~lacquer.mixin.Mixin` for the best definition matching a name.

    Args:
        name: The DSL name.
        requirement: Optional version requirement, e.g. ``">= 1.0, < 1.1"``.
        registry: Registry to look in; defaults to the process-wide registry.

    Returns:
        A mixin bound to the highest matching version.

    Raises:
        DefinitionNotFoundError: If no definition matches.
    """
    registry = _registry_or_default(registry)
    requirement = Requirement.parse(requirement)
    definition = registry.find(name, requirement)
    if definition is None:
        raise DefinitionNotFoundError(
            f"No DSL '{name}' matching requirement '{requirement}' is registered"
        )
    logger.debug("Resolved DSL '%s' (%s) to version %s", name, requirement, definition.version)
    return to_mixin(definition, registry)


class Lacquered:
    """Base class letting a class declare itself as a DSL target.

    Example:
        >>> class Photo(Lacquered):
        ...     def __init__(self, caption=None):
        ...         self.caption = caption
        >>> Photo.declare_dsl(version="1.1")
        >>> resolve_mixin("photo")("Sunset")
    """

    @classmethod
    def declare_dsl(
        cls,
        *,
        name: Optional[str] = None,
        version: Optional[VersionLike] = None,
        registry: Optional[DefinitionRegistry] = None,
        **rules: Any,
    ) -> Definition:
        return define_dsl(
            cls,
            name=name or constant_to_name(cls),
            version=version,
            registry=registry,
            **rules,
        )

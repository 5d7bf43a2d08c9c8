"""Mixins: attachable entry points that build and configure DSL instances.

A :class:`Mixin` is bound to one definition's identity, not to the definition
itself. Every call looks the definition up again in its registry, so a mixin
keeps building the target it was created for even after newer versions are
registered under the same name, and fails clearly if the registry has since
been cleared.

Mixins can be attached in several ways:

    >>> photo = to_mixin(registry.find("photo"), registry)
    >>> photo("Sunset", configure=lambda p: p.add_person("Ann"))

    >>> class Album:
    ...     photo = photo                        # held as a class attribute
    >>> Album().photo("Sunset")

    >>> class Gallery(photo.as_class()):         # inherited as a Python mixin class
    ...     pass
    >>> Gallery().photo("Sunset")
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional
from uuid import UUID

from lacquer.domain import Definition
from lacquer.errors import DefinitionGoneError
from lacquer.naming import camelize
from lacquer.registry import DefinitionRegistry
from lacquer.runner import Block

__all__ = ["Mixin", "to_mixin"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Mixin:
    """Entry point for one DSL definition.

    Attributes:
        name: The DSL name, which is also the name of the entry point.
        identity: Identity of the definition this mixin builds.
        registry: The registry the definition is looked up in on each call.
    """

    name: str
    identity: UUID
    registry: DefinitionRegistry = field(repr=False, compare=False)

    def __call__(self, *args: Any, configure: Optional[Block] = None, **kwargs: Any) -> Any:
        """Build a new target instance, optionally configuring it.

        Args:
            *args: Positional arguments for the definition's constructor.
            configure: Optional configuration block, called with the new instance
                as its receiver. Its return value is discarded.
            **kwargs: Keyword arguments for the definition's constructor.

        Returns:
            The newly constructed instance.

        Raises:
            DefinitionGoneError: If the definition is no longer registered.
        """
        definition = self.registry.find_by_identity(self.identity)
        if definition is None:
            raise DefinitionGoneError(
                f"DSL '{self.name}' ({self.identity}) is no longer registered"
            )

        instance = definition.constructor(*args, **kwargs)
        if configure is not None:
            definition.runner.run(instance, configure)
        return instance

    @property
    def entry_point(self) -> Callable[..., Any]:
        """A plain function named after the DSL that forwards to this mixin."""
        mixin = self

        def entry_point(*args, configure=None, **kwargs):
            return mixin(*args, configure=configure, **kwargs)

        entry_point.__name__ = entry_point.__qualname__ = self.name
        entry_point.__doc__ = f"Build a new '{self.name}' instance, optionally configuring it."
        return entry_point

    def as_class(self) -> type:
        """Generate a mixin class exposing the entry point as a static method named after the DSL."""
        return type(
            f"{camelize(self.name)}Mixin",
            (),
            {self.name: staticmethod(self.entry_point), "__slots__": ()},
        )


def to_mixin(definition: Definition, registry: DefinitionRegistry) -> Mixin:
    """Wrap a definition in a new :class:`Mixin` bound to its identity."""
    logger.debug("Creating mixin for DSL '%s' %s", definition.name, definition.version)
    return Mixin(definition.name, definition.identity, registry)

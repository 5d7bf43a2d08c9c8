"""Lacquer: versioned, named DSLs for building and configuring objects.

Classes register a named, versioned *definition*. Consumers later resolve a
definition by name, optionally constrained by a version requirement, and get
back a *mixin*: an entry point that builds a new instance of the target class
and runs an optional configuration block against it.

Key Features:
    - Several versions of a DSL may be registered under one name
    - Name lookups pick the highest version satisfying a requirement
    - Mixins stay bound to the definition they were created for
    - Configuration blocks receive the new instance explicitly

Basic Usage:
    >>> from lacquer.dsl import Lacquered, resolve_mixin
    >>>
    >>> class Photo(Lacquered):
    ...     def __init__(self, caption=None):
    ...         self.caption = caption
    ...         self.people = []
    >>>
    >>> Photo.declare_dsl(version="1.1")
    >>> photo = resolve_mixin("photo", ">= 1.0")
    >>> sunset = photo("Sunset", configure=lambda p: p.people.append("Ann"))

The package consists of several modules:
    - dsl: High-level define/resolve entry points and the Lacquered base class
    - registry: Definition registration and versioned lookup
    - mixin: Entry points bound to a definition
    - runner: Scoped execution of configuration blocks
    - version: Version and version requirement parsing
    - domain: Core domain model (Definition)
    - rules: Decorators declaring configuration rules on target classes
    - naming: Class-name to DSL-name conversions
    - errors: Package-specific exceptions
"""

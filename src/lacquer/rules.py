"""Decorators for declaring configuration rules on DSL target classes.

Rules declared here are collected into :attr:`lacquer.domain.Definition.rules`
when the class is registered. Subclasses inherit their bases' rules and may
override them by name.
"""

from typing import Any, Callable

__all__ = ["rules", "set_rules", "declared_rules"]

_RULES_ATTRIBUTE = "__lacquer_rules__"


def set_rules(target: type, **new_rules: Any) -> type:
    declared = dict(vars(target).get(_RULES_ATTRIBUTE, {}))
    declared.update(new_rules)
    setattr(target, _RULES_ATTRIBUTE, declared)
    return target


def rules(**new_rules: Any) -> Callable[[type], type]:
    """Class decorator attaching configuration rules to a DSL target.

    Example:
        @rules(caption=str.strip, max_people=10)
        class Photo:
            ...
    """
    def decorator(target: type) -> type:
        return set_rules(target, **new_rules)

    return decorator


def declared_rules(target: Any) -> dict[str, Any]:
    """Collect the rules declared on ``target`` and its bases, most-derived last."""
    collected: dict[str, Any] = {}
    for klass in reversed(getattr(target, "__mro__", (target,))):
        collected.update(getattr(klass, "__dict__", {}).get(_RULES_ATTRIBUTE, {}))
    return collected

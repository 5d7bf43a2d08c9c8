"""Conversions between class names and DSL names."""

import inspect
import re
from typing import Any

__all__ = ["constant_to_name", "demodulize", "underscore", "camelize"]


def constant_to_name(constant: Any) -> str:
    """Derive a DSL name from a class or a type reference.

    Classes are converted from their (unqualified) CamelCase name to
    snake_case. Dotted references keep only their last segment. Any other
    string is returned unchanged.

    Example:
        >>> constant_to_name(Photo)                      # Returns "photo"
        >>> constant_to_name(HTTPRequest)                # Returns "http_request"
        >>> constant_to_name("collections.OrderedDict")  # Returns "ordered_dict"
        >>> constant_to_name("custom")                   # Returns "custom"
    """
    if inspect.isclass(constant):
        return underscore(demodulize(constant.__qualname__))
    if "." in str(constant):
        return underscore(demodulize(constant))
    return constant


def demodulize(qualified_name: str) -> str:
    return re.sub(r"^.*\.", "", str(qualified_name))


def underscore(camel_cased_word: str) -> str:
    word = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", str(camel_cased_word))
    word = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", word)
    return word.replace("-", "_").lower()


def camelize(snake_cased_word: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in str(snake_cased_word).split("_"))

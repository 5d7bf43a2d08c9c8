"""Version values and version requirements.

A :class:`Version` is a dotted sequence of non-negative integers. Versions are
compared segment by segment, with missing trailing segments treated as zero,
so ``1.1`` and ``1.1.0`` are equal.

A :class:`Requirement` is a conjunction of comparison clauses such as
``">= 1.0, < 2.0"``. Supported operators are ``=``, ``==``, ``!=``, ``>``,
``<``, ``>=``, ``<=`` and the pessimistic operator ``~>`` (``~> 1.2`` allows
``>= 1.2, < 2``; ``~> 1.2.3`` allows ``>= 1.2.3, < 1.3``). A clause with no
operator requires equality. A requirement with no clauses is satisfied by
every version.
"""

import operator
import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Callable, Iterable, Optional, Union

from lacquer.errors import VersionError

__all__ = ["Version", "Requirement", "VersionLike", "RequirementLike"]

_VERSION_PATTERN = re.compile(r"^\d+(\.\d+)*$")
_CLAUSE_PATTERN = re.compile(r"^(~>|>=|<=|==|!=|=|>|<)?\s*(.+)$")


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """A parsed, totally ordered version.

    Attributes:
        segments: The parsed integer segments; ``str()`` joins them with dots.
    """

    segments: tuple[int, ...]

    @staticmethod
    def parse(version: "VersionLike") -> "Version":
        """Parse a version string such as ``"1.0.0"``.

        Raises:
            VersionError: If the string is not a dotted sequence of integers.
        """
        if isinstance(version, Version):
            return version
        text = str(version).strip()
        if not _VERSION_PATTERN.match(text):
            raise VersionError(f"Malformed version number string {version!r}")
        return Version(tuple(int(segment) for segment in text.split(".")))

    def bump(self) -> "Version":
        """The exclusive upper bound implied by a pessimistic ``~>`` clause."""
        if len(self.segments) == 1:
            return Version((self.segments[0] + 1,))
        *head, last = self.segments[:-1]
        return Version((*head, last + 1))

    def _key(self) -> tuple[int, ...]:
        segments = list(self.segments)
        while len(segments) > 1 and segments[-1] == 0:
            segments.pop()
        return tuple(segments)

    def __eq__(self, other):
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other):
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self):
        return hash(self._key())

    def __str__(self):
        return ".".join(str(segment) for segment in self.segments)


VersionLike = Union[str, Version]


def _pessimistic(version: Version, requested: Version) -> bool:
    return requested <= version < requested.bump()


_OPERATORS: dict[str, Callable[[Version, Version], bool]] = {
    "=": operator.eq,
    "==": operator.eq,
    "!=": operator.ne,
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
    "~>": _pessimistic,
}


@dataclass(frozen=True)
class Requirement:
    """A predicate over versions built from comparison clauses.

    Attributes:
        clauses: ``(operator, version)`` pairs, all of which must hold.
    """

    clauses: tuple[tuple[str, Version], ...] = ()

    @staticmethod
    def parse(requirement: "RequirementLike") -> "Requirement":
        """Build a requirement from a clause string, an iterable of clause strings, or None.

        Example:
            >>> Requirement.parse(">=1.0,<1.1")
            >>> Requirement.parse([">= 1.0", "< 1.1"])
            >>> Requirement.parse(None)  # satisfied by every version

        Raises:
            VersionError: If any clause has an unknown operator or a malformed version.
        """
        if requirement is None:
            return Requirement()
        if isinstance(requirement, Requirement):
            return requirement
        if isinstance(requirement, (str, Version)):
            requirement = [requirement]

        clauses = []
        for item in requirement:
            if isinstance(item, Version):
                clauses.append(("=", item))
                continue
            for clause in str(item).split(","):
                if clause.strip():
                    clauses.append(_parse_clause(clause))
        return Requirement(tuple(clauses))

    def satisfied_by(self, version: VersionLike) -> bool:
        version = Version.parse(version)
        return all(_OPERATORS[op](version, requested) for op, requested in self.clauses)

    def __contains__(self, version: VersionLike) -> bool:
        return self.satisfied_by(version)

    def __str__(self):
        if not self.clauses:
            return ">= 0"
        return ", ".join(f"{op} {version}" for op, version in self.clauses)


RequirementLike = Optional[Union[str, Version, Requirement, Iterable[str]]]


def _parse_clause(clause: str) -> tuple[str, Version]:
    match = _CLAUSE_PATTERN.match(clause.strip())
    if match is None:
        raise VersionError(f"Illformed requirement {clause!r}")
    op, version = match.groups()
    return op or "=", Version.parse(version)

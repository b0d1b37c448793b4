"""Fully qualified module reference value object."""

from __future__ import annotations

import re
from dataclasses import dataclass

_SEGMENT = re.compile(r"^[A-Z][A-Za-z0-9_]*$")


@dataclass(frozen=True, slots=True)
class ModuleRef:
    """Fully qualified module name as an ordered sequence of segments.

    Equality is structural: two refs are equal iff their segments are.

    Attributes:
        segments: Capitalized identifier segments (at least one)

    Example:
        >>> ModuleRef.parse("MyApp.Accounts.Domain")
        ModuleRef(segments=('MyApp', 'Accounts', 'Domain'))
    """

    segments: tuple[str, ...]

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.segments:
            raise ValueError("segments must not be empty")
        for segment in self.segments:
            if not _SEGMENT.match(segment):
                raise ValueError(f"invalid module segment {segment!r}")

    @classmethod
    def parse(cls, name: str) -> ModuleRef:
        """Parse dotted module name.

        Raises:
            ValueError: If name is not a dotted sequence of capitalized identifiers
        """
        if not name:
            raise ValueError("module name must not be empty")
        return cls(tuple(name.strip().split(".")))

    @classmethod
    def try_parse(cls, name: str) -> ModuleRef | None:
        """Parse dotted module name, None if malformed."""
        if not is_module_name(name):
            return None
        return cls(tuple(name.split(".")))

    @property
    def name(self) -> str:
        """Dotted name."""
        return ".".join(self.segments)

    @property
    def last(self) -> str:
        """Last segment."""
        return self.segments[-1]

    def child(self, *segments: str) -> ModuleRef:
        """Ref extended by segments."""
        return ModuleRef(self.segments + segments)

    def ancestors(self) -> tuple[ModuleRef, ...]:
        """All proper prefixes, nearest first.

        Example:
            MyApp.Documents.Notes -> (MyApp.Documents, MyApp)
        """
        return tuple(
            ModuleRef(self.segments[:size]) for size in range(len(self.segments) - 1, 0, -1)
        )

    def __str__(self) -> str:
        """Dotted name."""
        return self.name


def is_module_name(text: str) -> bool:
    """True if text is a bare dotted sequence of capitalized identifiers."""
    if not text:
        return False
    return all(_SEGMENT.match(part) for part in text.split("."))

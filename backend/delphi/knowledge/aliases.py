"""
AliasIndex - alternate ("appears as") names mapped to canonical names.

The index is category-agnostic: it only maps strings to strings and never
consults an entity store. Callers retry their lookup with the resolved name.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from ..errors import ConfigurationError


class AliasIndex:
    """Single-hop alternate -> canonical name resolution."""

    __slots__ = ("_targets",)

    def __init__(self, targets: Mapping[str, str] | None = None) -> None:
        self._targets: Mapping[str, str] = MappingProxyType(dict(targets or {}))

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any] | None, source: str | None = None) -> "AliasIndex":
        """
        Build from a parsed appearances mapping.

        Raises:
            ConfigurationError: If the mapping or any entry is not string -> string
        """
        if raw is None:
            return cls()
        if not isinstance(raw, Mapping):
            raise ConfigurationError(
                f"expected a mapping of alternate names, got {type(raw).__name__}", source
            )
        targets: dict[str, str] = {}
        for alternate, canonical in raw.items():
            if not isinstance(alternate, str) or not isinstance(canonical, str):
                raise ConfigurationError(
                    f"alias {alternate!r} -> {canonical!r} must map a string to a string",
                    source,
                )
            targets[alternate] = canonical
        return cls(targets)

    def resolve(self, name: str) -> str | None:
        """
        Return the canonical name for a known alternate, else None.

        An unknown alias and a name that needs no alias are indistinguishable;
        both fall through to ordinary lookup.
        """
        return self._targets.get(name)

    def chained(self, known_names) -> dict[str, str]:
        """
        Entries that need more than one hop to reach a known name.

        A target that is itself an alternate (and not a known name) forms a
        chain or a cycle.
        """
        return {
            alt: target
            for alt, target in self._targets.items()
            if target in self._targets and target not in known_names
        }

    def dangling(self, known_names) -> dict[str, str]:
        """Entries whose target is neither a known name nor another alternate."""
        return {
            alt: target
            for alt, target in self._targets.items()
            if target not in known_names and target not in self._targets
        }

    @property
    def targets(self) -> Mapping[str, str]:
        return self._targets

    def __contains__(self, name: object) -> bool:
        return name in self._targets

    def __len__(self) -> int:
        return len(self._targets)

"""
EntityStore - immutable name -> record mapping for one category.
"""

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError

from ..errors import ConfigurationError
from .models import RECORD_TYPES, Category, EntityRecord


class EntityStore:
    """
    Canonical entity records for a single category.

    Keys are stored exactly as the data source provides them; lookups are
    exact and case-sensitive. Stores are built once (see from_raw) and never
    mutated, a reload builds fresh stores instead.
    """

    __slots__ = ("category", "_records")

    def __init__(self, category: Category, records: Mapping[str, EntityRecord]) -> None:
        self.category = category
        self._records: Mapping[str, EntityRecord] = MappingProxyType(dict(records))

    @classmethod
    def from_raw(
        cls,
        category: Category,
        raw: Mapping[str, Any] | None,
        source: str | None = None,
    ) -> "EntityStore":
        """
        Validate a raw name -> attribute-dict batch into a store.

        Args:
            category: Category the batch belongs to
            raw: Mapping parsed from the data file (None means empty)
            source: Optional file name used in error messages

        Raises:
            ConfigurationError: If the batch or any record in it is malformed
        """
        if raw is None:
            return cls(category, {})
        if not isinstance(raw, Mapping):
            raise ConfigurationError(
                f"expected a mapping of {category.value} names, got {type(raw).__name__}",
                source,
            )

        model = RECORD_TYPES[category]
        records: dict[str, EntityRecord] = {}
        for name, attributes in raw.items():
            if not isinstance(name, str) or not name:
                raise ConfigurationError(f"invalid {category.value} name {name!r}", source)
            try:
                records[name] = model.model_validate(attributes or {})
            except ValidationError as e:
                first = e.errors()[0]
                field = ".".join(str(part) for part in first["loc"]) or "record"
                raise ConfigurationError(
                    f"{category.value} {name!r} is malformed ({field}: {first['msg']})",
                    source,
                ) from e
        return cls(category, records)

    def lookup(self, name: str) -> EntityRecord | None:
        """Exact lookup by canonical name."""
        return self._records.get(name)

    @property
    def records(self) -> Mapping[str, EntityRecord]:
        """Read-only view of every record."""
        return self._records

    def keys(self) -> list[str]:
        return list(self._records)

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"EntityStore({self.category.value}, {len(self)} entries)"

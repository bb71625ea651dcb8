"""
KnowledgeSnapshot - everything the query path reads, bundled as one value.

A snapshot is built in full, validated, and only then published by the
reload coordinator. Query handlers grab the current reference once and read
exclusively from it, so a reload can never hand them a mix of old stores and
a new fuzzy index.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace

from ..errors import ConfigurationError
from .aliases import AliasIndex
from .fuzzy import DEFAULT_FRAGMENT_SIZES, DEFAULT_MIN_SCORE, FuzzyIndex
from .models import CATEGORY_PRECEDENCE, Category, EntityRecord
from .store import EntityStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessPolicy:
    """Identities allowed to ask the oracle into their channel."""

    allowed: frozenset[str] = frozenset()

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "AccessPolicy":
        """Chat identities are case-insensitive; names are stored lower-cased without "#"."""
        return cls(frozenset(name.strip().lstrip("#").lower() for name in names))

    def allows(self, identity: str) -> bool:
        return identity.lower() in self.allowed


@dataclass(frozen=True)
class Match:
    """A successful lookup: which store answered and with what."""

    category: Category
    name: str
    record: EntityRecord


@dataclass(frozen=True)
class KnowledgeSnapshot:
    """
    Stores, alias index, fuzzy index and access policy at one point in time.

    Build with KnowledgeSnapshot.build(); the constructor does no validation.
    """

    stores: Mapping[Category, EntityStore]
    aliases: AliasIndex
    fuzzy: FuzzyIndex
    access_policy: AccessPolicy = field(default_factory=AccessPolicy)
    version: int = 0

    @classmethod
    def build(
        cls,
        stores: Mapping[Category, EntityStore],
        aliases: AliasIndex | None = None,
        access_policy: AccessPolicy | None = None,
        *,
        version: int = 0,
        fragment_sizes: Iterable[int] = DEFAULT_FRAGMENT_SIZES,
        min_score: float = DEFAULT_MIN_SCORE,
    ) -> "KnowledgeSnapshot":
        """
        Assemble and validate a snapshot.

        Categories missing from `stores` get an empty store. The fuzzy index
        is derived here from the union of all canonical keys.

        Raises:
            ConfigurationError: If an alias needs more than one hop to reach a
                known name
        """
        complete = {
            category: stores[category] if category in stores else EntityStore(category, {})
            for category in CATEGORY_PRECEDENCE
        }
        aliases = aliases or AliasIndex()

        universe: set[str] = set()
        for category in CATEGORY_PRECEDENCE:
            store = complete[category]
            collisions = universe.intersection(store)
            for name in sorted(collisions):
                logger.warning(
                    "%r is defined in more than one category; %s entry is shadowed",
                    name,
                    category.value,
                )
            universe.update(store)

        chained = aliases.chained(universe)
        if chained:
            alt, target = sorted(chained.items())[0]
            raise ConfigurationError(
                f"alias {alt!r} points at another alias {target!r}; "
                f"aliases must name an entity directly ({len(chained)} chained)"
            )
        for alt, target in sorted(aliases.dangling(universe).items()):
            logger.warning("Alias %r points at unknown entity %r", alt, target)

        fuzzy = FuzzyIndex(universe, fragment_sizes=fragment_sizes, min_score=min_score)
        return cls(
            stores=complete,
            aliases=aliases,
            fuzzy=fuzzy,
            access_policy=access_policy or AccessPolicy(),
            version=version,
        )

    @classmethod
    def empty(cls) -> "KnowledgeSnapshot":
        return cls.build({})

    # ---------- Lookups ----------

    def lookup(self, category: Category, name: str) -> EntityRecord | None:
        """Exact lookup in one category's store."""
        store = self.stores.get(category)
        if store is None:
            return None
        return store.lookup(name)

    def find(self, name: str) -> Match | None:
        """First exact hit across categories in precedence order."""
        for category in CATEGORY_PRECEDENCE:
            record = self.lookup(category, name)
            if record is not None:
                return Match(category, name, record)
        return None

    def resolve_alias(self, name: str) -> str | None:
        return self.aliases.resolve(name)

    def suggest(self, text: str) -> str | None:
        return self.fuzzy.suggest(text)

    # ---------- Introspection ----------

    def counts(self) -> dict[Category, int]:
        return {category: len(store) for category, store in self.stores.items()}

    def with_version(self, version: int) -> "KnowledgeSnapshot":
        """Same content, new version number."""
        return replace(self, version=version)

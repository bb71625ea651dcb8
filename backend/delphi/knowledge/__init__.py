"""Knowledge layer: entity stores, alias and fuzzy indices, snapshots."""

from .aliases import AliasIndex
from .fuzzy import FuzzyIndex
from .loader import load_snapshot
from .models import CATEGORY_PRECEDENCE, Category, EntityRecord
from .snapshot import AccessPolicy, KnowledgeSnapshot, Match
from .store import EntityStore

__all__ = [
    "AccessPolicy",
    "AliasIndex",
    "CATEGORY_PRECEDENCE",
    "Category",
    "EntityRecord",
    "EntityStore",
    "FuzzyIndex",
    "KnowledgeSnapshot",
    "Match",
    "load_snapshot",
]

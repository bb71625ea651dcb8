"""
FuzzyIndex - closest-known-name suggestions by shared n-gram fragments.

Every canonical key is cut into fragments of several lengths (the default
bag sizes are 2, 3 and 4 characters). A query is cut the same way and each
candidate sharing at least one fragment is scored with the Sorensen-Dice
coefficient over the two fragment sets:

    score = 2 * |shared| / (|query fragments| + |candidate fragments|)

The index is immutable. Entity data changes in whole batches, so a reload
builds a brand new index from the new key universe instead of patching the
old one.
"""

import random
from collections import Counter, defaultdict
from collections.abc import Iterable


DEFAULT_FRAGMENT_SIZES: tuple[int, ...] = (2, 3, 4)
DEFAULT_MIN_SCORE = 0.35


def normalize_for_matching(text: str) -> str:
    """Lower-case and join whitespace runs with hyphens ("Long Sword" -> "long-sword")."""
    return "-".join(text.lower().split())


def fragments(text: str, sizes: Iterable[int] = DEFAULT_FRAGMENT_SIZES) -> frozenset[str]:
    """
    All substrings of the given lengths.

    Text shorter than every size yields itself as its only fragment so that
    one-letter names can still be matched exactly.
    """
    normalized = normalize_for_matching(text)
    found: set[str] = set()
    for size in sizes:
        for start in range(len(normalized) - size + 1):
            found.add(normalized[start : start + size])
    if not found and normalized:
        found.add(normalized)
    return frozenset(found)


class FuzzyIndex:
    """
    Approximate lookup over a fixed key universe.

    Usage:
        index = FuzzyIndex(["long-sword", "short-sword"])
        index.suggest("longsword")  # -> "long-sword"
    """

    def __init__(
        self,
        keys: Iterable[str],
        fragment_sizes: Iterable[int] = DEFAULT_FRAGMENT_SIZES,
        min_score: float = DEFAULT_MIN_SCORE,
    ) -> None:
        sizes = tuple(sorted(set(fragment_sizes)))
        if not sizes or any(not isinstance(size, int) or size < 1 for size in sizes):
            raise ValueError(f"fragment sizes must be positive integers, got {sizes!r}")
        if not 0.0 <= min_score <= 1.0:
            raise ValueError(f"min_score must be between 0 and 1, got {min_score!r}")

        self.fragment_sizes = sizes
        self.min_score = min_score
        # Sorted so that iteration order, and with it every result, is reproducible
        self._keys: tuple[str, ...] = tuple(sorted(set(keys)))
        self._fragments: dict[str, frozenset[str]] = {}
        self._postings: dict[str, list[str]] = defaultdict(list)

        for key in self._keys:
            key_fragments = fragments(key, sizes)
            self._fragments[key] = key_fragments
            for fragment in key_fragments:
                self._postings[fragment].append(key)

    @property
    def keys(self) -> tuple[str, ...]:
        return self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def scores(self, text: str) -> dict[str, float]:
        """Score every candidate that shares at least one fragment with text."""
        query = fragments(text, self.fragment_sizes)
        if not query:
            return {}

        shared: Counter[str] = Counter()
        for fragment in query:
            for key in self._postings.get(fragment, ()):
                shared[key] += 1

        return {
            key: 2 * count / (len(query) + len(self._fragments[key]))
            for key, count in shared.items()
        }

    def suggest(self, text: str) -> str | None:
        """
        Return the best-scoring known key, or None.

        Candidates below min_score are ignored. Equal scores go to the
        lexicographically smaller key.
        """
        candidates = [
            (-score, key) for key, score in self.scores(text).items() if score >= self.min_score
        ]
        if not candidates:
            return None
        return min(candidates)[1]

    def mutation_accuracy(self, seed: int = 0) -> float:
        """
        Fraction of keys recovered after deleting one random character.

        A cheap health check of the index over real data; deterministic for a
        given seed. Keys shorter than two characters are skipped.
        """
        rng = random.Random(seed)
        tried = recovered = 0
        for key in self._keys:
            if len(key) < 2:
                continue
            cut = rng.randrange(len(key))
            tried += 1
            if self.suggest(key[:cut] + key[cut + 1 :]) == key:
                recovered += 1
        if tried == 0:
            return 1.0
        return recovered / tried

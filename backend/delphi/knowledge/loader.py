"""
Load a KnowledgeSnapshot from a directory of YAML data files.

Layout (one top-level key per file):

    weapons.yaml           weapons:      {name: {...}}
    armor.yaml             armors:       {name: {...}}
    monsters.yaml          monsters:     {name: {...}}
    tools.yaml             tools:        {name: {...}}
    wands.yaml             wands:        {name: {...}}
    rings.yaml             rings:        {name: {...}}
    properties.yaml        properties:   {name: {...}}
    comestibles.yaml       comestibles:  {name: {...}}
    potions.yaml           potions:      {name: {...}}
    artifacts.yaml         artifacts:    {name: {...}}
    appearances.yaml       appearances:  {alternate: canonical}
    allowed-channels.yaml  channels:     [identity, ...]

Every failure - a missing or unreadable file, invalid YAML, a record that
does not fit its schema - is raised as ConfigurationError. Whether that is
fatal is the caller's decision.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from ..errors import ConfigurationError
from .aliases import AliasIndex
from .fuzzy import DEFAULT_FRAGMENT_SIZES, DEFAULT_MIN_SCORE
from .models import Category
from .snapshot import AccessPolicy, KnowledgeSnapshot
from .store import EntityStore

logger = logging.getLogger(__name__)

# Category -> (file name, top-level key)
CATEGORY_FILES: dict[Category, tuple[str, str]] = {
    Category.WEAPON: ("weapons.yaml", "weapons"),
    Category.ARMOR: ("armor.yaml", "armors"),
    Category.MONSTER: ("monsters.yaml", "monsters"),
    Category.TOOL: ("tools.yaml", "tools"),
    Category.WAND: ("wands.yaml", "wands"),
    Category.RING: ("rings.yaml", "rings"),
    Category.PROPERTY: ("properties.yaml", "properties"),
    Category.COMESTIBLE: ("comestibles.yaml", "comestibles"),
    Category.POTION: ("potions.yaml", "potions"),
    Category.ARTIFACT: ("artifacts.yaml", "artifacts"),
}
APPEARANCES_FILE = ("appearances.yaml", "appearances")
ALLOWED_CHANNELS_FILE = ("allowed-channels.yaml", "channels")


def read_section(path: Path, key: str) -> Any:
    """
    Parse a YAML file and return the value under its top-level key.

    An empty file or a missing key yields None (an empty section).

    Raises:
        ConfigurationError: If the file cannot be read or parsed, or its top
            level is not a mapping
    """
    try:
        with open(path, encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"cannot read data file ({e.strerror or e})", path.name) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid YAML: {e}", path.name) from e

    if document is None:
        return None
    if not isinstance(document, dict):
        raise ConfigurationError(
            f"top level must be a mapping with a {key!r} key, got {type(document).__name__}",
            path.name,
        )
    return document.get(key)


def load_store(data_dir: Path, category: Category) -> EntityStore:
    file_name, key = CATEGORY_FILES[category]
    raw = read_section(data_dir / file_name, key)
    return EntityStore.from_raw(category, raw, source=file_name)


def load_aliases(data_dir: Path) -> AliasIndex:
    file_name, key = APPEARANCES_FILE
    return AliasIndex.from_raw(read_section(data_dir / file_name, key), source=file_name)


def load_access_policy(data_dir: Path) -> AccessPolicy:
    file_name, key = ALLOWED_CHANNELS_FILE
    raw = read_section(data_dir / file_name, key)
    if raw is None:
        return AccessPolicy()
    if not isinstance(raw, list) or not all(isinstance(name, str) for name in raw):
        raise ConfigurationError("channels must be a list of names", file_name)
    return AccessPolicy.from_names(raw)


def load_snapshot(
    data_dir: str | Path,
    *,
    version: int = 0,
    fragment_sizes=DEFAULT_FRAGMENT_SIZES,
    min_score: float = DEFAULT_MIN_SCORE,
) -> KnowledgeSnapshot:
    """
    Read every data file and build a validated snapshot.

    Blocking; run it off the event loop when the bot is live.

    Args:
        data_dir: Directory holding the YAML files
        version: Version number stamped on the snapshot
        fragment_sizes: Fragment lengths for the fuzzy index
        min_score: Minimum fuzzy score for a suggestion

    Raises:
        ConfigurationError: On any missing or malformed data
    """
    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        raise ConfigurationError(f"data directory {data_dir} does not exist")

    stores = {category: load_store(data_dir, category) for category in CATEGORY_FILES}
    snapshot = KnowledgeSnapshot.build(
        stores,
        load_aliases(data_dir),
        load_access_policy(data_dir),
        version=version,
        fragment_sizes=fragment_sizes,
        min_score=min_score,
    )

    logger.info(
        "Loaded knowledge v%d from %s: %s; %d aliases, %d allowed channels",
        version,
        data_dir,
        ", ".join(f"{count} {category.value}" for category, count in snapshot.counts().items()),
        len(snapshot.aliases),
        len(snapshot.access_policy.allowed),
    )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Fuzzy mutation accuracy: %.0f%%", snapshot.fuzzy.mutation_accuracy() * 100
        )
    return snapshot

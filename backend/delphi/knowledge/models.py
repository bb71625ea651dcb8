"""
Entity records - one frozen schema per knowledge category.

Each YAML data file maps canonical entity names to attribute records. The
models below validate a single record; fields missing from the YAML take
their zero value and unknown keys are ignored so that data files can carry
annotations the oracle does not render.
"""

from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    """Knowledge categories, one YAML file and one store each."""

    WEAPON = "weapon"
    ARMOR = "armor"
    MONSTER = "monster"
    TOOL = "tool"
    WAND = "wand"
    RING = "ring"
    PROPERTY = "property"
    COMESTIBLE = "comestible"
    POTION = "potion"
    ARTIFACT = "artifact"


# Lookup order when a name is queried without a category. A name present in
# two categories resolves to whichever comes first here.
CATEGORY_PRECEDENCE: tuple[Category, ...] = (
    Category.WEAPON,
    Category.ARMOR,
    Category.MONSTER,
    Category.TOOL,
    Category.WAND,
    Category.RING,
    Category.PROPERTY,
    Category.COMESTIBLE,
    Category.POTION,
    Category.ARTIFACT,
)


class EntityRecord(BaseModel):
    """Base for all category records."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    category: ClassVar[Category]


class Weapon(EntityRecord):
    category: ClassVar[Category] = Category.WEAPON

    skill: str = ""
    cost: int = 0
    weight: int = 0
    damage_small: str = Field(default="", alias="damage-small")
    damage_large: str = Field(default="", alias="damage-large")
    material: str = ""


class Armor(EntityRecord):
    category: ClassVar[Category] = Category.ARMOR

    # Stored under "skill" in armor.yaml; it names the armor slot.
    type: str = Field(default="", alias="skill")
    cost: int = 0
    weight: int = 0
    ac: int = 0
    material: str = ""
    effect: str = ""
    mc: int = 0


class Monster(EntityRecord):
    category: ClassVar[Category] = Category.MONSTER

    difficulty: int = 0
    attacks: str = ""
    speed: int = 0
    ac: int = 0
    mr: int = 0
    weight: int = 0
    alignment: str = ""
    genocidable: bool = False
    nutritional_value: int = 0
    size: str = ""
    resistances: str = ""
    resistances_conveyed: str = ""
    corpse_safe: bool = False
    elbereth: bool = False
    extra: str = ""


class Tool(EntityRecord):
    category: ClassVar[Category] = Category.TOOL

    cost: int = 0
    weight: int = 0
    use: str = ""
    magic: bool = False


class Wand(EntityRecord):
    category: ClassVar[Category] = Category.WAND

    cost: int = 0
    weight: int = 0
    type: str = ""
    starting_charges: str = ""
    effect: str = ""
    broken: str = ""


class Ring(EntityRecord):
    category: ClassVar[Category] = Category.RING

    cost: int = 0
    extrinsic_granted: str = ""
    notes: str = ""


class Property(EntityRecord):
    category: ClassVar[Category] = Category.PROPERTY

    effect: str = ""
    sources: tuple[str, ...] = ()


class Comestible(EntityRecord):
    category: ClassVar[Category] = Category.COMESTIBLE

    cost: int = 0
    weight: int = 0
    nutritional_value: int = 0
    time: int = 0
    conduct: str = ""
    effect: str = ""


class Potion(EntityRecord):
    category: ClassVar[Category] = Category.POTION

    cost: int = 0
    weight: int = 0
    effect: str = ""


class Artifact(EntityRecord):
    category: ClassVar[Category] = Category.ARTIFACT

    base_item: str = ""
    alignment: str = ""
    intelligent: bool = False
    use: str = ""
    carried: str = ""
    used: str = ""
    invoked: str = ""
    obtaining: str = ""


RECORD_TYPES: dict[Category, type[EntityRecord]] = {
    Category.WEAPON: Weapon,
    Category.ARMOR: Armor,
    Category.MONSTER: Monster,
    Category.TOOL: Tool,
    Category.WAND: Wand,
    Category.RING: Ring,
    Category.PROPERTY: Property,
    Category.COMESTIBLE: Comestible,
    Category.POTION: Potion,
    Category.ARTIFACT: Artifact,
}

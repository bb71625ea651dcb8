"""
Message formatting - one template per knowledge category.

Every formatter is a pure function of (name, record). Hyphenated canonical
names are shown with spaces ("long-sword" -> "long sword"); optional text
fields add a clause only when they are non-empty, and boolean flags render
through FLAG_PHRASES. Nouns take "a" or "an" from their first letters
(with_article).
"""

from collections.abc import Callable

from ..knowledge.models import (
    Armor,
    Artifact,
    Category,
    Comestible,
    EntityRecord,
    Monster,
    Potion,
    Property,
    Ring,
    Tool,
    Wand,
    Weapon,
)

# (category, flag) -> (phrase when true, phrase when false)
FLAG_PHRASES: dict[tuple[Category, str], tuple[str, str]] = {
    (Category.MONSTER, "genocidable"): ("genocidable", "not genocidable"),
    (Category.MONSTER, "corpse_safe"): ("safe", "not safe"),
    (Category.MONSTER, "elbereth"): ("respects", "does not respect"),
    (Category.TOOL, "magic"): ("is magical", "is not magical"),
    (Category.ARTIFACT, "intelligent"): (" and intelligent", ""),
}

CONDUCT_PHRASES: dict[str, str] = {
    "vegan": ", is vegan,",
    "vegetarian": ", is vegetarian,",
}

VOWELS = "aeiou"
# Vowel-initial words read with "a"
CONSONANT_SOUNDING = ("uni", "use", "one", "eu")


def display_name(name: str) -> str:
    return name.replace("-", " ")


def with_article(noun: str, capital: bool = False) -> str:
    """Prefix "a" or "an" by how the noun starts ("an elven dagger", "a unicorn horn")."""
    lowered = noun.lower()
    article = "a"
    if lowered[:1] in VOWELS and not lowered.startswith(CONSONANT_SOUNDING):
        article = "an"
    if capital:
        article = article.capitalize()
    return f"{article} {noun}"


def title_case(text: str) -> str:
    """Upper-case the first letter of every word, leaving the rest alone."""
    return " ".join(word[:1].upper() + word[1:] for word in text.split(" "))


def flag_phrase(record: EntityRecord, flag: str) -> str:
    on, off = FLAG_PHRASES[(record.category, flag)]
    return on if getattr(record, flag) else off


def _join(*parts: str) -> str:
    """Join sentence parts with single spaces, dropping empty ones."""
    return " ".join(part.strip() for part in parts if part and part.strip())


def _subject(name: str) -> str:
    return with_article(display_name(name), capital=True)


def _sentence(text: str) -> str:
    text = text.strip()
    if not text or text[-1] in ".!?":
        return text
    return text + "."


# ---------- Per-category templates ----------


def format_weapon(name: str, weapon: Weapon) -> str:
    return (
        f"{_subject(name)} does {weapon.damage_small}/{weapon.damage_large} damage. "
        f"It is made of {weapon.material}, weighs {weapon.weight}, and is valued at "
        f"{weapon.cost}zm. Works your skill with {weapon.skill}."
    )


def format_armor(name: str, armor: Armor) -> str:
    return _join(
        f"{_subject(name)} has AC {armor.ac}, MC {armor.mc}, weighs {armor.weight}, "
        f"costs {armor.cost}zm and is made of {armor.material}.",
        f"It is worn as {armor.type}." if armor.type else "",
        armor.effect,
    )


def format_monster(name: str, monster: Monster) -> str:
    resistances = ""
    if monster.resistances:
        resistances = f"It is resistant to {monster.resistances}."
    conveyed = ""
    if monster.resistances_conveyed:
        conveyed = f"It might convey resistance to {monster.resistances_conveyed}."

    return _join(
        f"{_subject(name)} has difficulty {monster.difficulty}.",
        f"Its attacks are {monster.attacks}.",
        f"It has speed {monster.speed}, {monster.ac} AC, {monster.mr} MR, weighs "
        f"{monster.weight}, has nutritional value {monster.nutritional_value} and "
        f"{monster.alignment} alignment.",
        f"It is {with_article(monster.size)} creature.",
        f"It is {flag_phrase(monster, 'genocidable')}.",
        resistances,
        conveyed,
        f"Its corpse is {flag_phrase(monster, 'corpse_safe')} to eat.",
        f"It {flag_phrase(monster, 'elbereth')} Elbereth.",
        monster.extra,
    )


def format_tool(name: str, tool: Tool) -> str:
    use = f"It {tool.use}." if tool.use else ""
    return _join(
        f"{_subject(name)} costs {tool.cost}zm, weighs {tool.weight} and "
        f"{flag_phrase(tool, 'magic')}.",
        use,
    )


def format_wand(name: str, wand: Wand) -> str:
    return _join(
        f"{_subject(name)} costs {wand.cost}zm, weighs {wand.weight} and has "
        f"{wand.starting_charges} starting charges.",
        f"Its pattern is {wand.type}.",
        wand.effect,
        wand.broken,
    )


def format_ring(name: str, ring: Ring) -> str:
    return _join(
        f"{_subject(name)} costs {ring.cost}zm and grants {ring.extrinsic_granted}.",
        _sentence(ring.notes),
    )


def format_property(name: str, prop: Property) -> str:
    sources = ""
    if prop.sources:
        sources = f"Notable sources include: {'; '.join(prop.sources)}."
    return _join(f"{title_case(display_name(name))} {prop.effect}.", sources)


def format_comestible(name: str, food: Comestible) -> str:
    conduct = CONDUCT_PHRASES.get(food.conduct, "")
    return _join(
        f"{_subject(name)} costs {food.cost}zm, weighs {food.weight}, takes "
        f"{food.time} time to eat{conduct} and grants {food.nutritional_value} points "
        "of nutrition.",
        food.effect,
    )


def format_potion(name: str, potion: Potion) -> str:
    return _join(
        f"A potion of {display_name(name)} costs {potion.cost}zm and weighs {potion.weight}.",
        potion.effect,
    )


def format_artifact(name: str, artifact: Artifact) -> str:
    carried = used = invoked = ""
    if artifact.carried:
        carried = f"While carried it bestows {artifact.carried}."
    if artifact.used:
        used = f"While {artifact.use or 'in use'} it bestows {artifact.used}."
    elif artifact.use:
        used = f"It is meant to be {artifact.use}."
    if artifact.invoked:
        invoked = f"When invoked it bestows {artifact.invoked}."

    return _join(
        f"{title_case(display_name(name))} is {with_article(artifact.alignment)}"
        f"{flag_phrase(artifact, 'intelligent')} artifact whose base item is "
        f"{with_article(display_name(artifact.base_item))}.",
        carried,
        used,
        invoked,
        artifact.obtaining,
    )


FORMATTERS: dict[Category, Callable[[str, EntityRecord], str]] = {
    Category.WEAPON: format_weapon,
    Category.ARMOR: format_armor,
    Category.MONSTER: format_monster,
    Category.TOOL: format_tool,
    Category.WAND: format_wand,
    Category.RING: format_ring,
    Category.PROPERTY: format_property,
    Category.COMESTIBLE: format_comestible,
    Category.POTION: format_potion,
    Category.ARTIFACT: format_artifact,
}


def format_record(name: str, record: EntityRecord) -> str:
    """Render a record with its category's template."""
    return FORMATTERS[record.category](name, record)

"""
Unit tests for reply formatting.

One template per category; optional clauses appear only when their field
is non-empty and boolean flags render through FLAG_PHRASES.
"""

import pytest

from delphi.engine.formatter import (
    FLAG_PHRASES,
    FORMATTERS,
    display_name,
    format_record,
    title_case,
    with_article,
)
from delphi.knowledge.models import (
    RECORD_TYPES,
    Armor,
    Artifact,
    Category,
    Comestible,
    Monster,
    Potion,
    Property,
    Ring,
    Tool,
    Wand,
    Weapon,
)
from tests.fixtures.knowledge_samples import LONG_SWORD, sample_data


def sample(file_name: str, key: str, name: str) -> dict:
    return sample_data()[file_name][key][name]


# ============================================================================
# Helpers
# ============================================================================


@pytest.mark.unit
class TestHelpers:
    def test_display_name(self):
        assert display_name("long-sword") == "long sword"
        assert display_name("egg") == "egg"

    def test_title_case_keeps_inner_letters(self):
        assert title_case("the orb of fate") == "The Orb Of Fate"
        assert title_case("mjollnir") == "Mjollnir"

    def test_every_formatter_registered(self):
        assert set(FORMATTERS) == set(Category)

    def test_flag_phrases_name_real_fields(self):
        models = {category: RECORD_TYPES[category] for category, _ in FLAG_PHRASES}
        for category, flag in FLAG_PHRASES:
            assert flag in models[category].model_fields

    @pytest.mark.parametrize(
        "noun,expected",
        [
            ("elven dagger", "an elven dagger"),
            ("orcish helm", "an orcish helm"),
            ("long sword", "a long sword"),
            ("unicorn horn", "a unicorn horn"),
            ("Excalibur", "an Excalibur"),
        ],
    )
    def test_with_article(self, noun, expected):
        assert with_article(noun) == expected

    def test_with_article_capital(self):
        assert with_article("egg", capital=True) == "An egg"
        assert with_article("dagger", capital=True) == "A dagger"


# ============================================================================
# Templates
# ============================================================================


@pytest.mark.unit
class TestWeapon:
    def test_long_sword(self):
        reply = format_record("long-sword", Weapon.model_validate(LONG_SWORD))
        assert reply == (
            "A long sword does 1d8/1d12 damage. It is made of iron, weighs 30, "
            "and is valued at 10zm. Works your skill with long-sword."
        )


@pytest.mark.unit
class TestArmor:
    def test_with_effect(self):
        armor = Armor.model_validate(sample("armor.yaml", "armors", "elven-mithril-coat"))
        assert format_record("elven-mithril-coat", armor) == (
            "An elven mithril coat has AC 5, MC 2, weighs 150, costs 240zm and is made "
            "of mithril. It is worn as body armor. It never rusts."
        )

    def test_without_effect(self):
        reply = format_record("leather-armor", Armor(ac=2, material="leather"))
        assert reply.endswith("is made of leather.")


@pytest.mark.unit
class TestMonster:
    def test_floating_eye(self):
        monster = Monster.model_validate(sample("monsters.yaml", "monsters", "floating-eye"))
        reply = format_record("floating-eye", monster)

        assert reply.startswith("A floating eye has difficulty 3. Its attacks are passive paralysis.")
        assert "It has speed 1, 9 AC, 10 MR, weighs 10" in reply
        assert "It is a small creature. It is genocidable." in reply
        assert "It might convey resistance to telepathy." in reply
        assert "Its corpse is safe to eat. It respects Elbereth." in reply
        assert reply.endswith("Do not melee it.")
        assert "resistant to" not in reply

    def test_negative_flags(self):
        monster = Monster.model_validate(sample("monsters.yaml", "monsters", "minotaur"))
        reply = format_record("minotaur", monster)

        assert "It is not genocidable." in reply
        assert "It does not respect Elbereth." in reply
        assert reply.endswith("It does not respect Elbereth.")

    def test_resistances_clause(self):
        reply = format_record("red-dragon", Monster(resistances="fire"))
        assert "It is resistant to fire." in reply

    def test_no_double_spaces(self):
        newt = Monster(attacks="1d3 bite", alignment="neutral", size="tiny")
        assert "  " not in format_record("newt", newt)


@pytest.mark.unit
class TestTool:
    def test_magical(self):
        tool = Tool.model_validate(sample("tools.yaml", "tools", "magic-lamp"))
        assert format_record("magic-lamp", tool) == (
            "A magic lamp costs 500zm, weighs 20 and is magical. "
            "It can be rubbed to release a djinni."
        )

    def test_not_magical(self):
        tool = Tool.model_validate(sample("tools.yaml", "tools", "pick-axe"))
        assert "and is not magical." in format_record("pick-axe", tool)


@pytest.mark.unit
class TestWand:
    def test_wishing(self):
        wand = Wand.model_validate(sample("wands.yaml", "wands", "wand-of-wishing"))
        assert format_record("wand-of-wishing", wand) == (
            "A wand of wishing costs 500zm, weighs 7 and has 1-3 starting charges. "
            "Its pattern is nodir. Grants a wish per charge. Breaking it wastes the wishes."
        )


@pytest.mark.unit
class TestRing:
    def test_notes_get_a_full_stop(self):
        ring = Ring.model_validate(sample("rings.yaml", "rings", "ring-of-free-action"))
        assert format_record("ring-of-free-action", ring) == (
            "A ring of free action costs 200zm and grants free action. Prevents paralysis."
        )

    def test_without_notes(self):
        reply = format_record("ring-of-hunger", Ring(cost=100, extrinsic_granted="hunger"))
        assert reply == "A ring of hunger costs 100zm and grants hunger."


@pytest.mark.unit
class TestProperty:
    def test_sources_are_listed(self):
        prop = Property.model_validate(sample("properties.yaml", "properties", "telepathy"))
        assert format_record("telepathy", prop) == (
            "Telepathy lets you sense minds while blind. "
            "Notable sources include: floating eye corpse; helm of telepathy."
        )

    def test_no_sources(self):
        reply = format_record("fast", Property(effect="makes you quicker"))
        assert reply == "Fast makes you quicker."


@pytest.mark.unit
class TestComestible:
    def test_vegan(self):
        food = Comestible.model_validate(sample("comestibles.yaml", "comestibles", "food-ration"))
        assert format_record("food-ration", food) == (
            "A food ration costs 45zm, weighs 20, takes 5 time to eat, is vegan, and "
            "grants 800 points of nutrition. A reliable staple."
        )

    def test_vegetarian(self):
        food = Comestible.model_validate(sample("comestibles.yaml", "comestibles", "egg"))
        assert "takes 1 time to eat, is vegetarian, and grants 80 points" in format_record(
            "egg", food
        )

    def test_no_conduct(self):
        reply = format_record("tripe-ration", Comestible(time=3, conduct="none"))
        assert "takes 3 time to eat and grants" in reply


@pytest.mark.unit
class TestPotion:
    def test_gain_level(self):
        potion = Potion.model_validate(sample("potions.yaml", "potions", "gain-level"))
        assert format_record("gain-level", potion) == (
            "A potion of gain level costs 300zm and weighs 20. Raises your experience level."
        )


@pytest.mark.unit
class TestArtifact:
    def test_intelligent_artifact(self):
        artifact = Artifact.model_validate(
            sample("artifacts.yaml", "artifacts", "the-orb-of-fate")
        )
        assert format_record("the-orb-of-fate", artifact) == (
            "The Orb Of Fate is a neutral and intelligent artifact whose base item is a "
            "crystal ball. While carried it bestows half physical damage. When invoked it "
            "bestows level teleportation. Valkyrie quest artifact."
        )

    def test_wielded_artifact(self):
        artifact = Artifact.model_validate(sample("artifacts.yaml", "artifacts", "magicbane"))
        assert format_record("magicbane", artifact) == (
            "Magicbane is a neutral artifact whose base item is an athame. "
            "While wielded it bestows magic resistance."
        )

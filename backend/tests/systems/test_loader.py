"""
Systems tests for loading knowledge from a YAML data directory.
"""

import logging
from pathlib import Path

import pytest

from delphi.config import BUNDLED_DATA_DIR
from delphi.errors import ConfigurationError
from delphi.knowledge.loader import CATEGORY_FILES, load_snapshot, read_section
from delphi.knowledge.models import Category, Weapon
from tests.fixtures.knowledge_samples import sample_data, write_data_dir


@pytest.mark.systems
class TestLoadSnapshot:
    def test_loads_every_file(self, data_dir: Path):
        snapshot = load_snapshot(data_dir, version=3)

        assert snapshot.version == 3
        assert snapshot.counts()[Category.WEAPON] == 3
        assert snapshot.counts()[Category.ARTIFACT] == 2
        assert isinstance(snapshot.lookup(Category.WEAPON, "long-sword"), Weapon)
        assert snapshot.resolve_alias("excalibur") == "long-sword"
        assert snapshot.access_policy.allows("foo")
        assert not snapshot.access_policy.allows("mallory")

    def test_fuzzy_index_covers_all_categories(self, data_dir: Path):
        snapshot = load_snapshot(data_dir)
        assert "long-sword" in snapshot.fuzzy.keys
        assert "telepathy" in snapshot.fuzzy.keys
        assert "excalibur" not in snapshot.fuzzy.keys

    def test_min_score_is_passed_through(self, data_dir: Path):
        snapshot = load_snapshot(data_dir, min_score=0.9)
        assert snapshot.fuzzy.min_score == 0.9

    def test_logs_summary(self, data_dir: Path, caplog):
        with caplog.at_level(logging.INFO, logger="delphi.knowledge.loader"):
            load_snapshot(data_dir)
        assert "3 weapon" in caplog.text

    def test_bundled_data_is_valid(self):
        snapshot = load_snapshot(BUNDLED_DATA_DIR)
        assert all(count > 0 for count in snapshot.counts().values())
        assert snapshot.find("long-sword") is not None


@pytest.mark.systems
class TestLoadFailures:
    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(ConfigurationError, match="does not exist"):
            load_snapshot(tmp_path / "nowhere")

    def test_missing_file(self, data_dir: Path):
        (data_dir / "potions.yaml").unlink()
        with pytest.raises(ConfigurationError, match="potions.yaml"):
            load_snapshot(data_dir)

    def test_invalid_yaml(self, data_dir: Path):
        (data_dir / "weapons.yaml").write_text("weapons: {long-sword: [", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="weapons.yaml: invalid YAML"):
            load_snapshot(data_dir)

    def test_top_level_must_be_mapping(self, data_dir: Path):
        (data_dir / "rings.yaml").write_text("- ring-of-free-action\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="top level must be a mapping"):
            load_snapshot(data_dir)

    def test_malformed_record(self, tmp_path: Path):
        data = sample_data()
        data["monsters.yaml"]["monsters"]["minotaur"]["speed"] = "fast"
        write_data_dir(tmp_path, data)

        with pytest.raises(ConfigurationError, match="monsters.yaml: monster 'minotaur'"):
            load_snapshot(tmp_path)

    def test_channels_must_be_a_list(self, tmp_path: Path):
        data = sample_data()
        data["allowed-channels.yaml"] = {"channels": "foo"}
        write_data_dir(tmp_path, data)

        with pytest.raises(ConfigurationError, match="allowed-channels.yaml"):
            load_snapshot(tmp_path)

    def test_chained_alias(self, tmp_path: Path):
        data = sample_data()
        data["appearances.yaml"]["appearances"]["holy-sword"] = "excalibur"
        write_data_dir(tmp_path, data)

        with pytest.raises(ConfigurationError, match="'holy-sword' points at another alias"):
            load_snapshot(tmp_path)


@pytest.mark.systems
class TestReadSection:
    def test_empty_file_is_empty_section(self, tmp_path: Path):
        path = tmp_path / "tools.yaml"
        path.write_text("", encoding="utf-8")
        assert read_section(path, "tools") is None

    def test_missing_key_is_empty_section(self, tmp_path: Path):
        path = tmp_path / "tools.yaml"
        path.write_text("gadgets: {}\n", encoding="utf-8")
        assert read_section(path, "tools") is None

    def test_empty_category_file_loads(self, tmp_path: Path):
        data = sample_data()
        data["tools.yaml"] = {"tools": None}
        write_data_dir(tmp_path, data)

        assert load_snapshot(tmp_path).counts()[Category.TOOL] == 0

    def test_category_files_are_unique(self):
        file_names = [file_name for file_name, _ in CATEGORY_FILES.values()]
        assert len(file_names) == len(set(file_names)) == len(Category)

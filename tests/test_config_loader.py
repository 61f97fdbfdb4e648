"""Tests for tolerant configuration loading."""

import pytest

from asvexport.config_loader import (
    load_json_config,
    load_pack_config,
    merge_fields,
    parse_config,
)
from asvexport.domain.enums import BatchTarget
from asvexport.domain.models import JsonExportConfig, PackExportConfig


class TestPackConfig:
    def test_missing_file_gives_defaults(self, base_dir, tmp_path):
        config = load_pack_config(tmp_path / "missing.json", base_dir)
        assert config == PackExportConfig.with_defaults(base_dir)

    def test_documented_defaults(self, base_dir):
        config = load_pack_config(None, base_dir)
        assert config.map_filename == ""
        assert config.cluster_folder == ""
        assert config.export_filename == str(base_dir / "Export" / "ASV_ContentPack.asv")
        assert config.tribe_id == 0
        assert config.player_id == 0
        assert (config.filter_lat, config.filter_lon, config.filter_rad) == (50, 50, 250)
        assert all([
            config.pack_structure_locations, config.pack_structure_content, config.pack_dropped_items,
            config.pack_tribes_players, config.pack_tamed, config.pack_wild, config.pack_player_structures,
        ])

    def test_single_key_overrides_only_itself(self, base_dir, write_config):
        config = load_pack_config(write_config({"tribeId": 5}), base_dir)
        assert config.tribe_id == 5
        assert config == PackExportConfig.with_defaults(base_dir).model_copy(update={"tribe_id": 5})

    def test_invalid_json_gives_defaults(self, base_dir, write_config):
        config = load_pack_config(write_config('{"tribeId": 5,,'), base_dir)
        assert config == PackExportConfig.with_defaults(base_dir)

    def test_non_object_root_gives_defaults(self, base_dir, write_config):
        config = load_pack_config(write_config("[1, 2, 3]"), base_dir)
        assert config == PackExportConfig.with_defaults(base_dir)

    def test_bad_value_keeps_default_for_that_key_only(self, base_dir, write_config):
        config = load_pack_config(write_config({
            "tribeId": "not a number",
            "playerId": 7,
            "packWild": "sometimes",
            "packTamed": False,
            "mapFilename": 42,
            "filterRad": 80.5,
        }), base_dir)
        assert config.tribe_id == 0
        assert config.player_id == 7
        assert config.pack_wild is True
        assert config.pack_tamed is False
        assert config.map_filename == ""
        assert config.filter_rad == 80.5

    def test_unknown_keys_ignored(self, base_dir, write_config):
        config = load_pack_config(write_config({"colour": "blue", "clusterFolder": "/cluster"}), base_dir)
        assert config.cluster_folder == "/cluster"

    def test_byte_order_mark_is_accepted(self, base_dir, tmp_path):
        path = tmp_path / "bom.json"
        path.write_bytes(b'\xef\xbb\xbf{"playerId": 3}')
        assert load_pack_config(path, base_dir).player_id == 3

    def test_yaml_file(self, base_dir, write_config):
        path = write_config("tribeId: 9\npackWild: false\n", name="pack.yml")
        config = load_pack_config(path, base_dir)
        assert config.tribe_id == 9
        assert config.pack_wild is False


class TestJsonConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_json_config(tmp_path / "missing.json") == JsonExportConfig()

    def test_targets_disabled_by_default(self):
        config = JsonExportConfig()
        assert not any(config.descriptor(target).enabled for target in BatchTarget)
        assert config.export_wild.max_level == 999

    def test_nested_descriptor(self, write_config):
        config = load_json_config(write_config({
            "mapFilename": "/saves/a.ark",
            "exportTribes": {"jsonFilename": "/out/tribes.json", "addTames": False},
            "exportWild": {"jsonFilename": "/out/wild.json", "className": "Rex", "minLevel": 100},
        }))
        assert config.map_filename == "/saves/a.ark"
        assert config.export_tribes.json_filename == "/out/tribes.json"
        assert config.export_tribes.add_tames is False
        assert config.export_tribes.add_players is True
        assert config.export_wild.class_name == "Rex"
        assert config.export_wild.min_level == 100
        assert config.export_wild.max_level == 999
        assert not config.export_players.enabled

    def test_nested_descriptor_wrong_type_is_ignored(self, write_config):
        config = load_json_config(write_config({"exportTamed": "tamed.json", "tribeId": 4}))
        assert config.export_tamed == JsonExportConfig().export_tamed
        assert config.tribe_id == 4

    def test_pack_options_follow_tribe_descriptor(self, write_config):
        config = load_json_config(write_config({
            "structureContent": False,
            "exportTribes": {"addStructures": False, "addPlayers": False},
        }))
        options = config.to_options()
        assert options.structure_content is False
        assert options.player_structures is False
        assert options.tribes_players is False
        assert options.tamed is True
        assert options.dropped_items is False


class TestParseConfig:
    def test_returns_not_ok_for_garbage(self):
        config, ok = parse_config(JsonExportConfig, "not json")
        assert not ok
        assert config == JsonExportConfig()

    def test_returns_ok_for_object(self):
        config, ok = parse_config(JsonExportConfig, '{"filterLat": 12}')
        assert ok
        assert config.filter_lat == 12

    @pytest.mark.parametrize("value", [None, [], "x", 1.5])
    def test_merge_ignores_invalid_int(self, value):
        assert merge_fields(PackExportConfig, {"tribeId": value}).tribe_id == 0

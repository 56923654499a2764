"""Tests for antrails.simulation.config — parameters and YAML loading."""

from __future__ import annotations

import dataclasses
import math
from pathlib import Path
from typing import Any

import pytest
import yaml

from antrails.simulation.config import (
    ConfigError,
    MapParams,
    SimulationConfig,
    SimulationParameters,
    TrailParams,
)

DEFAULT_YAML = Path(__file__).resolve().parent.parent / "config" / "default.yaml"


def _default_data() -> dict[str, Any]:
    with DEFAULT_YAML.open() as f:
        return yaml.safe_load(f)


class TestSimulationParameters:
    """Tests for parameter defaults and validation."""

    def test_defaults_are_valid(self) -> None:
        params = SimulationParameters()
        assert params.validate() is params

    def test_map_key_has_five_entries(self) -> None:
        key = MapParams(octaves=3, threshold=0.2).key
        assert key == (3, 0.01, 2.0, 0.5, 0.2)

    @pytest.mark.parametrize("period", [0.0, -1.0])
    def test_non_positive_spawn_period_rejected(self, period: float) -> None:
        params = SimulationParameters(trail=TrailParams(spawn_period=period))
        with pytest.raises(ConfigError, match="spawn_period"):
            params.validate()

    @pytest.mark.parametrize("period", [math.inf, -math.inf, math.nan])
    def test_non_finite_spawn_period_rejected(self, period: float) -> None:
        params = SimulationParameters(trail=TrailParams(spawn_period=period))
        with pytest.raises(ConfigError, match=r"trail\.spawn_period"):
            params.validate()

    @pytest.mark.parametrize(
        ("section", "name"),
        [("sensor", "radius"), ("sensor", "distance"), ("ant", "speed")],
    )
    def test_nan_rejected(self, section: str, name: str) -> None:
        params = SimulationParameters()
        group = dataclasses.replace(getattr(params, section), **{name: math.nan})
        params = dataclasses.replace(params, **{section: group})
        with pytest.raises(ConfigError, match=rf"{section}\.{name} must be finite"):
            params.validate()

    def test_decay_rate_above_one_rejected(self) -> None:
        params = SimulationParameters(trail=TrailParams(decay_rate=1.5))
        with pytest.raises(ConfigError, match="decay_rate"):
            params.validate()

    def test_initial_strength_below_cull_threshold_rejected(self) -> None:
        params = SimulationParameters(trail=TrailParams(initial_strength=0.005))
        with pytest.raises(ConfigError, match="initial_strength"):
            params.validate()

    def test_zero_octaves_is_valid(self) -> None:
        params = SimulationParameters(map=MapParams(octaves=0))
        params.validate()

    def test_negative_octaves_rejected(self) -> None:
        params = SimulationParameters(map=MapParams(octaves=-1))
        with pytest.raises(ConfigError, match="octaves"):
            params.validate()

    def test_problems_are_collected(self) -> None:
        params = SimulationParameters(
            trail=TrailParams(spawn_period=0.0, decay_rate=0.0),
        )
        with pytest.raises(ConfigError) as exc_info:
            params.validate()
        assert "spawn_period" in str(exc_info.value)
        assert "decay_rate" in str(exc_info.value)

    def test_is_immutable(self) -> None:
        params = SimulationParameters()
        with pytest.raises(dataclasses.FrozenInstanceError):
            params.ant = params.ant  # type: ignore[misc]


class TestFromDict:
    """Tests for strict mapping-based loading."""

    def test_default_yaml_roundtrips_to_defaults(self) -> None:
        cfg = SimulationConfig.from_dict(_default_data())
        assert cfg.seed == 42
        assert cfg.params.map.octaves == 4
        assert isinstance(cfg.params.map.octaves, int)
        assert cfg.params.trail.decay_rate == 0.995

    def test_missing_key_names_it(self) -> None:
        data = _default_data()
        del data["trail"]["decay_rate"]
        with pytest.raises(ConfigError, match=r"trail\.decay_rate"):
            SimulationConfig.from_dict(data)

    def test_missing_keys_across_sections_all_named(self) -> None:
        data = _default_data()
        del data["trail"]["decay_rate"]
        del data["sensor"]["radius"]
        with pytest.raises(ConfigError) as exc_info:
            SimulationConfig.from_dict(data)
        assert "trail.decay_rate" in str(exc_info.value)
        assert "sensor.radius" in str(exc_info.value)

    def test_missing_seed_does_not_hide_other_keys(self) -> None:
        data = _default_data()
        del data["seed"]
        del data["arena"]["ant_size"]
        del data["colony"]
        with pytest.raises(ConfigError) as exc_info:
            SimulationConfig.from_dict(data)
        message = str(exc_info.value)
        assert "seed" in message
        assert "arena.ant_size" in message
        assert "colony.ants" in message

    def test_missing_section(self) -> None:
        data = _default_data()
        del data["sensor"]
        with pytest.raises(ConfigError, match="sensor"):
            SimulationConfig.from_dict(data)

    def test_missing_seed(self) -> None:
        data = _default_data()
        del data["seed"]
        with pytest.raises(ConfigError, match="seed"):
            SimulationConfig.from_dict(data)

    def test_unknown_key_rejected(self) -> None:
        data = _default_data()
        data["ant"]["sped"] = 3.0
        with pytest.raises(ConfigError, match=r"ant\.sped"):
            SimulationConfig.from_dict(data)

    def test_unknown_section_rejected(self) -> None:
        data = _default_data()
        data["weather"] = {"rain": 1.0}
        with pytest.raises(ConfigError, match="weather"):
            SimulationConfig.from_dict(data)

    def test_non_numeric_value_rejected(self) -> None:
        data = _default_data()
        data["ant"]["speed"] = "fast"
        with pytest.raises(ConfigError, match=r"ant\.speed"):
            SimulationConfig.from_dict(data)

    def test_non_integer_seed_rejected(self) -> None:
        data = _default_data()
        data["seed"] = "abc"
        with pytest.raises(ConfigError, match="seed"):
            SimulationConfig.from_dict(data)

    @pytest.mark.parametrize(
        ("section", "name", "value"),
        [
            ("arena", "ant_size", 0.0),
            ("arena", "ant_size", -2.0),
            ("colony", "ants", -3),
            ("colony", "food", -1),
            ("arena", "width", math.inf),
        ],
    )
    def test_out_of_range_layout_rejected(
        self,
        section: str,
        name: str,
        value: float,
    ) -> None:
        data = _default_data()
        data[section][name] = value
        with pytest.raises(ConfigError, match=rf"{section}\.{name}"):
            SimulationConfig.from_dict(data)

    def test_infinite_spawn_period_fails_at_load(self) -> None:
        data = _default_data()
        data["trail"]["spawn_period"] = math.inf
        with pytest.raises(ConfigError, match="spawn_period"):
            SimulationConfig.from_dict(data)

    def test_zero_spawn_period_fails_at_load(self) -> None:
        data = _default_data()
        data["trail"]["spawn_period"] = 0
        with pytest.raises(ConfigError, match="spawn_period"):
            SimulationConfig.from_dict(data)

    def test_parameters_only(self) -> None:
        data = _default_data()
        params = SimulationParameters.from_dict(
            {k: data[k] for k in ("ant", "map", "trail", "sensor")},
        )
        assert params.ant.speed == 40.0


class TestFromYaml:
    """Tests for YAML file loading."""

    def test_from_yaml(self, tmp_path: Path) -> None:
        data = _default_data()
        data["seed"] = 99
        data["arena"]["width"] = 320.0
        yaml_file = tmp_path / "test.yaml"
        yaml_file.write_text(yaml.safe_dump(data))
        cfg = SimulationConfig.from_yaml(yaml_file)
        assert cfg.seed == 99
        assert cfg.arena.width == 320.0

    def test_empty_file_reports_missing_keys(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")
        with pytest.raises(ConfigError):
            SimulationConfig.from_yaml(yaml_file)

    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError, match="mapping"):
            SimulationConfig.from_yaml(yaml_file)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            SimulationConfig.from_yaml(tmp_path / "nope.yaml")

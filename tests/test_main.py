"""Smoke tests for the headless runner."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml

from antrails.__main__ import main

DEFAULT_YAML = Path(__file__).resolve().parent.parent / "config" / "default.yaml"


def test_main_runs_default_config(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="antrails"):
        assert main(["--ticks", "5", "--report-every", "5"]) == 0
    assert any("done after 5 ticks" in r.getMessage() for r in caplog.records)


def test_main_custom_config(tmp_path: Path) -> None:
    with DEFAULT_YAML.open() as f:
        data = yaml.safe_load(f)
    data["colony"]["ants"] = 3
    data["colony"]["food"] = 2
    config = tmp_path / "small.yaml"
    config.write_text(yaml.safe_dump(data))
    assert main(["--config", str(config), "--ticks", "3", "--report-every", "0"]) == 0


def test_main_rejects_incomplete_config(tmp_path: Path) -> None:
    from antrails.simulation.config import ConfigError

    config = tmp_path / "broken.yaml"
    config.write_text("seed: 1\n")
    with pytest.raises(ConfigError):
        main(["--config", str(config), "--ticks", "1"])

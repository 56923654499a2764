"""Config — load simulation parameters from YAML files.

Tunable constants live in YAML and are parsed into typed dataclasses
here.  Two layers exist:

- ``SimulationParameters``: the hot-reloadable numeric knobs read by
  ``SimulationEngine.step`` every tick (ant, map, trail, sensor).
- ``SimulationConfig``: startup-only settings (seed, arena, initial
  colony layout) plus the initial ``SimulationParameters``.

Loading from a mapping is strict: every key must be present, and the
resulting ``ConfigError`` names every missing key at once.  Unknown keys
are rejected too.  Constructing the dataclasses directly uses the
defaults below.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml


class ConfigError(ValueError):
    """Raised when configuration is missing, malformed, or out of range."""


@dataclass(frozen=True)
class AntParams:
    """Movement parameters shared by all ants.

    Attributes:
        speed: Forward speed in world units per second.
        wandering: Scale of the per-tick random heading change (radians).
    """

    speed: float = 40.0
    wandering: float = 0.1


@dataclass(frozen=True)
class MapParams:
    """Fractal-noise parameters for the obstacle map.

    Attributes:
        octaves: Number of noise layers.  Zero means no obstacles.
        frequency: Base sampling frequency (per world unit).
        lacunarity: Frequency multiplier between octaves.
        persistence: Amplitude multiplier between octaves.
        threshold: A cell is an obstacle iff noise >= threshold.
    """

    octaves: int = 4
    frequency: float = 0.01
    lacunarity: float = 2.0
    persistence: float = 0.5
    threshold: float = 0.35

    @property
    def key(self) -> tuple[int, float, float, float, float]:
        """Return the memoization key for obstacle regeneration."""
        return (
            self.octaves,
            self.frequency,
            self.lacunarity,
            self.persistence,
            self.threshold,
        )


@dataclass(frozen=True)
class TrailParams:
    """Trail marker emission and decay.

    Attributes:
        spawn_period: Seconds between two markers from the same ant.
        initial_strength: Strength of a freshly spawned marker.
        decay_rate: Per-tick strength multiplier.
    """

    spawn_period: float = 0.25
    initial_strength: float = 1.0
    decay_rate: float = 0.995


@dataclass(frozen=True)
class SensorParams:
    """Trail-sensing geometry.

    Attributes:
        angle: Angle of the side sensors from the forward axis (radians).
        distance: Distance of each sensor point from the ant.
        radius: Markers strictly closer than this to a sensor count.
        turning_coefficient: Scale applied to the sensed turning angle.
    """

    angle: float = math.pi / 4
    distance: float = 12.0
    radius: float = 6.0
    turning_coefficient: float = 0.2


@dataclass(frozen=True)
class SimulationParameters:
    """Hot-reloadable numeric parameters, grouped by concern.

    Instances are immutable; build a new one (``dataclasses.replace``)
    and hand it to ``SimulationEngine.step`` to change values between
    ticks.
    """

    ant: AntParams = field(default_factory=AntParams)
    map: MapParams = field(default_factory=MapParams)
    trail: TrailParams = field(default_factory=TrailParams)
    sensor: SensorParams = field(default_factory=SensorParams)

    def validate(self) -> SimulationParameters:
        """Check value ranges.

        Returns:
            ``self`` so calls can be chained.

        Raises:
            ConfigError: If any value is out of range or not finite.
        """
        problems: list[str] = [
            f"{name} must be finite"
            for name, value in _flatten(self)
            if not math.isfinite(value)
        ]
        if self.trail.spawn_period <= 0:
            problems.append("trail.spawn_period must be > 0")
        if not 0.01 <= self.trail.initial_strength <= 1.0:
            problems.append("trail.initial_strength must be in [0.01, 1]")
        if not 0.0 < self.trail.decay_rate <= 1.0:
            problems.append("trail.decay_rate must be in (0, 1]")
        if self.map.octaves < 0:
            problems.append("map.octaves must be >= 0")
        if self.map.lacunarity <= 0:
            problems.append("map.lacunarity must be > 0")
        if self.sensor.radius < 0:
            problems.append("sensor.radius must be >= 0")
        if self.sensor.distance < 0:
            problems.append("sensor.distance must be >= 0")
        if self.ant.speed < 0:
            problems.append("ant.speed must be >= 0")
        if problems:
            raise ConfigError("; ".join(problems))
        return self

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SimulationParameters:
        """Build parameters from a nested mapping, requiring every key.

        Args:
            data: Mapping with ``ant``, ``map``, ``trail`` and ``sensor``
                sections.

        Returns:
            A validated SimulationParameters instance.

        Raises:
            ConfigError: If a key is missing, unknown, or out of range.
        """
        _require_keys(data, _PARAM_SECTIONS)
        unknown = sorted(set(data) - set(_PARAM_SECTIONS))
        if unknown:
            msg = f"unknown parameter section(s): {', '.join(unknown)}"
            raise ConfigError(msg)
        built = {
            name: _build_section(name, section_cls, data[name])
            for name, section_cls in _PARAM_SECTIONS.items()
        }
        return cls(**built).validate()


@dataclass(frozen=True)
class ArenaConfig:
    """Arena geometry.

    Attributes:
        width: Arena width in world units.
        height: Arena height in world units.
        cell_size: Edge length of one obstacle-grid cell.
        ant_size: Edge length of an ant's collision box.
    """

    width: float = 800.0
    height: float = 600.0
    cell_size: float = 16.0
    ant_size: float = 5.0


@dataclass(frozen=True)
class ColonyConfig:
    """Initial colony layout used by the headless runner.

    Attributes:
        ants: Number of ants spawned at home.
        food: Number of food items scattered at startup.
        home_x: Home x position.
        home_y: Home y position.
    """

    ants: int = 50
    food: int = 40
    home_x: float = 400.0
    home_y: float = 300.0


@dataclass(frozen=True)
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for noise, initial headings, and wandering.
        arena: Arena geometry.
        colony: Initial colony layout.
        params: Initial hot-reloadable parameters.
    """

    seed: int = 42
    arena: ArenaConfig = field(default_factory=ArenaConfig)
    colony: ColonyConfig = field(default_factory=ColonyConfig)
    params: SimulationParameters = field(default_factory=SimulationParameters)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SimulationConfig:
        """Build a full configuration from a nested mapping.

        Args:
            data: Mapping with ``seed``, ``arena``, ``colony`` and the
                four parameter sections at the top level.

        Returns:
            A populated, validated SimulationConfig.

        Raises:
            ConfigError: If any key is missing, unknown, or invalid.
        """
        _require_keys(
            data,
            {"arena": ArenaConfig, "colony": ColonyConfig, **_PARAM_SECTIONS},
            extra=("seed",),
        )
        try:
            seed = int(data["seed"])
        except (TypeError, ValueError) as exc:
            msg = f"seed: expected an integer, got {data['seed']!r}"
            raise ConfigError(msg) from exc
        arena = _build_section("arena", ArenaConfig, data["arena"])
        colony = _build_section("colony", ColonyConfig, data["colony"])

        problems = [
            f"{name} must be finite"
            for name, value in [
                *_fields_of("arena", arena),
                *_fields_of("colony", colony),
            ]
            if not math.isfinite(value)
        ]
        if arena.cell_size <= 0:
            problems.append("arena.cell_size must be > 0")
        if arena.width <= 0 or arena.height <= 0:
            problems.append("arena.width and arena.height must be > 0")
        if arena.ant_size <= 0:
            problems.append("arena.ant_size must be > 0")
        if colony.ants < 0:
            problems.append("colony.ants must be >= 0")
        if colony.food < 0:
            problems.append("colony.food must be >= 0")
        if problems:
            raise ConfigError("; ".join(problems))

        param_data = {
            k: v for k, v in data.items() if k not in ("seed", "arena", "colony")
        }
        return cls(
            seed=seed,
            arena=arena,
            colony=colony,
            params=SimulationParameters.from_dict(param_data),
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ConfigError: If the file is not a mapping or a key is
                missing or invalid.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            msg = f"{path}: top level must be a mapping"
            raise ConfigError(msg)
        return cls.from_dict(data)


_PARAM_SECTIONS: dict[str, type] = {
    "ant": AntParams,
    "map": MapParams,
    "trail": TrailParams,
    "sensor": SensorParams,
}


def _require_keys(
    data: dict[str, Any],
    sections: dict[str, type],
    extra: tuple[str, ...] = (),
) -> None:
    """Raise one ConfigError naming every missing dotted key."""
    missing = [key for key in extra if key not in data]
    for name, section_cls in sections.items():
        section = data.get(name)
        if section is None:
            missing.extend(f"{name}.{f.name}" for f in fields(section_cls))
        elif not isinstance(section, dict):
            msg = f"configuration section {name} must be a mapping"
            raise ConfigError(msg)
        else:
            missing.extend(
                f"{name}.{f.name}" for f in fields(section_cls) if f.name not in section
            )
    if missing:
        msg = f"missing configuration key(s): {', '.join(missing)}"
        raise ConfigError(msg)


def _fields_of(name: str, section: Any) -> list[tuple[str, float]]:
    return [(f"{name}.{f.name}", getattr(section, f.name)) for f in fields(section)]


def _flatten(params: SimulationParameters) -> list[tuple[str, float]]:
    return [
        item
        for f in fields(params)
        for item in _fields_of(f.name, getattr(params, f.name))
    ]


def _build_section(name: str, section_cls: type, data: dict[str, Any]) -> Any:
    """Instantiate one dataclass section from a mapping holding every field."""
    names = [f.name for f in fields(section_cls)]
    unknown = [f"{name}.{key}" for key in data if key not in names]
    if unknown:
        msg = f"unknown configuration key(s): {', '.join(unknown)}"
        raise ConfigError(msg)

    values: dict[str, Any] = {}
    for f in fields(section_cls):
        raw = data[f.name]
        try:
            values[f.name] = int(raw) if f.type == "int" else float(raw)
        except (TypeError, ValueError) as exc:
            msg = f"{name}.{f.name}: expected a number, got {raw!r}"
            raise ConfigError(msg) from exc
    return section_cls(**values)

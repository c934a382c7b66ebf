from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

# Smallest room edge the carver will produce; leaves narrower than this cannot hold a room.
MIN_ROOM_SIZE = 3

ENV_PREFIX = "DELVE_"
SETTINGS_FILE_ENV = "DELVE_SETTINGS_FILE"

# Optional YAML sections; keys inside them are flattened onto the settings fields.
_SECTIONS = ("map", "loot", "spawn_goal")


def _as_bool(value: Any) -> bool:
    """Interpret common truthy/falsey spellings into a bool.

    Accepts: True/False, 1/0, "true"/"false", "yes"/"no", "on"/"off" (case-insensitive).
    Anything else raises ValueError so a typo never silently flips a toggle.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        v = value.strip().lower()
        if v in {"1", "true", "yes", "y", "on"}:
            return True
        if v in {"0", "false", "no", "n", "off"}:
            return False
    raise ValueError(f"not a boolean: {value!r}")


def _as_int(value: Any) -> int:
    """Whole numbers only: "12", 12 and 12.0 pass; 12.5 and True do not."""
    if isinstance(value, bool):
        raise ValueError(f"not an integer: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValueError(f"not an integer: {value!r}")
    if isinstance(value, str):
        return int(value.strip())
    raise ValueError(f"not an integer: {value!r}")


@dataclass
class GenerationSettings:
    """Inputs of one dungeon generation run.

    Values can come from (lowest to highest precedence) the dataclass defaults,
    a YAML settings file, DELVE_* environment variables and explicit overrides:

        settings = GenerationSettings.from_sources(config_path="dungeon.yaml", seed=7)
        settings.validate()
    """

    # Map / partitioning
    width: int = 40
    height: int = 40
    min_partition_size: int = 6
    max_room_size: int = 10

    # Seeding
    seed: int = 0
    use_random_seed: bool = False

    # Loot tuning
    loot_base_per_room: float = 0.2
    loot_small_room_multiplier: float = 2.0
    loot_max_per_room: int = 3
    loot_edge_padding: int = 1
    prevent_loot_overlap: bool = True

    # Spawn / goal tuning
    spawn_goal_edge_padding: int = 1
    place_goal_far_from_spawn: bool = True
    prevent_spawn_goal_on_loot: bool = True

    # ------------------------ Validation ------------------------
    def problems(self) -> List[str]:
        """Return every violated constraint (empty when the settings are usable)."""
        out: List[str] = []
        for name, caster in _CASTERS.items():
            value = getattr(self, name)
            if caster is _as_int and (isinstance(value, bool) or not isinstance(value, int)):
                out.append(f"{name} must be an integer, got {value!r}")
            elif caster is float and (isinstance(value, bool) or not isinstance(value, (int, float))):
                out.append(f"{name} must be a number, got {value!r}")
        # Range checks below assume numeric fields
        if out:
            return out

        if self.width <= 0 or self.height <= 0:
            out.append(f"map dimensions must be positive, got {self.width}x{self.height}")
        if self.min_partition_size < MIN_ROOM_SIZE:
            out.append(
                f"min_partition_size must be at least {MIN_ROOM_SIZE} (the minimum room size), "
                f"got {self.min_partition_size}"
            )
        elif self.width > 0 and self.height > 0 and self.min_partition_size > min(self.width, self.height) // 2:
            out.append(
                f"min_partition_size {self.min_partition_size} is too large for a "
                f"{self.width}x{self.height} map (max {min(self.width, self.height) // 2})"
            )
        if self.max_room_size < MIN_ROOM_SIZE:
            out.append(f"max_room_size must be at least {MIN_ROOM_SIZE}, got {self.max_room_size}")
        if self.loot_base_per_room < 0:
            out.append(f"loot_base_per_room must be non-negative, got {self.loot_base_per_room}")
        if self.loot_small_room_multiplier < 1:
            out.append(f"loot_small_room_multiplier must be >= 1, got {self.loot_small_room_multiplier}")
        if self.loot_max_per_room < 0:
            out.append(f"loot_max_per_room must be >= 0, got {self.loot_max_per_room}")
        if self.loot_edge_padding < 0:
            out.append(f"loot_edge_padding must be >= 0, got {self.loot_edge_padding}")
        if self.spawn_goal_edge_padding < 0:
            out.append(f"spawn_goal_edge_padding must be >= 0, got {self.spawn_goal_edge_padding}")
        return out

    def validate(self) -> None:
        found = self.problems()
        if found:
            for p in found:
                logger.error("Invalid generation setting: %s", p)
            raise ConfigurationError(found)

    def as_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    def replace(self, **changes: Any) -> "GenerationSettings":
        return dataclasses.replace(self, **changes)

    # ------------------------ Loading & Overrides ------------------------
    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in dataclasses.fields(cls)]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GenerationSettings":
        allowed = set(cls.field_names())
        unknown = sorted(k for k in data if k not in allowed)
        if unknown:
            logger.warning("Ignoring unknown generation settings: %s", ", ".join(unknown))
        filtered = {k: v for k, v in data.items() if k in allowed}
        return cls(**_coerce(filtered))

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        """Collect overrides from DELVE_* variables (e.g. DELVE_WIDTH, DELVE_SEED).

        DELVE_RANDOM_SEED is accepted as a shorter alias for DELVE_USE_RANDOM_SEED.
        """
        env = os.environ if env is None else env
        out: Dict[str, Any] = {}
        aliases = {"RANDOM_SEED": "use_random_seed"}
        names = {name.upper(): name for name in cls.field_names()}
        names.update(aliases)
        for suffix, field_name in names.items():
            key = ENV_PREFIX + suffix
            raw = env.get(key)
            if raw is None or raw == "":
                continue
            caster = _CASTERS[field_name]
            try:
                out[field_name] = caster(raw)
            except ValueError as exc:
                raise ConfigurationError(f"invalid value for {key}={raw!r}: {exc}") from exc
        return out

    @classmethod
    def from_yaml_file(cls, path: Path | str) -> Dict[str, Any]:
        """Read settings from a YAML file.

        Keys may sit at top level or under the ``map``, ``loot`` and
        ``spawn_goal`` sections. Returns the flattened mapping.
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"settings file not found: {path}")
        with path.open("r", encoding="utf-8") as f:
            try:
                doc = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise ConfigurationError(f"cannot parse settings file {path}: {exc}") from exc
        logger.debug("Loaded generation settings from %s", path)
        if doc is None:
            return {}
        if not isinstance(doc, dict):
            raise ConfigurationError(f"settings file {path} must contain a mapping at top level")
        flat: Dict[str, Any] = {}
        for section in _SECTIONS:
            if isinstance(doc.get(section), dict):
                flat.update(doc[section])
        for k, v in doc.items():
            if k in _SECTIONS and isinstance(v, dict):
                continue
            flat[k] = v
        return flat

    @classmethod
    def discover_config_path(cls, env: Optional[Mapping[str, str]] = None) -> Optional[Path]:
        env = os.environ if env is None else env
        env_path = env.get(SETTINGS_FILE_ENV)
        if env_path:
            return Path(env_path).expanduser().resolve()
        return None

    @classmethod
    def from_sources(
        cls,
        *,
        config_path: Optional[Path | str] = None,
        env: Optional[Mapping[str, str]] = None,
        **overrides: Any,
    ) -> "GenerationSettings":
        # Order of precedence (lowest to highest): defaults < file < env < overrides
        data: Dict[str, Any] = {}
        chosen = Path(config_path).expanduser() if config_path is not None else cls.discover_config_path(env)
        if chosen is not None:
            data.update(cls.from_yaml_file(chosen))
        data.update(cls.from_env(env))
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls.from_dict(data)


_CASTERS: Dict[str, Callable[[Any], Any]] = {
    "width": _as_int,
    "height": _as_int,
    "min_partition_size": _as_int,
    "max_room_size": _as_int,
    "seed": _as_int,
    "use_random_seed": _as_bool,
    "loot_base_per_room": float,
    "loot_small_room_multiplier": float,
    "loot_max_per_room": _as_int,
    "loot_edge_padding": _as_int,
    "prevent_loot_overlap": _as_bool,
    "spawn_goal_edge_padding": _as_int,
    "place_goal_far_from_spawn": _as_bool,
    "prevent_spawn_goal_on_loot": _as_bool,
}


def _coerce(data: Mapping[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k, v in data.items():
        try:
            out[k] = _CASTERS[k](v)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"invalid value for {k}: {v!r} ({exc})") from exc
    return out


__all__ = ["GenerationSettings", "MIN_ROOM_SIZE"]

"""
YAML → typed reference tables.

Loads the exercise→muscle-group table, volume landmarks, recovery body
areas and exercise alternatives from training_tables.yaml (bundled with
the package) and optionally merges user overrides from
~/.liftlog/training_tables.yaml.

Usage:
    from liftlog.core.config_loader import get_reference_tables
    tables = get_reference_tables()
    tables.landmarks_for("chest").mrv   # → 20

If the user override file exists but cannot be parsed, a warning is
emitted and the file is ignored.  A broken bundled file is a packaging
error and raises.
"""

from __future__ import annotations

import importlib.resources
import logging
import os
import warnings
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from .config import DEFAULT_MAV, DEFAULT_MEV, DEFAULT_MRV
from .models import VolumeLandmarks

logger = logging.getLogger(__name__)

TABLES_FILENAME = "training_tables.yaml"

# ---------------------------------------------------------------------------
# Typed tables
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ReferenceTables:
    """
    Static, load-time reference data consumed by the engine.

    ``muscle_groups`` preserves YAML order; an exercise may belong to more
    than one group (e.g. Romanian Deadlift → hamstrings and glutes).
    Exercise names match case-insensitively.
    """

    muscle_groups: dict[str, list[str]] = field(default_factory=dict)
    volume_landmarks: dict[str, VolumeLandmarks] = field(default_factory=dict)
    default_landmarks: VolumeLandmarks = field(
        default_factory=lambda: VolumeLandmarks(DEFAULT_MEV, DEFAULT_MAV, DEFAULT_MRV)
    )
    body_areas: dict[str, list[str]] = field(default_factory=dict)
    exercise_alternatives: dict[str, list[str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        index: dict[str, list[str]] = {}
        for group, exercises in self.muscle_groups.items():
            for name in exercises:
                groups = index.setdefault(name.casefold(), [])
                if group not in groups:
                    groups.append(group)
        # frozen dataclass: bypass __setattr__ for the derived index
        object.__setattr__(self, "_group_index", index)

    def groups_for(self, exercise_name: str) -> list[str]:
        """Muscle groups an exercise counts toward; [] if unmapped."""
        return list(self._group_index.get(exercise_name.casefold(), []))  # type: ignore[attr-defined]

    def primary_group(self, exercise_name: str) -> str | None:
        """First configured muscle group for an exercise, or None."""
        groups = self.groups_for(exercise_name)
        return groups[0] if groups else None

    def exercises_for(self, muscle_group: str) -> list[str]:
        return list(self.muscle_groups.get(muscle_group, []))

    def landmarks_for(self, muscle_group: str) -> VolumeLandmarks:
        """Landmarks for a group, falling back to the default set."""
        return self.volume_landmarks.get(muscle_group, self.default_landmarks)

    def alternatives_for(self, exercise_name: str) -> list[str]:
        folded = exercise_name.casefold()
        for name, options in self.exercise_alternatives.items():
            if name.casefold() == folded:
                return list(options)
        return []


def _landmarks_from_dict(group: str, d: Any) -> VolumeLandmarks:
    if not isinstance(d, dict):
        raise ValueError(f"volume_landmarks[{group!r}] must be a mapping")
    missing = {"MEV", "MAV", "MRV"} - set(d)
    if missing:
        raise ValueError(f"volume_landmarks[{group!r}] missing fields: {sorted(missing)}")
    return VolumeLandmarks(mev=int(d["MEV"]), mav=int(d["MAV"]), mrv=int(d["MRV"]))


def _string_lists(section: str, raw: Any) -> dict[str, list[str]]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"{section} must be a mapping of name → list")
    result: dict[str, list[str]] = {}
    for key, values in raw.items():
        if not isinstance(values, list):
            raise ValueError(f"{section}[{key!r}] must be a list")
        result[str(key)] = [str(v) for v in values]
    return result


def tables_from_dict(d: dict[str, Any]) -> ReferenceTables:
    """
    Convert a raw dict (from YAML) to ReferenceTables.

    Raises:
        ValueError: If a section has the wrong shape
    """
    raw_landmarks = dict(d.get("volume_landmarks") or {})
    default_raw = raw_landmarks.pop("default", None)
    default = (
        _landmarks_from_dict("default", default_raw)
        if default_raw is not None
        else VolumeLandmarks(DEFAULT_MEV, DEFAULT_MAV, DEFAULT_MRV)
    )
    return ReferenceTables(
        muscle_groups=_string_lists("muscle_groups", d.get("muscle_groups")),
        volume_landmarks={
            str(group): _landmarks_from_dict(group, raw) for group, raw in raw_landmarks.items()
        },
        default_landmarks=default,
        body_areas=_string_lists("body_areas", d.get("body_areas")),
        exercise_alternatives=_string_lists(
            "exercise_alternatives", d.get("exercise_alternatives")
        ),
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; non-mapping documents load as {}."""
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path:
    """Return the path to the bundled training_tables.yaml."""
    ref = importlib.resources.files("liftlog").joinpath(TABLES_FILENAME)
    with importlib.resources.as_file(ref) as p:
        return p


def get_user_yaml_path() -> Path | None:
    """Return ~/.liftlog/training_tables.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".liftlog" / TABLES_FILENAME
    return p if p.exists() else None


def load_tables_config(user_path: Path | None = None) -> dict[str, Any]:
    """
    Load and merge the raw table configuration.

    Load order (later overrides earlier):
    1. Bundled src/liftlog/training_tables.yaml
    2. User override (``user_path`` or ~/.liftlog/training_tables.yaml)
    """
    config = _load_yaml_file(get_bundled_yaml_path())

    user = user_path if user_path is not None else get_user_yaml_path()
    if user is not None and user.exists():
        try:
            user_cfg = _load_yaml_file(user)
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(
                f"liftlog: ignoring user tables '{user}': {exc}",
                stacklevel=2,
            )
            user_cfg = {}
        if user_cfg:
            logger.debug("merging user reference tables from %s", user)
            config = _deep_merge(config, user_cfg)

    return config


def load_reference_tables(user_path: Path | None = None) -> ReferenceTables:
    """Load bundled (+ user) YAML into typed ReferenceTables."""
    return tables_from_dict(load_tables_config(user_path))


@lru_cache(maxsize=1)
def get_reference_tables() -> ReferenceTables:
    """Process-wide default tables, loaded once."""
    return load_reference_tables()

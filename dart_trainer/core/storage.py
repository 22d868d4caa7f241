from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .models import JudgmentTiming, PracticeConfig, QuestionType, RingType, Target, TargetType
from .parser import parse_target
from .presets import get_default_config
from .rules import is_integer_value

LOGGER = logging.getLogger(__name__)

STORAGE_KEY = "dart_trainer.practice_config"
STORAGE_VERSION = 2
STORAGE_FILENAME = "settings.json"

# Keys written by the first release, which stored the config flat and in camelCase.
_LEGACY_KEYS = {
    "configId": "config_id",
    "configName": "config_name",
    "throwUnit": "throw_unit",
    "questionType": "question_type",
    "judgmentTiming": "judgment_timing",
    "startingScore": "starting_score",
    "stdDevMM": "std_dev_mm",
    "randomizeTarget": "randomize_target",
    "useBasicTargets": "use_basic_targets",
    "isPreset": "is_preset",
    "createdAt": "created_at",
    "lastPlayedAt": "last_played_at",
}

_CONFIG_FIELDS = {f.name for f in fields(PracticeConfig)}


def _target_to_json(target: Optional[Target]) -> Optional[Dict[str, Any]]:
    if target is None:
        return None
    return {
        "type": target.type.value,
        "number": target.number,
        "label": target.label,
        "ring": target.ring.value if target.ring else None,
    }


def _target_from_json(raw: Any) -> Optional[Target]:
    if raw is None:
        return None
    if isinstance(raw, str):
        return parse_target(raw)
    if not isinstance(raw, dict):
        raise ValueError(f"Unsupported target value: {raw!r}")
    ring = raw.get("ring")
    return Target(
        type=TargetType(raw["type"]),
        number=raw.get("number"),
        label=raw.get("label") or "",
        ring=RingType(ring) if ring else None,
    )


def config_to_json(config: PracticeConfig) -> Dict[str, Any]:
    payload = asdict(config)
    payload["question_type"] = config.question_type.value
    payload["judgment_timing"] = config.judgment_timing.value
    payload["target"] = _target_to_json(config.target)
    return payload


def config_from_json(payload: Dict[str, Any]) -> PracticeConfig:
    """Build a config from canonical JSON; fields missing from the payload keep their defaults."""
    base = asdict(get_default_config())
    base.update({key: value for key, value in payload.items() if key in _CONFIG_FIELDS})
    base["question_type"] = QuestionType(base["question_type"])
    base["judgment_timing"] = JudgmentTiming(base["judgment_timing"])
    base["target"] = _target_from_json(payload.get("target"))
    _check_types(base)
    base["starting_score"] = int(base["starting_score"])
    return PracticeConfig(**base)


def _check_types(base: Dict[str, Any]) -> None:
    throw_unit = base["throw_unit"]
    if isinstance(throw_unit, bool) or throw_unit not in (1, 3):
        raise ValueError(f"Invalid throw_unit: {throw_unit!r}")

    std_dev = base["std_dev_mm"]
    if isinstance(std_dev, bool) or not isinstance(std_dev, (int, float)) or not math.isfinite(std_dev) or std_dev <= 0:
        raise ValueError(f"Invalid std_dev_mm: {std_dev!r}")

    starting = base["starting_score"]
    if not is_integer_value(starting) or starting <= 0:
        raise ValueError(f"Invalid starting_score: {starting!r}")

    for key in ("randomize_target", "use_basic_targets", "is_preset"):
        if not isinstance(base[key], bool):
            raise ValueError(f"Invalid {key}: {base[key]!r}")
    for key in ("config_id", "config_name", "description"):
        if not isinstance(base[key], str):
            raise ValueError(f"Invalid {key}: {base[key]!r}")


def migrate_config(payload: Any) -> Dict[str, Any]:
    """
    Upgrade any stored shape to the canonical config dict.

    Version 1 files hold the config itself with camelCase keys, a nullable
    starting score and the target sometimes saved as a bare label.
    """
    if not isinstance(payload, dict):
        raise ValueError("Stored settings must be a JSON object.")

    version = payload.get("version", 1)
    if version == STORAGE_VERSION:
        config = payload.get("config")
        if not isinstance(config, dict):
            raise ValueError("Stored settings are missing the config object.")
        return dict(config)
    if version != 1:
        raise ValueError(f"Unsupported settings version: {version!r}")

    migrated: Dict[str, Any] = {}
    for key, value in payload.items():
        if key == "version":
            continue
        migrated[_LEGACY_KEYS.get(key, key)] = value
    if migrated.get("starting_score") is None:
        migrated.pop("starting_score", None)
    return migrated


def load_config(path: Path) -> Optional[PracticeConfig]:
    """
    Load the saved practice config.

    Returns None when nothing is saved or the file cannot be understood, so the
    caller can fall back to defaults.
    """
    if not path.exists():
        return None

    try:
        with path.open("r", encoding="utf-8") as fh:
            stored = json.load(fh)
        if not isinstance(stored, dict) or STORAGE_KEY not in stored:
            raise ValueError(f"Missing '{STORAGE_KEY}' entry.")
        config = config_from_json(migrate_config(stored[STORAGE_KEY]))
    except (OSError, ValueError, TypeError, KeyError) as exc:
        LOGGER.warning("Ignoring unreadable settings in %s: %s", path, exc)
        return None

    LOGGER.info("Loaded practice config '%s' from %s.", config.config_id, path)
    return config


def save_config(path: Path, config: PracticeConfig) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {STORAGE_KEY: {"version": STORAGE_VERSION, "config": config_to_json(config)}}
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2)
    tmp_path.replace(path)
    LOGGER.info("Saved practice config '%s' to %s.", config.config_id, path)


def clear_config(path: Path) -> None:
    path.unlink(missing_ok=True)

from __future__ import annotations

from dataclasses import replace
from typing import Dict

from .models import JudgmentTiming, PracticeConfig, QuestionType

DEFAULT_PRESET_ID = "preset-basic"
PRESET_CREATED_AT = "2025-01-01T00:00:00.000Z"

PRESETS: Dict[str, PracticeConfig] = {
    DEFAULT_PRESET_ID: PracticeConfig(
        config_id=DEFAULT_PRESET_ID,
        config_name="Basic",
        description="One dart per question, random target from the 62 basic targets.",
        throw_unit=1,
        question_type=QuestionType.SCORE,
        judgment_timing=JudgmentTiming.INDEPENDENT,
        starting_score=501,
        std_dev_mm=15.0,
        randomize_target=True,
        use_basic_targets=True,
        is_preset=True,
        created_at=PRESET_CREATED_AT,
    ),
    "preset-player": PracticeConfig(
        config_id="preset-player",
        config_name="Player",
        description="Three darts per question, asking for the round score.",
        throw_unit=3,
        question_type=QuestionType.SCORE,
        judgment_timing=JudgmentTiming.INDEPENDENT,
        starting_score=501,
        std_dev_mm=15.0,
        is_preset=True,
        created_at=PRESET_CREATED_AT,
    ),
    "preset-caller-basic": PracticeConfig(
        config_id="preset-caller-basic",
        config_name="Caller Basic",
        description="Call the remaining score after each round.",
        throw_unit=3,
        question_type=QuestionType.REMAINING,
        judgment_timing=JudgmentTiming.INDEPENDENT,
        starting_score=501,
        std_dev_mm=15.0,
        is_preset=True,
        created_at=PRESET_CREATED_AT,
    ),
    "preset-caller-cumulative": PracticeConfig(
        config_id="preset-caller-cumulative",
        config_name="Caller Cumulative",
        description="Call the remaining score, keeping a running total across darts.",
        throw_unit=3,
        question_type=QuestionType.REMAINING,
        judgment_timing=JudgmentTiming.CUMULATIVE,
        starting_score=501,
        std_dev_mm=15.0,
        is_preset=True,
        created_at=PRESET_CREATED_AT,
    ),
    "preset-comprehensive": PracticeConfig(
        config_id="preset-comprehensive",
        config_name="Comprehensive",
        description="Mix of score and remaining questions.",
        throw_unit=3,
        question_type=QuestionType.BOTH,
        judgment_timing=JudgmentTiming.CUMULATIVE,
        starting_score=501,
        std_dev_mm=15.0,
        is_preset=True,
        created_at=PRESET_CREATED_AT,
    ),
}

DIFFICULTY_PRESETS: Dict[str, float] = {
    "beginner": 50.0,
    "intermediate": 30.0,
    "advanced": 15.0,
    "expert": 8.0,
}

SESSION_TIME_LIMITS = (3, 5, 10)


def get_preset(preset_id: str) -> PracticeConfig:
    """Return a copy of a preset so callers can tweak it freely."""
    try:
        preset = PRESETS[preset_id]
    except KeyError:
        raise ValueError(f"Unknown preset '{preset_id}'.") from None
    return replace(preset)


def get_default_config() -> PracticeConfig:
    return get_preset(DEFAULT_PRESET_ID)


def difficulty_label(std_dev_mm: float) -> str:
    for name, value in DIFFICULTY_PRESETS.items():
        if value == std_dev_mm:
            return name.capitalize()
    return f"{std_dev_mm:g}mm"


def find_matching_preset(config: PracticeConfig) -> str | None:
    if config.is_preset and config.config_id in PRESETS:
        return config.config_id
    return None

from __future__ import annotations

import logging
import math
import random
import time
from dataclasses import fields, replace
from datetime import datetime, timezone
from typing import List, Optional

from . import presets, timer
from .models import (
    DEFAULT_TARGET,
    AnswerOutcome,
    BustCall,
    BustInfo,
    EndReason,
    GameState,
    JudgmentTiming,
    PracticeConfig,
    Question,
    QuestionType,
    SessionConfig,
    SessionMode,
    SessionResult,
    SessionState,
    Stats,
    Target,
    ThrowResult,
)
from .rules import (
    is_game_finished,
    is_integer_value,
    is_valid_remaining_score,
    is_valid_round_score,
    is_valid_single_throw_score,
    settle_round,
)
from .simulator import execute_throw
from .strategy import get_optimal_target
from .targets import advance_bag, new_bag

LOGGER = logging.getLogger(__name__)

VALID_THROW_UNITS = (1, 3)

SCORE_TEXT_SINGLE = "What did this dart score?"
SCORE_TEXT_ROUND = "What did the three darts score?"
REMAINING_TEXT = "What is the remaining score?"

_CONFIG_FIELDS = {f.name for f in fields(PracticeConfig)}


def create_session_state(
    config: Optional[PracticeConfig] = None,
    session_config: Optional[SessionConfig] = None,
    seed: Optional[int] = None,
) -> SessionState:
    state = SessionState(
        config=config if config is not None else presets.get_default_config(),
        session_config=session_config if session_config is not None else SessionConfig(),
    )
    _seed(state, seed)
    return state


def _seed(state: SessionState, seed: Optional[int]) -> None:
    if seed is None:
        seed = time.time_ns()
    state.rng_seed = seed
    state.rng = random.Random(seed)


def _rng(state: SessionState) -> random.Random:
    if state.rng is None:
        state.rng = random.Random(state.rng_seed)
    return state.rng


def _valid_throw_unit(value: object) -> bool:
    return not isinstance(value, bool) and value in VALID_THROW_UNITS


def _judges_bust(config: PracticeConfig) -> bool:
    """Bust rules apply to drills that track the remaining score and keep fixed targets."""
    return config.tracks_remaining and not config.randomize_target


def set_config(state: SessionState, **changes) -> PracticeConfig:
    """Apply a partial update to the practice config."""
    unknown = set(changes) - _CONFIG_FIELDS
    if unknown:
        raise ValueError(f"Unknown config fields: {', '.join(sorted(unknown))}.")
    if "throw_unit" in changes and not _valid_throw_unit(changes["throw_unit"]):
        raise ValueError("throw_unit must be 1 or 3.")
    if "std_dev_mm" in changes:
        _validate_std_dev(changes["std_dev_mm"])
    if "question_type" in changes:
        changes["question_type"] = QuestionType(changes["question_type"])
    if "judgment_timing" in changes:
        changes["judgment_timing"] = JudgmentTiming(changes["judgment_timing"])
    if "starting_score" in changes:
        score = changes["starting_score"]
        if not is_integer_value(score) or score <= 0:
            raise ValueError("starting_score must be a positive integer.")

    state.config = replace(state.config, **changes)
    return state.config


def set_session_config(state: SessionState, session_config: SessionConfig) -> None:
    if session_config.mode == SessionMode.QUESTIONS:
        count = session_config.question_count
        if not is_integer_value(count) or count <= 0:
            raise ValueError("question_count must be a positive integer.")
    else:
        limit = session_config.time_limit
        if not is_integer_value(limit) or limit <= 0:
            raise ValueError("time_limit must be a positive number of minutes.")
    state.session_config = session_config


def select_preset(state: SessionState, preset_id: str) -> PracticeConfig:
    state.config = presets.get_preset(preset_id)
    return state.config


def set_target(state: SessionState, target: Optional[Target]) -> None:
    state.config = replace(state.config, target=target)


def _validate_std_dev(std_dev_mm: float) -> None:
    if isinstance(std_dev_mm, bool) or not isinstance(std_dev_mm, (int, float)) or not math.isfinite(std_dev_mm):
        raise ValueError("std_dev_mm must be a finite number.")
    if std_dev_mm <= 0:
        raise ValueError("std_dev_mm must be positive.")


def set_std_dev(state: SessionState, std_dev_mm: float) -> None:
    _validate_std_dev(std_dev_mm)
    state.config = replace(state.config, std_dev_mm=float(std_dev_mm))


def start_practice(state: SessionState, now: Optional[float] = None) -> Question:
    """Begin a session and deal the first question."""
    config = state.config
    if not _valid_throw_unit(config.throw_unit):
        raise ValueError("throw_unit must be 1 or 3.")
    if not is_integer_value(config.starting_score) or config.starting_score <= 0:
        raise ValueError("starting_score must be a positive integer.")

    state.game_state = GameState.PRACTICING
    state.is_timer_running = True
    state.stats = Stats(best_streak=state.stats.best_streak)
    state.elapsed_time = 0
    state.practice_start_time = None
    timer.ensure_started(state, now)
    state.end_reason = None
    state.current_question = None
    state.displayed_darts = []
    state.current_throw_index = 0
    state.remaining_score = int(config.starting_score)
    state.round_start_score = state.remaining_score

    if config.randomize_target:
        state.target_bag = new_bag(_rng(state), use_basic_targets=config.use_basic_targets)
        state.target_bag_index = 0
    else:
        state.target_bag = None
        state.target_bag_index = None

    LOGGER.info(
        "Practice started: %s, %s dart(s), %s questions, %.1fmm spread.",
        config.config_id,
        config.throw_unit,
        config.question_type.value,
        config.std_dev_mm,
    )
    return generate_question(state)


def _pick_target(state: SessionState, projected: int, throws_left: int) -> Target:
    config = state.config
    if config.randomize_target and state.target_bag:
        return state.target_bag[state.target_bag_index or 0]

    return config.target or get_optimal_target(projected, throws_left) or DEFAULT_TARGET


def _choose_mode(state: SessionState) -> QuestionType:
    question_type = state.config.question_type
    if question_type != QuestionType.BOTH:
        return question_type
    if state.remaining_score <= 0:
        return QuestionType.SCORE
    return QuestionType.SCORE if _rng(state).random() < 0.5 else QuestionType.REMAINING


def generate_question(state: SessionState) -> Question:
    """Simulate a round of throws and build the question for it."""
    config = state.config
    rng = _rng(state)

    throws: List[ThrowResult] = []
    projected = state.remaining_score
    for index in range(config.throw_unit):
        target = _pick_target(state, projected, config.throw_unit - index)
        result = execute_throw(target, config.std_dev_mm, rng)
        throws.append(result)
        projected -= result.score

    total = sum(t.score for t in throws)
    bust_info: Optional[BustInfo] = None
    remaining_after = state.remaining_score - total
    if _judges_bust(config) and state.remaining_score > 0:
        bust_info, remaining_after = settle_round(state.remaining_score, throws)

    mode = _choose_mode(state)
    if mode == QuestionType.SCORE:
        correct_answer = total
        question_text = SCORE_TEXT_SINGLE if config.throw_unit == 1 else SCORE_TEXT_ROUND
        starting_score = None
    else:
        correct_answer = remaining_after
        question_text = REMAINING_TEXT
        starting_score = state.remaining_score

    question = Question(
        mode=mode,
        throws=throws,
        correct_answer=correct_answer,
        question_text=question_text,
        starting_score=starting_score,
        bust_info=bust_info,
    )
    state.current_question = question

    if config.throw_unit == 1:
        state.displayed_darts = list(throws)
        state.current_throw_index = 1
    else:
        state.displayed_darts = []
        state.current_throw_index = 0
    return question


def reveal_next_throw(state: SessionState) -> Optional[ThrowResult]:
    """Show the next dart of a three-dart round. Does nothing in one-dart mode."""
    question = state.current_question
    if state.config.throw_unit == 1 or question is None:
        return None
    if state.current_throw_index >= len(question.throws):
        return None
    throw = question.throws[state.current_throw_index]
    state.displayed_darts.append(throw)
    state.current_throw_index += 1
    return throw


def visible_throws(state: SessionState) -> List[ThrowResult]:
    return list(state.displayed_darts)


def throw_answer(question: Question, index: int, timing: JudgmentTiming) -> int:
    """
    Expected answer after dart ``index`` of a round.

    Independent judgment looks at that dart alone; cumulative judgment at the
    running total of the round so far. Remaining questions subtract from the
    score the round started on.
    """
    if not is_integer_value(index) or not 0 <= index < len(question.throws):
        raise ValueError(f"index must be between 0 and {len(question.throws) - 1}.")

    if timing == JudgmentTiming.CUMULATIVE:
        scored = sum(t.score for t in question.throws[: index + 1])
    else:
        scored = question.throws[index].score

    if question.mode == QuestionType.REMAINING:
        if question.starting_score is None:
            raise ValueError("Remaining questions need a starting score.")
        return question.starting_score - scored
    return scored


def throw_prompt(question: Question, index: int, timing: JudgmentTiming) -> str:
    """Prompt matching ``throw_answer`` for dart ``index``."""
    number = index + 1
    if question.mode == QuestionType.REMAINING:
        if timing == JudgmentTiming.CUMULATIVE:
            return f"What is left after dart {number}?"
        return f"What would be left after dart {number} on its own?"
    if timing == JudgmentTiming.CUMULATIVE:
        return f"What is the running total after dart {number}?"
    return f"What did dart {number} score?"


def bust_call(state: SessionState) -> Optional[BustCall]:
    """
    Expected bust/safe/finish call for the darts shown so far in a three-dart round.

    None when the drill does not play by bust rules, no dart is shown yet or
    there is no remaining score to play from.
    """
    question = state.current_question
    if question is None or state.config.throw_unit == 1 or not _judges_bust(state.config):
        return None
    if not state.displayed_darts or state.round_start_score <= 0:
        return None

    info, left = settle_round(state.round_start_score, state.displayed_darts)
    if info.is_bust:
        return BustCall.BUST
    return BustCall.FINISH if left == 0 else BustCall.SAFE


def is_plausible_answer(state: SessionState, answer: int) -> bool:
    """
    Whether the current round could have produced ``answer`` at all.

    Under bust rules a remaining answer must also leave a playable score.
    """
    question = state.current_question
    if question is None:
        raise RuntimeError("No active question.")
    valid_scored = is_valid_single_throw_score if len(question.throws) == 1 else is_valid_round_score
    if question.mode == QuestionType.SCORE:
        return valid_scored(answer)

    start = question.starting_score
    if start is None or start <= 0:
        return True
    scored = start - answer
    if _judges_bust(state.config) and not is_valid_remaining_score(start, scored):
        return False
    return valid_scored(scored)


def _validate_answer(answer: int) -> None:
    if isinstance(answer, bool) or not isinstance(answer, (int, float)):
        raise ValueError("Answer must be a number.")
    if not math.isfinite(answer):
        raise ValueError("Answer must be a finite number.")
    if answer < 0:
        raise ValueError("Answer must be zero or positive.")
    if not is_integer_value(answer):
        raise ValueError("Answer must be an integer.")


def submit_answer(state: SessionState, answer: int) -> AnswerOutcome:
    """Judge the answer, move the remaining score and update statistics."""
    _validate_answer(answer)
    if state.game_state != GameState.PRACTICING:
        raise RuntimeError("No practice session in progress.")
    question = state.current_question
    if question is None:
        raise RuntimeError("No active question to submit.")

    config = state.config
    is_correct = answer == question.correct_answer
    bust_info: Optional[BustInfo] = None

    if config.randomize_target:
        state.remaining_score -= question.total_score
    elif _judges_bust(config) and state.remaining_score > 0:
        bust_info, state.remaining_score = settle_round(state.remaining_score, question.throws)
        if bust_info.is_bust:
            state.remaining_score = state.round_start_score
            LOGGER.debug("Bust (%s), remaining back to %s.", bust_info.reason.value, state.remaining_score)

    is_bust = bust_info is not None and bust_info.is_bust
    # Score questions still ask for the round total, bust or not.
    if is_bust and question.mode == QuestionType.REMAINING:
        is_correct = False

    stats = state.stats
    stats.total += 1
    if is_correct:
        stats.correct += 1
        stats.current_streak += 1
        stats.best_streak = max(stats.best_streak, stats.current_streak)
    else:
        stats.current_streak = 0

    if config.randomize_target and state.target_bag:
        state.target_bag, state.target_bag_index = advance_bag(
            state.target_bag, state.target_bag_index or 0, _rng(state)
        )

    session_config = state.session_config
    if session_config.mode == SessionMode.QUESTIONS and stats.total >= (session_config.question_count or 0):
        _finish(state, EndReason.COMPLETED.value)

    return AnswerOutcome(
        is_correct=is_correct,
        is_bust=is_bust,
        correct_answer=question.correct_answer,
        bust_info=bust_info,
    )


def next_question(state: SessionState) -> Optional[Question]:
    """Advance to the next round, or finish the session when the leg is checked out."""
    if state.game_state != GameState.PRACTICING:
        return None

    config = state.config
    if config.tracks_remaining and state.remaining_score >= 0 and is_game_finished(state.remaining_score):
        _finish(state, EndReason.GAME_FINISHED.value)
        return None

    state.round_start_score = state.remaining_score
    state.current_question = None
    state.current_throw_index = 0
    state.displayed_darts = []
    return generate_question(state)


def _finish(state: SessionState, reason: Optional[str]) -> None:
    state.game_state = GameState.RESULTS
    state.is_timer_running = False
    state.end_reason = reason
    LOGGER.info(
        "Practice finished (%s): %s/%s correct, best streak %s.",
        reason or "unspecified",
        state.stats.correct,
        state.stats.total,
        state.stats.best_streak,
    )


def end_session(state: SessionState, reason: Optional[str] = None) -> None:
    _finish(state, reason)


def reset_to_setup(state: SessionState) -> None:
    state.game_state = GameState.SETUP
    state.current_question = None
    state.stats = Stats()
    state.elapsed_time = 0
    state.is_timer_running = False
    state.practice_start_time = None
    state.displayed_darts = []
    state.current_throw_index = 0
    state.remaining_score = 0
    state.round_start_score = 0
    state.target_bag = None
    state.target_bag_index = None
    state.end_reason = None


def tick(state: SessionState, now: Optional[float] = None) -> int:
    """Recompute elapsed time from the start timestamp and enforce the time limit."""
    if not state.is_timer_running or state.practice_start_time is None:
        return state.elapsed_time

    state.elapsed_time = timer.elapsed_seconds(state, now)
    if timer.expired(state, now):
        _finish(state, EndReason.TIMEOUT.value)
    return state.elapsed_time


def current_correct_answer(state: SessionState) -> int:
    if state.current_question is None:
        return 0
    return state.current_question.correct_answer


def accuracy(state: SessionState) -> float:
    return state.stats.accuracy


def remaining_seconds(state: SessionState, now: Optional[float] = None) -> Optional[float]:
    return timer.remaining_seconds(state, now)


def session_result(state: SessionState) -> SessionResult:
    return SessionResult(
        config=replace(state.config),
        session_config=replace(state.session_config),
        stats=replace(state.stats),
        elapsed_time=state.elapsed_time,
        completed_at=datetime.now(timezone.utc).isoformat(),
        finish_reason=state.end_reason,
    )

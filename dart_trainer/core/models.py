from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from random import Random
from typing import List, Optional


class TargetType(str, Enum):
    """Aim categories a player can choose."""

    SINGLE = "SINGLE"
    DOUBLE = "DOUBLE"
    TRIPLE = "TRIPLE"
    BULL = "BULL"


class RingType(str, Enum):
    """Scoring areas a dart can land in."""

    INNER_BULL = "INNER_BULL"
    OUTER_BULL = "OUTER_BULL"
    INNER_SINGLE = "INNER_SINGLE"
    TRIPLE = "TRIPLE"
    OUTER_SINGLE = "OUTER_SINGLE"
    DOUBLE = "DOUBLE"
    OUT = "OUT"


class QuestionType(str, Enum):
    """What a practice config asks about."""

    SCORE = "score"
    REMAINING = "remaining"
    BOTH = "both"

    @property
    def display_name(self) -> str:
        mapping = {
            QuestionType.SCORE: "Score",
            QuestionType.REMAINING: "Remaining",
            QuestionType.BOTH: "Score + Remaining",
        }
        return mapping[self]


class JudgmentTiming(str, Enum):
    INDEPENDENT = "independent"
    CUMULATIVE = "cumulative"


class GameState(str, Enum):
    SETUP = "setup"
    PRACTICING = "practicing"
    RESULTS = "results"


class SessionMode(str, Enum):
    QUESTIONS = "questions"
    TIME = "time"


class BustReason(str, Enum):
    OVER = "over"
    FINISH_IMPOSSIBLE = "finish_impossible"
    DOUBLE_OUT_REQUIRED = "double_out_required"


class BustCall(str, Enum):
    """Call a player makes after each dart of a three-dart round."""

    BUST = "bust"
    SAFE = "safe"
    FINISH = "finish"


class EndReason(str, Enum):
    COMPLETED = "completed"
    TIMEOUT = "timeout"
    MANUAL = "manual"
    GAME_FINISHED = "game_finished"


@dataclass(frozen=True)
class Point:
    """Board coordinate in millimetres; origin at the bull, y grows downward."""

    x: float
    y: float


@dataclass(frozen=True)
class Target:
    """An aim point on the board.

    ``ring`` optionally pins a SINGLE or BULL aim to one of its two areas
    (inner/outer single, inner/outer bull). When left as ``None`` a SINGLE
    aims at the inner single and a BULL at the inner bull.
    """

    type: TargetType
    number: Optional[int] = None
    label: str = ""
    ring: Optional[RingType] = None

    def __post_init__(self) -> None:
        if not isinstance(self.type, TargetType):
            object.__setattr__(self, "type", TargetType(self.type))
        if self.type == TargetType.BULL:
            if self.number is not None:
                raise ValueError("BULL target must not have a segment number.")
        elif (
            isinstance(self.number, bool)
            or not isinstance(self.number, int)
            or not 1 <= self.number <= 20
        ):
            raise ValueError(f"{self.type.value} target requires a segment number between 1 and 20.")
        if self.ring is not None and not isinstance(self.ring, RingType):
            object.__setattr__(self, "ring", RingType(self.ring))
        if not self.label:
            object.__setattr__(self, "label", _default_label(self))

    @property
    def nominal_score(self) -> int:
        if self.type == TargetType.BULL:
            return 25 if self.ring == RingType.OUTER_BULL else 50
        multiplier = {TargetType.SINGLE: 1, TargetType.DOUBLE: 2, TargetType.TRIPLE: 3}[self.type]
        return self.number * multiplier


def _default_label(target: Target) -> str:
    if target.type == TargetType.BULL:
        return "25" if target.ring == RingType.OUTER_BULL else "BULL"
    prefix = {TargetType.SINGLE: "S", TargetType.DOUBLE: "D", TargetType.TRIPLE: "T"}[target.type]
    if target.ring == RingType.OUTER_SINGLE:
        prefix = "OS"
    return f"{prefix}{target.number}"


DEFAULT_TARGET = Target(TargetType.TRIPLE, 20, "T20")


@dataclass(frozen=True)
class ThrowResult:
    """Outcome of a single simulated dart."""

    target: Target
    landing_point: Point
    score: int
    ring: RingType
    segment_number: Optional[int] = None


@dataclass(frozen=True)
class BustInfo:
    is_bust: bool
    reason: Optional[BustReason] = None


NO_BUST = BustInfo(is_bust=False, reason=None)


@dataclass
class Question:
    """One round of throws and the answer expected for it."""

    mode: QuestionType
    throws: List[ThrowResult]
    correct_answer: int
    question_text: str
    starting_score: Optional[int] = None
    bust_info: Optional[BustInfo] = None

    @property
    def total_score(self) -> int:
        return sum(t.score for t in self.throws)


@dataclass
class PracticeConfig:
    """Quiz parameters chosen before a session starts."""

    config_id: str = "custom"
    config_name: str = "Custom"
    description: str = ""
    throw_unit: int = 1
    question_type: QuestionType = QuestionType.SCORE
    judgment_timing: JudgmentTiming = JudgmentTiming.INDEPENDENT
    starting_score: int = 501
    std_dev_mm: float = 15.0
    target: Optional[Target] = None
    randomize_target: bool = False
    use_basic_targets: bool = False
    is_preset: bool = False
    created_at: Optional[str] = None
    last_played_at: Optional[str] = None

    @property
    def tracks_remaining(self) -> bool:
        return self.question_type != QuestionType.SCORE


@dataclass
class SessionConfig:
    """Termination policy for a session."""

    mode: SessionMode = SessionMode.QUESTIONS
    question_count: Optional[int] = 10
    time_limit: Optional[int] = None  # minutes


@dataclass
class Stats:
    correct: int = 0
    total: int = 0
    current_streak: int = 0
    best_streak: int = 0

    @property
    def accuracy(self) -> float:
        if self.total == 0:
            return 0.0
        return self.correct / self.total


@dataclass(frozen=True)
class AnswerOutcome:
    """Judgement handed back to the presentation layer after an answer."""

    is_correct: bool
    is_bust: bool
    correct_answer: int
    bust_info: Optional[BustInfo] = None


@dataclass(frozen=True)
class SessionResult:
    config: PracticeConfig
    session_config: SessionConfig
    stats: Stats
    elapsed_time: int
    completed_at: str
    finish_reason: Optional[str]


@dataclass
class SessionState:
    """Mutable state for one practice session."""

    config: PracticeConfig = field(default_factory=PracticeConfig)
    session_config: SessionConfig = field(default_factory=SessionConfig)
    game_state: GameState = GameState.SETUP
    current_question: Optional[Question] = None
    current_throw_index: int = 0
    displayed_darts: List[ThrowResult] = field(default_factory=list)
    remaining_score: int = 0
    round_start_score: int = 0
    stats: Stats = field(default_factory=Stats)
    elapsed_time: int = 0
    is_timer_running: bool = False
    practice_start_time: Optional[float] = None
    target_bag: Optional[List[Target]] = None
    target_bag_index: Optional[int] = None
    end_reason: Optional[str] = None
    rng_seed: Optional[int] = None
    rng: Optional[Random] = field(default=None, repr=False)

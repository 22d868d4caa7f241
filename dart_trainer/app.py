from __future__ import annotations

import logging
from pathlib import Path

import streamlit as st

try:
    from streamlit_autorefresh import st_autorefresh
except ImportError:  # pragma: no cover - optional dependency guard
    st_autorefresh = None

from dart_trainer.board_image import render_board
from dart_trainer.core import engine, presets, storage
from dart_trainer.core.board import score_label
from dart_trainer.core.models import (
    BustCall,
    EndReason,
    GameState,
    JudgmentTiming,
    Question,
    QuestionType,
    SessionConfig,
    SessionMode,
    SessionState,
)
from dart_trainer.core.parser import format_target, parse_target
from dart_trainer.core.strategy import ONE_DART_FINISHES

PAGE_TITLE = "Darts Score Trainer"
QUESTION_COUNTS = (10, 20, 50, 100)
CUSTOM_PRESET = "custom"
STARTING_SCORES = (301, 501, 701)

BASE_DIR = Path(__file__).resolve().parent
SETTINGS_PATH = BASE_DIR / ".settings" / storage.STORAGE_FILENAME

logging.basicConfig(level=logging.INFO)


def get_state() -> SessionState:
    if "session_state" not in st.session_state:
        saved = storage.load_config(SETTINGS_PATH)
        st.session_state.session_state = engine.create_session_state(config=saved)
    return st.session_state.session_state


def render_sidebar(state: SessionState) -> None:
    st.sidebar.header("Practice Settings")
    disabled = state.game_state == GameState.PRACTICING

    options = [CUSTOM_PRESET] + list(presets.PRESETS)
    current = presets.find_matching_preset(state.config) or CUSTOM_PRESET
    preset_id = st.sidebar.selectbox(
        "Preset",
        options=options,
        format_func=lambda key: "Custom" if key == CUSTOM_PRESET else presets.PRESETS[key].config_name,
        index=options.index(current),
        disabled=disabled,
    )
    if preset_id not in (current, CUSTOM_PRESET) and not disabled:
        engine.select_preset(state, preset_id)
        st.rerun()

    config = state.config
    throw_unit = st.sidebar.radio(
        "Darts per question",
        options=[1, 3],
        index=0 if config.throw_unit == 1 else 1,
        disabled=disabled,
    )
    question_type = st.sidebar.radio(
        "Question",
        options=list(QuestionType),
        format_func=lambda q: q.display_name,
        index=list(QuestionType).index(config.question_type),
        disabled=disabled,
    )
    judgment = st.sidebar.radio(
        "Judgment",
        options=list(JudgmentTiming),
        format_func=lambda j: j.value.capitalize(),
        index=list(JudgmentTiming).index(config.judgment_timing),
        disabled=disabled,
    )
    starting_score = st.sidebar.selectbox(
        "Starting score",
        options=STARTING_SCORES,
        index=STARTING_SCORES.index(config.starting_score) if config.starting_score in STARTING_SCORES else 1,
        disabled=disabled,
    )
    difficulty = st.sidebar.selectbox(
        "Skill",
        options=list(presets.DIFFICULTY_PRESETS),
        format_func=lambda key: f"{key.capitalize()} ({presets.DIFFICULTY_PRESETS[key]:g}mm)",
        index=_difficulty_index(config.std_dev_mm),
        disabled=disabled,
    )
    target_label = st.sidebar.text_input(
        "Fixed target (e.g. T20, D16, BULL)",
        value=config.target.label if config.target else "",
        disabled=disabled or config.randomize_target,
    )

    if not disabled:
        changes = {}
        if throw_unit != config.throw_unit:
            changes["throw_unit"] = throw_unit
        if question_type != config.question_type:
            changes["question_type"] = question_type
        if judgment != config.judgment_timing:
            changes["judgment_timing"] = judgment
        if starting_score != config.starting_score:
            changes["starting_score"] = starting_score
        std_dev_mm = presets.DIFFICULTY_PRESETS[difficulty]
        if std_dev_mm != config.std_dev_mm:
            changes["std_dev_mm"] = std_dev_mm
        target = parse_target(target_label) if target_label else None
        if target_label and target is None:
            st.sidebar.warning(f"Unknown target '{target_label}', using the checkout strategy.")
        if target != config.target:
            changes["target"] = target
        if changes:
            engine.set_config(state, **changes, is_preset=False, config_id=CUSTOM_PRESET, config_name="Custom")

    st.sidebar.subheader("Session")
    mode = st.sidebar.radio(
        "End after",
        options=list(SessionMode),
        format_func=lambda m: "Question count" if m == SessionMode.QUESTIONS else "Time limit",
        index=list(SessionMode).index(state.session_config.mode),
        disabled=disabled,
    )
    if mode == SessionMode.QUESTIONS:
        count = st.sidebar.selectbox("Questions", options=QUESTION_COUNTS, disabled=disabled)
        session_config = SessionConfig(mode=mode, question_count=count)
    else:
        minutes = st.sidebar.selectbox("Minutes", options=presets.SESSION_TIME_LIMITS, disabled=disabled)
        session_config = SessionConfig(mode=mode, question_count=None, time_limit=minutes)
    if not disabled:
        engine.set_session_config(state, session_config)


def _difficulty_index(std_dev_mm: float) -> int:
    values = list(presets.DIFFICULTY_PRESETS.values())
    return values.index(std_dev_mm) if std_dev_mm in values else values.index(15.0)


def render_setup(state: SessionState) -> None:
    st.header("Setup")
    config = state.config
    st.markdown(
        f"""
        **Preset:** {config.config_name}
        **Skill:** {presets.difficulty_label(config.std_dev_mm)}
        **Question:** {config.question_type.display_name}, {config.throw_unit} dart(s)
        """
    )
    if st.button("Start practice"):
        storage.save_config(SETTINGS_PATH, state.config)
        engine.start_practice(state)
        st.rerun()


def render_status(state: SessionState) -> None:
    engine.tick(state)
    cols = st.columns(4)
    cols[0].metric("Correct", f"{state.stats.correct} / {state.stats.total}")
    cols[1].metric("Streak", state.stats.current_streak, help=f"Best: {state.stats.best_streak}")
    cols[2].metric("Remaining", state.remaining_score)
    remaining = engine.remaining_seconds(state)
    if remaining is not None:
        cols[3].metric("Time left", f"{int(remaining // 60):02d}:{int(remaining % 60):02d}")
    else:
        minutes, seconds = divmod(state.elapsed_time, 60)
        cols[3].metric("Elapsed", f"{minutes:02d}:{seconds:02d}")


def render_feedback() -> None:
    outcome = st.session_state.get("last_outcome")
    if outcome is None:
        return
    labels = st.session_state.get("last_labels")
    if labels:
        st.caption("Last round: " + ", ".join(labels))
    if outcome.is_bust:
        st.warning(f"Bust ({outcome.bust_info.reason.value}). Score stays at the round start.")
    elif outcome.is_correct:
        st.success("Correct!")
    else:
        st.error(f"Wrong. The answer was {outcome.correct_answer}.")


def _score_before_last_dart(state: SessionState) -> int:
    return state.round_start_score - sum(t.score for t in state.displayed_darts[:-1])


def render_dart_check(state: SessionState, question: Question) -> None:
    """Per-dart call between reveals; practice only, stats are not touched."""
    feedback = st.session_state.get("dart_feedback")
    if feedback:
        for ok, message in feedback:
            (st.success if ok else st.error)(message)

    index = state.current_throw_index - 1
    timing = state.config.judgment_timing
    expected_call = engine.bust_call(state)
    with st.form(key=f"dart-{state.stats.total}-{index}"):
        guess = st.number_input(engine.throw_prompt(question, index, timing), step=1, value=0)
        call = None
        if expected_call is not None:
            calls = [BustCall.BUST, BustCall.SAFE]
            if _score_before_last_dart(state) in ONE_DART_FINISHES:
                calls.append(BustCall.FINISH)
            call = st.radio("Call", options=calls, format_func=lambda c: c.value.capitalize(), horizontal=True)
        checked = st.form_submit_button("Check")

    if not checked:
        return
    expected = engine.throw_answer(question, index, timing)
    results = [(int(guess) == expected, f"Dart {index + 1}: {expected}")]
    if expected_call is not None:
        results.append((call == expected_call, f"Call: {expected_call.value}"))
    st.session_state.dart_feedback = results
    if expected_call in (BustCall.BUST, BustCall.FINISH):
        # The round is over; show what is left and go to the answer.
        while engine.reveal_next_throw(state) is not None:
            pass
    st.rerun()


def render_question(state: SessionState) -> None:
    question = state.current_question
    if question is None:
        return

    shown = engine.visible_throws(state)
    target = question.throws[0].target
    st.image(render_board(shown, target=target), caption=f"Aiming at {format_target(target)}")

    if state.config.throw_unit == 3 and state.current_throw_index < len(question.throws):
        if shown:
            render_dart_check(state, question)
        if st.button(f"Throw dart {state.current_throw_index + 1}"):
            st.session_state.dart_feedback = None
            engine.reveal_next_throw(state)
            st.rerun()
        return

    st.markdown(f"**{question.question_text}**")
    if question.starting_score is not None:
        st.caption(f"Starting from {question.starting_score}")

    with st.form(key=f"question-{state.stats.total}"):
        answer = st.number_input("Answer", min_value=0, step=1, value=0)
        submitted = st.form_submit_button("Submit")

    if submitted:
        if not engine.is_plausible_answer(state, int(answer)):
            st.warning(f"No round of darts gives {int(answer)} here. Check your answer.")
        else:
            st.session_state.last_labels = [score_label(t.ring, t.segment_number) for t in question.throws]
            st.session_state.last_outcome = engine.submit_answer(state, int(answer))
            st.session_state.dart_feedback = None
            engine.next_question(state)
            st.rerun()

    if st.button("End session"):
        engine.end_session(state, EndReason.MANUAL.value)
        st.rerun()


def render_results(state: SessionState) -> None:
    st.header("Results")
    result = engine.session_result(state)
    cols = st.columns(3)
    cols[0].metric("Accuracy", f"{result.stats.accuracy:.0%}")
    cols[1].metric("Best streak", result.stats.best_streak)
    cols[2].metric("Time", f"{result.elapsed_time // 60:02d}:{result.elapsed_time % 60:02d}")
    st.caption(f"Finished: {result.finish_reason or 'ended'}")

    if st.button("Back to setup"):
        st.session_state.last_outcome = None
        st.session_state.last_labels = None
        engine.reset_to_setup(state)
        st.rerun()


def main() -> None:
    st.set_page_config(page_title=PAGE_TITLE, layout="wide")
    st.title(PAGE_TITLE)

    state = get_state()
    render_sidebar(state)

    if state.game_state == GameState.SETUP:
        render_setup(state)
        return

    if state.game_state == GameState.PRACTICING and st_autorefresh is not None:
        st_autorefresh(interval=1_000, key="timer-refresh")

    render_status(state)
    if state.game_state == GameState.RESULTS:
        render_results(state)
        return

    render_feedback()
    render_question(state)


if __name__ == "__main__":
    main()

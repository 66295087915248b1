from typing import Any

import pytest

from vimarcade.models import Buffer, Cursor, Question, QuestionBank, Register
from vimarcade.service import GameService, GameSession, points_for

SAMPLE = ("alpha beta", "gamma delta", "epsilon")
DEL_LINE = Question(id="del-line", prompt="Delete the current line", expected=("dd", "1dd"))
YANK_PASTE = Question(id="yank-paste", prompt="Duplicate the current line", expected=("yy p", "yyp"))
DEL_TWO = Question(id="del-2-lines", prompt="Delete 2 consecutive lines", expected=("2dd",))


def _session(clock: Any, questions: list[Question] | None = None, register: Register | None = None) -> GameSession:
    return GameSession(
        username="alice",
        questions=questions or [DEL_LINE, YANK_PASTE],
        sample_text=SAMPLE,
        register=register or Register(),
        duration=60,
        clock=clock,
    )


def test_points_for() -> None:
    assert points_for(True, False) == 1
    assert points_for(True, True) == 0
    assert points_for(False, False) == 0
    assert points_for(False, True) == 0


def test_session_starts_on_sample_text_with_clear_register(clock: Any) -> None:
    register = Register(line="left over")
    session = _session(clock, register=register)
    assert register.line is None
    assert session.buffer == Buffer.from_lines(SAMPLE)
    assert session.score == 0
    assert session.time_left() == 60


def test_session_requires_questions(clock: Any) -> None:
    with pytest.raises(ValueError):
        GameSession("alice", [], SAMPLE, Register(), clock=clock)


def test_correct_answer_scores_and_advances(clock: Any) -> None:
    session = _session(clock)
    result = session.submit("dd")
    assert result.kind == "correct"
    assert result.points == 1
    assert result.buffer.lines == SAMPLE[1:]
    assert session.score == 1
    assert session.current_question == YANK_PASTE
    assert session.buffer == Buffer.from_lines(SAMPLE)


def test_wrong_answer_keeps_buffer_effect(clock: Any) -> None:
    session = _session(clock)
    result = session.submit("j")
    assert result.kind == "wrong"
    assert result.command == "j"
    assert session.buffer.cursor == Cursor(1, 0)
    assert session.current_question == DEL_LINE
    assert session.score == 0


def test_composite_answer_accepted_in_both_forms(clock: Any) -> None:
    session = _session(clock, questions=[YANK_PASTE, YANK_PASTE])
    assert session.submit("yyp").kind == "correct"
    result = session.submit("yy p")
    assert result.kind == "correct"
    assert result.buffer.lines[:2] == ("alpha beta", "alpha beta")


def test_counted_answer_matches_literally(clock: Any) -> None:
    session = _session(clock, questions=[DEL_TWO])
    assert session.submit("dd").kind == "wrong"
    result = session.submit("2dd")
    assert result.kind == "correct"
    assert result.command == "dd"


def test_hint_reveals_answer_and_forfeits_point(clock: Any) -> None:
    session = _session(clock)
    hint = session.submit("@@")
    assert hint.kind == "hint"
    assert hint.hint == "dd"
    result = session.submit("dd")
    assert result.kind == "correct"
    assert result.points == 0
    assert session.score == 0
    assert session.hint_used is False


def test_blank_input_is_ignored(clock: Any) -> None:
    session = _session(clock)
    assert session.submit("   ").kind == "ignored"
    assert session.buffer == Buffer.from_lines(SAMPLE)


def test_questions_wrap_around(clock: Any) -> None:
    session = _session(clock)
    session.submit("dd")
    session.submit("yyp")
    assert session.current_question == DEL_LINE
    assert session.score == 2


def test_register_persists_across_questions(clock: Any) -> None:
    session = _session(clock, questions=[DEL_LINE, YANK_PASTE])
    session.submit("j")
    session.submit("yy")
    assert session.register.line == "gamma delta"
    session.submit("dd")
    assert session.register.line == "gamma delta"


def test_late_answer_finishes_without_scoring_or_applying(clock: Any) -> None:
    session = _session(clock)
    session.submit("dd")
    session.submit("yyp")
    assert session.score == 2
    clock.advance(61)
    assert session.time_left() == 0
    result = session.submit("dd")
    assert result.kind == "timeout"
    assert result.points == 0
    assert result.buffer == Buffer.from_lines(SAMPLE)
    assert session.buffer == Buffer.from_lines(SAMPLE)
    assert session.score == 2
    assert session.finished is True
    with pytest.raises(RuntimeError):
        session.submit("dd")


def _bank() -> QuestionBank:
    return QuestionBank(sample_text=SAMPLE, questions=(DEL_LINE, YANK_PASTE, DEL_TWO))


def test_service_session_and_stats(clock: Any) -> None:
    service = GameService(":memory:", duration=30, bank=_bank(), clock=clock)
    session = service.start_session("  alice ")
    assert session.username == "alice"
    assert len(session.questions) == 3
    assert session.register is service.register
    session.submit(session.current_question.expected[0])

    stats = service.finish_session(session)
    assert stats.times_played == 1
    assert stats.highest_score == 1
    assert service.finish_session(session) == stats
    assert service.player_stats("alice") == stats
    assert [item.username for item in service.leaderboard()] == ["alice"]
    service.close()


def test_service_new_session_resets_register(clock: Any) -> None:
    service = GameService(":memory:", bank=_bank(), clock=clock)
    service.register.line = "stale"
    session = service.start_session("bob", count=2)
    assert len(session.questions) == 2
    assert service.register.line is None
    service.close()


def test_service_requires_username(clock: Any) -> None:
    service = GameService(":memory:", bank=_bank(), clock=clock)
    with pytest.raises(ValueError):
        service.start_session("  ")
    service.close()


def test_service_loads_bundled_bank_by_default() -> None:
    service = GameService(":memory:")
    assert len(service.bank.questions) == 19
    service.close()

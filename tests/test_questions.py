import random

from vimarcade.models import Question
from vimarcade.questions import bundled_questions, is_correct, pick_random

CATALOG = [Question(id=f"q{idx}", prompt=f"prompt {idx}", expected=("dd",)) for idx in range(5)]


def test_pick_random_defaults_to_full_catalog() -> None:
    picked = pick_random()
    assert len(picked) == len(bundled_questions())
    assert {question.id for question in picked} == {question.id for question in bundled_questions()}


def test_pick_random_prefix_without_replacement() -> None:
    picked = pick_random(3, questions=CATALOG, rng=random.Random(7))
    assert len(picked) == 3
    assert len({question.id for question in picked}) == 3


def test_pick_random_count_larger_than_catalog() -> None:
    picked = pick_random(50, questions=CATALOG, rng=random.Random(1))
    assert sorted(question.id for question in picked) == [question.id for question in CATALOG]


def test_pick_random_non_positive_count() -> None:
    assert pick_random(0, questions=CATALOG) == []
    assert pick_random(-2, questions=CATALOG) == []


def test_pick_random_is_deterministic_for_seeded_rng() -> None:
    first = pick_random(questions=CATALOG, rng=random.Random(42))
    second = pick_random(questions=CATALOG, rng=random.Random(42))
    assert first == second


def test_pick_random_does_not_reorder_source() -> None:
    source = list(CATALOG)
    pick_random(questions=source, rng=random.Random(3))
    assert source == CATALOG


def test_is_correct_exact_membership() -> None:
    question = Question(id="yp", prompt="Duplicate", expected=("yy p", "yyp"))
    assert is_correct(question, "yy p") is True
    assert is_correct(question, "yyp") is True
    assert is_correct(question, " yy p") is False
    assert is_correct(question, "YY P") is False

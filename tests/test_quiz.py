# tests/test_quiz.py
import random
from collections import Counter

import pytest

from cpce_prep.db import get_connection, init_db
from cpce_prep.exam_config import content_area_ids
from cpce_prep.exceptions import ValidationError
from cpce_prep.quiz import (
    count_questions, get_chapters, get_practice_questions, get_question_counts_by_domain,
    get_question_with_answer, get_quizplus_questions, get_section_questions,
    get_simulation_questions,
)


def test_get_practice_questions(db, add_question):
    ids = {add_question() for _ in range(30)}
    questions = get_practice_questions(db, count=10, rng=random.Random(1))
    assert len(questions) == 10
    assert {q["id"] for q in questions} <= ids


def test_practice_default_count(db, add_question):
    for _ in range(25):
        add_question()
    assert len(get_practice_questions(db)) == 20


@pytest.mark.parametrize("count", [0, 1, 5, 12, 50])
def test_practice_returns_min_of_count_and_pool(db, add_question, count):
    for _ in range(12):
        add_question()
    questions = get_practice_questions(db, count=count, rng=random.Random(count))
    assert len(questions) == min(count, 12)
    assert len({q["id"] for q in questions}) == len(questions)


def test_practice_excludes_ai_generated(db, add_question):
    book = {add_question() for _ in range(5)}
    for _ in range(5):
        add_question(ai=True)
    questions = get_practice_questions(db, count=100)
    assert {q["id"] for q in questions} == book


def test_practice_empty_bank(tmp_db):
    init_db(tmp_db)
    assert get_practice_questions(tmp_db, count=10) == []


def test_negative_count_rejected(db):
    with pytest.raises(ValidationError):
        get_practice_questions(db, count=-1)


def test_selection_never_leaks_answer_key(db, add_question):
    for _ in range(3):
        add_question()
    for q in get_practice_questions(db, count=3):
        assert set(q) == {"id", "question_text", "options", "domain", "chapter"}
        assert [o["label"] for o in q["options"]] == ["a", "b", "c", "d"]


def test_injected_rng_makes_selection_repeatable(db, add_question):
    for _ in range(20):
        add_question()
    first = get_practice_questions(db, count=10, rng=random.Random(42))
    second = get_practice_questions(db, count=10, rng=random.Random(42))
    assert [q["id"] for q in first] == [q["id"] for q in second]


def test_get_section_questions_filters_by_domain(db, fill_bank):
    bank = fill_bank(4)
    questions = get_section_questions(db, "career-development", count=10)
    assert len(questions) == 4
    assert all(q["domain"] == "career-development" for q in questions)
    assert {q["id"] for q in questions} == set(bank["career-development"])


def test_get_section_questions_excludes_ai(db, add_question):
    add_question(domain="group-counseling", ai=True)
    assert get_section_questions(db, "group-counseling") == []


def test_get_section_questions_invalid_domain(db):
    with pytest.raises(ValidationError):
        get_section_questions(db, "astrology", count=5)


def test_simulation_takes_quota_per_area(db, fill_bank):
    fill_bank(22)
    questions = get_simulation_questions(db, rng=random.Random(7))
    assert len(questions) == 160
    assert len({q["id"] for q in questions}) == 160
    per_domain = Counter(q["domain"] for q in questions)
    assert per_domain == {domain: 20 for domain in content_area_ids()}


def test_simulation_interleaves_areas(db, fill_bank):
    fill_bank(20)
    questions = get_simulation_questions(db, rng=random.Random(3))
    first_block = {q["domain"] for q in questions[:20]}
    assert len(first_block) > 1


def test_simulation_with_empty_area(db, fill_bank):
    """An area with no questions contributes nothing rather than failing."""
    fill_bank(20)
    conn = get_connection(db)
    conn.execute("DELETE FROM questions WHERE domain = ?", ("career-development",))
    conn.commit()
    conn.close()
    questions = get_simulation_questions(db)
    assert len(questions) == 140
    assert "career-development" not in {q["domain"] for q in questions}


def test_quizplus_only_ai_generated(db, add_question):
    for _ in range(3):
        add_question()
    ai_ids = {add_question(ai=True) for _ in range(4)}
    questions = get_quizplus_questions(db)
    assert {q["id"] for q in questions} == ai_ids


def test_get_question_with_answer(db, add_question):
    qid = add_question(correct="c", explanation="C is right", chapter="Ethics")
    question = get_question_with_answer(db, qid)
    assert question["id"] == qid
    assert question["correct_answer"] == "c"
    assert question["explanation"] == "C is right"
    assert question["chapter"] == "Ethics"


def test_get_question_with_answer_missing(db):
    assert get_question_with_answer(db, 999) is None


def test_counting_and_grouping(db, add_question):
    add_question(domain="career-development", chapter="Career")
    add_question(domain="career-development", chapter="Career")
    add_question(domain="group-counseling", chapter="Groups")
    add_question(domain="group-counseling", chapter="Generated", ai=True)
    assert count_questions(db) == 3
    assert count_questions(db, include_ai=True) == 4
    assert count_questions(db, domain="group-counseling") == 1
    assert get_question_counts_by_domain(db) == {"career-development": 2, "group-counseling": 1}
    assert get_chapters(db) == ["Career", "Groups"]

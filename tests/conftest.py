import pytest

from cpce_prep.db import get_connection, init_db
from cpce_prep.exam_config import content_area_ids
from cpce_prep.seed import seed_content_areas


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_prep.db")
    return db_path


@pytest.fixture
def db(tmp_db):
    """Initialized database with content areas but no questions."""
    init_db(tmp_db)
    seed_content_areas(tmp_db)
    return tmp_db


@pytest.fixture
def add_question(db):
    """Insert a question and return its id."""
    counter = {"n": 0}

    def _add(domain="professional-orientation", correct="a", ai=False, chapter="Chapter 1",
             text=None, explanation="Because."):
        counter["n"] += 1
        conn = get_connection(db)
        cursor = conn.execute(
            """INSERT INTO questions
            (question_text, choice_a, choice_b, choice_c, choice_d, correct_answer, explanation,
             domain, chapter, page_number, question_number, is_ai_generated, source_type)
            VALUES (?, 'Option A', 'Option B', 'Option C', 'Option D', ?, ?, ?, ?, ?, ?, ?, ?)""",
            (text or f"Question {counter['n']}?", correct, explanation, domain, chapter,
             counter["n"], counter["n"], int(ai), "ai" if ai else "book"),
        )
        conn.commit()
        question_id = cursor.lastrowid
        conn.close()
        return question_id

    return _add


@pytest.fixture
def fill_bank(add_question):
    """Add ``per_domain`` book questions to every content area; returns ids by domain."""
    def _fill(per_domain):
        return {
            domain: [add_question(domain=domain, correct="abcd"[i % 4]) for i in range(per_domain)]
            for domain in content_area_ids()
        }

    return _fill

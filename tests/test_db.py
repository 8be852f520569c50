"""Tests for database initialization and connection management."""
import sqlite3

import pytest

from cpce_prep.db import init_db, get_connection


def test_init_db_creates_tables(tmp_db):
    init_db(tmp_db)
    conn = get_connection(tmp_db)
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
    )
    tables = {row[0] for row in cursor.fetchall()}
    expected = {
        "content_areas", "questions", "quiz_sessions", "quiz_answers",
        "user_stats", "user_domain_stats",
    }
    assert expected.issubset(tables)
    conn.close()


def test_init_db_is_idempotent(tmp_db):
    init_db(tmp_db)
    init_db(tmp_db)  # should not raise
    conn = get_connection(tmp_db)
    cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
    assert len(cursor.fetchall()) > 0
    conn.close()


def test_init_db_creates_parent_directory(tmp_path):
    db_path = str(tmp_path / "nested" / "dir" / "prep.db")
    init_db(db_path)
    assert (tmp_path / "nested" / "dir" / "prep.db").exists()


def test_get_connection_returns_row_factory(db):
    conn = get_connection(db)
    row = conn.execute("SELECT id, short_name FROM content_areas WHERE id = 'career-development'").fetchone()
    assert row["short_name"] == "Career"
    conn.close()


def test_correct_answer_must_be_an_option_label(db):
    conn = get_connection(db)
    with pytest.raises(sqlite3.IntegrityError):
        conn.execute(
            """INSERT INTO questions
            (question_text, choice_a, choice_b, choice_c, choice_d, correct_answer, domain)
            VALUES ('Q?', 'A', 'B', 'C', 'D', 'e', 'career-development')"""
        )
    conn.close()


def test_deleting_session_cascades_to_answers(db, add_question):
    qid = add_question()
    conn = get_connection(db)
    conn.execute(
        "INSERT INTO quiz_sessions (id, user_id, mode, started_at, total_questions) "
        "VALUES (1, 'u1', 'practice', '2026-01-01T10:00:00', 1)"
    )
    conn.execute(
        "INSERT INTO quiz_answers (session_id, question_id, selected_answer, is_correct) VALUES (1, ?, 'a', 1)",
        (qid,),
    )
    conn.commit()
    conn.execute("DELETE FROM quiz_sessions WHERE id = 1")
    conn.commit()
    assert conn.execute("SELECT COUNT(*) FROM quiz_answers").fetchone()[0] == 0
    conn.close()


def test_negative_session_time_is_rejected(db):
    conn = get_connection(db)
    with pytest.raises(sqlite3.IntegrityError):
        conn.execute(
            "INSERT INTO quiz_sessions (user_id, mode, started_at, total_questions, time_spent) "
            "VALUES ('u1', 'practice', '2026-01-01T10:00:00', 1, -5)"
        )
    conn.close()

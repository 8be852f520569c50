"""Quiz session lifecycle: open, answer, complete, delete."""
import logging
import math
import sqlite3
from datetime import datetime

from cpce_prep.db import get_connection
from cpce_prep.exam_config import is_valid_content_area, is_valid_mode
from cpce_prep.exceptions import DuplicateAnswerError, NotFoundError, ValidationError
from cpce_prep.models import OPTION_LABELS, Answer, QuizSession
from cpce_prep.stats import merge_session_stats, reverse_session_stats, tally_by_domain

logger = logging.getLogger(__name__)


def _check_time(seconds, field: str) -> None:
    if seconds is not None and seconds < 0:
        raise ValidationError(f"{field} must not be negative", details={field: seconds})


def normalize_label(label: str) -> str:
    normalized = (label or "").strip().lower()
    if normalized not in OPTION_LABELS:
        logger.warning("Rejected answer label %r", label)
        raise ValidationError("Invalid answer format. Must be a, b, c, or d", details={"label": label})
    return normalized


def create_quiz_session(
    db_path: str,
    user_id: str,
    mode: str,
    question_ids: list,
    section_filter: str | None = None,
) -> int:
    """Open a session for a batch of questions and return its id.

    Only the batch size is stored; the caller keeps the questions themselves.
    """
    if not is_valid_mode(mode):
        raise ValidationError(f"Invalid quiz mode: {mode}", details={"mode": mode})
    if section_filter is not None and not is_valid_content_area(section_filter):
        raise ValidationError(f"Invalid content area: {section_filter}", details={"domain": section_filter})
    conn = get_connection(db_path)
    cursor = conn.execute(
        """INSERT INTO quiz_sessions (user_id, mode, started_at, total_questions, section_filter)
        VALUES (?, ?, ?, ?, ?)""",
        (user_id, mode, datetime.now().isoformat(), len(question_ids), section_filter),
    )
    conn.commit()
    session_id = cursor.lastrowid
    conn.close()
    logger.info("Opened %s session %s for %s with %d questions", mode, session_id, user_id, len(question_ids))
    return session_id


def get_quiz_session(db_path: str, session_id: int) -> QuizSession | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM quiz_sessions WHERE id = ?", (session_id,)).fetchone()
    conn.close()
    return QuizSession.from_row(row) if row else None


def _load_answers(conn, session_id: int) -> list[Answer]:
    rows = conn.execute(
        """SELECT a.*, q.domain, q.correct_answer
        FROM quiz_answers a
        JOIN questions q ON a.question_id = q.id
        WHERE a.session_id = ?
        ORDER BY a.id""",
        (session_id,),
    ).fetchall()
    return [Answer.from_row(row) for row in rows]


def get_session_answers(db_path: str, session_id: int) -> list[Answer]:
    conn = get_connection(db_path)
    answers = _load_answers(conn, session_id)
    conn.close()
    return answers


def submit_answer(
    db_path: str,
    session_id: int,
    question_id: int,
    selected_answer: str,
    time_spent: int | None = None,
) -> dict:
    """Score one answer against the stored key and record it.

    Returns ``is_correct`` together with the key and explanation so the
    caller can show feedback right away.
    """
    selected = normalize_label(selected_answer)
    _check_time(time_spent, "time_spent")
    conn = get_connection(db_path)
    try:
        question = conn.execute(
            "SELECT correct_answer, explanation FROM questions WHERE id = ?", (question_id,)
        ).fetchone()
        if question is None:
            raise NotFoundError("Question", details={"question_id": question_id})
        session = conn.execute(
            "SELECT completed_at FROM quiz_sessions WHERE id = ?", (session_id,)
        ).fetchone()
        if session is None:
            raise NotFoundError("Quiz session", details={"session_id": session_id})
        if session["completed_at"] is not None:
            raise ValidationError("Quiz session is already completed", details={"session_id": session_id})

        is_correct = selected == question["correct_answer"]
        try:
            conn.execute(
                """INSERT INTO quiz_answers
                (session_id, question_id, selected_answer, is_correct, time_spent, answered_at)
                VALUES (?, ?, ?, ?, ?, ?)""",
                (session_id, question_id, selected, int(is_correct), time_spent, datetime.now().isoformat()),
            )
        except sqlite3.IntegrityError as e:
            if "UNIQUE" not in str(e):
                raise
            raise DuplicateAnswerError(session_id, question_id) from e
        conn.commit()
    finally:
        conn.close()
    return {
        "is_correct": is_correct,
        "correct_answer": question["correct_answer"],
        "explanation": question["explanation"] or "",
    }


def _build_result(session: QuizSession, answers: list[Answer]) -> dict:
    by_domain = tally_by_domain(answers)
    for counts in by_domain.values():
        counts["percentage"] = counts["correct"] / counts["attempted"] * 100
    score = (session.correct_count / session.total_questions * 100) if session.total_questions else 0.0
    return {
        "session_id": session.id,
        "total_questions": session.total_questions,
        "correct_count": session.correct_count,
        "score": score,
        "time_spent": session.time_spent,
        "answers": [
            {
                "question_id": a.question_id,
                "selected_answer": a.selected_answer,
                "correct_answer": a.correct_answer,
                "is_correct": a.is_correct,
            }
            for a in answers
        ],
        "by_domain": by_domain,
    }


def complete_quiz_session(db_path: str, session_id: int, total_time_spent: int | None = None) -> dict:
    """Close a session, fold its answers into the user's statistics, return the result.

    The session is read under a write lock, so concurrent completions run one
    after the other. The completion stamp and the statistics merge commit
    together. Completing an already completed session returns the stored
    result and leaves the statistics alone.
    """
    _check_time(total_time_spent, "total_time_spent")
    conn = get_connection(db_path)
    try:
        conn.execute("BEGIN IMMEDIATE")
        row = conn.execute("SELECT * FROM quiz_sessions WHERE id = ?", (session_id,)).fetchone()
        if row is None:
            raise NotFoundError("Quiz session", details={"session_id": session_id})
        session = QuizSession.from_row(row)
        answers = _load_answers(conn, session_id)

        if session.is_completed:
            logger.info("Session %s already completed at %s", session_id, session.completed_at)
            return _build_result(session, answers)

        now = datetime.now().isoformat()
        correct_count = sum(1 for a in answers if a.is_correct)
        conn.execute(
            """UPDATE quiz_sessions SET completed_at = ?, correct_count = ?, time_spent = ?
            WHERE id = ?""",
            (now, correct_count, total_time_spent, session_id),
        )
        merge_session_stats(conn, session.user_id, answers, now=now)
        conn.commit()
    finally:
        conn.close()

    session.completed_at = now
    session.correct_count = correct_count
    session.time_spent = total_time_spent
    logger.info(
        "Completed session %s: %d/%d correct", session_id, correct_count, session.total_questions
    )
    return _build_result(session, answers)


def delete_quiz_session(db_path: str, session_id: int, user_id: str) -> None:
    """Delete one of the user's sessions and take its answers back out of the statistics.

    Only completed sessions ever reached the statistics, so open ones are
    deleted without touching them. The lookup, reversal and delete share one
    write-locked transaction.
    """
    conn = get_connection(db_path)
    try:
        conn.execute("BEGIN IMMEDIATE")
        row = conn.execute(
            "SELECT * FROM quiz_sessions WHERE id = ? AND user_id = ?", (session_id, user_id)
        ).fetchone()
        if row is None:
            raise NotFoundError("Quiz session", details={"session_id": session_id})
        session = QuizSession.from_row(row)
        if session.is_completed:
            answers = _load_answers(conn, session_id)
            reverse_session_stats(conn, user_id, answers)
        conn.execute("DELETE FROM quiz_sessions WHERE id = ?", (session_id,))
        conn.commit()
    finally:
        conn.close()
    logger.info("Deleted session %s for %s", session_id, user_id)


def get_recent_sessions(db_path: str, user_id: str, limit: int = 10) -> list[dict]:
    """The user's latest sessions that have at least one answer, newest first."""
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT s.*, COUNT(a.id) as answer_count
        FROM quiz_sessions s
        JOIN quiz_answers a ON a.session_id = s.id
        WHERE s.user_id = ?
        GROUP BY s.id
        ORDER BY s.started_at DESC, s.id DESC
        LIMIT ?""",
        (user_id, limit),
    ).fetchall()
    conn.close()
    results = []
    for row in rows:
        session = QuizSession.from_row(row)
        # Half-up, so 12.5 shows as 13
        score = math.floor(session.correct_count / session.total_questions * 100 + 0.5) if session.total_questions else 0
        results.append({
            "id": session.id,
            "mode": session.mode,
            "started_at": session.started_at,
            "completed_at": session.completed_at,
            "total_questions": session.total_questions,
            "correct_count": session.correct_count,
            "section_filter": session.section_filter,
            "time_spent": session.time_spent,
            "answer_count": row["answer_count"],
            "score": score,
        })
    return results

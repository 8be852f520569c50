"""Question selection for the quiz modes."""
import logging
import random

from cpce_prep.db import get_connection
from cpce_prep.exam_config import CONTENT_AREAS, default_question_count, is_valid_content_area
from cpce_prep.exceptions import ValidationError
from cpce_prep.models import Question

logger = logging.getLogger(__name__)


def _shuffled(items: list, rng=None) -> list:
    """Return a uniformly shuffled copy of ``items``."""
    shuffled = list(items)
    (rng or random).shuffle(shuffled)
    return shuffled


def validate_count(count: int) -> None:
    if count < 0:
        logger.warning("Rejected negative question count %s", count)
        raise ValidationError("Question count must not be negative", details={"count": count})


def validate_domain(domain: str) -> None:
    if not is_valid_content_area(domain):
        logger.warning("Rejected unknown content area %r", domain)
        raise ValidationError(f"Invalid content area: {domain}", details={"domain": domain})


def fetch_pool(db_path: str, domain: str | None = None, ai_generated: bool = False) -> list[Question]:
    conn = get_connection(db_path)
    if domain is None:
        rows = conn.execute(
            "SELECT * FROM questions WHERE is_ai_generated = ? ORDER BY id",
            (int(ai_generated),),
        ).fetchall()
    else:
        rows = conn.execute(
            "SELECT * FROM questions WHERE domain = ? AND is_ai_generated = ? ORDER BY id",
            (domain, int(ai_generated)),
        ).fetchall()
    conn.close()
    return [Question.from_row(row) for row in rows]


def sample_questions(pool: list[Question], count: int, rng=None) -> list[Question]:
    return _shuffled(pool, rng)[:count]


def get_practice_questions(db_path: str, count: int | None = None, rng=None) -> list[dict]:
    """Random book questions from every content area.

    Returns at most ``count`` questions; fewer when the bank is smaller.
    """
    if count is None:
        count = default_question_count("practice")
    validate_count(count)
    pool = fetch_pool(db_path)
    return [q.to_public() for q in sample_questions(pool, count, rng)]


def get_section_questions(db_path: str, domain: str, count: int | None = None, rng=None) -> list[dict]:
    """Random book questions from a single content area."""
    validate_domain(domain)
    if count is None:
        count = default_question_count("section")
    validate_count(count)
    pool = fetch_pool(db_path, domain=domain)
    return [q.to_public() for q in sample_questions(pool, count, rng)]


def get_simulation_questions(db_path: str, rng=None) -> list[dict]:
    """Full exam: each content area's quota, interleaved.

    Areas are sampled in their fixed order and the concatenation is shuffled
    again so areas do not appear in blocks.
    """
    selected: list[Question] = []
    for area in CONTENT_AREAS:
        pool = fetch_pool(db_path, domain=area.id)
        picked = sample_questions(pool, area.total_questions, rng)
        if len(picked) < area.total_questions:
            logger.warning(
                "Content area %s has %d questions, quota is %d",
                area.id, len(picked), area.total_questions,
            )
        selected.extend(picked)
    return [q.to_public() for q in _shuffled(selected, rng)]


def get_quizplus_questions(db_path: str, count: int | None = None, rng=None) -> list[dict]:
    """Random machine-generated questions; the only mode that serves them."""
    if count is None:
        count = default_question_count("quizplus")
    validate_count(count)
    pool = fetch_pool(db_path, ai_generated=True)
    return [q.to_public() for q in sample_questions(pool, count, rng)]


def get_question(db_path: str, question_id: int) -> Question | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM questions WHERE id = ?", (question_id,)).fetchone()
    conn.close()
    return Question.from_row(row) if row else None


def get_question_with_answer(db_path: str, question_id: int) -> dict | None:
    """Full question including answer key, or None when it does not exist."""
    question = get_question(db_path, question_id)
    return question.to_dict() if question else None


def count_questions(db_path: str, domain: str | None = None, include_ai: bool = False) -> int:
    conn = get_connection(db_path)
    sql = "SELECT COUNT(*) FROM questions WHERE 1 = 1"
    params: list = []
    if not include_ai:
        sql += " AND is_ai_generated = 0"
    if domain is not None:
        sql += " AND domain = ?"
        params.append(domain)
    count = conn.execute(sql, params).fetchone()[0]
    conn.close()
    return count


def get_question_counts_by_domain(db_path: str) -> dict[str, int]:
    """Book question counts per content area (areas with none are omitted)."""
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT domain, COUNT(*) as total FROM questions
        WHERE is_ai_generated = 0
        GROUP BY domain"""
    ).fetchall()
    conn.close()
    return {row["domain"]: row["total"] for row in rows}


def get_chapters(db_path: str) -> list[str]:
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT DISTINCT chapter FROM questions
        WHERE is_ai_generated = 0 AND chapter IS NOT NULL AND chapter != ''
        ORDER BY chapter"""
    ).fetchall()
    conn.close()
    return [row["chapter"] for row in rows]

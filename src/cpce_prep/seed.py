"""Seed the database with content areas and the question bank."""
import json
import logging
from pathlib import Path

from cpce_prep.db import get_connection
from cpce_prep.exam_config import CONTENT_AREAS, is_valid_content_area
from cpce_prep.exceptions import ValidationError
from cpce_prep.models import OPTION_LABELS

CONTENT_DIR = Path(__file__).parent / "content"
DEFAULT_QUESTIONS_FILE = CONTENT_DIR / "questions.json"

logger = logging.getLogger(__name__)


def is_seeded(db_path: str) -> bool:
    """Check whether the question bank has been loaded."""
    conn = get_connection(db_path)
    count = conn.execute("SELECT COUNT(*) FROM questions").fetchone()[0]
    conn.close()
    return count > 0


def seed_content_areas(db_path: str) -> None:
    """Insert the 8 content areas, keeping their exam order."""
    conn = get_connection(db_path)
    for position, area in enumerate(CONTENT_AREAS, 1):
        conn.execute(
            """INSERT OR IGNORE INTO content_areas
            (id, name, short_name, position, total_questions, scored_questions)
            VALUES (?, ?, ?, ?, ?, ?)""",
            (area.id, area.name, area.short_name, position, area.total_questions, area.scored_questions),
        )
    conn.commit()
    conn.close()


def _question_params(item: dict) -> tuple:
    options = {opt["label"].lower(): opt["text"] for opt in item["options"]}
    if set(options) != set(OPTION_LABELS):
        raise ValidationError("Question must have exactly options a-d", details={"question": item.get("id")})
    correct = item["correct_answer"].strip().lower()
    if correct not in options:
        raise ValidationError("Correct answer is not one of the options", details={"question": item.get("id")})
    topic = item["topic"]
    if not is_valid_content_area(topic):
        raise ValidationError(f"Invalid content area: {topic}", details={"question": item.get("id")})
    return (
        item["question_text"],
        options["a"], options["b"], options["c"], options["d"],
        correct,
        item.get("explanation") or "",
        topic,
        item.get("chapter") or "",
        item.get("section") or "",
        item.get("page_number"),
        item.get("question_number"),
        int(bool(item.get("is_ai_generated", False))),
        item.get("source_type") or "book",
    )


def seed_questions(db_path: str, path: str | Path | None = None, force: bool = False) -> int:
    """Load questions from a JSON list; returns how many were inserted.

    Skips when the bank is already loaded unless ``force``, which first clears
    recorded answers and the existing questions.
    """
    path = Path(path) if path else DEFAULT_QUESTIONS_FILE
    items = json.loads(path.read_text())
    params = [_question_params(item) for item in items]

    conn = get_connection(db_path)
    try:
        existing = conn.execute("SELECT COUNT(*) FROM questions").fetchone()[0]
        if existing:
            if not force:
                logger.info("Question bank already has %d questions, skipping seed", existing)
                return 0
            logger.info("Force reseed: deleting %d existing questions", existing)
            conn.execute("DELETE FROM quiz_answers")
            conn.execute("DELETE FROM questions")
        conn.executemany(
            """INSERT INTO questions
            (question_text, choice_a, choice_b, choice_c, choice_d, correct_answer, explanation,
             domain, chapter, section, page_number, question_number, is_ai_generated, source_type)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            params,
        )
        conn.commit()
    finally:
        conn.close()
    logger.info("Seeded %d questions from %s", len(params), path)
    return len(params)


def seed_all(db_path: str, questions_file: str | Path | None = None) -> None:
    """Run all seed functions in order."""
    seed_content_areas(db_path)
    if is_seeded(db_path):
        return
    seed_questions(db_path, questions_file)

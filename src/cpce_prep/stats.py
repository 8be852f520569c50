"""Lifetime per-user statistics, kept incrementally.

Counters change only through SQL increments/decrements on the caller's
connection, so a merge or reversal is a single unit of work inside the
caller's transaction. Reversal clamps at zero; it is a compensating update,
not an exact undo.
"""
import logging
from datetime import date, datetime

from cpce_prep.db import get_connection
from cpce_prep.models import DomainStats, UserStats

logger = logging.getLogger(__name__)


def tally_by_domain(answers) -> dict[str, dict]:
    """Count attempted/correct per domain.

    ``answers`` are mappings or objects exposing ``domain`` and ``is_correct``.
    Answers without a domain are skipped.
    """
    tally: dict[str, dict] = {}
    for answer in answers:
        domain = _field(answer, "domain")
        if domain is None:
            continue
        entry = tally.setdefault(domain, {"attempted": 0, "correct": 0})
        entry["attempted"] += 1
        if _field(answer, "is_correct"):
            entry["correct"] += 1
    return tally


def _field(answer, name):
    if isinstance(answer, dict):
        return answer.get(name)
    return getattr(answer, name)


def merge_session_stats(conn, user_id: str, answers, now: str | None = None) -> None:
    """Add one completed session's answers to the user's aggregate. Does not commit."""
    answers = list(answers)
    now = now or datetime.now().isoformat()
    correct = sum(1 for a in answers if _field(a, "is_correct"))
    conn.execute(
        """INSERT INTO user_stats (user_id, total_questions_answered, total_correct, last_studied_at)
        VALUES (?, ?, ?, ?)
        ON CONFLICT(user_id) DO UPDATE SET
            total_questions_answered = total_questions_answered + excluded.total_questions_answered,
            total_correct = total_correct + excluded.total_correct,
            last_studied_at = excluded.last_studied_at""",
        (user_id, len(answers), correct, now),
    )
    for domain, counts in tally_by_domain(answers).items():
        conn.execute(
            """INSERT INTO user_domain_stats (user_id, domain, attempted, correct)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(user_id, domain) DO UPDATE SET
                attempted = attempted + excluded.attempted,
                correct = correct + excluded.correct""",
            (user_id, domain, counts["attempted"], counts["correct"]),
        )
    logger.debug("Merged %d answers (%d correct) into stats for %s", len(answers), correct, user_id)


def reverse_session_stats(conn, user_id: str, answers) -> bool:
    """Subtract a session's answers from the aggregate, clamped at zero. Does not commit.

    Returns False when the user has no statistics yet.
    """
    answers = list(answers)
    exists = conn.execute("SELECT 1 FROM user_stats WHERE user_id = ?", (user_id,)).fetchone()
    if not exists or not answers:
        return False
    correct = sum(1 for a in answers if _field(a, "is_correct"))
    conn.execute(
        """UPDATE user_stats SET
            total_questions_answered = MAX(0, total_questions_answered - ?),
            total_correct = MAX(0, total_correct - ?)
        WHERE user_id = ?""",
        (len(answers), correct, user_id),
    )
    for domain, counts in tally_by_domain(answers).items():
        conn.execute(
            """UPDATE user_domain_stats SET
                attempted = MAX(0, attempted - ?),
                correct = MAX(0, correct - ?)
            WHERE user_id = ? AND domain = ?""",
            (counts["attempted"], counts["correct"], user_id, domain),
        )
    logger.debug("Reversed %d answers (%d correct) from stats for %s", len(answers), correct, user_id)
    return True


def get_user_stats(db_path: str, user_id: str) -> UserStats:
    """The user's aggregate; an all-zero record when they have none."""
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM user_stats WHERE user_id = ?", (user_id,)).fetchone()
    domain_rows = conn.execute(
        "SELECT domain, attempted, correct FROM user_domain_stats WHERE user_id = ? ORDER BY domain",
        (user_id,),
    ).fetchall()
    conn.close()
    if row is None:
        return UserStats(user_id=user_id)
    return UserStats(
        user_id=user_id,
        total_questions_answered=row["total_questions_answered"],
        total_correct=row["total_correct"],
        stats_by_domain={
            r["domain"]: DomainStats(attempted=r["attempted"], correct=r["correct"])
            for r in domain_rows
        },
        last_studied_at=row["last_studied_at"],
    )


def get_overall_accuracy(db_path: str, user_id: str) -> float:
    return get_user_stats(db_path, user_id).accuracy


def calc_streak(completed_dates: list[date], today: date | None = None) -> int:
    """Consecutive days with a completed session, ending today or yesterday."""
    today = today or date.today()
    days = sorted(set(completed_dates), reverse=True)
    if not days or (today - days[0]).days > 1:
        return 0
    streak = 1
    for previous, current in zip(days, days[1:]):
        if (previous - current).days != 1:
            break
        streak += 1
    return streak


def get_streak(db_path: str, user_id: str, today: date | None = None) -> int:
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT completed_at FROM quiz_sessions
        WHERE user_id = ? AND completed_at IS NOT NULL""",
        (user_id,),
    ).fetchall()
    conn.close()
    dates = [datetime.fromisoformat(r["completed_at"]).date() for r in rows]
    return calc_streak(dates, today=today)

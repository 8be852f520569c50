"""Question bank browsing and weak area identification."""
import math

from cpce_prep.db import get_connection
from cpce_prep.exam_config import CONTENT_AREAS, get_content_area
from cpce_prep.exceptions import ValidationError
from cpce_prep.models import Question
from cpce_prep.quiz import validate_domain, get_chapters
from cpce_prep.stats import get_user_stats


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def browse_questions(
    db_path: str,
    domain: str | None = None,
    chapter: str | None = None,
    search: str | None = None,
    page: int = 1,
    limit: int = 20,
) -> dict:
    """One page of book questions with their answers, in chapter order."""
    if domain is not None:
        validate_domain(domain)
    if page < 1 or limit < 1:
        raise ValidationError("page and limit must be positive", details={"page": page, "limit": limit})

    where = "WHERE is_ai_generated = 0"
    params: list = []
    if domain:
        where += " AND domain = ?"
        params.append(domain)
    if chapter:
        where += " AND chapter = ?"
        params.append(chapter)
    if search:
        where += " AND LOWER(question_text) LIKE ? ESCAPE '\\'"
        params.append(f"%{_escape_like(search.lower())}%")

    conn = get_connection(db_path)
    total_count = conn.execute(f"SELECT COUNT(*) FROM questions {where}", params).fetchone()[0]
    rows = conn.execute(
        f"""SELECT * FROM questions {where}
        ORDER BY chapter ASC, question_number ASC, id ASC
        LIMIT ? OFFSET ?""",
        params + [limit, (page - 1) * limit],
    ).fetchall()
    conn.close()

    questions = []
    for row in rows:
        q = Question.from_row(row)
        item = q.to_dict()
        item["page_number"] = q.page_number
        item["question_number"] = q.question_number
        questions.append(item)

    return {
        "questions": questions,
        "pagination": {
            "page": page,
            "limit": limit,
            "total_count": total_count,
            "total_pages": math.ceil(total_count / limit),
        },
        "filters": {
            "available_chapters": get_chapters(db_path),
            "available_domains": [{"id": a.id, "name": a.short_name} for a in CONTENT_AREAS],
        },
    }


def get_weak_domains(db_path: str, user_id: str, threshold: float = 70.0) -> list[dict]:
    """Attempted domains whose lifetime accuracy is below threshold (worst first)."""
    stats = get_user_stats(db_path, user_id)
    weak = []
    for domain, ds in stats.stats_by_domain.items():
        if not ds.attempted or ds.percentage >= threshold:
            continue
        area = get_content_area(domain)
        weak.append({
            "domain": domain,
            "domain_name": area.name if area else domain,
            "attempted": ds.attempted,
            "correct": ds.correct,
            "score": round(ds.percentage, 1),
        })
    weak.sort(key=lambda w: w["score"])
    return weak

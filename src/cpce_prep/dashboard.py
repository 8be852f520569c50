"""Progress dashboard scoring and statistics."""
from cpce_prep.exam_config import CONTENT_AREAS, FAIR_SCORE, PASSING_SCORE, STRONG_SCORE
from cpce_prep.sessions import get_recent_sessions
from cpce_prep.stats import get_streak, get_user_stats


def get_score_label(score: float) -> str:
    if score >= STRONG_SCORE:
        return "STRONG"
    elif score >= FAIR_SCORE:
        return "FAIR"
    return "NEEDS WORK"


def get_score_color(score: float) -> str:
    if score >= STRONG_SCORE:
        return "green"
    elif score >= FAIR_SCORE:
        return "yellow"
    return "red"


def is_passing(score: float) -> bool:
    return score >= PASSING_SCORE


def get_domain_scores(db_path: str, user_id: str) -> list[dict]:
    """One row per content area in exam order, attempted or not."""
    stats = get_user_stats(db_path, user_id)
    results = []
    for area in CONTENT_AREAS:
        ds = stats.stats_by_domain.get(area.id)
        attempted = ds.attempted if ds else 0
        correct = ds.correct if ds else 0
        score = ds.percentage if ds else 0.0
        results.append({
            "domain": area.id,
            "name": area.name,
            "short_name": area.short_name,
            "attempted": attempted,
            "correct": correct,
            "score": round(score, 1),
            "label": get_score_label(score) if attempted else "NOT STARTED",
        })
    return results


def get_dashboard(db_path: str, user_id: str) -> dict:
    stats = get_user_stats(db_path, user_id)
    return {
        "total_questions_answered": stats.total_questions_answered,
        "total_correct": stats.total_correct,
        "overall_accuracy": round(stats.accuracy),
        "domain_scores": get_domain_scores(db_path, user_id),
        "last_studied_at": stats.last_studied_at,
        "streak": get_streak(db_path, user_id),
        "recent_sessions": get_recent_sessions(db_path, user_id),
    }

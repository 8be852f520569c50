"""CPCE exam configuration: content areas, quiz modes and score bands."""
from cpce_prep.models import ContentArea

EXAM = {
    "exam": "CPCE",
    "full_name": "Counselor Preparation Comprehensive Examination",
    "total_questions": 160,
    "scored_questions": 136,
    "unscored_questions": 24,
    "time_limit_minutes": 225,
    "time_limit_seconds": 225 * 60,
    "max_score": 136,
    "passing_score_default": 90,
}

# Order matters: simulation builds its per-area slices in this order.
CONTENT_AREAS = (
    ContentArea("professional-orientation",
                "Professional Counseling Orientation and Ethical Practice",
                "Professional Orientation"),
    ContentArea("social-cultural-diversity", "Social and Cultural Diversity", "Diversity"),
    ContentArea("human-growth-development", "Human Growth and Development", "Human Development"),
    ContentArea("career-development", "Career Development", "Career"),
    ContentArea("counseling-helping-relationships", "Counseling and Helping Relationships",
                "Counseling Relationships"),
    ContentArea("group-counseling", "Group Counseling and Group Work", "Group Work"),
    ContentArea("assessment-testing", "Assessment and Testing", "Assessment"),
    ContentArea("research-program-evaluation", "Research and Program Evaluation", "Research"),
)

QUIZ_MODES = {
    "practice": {
        "name": "Practice Quiz",
        "description": "Random questions from all content areas",
        "default_question_count": 20,
        "timed": False,
    },
    "section": {
        "name": "Section Quiz",
        "description": "Focus on a specific content area",
        "default_question_count": 20,
        "timed": False,
    },
    "simulation": {
        "name": "Exam Simulation",
        "description": "Full 160-question timed exam",
        "default_question_count": EXAM["total_questions"],
        "timed": True,
        "time_limit_minutes": EXAM["time_limit_minutes"],
    },
    "quizplus": {
        "name": "QuizPlus",
        "description": "AI-generated questions (98%+ confidence)",
        "default_question_count": 10,
        "timed": False,
    },
}

STRONG_SCORE = 80
FAIR_SCORE = 60
PASSING_SCORE = 66


def content_area_ids() -> list[str]:
    return [area.id for area in CONTENT_AREAS]


def get_content_area(area_id: str) -> ContentArea | None:
    for area in CONTENT_AREAS:
        if area.id == area_id:
            return area
    return None


def is_valid_content_area(area_id: str) -> bool:
    return get_content_area(area_id) is not None


def is_valid_mode(mode: str) -> bool:
    return mode in QUIZ_MODES


def default_question_count(mode: str) -> int:
    return QUIZ_MODES[mode]["default_question_count"]

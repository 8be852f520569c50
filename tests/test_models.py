"""Tests for data model classes."""
from cpce_prep.models import Answer, ContentArea, DomainStats, Question, QuizSession, UserStats


def make_question(**overrides):
    data = dict(
        id=1, question_text="What is counseling?",
        choice_a="A", choice_b="B", choice_c="C", choice_d="D",
        correct_answer="b", domain="professional-orientation",
        explanation="Because B", chapter="Professional Counseling",
    )
    data.update(overrides)
    return Question(**data)


def test_content_area_defaults():
    area = ContentArea("career-development", "Career Development", "Career")
    assert area.total_questions == 20
    assert area.scored_questions == 17


def test_question_options_are_labeled_in_order():
    q = make_question()
    assert q.options == [
        {"label": "a", "text": "A"},
        {"label": "b", "text": "B"},
        {"label": "c", "text": "C"},
        {"label": "d", "text": "D"},
    ]


def test_question_defaults():
    q = make_question(explanation="", chapter="")
    assert q.is_ai_generated is False
    assert q.source_type == "book"
    assert q.page_number is None


def test_to_public_hides_answer_key():
    public = make_question().to_public()
    assert set(public) == {"id", "question_text", "options", "domain", "chapter"}
    assert "correct_answer" not in public
    assert "explanation" not in public


def test_to_dict_includes_answer_key():
    full = make_question().to_dict()
    assert full["correct_answer"] == "b"
    assert full["explanation"] == "Because B"


def test_option_text():
    q = make_question()
    assert q.option_text("c") == "C"
    assert q.option_text("z") is None


def test_quiz_session_is_completed():
    s = QuizSession(id=1, user_id="u1", mode="practice", started_at="2026-01-01T10:00:00", total_questions=5)
    assert s.is_completed is False
    assert s.correct_count == 0
    s.completed_at = "2026-01-01T10:10:00"
    assert s.is_completed is True


def test_answer_defaults():
    a = Answer(id=1, session_id=1, question_id=2, selected_answer="a", is_correct=True)
    assert a.time_spent is None
    assert a.domain is None


def test_domain_stats_percentage():
    assert DomainStats(attempted=4, correct=1).percentage == 25.0
    assert DomainStats().percentage == 0.0


def test_user_stats_accuracy():
    assert UserStats(user_id="u1").accuracy == 0.0
    stats = UserStats(user_id="u1", total_questions_answered=3, total_correct=1)
    assert abs(stats.accuracy - 100 / 3) < 1e-9
    assert stats.stats_by_domain == {}

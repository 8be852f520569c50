"""Flashcards built from the book question bank."""
from cpce_prep.quiz import validate_count, validate_domain, fetch_pool, sample_questions


def get_flashcards(db_path: str, domain: str | None = None, count: int = 20, rng=None) -> list[dict]:
    """Random book questions turned into front/back cards.

    The back of a card is the text of the correct option.
    """
    if domain is not None:
        validate_domain(domain)
    validate_count(count)
    pool = fetch_pool(db_path, domain=domain)
    cards = []
    for q in sample_questions(pool, count, rng):
        cards.append({
            "id": q.id,
            "front": q.question_text,
            "back": q.option_text(q.correct_answer) or q.correct_answer,
            "explanation": q.explanation,
            "domain": q.domain,
            "chapter": q.chapter,
            "options": q.options,
            "correct_answer": q.correct_answer,
        })
    return cards

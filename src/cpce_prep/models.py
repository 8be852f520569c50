"""Data classes for the exam-prep domain model."""
from dataclasses import dataclass, field
from typing import Optional

OPTION_LABELS = ("a", "b", "c", "d")


@dataclass(frozen=True)
class ContentArea:
    id: str
    name: str
    short_name: str
    total_questions: int = 20
    scored_questions: int = 17


@dataclass
class Question:
    id: int
    question_text: str
    choice_a: str
    choice_b: str
    choice_c: str
    choice_d: str
    correct_answer: str
    domain: str
    explanation: str = ""
    chapter: str = ""
    section: str = ""
    page_number: Optional[int] = None
    question_number: Optional[int] = None
    is_ai_generated: bool = False
    source_type: str = "book"

    @classmethod
    def from_row(cls, row) -> "Question":
        return cls(
            id=row["id"],
            question_text=row["question_text"],
            choice_a=row["choice_a"],
            choice_b=row["choice_b"],
            choice_c=row["choice_c"],
            choice_d=row["choice_d"],
            correct_answer=row["correct_answer"],
            domain=row["domain"],
            explanation=row["explanation"] or "",
            chapter=row["chapter"] or "",
            section=row["section"] or "",
            page_number=row["page_number"],
            question_number=row["question_number"],
            is_ai_generated=bool(row["is_ai_generated"]),
            source_type=row["source_type"] or "book",
        )

    @property
    def options(self) -> list[dict]:
        choices = (self.choice_a, self.choice_b, self.choice_c, self.choice_d)
        return [{"label": label, "text": text} for label, text in zip(OPTION_LABELS, choices)]

    def option_text(self, label: str) -> Optional[str]:
        for option in self.options:
            if option["label"] == label:
                return option["text"]
        return None

    def to_public(self) -> dict:
        """Shape handed to a quiz taker: no answer key, no explanation."""
        return {
            "id": self.id,
            "question_text": self.question_text,
            "options": self.options,
            "domain": self.domain,
            "chapter": self.chapter,
        }

    def to_dict(self) -> dict:
        data = self.to_public()
        data["correct_answer"] = self.correct_answer
        data["explanation"] = self.explanation
        return data


@dataclass
class QuizSession:
    id: int
    user_id: str
    mode: str
    started_at: str
    total_questions: int
    completed_at: Optional[str] = None
    correct_count: int = 0
    section_filter: Optional[str] = None
    time_spent: Optional[int] = None

    @classmethod
    def from_row(cls, row) -> "QuizSession":
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            mode=row["mode"],
            started_at=row["started_at"],
            total_questions=row["total_questions"],
            completed_at=row["completed_at"],
            correct_count=row["correct_count"] or 0,
            section_filter=row["section_filter"],
            time_spent=row["time_spent"],
        )

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None


@dataclass
class Answer:
    id: int
    session_id: int
    question_id: int
    selected_answer: str
    is_correct: bool
    time_spent: Optional[int] = None
    answered_at: Optional[str] = None
    domain: Optional[str] = None  # joined from questions
    correct_answer: Optional[str] = None  # joined from questions

    @classmethod
    def from_row(cls, row) -> "Answer":
        keys = row.keys()
        return cls(
            id=row["id"],
            session_id=row["session_id"],
            question_id=row["question_id"],
            selected_answer=row["selected_answer"],
            is_correct=bool(row["is_correct"]),
            time_spent=row["time_spent"],
            answered_at=row["answered_at"],
            domain=row["domain"] if "domain" in keys else None,
            correct_answer=row["correct_answer"] if "correct_answer" in keys else None,
        )


@dataclass
class DomainStats:
    attempted: int = 0
    correct: int = 0

    @property
    def percentage(self) -> float:
        if not self.attempted:
            return 0.0
        return self.correct / self.attempted * 100


@dataclass
class UserStats:
    user_id: str
    total_questions_answered: int = 0
    total_correct: int = 0
    stats_by_domain: dict[str, DomainStats] = field(default_factory=dict)
    last_studied_at: Optional[str] = None

    @property
    def accuracy(self) -> float:
        if not self.total_questions_answered:
            return 0.0
        return self.total_correct / self.total_questions_answered * 100

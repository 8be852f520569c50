"""Database initialization and connection management."""
import sqlite3
from pathlib import Path

from cpce_prep.config import APP_DIR

DEFAULT_DB_PATH = str(APP_DIR / "prep.db")

SCHEMA = """
CREATE TABLE IF NOT EXISTS content_areas (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    short_name TEXT NOT NULL,
    position INTEGER NOT NULL,
    total_questions INTEGER NOT NULL,
    scored_questions INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS questions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    question_text TEXT NOT NULL,
    choice_a TEXT NOT NULL,
    choice_b TEXT NOT NULL,
    choice_c TEXT NOT NULL,
    choice_d TEXT NOT NULL,
    correct_answer TEXT NOT NULL CHECK (correct_answer IN ('a', 'b', 'c', 'd')),
    explanation TEXT DEFAULT '',
    domain TEXT NOT NULL REFERENCES content_areas(id),
    chapter TEXT DEFAULT '',
    section TEXT DEFAULT '',
    page_number INTEGER,
    question_number INTEGER,
    is_ai_generated INTEGER NOT NULL DEFAULT 0,
    source_type TEXT DEFAULT 'book'
);

CREATE INDEX IF NOT EXISTS idx_questions_domain ON questions(domain, is_ai_generated);

CREATE TABLE IF NOT EXISTS quiz_sessions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    mode TEXT NOT NULL CHECK (mode IN ('practice', 'section', 'simulation', 'quizplus')),
    started_at TEXT NOT NULL,
    completed_at TEXT,
    total_questions INTEGER NOT NULL,
    correct_count INTEGER DEFAULT 0,
    section_filter TEXT,
    time_spent INTEGER CHECK (time_spent IS NULL OR time_spent >= 0)
);

CREATE INDEX IF NOT EXISTS idx_quiz_sessions_user ON quiz_sessions(user_id, started_at);

CREATE TABLE IF NOT EXISTS quiz_answers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    session_id INTEGER NOT NULL REFERENCES quiz_sessions(id) ON DELETE CASCADE,
    question_id INTEGER NOT NULL REFERENCES questions(id),
    selected_answer TEXT NOT NULL,
    is_correct INTEGER NOT NULL,
    time_spent INTEGER,
    answered_at TEXT,
    UNIQUE(session_id, question_id)
);

CREATE TABLE IF NOT EXISTS user_stats (
    user_id TEXT PRIMARY KEY,
    total_questions_answered INTEGER NOT NULL DEFAULT 0,
    total_correct INTEGER NOT NULL DEFAULT 0,
    last_studied_at TEXT
);

CREATE TABLE IF NOT EXISTS user_domain_stats (
    user_id TEXT NOT NULL REFERENCES user_stats(user_id),
    domain TEXT NOT NULL,
    attempted INTEGER NOT NULL DEFAULT 0,
    correct INTEGER NOT NULL DEFAULT 0,
    PRIMARY KEY (user_id, domain)
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory and foreign keys enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()

"""SQLite-backed document store for resumes, generation audits and job descriptions."""

from __future__ import annotations

import json
import sqlite3
import uuid
from datetime import datetime
from pathlib import Path

from resume_builder.models.generation import GenerationRecord
from resume_builder.models.jobs import JobDescriptionRecord
from resume_builder.models.resume import ResumeDraft, ResumeSummary, SavedResume

DEFAULT_DB_PATH = Path.home() / ".resume-builder" / "resumes.db"


class ResumeStore:
    """Per-user document store; every query is scoped by ``user_id``."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS resumes (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    data_json TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_resumes_user ON resumes (user_id)")
            conn.execute("""
                CREATE TABLE IF NOT EXISTS resume_generations (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    original_json TEXT NOT NULL,
                    job_description TEXT NOT NULL,
                    generated_json TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS job_descriptions (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    content TEXT NOT NULL,
                    keywords_json TEXT NOT NULL,
                    requirements_json TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)

    # --- Saved resumes ---

    def create_resume(self, user_id: str, title: str, data: ResumeDraft) -> SavedResume:
        now = datetime.now()
        resume = SavedResume(
            id=str(uuid.uuid4()),
            user_id=user_id,
            title=title,
            data=data,
            created_at=now,
            updated_at=now,
        )
        with self._connect() as conn:
            conn.execute(
                """INSERT INTO resumes (id, user_id, title, data_json, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (
                    resume.id,
                    user_id,
                    title,
                    json.dumps(data.to_wire()),
                    now.isoformat(),
                    now.isoformat(),
                ),
            )
        return resume

    def list_resumes(self, user_id: str) -> list[ResumeSummary]:
        """Resumes for ``user_id``, most recently updated first."""
        with self._connect() as conn:
            rows = conn.execute(
                """SELECT id, title, created_at, updated_at FROM resumes
                   WHERE user_id = ? ORDER BY updated_at DESC""",
                (user_id,),
            ).fetchall()
        return [
            ResumeSummary(
                id=row[0],
                title=row[1],
                created_at=datetime.fromisoformat(row[2]),
                updated_at=datetime.fromisoformat(row[3]),
            )
            for row in rows
        ]

    def get_resume(self, user_id: str, resume_id: str) -> SavedResume | None:
        with self._connect() as conn:
            row = conn.execute(
                """SELECT id, user_id, title, data_json, created_at, updated_at
                   FROM resumes WHERE id = ? AND user_id = ?""",
                (resume_id, user_id),
            ).fetchone()
        return self._row_to_resume(row) if row else None

    def update_resume(
        self, user_id: str, resume_id: str, title: str, data: ResumeDraft
    ) -> SavedResume | None:
        now = datetime.now().isoformat()
        with self._connect() as conn:
            cursor = conn.execute(
                """UPDATE resumes SET title = ?, data_json = ?, updated_at = ?
                   WHERE id = ? AND user_id = ?""",
                (title, json.dumps(data.to_wire()), now, resume_id, user_id),
            )
        if cursor.rowcount == 0:
            return None
        return self.get_resume(user_id, resume_id)

    def delete_resume(self, user_id: str, resume_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM resumes WHERE id = ? AND user_id = ?",
                (resume_id, user_id),
            )
        return cursor.rowcount > 0

    # --- Generation audit ---

    def save_generation(self, record: GenerationRecord) -> None:
        with self._connect() as conn:
            conn.execute(
                """INSERT INTO resume_generations
                   (id, user_id, original_json, job_description, generated_json, created_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (
                    record.id,
                    record.user_id,
                    json.dumps(record.original_data.to_wire()),
                    record.job_description,
                    json.dumps(record.generated_content.to_wire()),
                    record.created_at.isoformat(),
                ),
            )

    def count_generations(self, user_id: str) -> int:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT COUNT(*) FROM resume_generations WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        return row[0]

    # --- Job descriptions ---

    def save_job_description(self, record: JobDescriptionRecord) -> None:
        with self._connect() as conn:
            conn.execute(
                """INSERT INTO job_descriptions
                   (id, user_id, content, keywords_json, requirements_json, created_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (
                    record.id,
                    record.user_id,
                    record.content,
                    json.dumps(record.keywords),
                    json.dumps(record.requirements),
                    record.created_at.isoformat(),
                ),
            )

    @staticmethod
    def _row_to_resume(row: tuple) -> SavedResume:
        return SavedResume(
            id=row[0],
            user_id=row[1],
            title=row[2],
            data=ResumeDraft.model_validate(json.loads(row[3])),
            created_at=datetime.fromisoformat(row[4]),
            updated_at=datetime.fromisoformat(row[5]),
        )

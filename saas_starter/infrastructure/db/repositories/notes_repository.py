from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import text

from saas_starter.application.ports.note_port import NotePort
from saas_starter.infrastructure.db.errors import translate_db_errors
from saas_starter.infrastructure.db.mappers.accounts_mapper import map_row_to_note


TAG = "notes-repository"

_NOTE_COLUMNS = "id, user_id, content, created_at, updated_at"


class SqlNotesRepository(NotePort):
    def __init__(self, engine):
        self._engine = engine

    def list_notes(self, *, user_id: str):
        sql = f"""
            SELECT {_NOTE_COLUMNS}
            FROM notes
            WHERE user_id = :user_id
            ORDER BY updated_at DESC, id
        """
        with translate_db_errors("Unable to get notes", metadata={"user_id": user_id}, tag=TAG):
            with self._engine.connect() as conn:
                rows = conn.execute(text(sql), {"user_id": user_id}).mappings().all()
        return [map_row_to_note(row) for row in rows]

    def create_note(self, *, user_id: str, content: str):
        note_id = str(uuid4())
        now = datetime.now(timezone.utc)
        with translate_db_errors("Unable to create the note", metadata={"user_id": user_id}, tag=TAG):
            with self._engine.begin() as conn:
                conn.execute(
                    text(
                        """
                        INSERT INTO notes (id, user_id, content, created_at, updated_at)
                        VALUES (:id, :user_id, :content, :created_at, :updated_at)
                        """
                    ),
                    {
                        "id": note_id,
                        "user_id": user_id,
                        "content": content,
                        "created_at": now,
                        "updated_at": now,
                    },
                )
                row = conn.execute(
                    text(f"SELECT {_NOTE_COLUMNS} FROM notes WHERE id = :id"),
                    {"id": note_id},
                ).mappings().one()
        return map_row_to_note(row)

    def update_note(self, *, note_id: str, user_id: str, content: str):
        metadata = {"id": note_id, "user_id": user_id}
        with translate_db_errors("Unable to update the note", metadata=metadata, tag=TAG):
            with self._engine.begin() as conn:
                result = conn.execute(
                    text(
                        """
                        UPDATE notes
                        SET content = :content,
                            updated_at = :updated_at
                        WHERE id = :id
                          AND user_id = :user_id
                        """
                    ),
                    {
                        "content": content,
                        "updated_at": datetime.now(timezone.utc),
                        "id": note_id,
                        "user_id": user_id,
                    },
                )
                if result.rowcount == 0:
                    return None
                row = conn.execute(
                    text(f"SELECT {_NOTE_COLUMNS} FROM notes WHERE id = :id"),
                    {"id": note_id},
                ).mappings().one()
        return map_row_to_note(row)

    def delete_note(self, *, note_id: str, user_id: str) -> bool:
        metadata = {"id": note_id, "user_id": user_id}
        with translate_db_errors("Unable to delete the note", metadata=metadata, tag=TAG):
            with self._engine.begin() as conn:
                result = conn.execute(
                    text("DELETE FROM notes WHERE id = :id AND user_id = :user_id"),
                    {"id": note_id, "user_id": user_id},
                )
        return result.rowcount > 0

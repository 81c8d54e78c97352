"""
SQLite-backed storage for demo chat sessions and their messages.

Sessions reference agents by id only. The catalog lives in a separate database,
so agent and domain names are joined in by the chat service.
"""

import logging
import sqlite3
import uuid
from typing import List, Optional

from agent_demo.models.chat import ChatMessage, ChatSession
from agent_demo.services.sqlite_support import (
    SQLiteRepository,
    parse_timestamp,
    utc_now,
)

logger = logging.getLogger(__name__)


class ChatRepository(SQLiteRepository):
    """Persistence for chat sessions and the messages exchanged in them."""

    SCHEMA_VERSION = 1

    def _initialize_schema(self, conn: sqlite3.Connection) -> None:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS chat_sessions (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                agent_id TEXT NOT NULL,
                started_at TEXT NOT NULL,
                ended_at TEXT,
                is_active INTEGER NOT NULL DEFAULT 1
            );
            CREATE INDEX IF NOT EXISTS idx_chat_sessions_user
                ON chat_sessions(user_id, started_at);
            CREATE INDEX IF NOT EXISTS idx_chat_sessions_active
                ON chat_sessions(user_id, agent_id, is_active);

            CREATE TABLE IF NOT EXISTS chat_messages (
                id TEXT PRIMARY KEY,
                session_id TEXT NOT NULL REFERENCES chat_sessions(id) ON DELETE CASCADE,
                message_type TEXT NOT NULL CHECK(message_type IN ('user', 'agent')),
                text TEXT NOT NULL,
                html TEXT,
                question_id TEXT,
                answer_id TEXT,
                created_at TEXT NOT NULL
            );
            CREATE INDEX IF NOT EXISTS idx_chat_messages_session
                ON chat_messages(session_id, created_at);

            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY,
                applied_at TEXT NOT NULL
            );
            """
        )
        conn.execute(
            "INSERT OR IGNORE INTO schema_version (version, applied_at) VALUES (?, ?)",
            (self.SCHEMA_VERSION, utc_now()),
        )

    def start_session(self, user_id: str, agent_id: str) -> ChatSession:
        """End the user's active sessions with this agent and open a new one."""
        session_id = str(uuid.uuid4())
        now = utc_now()

        def _start(conn: sqlite3.Connection) -> int:
            ended = conn.execute(
                """
                UPDATE chat_sessions SET is_active = 0, ended_at = ?
                WHERE user_id = ? AND agent_id = ? AND is_active = 1
                """,
                (now, user_id, agent_id),
            ).rowcount
            conn.execute(
                """
                INSERT INTO chat_sessions (id, user_id, agent_id, started_at, is_active)
                VALUES (?, ?, ?, ?, 1)
                """,
                (session_id, user_id, agent_id, now),
            )
            return ended

        ended = self._write(_start)
        if ended:
            logger.info(f"Ended {ended} earlier session(s) for agent {agent_id}")
        session = self.get_session(session_id)
        assert session is not None
        return session

    def get_session(self, session_id: str) -> Optional[ChatSession]:
        row = self._read(
            lambda conn: conn.execute(
                "SELECT * FROM chat_sessions WHERE id = ?", (session_id,)
            ).fetchone()
        )
        return self._row_to_session(row) if row else None

    def end_session(self, session_id: str) -> bool:
        """Mark an active session ended; False when it was not active."""
        return self._write(
            lambda conn: conn.execute(
                """
                UPDATE chat_sessions SET is_active = 0, ended_at = ?
                WHERE id = ? AND is_active = 1
                """,
                (utc_now(), session_id),
            ).rowcount
            > 0
        )

    def list_sessions(self, user_id: str, limit: int) -> List[ChatSession]:
        """The user's sessions, most recently started first."""
        rows = self._read(
            lambda conn: conn.execute(
                """
                SELECT * FROM chat_sessions WHERE user_id = ?
                ORDER BY started_at DESC, rowid DESC LIMIT ?
                """,
                (user_id, limit),
            ).fetchall()
        )
        return [self._row_to_session(row) for row in rows]

    def add_message(
        self,
        session_id: str,
        message_type: str,
        text: str,
        html: Optional[str] = None,
        question_id: Optional[str] = None,
        answer_id: Optional[str] = None,
    ) -> ChatMessage:
        message_id = str(uuid.uuid4())
        now = utc_now()
        self._write(
            lambda conn: conn.execute(
                """
                INSERT INTO chat_messages (
                    id, session_id, message_type, text, html, question_id,
                    answer_id, created_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (message_id, session_id, message_type, text, html, question_id, answer_id, now),
            )
        )
        return ChatMessage(
            id=message_id,
            session_id=session_id,
            message_type=message_type,
            text=text,
            html=html,
            question_id=question_id,
            answer_id=answer_id,
            created_at=parse_timestamp(now),
        )

    def recent_messages(self, session_id: str, limit: int) -> List[ChatMessage]:
        """The last ``limit`` messages of a session, oldest first."""
        rows = self._read(
            lambda conn: conn.execute(
                """
                SELECT * FROM chat_messages WHERE session_id = ?
                ORDER BY created_at DESC, rowid DESC LIMIT ?
                """,
                (session_id, limit),
            ).fetchall()
        )
        return [self._row_to_message(row) for row in reversed(rows)]

    def _row_to_session(self, row: sqlite3.Row) -> ChatSession:
        return ChatSession(
            id=row["id"],
            user_id=row["user_id"],
            agent_id=row["agent_id"],
            started_at=parse_timestamp(row["started_at"]),
            ended_at=parse_timestamp(row["ended_at"]),
            is_active=bool(row["is_active"]),
        )

    def _row_to_message(self, row: sqlite3.Row) -> ChatMessage:
        return ChatMessage(
            id=row["id"],
            session_id=row["session_id"],
            message_type=row["message_type"],
            text=row["text"],
            html=row["html"],
            question_id=row["question_id"],
            answer_id=row["answer_id"],
            created_at=parse_timestamp(row["created_at"]),
        )

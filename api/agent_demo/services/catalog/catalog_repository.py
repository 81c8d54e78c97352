"""
SQLite-backed catalog: domains, agents, questions with their single answer,
generated variants, and the admin audit trail.

All queries are parameterized. Writes that touch several tables (question plus
answer plus both variant sets, or question and answer status) run inside one
writer transaction so readers never observe a half-applied change.
"""

import json
import logging
import sqlite3
import uuid
from collections import defaultdict
from typing import Any, Dict, List, Mapping, Optional, Sequence

from agent_demo.models.catalog import (
    Agent,
    Answer,
    AnswerVariant,
    AuditEntry,
    Domain,
    DomainWithAgents,
    QuestionDetail,
    QuestionVariant,
)
from agent_demo.services.matching.variant_generator import Variant
from agent_demo.services.sqlite_support import (
    SQLiteRepository,
    parse_timestamp,
    utc_now,
)

logger = logging.getLogger(__name__)

# Columns an update may touch; anything else in a change set is ignored
DOMAIN_UPDATABLE = ("name", "description", "is_active")
AGENT_UPDATABLE = (
    "domain_id",
    "name",
    "environment",
    "version",
    "developed_by",
    "description",
    "status",
)

_AGENT_SELECT = """
    SELECT ag.*, d.name AS domain_name,
        (SELECT COUNT(*) FROM questions q WHERE q.agent_id = ag.id) AS question_count
    FROM agents ag
    JOIN domains d ON d.id = ag.domain_id
"""

_QUESTION_SELECT = """
    SELECT q.id, q.agent_id, q.text, q.status, q.created_at, q.updated_at,
        a.id AS answer_id, a.text AS answer_text, a.html AS answer_html,
        a.status AS answer_status
    FROM questions q
    JOIN answers a ON a.question_id = q.id
    JOIN agents ag ON ag.id = q.agent_id
"""


def _new_id() -> str:
    return str(uuid.uuid4())


def _placeholders(values: Sequence[Any]) -> str:
    return ", ".join("?" for _ in values)


class CatalogRepository(SQLiteRepository):
    """Persistence for everything an administrator curates."""

    SCHEMA_VERSION = 1

    def _initialize_schema(self, conn: sqlite3.Connection) -> None:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS domains (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL UNIQUE,
                description TEXT,
                is_active INTEGER NOT NULL DEFAULT 1,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                CHECK(LENGTH(name) <= 255)
            );

            CREATE TABLE IF NOT EXISTS agents (
                id TEXT PRIMARY KEY,
                domain_id TEXT NOT NULL REFERENCES domains(id),
                name TEXT NOT NULL,
                environment TEXT NOT NULL
                    CHECK(environment IN ('Agentforce', 'Copilot', 'Custom', 'Other')),
                version TEXT NOT NULL,
                developed_by TEXT NOT NULL,
                description TEXT,
                status TEXT NOT NULL DEFAULT 'Draft' CHECK(status IN ('Draft', 'Final')),
                access_count INTEGER NOT NULL DEFAULT 0,
                last_updated TEXT NOT NULL,
                created_at TEXT NOT NULL
            );
            CREATE INDEX IF NOT EXISTS idx_agents_domain ON agents(domain_id);
            CREATE INDEX IF NOT EXISTS idx_agents_status ON agents(status);

            CREATE TABLE IF NOT EXISTS questions (
                id TEXT PRIMARY KEY,
                agent_id TEXT NOT NULL REFERENCES agents(id) ON DELETE CASCADE,
                text TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'Draft' CHECK(status IN ('Draft', 'Final')),
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                CHECK(LENGTH(text) <= 2000)
            );
            CREATE INDEX IF NOT EXISTS idx_questions_agent ON questions(agent_id);

            CREATE TABLE IF NOT EXISTS answers (
                id TEXT PRIMARY KEY,
                question_id TEXT NOT NULL UNIQUE
                    REFERENCES questions(id) ON DELETE CASCADE,
                text TEXT NOT NULL,
                html TEXT,
                status TEXT NOT NULL DEFAULT 'Draft' CHECK(status IN ('Draft', 'Final')),
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                CHECK(LENGTH(text) <= 10000)
            );

            CREATE TABLE IF NOT EXISTS question_variants (
                id TEXT PRIMARY KEY,
                question_id TEXT NOT NULL REFERENCES questions(id) ON DELETE CASCADE,
                variant_text TEXT NOT NULL,
                technique TEXT NOT NULL,
                confidence REAL NOT NULL,
                is_approved INTEGER NOT NULL DEFAULT 1,
                created_at TEXT NOT NULL
            );
            CREATE INDEX IF NOT EXISTS idx_question_variants_question
                ON question_variants(question_id);

            CREATE TABLE IF NOT EXISTS answer_variants (
                id TEXT PRIMARY KEY,
                answer_id TEXT NOT NULL REFERENCES answers(id) ON DELETE CASCADE,
                variant_text TEXT NOT NULL,
                variant_html TEXT,
                technique TEXT NOT NULL,
                confidence REAL NOT NULL,
                is_approved INTEGER NOT NULL DEFAULT 1,
                created_at TEXT NOT NULL
            );
            CREATE INDEX IF NOT EXISTS idx_answer_variants_answer
                ON answer_variants(answer_id);

            CREATE TABLE IF NOT EXISTS audit_log (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                actor TEXT NOT NULL,
                action TEXT NOT NULL,
                entity_type TEXT NOT NULL,
                entity_id TEXT NOT NULL,
                old_values TEXT,
                new_values TEXT,
                created_at TEXT NOT NULL
            );
            CREATE INDEX IF NOT EXISTS idx_audit_entity ON audit_log(entity_type, entity_id);

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

    # ============================================
    # Domains
    # ============================================

    def create_domain(self, name: str, description: Optional[str] = None) -> Domain:
        """Insert a domain.

        Raises:
            sqlite3.IntegrityError: If the name is already taken
        """
        domain_id = _new_id()
        now = utc_now()

        def _insert(conn: sqlite3.Connection) -> None:
            conn.execute(
                """
                INSERT INTO domains (id, name, description, is_active, created_at, updated_at)
                VALUES (?, ?, ?, 1, ?, ?)
                """,
                (domain_id, name, description, now, now),
            )

        self._write(_insert)
        logger.info(f"Created domain {domain_id} ({name})")
        domain = self.get_domain(domain_id)
        assert domain is not None
        return domain

    def get_domain(self, domain_id: str) -> Optional[Domain]:
        row = self._read(
            lambda conn: conn.execute(
                "SELECT * FROM domains WHERE id = ?", (domain_id,)
            ).fetchone()
        )
        return self._row_to_domain(row) if row else None

    def list_domains(self) -> List[Domain]:
        rows = self._read(
            lambda conn: conn.execute("SELECT * FROM domains ORDER BY name").fetchall()
        )
        return [self._row_to_domain(row) for row in rows]

    def update_domain(
        self, domain_id: str, changes: Mapping[str, Any]
    ) -> Optional[Domain]:
        """Apply whitelisted column changes; None when the domain does not exist.

        Raises:
            sqlite3.IntegrityError: If a rename collides with another domain
        """
        fields = {k: v for k, v in changes.items() if k in DOMAIN_UPDATABLE}
        if "is_active" in fields:
            fields["is_active"] = 1 if fields["is_active"] else 0
        fields["updated_at"] = utc_now()
        # Column names come from the whitelist above, never from user input
        assignments = ", ".join(f"{column} = ?" for column in fields)

        def _update(conn: sqlite3.Connection) -> bool:
            cursor = conn.execute(
                f"UPDATE domains SET {assignments} WHERE id = ?",
                (*fields.values(), domain_id),
            )
            return cursor.rowcount > 0

        if not self._write(_update):
            return None
        return self.get_domain(domain_id)

    def delete_domain(self, domain_id: str) -> bool:
        deleted = self._write(
            lambda conn: conn.execute(
                "DELETE FROM domains WHERE id = ?", (domain_id,)
            ).rowcount
            > 0
        )
        if deleted:
            logger.info("Deleted domain with ID: %s", domain_id)
        return deleted

    def count_agents(self, domain_id: str) -> int:
        row = self._read(
            lambda conn: conn.execute(
                "SELECT COUNT(*) FROM agents WHERE domain_id = ?", (domain_id,)
            ).fetchone()
        )
        return row[0] if row else 0

    # ============================================
    # Agents
    # ============================================

    def create_agent(self, fields: Mapping[str, Any]) -> Agent:
        """Insert an agent from validated request fields.

        Raises:
            sqlite3.IntegrityError: If ``domain_id`` does not reference a domain
        """
        agent_id = _new_id()
        now = utc_now()

        def _insert(conn: sqlite3.Connection) -> None:
            conn.execute(
                """
                INSERT INTO agents (
                    id, domain_id, name, environment, version, developed_by,
                    description, status, access_count, last_updated, created_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0, ?, ?)
                """,
                (
                    agent_id,
                    fields["domain_id"],
                    fields["name"],
                    fields["environment"],
                    fields["version"],
                    fields["developed_by"],
                    fields.get("description"),
                    fields.get("status") or "Draft",
                    now,
                    now,
                ),
            )

        self._write(_insert)
        logger.info(f"Created agent {agent_id} ({fields['name']})")
        agent = self.get_agent(agent_id)
        assert agent is not None
        return agent

    def get_agent(self, agent_id: str) -> Optional[Agent]:
        row = self._read(
            lambda conn: conn.execute(
                f"{_AGENT_SELECT} WHERE ag.id = ?", (agent_id,)
            ).fetchone()
        )
        return self._row_to_agent(row) if row else None

    def list_agents(
        self, domain_id: Optional[str] = None, status: Optional[str] = None
    ) -> List[Agent]:
        where_clauses: List[str] = []
        params: List[Any] = []
        if domain_id is not None:
            where_clauses.append("ag.domain_id = ?")
            params.append(domain_id)
        if status is not None:
            where_clauses.append("ag.status = ?")
            params.append(status)
        where_sql = "WHERE " + " AND ".join(where_clauses) if where_clauses else ""

        rows = self._read(
            lambda conn: conn.execute(
                f"{_AGENT_SELECT} {where_sql} ORDER BY d.name, ag.name", params
            ).fetchall()
        )
        return [self._row_to_agent(row) for row in rows]

    def update_agent(self, agent_id: str, changes: Mapping[str, Any]) -> Optional[Agent]:
        """Apply whitelisted column changes; None when the agent does not exist."""
        fields = {k: v for k, v in changes.items() if k in AGENT_UPDATABLE}
        fields["last_updated"] = utc_now()
        assignments = ", ".join(f"{column} = ?" for column in fields)

        def _update(conn: sqlite3.Connection) -> bool:
            cursor = conn.execute(
                f"UPDATE agents SET {assignments} WHERE id = ?",
                (*fields.values(), agent_id),
            )
            return cursor.rowcount > 0

        if not self._write(_update):
            return None
        return self.get_agent(agent_id)

    def delete_agent(self, agent_id: str) -> bool:
        """Delete an agent; its questions, answers and variants cascade."""
        deleted = self._write(
            lambda conn: conn.execute(
                "DELETE FROM agents WHERE id = ?", (agent_id,)
            ).rowcount
            > 0
        )
        if deleted:
            logger.info("Deleted agent with ID: %s", agent_id)
        return deleted

    def increment_access_count(self, agent_id: str) -> None:
        self._write(
            lambda conn: conn.execute(
                "UPDATE agents SET access_count = access_count + 1 WHERE id = ?",
                (agent_id,),
            )
        )

    # ============================================
    # Published view (demo users)
    # ============================================

    def get_published_agent(self, agent_id: str) -> Optional[Agent]:
        agent = self.get_agent(agent_id)
        if agent is None or agent.status != "Final":
            return None
        return agent

    def list_published_domains(self) -> List[DomainWithAgents]:
        """Active domains that have at least one Final agent, by name."""
        published = self.list_agents(status="Final")
        by_domain: Dict[str, List[Agent]] = defaultdict(list)
        for agent in published:
            by_domain[agent.domain_id].append(agent)

        return [
            DomainWithAgents(**domain.model_dump(), agents=by_domain[domain.id])
            for domain in self.list_domains()
            if domain.is_active and by_domain.get(domain.id)
        ]

    # ============================================
    # Questions, answers and variants
    # ============================================

    def _insert_variants(
        self,
        conn: sqlite3.Connection,
        question_id: str,
        answer_id: str,
        question_variants: Sequence[Variant],
        answer_variants: Sequence[Variant],
        now: str,
    ) -> None:
        conn.executemany(
            """
            INSERT INTO question_variants (
                id, question_id, variant_text, technique, confidence, is_approved, created_at
            )
            VALUES (?, ?, ?, ?, ?, 1, ?)
            """,
            [
                (_new_id(), question_id, v.text, v.technique, v.confidence, now)
                for v in question_variants
            ],
        )
        conn.executemany(
            """
            INSERT INTO answer_variants (
                id, answer_id, variant_text, variant_html, technique, confidence,
                is_approved, created_at
            )
            VALUES (?, ?, ?, ?, ?, ?, 1, ?)
            """,
            [
                (_new_id(), answer_id, v.text, v.html, v.technique, v.confidence, now)
                for v in answer_variants
            ],
        )

    def _delete_variants(
        self, conn: sqlite3.Connection, question_id: str, answer_id: str
    ) -> None:
        conn.execute("DELETE FROM question_variants WHERE question_id = ?", (question_id,))
        conn.execute("DELETE FROM answer_variants WHERE answer_id = ?", (answer_id,))

    def _answer_id_for(self, conn: sqlite3.Connection, question_id: str) -> Optional[str]:
        row = conn.execute(
            "SELECT id FROM answers WHERE question_id = ?", (question_id,)
        ).fetchone()
        return row["id"] if row else None

    def create_question_with_variants(
        self,
        agent_id: str,
        question_text: str,
        answer_text: str,
        answer_html: Optional[str],
        question_variants: Sequence[Variant],
        answer_variants: Sequence[Variant],
    ) -> QuestionDetail:
        """Persist a Draft question, its answer and both variant sets atomically.

        Raises:
            sqlite3.IntegrityError: If ``agent_id`` does not reference an agent
        """
        question_id = _new_id()
        answer_id = _new_id()
        now = utc_now()

        def _insert(conn: sqlite3.Connection) -> None:
            conn.execute(
                """
                INSERT INTO questions (id, agent_id, text, status, created_at, updated_at)
                VALUES (?, ?, ?, 'Draft', ?, ?)
                """,
                (question_id, agent_id, question_text, now, now),
            )
            conn.execute(
                """
                INSERT INTO answers (id, question_id, text, html, status, created_at, updated_at)
                VALUES (?, ?, ?, ?, 'Draft', ?, ?)
                """,
                (answer_id, question_id, answer_text, answer_html, now, now),
            )
            self._insert_variants(
                conn, question_id, answer_id, question_variants, answer_variants, now
            )

        self._write(_insert)
        logger.info(
            f"Created question {question_id} for agent {agent_id} with "
            f"{len(question_variants)} question and {len(answer_variants)} answer variants"
        )
        detail = self.get_question(question_id)
        assert detail is not None
        return detail

    def replace_question_content(
        self,
        question_id: str,
        question_text: str,
        answer_text: str,
        answer_html: Optional[str],
        status: str,
        question_variants: Sequence[Variant],
        answer_variants: Sequence[Variant],
    ) -> Optional[QuestionDetail]:
        """Overwrite question and answer content and swap in fresh variant sets.

        Question and answer both take ``status``. Prior variants are deleted in
        the same transaction. Returns None when the question does not exist.
        """
        now = utc_now()

        def _replace(conn: sqlite3.Connection) -> bool:
            answer_id = self._answer_id_for(conn, question_id)
            if answer_id is None:
                return False
            conn.execute(
                "UPDATE questions SET text = ?, status = ?, updated_at = ? WHERE id = ?",
                (question_text, status, now, question_id),
            )
            conn.execute(
                """
                UPDATE answers SET text = ?, html = ?, status = ?, updated_at = ?
                WHERE id = ?
                """,
                (answer_text, answer_html, status, now, answer_id),
            )
            self._delete_variants(conn, question_id, answer_id)
            self._insert_variants(
                conn, question_id, answer_id, question_variants, answer_variants, now
            )
            return True

        if not self._write(_replace):
            return None
        return self.get_question(question_id)

    def replace_variants(
        self,
        question_id: str,
        question_variants: Sequence[Variant],
        answer_variants: Sequence[Variant],
    ) -> Optional[QuestionDetail]:
        """Swap both variant sets without touching content or status."""
        now = utc_now()

        def _replace(conn: sqlite3.Connection) -> bool:
            answer_id = self._answer_id_for(conn, question_id)
            if answer_id is None:
                return False
            self._delete_variants(conn, question_id, answer_id)
            self._insert_variants(
                conn, question_id, answer_id, question_variants, answer_variants, now
            )
            conn.execute(
                "UPDATE questions SET updated_at = ? WHERE id = ?", (now, question_id)
            )
            return True

        if not self._write(_replace):
            return None
        return self.get_question(question_id)

    def set_question_status(self, question_id: str, status: str) -> bool:
        """Set question and answer status together in one transaction."""
        now = utc_now()

        def _update(conn: sqlite3.Connection) -> bool:
            cursor = conn.execute(
                "UPDATE questions SET status = ?, updated_at = ? WHERE id = ?",
                (status, now, question_id),
            )
            if cursor.rowcount == 0:
                return False
            conn.execute(
                "UPDATE answers SET status = ?, updated_at = ? WHERE question_id = ?",
                (status, now, question_id),
            )
            return True

        return self._write(_update)

    def delete_question(self, question_id: str) -> bool:
        deleted = self._write(
            lambda conn: conn.execute(
                "DELETE FROM questions WHERE id = ?", (question_id,)
            ).rowcount
            > 0
        )
        if deleted:
            logger.info("Deleted question with ID: %s", question_id)
        return deleted

    def set_question_variant_approval(self, variant_id: str, is_approved: bool) -> bool:
        return self._write(
            lambda conn: conn.execute(
                "UPDATE question_variants SET is_approved = ? WHERE id = ?",
                (1 if is_approved else 0, variant_id),
            ).rowcount
            > 0
        )

    def set_answer_variant_approval(self, variant_id: str, is_approved: bool) -> bool:
        return self._write(
            lambda conn: conn.execute(
                "UPDATE answer_variants SET is_approved = ? WHERE id = ?",
                (1 if is_approved else 0, variant_id),
            ).rowcount
            > 0
        )

    def get_question(self, question_id: str) -> Optional[QuestionDetail]:
        details = self._read(
            lambda conn: self._load_details(conn, "WHERE q.id = ?", [question_id])
        )
        return details[0] if details else None

    def list_questions(self, agent_id: str) -> List[QuestionDetail]:
        return self._read(
            lambda conn: self._load_details(conn, "WHERE q.agent_id = ?", [agent_id])
        )

    def list_match_candidates(self, agent_id: str) -> List[QuestionDetail]:
        """Final questions with Final answers of a Final agent, approved variants only."""
        return self._read(
            lambda conn: self._load_details(
                conn,
                """
                WHERE q.agent_id = ?
                    AND ag.status = 'Final'
                    AND q.status = 'Final'
                    AND a.status = 'Final'
                """,
                [agent_id],
                approved_only=True,
            )
        )

    def _load_details(
        self,
        conn: sqlite3.Connection,
        where_sql: str,
        params: List[Any],
        approved_only: bool = False,
    ) -> List[QuestionDetail]:
        rows = conn.execute(
            f"{_QUESTION_SELECT} {where_sql} ORDER BY q.created_at, q.rowid", params
        ).fetchall()
        if not rows:
            return []

        question_ids = [row["id"] for row in rows]
        answer_ids = [row["answer_id"] for row in rows]
        approval_sql = " AND is_approved = 1" if approved_only else ""

        question_variants: Dict[str, List[QuestionVariant]] = defaultdict(list)
        for vrow in conn.execute(
            f"""
            SELECT * FROM question_variants
            WHERE question_id IN ({_placeholders(question_ids)}){approval_sql}
            ORDER BY rowid
            """,
            question_ids,
        ):
            question_variants[vrow["question_id"]].append(
                QuestionVariant(
                    id=vrow["id"],
                    question_id=vrow["question_id"],
                    variant_text=vrow["variant_text"],
                    technique=vrow["technique"],
                    confidence=vrow["confidence"],
                    is_approved=bool(vrow["is_approved"]),
                )
            )

        answer_variants: Dict[str, List[AnswerVariant]] = defaultdict(list)
        for vrow in conn.execute(
            f"""
            SELECT * FROM answer_variants
            WHERE answer_id IN ({_placeholders(answer_ids)}){approval_sql}
            ORDER BY rowid
            """,
            answer_ids,
        ):
            answer_variants[vrow["answer_id"]].append(
                AnswerVariant(
                    id=vrow["id"],
                    answer_id=vrow["answer_id"],
                    variant_text=vrow["variant_text"],
                    variant_html=vrow["variant_html"],
                    technique=vrow["technique"],
                    confidence=vrow["confidence"],
                    is_approved=bool(vrow["is_approved"]),
                )
            )

        return [
            QuestionDetail(
                id=row["id"],
                agent_id=row["agent_id"],
                text=row["text"],
                status=row["status"],
                created_at=parse_timestamp(row["created_at"]),
                updated_at=parse_timestamp(row["updated_at"]),
                answer=Answer(
                    id=row["answer_id"],
                    question_id=row["id"],
                    text=row["answer_text"],
                    html=row["answer_html"],
                    status=row["answer_status"],
                    variants=answer_variants[row["answer_id"]],
                ),
                variants=question_variants[row["id"]],
            )
            for row in rows
        ]

    # ============================================
    # Audit trail
    # ============================================

    def record_audit(
        self,
        actor: str,
        action: str,
        entity_type: str,
        entity_id: str,
        old_values: Optional[Dict[str, Any]] = None,
        new_values: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._write(
            lambda conn: conn.execute(
                """
                INSERT INTO audit_log (
                    actor, action, entity_type, entity_id, old_values, new_values, created_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    actor,
                    action,
                    entity_type,
                    entity_id,
                    json.dumps(old_values, default=str) if old_values is not None else None,
                    json.dumps(new_values, default=str) if new_values is not None else None,
                    utc_now(),
                ),
            )
        )

    def list_audit_entries(
        self, limit: int = 50, entity_type: Optional[str] = None
    ) -> List[AuditEntry]:
        """Most recent audit entries first."""
        where_sql = "WHERE entity_type = ?" if entity_type else ""
        params: List[Any] = [entity_type] if entity_type else []
        params.append(limit)
        rows = self._read(
            lambda conn: conn.execute(
                f"SELECT * FROM audit_log {where_sql} ORDER BY id DESC LIMIT ?", params
            ).fetchall()
        )
        return [
            AuditEntry(
                id=row["id"],
                actor=row["actor"],
                action=row["action"],
                entity_type=row["entity_type"],
                entity_id=row["entity_id"],
                old_values=json.loads(row["old_values"]) if row["old_values"] else None,
                new_values=json.loads(row["new_values"]) if row["new_values"] else None,
                created_at=parse_timestamp(row["created_at"]),
            )
            for row in rows
        ]

    # ============================================
    # Row mapping
    # ============================================

    def _row_to_domain(self, row: sqlite3.Row) -> Domain:
        return Domain(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            is_active=bool(row["is_active"]),
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )

    def _row_to_agent(self, row: sqlite3.Row) -> Agent:
        return Agent(
            id=row["id"],
            domain_id=row["domain_id"],
            domain_name=row["domain_name"],
            name=row["name"],
            environment=row["environment"],
            version=row["version"],
            developed_by=row["developed_by"],
            description=row["description"],
            status=row["status"],
            access_count=row["access_count"],
            question_count=row["question_count"],
            last_updated=parse_timestamp(row["last_updated"]),
            created_at=parse_timestamp(row["created_at"]),
        )

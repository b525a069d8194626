"""Credential store for the admin account."""

import logging
import sqlite3
from datetime import datetime
from typing import Optional

from app.exceptions import ConflictError, NotFoundError
from app.models.auth import User
from app.services.database import Database, utcnow_iso

logger = logging.getLogger("homelab")


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        username=row["username"],
        password_hash=row["password_hash"],
        must_change_password=bool(row["must_change_password"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class UserStore:
    """Persistent user records backed by the ``users`` table."""

    def __init__(self, database: Database):
        self.db = database

    def count(self) -> int:
        with self.db.read() as conn:
            return conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]

    def find_by_username(self, username: str) -> Optional[User]:
        """Look up a user by exact (case-sensitive) username."""
        with self.db.read() as conn:
            row = conn.execute("SELECT * FROM users WHERE username = ?", (username,)).fetchone()
        return _row_to_user(row) if row else None

    def find_by_id(self, user_id: int) -> Optional[User]:
        with self.db.read() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return _row_to_user(row) if row else None

    def first_user(self) -> Optional[User]:
        with self.db.read() as conn:
            row = conn.execute("SELECT * FROM users ORDER BY id LIMIT 1").fetchone()
        return _row_to_user(row) if row else None

    def create(self, username: str, password_hash: str, must_change_password: bool = False) -> User:
        """
        Insert a new user.

        Raises:
            ConflictError: If the username already exists
        """
        with self.db.transaction() as conn:
            return self._insert(conn, username, password_hash, must_change_password)

    def _insert(self, conn: sqlite3.Connection, username: str, password_hash: str, must_change_password: bool) -> User:
        now = utcnow_iso()
        try:
            cursor = conn.execute(
                """
                INSERT INTO users (username, password_hash, must_change_password, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (username, password_hash, int(must_change_password), now, now),
            )
        except sqlite3.IntegrityError:
            raise ConflictError("Username is already taken")
        row = conn.execute("SELECT * FROM users WHERE id = ?", (cursor.lastrowid,)).fetchone()
        return _row_to_user(row)

    def update(
        self,
        user_id: int,
        username: Optional[str] = None,
        password_hash: Optional[str] = None,
        must_change_password: Optional[bool] = None,
    ) -> User:
        """
        Update the given fields of a user in a single transaction.

        Fields left as None are not touched. A username collision aborts the
        whole update.

        Raises:
            NotFoundError: If the user id is unknown
            ConflictError: If the new username belongs to another user
        """
        fields: dict[str, object] = {}
        if username is not None:
            fields["username"] = username
        if password_hash is not None:
            fields["password_hash"] = password_hash
        if must_change_password is not None:
            fields["must_change_password"] = int(must_change_password)

        with self.db.transaction() as conn:
            if conn.execute("SELECT id FROM users WHERE id = ?", (user_id,)).fetchone() is None:
                raise NotFoundError("User not found")

            if fields:
                fields["updated_at"] = utcnow_iso()
                assignments = ", ".join(f"{column} = ?" for column in fields)
                try:
                    conn.execute(
                        f"UPDATE users SET {assignments} WHERE id = ?",
                        (*fields.values(), user_id),
                    )
                except sqlite3.IntegrityError:
                    raise ConflictError("Username is already taken")

            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return _row_to_user(row)

    def ensure_default_user(self, username: str, password_hash: str) -> User:
        """
        Create the bootstrap user unless any user already exists.

        Idempotent: an existing user is returned unchanged.
        """
        with self.db.transaction() as conn:
            row = conn.execute("SELECT * FROM users ORDER BY id LIMIT 1").fetchone()
            if row is not None:
                return _row_to_user(row)
            user = self._insert(conn, username, password_hash, must_change_password=True)

        logger.info(f"Default user '{username}' created")
        return user

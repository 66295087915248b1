"""SQLite persistence for player statistics."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from .models import PlayerStats

SCHEMA_VERSION = 1

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameRecord:
    """One finished game."""

    username: str
    score: int
    played_at: str


class ProgressStore:
    """Database access layer for player statistics."""

    def __init__(self, db_path: Path | str) -> None:
        """Initialize database and schema."""
        if isinstance(db_path, Path):
            db_path.parent.mkdir(parents=True, exist_ok=True)
            target = str(db_path)
        else:
            target = db_path
        self._conn = sqlite3.connect(target)
        self._conn.row_factory = sqlite3.Row
        self._apply_migrations()

    def _apply_migrations(self) -> None:
        """Apply forward-only schema migrations to latest version."""
        current = int(self._conn.execute("PRAGMA user_version").fetchone()[0])
        if current > SCHEMA_VERSION:
            raise RuntimeError(f"Database schema version {current} is newer than supported {SCHEMA_VERSION}.")

        with self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS schema_migrations (
                    version INTEGER PRIMARY KEY,
                    applied_at TEXT NOT NULL
                )
                """)

        for version in range(current + 1, SCHEMA_VERSION + 1):
            if version == 1:
                self._migrate_to_v1()
            with self._conn:
                self._conn.execute(f"PRAGMA user_version = {version}")
                self._conn.execute(
                    "INSERT OR REPLACE INTO schema_migrations (version, applied_at) VALUES (?, ?)",
                    (version, datetime.now(UTC).isoformat()),
                )
            logger.debug("Applied schema migration %d", version)

    def _migrate_to_v1(self) -> None:
        """Create player aggregate and game history tables."""
        with self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS players (
                    username TEXT PRIMARY KEY,
                    times_played INTEGER NOT NULL DEFAULT 0,
                    highest_score INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """)
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS games (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT NOT NULL,
                    score INTEGER NOT NULL,
                    played_at TEXT NOT NULL
                )
                """)

    def record_game(self, username: str, score: int) -> PlayerStats:
        """Count one more game for a player and raise their high score if beaten.

        Returns the updated aggregate. Both writes happen in one transaction.
        """
        name = username.strip() if isinstance(username, str) else ""
        if not name:
            raise ValueError("Username is required.")
        if isinstance(score, bool) or not isinstance(score, int):
            raise ValueError("Score must be an integer.")

        now = datetime.now(UTC).isoformat()
        with self._conn:
            self._conn.execute(
                """
                INSERT INTO players (username, times_played, highest_score, created_at, updated_at)
                VALUES (?, 1, ?, ?, ?)
                ON CONFLICT(username) DO UPDATE SET
                    times_played = players.times_played + 1,
                    highest_score = MAX(players.highest_score, excluded.highest_score),
                    updated_at = excluded.updated_at
                """,
                (name, max(0, score), now, now),
            )
            self._conn.execute(
                "INSERT INTO games (username, score, played_at) VALUES (?, ?, ?)",
                (name, score, now),
            )

        stats = self.get_player(name)
        if stats is None:
            raise RuntimeError(f"Could not record game for {name}.")
        logger.debug("Recorded game for %s: score=%d stats=%s", name, score, stats)
        return stats

    def get_player(self, username: str) -> PlayerStats | None:
        """Return one player's aggregate, if present."""
        row = self._conn.execute(
            "SELECT username, times_played, highest_score FROM players WHERE username = ?",
            (username.strip(),),
        ).fetchone()
        if row is None:
            return None
        return _stats_from_row(row)

    def top_players(self, limit: int = 10) -> list[PlayerStats]:
        """Return players ordered by games played, then high score."""
        rows = self._conn.execute(
            """
            SELECT username, times_played, highest_score
            FROM players
            ORDER BY times_played DESC, highest_score DESC, username ASC
            LIMIT ?
            """,
            (max(0, limit),),
        ).fetchall()
        return [_stats_from_row(row) for row in rows]

    def recent_games(self, username: str, limit: int = 10) -> list[GameRecord]:
        """Return a player's latest games, newest first."""
        rows = self._conn.execute(
            """
            SELECT username, score, played_at
            FROM games
            WHERE username = ?
            ORDER BY id DESC
            LIMIT ?
            """,
            (username.strip(), max(0, limit)),
        ).fetchall()
        return [
            GameRecord(username=str(row["username"]), score=int(row["score"]), played_at=str(row["played_at"]))
            for row in rows
        ]

    def delete_player(self, username: str) -> bool:
        """Delete a player and their game history."""
        name = username.strip()
        with self._conn:
            self._conn.execute("DELETE FROM games WHERE username = ?", (name,))
            cursor = self._conn.execute("DELETE FROM players WHERE username = ?", (name,))
        return cursor.rowcount > 0

    def close(self) -> None:
        """Close db connection."""
        self._conn.close()

    def __del__(self) -> None:  # pragma: no cover
        """Best-effort connection cleanup."""
        try:
            self.close()
        except Exception:
            pass


def _stats_from_row(row: sqlite3.Row) -> PlayerStats:
    return PlayerStats(
        username=str(row["username"]),
        times_played=int(row["times_played"]),
        highest_score=int(row["highest_score"]),
    )

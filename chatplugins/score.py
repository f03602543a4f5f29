"""Daily sign-in and score keeping, stored in SQLite."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

SIGNIN_MAX = 1
SCOREMAX = 120
SIGNIN_BONUS = 1
LEVELS = (0, 1, 2, 5, 10, 20, 35, 55, 75, 100, 120)

_DAY_FORMAT = "%Y%m%d"


def _stamp(moment: datetime) -> str:
    return moment.isoformat(sep=" ", timespec="microseconds")


class ScoreDB:
    """Scores and sign-in counts keyed by user id."""

    def __init__(self, path: str | Path):
        self._conn = sqlite3.connect(str(path))
        self._conn.execute(
            "CREATE TABLE IF NOT EXISTS score (uid INTEGER PRIMARY KEY, score INTEGER DEFAULT 0)"
        )
        self._conn.execute(
            "CREATE TABLE IF NOT EXISTS sign_in ("
            "uid INTEGER PRIMARY KEY, count INTEGER DEFAULT 0, updated_at TEXT)"
        )
        self._conn.commit()

    def __enter__(self) -> "ScoreDB":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        """Close the database."""
        self._conn.close()

    def get_score(self, uid: int) -> int:
        """Return the user's score, creating a zero record if absent."""
        row = self._conn.execute("SELECT score FROM score WHERE uid = ?", (uid,)).fetchone()
        if row is None:
            self._conn.execute("INSERT INTO score (uid, score) VALUES (?, 0)", (uid,))
            self._conn.commit()
            return 0
        return row[0]

    def set_score(self, uid: int, score: int) -> None:
        """Insert or update the user's score."""
        self._conn.execute(
            "INSERT INTO score (uid, score) VALUES (?, ?) "
            "ON CONFLICT(uid) DO UPDATE SET score = excluded.score",
            (uid, score),
        )
        self._conn.commit()

    def get_sign_in(self, uid: int) -> tuple[int, datetime | None]:
        """Return (sign-in count, last update time), creating a record if absent."""
        row = self._conn.execute(
            "SELECT count, updated_at FROM sign_in WHERE uid = ?", (uid,)
        ).fetchone()
        if row is None:
            self._conn.execute("INSERT INTO sign_in (uid, count) VALUES (?, 0)", (uid,))
            self._conn.commit()
            return 0, None
        count, updated = row
        return count, datetime.fromisoformat(updated) if updated else None

    def _set_sign_in(self, uid: int, count: int, when: datetime) -> None:
        self._conn.execute(
            "INSERT INTO sign_in (uid, count, updated_at) VALUES (?, ?, ?) "
            "ON CONFLICT(uid) DO UPDATE SET count = excluded.count, "
            "updated_at = excluded.updated_at",
            (uid, count, _stamp(when)),
        )
        self._conn.commit()

    def set_sign_in_count(self, uid: int, count: int) -> None:
        """Insert or update the user's sign-in count, stamped with the current time."""
        self._set_sign_in(uid, count, datetime.now())

    def top_scores(self, n: int) -> list[tuple[int, int]]:
        """Return up to ``n`` (uid, score) pairs, highest score first."""
        return [
            (uid, score)
            for uid, score in self._conn.execute(
                "SELECT uid, score FROM score ORDER BY score DESC LIMIT ?", (n,)
            )
        ]


def get_level(score: int) -> int:
    """Level reached with ``score``; -1 when above every threshold."""
    for level, threshold in enumerate(LEVELS):
        if score == threshold:
            return level
        if score < threshold:
            return level - 1
    return -1


def next_level_score(level: int) -> int:
    """Score needed for the level after ``level``."""
    if level < 10:
        return LEVELS[level + 1]
    return SCOREMAX


def get_hour_word(hour: int) -> str:
    """Greeting for the hour of the day."""
    if 6 <= hour < 12:
        return "早上好"
    if 12 <= hour < 14:
        return "中午好"
    if 14 <= hour < 19:
        return "下午好"
    if 19 <= hour < 24:
        return "晚上好"
    if 0 <= hour < 6:
        return "凌晨好"
    return ""


@dataclass(frozen=True)
class SignInResult:
    """Outcome of one sign-in attempt."""

    already_signed: bool
    score: int
    level: int
    next_level: int
    hour_word: str
    date_word: str
    added: int = 0
    capped: bool = False

    @property
    def progress_text(self) -> str:
        """Progress towards the next level, as ``score/next``."""
        return f"{self.score}/{self.next_level}"


def sign_in(db: ScoreDB, uid: int, now: datetime) -> SignInResult:
    """Sign ``uid`` in at ``now`` and award the daily bonus."""
    today = now.strftime(_DAY_FORMAT)
    count, updated = db.get_sign_in(uid)
    updated_day = updated.strftime(_DAY_FORMAT) if updated else ""
    hour_word = get_hour_word(now.hour)
    date_word = now.strftime("%m/%d")

    if count >= SIGNIN_MAX and updated_day == today:
        score = db.get_score(uid)
        level = get_level(score)
        return SignInResult(
            already_signed=True,
            score=score,
            level=level,
            next_level=next_level_score(level),
            hour_word=hour_word,
            date_word=date_word,
        )

    if updated_day != today:
        db._set_sign_in(uid, 0, now)
    db._set_sign_in(uid, count + 1, now)

    score = db.get_score(uid) + SIGNIN_BONUS
    capped = False
    if score > SCOREMAX:
        score = SCOREMAX
        capped = True
    db.set_score(uid, score)
    level = get_level(score)
    return SignInResult(
        already_signed=False,
        score=score,
        level=level,
        next_level=next_level_score(level),
        hour_word=hour_word,
        date_word=date_word,
        added=SIGNIN_BONUS,
        capped=capped,
    )
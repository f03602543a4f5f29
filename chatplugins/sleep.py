"""Good-morning / good-night tracking per group, stored in SQLite."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta
from pathlib import Path

_US_PER_SECOND = 1_000_000
_US_PER_MINUTE = 60 * _US_PER_SECOND
_US_PER_HOUR = 60 * _US_PER_MINUTE


def _stamp(moment: datetime) -> str:
    return moment.isoformat(sep=" ", timespec="microseconds")


def _since_hour(now: datetime, hour: int) -> datetime:
    return now - timedelta(hours=now.hour - hour, minutes=now.minute, seconds=now.second)


class SleepDB:
    """Sleep records keyed by group and user."""

    def __init__(self, path: str | Path):
        self._conn = sqlite3.connect(str(path))
        self._conn.execute(
            "CREATE TABLE IF NOT EXISTS sleep_manage ("
            "id INTEGER PRIMARY KEY AUTOINCREMENT, "
            "group_id INTEGER, user_id INTEGER, sleep_time TEXT)"
        )
        self._conn.commit()

    def __enter__(self) -> "SleepDB":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        """Close the database."""
        self._conn.close()

    def _touch(self, gid: int, uid: int, now: datetime) -> timedelta:
        row = self._conn.execute(
            "SELECT sleep_time FROM sleep_manage WHERE group_id = ? AND user_id = ? "
            "ORDER BY id LIMIT 1",
            (gid, uid),
        ).fetchone()
        elapsed = timedelta(0)
        if row is None:
            self._conn.execute(
                "INSERT INTO sleep_manage (group_id, user_id, sleep_time) VALUES (?, ?, ?)",
                (gid, uid, _stamp(now)),
            )
        else:
            elapsed = now - datetime.fromisoformat(row[0])
            self._conn.execute(
                "UPDATE sleep_manage SET sleep_time = ? WHERE group_id = ? AND user_id = ?",
                (_stamp(now), gid, uid),
            )
        self._conn.commit()
        return elapsed

    def _position(self, gid: int, now: datetime, since: datetime) -> int:
        (count,) = self._conn.execute(
            "SELECT COUNT(*) FROM sleep_manage "
            "WHERE group_id = ? AND sleep_time <= ? AND sleep_time >= ?",
            (gid, _stamp(now), _stamp(since)),
        ).fetchone()
        return count

    def sleep(self, gid: int, uid: int, now: datetime) -> tuple[int, timedelta]:
        """Record a good-night; return (position tonight, time awake)."""
        if now.hour >= 21:
            since = _since_hour(now, 21)
        elif now.hour <= 3:
            since = _since_hour(now, -3)
        else:
            since = datetime.min
        awake = self._touch(gid, uid, now)
        return self._position(gid, now, since), awake

    def get_up(self, gid: int, uid: int, now: datetime) -> tuple[int, timedelta]:
        """Record a good-morning; return (position this morning, time slept)."""
        since = _since_hour(now, 6)
        slept = self._touch(gid, uid, now)
        return self._position(gid, now, since), slept


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // b
    return quotient if a >= 0 else -quotient


def split_duration(delta: timedelta) -> tuple[int, int, int]:
    """Split a duration into whole hours, minutes and seconds (truncated toward zero)."""
    total = delta // timedelta(microseconds=1)
    hour = _trunc_div(total, _US_PER_HOUR)
    rest = total - hour * _US_PER_HOUR
    minute = _trunc_div(rest, _US_PER_MINUTE)
    rest -= minute * _US_PER_MINUTE
    second = _trunc_div(rest, _US_PER_SECOND)
    return hour, minute, second


def is_morning(hour: int) -> bool:
    """Good-mornings count from 6 to 12 o'clock."""
    return 6 <= hour <= 12


def is_evening(hour: int) -> bool:
    """Good-nights count from 21 to 3 o'clock."""
    return hour >= 21 or hour <= 3


def _meaningless(hour: int, minute: int, second: int) -> bool:
    return (hour, minute, second) == (0, 0, 0) or hour >= 24


def morning_reply(position: int, delta: timedelta) -> str:
    """Reply text for a good-morning."""
    hour, minute, second = split_duration(delta)
    if _meaningless(hour, minute, second):
        return f"早安成功！你是今天第{position}个起床的"
    return f"早安成功！你的睡眠时长为{hour}时{minute}分{second}秒,你是今天第{position}个起床的"


def evening_reply(position: int, delta: timedelta) -> str:
    """Reply text for a good-night."""
    hour, minute, second = split_duration(delta)
    if _meaningless(hour, minute, second):
        return f"晚安成功！你是今天第{position}个睡觉的"
    return f"晚安成功！你的清醒时长为{hour}时{minute}分{second}秒,你是今天第{position}个睡觉的"
"""VTuber quote catalogue: three-level categories stored in SQLite."""

from __future__ import annotations

import json
import random
import re
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import requests

VTB_LIST_URL = "https://vtbkeyboard.moe/api/get_vtb_list"
VTB_PAGE_URL = "https://vtbkeyboard.moe/api/get_vtb_page?uid="

FIRST_HEADER = "请选择一个vtb并发送序号:\n"
SECOND_HEADER = "请选择一个语录类别并发送序号:\n"
THIRD_HEADER = "请选择一个语录并发送序号:\n"

_USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/96.0.4664.110 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/15.1 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64; rv:94.0) Gecko/20100101 Firefox/94.0",
)

_UNICODE_ESCAPE = re.compile(r"\\u([0-9a-fA-F]{4})")


@dataclass(frozen=True)
class FirstCategory:
    """A VTuber."""

    index: int
    name: str
    uid: str
    description: str = ""
    icon_path: str = ""
    id: int = 0


@dataclass(frozen=True)
class SecondCategory:
    """A category of quotes belonging to one VTuber."""

    index: int
    first_uid: str
    name: str
    author: str = ""
    description: str = ""
    id: int = 0


@dataclass(frozen=True)
class ThirdCategory:
    """A single voice quote."""

    index: int
    second_index: int
    first_uid: str
    name: str
    path: str = ""
    author: str = ""
    description: str = ""
    id: int = 0


def decode_unicode_escapes(text: str) -> str:
    """Replace literal ``\\uXXXX`` sequences with the characters they name."""
    decoded = _UNICODE_ESCAPE.sub(lambda m: chr(int(m.group(1), 16)), text)
    return decoded.encode("utf-16", "surrogatepass").decode("utf-16")


def _fetch_json(url: str, session=None) -> Any:
    client = session if session is not None else requests
    response = client.get(url, headers={"User-Agent": random.choice(_USER_AGENTS)}, timeout=30)
    response.raise_for_status()
    body = response.content.decode("utf-8", errors="replace")
    return json.loads(decode_unicode_escapes(body))


def fetch_vtb_list(session=None) -> list[dict]:
    """Download the list of VTubers."""
    data = _fetch_json(VTB_LIST_URL, session)
    return data if isinstance(data, list) else []


def fetch_vtb_page(uid: str, session=None) -> dict:
    """Download the quote page of one VTuber."""
    data = _fetch_json(VTB_PAGE_URL + uid, session)
    return data if isinstance(data, dict) else {}


def _text(node: Any, *keys: str) -> str:
    for key in keys:
        if isinstance(node, dict) and key in node:
            node = node[key]
        else:
            return ""
    if node is None:
        return ""
    if isinstance(node, str):
        return node
    if isinstance(node, bool):
        return "true" if node else "false"
    if isinstance(node, (int, float)):
        return str(node)
    return json.dumps(node, ensure_ascii=False, separators=(",", ":"))


def _list(node: Any, *keys: str) -> list:
    for key in keys:
        if isinstance(node, dict) and key in node:
            node = node[key]
        else:
            return []
    return node if isinstance(node, list) else []


def _now() -> str:
    return datetime.now().isoformat(sep=" ", timespec="microseconds")


_FIRST_COLUMNS = (
    "first_category_index, first_category_name, first_category_uid, "
    "first_category_description, first_category_icon_path, id"
)
_SECOND_COLUMNS = (
    "second_category_index, first_category_uid, second_category_name, "
    "second_category_author, second_category_description, id"
)
_THIRD_COLUMNS = (
    "third_category_index, second_category_index, first_category_uid, "
    "third_category_name, third_category_path, third_category_author, "
    "third_category_description, id"
)


class VtbDB:
    """Catalogue of VTubers, quote categories and quotes."""

    def __init__(self, path: str | Path):
        self._conn = sqlite3.connect(str(path))
        self._conn.executescript(
            "CREATE TABLE IF NOT EXISTS first_category ("
            "id INTEGER PRIMARY KEY AUTOINCREMENT, created_at TEXT, updated_at TEXT, "
            "first_category_index INTEGER, first_category_name TEXT, "
            "first_category_uid TEXT, first_category_description TEXT, "
            "first_category_icon_path TEXT);"
            "CREATE TABLE IF NOT EXISTS second_category ("
            "id INTEGER PRIMARY KEY AUTOINCREMENT, created_at TEXT, updated_at TEXT, "
            "second_category_index INTEGER, first_category_uid TEXT, "
            "second_category_name TEXT, second_category_author TEXT, "
            "second_category_description TEXT);"
            "CREATE TABLE IF NOT EXISTS third_category ("
            "id INTEGER PRIMARY KEY AUTOINCREMENT, created_at TEXT, updated_at TEXT, "
            "third_category_index INTEGER, second_category_index INTEGER, "
            "first_category_uid TEXT, third_category_name TEXT, third_category_path TEXT, "
            "third_category_author TEXT, third_category_description TEXT);"
        )
        self._conn.commit()

    def __enter__(self) -> "VtbDB":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        """Close the database."""
        self._conn.close()

    def _first_by_index(self, first_index: int) -> FirstCategory | None:
        row = self._conn.execute(
            f"SELECT {_FIRST_COLUMNS} FROM first_category "
            "WHERE first_category_index = ? ORDER BY id LIMIT 1",
            (first_index,),
        ).fetchone()
        return FirstCategory(*row) if row else None

    def first_category_message(self) -> str:
        """Numbered list of all VTubers."""
        rows = self._conn.execute(
            "SELECT first_category_index, first_category_name FROM first_category ORDER BY id"
        )
        return FIRST_HEADER + "".join(f"{index}. {name}\n" for index, name in rows)

    def second_category_message(self, first_index: int) -> str:
        """Numbered list of one VTuber's quote categories; empty if none."""
        fc = self._first_by_index(first_index)
        uid = fc.uid if fc else ""
        rows = self._conn.execute(
            "SELECT second_category_index, second_category_name FROM second_category "
            "WHERE first_category_uid = ? ORDER BY id",
            (uid,),
        ).fetchall()
        if not rows:
            return ""
        return SECOND_HEADER + "".join(f"{index}. {name}\n" for index, name in rows)

    def third_category_message(self, first_index: int, second_index: int) -> str:
        """Numbered list of quotes in one category; empty if none."""
        fc = self._first_by_index(first_index)
        uid = fc.uid if fc else ""
        rows = self._conn.execute(
            "SELECT third_category_index, third_category_name FROM third_category "
            "WHERE first_category_uid = ? AND second_category_index = ? ORDER BY id",
            (uid, second_index),
        ).fetchall()
        if not rows:
            return ""
        return THIRD_HEADER + "".join(f"{index}. {name}\n" for index, name in rows)

    def third_category(
        self, first_index: int, second_index: int, third_index: int
    ) -> ThirdCategory | None:
        """The quote at the given three indexes, or None."""
        fc = self._first_by_index(first_index)
        uid = fc.uid if fc else ""
        row = self._conn.execute(
            f"SELECT {_THIRD_COLUMNS} FROM third_category WHERE first_category_uid = ? "
            "AND second_category_index = ? AND third_category_index = ? LIMIT 1",
            (uid, second_index, third_index),
        ).fetchone()
        return ThirdCategory(*row) if row else None

    def random_vtb(self, rng: random.Random | None = None) -> ThirdCategory | None:
        """A random quote, or None when there are none."""
        (count,) = self._conn.execute("SELECT COUNT(*) FROM third_category").fetchone()
        if count == 0:
            return None
        chooser = rng if rng is not None else random.Random()
        row = self._conn.execute(
            f"SELECT {_THIRD_COLUMNS} FROM third_category ORDER BY id LIMIT 1 OFFSET ?",
            (chooser.randrange(count),),
        ).fetchone()
        return ThirdCategory(*row)

    def first_category_by_uid(self, uid: str) -> FirstCategory | None:
        """The VTuber with the given uid, or None."""
        row = self._conn.execute(
            f"SELECT {_FIRST_COLUMNS} FROM first_category WHERE first_category_uid = ? LIMIT 1",
            (uid,),
        ).fetchone()
        return FirstCategory(*row) if row else None

    def store_vtb_list(self, items: list[dict]) -> list[str]:
        """Insert or update VTubers from a list response; return their uids in order."""
        uids = []
        for index, item in enumerate(items):
            uid = _text(item, "uid")
            values = (
                index,
                _text(item, "name"),
                _text(item, "description"),
                _text(item, "icon_path"),
            )
            exists = self._conn.execute(
                "SELECT 1 FROM first_category WHERE first_category_uid = ?", (uid,)
            ).fetchone()
            if exists:
                self._conn.execute(
                    "UPDATE first_category SET first_category_index = ?, "
                    "first_category_name = ?, first_category_description = ?, "
                    "first_category_icon_path = ?, updated_at = ? "
                    "WHERE first_category_uid = ?",
                    (*values, _now(), uid),
                )
            else:
                stamp = _now()
                self._conn.execute(
                    "INSERT INTO first_category (first_category_index, first_category_name, "
                    "first_category_description, first_category_icon_path, "
                    "first_category_uid, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?)",
                    (*values, uid, stamp, stamp),
                )
            uids.append(uid)
        self._conn.commit()
        return uids

    def store_vtb_page(self, uid: str, page: dict) -> None:
        """Insert or update the categories and quotes of one VTuber's page."""
        for second_index, second in enumerate(_list(page, "data", "voices")):
            self._upsert_second(uid, second_index, second)
            for third_index, third in enumerate(_list(second, "voiceList")):
                self._upsert_third(uid, second_index, third_index, third)
        self._conn.commit()

    def _upsert_second(self, uid: str, second_index: int, item: Any) -> None:
        values = (
            _text(item, "categoryName"),
            _text(item, "author"),
            _text(item, "categoryDescription", "zh-CN"),
        )
        key = (uid, second_index)
        exists = self._conn.execute(
            "SELECT 1 FROM second_category WHERE first_category_uid = ? "
            "AND second_category_index = ?",
            key,
        ).fetchone()
        if exists:
            self._conn.execute(
                "UPDATE second_category SET second_category_name = ?, "
                "second_category_author = ?, second_category_description = ?, updated_at = ? "
                "WHERE first_category_uid = ? AND second_category_index = ?",
                (*values, _now(), *key),
            )
        else:
            stamp = _now()
            self._conn.execute(
                "INSERT INTO second_category (second_category_name, second_category_author, "
                "second_category_description, first_category_uid, second_category_index, "
                "created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (*values, *key, stamp, stamp),
            )

    def _upsert_third(self, uid: str, second_index: int, third_index: int, item: Any) -> None:
        values = (
            _text(item, "name"),
            _text(item, "description", "zh-CN"),
            _text(item, "path"),
            _text(item, "author"),
        )
        key = (uid, second_index, third_index)
        exists = self._conn.execute(
            "SELECT 1 FROM third_category WHERE first_category_uid = ? "
            "AND second_category_index = ? AND third_category_index = ?",
            key,
        ).fetchone()
        if exists:
            self._conn.execute(
                "UPDATE third_category SET third_category_name = ?, "
                "third_category_description = ?, third_category_path = ?, "
                "third_category_author = ?, updated_at = ? WHERE first_category_uid = ? "
                "AND second_category_index = ? AND third_category_index = ?",
                (*values, _now(), *key),
            )
        else:
            stamp = _now()
            self._conn.execute(
                "INSERT INTO third_category (third_category_name, third_category_description, "
                "third_category_path, third_category_author, first_category_uid, "
                "second_category_index, third_category_index, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (*values, *key, stamp, stamp),
            )
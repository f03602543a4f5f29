"""Random entries from the tiangou diary database."""

from __future__ import annotations

import random
import sqlite3
from pathlib import Path

TABLE = "tiangou"


class TiangouDB:
    """Read-only access to the ``tiangou`` table of diary entries."""

    def __init__(self, path: str | Path):
        self._conn = sqlite3.connect(str(path))
        self._conn.execute(
            f"CREATE TABLE IF NOT EXISTS {TABLE} (id INTEGER PRIMARY KEY, text TEXT)"
        )
        self._conn.commit()

    def __enter__(self) -> "TiangouDB":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        """Close the database."""
        self._conn.close()

    def count(self) -> int:
        """Number of diary entries."""
        (n,) = self._conn.execute(f"SELECT COUNT(*) FROM {TABLE}").fetchone()
        return n

    def pick(self, rng: random.Random | None = None) -> str:
        """Return the text of a random entry; LookupError if the table is empty."""
        total = self.count()
        if total == 0:
            raise LookupError("no tiangou entries")
        chooser = rng if rng is not None else random.Random()
        offset = chooser.randrange(total)
        (text,) = self._conn.execute(
            f"SELECT text FROM {TABLE} ORDER BY id LIMIT 1 OFFSET ?", (offset,)
        ).fetchone()
        return text
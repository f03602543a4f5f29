"""Canned replies picked at random from a keyword dictionary."""

from __future__ import annotations

import json
import random
from collections.abc import Mapping, Sequence
from pathlib import Path


class Thesaurus:
    """Maps a full-match keyword to a list of possible replies."""

    def __init__(self, mapping: Mapping[str, Sequence[str]], rng: random.Random | None = None):
        self._mapping = {key: list(values) for key, values in mapping.items()}
        self._rng = rng if rng is not None else random.Random()

    def __len__(self) -> int:
        return len(self._mapping)

    def __contains__(self, key: object) -> bool:
        return key in self._mapping

    def keys(self) -> list[str]:
        """All keywords that have replies."""
        return list(self._mapping)

    def reply(self, key: str) -> str:
        """Pick a random reply for ``key``; KeyError if unknown."""
        values = self._mapping[key]
        if not values:
            raise IndexError(f"no replies for {key!r}")
        return self._rng.choice(values)


def load_thesaurus(path: str | Path, rng: random.Random | None = None) -> Thesaurus:
    """Load a ``{keyword: [reply, ...]}`` JSON file."""
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    return Thesaurus(data, rng)
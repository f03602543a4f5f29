"""Random rebirth: pick a country by population weight and a gender."""

from __future__ import annotations

import json
import random
from collections.abc import Iterable
from pathlib import Path

GENDERS = (("男孩子", 50707), ("女孩子", 48292), ("雌雄同体", 1001))

SUCCESS_TEMPLATE = "投胎成功！\n您出生在 {country}, 是 {gender}。"
FAILURE_TEXT = "投胎失败！\n您没能活到出生，祝您下次好运！"


def load_rates(path: str | Path) -> list[tuple[str, float]]:
    """Load ``[{"name": ..., "weight": ...}, ...]`` from a JSON file."""
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    return [(item["name"], float(item["weight"])) for item in data]


def _weights(values: Iterable[float], scale: float) -> list[int]:
    weights = []
    for value in values:
        if value < 0:
            raise ValueError("weights must not be negative")
        weights.append(int(value * scale))
    if sum(weights) <= 0:
        raise ValueError("no valid choices")
    return weights


class Reborn:
    """Weighted chooser of birth country and gender."""

    def __init__(self, rates: Iterable[tuple[str, float]], rng: random.Random | None = None):
        pairs = list(rates)
        self._names = [name for name, _ in pairs]
        self._weights = _weights((weight for _, weight in pairs), 1e9)
        self._genders = [name for name, _ in GENDERS]
        self._gender_weights = [weight for _, weight in GENDERS]
        self._rng = rng if rng is not None else random.Random()

    def __len__(self) -> int:
        return len(self._names)

    def country(self) -> str:
        """Pick a country weighted by its rate."""
        return self._rng.choices(self._names, weights=self._weights)[0]

    def gender(self) -> str:
        """Pick a gender weighted by birth ratios."""
        return self._rng.choices(self._genders, weights=self._gender_weights)[0]

    def reborn(self) -> str:
        """Return the reply text for one rebirth attempt."""
        if self._rng.getrandbits(31) > 1 << 27:
            return SUCCESS_TEMPLATE.format(country=self.country(), gender=self.gender())
        return FAILURE_TEXT
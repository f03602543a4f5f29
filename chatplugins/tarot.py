"""Tarot card draws, lookups and spreads."""

from __future__ import annotations

import json
import random
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

BED = "https://gitcode.net/shudorcl/zbp-tarot/-/raw/master/"
POSITIONS = ("『正位』", "『逆位』")
REVERSE_DIRS = ("", "Reverse/")
REASONS = ("您抽到的是~\n", "锵锵锵，塔罗牌的预言是~\n", "诶，让我看看您抽到了~\n")
MAX_DRAW = 20
MAJOR_COUNT = 22

_DRAW_COMMAND = re.compile(r"抽(\d{1,2}张)?((塔罗牌|大阿(尔)?卡纳)|小阿(尔)?卡纳)")


@dataclass(frozen=True)
class Card:
    """One tarot card with its upright and reversed meanings."""

    name: str
    description: str = ""
    reverse_description: str = ""
    img_url: str = ""


@dataclass(frozen=True)
class Formation:
    """A spread layout: how many cards and what each position represents."""

    cards_num: int
    is_cut: bool = False
    represent: list[list[str]] = field(default_factory=list)


@dataclass(frozen=True)
class DrawnCard:
    """A card as drawn, upright or reversed."""

    card: Card
    reversed: bool

    @property
    def position(self) -> str:
        """『正位』 or 『逆位』."""
        return POSITIONS[int(self.reversed)]

    @property
    def description(self) -> str:
        """Meaning of the card in its drawn orientation."""
        return self.card.reverse_description if self.reversed else self.card.description

    @property
    def image_url(self) -> str:
        """URL of the card image in its drawn orientation."""
        return BED + REVERSE_DIRS[int(self.reversed)] + self.card.img_url

    @property
    def title(self) -> str:
        """Heading such as ``『正位』的『name』``."""
        return f"{self.position}的『{self.card.name}』"


def arcana_range(kind: str) -> tuple[int, int]:
    """(first card index, number of cards) for a deck kind."""
    if "小" in kind:
        return 22, 55
    if kind == "混合":
        return 0, 77
    return 0, MAJOR_COUNT


def parse_draw_command(text: str) -> tuple[int, str] | None:
    """Parse ``抽[n张]<kind>``; return (count, kind) or None if it does not match."""
    match = _DRAW_COMMAND.fullmatch(text)
    if match is None:
        return None
    amount, kind = match.group(1), match.group(2)
    n = 1
    if amount:
        n = int(amount[:-1])
        if n <= 0:
            raise ValueError("张数必须为正")
        if n > MAX_DRAW:
            raise ValueError("抽取张数过多")
    return n, kind


class TarotDeck:
    """Cards keyed by their index string, plus named formations."""

    def __init__(
        self,
        cards: Mapping[str, Card],
        formations: Mapping[str, Formation],
        rng: random.Random | None = None,
    ):
        self._cards = dict(cards)
        self._by_name = {card.name: card for card in self._cards.values()}
        self._formations = dict(formations)
        self._rng = rng if rng is not None else random.Random()

    def __len__(self) -> int:
        return len(self._cards)

    @property
    def formation_names(self) -> list[str]:
        """Names of all known formations."""
        return list(self._formations)

    def _card_at(self, index: int) -> Card:
        return self._cards.get(str(index), Card(name=""))

    def _draw_indices(self, n: int, kind: str) -> list[DrawnCard]:
        if n <= 0:
            raise ValueError("张数必须为正")
        start, length = arcana_range(kind)
        picks = self._rng.sample(range(length), n)
        return [
            DrawnCard(self._card_at(start + j), bool(self._rng.randrange(2))) for j in picks
        ]

    def draw(self, n: int, kind: str) -> list[DrawnCard]:
        """Draw ``n`` distinct cards of ``kind``, each upright or reversed at random."""
        return self._draw_indices(n, kind)

    def lookup(self, name: str) -> Card | None:
        """Card with the given name, or None."""
        return self._by_name.get(name)

    def card_list_text(self) -> str:
        """Text listing the major arcana and the minor arcana naming scheme."""
        names = [self._card_at(i).name for i in range(MAJOR_COUNT)]
        return (
            "塔罗牌列表\n大阿尔卡纳:\n"
            + " ".join(names[:7])
            + "\n"
            + " ".join(names[7:14])
            + "\n"
            + " ".join(names[14:22])
            + "\n小阿尔卡纳:\n[圣杯|星币|宝剑|权杖] [0-10|侍从|骑士|王后|国王]"
        )

    def spread(self, kind: str, formation_name: str) -> list[tuple[str, DrawnCard]]:
        """Lay out a formation; pairs of (position meaning, drawn card).

        Raises KeyError naming the known formations if ``formation_name`` is unknown.
        """
        formation = self._formations.get(formation_name)
        if formation is None:
            raise KeyError(
                "没有找到" + formation_name + "噢~\n现有牌阵列表: \n" + "\n".join(self._formations)
            )
        labels: Sequence[str] = formation.represent[0] if formation.represent else ()
        drawn = self._draw_indices(formation.cards_num, kind)
        return [(labels[i] if i < len(labels) else "", card) for i, card in enumerate(drawn)]


def load_deck(
    cards_path: str | Path,
    formations_path: str | Path,
    rng: random.Random | None = None,
) -> TarotDeck:
    """Load cards and formations from their JSON files."""
    with open(cards_path, encoding="utf-8") as fh:
        raw_cards = json.load(fh)
    with open(formations_path, encoding="utf-8") as fh:
        raw_formations = json.load(fh)
    cards = {}
    for key, item in raw_cards.items():
        info = item.get("info", {})
        cards[key] = Card(
            name=item.get("name", ""),
            description=info.get("description", ""),
            reverse_description=info.get("reverseDescription", ""),
            img_url=info.get("imgUrl", ""),
        )
    formations = {
        name: Formation(
            cards_num=int(item.get("cards_num", 0)),
            is_cut=bool(item.get("is_cut", False)),
            represent=[list(row) for row in item.get("represent", [])],
        )
        for name, item in raw_formations.items()
    }
    return TarotDeck(cards, formations, rng)
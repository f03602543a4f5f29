"""Word-guessing game with coloured board rendering."""

from __future__ import annotations

import io
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

CLASSES = {"": 5, "五阶": 5, "六阶": 6, "七阶": 7}

_SIDE = 20
_SPACE = 10
_STEP = _SIDE + 4
_WHITE = (255, 255, 255)


class CellState(Enum):
    """State of one board cell, carrying its drawing colour."""

    MATCH = (125, 166, 108)
    EXIST = (199, 183, 96)
    NOT_EXIST = (123, 123, 123)
    UNDONE = (219, 219, 219)

    @property
    def color(self) -> tuple[int, int, int]:
        """RGB colour used to draw the cell."""
        return self.value


class WordleError(Exception):
    """Base error for rejected guesses."""


class LengthNotEnoughError(WordleError):
    """The guess has the wrong length."""

    def __init__(self) -> None:
        super().__init__("length not enough")


class UnknownWordError(WordleError):
    """The guess is not in the dictionary."""

    def __init__(self) -> None:
        super().__init__("unknown word")


@dataclass(frozen=True)
class GuessResult:
    """Outcome of one accepted guess."""

    won: bool
    exhausted: bool
    states: tuple[CellState, ...]
    attempts: int


def load_wordlist(path: str | Path) -> list[str]:
    """Read a newline-separated word list, sorted, without empty lines."""
    text = Path(path).read_text(encoding="utf-8")
    return sorted(word for word in text.split("\n") if word)


def class_for(name: str | None) -> int:
    """Word length for a difficulty name such as ``六阶``; KeyError if unknown."""
    return CLASSES[name or ""]


def score_guess(guess: str, target: str) -> tuple[CellState, ...]:
    """Colour each letter of ``guess`` against ``target``."""
    states = []
    for letter, wanted in zip(guess, target):
        if letter == wanted:
            states.append(CellState.MATCH)
        elif letter in target:
            states.append(CellState.EXIST)
        else:
            states.append(CellState.NOT_EXIST)
    return tuple(states)


class WordleGame:
    """One round: a target word, a dictionary and the guesses so far."""

    def __init__(self, target: str, dictionary: Iterable[str]):
        self.target = target
        self._dictionary = frozenset(dictionary)
        self._records: list[str] = []

    @property
    def length(self) -> int:
        """Length of the target word."""
        return len(self.target)

    @property
    def max_attempts(self) -> int:
        """Number of guesses allowed."""
        return self.length + 1

    @property
    def history(self) -> tuple[str, ...]:
        """Accepted guesses, in order."""
        return tuple(self._records)

    def guess(self, word: str) -> GuessResult:
        """Submit a guess; raise a WordleError subclass if it is rejected."""
        word = word.lower()
        won = word == self.target
        if not won:
            if len(word) != len(self.target):
                raise LengthNotEnoughError()
            if word not in self._dictionary:
                raise UnknownWordError()
        self._records.append(word)
        return GuessResult(
            won=won,
            exhausted=len(self._records) >= self.max_attempts,
            states=score_guess(word, self.target),
            attempts=len(self._records),
        )

    def render(self) -> bytes:
        """Draw the board as PNG bytes."""
        cls = self.length
        width = _STEP * cls + _SPACE * 2 - 4
        height = _STEP * (cls + 1) + _SPACE * 2 - 4
        image = Image.new("RGB", (width, height), _WHITE)
        draw = ImageDraw.Draw(image)
        font = ImageFont.load_default()
        for i in range(cls + 1):
            for j in range(cls):
                x = _SPACE + j * _STEP
                y = _SPACE + i * _STEP
                if i < len(self._records):
                    word = self._records[i]
                    state = score_guess(word, self.target)[j]
                    draw.rectangle([x, y, x + _SIDE - 1, y + _SIDE - 1], fill=state.color)
                    draw.text((x + 7, y + 4), word[j].upper(), fill=_WHITE, font=font)
                else:
                    draw.rectangle(
                        [x + 1, y + 1, x + _SIDE - 2, y + _SIDE - 2],
                        outline=CellState.UNDONE.color,
                        width=1,
                    )
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()
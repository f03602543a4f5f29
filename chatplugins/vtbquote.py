"""Interactive three-step selection of a VTuber quote and its recording."""

from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import quote_plus

import requests

from chatplugins.vtb import ThirdCategory, VtbDB

MAX_ERRORS = 3
RECORD_UA = "Mozilla/5.0 (Windows NT 6.1; WOW64; rv:6.0) Gecko/20100101 Firefox/6.0"

WRONG_NUMBER = "请输入正确的序号，三次输入错误，指令可退出重输"
EMPTY_CHOICE = "你选择的序号没有内容，请重新选择，三次输入错误，指令可退出重输"
EMPTY_QUOTE = "没有内容请重新选择，三次输入错误，指令可退出重输"
TOO_MANY_ERRORS = "输入错误太多,请重新发指令"

_LAST_SEGMENT = re.compile(r".*/(.*)")
_NUMBER = re.compile(r"[+-]?[0-9]+")


def escape_record_url(url: str) -> str:
    """Percent-escape the last path segment of ``url``, spaces as ``%20``."""
    match = _LAST_SEGMENT.search(url)
    if match is None:
        return url
    segment = match.group(1)
    url = url.replace(segment, quote_plus(segment, safe=""))
    return url.replace("+", "%20")


def _ext(url: str) -> str:
    last = url.rsplit("/", 1)[-1]
    dot = last.rfind(".")
    return last[dot:] if dot >= 0 else ""


def record_filename(first: int, second: int, third: int, url: str) -> str:
    """Cache file name for a recording, keeping the URL's extension."""
    return f"{first}-{second}-{third}{_ext(url)}"


def download_record(path: str | Path, url: str, session=None) -> Path:
    """Download ``url`` to ``path`` unless the file already exists."""
    target = Path(path)
    if not target.exists():
        client = session if session is not None else requests
        response = client.get(
            url,
            headers={
                "Content-Type": "application/x-www-form-urlencoded",
                "User-Agent": RECORD_UA,
            },
            timeout=60,
        )
        target.write_bytes(response.content)
    return target


class QuoteSession:
    """Walks a user through choosing a VTuber, a category and a quote."""

    def __init__(self, db: VtbDB):
        self._db = db
        self._step = 0
        self._errors = 0
        self._indexes = [0, 0, 0]
        self.done = False
        self.choice: ThirdCategory | None = None
        self.record_url = ""
        self.record_name = ""

    def start(self) -> str:
        """The first prompt: the list of VTubers."""
        return self._db.first_category_message()

    def answer(self, text: str) -> list[str]:
        """Handle one reply; return the messages to send back."""
        if self.done:
            raise RuntimeError("session already finished")
        if self._errors >= MAX_ERRORS:
            self.done = True
            return [TOO_MANY_ERRORS]
        if _NUMBER.fullmatch(text) is None:
            self._errors += 1
            return [WRONG_NUMBER]
        num = int(text)
        if self._step == 0:
            return self._choose_first(num)
        if self._step == 1:
            return self._choose_second(num)
        return self._choose_third(num)

    def _choose_first(self, num: int) -> list[str]:
        self._indexes[0] = num
        message = self._db.second_category_message(num)
        if not message:
            self._errors += 1
            return [EMPTY_CHOICE, self._db.first_category_message()]
        self._step = 1
        return [message]

    def _choose_second(self, num: int) -> list[str]:
        self._indexes[1] = num
        message = self._db.third_category_message(self._indexes[0], num)
        if not message:
            self._errors += 1
            return [EMPTY_CHOICE, self._db.second_category_message(self._indexes[0])]
        self._step = 2
        return [message]

    def _choose_third(self, num: int) -> list[str]:
        self._indexes[2] = num
        first, second, third = self._indexes
        tc = self._db.third_category(first, second, third)
        if tc is None or not tc.path:
            self._errors += 1
            self._step = 1
            return [EMPTY_QUOTE, self._db.first_category_message()]
        self.done = True
        self.choice = tc
        self.record_url = escape_record_url(tc.path)
        self.record_name = record_filename(first, second, third, self.record_url)
        return ["请欣赏《" + tc.name + "》"]
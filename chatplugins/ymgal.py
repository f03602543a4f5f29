"""Galgame CG and sticker sets scraped from ymgal, stored in SQLite."""

from __future__ import annotations

import random
import re
import sqlite3
import time
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote_plus

import requests
from lxml import html as lxml_html

WEB_URL = "https://www.ymgal.games"
CG_TYPE = "Gal CG"
EMOTICON_TYPE = "其他"
WEB_PIC_URL = WEB_URL + "/co/picset/"
CG_URL = WEB_URL + "/search?type=picset&sort=default&category=" + quote_plus(CG_TYPE) + "&page="
EMOTICON_URL = (
    WEB_URL + "/search?type=picset&sort=default&category=" + quote_plus(EMOTICON_TYPE) + "&page="
)
NOT_FOUND_TEXT = "暂时没有这样的图呢"

_PAGE_NUMBER_XPATH = (
    "//*[@id='pager-box']/div/a[@class='icon item pager-next']"
    "/preceding-sibling::a[1]/text()"
)
_PICSET_LINK_XPATH = "//*[@id='picset-result-list']/ul/div/div[1]/a"
_TITLE_XPATH = "//meta[@name='name']"
_DESCRIPTION_XPATH = "//meta[@name='description']"
_COUNT_XPATH = "//div[@class='meta-info']/div[@class='meta-right']/span[2]/text()"
_CG_PICTURE_XPATH = (
    "//*[@id='main-picset-warp']/div/div[2]/div/div[@class='swiper-wrapper']/div[{}]"
)
_EMOTICON_PICTURE_XPATH = "//*[@id='main-picset-warp']/div/div[@class='stream-list']/div[{}]/img"
_NUMBER = re.compile(r"\d+")


@dataclass(frozen=True)
class Ymgal:
    """One picture set: its id, title, type, description and picture URLs."""

    id: int
    title: str
    picture_type: str
    picture_description: str = ""
    picture_list: str = ""

    @property
    def pictures(self) -> list[str]:
        """Picture URLs of the set."""
        return self.picture_list.split(",") if self.picture_list else []


def picture_type_for(name: str) -> str:
    """Stored picture type for a command word: ``表情包`` or ``CG``."""
    return EMOTICON_TYPE if name == "表情包" else CG_TYPE


def _document(html: bytes | str):
    if not (html.strip() if isinstance(html, (str, bytes)) else html):
        raise ValueError("empty page")
    return lxml_html.document_fromstring(html)


def _find_one(doc, expr: str):
    found = doc.xpath(expr)
    if not found:
        raise ValueError(f"element not found: {expr}")
    return found[0]


def _second_attribute(element) -> str:
    items = element.items()
    if len(items) < 2:
        raise ValueError(f"element <{element.tag}> has no second attribute")
    return items[1][1]


def _first_number(text: str) -> int:
    match = _NUMBER.search(text)
    if match is None:
        raise ValueError(f"no number in {text!r}")
    return int(match.group())


def parse_page_count(html: bytes | str) -> int:
    """Number of the last result page shown in a search page's pager."""
    doc = _document(html)
    return int(str(_find_one(doc, _PAGE_NUMBER_XPATH)).strip())


def parse_picset_ids(html: bytes | str) -> list[str]:
    """Picture-set ids linked from a search result page, in page order."""
    doc = _document(html)
    ids = []
    for link in doc.xpath(_PICSET_LINK_XPATH):
        values = list(link.attrib.values())
        match = _NUMBER.search(values[0]) if values else None
        if match is not None:
            ids.append(match.group())
    return ids


def parse_picset(html: bytes | str, pic_id: int | str, picture_type: str) -> Ymgal:
    """Build an entry from a picture-set page."""
    doc = _document(html)
    title = _second_attribute(_find_one(doc, _TITLE_XPATH))
    description = _second_attribute(_find_one(doc, _DESCRIPTION_XPATH))
    count = _first_number(str(_find_one(doc, _COUNT_XPATH)))
    template = _CG_PICTURE_XPATH if picture_type == CG_TYPE else _EMOTICON_PICTURE_XPATH
    urls = [_second_attribute(_find_one(doc, template.format(i))) for i in range(1, count + 1)]
    return Ymgal(
        id=int(pic_id),
        title=title,
        picture_type=picture_type,
        picture_description=description,
        picture_list=",".join(urls),
    )


def format_entry(entry: Ymgal | None) -> list[tuple[str, str]]:
    """Message parts for an entry: ("text", ...) and ("image", url) pairs.

    Raises LookupError when there is nothing to show.
    """
    if entry is None or not entry.picture_list:
        raise LookupError(NOT_FOUND_TEXT)
    parts = [("text", entry.title)]
    if entry.picture_description:
        parts.append(("text", entry.picture_description))
    parts.extend(("image", url) for url in entry.pictures)
    return parts


_COLUMNS = "id, title, picture_type, picture_description, picture_list"


class YmgalDB:
    """Picture sets keyed by their ymgal id."""

    def __init__(self, path: str | Path):
        self._conn = sqlite3.connect(str(path))
        self._conn.execute(
            "CREATE TABLE IF NOT EXISTS ymgal ("
            "id INTEGER PRIMARY KEY, title TEXT, picture_type TEXT, "
            "picture_description VARCHAR(1024), picture_list VARCHAR(20000))"
        )
        self._conn.commit()

    def __enter__(self) -> "YmgalDB":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        """Close the database."""
        self._conn.close()

    def upsert(self, entry: Ymgal) -> None:
        """Insert the entry, or update the one with the same id."""
        self._conn.execute(
            f"INSERT INTO ymgal ({_COLUMNS}) VALUES (?, ?, ?, ?, ?) "
            "ON CONFLICT(id) DO UPDATE SET title = excluded.title, "
            "picture_type = excluded.picture_type, "
            "picture_description = excluded.picture_description, "
            "picture_list = excluded.picture_list",
            (
                entry.id,
                entry.title,
                entry.picture_type,
                entry.picture_description,
                entry.picture_list,
            ),
        )
        self._conn.commit()

    def get(self, pic_id: int | str) -> Ymgal | None:
        """Entry with the given id, or None."""
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM ymgal WHERE id = ?", (int(pic_id),)
        ).fetchone()
        return Ymgal(*row) if row else None

    def _pick(self, where: str, params: tuple, rng: random.Random | None) -> Ymgal | None:
        (count,) = self._conn.execute(
            f"SELECT COUNT(*) FROM ymgal WHERE {where}", params
        ).fetchone()
        if count == 0:
            return None
        chooser = rng if rng is not None else random.Random()
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM ymgal WHERE {where} ORDER BY id LIMIT 1 OFFSET ?",
            (*params, chooser.randrange(count)),
        ).fetchone()
        return Ymgal(*row)

    def random(self, picture_type: str, rng: random.Random | None = None) -> Ymgal | None:
        """A random entry of the given type, or None."""
        return self._pick("picture_type = ?", (picture_type,), rng)

    def search(
        self, picture_type: str, key: str, rng: random.Random | None = None
    ) -> Ymgal | None:
        """A random entry of the type whose title or description contains ``key``."""
        pattern = "%" + key + "%"
        return self._pick(
            "picture_type = ? AND (picture_description LIKE ? OR title LIKE ?)",
            (picture_type, pattern, pattern),
            rng,
        )


def _load(url: str, session) -> bytes:
    response = session.get(url, timeout=30)
    response.raise_for_status()
    return response.content


def update_pictures(db: YmgalDB, session=None, delay: float = 0.5) -> list[int]:
    """Scrape new picture sets of both types into ``db``; return the stored ids.

    Ids are walked from the oldest listed; the walk stops at the first one
    already stored with pictures.
    """
    client = session if session is not None else requests.Session()
    max_cg = parse_page_count(_load(CG_URL + "1", client))
    max_emoticon = parse_page_count(_load(EMOTICON_URL + "1", client))

    listings = []
    for base, picture_type, pages in (
        (CG_URL, CG_TYPE, max_cg),
        (EMOTICON_URL, EMOTICON_TYPE, max_emoticon),
    ):
        ids: list[str] = []
        for page in range(1, pages + 1):
            ids.extend(parse_picset_ids(_load(base + str(page), client)))
            time.sleep(delay)
        listings.append((picture_type, ids))

    stored = []
    for picture_type, ids in listings:
        for pic_id in reversed(ids):
            existing = db.get(pic_id)
            if existing is not None and existing.picture_list:
                break
            entry = parse_picset(_load(WEB_PIC_URL + pic_id, client), pic_id, picture_type)
            db.upsert(entry)
            stored.append(entry.id)
            time.sleep(delay)
    return stored
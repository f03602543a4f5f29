"""Fetchers for a handful of joke and quote web APIs."""

from __future__ import annotations

import json
from dataclasses import dataclass

import requests
from lxml import html as lxml_html

CHP_URL = "https://api.shadiao.app/chp"
DU_URL = "https://api.shadiao.app/du"
PYQ_URL = "https://api.shadiao.app/pyq"
YDUANZI_URL = "http://www.yduanzi.com/duanzi/getduanzi"
CHAYI_URL = "https://api.lovelive.tools/api/SweetNothings/Web/0"
GANHAI_URL = "https://api.lovelive.tools/api/SweetNothings/Web/1"
ERGOFABULOUS_URL = "https://ergofabulous.org/luther/?"
UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/96.0.4664.110 Safari/537.36"
)
SD_REFERER = "https://api.shadiao.app/"
YDUANZI_REFERER = "http://www.yduanzi.com/?utm_source=shadiao.app"
LOVELIVE_REFERER = "https://lovelive.tools/"

_LUTHER_XPATH = '//main[@role="main"]/p[@class="larger"]/text()'


@dataclass(frozen=True)
class _Endpoint:
    url: str
    method: str
    referer: str | None
    path: str | None


ENDPOINTS = {
    "哄我": _Endpoint(CHP_URL, "GET", SD_REFERER, "data.text"),
    "来碗毒鸡汤": _Endpoint(DU_URL, "GET", SD_REFERER, "data.text"),
    "发个朋友圈": _Endpoint(PYQ_URL, "GET", SD_REFERER, "data.text"),
    "来碗绿茶": _Endpoint(CHAYI_URL, "GET", LOVELIVE_REFERER, "returnObj.content"),
    "渣我": _Endpoint(GANHAI_URL, "GET", LOVELIVE_REFERER, "returnObj.content"),
    "讲个段子": _Endpoint(YDUANZI_URL, "POST", YDUANZI_REFERER, "duanzi"),
    "马丁路德骂我": _Endpoint(ERGOFABULOUS_URL, "GET", None, None),
}


def _as_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def extract_text(data: bytes | str, path: str) -> str:
    """Value at a dotted ``path`` in a JSON document as text; empty if absent."""
    try:
        node = json.loads(data)
    except ValueError:
        return ""
    for part in path.split("."):
        if isinstance(node, dict) and part in node:
            node = node[part]
        elif isinstance(node, list) and part.isdigit() and int(part) < len(node):
            node = node[int(part)]
        else:
            return ""
    return _as_text(node)


def format_duanzi(text: str) -> str:
    """Turn ``<br>`` tags into newlines."""
    return text.replace("<br>", "\n")


def parse_luther(html: bytes | str) -> str:
    """Extract the insult from an ergofabulous page; ValueError if absent."""
    if not (html.strip() if isinstance(html, str) else html.strip()):
        raise ValueError("empty page")
    doc = lxml_html.fromstring(html)
    found = doc.xpath(_LUTHER_XPATH)
    if not found:
        raise ValueError("insult not found in page")
    return str(found[0])


class ShadiaoClient:
    """Fetches reply text for each supported command."""

    def __init__(self, session=None):
        self._session = session if session is not None else requests.Session()

    @staticmethod
    def commands() -> list[str]:
        """All commands this client answers."""
        return list(ENDPOINTS)

    def _request(self, endpoint: _Endpoint) -> bytes:
        headers = {"User-Agent": UA}
        if endpoint.referer:
            headers["Referer"] = endpoint.referer
        response = self._session.request(
            endpoint.method, endpoint.url, headers=headers, timeout=30
        )
        response.raise_for_status()
        return response.content

    def fetch(self, command: str) -> str:
        """Fetch the reply for ``command``; KeyError if unsupported."""
        endpoint = ENDPOINTS[command]
        data = self._request(endpoint)
        if endpoint.path is None:
            return parse_luther(data)
        text = extract_text(data, endpoint.path)
        if command == "讲个段子":
            text = format_duanzi(text)
        return text
import json

import pytest

from chatplugins.shadiao import (
    CHAYI_URL,
    CHP_URL,
    ERGOFABULOUS_URL,
    GANHAI_URL,
    LOVELIVE_REFERER,
    SD_REFERER,
    UA,
    YDUANZI_REFERER,
    YDUANZI_URL,
    ShadiaoClient,
    extract_text,
    format_duanzi,
    parse_luther,
)


class _Response:
    def __init__(self, content, status=200):
        self.content = content
        self.status = status

    def raise_for_status(self):
        if self.status != 200:
            raise RuntimeError(f"status {self.status}")


class _Session:
    def __init__(self, content, status=200):
        self.content = content
        self.status = status
        self.calls = []

    def request(self, method, url, headers=None, timeout=None):
        self.calls.append((method, url, headers))
        return _Response(self.content, self.status)


LUTHER_PAGE = (
    "<html><body><main role=\"main\">"
    "<p class=\"larger\">You are a fool.</p>"
    "<p>other</p></main></body></html>"
)


def test_extract_nested():
    data = json.dumps({"data": {"text": "hi"}}).encode()
    assert extract_text(data, "data.text") == "hi"


def test_extract_missing():
    assert extract_text(b'{"data": {}}', "data.text") == ""


def test_extract_invalid_json():
    assert extract_text(b"not json", "data.text") == ""


def test_extract_list_index_and_number():
    data = json.dumps({"items": [{"n": 5}, {"n": 6}]})
    assert extract_text(data, "items.1.n") == "6"


def test_extract_null_is_empty():
    assert extract_text('{"a": null}', "a") == ""


def test_format_duanzi():
    assert format_duanzi("a<br>b<br>c") == "a\nb\nc"


def test_parse_luther():
    assert parse_luther(LUTHER_PAGE) == "You are a fool."


def test_parse_luther_missing():
    with pytest.raises(ValueError):
        parse_luther("<html><body><p>nothing</p></body></html>")


def test_fetch_shadiao():
    session = _Session(json.dumps({"data": {"text": "sweet"}}).encode())
    assert ShadiaoClient(session).fetch("哄我") == "sweet"
    method, url, headers = session.calls[0]
    assert (method, url) == ("GET", CHP_URL)
    assert headers["Referer"] == SD_REFERER
    assert headers["User-Agent"] == UA


@pytest.mark.parametrize("command,url", [("来碗绿茶", CHAYI_URL), ("渣我", GANHAI_URL)])
def test_fetch_sweetnothings(command, url):
    session = _Session(json.dumps({"returnObj": {"content": "tea"}}).encode())
    assert ShadiaoClient(session).fetch(command) == "tea"
    method, called, headers = session.calls[0]
    assert (method, called) == ("GET", url)
    assert headers["Referer"] == LOVELIVE_REFERER


def test_fetch_duanzi_posts_and_formats():
    session = _Session(json.dumps({"duanzi": "x<br>y"}).encode())
    assert ShadiaoClient(session).fetch("讲个段子") == "x\ny"
    method, url, headers = session.calls[0]
    assert (method, url) == ("POST", YDUANZI_URL)
    assert headers["Referer"] == YDUANZI_REFERER


def test_fetch_luther():
    session = _Session(LUTHER_PAGE.encode())
    assert ShadiaoClient(session).fetch("马丁路德骂我") == "You are a fool."
    assert session.calls[0][1] == ERGOFABULOUS_URL


def test_fetch_unknown_command():
    with pytest.raises(KeyError):
        ShadiaoClient(_Session(b"{}")).fetch("unknown")


def test_fetch_http_error():
    with pytest.raises(RuntimeError):
        ShadiaoClient(_Session(b"{}", status=500)).fetch("哄我")


def test_commands_cover_all():
    assert set(ShadiaoClient.commands()) == {
        "哄我",
        "来碗毒鸡汤",
        "发个朋友圈",
        "来碗绿茶",
        "渣我",
        "讲个段子",
        "马丁路德骂我",
    }
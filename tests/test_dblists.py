import logging

import pytest
import requests

import dblists
from dblists import (
    RegistryError,
    RegistrySnapshot,
    fetch_from_url,
    load_from_checkout,
    parse_dblist,
)


def write_checkout(root, **lists):
    (root / "dblists").mkdir()
    for name, dbnames in lists.items():
        (root / "dblists" / f"{name}.dblist").write_text(
            "\n".join(dbnames) + "\n", encoding="UTF-8"
        )


def test_parse_dblist():
    text = "# Automatically maintained\nenwiki\n\nfrwiki  # French\n  dewiki\n"
    assert parse_dblist(text) == ["enwiki", "frwiki", "dewiki"]


def test_public_preserves_open_order():
    snapshot = RegistrySnapshot(all=("a", "b", "c"), open=("a", "b", "c"), private=("b",))
    assert snapshot.public == ["a", "c"]


def test_public_is_not_resorted():
    snapshot = RegistrySnapshot(
        all=("z", "y", "x", "p"), open=("z", "y", "x"), private=("p", "y")
    )
    assert snapshot.public == ["z", "x"]


def test_load_from_checkout(tmp_path):
    write_checkout(
        tmp_path,
        all=["enwiki", "frwiki", "officewiki"],
        open=["enwiki", "frwiki"],
        private=["officewiki"],
    )
    snapshot = load_from_checkout(tmp_path)
    assert snapshot.all == ("enwiki", "frwiki", "officewiki")
    assert snapshot.open == ("enwiki", "frwiki")
    assert snapshot.private == ("officewiki",)


def test_load_from_checkout_missing_file(tmp_path):
    write_checkout(tmp_path, all=["enwiki"], open=["enwiki"])
    with pytest.raises(RegistryError):
        load_from_checkout(tmp_path)


def test_empty_open_list_is_an_error(tmp_path):
    write_checkout(tmp_path, all=["enwiki"], open=["# nothing"], private=[])
    with pytest.raises(RegistryError):
        load_from_checkout(tmp_path)


def test_missing_list_is_an_error():
    with pytest.raises(RegistryError):
        RegistrySnapshot.from_dblists({"all": ["a"], "open": ["a"]})


class FakeResponse:
    def __init__(self, text, status_code=200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


def test_fetch_from_url(monkeypatch):
    files = {
        "all.dblist": "enwiki\nfrwiki\nofficewiki\n",
        "open.dblist": "enwiki\nfrwiki\n",
        "private.dblist": "officewiki\n",
    }
    seen = []

    def fake_get(session, url, timeout=None):
        seen.append((url, session.headers["User-Agent"]))
        return FakeResponse(files[url.rsplit("/", 1)[1]])

    monkeypatch.setattr(requests.Session, "get", fake_get)
    snapshot = fetch_from_url("https://example.org/dblists/")
    assert snapshot.public == ["enwiki", "frwiki"]
    assert [url for url, _ in seen] == [
        "https://example.org/dblists/all.dblist",
        "https://example.org/dblists/open.dblist",
        "https://example.org/dblists/private.dblist",
    ]
    assert all(agent == dblists.USER_AGENT for _, agent in seen)


def test_fetch_from_url_http_error(monkeypatch):
    monkeypatch.setattr(
        requests.Session, "get", lambda session, url, timeout=None: FakeResponse("", 404)
    )
    with pytest.raises(RegistryError):
        fetch_from_url("https://example.org/dblists")


def test_fetch_from_url_connection_error(monkeypatch):
    def fake_get(session, url, timeout=None):
        raise requests.ConnectionError("Connection refused")

    monkeypatch.setattr(requests.Session, "get", fake_get)
    with pytest.raises(RegistryError):
        fetch_from_url("https://example.org/dblists")


def test_private_wiki_missing_from_all_is_reported(caplog):
    with caplog.at_level(logging.WARNING, logger="dblists"):
        snapshot = RegistrySnapshot.from_dblists(
            {"all": ["a"], "open": ["a", "b"], "private": ["zz"]}
        )
    assert "zz" in caplog.text
    assert snapshot.public == ["a", "b"]


def test_consistent_registry_is_quiet(caplog):
    with caplog.at_level(logging.WARNING, logger="dblists"):
        RegistrySnapshot.from_dblists(
            {"all": ["a", "b"], "open": ["a"], "private": ["b"]}
        )
    assert caplog.text == ""

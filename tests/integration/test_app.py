"""
Integration tests for the HTTP surface (main.create_app).

Covers:
    - home page form and alias display
    - form submission -> redirect to /?alias=...
    - JSON API creation
    - /{alias} redirects, 404 for unknown aliases
    - 400 for invalid URLs, 500 for store failures
"""

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shorturl.errors import StoreFailure
from shorturl.manager.allocator import decode
from shorturl.storage.storage import Storage


def test_health_returns_ok(client):
    resp = client.get("/_health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_home_page_renders_form(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]
    assert '<form method="post"' in resp.text
    assert 'id="short-url"' not in resp.text


def test_home_page_shows_alias(client):
    resp = client.get("/", params={"alias": "1"})
    assert resp.status_code == 200
    assert '<code id="alias">1</code>' in resp.text
    assert "http://testserver/1" in resp.text


def test_home_page_alias_with_slash(client):
    resp = client.get("/", params={"alias": "a/b"})
    assert resp.status_code == 200
    assert "http://testserver/a%2Fb" in resp.text


def test_form_post_redirects_to_home_with_alias(client, storage):
    resp = client.post("/", data={"url": "https://example.org/page"}, follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/?alias=1"
    assert storage.get_by_alias("1").url == "https://example.org/page"


def test_form_post_trims_url(client, storage):
    client.post("/", data={"url": "  https://example.org/x  "}, follow_redirects=False)
    assert storage.get_by_id(1).url == "https://example.org/x"


@pytest.mark.parametrize("bad", ["not a url", "", "ftp://example.com"])
def test_form_post_invalid_url(client, storage, bad):
    resp = client.post("/", data={"url": bad}, follow_redirects=False)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid URL"
    assert storage.records == {}


def test_form_post_missing_field_is_invalid(client):
    resp = client.post("/", data={}, follow_redirects=False)
    assert resp.status_code == 400


def test_api_create(client):
    resp = client.post("/api/urls", json={"url": "https://example.org/page"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["id"] == 1
    assert body["alias"] == "1"
    assert body["url"] == "https://example.org/page"
    assert body["short_url"] == "http://testserver/1"
    assert body["created_at"]


def test_api_create_invalid(client):
    resp = client.post("/api/urls", json={"url": "not a url"})
    assert resp.status_code == 400


def test_api_missing_url_field(client):
    resp = client.post("/api/urls", json={})
    assert resp.status_code == 422


def test_redirect(client):
    client.post("/api/urls", json={"url": "https://example.com"})
    resp = client.get("/1", follow_redirects=False)
    assert resp.status_code == 302
    assert resp.headers["location"] == "https://example.com"


def test_redirect_same_url_twice(client):
    a = client.post("/api/urls", json={"url": "https://example.com/same"}).json()
    b = client.post("/api/urls", json={"url": "https://example.com/same"}).json()
    assert a["alias"] != b["alias"]
    for alias in (a["alias"], b["alias"]):
        resp = client.get(f"/{alias}", follow_redirects=False)
        assert resp.headers["location"] == "https://example.com/same"


def test_redirect_unknown_alias(client):
    resp = client.get("/doesNotExist", follow_redirects=False)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Short URL not found"


def test_redirect_is_case_sensitive(client):
    for i in range(11):
        client.post("/api/urls", json={"url": f"https://example.com/{i}"})
    # id 10 -> "a"; "A" is id 36, which does not exist yet.
    assert client.get("/a", follow_redirects=False).status_code == 302
    assert client.get("/A", follow_redirects=False).status_code == 404


def test_browser_flow_follows_redirect_chain(client):
    original = "http://testserver/_health"
    client.post("/", data={"url": original}, follow_redirects=False)
    resp = client.get("/1")
    assert resp.status_code == 200
    assert resp.history and resp.history[0].status_code == 302
    assert resp.json() == {"status": "ok"}


class _BrokenStorage(Storage):
    def insert_url(self, url):
        raise StoreFailure("db down")

    def get_by_alias(self, alias):
        raise StoreFailure("db down")


@pytest.fixture
def broken_client():
    with TestClient(create_app(storage=_BrokenStorage())) as test_client:
        yield test_client


def test_store_failure_on_create(broken_client):
    resp = broken_client.post("/", data={"url": "https://example.com"}, follow_redirects=False)
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Internal server error"

    resp = broken_client.post("/api/urls", json={"url": "https://example.com"})
    assert resp.status_code == 500


def test_store_failure_on_redirect(broken_client):
    resp = broken_client.get("/1", follow_redirects=False)
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Server error"


def test_startup_ensures_schema():
    calls = []

    class _TrackingStorage(Storage):
        def ensure_schema(self):
            calls.append(True)

    with TestClient(create_app(storage=_TrackingStorage())):
        pass
    assert calls == [True]


@pytest.mark.parametrize("alias", ["docs", "redoc", "openapi"])
def test_alias_named_like_docs_route_redirects(alias):
    storage = Storage(start=decode(alias))
    with TestClient(create_app(storage=storage)) as test_client:
        created = test_client.post("/api/urls", json={"url": "https://example.com/docs"}).json()
        assert created["alias"] == alias
        resp = test_client.get(f"/{alias}", follow_redirects=False)
    assert resp.status_code == 302
    assert resp.headers["location"] == "https://example.com/docs"


def test_docs_served_under_underscore_paths(client):
    assert client.get("/_docs").status_code == 200
    assert client.get("/_openapi.json").status_code == 200

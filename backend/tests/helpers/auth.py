"""Authentication helpers for tests."""

from __future__ import annotations

from tests.factories.user import DEFAULT_PASSWORD

USERS_URL = "/api/v1/users"


def login(client, username: str, password: str = DEFAULT_PASSWORD) -> dict:
    """Log in through the API and return the response ``data``.

    The test client keeps the ``accessToken``/``refreshToken`` cookies set by
    the response.
    """

    resp = client.post(f"{USERS_URL}/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.get_data(as_text=True)
    return resp.get_json()["data"]


def bearer(token: str) -> dict[str, str]:
    """Return an ``Authorization`` header carrying ``token``."""

    return {"Authorization": f"Bearer {token}"}


def cookie_names(resp) -> dict[str, str]:
    """Map cookie name to the raw ``Set-Cookie`` header for ``resp``."""

    headers = resp.headers.getlist("Set-Cookie")
    return {h.split("=", 1)[0]: h for h in headers}

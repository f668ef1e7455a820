# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""End-to-end tests for the CSRF filter chain running inside a Starlette app."""

from __future__ import annotations

from urllib.parse import unquote

import pytest
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from flycsrf.config.properties.csrf import CsrfConfig
from flycsrf.kernel.exceptions import MissingTokenAttributeError, RandomSourceError
from flycsrf.security.csrf import CSRF_ATTRIBUTE
from flycsrf.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from flycsrf.web.adapters.starlette.filters import CsrfFirewallFilter, CsrfTokenFilter

_METHODS = ["GET", "HEAD", "OPTIONS", "POST", "PUT", "DELETE"]

_CONFIG = CsrfConfig(cookie="csrf-token", length=16, lifetime=86400)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class Handler:
    """Route handler counting how often the application was reached."""

    def __init__(self, body: str = "all good") -> None:
        self.calls = 0
        self._body = body

    async def endpoint(self, request: Request) -> PlainTextResponse:
        self.calls += 1
        return PlainTextResponse(self._body, headers={"X-Handler": "reached"})


async def _token_handler(request: Request) -> PlainTextResponse:
    return PlainTextResponse(getattr(request.state, CSRF_ATTRIBUTE))


async def _note_handler(request: Request) -> PlainTextResponse:
    form = await request.form()
    return PlainTextResponse(str(form["note"]))


def _make_app(*filters, handler=None) -> Starlette:
    return Starlette(
        routes=[
            Route("/", (handler or Handler()).endpoint, methods=_METHODS),
            Route("/token", _token_handler),
            Route("/note", _note_handler, methods=["POST"]),
        ],
        middleware=[Middleware(WebFilterChainMiddleware, filters=list(filters))],
    )


def _lenient_app(handler=None) -> Starlette:
    return _make_app(CsrfTokenFilter(_CONFIG), CsrfFirewallFilter(), handler=handler)


def _strict_app(handler=None) -> Starlette:
    return _make_app(CsrfTokenFilter(_CONFIG), CsrfFirewallFilter.strict(), handler=handler)


def _fetch_cookies(response) -> dict[str, str]:
    result: dict[str, str] = {}
    for line in response.headers.get_list("set-cookie"):
        name, _, rest = line.partition("=")
        result[name] = unquote(rest.split(";", 1)[0])
    return result


def _cookie(token: str) -> dict[str, str]:
    return {"Cookie": f"csrf-token={token}"}


def _issue_token(client: TestClient) -> str:
    response = client.get("/")
    assert response.status_code == 200
    client.cookies.clear()
    return _fetch_cookies(response)["csrf-token"]


# ---------------------------------------------------------------------------
# Token issuance
# ---------------------------------------------------------------------------


class TestTokenIssuance:
    def test_get_issues_cookie_matching_attribute(self):
        client = TestClient(_make_app(CsrfTokenFilter(_CONFIG)))
        response = client.get("/token")

        assert response.status_code == 200
        cookies = _fetch_cookies(response)
        assert len(cookies["csrf-token"]) == 16
        assert cookies["csrf-token"] == response.text

    def test_cookie_header_literal(self):
        client = TestClient(_make_app(CsrfTokenFilter(_CONFIG)))
        header = client.get("/token").headers["set-cookie"]

        parts = header.split("; ")
        assert parts[0].startswith("csrf-token=")
        assert parts[1].startswith("Expires=") and parts[1].endswith(" GMT")
        assert parts[2:] == ["Max-Age=86400", "HttpOnly"]

    def test_existing_cookie_is_not_reissued(self):
        client = TestClient(_make_app(CsrfTokenFilter(_CONFIG)))
        response = client.get("/token", headers=_cookie("existing-token"))

        assert response.text == "existing-token"
        assert "set-cookie" not in response.headers

    def test_cookie_name_with_reserved_characters_round_trips(self):
        config = CsrfConfig(cookie="csrf token", length=16)
        handler = Handler()
        app = _make_app(CsrfTokenFilter(config), CsrfFirewallFilter(), handler=handler)
        client = TestClient(app)

        issued = client.get("/")
        client.cookies.clear()
        token = _fetch_cookies(issued)["csrf%20token"]

        response = client.post(
            "/", headers={"Cookie": f"csrf%20token={token}", "X-CSRF-Token": token}
        )

        assert response.status_code == 200
        assert handler.calls == 2
        assert "set-cookie" not in response.headers

    def test_zero_length_fails_fast(self):
        client = TestClient(_make_app(CsrfTokenFilter(CsrfConfig(length=0))))
        with pytest.raises(RandomSourceError):
            client.get("/")


# ---------------------------------------------------------------------------
# Lenient firewall
# ---------------------------------------------------------------------------


class TestLenientFirewall:
    def test_get_passes_and_issues_cookie(self):
        client = TestClient(_lenient_app())
        response = client.get("/")

        assert response.status_code == 200
        assert response.text == "all good"
        assert "csrf-token" in _fetch_cookies(response)

    @pytest.mark.parametrize("method", ["GET", "HEAD", "OPTIONS"])
    def test_safe_methods_ignore_wrong_token(self, method):
        handler = Handler()
        client = TestClient(_lenient_app(handler))
        response = client.request(method, "/", headers={**_cookie("tok"), "X-CSRF-Token": "wrong"})

        assert response.status_code == 200
        assert handler.calls == 1

    def test_post_without_cookie_or_token_forbidden(self):
        handler = Handler()
        response = TestClient(_lenient_app(handler)).post("/")

        assert response.status_code == 412
        assert response.content == b""
        assert handler.calls == 0

    def test_post_with_cookie_only_forbidden(self):
        handler = Handler()
        client = TestClient(_lenient_app(handler))
        token = _issue_token(client)
        calls_before = handler.calls

        response = client.post("/", headers=_cookie(token))

        assert response.status_code == 412
        assert handler.calls == calls_before

    def test_post_with_form_field_ok(self):
        client = TestClient(_lenient_app())
        token = _issue_token(client)

        response = client.post("/", data={"csrf-token": token}, headers=_cookie(token))

        assert response.status_code == 200
        assert response.text == "all good"
        assert response.headers["X-Handler"] == "reached"
        assert "set-cookie" not in response.headers

    def test_post_with_json_field_ok(self):
        client = TestClient(_lenient_app())
        token = _issue_token(client)

        response = client.post("/", json={"csrf-token": token}, headers=_cookie(token))

        assert response.status_code == 200
        assert response.text == "all good"

    def test_post_with_multipart_field_ok(self):
        client = TestClient(_lenient_app())
        token = _issue_token(client)

        response = client.post(
            "/",
            data={"csrf-token": token},
            files={"upload": ("note.txt", b"content", "text/plain")},
            headers=_cookie(token),
        )

        assert response.status_code == 200

    def test_post_with_wrong_form_field_forbidden(self):
        client = TestClient(_lenient_app())
        token = _issue_token(client)

        response = client.post("/", data={"csrf-token": "not-the-token"}, headers=_cookie(token))

        assert response.status_code == 412

    def test_post_with_json_array_forbidden(self):
        client = TestClient(_lenient_app())
        token = _issue_token(client)

        response = client.post("/", json=[token], headers=_cookie(token))

        assert response.status_code == 412

    def test_post_with_deeply_nested_json_forbidden(self):
        handler = Handler()
        client = TestClient(_lenient_app(handler))
        token = _issue_token(client)
        calls_before = handler.calls

        response = client.post(
            "/",
            content=b'{"a":' * 100000,
            headers={**_cookie(token), "Content-Type": "application/json"},
        )

        assert response.status_code == 412
        assert handler.calls == calls_before

    def test_post_with_header_ok(self):
        client = TestClient(_lenient_app())
        token = _issue_token(client)

        response = client.post("/", headers={**_cookie(token), "X-CSRF-Token": token})

        assert response.status_code == 200
        assert response.text == "all good"

    def test_header_takes_precedence_over_body(self):
        client = TestClient(_lenient_app())
        token = _issue_token(client)

        accepted = client.post(
            "/",
            data={"csrf-token": "stale"},
            headers={**_cookie(token), "X-CSRF-Token": token},
        )
        rejected = client.post(
            "/",
            data={"csrf-token": token},
            headers={**_cookie(token), "X-CSRF-Token": "stale"},
        )

        assert accepted.status_code == 200
        assert rejected.status_code == 412

    def test_handler_can_read_form_after_validation(self):
        client = TestClient(_lenient_app())
        token = _issue_token(client)

        response = client.post("/note", data={"csrf-token": token, "note": "hello"}, headers=_cookie(token))

        assert response.status_code == 200
        assert response.text == "hello"

    @pytest.mark.parametrize("method", ["PUT", "DELETE"])
    def test_other_unsafe_methods_validated(self, method):
        client = TestClient(_lenient_app())
        token = _issue_token(client)

        assert client.request(method, "/", headers=_cookie(token)).status_code == 412
        ok = client.request(method, "/", headers={**_cookie(token), "X-CSRF-Token": token})
        assert ok.status_code == 200


# ---------------------------------------------------------------------------
# Strict firewall
# ---------------------------------------------------------------------------


class TestStrictFirewall:
    def test_get_without_token_forbidden(self):
        handler = Handler()
        client = TestClient(_strict_app(handler))
        response = client.get("/")

        assert response.status_code == 412
        assert handler.calls == 0
        # The issuer still hands out a cookie on the rejected response.
        assert "csrf-token" in _fetch_cookies(response)

    def test_get_with_cookie_only_forbidden(self):
        client = TestClient(_strict_app())
        token = _fetch_cookies(client.get("/"))["csrf-token"]
        client.cookies.clear()

        assert client.get("/", headers=_cookie(token)).status_code == 412

    def test_get_with_header_and_cookie_ok(self):
        client = TestClient(_strict_app())
        token = _fetch_cookies(client.get("/"))["csrf-token"]
        client.cookies.clear()

        response = client.get("/", headers={**_cookie(token), "X-CSRF-Token": token})

        assert response.status_code == 200
        assert response.text == "all good"


# ---------------------------------------------------------------------------
# Wiring errors
# ---------------------------------------------------------------------------


class TestFirewallWiring:
    @pytest.mark.parametrize("method", ["GET", "POST"])
    def test_firewall_without_token_filter_raises(self, method):
        handler = Handler()
        client = TestClient(_make_app(CsrfFirewallFilter(), handler=handler))

        with pytest.raises(MissingTokenAttributeError):
            client.request(method, "/")
        assert handler.calls == 0

    def test_firewall_ahead_of_token_filter_raises(self):
        client = TestClient(_make_app(CsrfFirewallFilter(), CsrfTokenFilter(_CONFIG)))

        with pytest.raises(MissingTokenAttributeError):
            client.post("/")

    def test_excluded_path_skips_firewall(self):
        firewall = CsrfFirewallFilter(exclude_patterns=["/note"])
        client = TestClient(_make_app(CsrfTokenFilter(_CONFIG), firewall))

        response = client.post("/note", data={"note": "webhook"})

        assert response.status_code == 200
        assert response.text == "webhook"

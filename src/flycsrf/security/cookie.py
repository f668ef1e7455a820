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
"""Set-Cookie header construction for the CSRF token cookie."""

from __future__ import annotations

import time
from email.utils import formatdate
from urllib.parse import quote

from flycsrf.config.properties.csrf import CsrfConfig


def encode_cookie_component(value: str) -> str:
    """Percent-encode a cookie name or value, keeping only unreserved characters."""
    return quote(value, safe="")


class CookieBuilder:
    """Accumulates ``Set-Cookie`` attributes in the order they are added.

    Usage::

        header = CookieBuilder().value("csrf-token", token).http_only().build()
    """

    def __init__(self) -> None:
        self._attributes: list[str] = []

    def value(self, name: str, value: str) -> CookieBuilder:
        """Add ``name=value``, percent-encoding everything but unreserved characters."""
        encoded = f"{encode_cookie_component(name)}={encode_cookie_component(value)}"
        self._attributes.append(encoded)
        return self

    def expires(self, lifetime: int, now: float | None = None) -> CookieBuilder:
        """Add ``Expires`` as an HTTP-date *lifetime* seconds after *now*."""
        issued_at = time.time() if now is None else now
        self._attributes.append(f"Expires={formatdate(issued_at + lifetime, usegmt=True)}")
        return self

    def max_age(self, lifetime: int) -> CookieBuilder:
        self._attributes.append(f"Max-Age={lifetime}")
        return self

    def secure(self) -> CookieBuilder:
        self._attributes.append("Secure")
        return self

    def http_only(self) -> CookieBuilder:
        self._attributes.append("HttpOnly")
        return self

    def attributes(self) -> list[str]:
        return list(self._attributes)

    def build(self) -> str:
        return "; ".join(self._attributes)


def token_cookie(config: CsrfConfig, token: str, now: float | None = None) -> str:
    """Build the ``Set-Cookie`` value carrying a freshly issued *token*.

    Attribute order: name=value, Expires, Max-Age, Secure, HttpOnly.
    Expires/Max-Age are omitted for session cookies (``lifetime is None``).
    """
    builder = CookieBuilder().value(config.get_cookie(), token)

    lifetime = config.get_cookie_lifetime()
    if lifetime is not None:
        builder.expires(lifetime, now=now).max_age(lifetime)

    if config.is_cookie_secure():
        builder.secure()

    return builder.http_only().build()

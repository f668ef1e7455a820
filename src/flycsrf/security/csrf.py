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
"""CSRF token utilities — double-submit cookie pattern.

Provides token generation, timing-safe validation and the method policies
that decide which requests a CSRF firewall must check.
"""

from __future__ import annotations

import base64
import secrets
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from flycsrf.kernel.exceptions import RandomSourceError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
CSRF_ATTRIBUTE: str = "csrfToken"
"""Request state attribute holding the token resolved for the current request."""

CSRF_HEADER_NAME: str = "X-CSRF-Token"
"""Name of the request header that carries the submitted token."""

CSRF_PARAMETER_NAME: str = "csrf-token"
"""Name of the body field that carries the submitted token."""

SAFE_METHODS: frozenset[str] = frozenset({"GET", "HEAD", "OPTIONS"})
"""HTTP methods exempt from validation under the lenient policy."""

BAD_TOKEN_STATUS: int = 412
BAD_TOKEN_REASON: str = "Bad CSRF Token"

MethodPredicate = Callable[[str], bool]


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------
def generate_csrf_token(length: int = 32) -> str:
    """Generate a cryptographically-secure CSRF token.

    Args:
        length: Number of random bytes to draw and characters to return.

    Returns:
        A URL-safe base64 string of exactly *length* characters.

    Raises:
        RandomSourceError: The random source failed or returned no bytes.
            A non-positive *length* always fails this way.
    """
    if length <= 0:
        raise RandomSourceError(
            "Unable to generate random string",
            code="CSRF_RANDOM",
            context={"length": length},
        )

    try:
        raw = secrets.token_bytes(length)
    except (OSError, NotImplementedError) as exc:
        raise RandomSourceError(
            "Unable to generate random string",
            code="CSRF_RANDOM",
            context={"length": length},
        ) from exc

    if not raw:
        raise RandomSourceError(
            "Unable to generate random string",
            code="CSRF_RANDOM",
            context={"length": length},
        )

    return base64.urlsafe_b64encode(raw).decode("ascii")[:length]


def validate_csrf_token(expected: str, supplied: str) -> bool:
    """Validate a submitted token using timing-safe comparison.

    Args:
        expected: The token resolved from the cookie.
        supplied: The token submitted through a header or body field.

    Returns:
        ``True`` if both tokens are non-empty and equal; ``False`` otherwise.
    """
    if not expected or not supplied:
        return False
    return secrets.compare_digest(expected.encode("utf-8"), supplied.encode("utf-8"))


# ---------------------------------------------------------------------------
# Method policies
# ---------------------------------------------------------------------------
def exempt_methods(methods: Iterable[str]) -> MethodPredicate:
    """Build a predicate requiring validation for every method except *methods*."""
    allowed = frozenset(m.upper() for m in methods)

    def _requires_validation(method: str) -> bool:
        return method.upper() not in allowed

    return _requires_validation


exempt_safe_methods: MethodPredicate = exempt_methods(SAFE_METHODS)
"""Lenient predicate: GET, HEAD and OPTIONS are exempt."""


def always_required(method: str) -> bool:
    """Strict predicate: every method is validated."""
    return True


@dataclass(frozen=True)
class CsrfPolicy:
    """Where the submitted token is read from and which requests are checked.

    Attributes:
        header_name: Header consulted first for the submitted token.
        parameter_name: Body field consulted when the header is absent.
        requires_validation: Predicate over the HTTP method.
    """

    header_name: str = CSRF_HEADER_NAME
    parameter_name: str = CSRF_PARAMETER_NAME
    requires_validation: MethodPredicate = exempt_safe_methods

    @classmethod
    def lenient(cls) -> CsrfPolicy:
        return cls(requires_validation=exempt_safe_methods)

    @classmethod
    def strict(cls) -> CsrfPolicy:
        return cls(requires_validation=always_required)

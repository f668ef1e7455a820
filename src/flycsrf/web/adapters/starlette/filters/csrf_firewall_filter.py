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
"""CsrfFirewallFilter — rejects requests without a matching CSRF token.

Compares the token issued by :class:`CsrfTokenFilter` against the token the
client submitted, first from the ``X-CSRF-Token`` header, then from the
``csrf-token`` field of a form or JSON body.  A mismatch short-circuits the
chain with an empty ``412 Bad CSRF Token`` response.

The lenient variant exempts GET, HEAD and OPTIONS; the strict variant
(:meth:`CsrfFirewallFilter.strict`) validates every request.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import structlog
from starlette.responses import Response

from flycsrf.container.ordering import HIGHEST_PRECEDENCE, order
from flycsrf.kernel.exceptions import MissingTokenAttributeError
from flycsrf.security.csrf import (
    BAD_TOKEN_STATUS,
    CSRF_ATTRIBUTE,
    CsrfPolicy,
    validate_csrf_token,
)
from flycsrf.web.adapters.starlette.body import read_parsed_body
from flycsrf.web.filters import OncePerRequestFilter
from flycsrf.web.ports.filter import CallNext

logger = structlog.get_logger("flycsrf.security")


@order(HIGHEST_PRECEDENCE + 310)
class CsrfFirewallFilter(OncePerRequestFilter):
    """Double-submit cookie validator.

    Ordering: runs right after :class:`CsrfTokenFilter`.  Running without it
    is a wiring error and raises :class:`MissingTokenAttributeError`.
    """

    def __init__(
        self,
        policy: CsrfPolicy | None = None,
        *,
        url_patterns: Sequence[str] | None = None,
        exclude_patterns: Sequence[str] | None = None,
    ) -> None:
        super().__init__(url_patterns=url_patterns, exclude_patterns=exclude_patterns)
        self._policy = policy or CsrfPolicy.lenient()

    @classmethod
    def strict(
        cls,
        *,
        url_patterns: Sequence[str] | None = None,
        exclude_patterns: Sequence[str] | None = None,
    ) -> CsrfFirewallFilter:
        """Firewall that validates every request, including safe methods."""
        return cls(
            CsrfPolicy.strict(), url_patterns=url_patterns, exclude_patterns=exclude_patterns
        )

    @property
    def policy(self) -> CsrfPolicy:
        return self._policy

    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        token: str | None = getattr(request.state, CSRF_ATTRIBUTE, None)
        if not token:
            raise MissingTokenAttributeError(
                "Unable to apply CSRF firewall, attribute is missing",
                code="CSRF_WIRING",
                context={"attribute": CSRF_ATTRIBUTE},
            )

        if self._policy.requires_validation(request.method):
            supplied = await self.fetch_token(request)
            if not validate_csrf_token(token, supplied):
                logger.warning(
                    "csrf_token_rejected",
                    method=request.method,
                    path=request.url.path,
                    supplied=bool(supplied),
                )
                return Response(status_code=BAD_TOKEN_STATUS)

        return await call_next(request)

    async def fetch_token(self, request: Any) -> str:
        """Return the token submitted with *request*, or ``""`` if none was."""
        header: str | None = request.headers.get(self._policy.header_name)
        if header is not None:
            return header

        data = await read_parsed_body(request)
        if data is not None:
            value = data.get(self._policy.parameter_name)
            if isinstance(value, str):
                return value

        return ""

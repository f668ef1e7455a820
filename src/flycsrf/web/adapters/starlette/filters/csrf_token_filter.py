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
"""CsrfTokenFilter — issues the CSRF token cookie.

Reads the token from the configured cookie or, when the cookie is absent,
generates a fresh one and appends a ``Set-Cookie`` header to the response.
Either way the token is exposed as ``request.state.csrfToken`` for
downstream filters (see :class:`CsrfFirewallFilter`) and handlers.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import structlog

from flycsrf.config.properties.csrf import CsrfConfig
from flycsrf.container.ordering import HIGHEST_PRECEDENCE, order
from flycsrf.security.cookie import encode_cookie_component, token_cookie
from flycsrf.security.csrf import CSRF_ATTRIBUTE, generate_csrf_token
from flycsrf.web.filters import OncePerRequestFilter
from flycsrf.web.ports.filter import CallNext

logger = structlog.get_logger("flycsrf.security")


@order(HIGHEST_PRECEDENCE + 300)
class CsrfTokenFilter(OncePerRequestFilter):
    """Double-submit cookie token issuer.

    Ordering: runs ahead of every CSRF firewall so the token attribute is
    populated before validation.
    """

    def __init__(
        self,
        config: CsrfConfig | None = None,
        *,
        url_patterns: Sequence[str] | None = None,
        exclude_patterns: Sequence[str] | None = None,
    ) -> None:
        super().__init__(url_patterns=url_patterns, exclude_patterns=exclude_patterns)
        self._config = config or CsrfConfig()

    @property
    def config(self) -> CsrfConfig:
        return self._config

    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        name = self._config.get_cookie()
        # The cookie is set under its percent-encoded name.
        token: str | None = request.cookies.get(encode_cookie_component(name))
        if not token:
            token = request.cookies.get(name)
        cookie: str | None = None

        if not token:
            token = generate_csrf_token(self._config.get_token_length())
            cookie = token_cookie(self._config, token)
            logger.debug(
                "csrf_token_issued",
                cookie=name,
                path=request.url.path,
            )

        setattr(request.state, CSRF_ATTRIBUTE, token)

        response = await call_next(request)

        if cookie is not None:
            response.headers.append("set-cookie", cookie)
        return response

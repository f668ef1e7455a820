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
"""Starlette application factory with CSRF protection wired in."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from starlette.applications import Starlette
from starlette.middleware import Middleware

from flycsrf.config.properties.csrf import CsrfConfig
from flycsrf.container.ordering import sort_by_order
from flycsrf.core.config import Config
from flycsrf.logging.port import LoggingPort
from flycsrf.logging.structlog_adapter import StructlogAdapter
from flycsrf.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from flycsrf.web.adapters.starlette.filters import CsrfFirewallFilter, CsrfTokenFilter
from flycsrf.web.ports.filter import WebFilter


def create_app(
    routes: Sequence[Any] = (),
    config: Config | None = None,
    *,
    strict: bool = False,
    filters: Sequence[WebFilter] = (),
    logging_port: LoggingPort | None = None,
    debug: bool = False,
) -> Starlette:
    """Create a Starlette application protected by the CSRF filter chain.

    The chain holds a :class:`CsrfTokenFilter`, a lenient (or, with
    ``strict=True``, strict) :class:`CsrfFirewallFilter` and any extra
    *filters*, all sorted by ``@order``.

    When *config* is given, logging is configured from ``flycsrf.logging.*``
    through *logging_port* (a :class:`StructlogAdapter` by default) and the
    token cookie from ``flycsrf.csrf.*``.
    """
    csrf_config = CsrfConfig()
    if config is not None:
        (logging_port or StructlogAdapter()).configure(config)
        csrf_config = config.bind(CsrfConfig)

    firewall = CsrfFirewallFilter.strict() if strict else CsrfFirewallFilter()
    chain = sort_by_order([CsrfTokenFilter(csrf_config), firewall, *filters])

    return Starlette(
        debug=debug,
        routes=list(routes),
        middleware=[Middleware(WebFilterChainMiddleware, filters=chain)],
    )

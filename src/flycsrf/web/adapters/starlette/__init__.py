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
"""Starlette web framework adapter."""

from flycsrf.web.adapters.starlette.app import create_app
from flycsrf.web.adapters.starlette.body import read_parsed_body
from flycsrf.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from flycsrf.web.adapters.starlette.filters import CsrfFirewallFilter, CsrfTokenFilter

__all__ = [
    "CsrfFirewallFilter",
    "CsrfTokenFilter",
    "WebFilterChainMiddleware",
    "create_app",
    "read_parsed_body",
]

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
"""flycsrf — double-submit cookie CSRF protection for Starlette applications.

Two chained filters do the work: :class:`CsrfTokenFilter` issues the token
cookie and :class:`CsrfFirewallFilter` rejects unsafe requests whose
submitted token does not match it.
"""

from flycsrf.config.properties.csrf import CsrfConfig
from flycsrf.kernel.exceptions import MissingTokenAttributeError, RandomSourceError
from flycsrf.security.csrf import CSRF_ATTRIBUTE, CsrfPolicy
from flycsrf.web.adapters.starlette import (
    CsrfFirewallFilter,
    CsrfTokenFilter,
    WebFilterChainMiddleware,
    create_app,
)

__version__ = "0.1.0"

__all__ = [
    "CSRF_ATTRIBUTE",
    "CsrfConfig",
    "CsrfFirewallFilter",
    "CsrfPolicy",
    "CsrfTokenFilter",
    "MissingTokenAttributeError",
    "RandomSourceError",
    "WebFilterChainMiddleware",
    "create_app",
]

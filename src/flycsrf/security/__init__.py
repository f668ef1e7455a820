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
"""flycsrf Security — CSRF tokens, policies and cookie construction."""

from flycsrf.security.cookie import CookieBuilder, encode_cookie_component, token_cookie
from flycsrf.security.csrf import (
    BAD_TOKEN_REASON,
    BAD_TOKEN_STATUS,
    CSRF_ATTRIBUTE,
    CSRF_HEADER_NAME,
    CSRF_PARAMETER_NAME,
    SAFE_METHODS,
    CsrfPolicy,
    always_required,
    exempt_methods,
    exempt_safe_methods,
    generate_csrf_token,
    validate_csrf_token,
)

__all__ = [
    "BAD_TOKEN_REASON",
    "BAD_TOKEN_STATUS",
    "CSRF_ATTRIBUTE",
    "CSRF_HEADER_NAME",
    "CSRF_PARAMETER_NAME",
    "SAFE_METHODS",
    "CookieBuilder",
    "CsrfPolicy",
    "always_required",
    "encode_cookie_component",
    "exempt_methods",
    "exempt_safe_methods",
    "generate_csrf_token",
    "token_cookie",
    "validate_csrf_token",
]

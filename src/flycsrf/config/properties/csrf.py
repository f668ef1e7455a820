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
"""CSRF protection configuration properties."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, get_type_hints

from flycsrf.core.config import coerce_value, config_properties


@config_properties(prefix="flycsrf.csrf")
@dataclass(frozen=True)
class CsrfConfig:
    """Configuration for the CSRF token cookie (flycsrf.csrf.*).

    Attributes:
        cookie: Name of the cookie holding the token.
        length: Token length in characters.
        lifetime: Cookie lifetime in seconds; ``None`` issues a session cookie.
        secure: Restrict the cookie to HTTPS.
    """

    cookie: str = "csrf-token"
    length: int = 32
    lifetime: int | None = None
    secure: bool = False

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> CsrfConfig:
        """Build a config from a raw ``cookie/length/lifetime/secure`` mapping.

        Unknown keys are ignored; string values are coerced like bound settings.
        """
        hints = get_type_hints(cls)
        kwargs = {
            field.name: coerce_value(options[field.name], hints[field.name])
            for field in dataclasses.fields(cls)
            if field.name in options
        }
        return cls(**kwargs)

    def get_cookie(self) -> str:
        return self.cookie

    def get_token_length(self) -> int:
        return self.length

    def get_cookie_lifetime(self) -> int | None:
        return self.lifetime

    def is_cookie_secure(self) -> bool:
        return bool(self.secure)

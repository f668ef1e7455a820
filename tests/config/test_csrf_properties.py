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
"""Tests for CsrfConfig — defaults, raw option mappings and config binding."""

from __future__ import annotations

import dataclasses

import pytest

from flycsrf.config.properties.csrf import CsrfConfig
from flycsrf.core.config import Config


class TestCsrfConfigDefaults:
    def test_defaults(self):
        c = CsrfConfig()
        assert c.get_cookie() == "csrf-token"
        assert c.get_token_length() == 32
        assert c.get_cookie_lifetime() is None
        assert c.is_cookie_secure() is False

    def test_is_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            CsrfConfig().length = 8  # type: ignore[misc]


class TestCsrfConfigFromMapping:
    def test_lifetime_cookie(self):
        c = CsrfConfig.from_mapping({"cookie": "csrf-token", "length": 16, "lifetime": 86400})

        assert c.get_cookie() == "csrf-token"
        assert c.get_token_length() == 16
        assert c.get_cookie_lifetime() == 86400
        assert c.is_cookie_secure() is False

    def test_secure_session_cookie(self):
        c = CsrfConfig.from_mapping({"cookie": "csrf-token", "length": 16, "secure": True})

        assert c.get_cookie_lifetime() is None
        assert c.is_cookie_secure() is True

    def test_string_values_are_coerced(self):
        c = CsrfConfig.from_mapping({"length": "24", "lifetime": "3600", "secure": "true"})
        assert c.get_token_length() == 24
        assert c.get_cookie_lifetime() == 3600
        assert c.is_cookie_secure() is True

    def test_unknown_keys_are_ignored(self):
        assert CsrfConfig.from_mapping({"samesite": "lax"}) == CsrfConfig()


class TestCsrfConfigBinding:
    def test_bind_from_config(self):
        config = Config({"flycsrf": {"csrf": {"cookie": "xsrf", "length": 20, "lifetime": 600, "secure": True}}})
        c = config.bind(CsrfConfig)
        assert c == CsrfConfig(cookie="xsrf", length=20, lifetime=600, secure=True)

    def test_bind_empty_config_uses_defaults(self):
        assert Config({}).bind(CsrfConfig) == CsrfConfig()

    def test_env_overrides_length(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FLYCSRF_CSRF_LENGTH", "12")
        assert Config({"flycsrf": {"csrf": {"length": 16}}}).bind(CsrfConfig).length == 12

    def test_env_null_lifetime_means_session_cookie(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("FLYCSRF_CSRF_LIFETIME", "null")
        c = Config({"flycsrf": {"csrf": {"lifetime": 86400}}}).bind(CsrfConfig)
        assert c.get_cookie_lifetime() is None

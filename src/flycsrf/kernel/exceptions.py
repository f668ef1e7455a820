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
"""Exception hierarchy for flycsrf.

All framework exceptions inherit from FlyCsrfException, so a single handler
can catch every error raised by the CSRF stages.

Categories:
- InfrastructureException: failures of the runtime environment (random source)
- ConfigurationException: invalid wiring of the filter chain or settings
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class FlyCsrfException(Exception):
    """Base exception for all flycsrf errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CSRF_RANDOM").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(FlyCsrfException):
    """Failures of the runtime environment the framework depends on."""


class RandomSourceError(InfrastructureException):
    """The secure random source failed or produced no bytes."""


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(FlyCsrfException):
    """The framework was wired or configured incorrectly."""


class MissingTokenAttributeError(ConfigurationException):
    """A CSRF firewall ran without a token issuer ahead of it in the chain."""

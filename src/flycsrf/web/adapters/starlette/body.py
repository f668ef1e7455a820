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
"""Structured request body access for filters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

_FORM_MEDIA_TYPES = frozenset({"application/x-www-form-urlencoded", "multipart/form-data"})


def media_type(request: Any) -> str:
    """Return the lower-cased media type of the request, without parameters."""
    content_type: str = request.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower()


async def read_parsed_body(request: Any) -> Mapping[str, Any] | None:
    """Return the request body as a mapping, or ``None`` if it is not one.

    Form bodies yield their form data; JSON bodies yield the decoded document
    when it is an object.  Undecodable bodies, including JSON nested too deeply
    to decode, yield ``None``.  The raw body
    is cached on the request so the filter chain can replay it downstream.
    """
    kind = media_type(request)

    if kind in _FORM_MEDIA_TYPES:
        await request.body()
        try:
            return await request.form()
        except (MultiPartException, HTTPException):
            return None

    if kind == "application/json" or kind.endswith("+json"):
        try:
            data = await request.json()
        except (ValueError, RecursionError):
            return None
        return data if isinstance(data, Mapping) else None

    return None

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
"""Chain ordering — the @order decorator and order-based sorting."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TypeVar

T = TypeVar("T", bound=type)
C = TypeVar("C")

HIGHEST_PRECEDENCE: int = -(2**31)

_ORDER_ATTRIBUTE = "__flycsrf_order__"


def order(value: int) -> Callable[[T], T]:
    """Pin a component class to a position in its chain.

    Lower values run first.  Undecorated classes sit at 0, so framework
    filters declared relative to :data:`HIGHEST_PRECEDENCE` run ahead of them.
    """

    def decorator(cls: T) -> T:
        setattr(cls, _ORDER_ATTRIBUTE, value)
        return cls

    return decorator


def get_order(cls: type) -> int:
    return getattr(cls, _ORDER_ATTRIBUTE, 0)


def sort_by_order(components: Iterable[C]) -> list[C]:
    """Return *components* sorted by the ``@order`` of their classes.

    The sort is stable: components with equal order keep their given order.
    """
    return sorted(components, key=lambda c: get_order(type(c)))

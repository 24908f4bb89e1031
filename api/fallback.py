"""
Fallback Strategies
===================

Some data can be fetched in more than one way (different endpoints, or data
embedded in another response). Each way is a named Strategy; run_strategies
tries them in order and stops at the first one that yields something usable.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, Sequence

import httpx

from api.http import ApiError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Strategy:
    name: str
    fetch: Callable[[], Awaitable[Any]]


@dataclass(frozen=True)
class StrategyFailure:
    name: str
    reason: str


@dataclass
class StrategyResult:
    name: Optional[str]
    value: Any
    failures: List[StrategyFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.name is not None


def is_usable(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (list, tuple, dict, str)):
        return len(value) > 0
    return True


async def run_strategies(strategies: Sequence[Strategy]) -> StrategyResult:
    failures = []
    for strategy in strategies:
        try:
            value = await strategy.fetch()
        except (httpx.HTTPError, ApiError, ValueError) as e:
            logger.info("Strategy %s failed: %s", strategy.name, e)
            failures.append(StrategyFailure(strategy.name, str(e)))
            continue

        if is_usable(value):
            logger.debug("Strategy %s succeeded", strategy.name)
            return StrategyResult(strategy.name, value, failures)

        failures.append(StrategyFailure(strategy.name, "empty result"))

    return StrategyResult(None, None, failures)

import asyncio

import httpx

from api.fallback import Strategy, is_usable, run_strategies
from api.http import ApiError


def make_strategy(name, outcome, calls):
    async def fetch():
        calls.append(name)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome
    return Strategy(name, fetch)


def test_first_usable_result_wins():
    calls = []
    result = asyncio.run(run_strategies([
        make_strategy("broken", ApiError("Not found", 404), calls),
        make_strategy("empty", [], calls),
        make_strategy("good", ["answer"], calls),
        make_strategy("never", ["other"], calls),
    ]))

    assert result.succeeded
    assert result.name == "good"
    assert result.value == ["answer"]
    assert [f.name for f in result.failures] == ["broken", "empty"]
    assert result.failures[0].reason == "Not found"
    assert calls == ["broken", "empty", "good"]


def test_all_strategies_failing():
    calls = []
    result = asyncio.run(run_strategies([
        make_strategy("offline", httpx.ConnectError("refused"), calls),
        make_strategy("nothing", None, calls),
    ]))

    assert not result.succeeded
    assert result.value is None
    assert len(result.failures) == 2


def test_is_usable():
    assert not is_usable(None)
    assert not is_usable({})
    assert not is_usable("")
    assert is_usable(0)
    assert is_usable({"id": 1})

"""Tests for the matching concept."""

import asyncio

import pytest

from support_network_api.app.services.matching_service import (
    EntityAlreadyOptedInError,
    EntityNotOptedInError,
    MatchingService,
)


def test_opt_in_then_opt_out():
    asyncio.run(MatchingService.opt_in(1))
    assert asyncio.run(MatchingService.check_if_matchable(1)) is True
    asyncio.run(MatchingService.opt_out(1))
    assert asyncio.run(MatchingService.check_if_matchable(1)) is False


def test_opt_in_twice_fails():
    asyncio.run(MatchingService.opt_in(1))
    with pytest.raises(EntityAlreadyOptedInError):
        asyncio.run(MatchingService.opt_in(1))


def test_opt_out_without_opt_in_fails():
    with pytest.raises(EntityNotOptedInError):
        asyncio.run(MatchingService.opt_out(1))


def test_opt_in_is_persisted_for_other_connections():
    asyncio.run(MatchingService.opt_in(4))
    # Each call opens its own connection, like a separate server process.
    assert asyncio.run(MatchingService.check_if_matchable(int("4"))) is True


@pytest.mark.parametrize("a, b", [(1, 2), (2, 1), (1, 3), (3, 2)])
def test_check_if_matched_is_symmetric(a, b):
    asyncio.run(MatchingService.create_match(1, 2))
    assert asyncio.run(MatchingService.check_if_matched(a, b)) == asyncio.run(
        MatchingService.check_if_matched(b, a)
    )


def test_check_if_matched_finds_either_order():
    asyncio.run(MatchingService.create_match(1, 2))
    assert asyncio.run(MatchingService.check_if_matched(2, 1)) is True
    assert asyncio.run(MatchingService.check_if_matched(1, 3)) is False


def test_get_matches_lists_both_sides():
    asyncio.run(MatchingService.create_match(1, 2))
    asyncio.run(MatchingService.create_match(3, 1))
    matches = asyncio.run(MatchingService.get_matches(1))
    assert [(m.entity1, m.entity2) for m in matches] == [(1, 2), (3, 1)]
    assert len(asyncio.run(MatchingService.get_matches(2))) == 1

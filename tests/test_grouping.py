"""Tests for the grouping concept."""

import asyncio

import pytest

from support_network_api.app.services.group_service import GroupNotFoundError, GroupService


def test_join_and_list_members():
    asyncio.run(GroupService.create_group("walkers"))
    asyncio.run(GroupService.join_group(1, "walkers"))
    asyncio.run(GroupService.join_group(2, "walkers"))
    assert asyncio.run(GroupService.get_members("walkers")) == [1, 2]
    assert asyncio.run(GroupService.get_groups_for_user(2)) == ["walkers"]


def test_joining_twice_records_two_memberships():
    asyncio.run(GroupService.create_group("walkers"))
    asyncio.run(GroupService.join_group(1, "walkers"))
    asyncio.run(GroupService.join_group(1, "walkers"))
    assert asyncio.run(GroupService.get_members("walkers")) == [1, 1]
    assert asyncio.run(GroupService.get_groups_for_user(1)) == ["walkers"]


def test_leave_removes_member_by_value():
    asyncio.run(GroupService.create_group("walkers"))
    asyncio.run(GroupService.join_group(1, "walkers"))
    asyncio.run(GroupService.join_group(1, "walkers"))
    asyncio.run(GroupService.join_group(2, "walkers"))
    asyncio.run(GroupService.leave_group(int("1"), "walkers"))
    assert asyncio.run(GroupService.get_members("walkers")) == [2]


def test_leave_as_non_member_is_a_noop():
    asyncio.run(GroupService.create_group("walkers"))
    asyncio.run(GroupService.join_group(1, "walkers"))
    asyncio.run(GroupService.leave_group(3, "walkers"))
    assert asyncio.run(GroupService.get_members("walkers")) == [1]


def test_join_missing_group_fails():
    with pytest.raises(GroupNotFoundError):
        asyncio.run(GroupService.join_group(1, "nowhere"))


def test_group_names_are_not_unique_and_resolve_to_oldest():
    first = asyncio.run(GroupService.create_group("walkers"))
    second = asyncio.run(GroupService.create_group("walkers"))
    assert first.id != second.id
    asyncio.run(GroupService.join_group(1, "walkers"))
    groups = asyncio.run(GroupService.list_groups())
    assert [(g.id, g.members) for g in groups] == [(first.id, [1]), (second.id, [])]

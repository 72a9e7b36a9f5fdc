"""Tests for the labeling concept."""

import asyncio

import pytest

from support_network_api.app.core.errors import BadValuesError, NotAllowedError, NotFoundError
from support_network_api.app.services.labeling_service import (
    ItemAlreadyLabeledError,
    LabelAlreadyExistsError,
    LabelNotFoundError,
    LabelingService,
    community_symptoms,
)


@pytest.fixture
def labels():
    return LabelingService("test_labels")


def test_create_label_starts_empty(labels):
    label = asyncio.run(labels.create_label("OCD"))
    assert label.name == "OCD"
    assert label.items == []
    assert asyncio.run(labels.find_items_by_label("OCD")) == []


def test_duplicate_label_name_is_not_allowed(labels):
    asyncio.run(labels.create_label("OCD"))
    with pytest.raises(LabelAlreadyExistsError) as exc_info:
        asyncio.run(labels.create_label("OCD"))
    assert isinstance(exc_info.value, NotAllowedError)


def test_same_name_in_other_namespace_is_independent(labels):
    other = LabelingService("other_labels")
    asyncio.run(labels.create_label("OCD"))
    asyncio.run(other.create_label("OCD"))
    asyncio.run(labels.affix_label(1, "OCD"))
    assert asyncio.run(other.find_items_by_label("OCD")) == []


def test_affixing_same_item_twice_fails(labels):
    asyncio.run(labels.create_label("OCD"))
    asyncio.run(labels.affix_label(7, "OCD"))
    with pytest.raises(ItemAlreadyLabeledError):
        asyncio.run(labels.affix_label(7, "OCD"))
    assert asyncio.run(labels.find_items_by_label("OCD")) == [7]


def test_items_compare_by_value(labels):
    asyncio.run(labels.create_label("OCD"))
    asyncio.run(labels.affix_label(7, "OCD"))
    # A distinct object carrying the same identifier value is the same item.
    with pytest.raises(ItemAlreadyLabeledError):
        asyncio.run(labels.affix_label("7", "OCD"))
    assert asyncio.run(labels.get_item_labels(int("7"))) == ["OCD"]
    asyncio.run(labels.remove_label("7", "OCD"))
    assert asyncio.run(labels.find_items_by_label("OCD")) == []


def test_affix_to_missing_label_fails(labels):
    with pytest.raises(LabelNotFoundError) as exc_info:
        asyncio.run(labels.affix_label(1, "missing"))
    assert isinstance(exc_info.value, NotFoundError)


def test_remove_non_member_is_a_noop(labels):
    asyncio.run(labels.create_label("OCD"))
    asyncio.run(labels.affix_label(1, "OCD"))
    asyncio.run(labels.remove_label(2, "OCD"))
    assert asyncio.run(labels.find_items_by_label("OCD")) == [1]


def test_remove_from_missing_label_fails(labels):
    with pytest.raises(LabelNotFoundError):
        asyncio.run(labels.remove_label(1, "missing"))


def test_find_items_keeps_attach_order(labels):
    asyncio.run(labels.create_label("JIA"))
    for item in (3, 1, 2):
        asyncio.run(labels.affix_label(item, "JIA"))
    assert asyncio.run(labels.find_items_by_label("JIA")) == [3, 1, 2]


def test_find_items_for_missing_label_fails(labels):
    with pytest.raises(LabelNotFoundError):
        asyncio.run(labels.find_items_by_label("missing"))


def test_get_item_labels_scans_all_labels(labels):
    for name in ("OCD", "JIA", "Endometriosis"):
        asyncio.run(labels.create_label(name))
    asyncio.run(labels.affix_label(5, "Endometriosis"))
    asyncio.run(labels.affix_label(5, "OCD"))
    asyncio.run(labels.affix_label(6, "JIA"))
    assert asyncio.run(labels.get_item_labels(5)) == ["OCD", "Endometriosis"]
    assert asyncio.run(labels.get_item_labels(99)) == []


def test_find_labels_by_item_returns_full_labels(labels):
    asyncio.run(labels.create_label("OCD"))
    asyncio.run(labels.affix_label(1, "OCD"))
    asyncio.run(labels.affix_label(2, "OCD"))
    found = asyncio.run(labels.find_labels_by_item(2))
    assert [(label.name, label.items) for label in found] == [("OCD", [1, 2])]


def test_symptoms_match_case_and_whitespace_insensitively():
    asyncio.run(community_symptoms.create_label("JIA"))
    asyncio.run(community_symptoms.affix_label("Joint  Pain ", "JIA"))
    assert asyncio.run(community_symptoms.get_item_labels("joint pain")) == ["JIA"]
    assert asyncio.run(community_symptoms.find_items_by_label("JIA")) == ["joint pain"]


def test_blank_symptom_is_a_bad_value():
    asyncio.run(community_symptoms.create_label("JIA"))
    with pytest.raises(BadValuesError):
        asyncio.run(community_symptoms.affix_label(" \t ", "JIA"))
    assert asyncio.run(community_symptoms.find_items_by_label("JIA")) == []

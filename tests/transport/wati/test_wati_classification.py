"""
Wati Event Classification Tests

Event type extraction, category mapping and filter decisions.
"""

import pytest

from transport.wati.classify import (
    classify,
    extract_event_type,
    matches_filter,
    resolve_event_category,
)
from transport.wati.schemas import EVENT_TYPE_MAP, EventFilter


class TestEventTypeExtraction:
    """Candidate keys are checked in order: eventType, event, type."""

    def test_event_type_key_wins(self):
        body = {"eventType": "messageRead", "event": "messageDelivered", "type": "text"}
        assert extract_event_type(body) == "messageRead"

    def test_event_key_second(self):
        body = {"event": "messageDelivered", "type": "text"}
        assert extract_event_type(body) == "messageDelivered"

    def test_type_key_last(self):
        assert extract_event_type({"type": "text"}) == "text"

    def test_empty_values_skipped(self):
        body = {"eventType": "", "event": None, "type": "sessionMessageSent"}
        assert extract_event_type(body) == "sessionMessageSent"

    def test_no_candidate_keys(self):
        assert extract_event_type({"text": "hello"}) == ""


class TestCategoryMapping:
    """Upstream vocabulary -> internal categories."""

    @pytest.mark.parametrize(
        "upstream,category",
        [
            ("message", "messageReceived"),
            ("whatsappMessageReceived", "messageReceived"),
            ("newContactMessage", "newContactMessage"),
            ("templateMessageFailed", "templateMessageFailed"),
        ],
    )
    def test_mapped_types(self, upstream, category):
        assert resolve_event_category({"eventType": upstream}) == category

    def test_unmapped_type_passes_through(self):
        assert resolve_event_category({"type": "unknownVendorEvent"}) == "unknownVendorEvent"

    def test_map_is_read_only(self):
        with pytest.raises(TypeError):
            EVENT_TYPE_MAP["message"] = "somethingElse"  # type: ignore[index]

    def test_every_category_is_a_filter_value(self):
        filters = {e.value for e in EventFilter}
        assert set(EVENT_TYPE_MAP.values()) <= filters


class TestFilterDecision:
    """Pass / skip decisions."""

    def test_all_passes_everything(self):
        for body in ({}, {"eventType": "messageRead"}, {"rawData": "x"}, {"_bodyEmpty": True}):
            assert matches_filter(body, EventFilter.ALL)
            assert matches_filter(body, "all")

    def test_matching_filter_passes_one_item(self):
        body = {"eventType": "messageDelivered"}

        result = classify(body, "messageDelivered")

        assert result == [body]
        assert result[0] is body

    def test_other_filter_yields_nothing(self):
        body = {"eventType": "messageDelivered"}
        assert classify(body, "messageRead") == []

    def test_mapped_type_matches_category(self):
        body = {"event": "whatsappMessageReceived"}
        assert classify(body, EventFilter.MESSAGE_RECEIVED) == [body]

    def test_unmapped_type_matches_itself(self):
        body = {"type": "unknownVendorEvent"}
        assert classify(body, "unknownVendorEvent") == [body]

    def test_comparison_is_case_sensitive(self):
        body = {"eventType": "messagedelivered"}
        assert classify(body, "messageDelivered") == []

    def test_body_without_type_rejected_by_specific_filter(self):
        assert classify({"text": "hi"}, EventFilter.MESSAGE_READ) == []

"""
Wati Event Classification

Maps the upstream event vocabulary onto internal event categories and
decides whether a delivery passes the trigger's event filter.

Unknown upstream event types are kept as-is so new Wati events can be
filtered on by name before they are added to the map.
"""

from typing import Any, Mapping, Union

from .schemas import EVENT_TYPE_KEYS, EVENT_TYPE_MAP, EventFilter


def extract_event_type(body: Mapping[str, Any]) -> str:
    """Raw upstream event type: first non-empty candidate key, else ''."""
    for key in EVENT_TYPE_KEYS:
        value = body.get(key)
        if value:
            return str(value)
    return ""


def resolve_event_category(body: Mapping[str, Any]) -> str:
    """Internal category of a body; unmapped types map to themselves."""
    event_type = extract_event_type(body)
    return EVENT_TYPE_MAP.get(event_type, event_type)


def matches_filter(
    body: Mapping[str, Any],
    event_filter: Union[EventFilter, str],
) -> bool:
    """
    Check a body against an event filter.

    ``all`` passes everything. Otherwise the resolved category must equal
    the filter exactly (case-sensitive).
    """

    expected = event_filter.value if isinstance(event_filter, EventFilter) else event_filter
    if expected == EventFilter.ALL.value:
        return True
    return resolve_event_category(body) == expected


def classify(
    body: dict[str, Any],
    event_filter: Union[EventFilter, str],
) -> list[dict[str, Any]]:
    """
    Events to emit for one delivery.

    Returns:
        ``[body]`` when the filter passes, ``[]`` when it does not.
    """

    if matches_filter(body, event_filter):
        return [body]
    return []

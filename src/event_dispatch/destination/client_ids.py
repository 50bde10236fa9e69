"""
Client id repair.

GA4 session data arrives either as ``sessionIds`` or as ``sessions`` and may be
nested. Before layout, it is collapsed into one canonical shape:
``{"clientId": ..., "sessionIds": "<json string>"}``.
"""

import json

from event_dispatch.schemas.event import AnalyticsEvent


def repair_client_ids(event: AnalyticsEvent) -> AnalyticsEvent:
    """
    Canonicalize GA4 client id data on an event.

    Args:
        event: Incoming event (left untouched)

    Returns:
        A repaired copy when GA4 session data is present, else ``event`` itself
    """
    context = event.context_dict
    client_ids = context.get("clientIds")
    if not isinstance(client_ids, dict):
        return event

    ga4 = client_ids.get("ga4")
    if not isinstance(ga4, dict):
        return event

    sessions = ga4.get("sessions")
    session_ids = ga4.get("sessionIds")
    if not sessions and not session_ids:
        return event

    canonical = {
        "clientId": ga4.get("clientId"),
        "sessionIds": _compact_json(sessions if sessions else session_ids),
    }
    payload = event.to_dict()
    payload["context"] = {**context, "clientIds": {**client_ids, "ga4": canonical}}
    return AnalyticsEvent.from_payload(payload)


def _compact_json(value) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)

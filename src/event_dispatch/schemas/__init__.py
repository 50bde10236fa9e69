from .event import TABLE_NAME_PARAMETER, AnalyticsEvent, EventContext, EventType

__all__ = ["TABLE_NAME_PARAMETER", "AnalyticsEvent", "EventContext", "EventType"]

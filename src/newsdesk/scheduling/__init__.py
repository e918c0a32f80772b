"""Weekly calendar, topic rotation and the content decision."""

from newsdesk.scheduling.calendar import PublishSlot, ScheduleCatalog
from newsdesk.scheduling.decision import DecisionEngine, decide
from newsdesk.scheduling.models import (
    ContentType,
    Decision,
    ManualOverride,
    Topic,
    TopicMetadata,
    Weekday,
)

__all__ = [
    "ContentType",
    "Decision",
    "DecisionEngine",
    "ManualOverride",
    "PublishSlot",
    "ScheduleCatalog",
    "Topic",
    "TopicMetadata",
    "Weekday",
    "decide",
]

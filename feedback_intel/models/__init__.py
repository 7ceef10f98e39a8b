from feedback_intel.models.classification import Classification, SignalRecord
from feedback_intel.models.feedback import (
    Feedback,
    FeedbackCreate,
    FeedbackWithClassification,
)
from feedback_intel.models.kv_entry import KVEntry
from feedback_intel.models.summary import Summary

__all__ = [
    "Classification",
    "Feedback",
    "FeedbackCreate",
    "FeedbackWithClassification",
    "KVEntry",
    "SignalRecord",
    "Summary",
]

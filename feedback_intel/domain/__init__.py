from feedback_intel.domain.classification_operations import classification_ops, signal_ops
from feedback_intel.domain.feedback_operations import feedback_ops
from feedback_intel.domain.kv_operations import kv_ops
from feedback_intel.domain.summary_operations import summary_ops

__all__ = [
    "classification_ops",
    "feedback_ops",
    "kv_ops",
    "signal_ops",
    "summary_ops",
]

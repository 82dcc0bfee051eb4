# Application Package
from .queue_builder import DueQueue, build_due_queue
from .service import LearningService, ProgressSnapshot
from .session import GradeFeedback, ReviewSession

__all__ = [
    "DueQueue",
    "GradeFeedback",
    "LearningService",
    "ProgressSnapshot",
    "ReviewSession",
    "build_due_queue",
]

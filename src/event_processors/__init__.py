from src.event_processors.base import BaseEventProcessor, ProcessingResult, ProcessingState
from src.event_processors.issue_comment import IssueCommentWelcomeProcessor
from src.event_processors.pull_request import PullRequestWelcomeProcessor

__all__ = [
    "BaseEventProcessor",
    "IssueCommentWelcomeProcessor",
    "ProcessingResult",
    "ProcessingState",
    "PullRequestWelcomeProcessor",
]

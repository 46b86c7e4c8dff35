
from .common import ErrorResponse, Notification
from .merge import MergeCommitRequest
from .staging import MoveRequest, OutputNameRequest, PagePreview, SessionCard, StagedDocumentCard

__all__ = [
    "ErrorResponse",
    "MergeCommitRequest",
    "MoveRequest",
    "Notification",
    "OutputNameRequest",
    "PagePreview",
    "SessionCard",
    "StagedDocumentCard",
]

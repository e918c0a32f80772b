"""External collaborator interfaces and loading."""

from newsdesk.providers.base import (
    Collaborators,
    MarketDataProvider,
    ResearchProvider,
    Script,
    ScriptReview,
    ScriptReviewer,
    ScriptWriter,
    Uploader,
    UploadResult,
    VideoAsset,
    VideoBrander,
    VideoRenderer,
)
from newsdesk.providers.factory import load_collaborators

__all__ = [
    "Collaborators",
    "MarketDataProvider",
    "ResearchProvider",
    "Script",
    "ScriptReview",
    "ScriptReviewer",
    "ScriptWriter",
    "UploadResult",
    "Uploader",
    "VideoAsset",
    "VideoBrander",
    "VideoRenderer",
    "load_collaborators",
]

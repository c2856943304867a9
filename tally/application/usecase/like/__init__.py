"""Like use cases."""

from .get_likes import GetLikesRequest, GetLikesResponse, GetLikesUseCase, LikeState
from .merge_feed import MergeFeedRequest, MergeFeedResponse, MergeFeedUseCase
from .migrate_session_likes import (
    MigrateSessionLikesRequest,
    MigrateSessionLikesResponse,
    MigrateSessionLikesUseCase,
)
from .toggle_like import ToggleLikeRequest, ToggleLikeResponse, ToggleLikeUseCase

__all__ = [
    "GetLikesRequest",
    "GetLikesResponse",
    "GetLikesUseCase",
    "LikeState",
    "MergeFeedRequest",
    "MergeFeedResponse",
    "MergeFeedUseCase",
    "MigrateSessionLikesRequest",
    "MigrateSessionLikesResponse",
    "MigrateSessionLikesUseCase",
    "ToggleLikeRequest",
    "ToggleLikeResponse",
    "ToggleLikeUseCase",
]

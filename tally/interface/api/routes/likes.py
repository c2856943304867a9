"""Like routes."""

from typing import Any, Optional

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from tally.adapter.error import CounterStoreError
from tally.application.usecase.like import (
    GetLikesRequest,
    GetLikesResponse,
    GetLikesUseCase,
    MergeFeedRequest,
    MergeFeedResponse,
    MergeFeedUseCase,
    MigrateSessionLikesRequest,
    MigrateSessionLikesResponse,
    MigrateSessionLikesUseCase,
    ToggleLikeRequest,
    ToggleLikeResponse,
    ToggleLikeUseCase,
)

router = APIRouter(tags=["likes"], route_class=DishkaRoute)


class ToggleLikeBody(BaseModel):
    """Identity of the actor toggling a like."""

    session_id: Optional[str] = None
    profile_id: Optional[str] = None


class LookupBody(BaseModel):
    """Posts to look up and the viewing actor."""

    post_ids: list[str] = Field(max_length=500)
    session_id: Optional[str] = None
    profile_id: Optional[str] = None


class MergeBody(BaseModel):
    """Cached post payloads and the viewing actor."""

    items: list[dict[str, Any]] = Field(max_length=500)
    session_id: Optional[str] = None
    profile_id: Optional[str] = None


@router.post("/posts/{post_id}/like", response_model=ToggleLikeResponse)
async def toggle_like(
    post_id: str,
    body: ToggleLikeBody,
    toggle_like_use_case: FromDishka[ToggleLikeUseCase],
) -> ToggleLikeResponse:
    """Like or unlike a post.

    Args:
        post_id: Post ID
        body: Session token and optional profile ID
        toggle_like_use_case: Toggle like use case from DI

    Returns:
        New count and whether the actor now likes the post

    Raises:
        HTTPException: 400 without an identity, 503 if the counter store
            could not apply the toggle (nothing changed; roll back)
    """
    try:
        request = ToggleLikeRequest(
            post_id=post_id,
            session_id=body.session_id,
            profile_id=body.profile_id,
        )
        result = await toggle_like_use_case.execute(request)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=result.error or "Like could not be recorded",
        )
    return result


@router.post("/likes/lookup", response_model=GetLikesResponse)
async def lookup_likes(
    body: LookupBody,
    get_likes_use_case: FromDishka[GetLikesUseCase],
) -> GetLikesResponse:
    """Read live counts and like flags for several posts.

    Always answers; falls back to durable counts when Redis is down.
    """
    try:
        request = GetLikesRequest(
            post_ids=body.post_ids,
            session_id=body.session_id,
            profile_id=body.profile_id,
        )
        return await get_likes_use_case.execute(request)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.post("/likes/merge", response_model=MergeFeedResponse)
async def merge_likes(
    body: MergeBody,
    merge_feed_use_case: FromDishka[MergeFeedUseCase],
) -> MergeFeedResponse:
    """Overlay live likes onto cached post payloads."""
    try:
        request = MergeFeedRequest(
            items=body.items,
            session_id=body.session_id,
            profile_id=body.profile_id,
        )
        return await merge_feed_use_case.execute(request)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.post("/likes/migrate", response_model=MigrateSessionLikesResponse)
async def migrate_likes(
    body: MigrateSessionLikesRequest,
    migrate_use_case: FromDishka[MigrateSessionLikesUseCase],
) -> MigrateSessionLikesResponse:
    """Move an anonymous session's likes to a profile after login.

    Raises:
        HTTPException: 400 on a blank identity, 503 if Redis is unavailable
    """
    try:
        return await migrate_use_case.execute(body)
    except CounterStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

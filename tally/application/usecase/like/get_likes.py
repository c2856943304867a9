"""Get likes use case."""

from typing import Optional

from pydantic import BaseModel, Field

from tally.domain.service import CounterService
from tally.domain.value import ActorId, PostId


class LikeState(BaseModel):
    """Live like state of one post."""

    post_id: str
    likes: int
    is_liked: bool


class GetLikesRequest(BaseModel):
    """Get likes request."""

    post_ids: list[str] = Field(max_length=500)
    session_id: Optional[str] = None
    profile_id: Optional[str] = None


class GetLikesResponse(BaseModel):
    """Get likes response."""

    items: list[LikeState]


class GetLikesUseCase:
    """Use case for reading counts and like flags for a set of posts."""

    def __init__(self, counter_service: CounterService) -> None:
        """Initialize get likes use case.

        Args:
            counter_service: Counter domain service
        """
        self.counter_service = counter_service

    async def execute(self, request: GetLikesRequest) -> GetLikesResponse:
        """Execute lookup.

        Anonymous lookups without any identity get False for every flag.

        Args:
            request: Get likes request

        Returns:
            One entry per distinct post ID, in request order
        """
        post_ids = list(dict.fromkeys(PostId(p) for p in request.post_ids))
        counts = await self.counter_service.get_like_counts(post_ids)

        statuses: dict[PostId, bool] = {}
        if request.session_id or request.profile_id:
            actor = ActorId.for_request(request.session_id, request.profile_id)
            statuses = await self.counter_service.get_liked_statuses(post_ids, actor)

        return GetLikesResponse(
            items=[
                LikeState(
                    post_id=post_id,
                    likes=counts.get(post_id, 0),
                    is_liked=statuses.get(post_id, False),
                )
                for post_id in post_ids
            ]
        )

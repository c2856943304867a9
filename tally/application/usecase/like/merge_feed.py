"""Merge feed use case."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from tally.domain.service import MergeService
from tally.domain.value import ActorId


class MergeFeedRequest(BaseModel):
    """Merge feed request."""

    items: list[dict[str, Any]] = Field(max_length=500)
    session_id: Optional[str] = None
    profile_id: Optional[str] = None


class MergeFeedResponse(BaseModel):
    """Merge feed response."""

    items: list[dict[str, Any]]


class MergeFeedUseCase:
    """Use case for overlaying live like state onto cached posts."""

    def __init__(self, merge_service: MergeService) -> None:
        """Initialize merge feed use case.

        Args:
            merge_service: Merge domain service
        """
        self.merge_service = merge_service

    async def execute(self, request: MergeFeedRequest) -> MergeFeedResponse:
        """Execute merge.

        Args:
            request: Merge feed request

        Returns:
            Items with live ``likes`` and ``is_liked``
        """
        actor = None
        if request.session_id or request.profile_id:
            actor = ActorId.for_request(request.session_id, request.profile_id)

        items = await self.merge_service.merge_with_live_counts(request.items, actor)
        return MergeFeedResponse(items=items)

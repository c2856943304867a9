"""Request-time merge of cached post content with live like state."""

from typing import Any, Mapping, Optional, Sequence

import logfire

from tally.domain.value import ActorId, PostId

from .base import Service
from .counter_service import CounterService


class MergeService(Service):
    """Overlay live counts and like flags onto post payloads.

    Cached post content carries whatever ``likes`` value it was rendered
    with. This replaces it on the way out, so the cache never has to be
    invalidated when a like changes.
    """

    def __init__(self, counter_service: CounterService) -> None:
        """Initialize merge service.

        Args:
            counter_service: Counter domain service
        """
        self.counter_service = counter_service

    async def merge_with_live_counts(
        self, items: Sequence[Mapping[str, Any]], actor: Optional[ActorId]
    ) -> list[dict[str, Any]]:
        """Return copies of ``items`` with live ``likes`` and ``is_liked``.

        Makes one batch count read and one batch status read, whatever the
        number of items. Input mappings are not modified.

        Args:
            items: Post payloads, each with an ``id``
            actor: Viewing actor, or None for nobody (every flag False)

        Returns:
            New dicts in input order
        """
        if not items:
            return []

        keys = [_post_id(item) for item in items]
        post_ids = [post_id for post_id in keys if post_id is not None]

        with logfire.span("merge_service.merge_with_live_counts", count=len(items)):
            counts = await self.counter_service.get_like_counts(post_ids)
            statuses = (
                await self.counter_service.get_liked_statuses(post_ids, actor)
                if actor is not None
                else {}
            )

            merged = []
            for item, post_id in zip(items, keys):
                merged.append(
                    {
                        **item,
                        "likes": counts.get(post_id, 0),
                        "is_liked": statuses.get(post_id, False),
                    }
                )
            return merged


def _post_id(item: Mapping[str, Any]) -> Optional[PostId]:
    """Post ID of an item, or None when its ``id`` is missing or blank."""
    raw = item.get("id")
    if raw is None or not str(raw).strip():
        return None
    return PostId(str(raw))

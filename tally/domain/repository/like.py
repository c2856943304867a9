"""Like repository interface."""

from abc import ABC, abstractmethod
from typing import List, Sequence

from tally.domain.model.like import Like
from tally.domain.value import ActorId, PostId


class LikeRepository(ABC):
    """Repository for durable like records.

    Implementations must enforce uniqueness per (post, actor) themselves so
    that repeated upserts are harmless.
    """

    @abstractmethod
    async def exists(self, post_id: PostId, actor: ActorId) -> bool:
        """Check whether a like record exists.

        Args:
            post_id: ID of the post
            actor: The actor

        Returns:
            True if the actor has a durable like on the post
        """
        pass

    @abstractmethod
    async def find_liked_post_ids(
        self, actor: ActorId, post_ids: Sequence[PostId]
    ) -> set[PostId]:
        """Find which of the given posts an actor likes (batch query).

        Args:
            actor: The actor
            post_ids: Posts to check

        Returns:
            Subset of post_ids the actor has a like record for
        """
        pass

    @abstractmethod
    async def find_by_post(self, post_id: PostId) -> List[Like]:
        """Find all likes on a post.

        Args:
            post_id: ID of the post

        Returns:
            Likes on the post
        """
        pass

    @abstractmethod
    async def find_by_posts(self, post_ids: Sequence[PostId]) -> List[Like]:
        """Find all likes on several posts.

        Args:
            post_ids: IDs of the posts

        Returns:
            Likes on any of the posts
        """
        pass

    @abstractmethod
    async def find_by_actor(self, actor: ActorId) -> List[Like]:
        """Find all likes by an actor.

        Args:
            actor: The actor

        Returns:
            Likes by the actor
        """
        pass

    @abstractmethod
    async def upsert(self, post_id: PostId, actor: ActorId) -> bool:
        """Insert a like unless it already exists.

        Tolerates two syncs for the same pair arriving out of order.

        Args:
            post_id: ID of the post
            actor: The actor

        Returns:
            True if a new record was written, False if it was already there
        """
        pass

    @abstractmethod
    async def delete(self, post_id: PostId, actor: ActorId) -> bool:
        """Delete a like.

        Args:
            post_id: ID of the post
            actor: The actor

        Returns:
            True if a like was deleted, False if none existed
        """
        pass

    @abstractmethod
    async def reassign_actor(self, from_actor: ActorId, to_actor: ActorId) -> int:
        """Move every like of one actor to another.

        Likes the target actor already has are dropped rather than duplicated.

        Args:
            from_actor: Actor giving up its likes (e.g. a session)
            to_actor: Actor receiving them (e.g. the profile after login)

        Returns:
            Number of posts now attributed to to_actor that were not before
        """
        pass

"""Atomic counter store interface."""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence

from tally.domain.value import ActorId, PostId


class CounterStore(ABC):
    """Port onto the in-memory key-value store that owns live like state.

    Holds, per post, a counter and a membership set of actors, and per actor
    a reverse index of liked posts. Every method is a network round trip and
    raises ``CounterStoreUnavailableError`` when the store cannot be reached;
    no method leaves the counter and the sets out of step on failure.
    """

    @abstractmethod
    async def get_count(self, post_id: PostId) -> Optional[int]:
        """Read one counter.

        Returns:
            The count, or None if the counter does not exist yet
        """
        pass

    @abstractmethod
    async def get_counts(self, post_ids: Sequence[PostId]) -> List[Optional[int]]:
        """Read many counters in a single round trip.

        Returns:
            Counts aligned with post_ids, None where a counter is missing
        """
        pass

    @abstractmethod
    async def init_count(self, post_id: PostId, count: int) -> bool:
        """Create a counter only if it does not exist yet.

        Returns:
            True if the counter was created
        """
        pass

    @abstractmethod
    async def set_count(self, post_id: PostId, count: int) -> None:
        """Overwrite a counter unconditionally."""
        pass

    @abstractmethod
    async def toggle(self, post_id: PostId, actor: ActorId) -> tuple[int, bool]:
        """Flip an actor's like on a post.

        Membership check, counter change and both set updates happen as one
        atomic step with respect to every other caller on the same post.
        The counter never goes below zero.

        Returns:
            (new count, whether the actor now likes the post)
        """
        pass

    @abstractmethod
    async def is_member(self, post_id: PostId, actor: ActorId) -> bool:
        """Check whether an actor likes a post."""
        pass

    @abstractmethod
    async def are_members(
        self, post_ids: Sequence[PostId], actor: ActorId
    ) -> List[bool]:
        """Check one actor against many posts in a single round trip.

        Returns:
            Flags aligned with post_ids
        """
        pass

    @abstractmethod
    async def members(self, post_id: PostId) -> set[ActorId]:
        """Return the membership set of a post."""
        pass

    @abstractmethod
    async def actor_post_ids(self, actor: ActorId) -> set[PostId]:
        """Return the reverse index of an actor."""
        pass

    @abstractmethod
    async def replace_members(self, post_id: PostId, actors: Iterable[ActorId]) -> None:
        """Overwrite a post's membership set and fix up the actor indexes.

        Actors dropped from the set also lose the post from their index.
        """
        pass

    @abstractmethod
    async def move_member(
        self, post_id: PostId, from_actor: ActorId, to_actor: ActorId
    ) -> int:
        """Re-attribute one like from an actor to another, atomically.

        If to_actor already likes the post the two likes merge into one and
        the counter drops by one, keeping count equal to set size.

        Returns:
            The post's count after the move
        """
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Check that the store answers."""
        pass

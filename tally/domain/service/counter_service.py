"""Counter domain service.

The atomic store is the source of truth for counts and membership. This
service owns every read and write against it, and decides what to do when
it is missing data or unreachable.
"""

from collections import defaultdict
from typing import Optional, Sequence

import logfire

from tally.adapter.error import CounterStoreError
from tally.config import CounterSettings
from tally.domain.error import NotFoundError
from tally.domain.model import Like, ToggleResult
from tally.domain.repository import CounterStore, LikeRepository, PostRepository
from tally.domain.value import ActorId, PostId

from .base import Service


class CounterService(Service):
    """Domain service for live like counts."""

    def __init__(
        self,
        counter_store: CounterStore,
        post_repository: PostRepository,
        like_repository: LikeRepository,
        counter_settings: CounterSettings,
    ) -> None:
        """Initialize counter service.

        Args:
            counter_store: Atomic store holding counters and membership sets
            post_repository: Durable post repository (fallback and seeding)
            like_repository: Durable like repository (fallback and seeding)
            counter_settings: Counter behaviour settings
        """
        self.counter_store = counter_store
        self.post_repository = post_repository
        self.like_repository = like_repository
        self.counter_settings = counter_settings

    async def toggle_like(self, post_id: PostId, actor: ActorId) -> ToggleResult:
        """Flip an actor's like on a post.

        The membership check, the counter change and both set updates happen
        in one atomic step on the store. Nothing is written to the durable
        store here; callers dispatch the sync once this succeeds.

        Args:
            post_id: Post to toggle
            actor: Actor toggling

        Returns:
            Successful result with the new count and state, or a failed
            result when the store could not be reached
        """
        if not post_id or not str(post_id).strip():
            logfire.warn("Toggle with empty post id", actor=actor.member)
            return ToggleResult.failed("post_id is required")

        with logfire.span(
            "counter_service.toggle_like", post_id=post_id, actor=actor.member
        ):
            try:
                if self.counter_settings.lazy_init:
                    await self._ensure_counter(post_id)
                new_count, is_liked = await self.counter_store.toggle(post_id, actor)
            except CounterStoreError as e:
                logfire.warn(
                    "Toggle failed, atomic store unavailable",
                    post_id=post_id,
                    actor=actor.member,
                    error=str(e),
                )
                return ToggleResult.failed(str(e))

            logfire.info(
                "Like toggled",
                post_id=post_id,
                actor=actor.member,
                is_liked=is_liked,
                new_count=new_count,
            )
            return ToggleResult(success=True, new_count=new_count, is_liked=is_liked)

    async def get_like_count(self, post_id: PostId) -> int:
        """Read the live count for one post.

        Never raises. A missing counter reads as the durable count (0 for an
        unknown post); an unreachable store falls back to the durable count.
        """
        try:
            count = await self.counter_store.get_count(post_id)
        except CounterStoreError as e:
            logfire.warn(
                "Count read fell back to durable store", post_id=post_id, error=str(e)
            )
            durable = await self._durable_counts([post_id])
            return durable.get(post_id, 0)

        if count is not None:
            return count
        seeded = await self._seed_missing([post_id])
        return seeded[post_id]

    async def get_like_counts(self, post_ids: Sequence[PostId]) -> dict[PostId, int]:
        """Read live counts for many posts in one store round trip.

        Args:
            post_ids: Posts to read (duplicates collapse)

        Returns:
            Mapping with exactly the requested IDs
        """
        unique = list(dict.fromkeys(post_ids))
        if not unique:
            return {}

        with logfire.span("counter_service.get_like_counts", count=len(unique)):
            try:
                values = await self.counter_store.get_counts(unique)
            except CounterStoreError as e:
                logfire.warn(
                    "Batch count read fell back to durable store",
                    count=len(unique),
                    error=str(e),
                )
                durable = await self._durable_counts(unique)
                return {post_id: durable.get(post_id, 0) for post_id in unique}

            counts = {
                post_id: value
                for post_id, value in zip(unique, values)
                if value is not None
            }
            missing = [post_id for post_id in unique if post_id not in counts]
            if missing:
                counts.update(await self._seed_missing(missing))

            return {post_id: counts[post_id] for post_id in unique}

    async def is_liked_by_actor(self, post_id: PostId, actor: ActorId) -> bool:
        """Check whether an actor likes a post.

        Falls back to the durable like records when the store is unreachable
        and to False when that fails too.
        """
        try:
            return await self.counter_store.is_member(post_id, actor)
        except CounterStoreError as e:
            logfire.warn(
                "Like status fell back to durable store",
                post_id=post_id,
                actor=actor.member,
                error=str(e),
            )

        try:
            return await self.like_repository.exists(post_id, actor)
        except Exception as e:
            logfire.error(
                "Like status unavailable",
                post_id=post_id,
                actor=actor.member,
                error=str(e),
            )
            return False

    async def get_liked_statuses(
        self, post_ids: Sequence[PostId], actor: ActorId
    ) -> dict[PostId, bool]:
        """Check an actor's like on many posts in one store round trip.

        Args:
            post_ids: Posts to check (duplicates collapse)
            actor: The actor

        Returns:
            Mapping with exactly the requested IDs
        """
        unique = list(dict.fromkeys(post_ids))
        if not unique:
            return {}

        with logfire.span(
            "counter_service.get_liked_statuses", count=len(unique), actor=actor.member
        ):
            try:
                flags = await self.counter_store.are_members(unique, actor)
                return dict(zip(unique, flags))
            except CounterStoreError as e:
                logfire.warn(
                    "Batch like status fell back to durable store",
                    count=len(unique),
                    actor=actor.member,
                    error=str(e),
                )

            try:
                liked = await self.like_repository.find_liked_post_ids(actor, unique)
            except Exception as e:
                logfire.error(
                    "Batch like status unavailable", actor=actor.member, error=str(e)
                )
                liked = set()
            return {post_id: post_id in liked for post_id in unique}

    async def sync_counter_from_durable(self, post_id: PostId) -> int:
        """Overwrite the live counter with the durable count.

        HAZARD: last writer wins. A toggle that lands between the durable
        read and the write is erased. Only for recovery of a post whose
        counter is known to be wrong.

        Args:
            post_id: Post to reseed

        Returns:
            The count written

        Raises:
            NotFoundError: If the post is not in the durable store
            CounterStoreUnavailableError: If the store cannot be reached
        """
        with logfire.span("counter_service.sync_counter_from_durable", post_id=post_id):
            durable = await self.post_repository.get_like_counts([post_id])
            if post_id not in durable:
                raise NotFoundError("Post", post_id)

            count = durable[post_id]
            await self.counter_store.set_count(post_id, count)
            logfire.info(
                "Counter reseeded from durable store", post_id=post_id, count=count
            )
            return count

    async def initialize_counters_from_durable(
        self, post_ids: Optional[Sequence[PostId]] = None, batch_size: int = 200
    ) -> int:
        """Cold-start the atomic store from the durable store.

        For each post, overwrites the counter with ``posts.likes`` and
        rebuilds the membership set and actor indexes from the like records.

        HAZARD: every write here replaces live state. Running this against a
        warm store while toggles are in flight can erase those toggles. Only
        for an empty store at cold start or operator-triggered recovery.

        Args:
            post_ids: Posts to seed, or None for every post
            batch_size: Posts read per page when seeding everything

        Returns:
            Number of posts seeded

        Raises:
            CounterStoreUnavailableError: If the store cannot be reached
        """
        with logfire.span("counter_service.initialize_counters_from_durable"):
            seeded = 0
            if post_ids is not None:
                unique = list(dict.fromkeys(post_ids))
                counts = await self.post_repository.get_like_counts(unique)
                seeded += await self._seed_batch(counts)
            else:
                offset = 0
                while True:
                    posts = await self.post_repository.find_all(
                        limit=batch_size, offset=offset
                    )
                    if not posts:
                        break
                    seeded += await self._seed_batch({p.id: p.likes for p in posts})
                    offset += len(posts)
                    if len(posts) < batch_size:
                        break

            logfire.info("Counters initialized from durable store", posts=seeded)
            return seeded

    async def migrate_actor(self, from_actor: ActorId, to_actor: ActorId) -> int:
        """Move every like of one actor to another.

        Used after login to carry anonymous session likes over to the
        profile. A post both actors liked ends with a single like and its
        counter is decremented to match.

        Args:
            from_actor: Actor giving up its likes
            to_actor: Actor receiving them

        Returns:
            Number of posts moved

        Raises:
            CounterStoreUnavailableError: If the store cannot be reached
        """
        if from_actor == to_actor:
            return 0

        with logfire.span(
            "counter_service.migrate_actor",
            from_actor=from_actor.member,
            to_actor=to_actor.member,
        ):
            post_ids = await self.counter_store.actor_post_ids(from_actor)
            for post_id in sorted(post_ids):
                await self.counter_store.move_member(post_id, from_actor, to_actor)

            logfire.info(
                "Actor likes migrated",
                from_actor=from_actor.member,
                to_actor=to_actor.member,
                posts=len(post_ids),
            )
            return len(post_ids)

    async def store_health(self) -> bool:
        """Check the atomic store is reachable."""
        return await self.counter_store.ping()

    async def _ensure_counter(self, post_id: PostId) -> None:
        """Seed a missing counter from the durable count before a toggle."""
        if await self.counter_store.get_count(post_id) is not None:
            return

        durable = await self._durable_counts([post_id])
        if post_id in durable:
            await self.counter_store.init_count(post_id, durable[post_id])

    async def _seed_missing(self, post_ids: Sequence[PostId]) -> dict[PostId, int]:
        """Resolve counts for posts with no counter.

        Unknown posts read as 0 and are never written to the store.
        """
        durable = await self._durable_counts(post_ids)
        if self.counter_settings.lazy_init:
            for post_id, count in durable.items():
                try:
                    await self.counter_store.init_count(post_id, count)
                except CounterStoreError as e:
                    logfire.warn(
                        "Lazy counter init failed", post_id=post_id, error=str(e)
                    )
                    break
        return {post_id: durable.get(post_id, 0) for post_id in post_ids}

    async def _durable_counts(self, post_ids: Sequence[PostId]) -> dict[PostId, int]:
        """Best-effort durable count read; empty on failure."""
        try:
            return await self.post_repository.get_like_counts(post_ids)
        except Exception as e:
            logfire.error(
                "Durable count read failed", count=len(post_ids), error=str(e)
            )
            return {}

    async def _seed_batch(self, counts: dict[PostId, int]) -> int:
        likes = await self.like_repository.find_by_posts(list(counts))
        members: dict[PostId, list[Like]] = defaultdict(list)
        for like in likes:
            members[like.post_id].append(like)

        for post_id, count in counts.items():
            await self.counter_store.set_count(post_id, count)
            await self.counter_store.replace_members(
                post_id, [like.actor for like in members[post_id]]
            )
        return len(counts)

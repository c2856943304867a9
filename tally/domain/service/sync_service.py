"""Durable sync domain service.

Mirrors atomic store outcomes into PostgreSQL. Nothing here is on the
request's critical path: every failure is logged and dropped, and drift is
closed later by reconciliation.
"""

from abc import ABC, abstractmethod
from typing import AsyncContextManager, List, Optional

import logfire

from tally.adapter.error import CounterStoreError
from tally.config import SyncSettings
from tally.domain.model import ReconcileReport
from tally.domain.repository import CounterStore, LikeRepository, PostRepository
from tally.domain.value import ActorId, PostId, ReconcilePolicy

from .base import Service


class DurableSyncService(Service):
    """Domain service for durable mirroring and reconciliation."""

    def __init__(
        self,
        like_repository: LikeRepository,
        post_repository: PostRepository,
        counter_store: CounterStore,
        sync_settings: SyncSettings,
    ) -> None:
        """Initialize durable sync service.

        Args:
            like_repository: Durable like repository
            post_repository: Durable post repository
            counter_store: Atomic store, read during reconciliation
            sync_settings: Sync and reconciliation settings
        """
        self.like_repository = like_repository
        self.post_repository = post_repository
        self.counter_store = counter_store
        self.sync_settings = sync_settings

    async def sync_to_durable(
        self, post_id: PostId, actor: ActorId, is_liked: bool, new_count: int
    ) -> bool:
        """Mirror one toggle outcome.

        Upserts or deletes the like record, then SETs ``posts.likes`` to the
        count the atomic store reported. Repeating a call leaves the same
        state, so a duplicate or reordered sync is harmless and a missed one
        is overwritten by the next.

        Args:
            post_id: Post that was toggled
            actor: Actor that toggled
            is_liked: State after the toggle
            new_count: Counter value after the toggle

        Returns:
            True if every write succeeded
        """
        with logfire.span(
            "durable_sync.sync_to_durable",
            post_id=post_id,
            actor=actor.member,
            is_liked=is_liked,
            new_count=new_count,
        ):
            try:
                if is_liked:
                    await self.like_repository.upsert(post_id, actor)
                else:
                    # Already absent is fine
                    await self.like_repository.delete(post_id, actor)

                await self.post_repository.set_like_count(post_id, new_count)
            except Exception as e:
                logfire.error(
                    "Durable sync failed",
                    post_id=post_id,
                    actor=actor.member,
                    is_liked=is_liked,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return False

            logfire.info(
                "Durable sync complete",
                post_id=post_id,
                actor=actor.member,
                new_count=new_count,
            )
            return True

    async def reconcile_counter(
        self, post_id: PostId, policy: Optional[ReconcilePolicy] = None
    ) -> ReconcileReport:
        """Compare one post's counts across stores and correct drift.

        Args:
            post_id: Post to reconcile
            policy: Which store wins; defaults to the configured policy

        Returns:
            Report of what was found and whether it was corrected
        """
        policy = policy or self.sync_settings.default_policy
        with logfire.span(
            "durable_sync.reconcile_counter", post_id=post_id, policy=policy.value
        ):
            try:
                atomic = await self.counter_store.get_count(post_id)
            except CounterStoreError as e:
                logfire.warn(
                    "Reconcile skipped, atomic store unavailable", post_id=post_id
                )
                return ReconcileReport(post_id=post_id, policy=policy, error=str(e))

            try:
                durable = (await self.post_repository.get_like_counts([post_id])).get(
                    post_id
                )
            except Exception as e:
                logfire.error("Reconcile skipped, durable read failed", post_id=post_id)
                return ReconcileReport(
                    post_id=post_id, policy=policy, atomic_count=atomic, error=str(e)
                )

            restoring = [post_id] if _restores(policy, atomic, durable) else []
            members = await self._durable_members(restoring)
            return await self._apply(post_id, policy, atomic, durable, members)

    async def reconcile_all(
        self, policy: Optional[ReconcilePolicy] = None
    ) -> List[ReconcileReport]:
        """Reconcile every post in the durable store.

        Runs ``reconcile_page`` until the posts run out, all in this
        service's unit of work. Callers that want a commit per page drive
        ``reconcile_page`` through a ``DurableSyncScope`` instead.

        Args:
            policy: Which store wins; defaults to the configured policy

        Returns:
            One report per post
        """
        policy = policy or self.sync_settings.default_policy
        batch_size = self.sync_settings.reconcile_batch_size
        reports: List[ReconcileReport] = []

        with logfire.span("durable_sync.reconcile_all", policy=policy.value):
            offset = 0
            while True:
                page = await self.reconcile_page(offset, policy)
                reports.extend(page)
                offset += len(page)
                if len(page) < batch_size:
                    break

            logfire.info(
                "Reconciliation finished",
                policy=policy.value,
                posts=len(reports),
                corrected=sum(1 for r in reports if r.corrected),
                failed=sum(1 for r in reports if r.error),
            )
            return reports

    async def reconcile_page(
        self, offset: int, policy: Optional[ReconcilePolicy] = None
    ) -> List[ReconcileReport]:
        """Reconcile one page of ``reconcile_batch_size`` posts.

        The page's live counts are read in one round trip, and the like
        records of every post the durable store wins are read in one query.

        Args:
            offset: Posts to skip, in ID order
            policy: Which store wins; defaults to the configured policy

        Returns:
            One report per post on the page; empty past the last post
        """
        policy = policy or self.sync_settings.default_policy
        posts = await self.post_repository.find_all(
            limit=self.sync_settings.reconcile_batch_size, offset=offset
        )
        if not posts:
            return []

        with logfire.span(
            "durable_sync.reconcile_page", offset=offset, posts=len(posts)
        ):
            post_ids = [post.id for post in posts]
            try:
                atomic_counts = await self.counter_store.get_counts(post_ids)
            except CounterStoreError as e:
                logfire.warn(
                    "Reconcile batch skipped, atomic store unavailable",
                    offset=offset,
                    error=str(e),
                )
                return [
                    ReconcileReport(
                        post_id=post.id,
                        policy=policy,
                        durable_count=post.likes,
                        error=str(e),
                    )
                    for post in posts
                ]

            restoring = [
                post.id
                for post, atomic in zip(posts, atomic_counts)
                if _restores(policy, atomic, post.likes)
            ]
            members = await self._durable_members(restoring)

            return [
                await self._apply(post.id, policy, atomic, post.likes, members)
                for post, atomic in zip(posts, atomic_counts)
            ]

    async def migrate_actor_records(
        self, from_actor: ActorId, to_actor: ActorId
    ) -> int:
        """Move durable like records from one actor to another.

        Records the target already has on the same post are dropped rather
        than duplicated. The affected posts' counts are then re-mirrored
        from the atomic store, which already merged the duplicates.

        Args:
            from_actor: Actor giving up its likes
            to_actor: Actor receiving them

        Returns:
            Number of records reassigned
        """
        if from_actor == to_actor:
            return 0

        with logfire.span(
            "durable_sync.migrate_actor_records",
            from_actor=from_actor.member,
            to_actor=to_actor.member,
        ):
            moved = await self.like_repository.reassign_actor(from_actor, to_actor)

            likes = await self.like_repository.find_by_actor(to_actor)
            post_ids = [like.post_id for like in likes]
            if post_ids:
                try:
                    counts = await self.counter_store.get_counts(post_ids)
                except CounterStoreError as e:
                    logfire.warn(
                        "Counts not re-mirrored after migration", error=str(e)
                    )
                else:
                    for post_id, count in zip(post_ids, counts):
                        if count is not None:
                            await self.post_repository.set_like_count(post_id, count)

            logfire.info(
                "Actor records migrated",
                from_actor=from_actor.member,
                to_actor=to_actor.member,
                moved=moved,
            )
            return moved

    async def _durable_members(
        self, post_ids: List[PostId]
    ) -> Optional[dict[PostId, List[ActorId]]]:
        """Read who likes each post from the durable like records.

        Returns None when the records cannot be read.
        """
        if not post_ids:
            return {}

        try:
            likes = await self.like_repository.find_by_posts(post_ids)
        except Exception as e:
            logfire.error(
                "Durable like records unavailable", count=len(post_ids), error=str(e)
            )
            return None

        members: dict[PostId, List[ActorId]] = {post_id: [] for post_id in post_ids}
        for like in likes:
            members.setdefault(like.post_id, []).append(like.actor)
        return members

    async def _apply(
        self,
        post_id: PostId,
        policy: ReconcilePolicy,
        atomic: Optional[int],
        durable: Optional[int],
        members: Optional[dict[PostId, List[ActorId]]],
    ) -> ReconcileReport:
        """Correct drift for one post given both counts.

        When the durable store wins, the membership set and actor index are
        rebuilt from ``members`` along with the counter.
        """
        if durable is None:
            logfire.warn(
                "Reconcile found post missing from durable store", post_id=post_id
            )
            return ReconcileReport(
                post_id=post_id,
                policy=policy,
                atomic_count=atomic,
                error="post not found in durable store",
            )

        # No live counter to trust, so the durable state seeds it
        if policy == ReconcilePolicy.ATOMIC_WINS and atomic is None:
            policy = ReconcilePolicy.DURABLE_WINS

        report = ReconcileReport(
            post_id=post_id, policy=policy, atomic_count=atomic, durable_count=durable
        )
        if atomic == durable:
            return report

        if policy == ReconcilePolicy.DURABLE_WINS and members is None:
            return report.model_copy(
                update={"error": "durable like records unavailable"}
            )

        try:
            if policy == ReconcilePolicy.ATOMIC_WINS:
                await self.post_repository.set_like_count(post_id, atomic or 0)
            else:
                await self.counter_store.set_count(post_id, durable)
                await self.counter_store.replace_members(
                    post_id, members.get(post_id, [])
                )
        except Exception as e:
            logfire.error(
                "Reconcile write failed",
                post_id=post_id,
                policy=policy.value,
                error=str(e),
            )
            return report.model_copy(update={"error": str(e)})

        logfire.info(
            "Counter drift corrected",
            post_id=post_id,
            policy=policy.value,
            atomic_count=atomic,
            durable_count=durable,
        )
        return report.model_copy(update={"corrected": True})


def _restores(
    policy: ReconcilePolicy, atomic: Optional[int], durable: Optional[int]
) -> bool:
    """Whether reconciling these counts rewrites the atomic store."""
    if durable is None or atomic == durable:
        return False
    return policy == ReconcilePolicy.DURABLE_WINS or atomic is None


class DurableSyncScope(ABC):
    """Opens a DurableSyncService bound to its own unit of work.

    Background sync outlives the request that triggered it, so it cannot
    share the request's database session.
    """

    @abstractmethod
    def open(self) -> AsyncContextManager[DurableSyncService]:
        """Open a scope.

        Work done through the yielded service is committed when the context
        exits cleanly and rolled back otherwise.
        """
        pass

"""Redis key schema for like counters.

Key Schema:
- post:likes:{post_id}     string counter, INCR/DECR/GET/SET/MGET
- post:liked:{post_id}     set of actor members ("session:..", "profile:..")
- session:likes:{token}    set of post ids liked by an anonymous session
- profile:likes:{id}       set of post ids liked by an authenticated profile

Every component that touches Redis builds keys through CounterKeys so the
counter service and reconciliation always address the same keys.
"""

from tally.domain.value import ActorId, PostId


class CounterKeys:
    """Builds counter keys under an optional namespace prefix."""

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix

    def post_likes(self, post_id: PostId) -> str:
        """Like count of a post."""
        return f"{self.prefix}post:likes:{post_id}"

    def post_liked(self, post_id: PostId) -> str:
        """Membership set of a post."""
        return f"{self.prefix}post:liked:{post_id}"

    def actor_likes(self, actor: ActorId) -> str:
        """Reverse index of an actor, one key space per actor kind."""
        return f"{self.prefix}{actor.kind.value}:likes:{actor.value}"

"""Like entity.

A persisted "actor likes post" fact. Exists in the durable store exactly
when the actor is a member of the post's membership set in the atomic
store, once sync has caught up.
"""

from datetime import datetime

from pydantic import Field

from tally.domain.model.common import DomainModel
from tally.domain.value import ActorId, LikeId, PostId


class Like(DomainModel):
    """Like entity.

    Business rules:
    - One like per actor per post (unique constraint on post and actor)
    - Session and profile actors live side by side without colliding
    """

    id: LikeId
    post_id: PostId
    actor: ActorId
    created_at: datetime = Field(default_factory=datetime.now)

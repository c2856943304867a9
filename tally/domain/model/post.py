"""Post record as seen by the durable store.

Only the fields this core owns are modelled; captions, images and authors
belong to the content system and travel through the merge layer untouched.
"""

from datetime import datetime

from pydantic import Field

from tally.domain.model.common import DomainModel
from tally.domain.value import PostId


class Post(DomainModel):
    """Durable post row.

    ``likes`` is the last count synced from the atomic store. It lags the
    live counter by at most one sync and is overwritten, never incremented.
    """

    id: PostId
    likes: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

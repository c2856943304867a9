"""Strongly typed identifiers for Tally domain entities.

Post ids are opaque strings owned by the content system (UUIDs or numeric
ids rendered as text); this core never parses them.
"""

from typing import NewType
from uuid import UUID

PostId = NewType("PostId", str)
LikeId = NewType("LikeId", UUID)

"""Domain value objects for Tally.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules.
"""

from enum import Enum
from typing import Optional

from pydantic import field_validator

from tally.domain.value.common import ValueObject


class ActorKind(str, Enum):
    """Kind of actor that can like a post."""

    SESSION = "session"  # Anonymous, browser/device scoped token
    PROFILE = "profile"  # Authenticated principal, cross-device


class ReconcilePolicy(str, Enum):
    """Which store wins when reconciliation finds drift."""

    ATOMIC_WINS = "atomic_wins"
    DURABLE_WINS = "durable_wins"


class ActorId(ValueObject):
    """Tagged actor identifier.

    Two actors are equal only when both kind and value match, so a session
    token and a profile id with the same text never collide. The ``member``
    form ("session:abc", "profile:42") is what gets stored in membership sets.
    """

    kind: ActorKind
    value: str

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: str) -> str:
        """Validate identifier is not blank and within length limits."""
        v = v.strip()
        if len(v) < 1 or len(v) > 255:
            raise ValueError("Actor identifier must be 1-255 characters")
        return v

    @classmethod
    def session(cls, token: str) -> "ActorId":
        """Anonymous session actor."""
        return cls(kind=ActorKind.SESSION, value=token)

    @classmethod
    def profile(cls, profile_id: str) -> "ActorId":
        """Authenticated profile actor."""
        return cls(kind=ActorKind.PROFILE, value=profile_id)

    @classmethod
    def for_request(
        cls, session_id: Optional[str], profile_id: Optional[str] = None
    ) -> "ActorId":
        """Pick the identity a request likes with.

        Authenticated requests always use the profile so likes follow the
        user across devices; anonymous ones fall back to the session token.

        Raises:
            ValueError: If neither identifier is present
        """
        if profile_id:
            return cls.profile(profile_id)
        if session_id:
            return cls.session(session_id)
        raise ValueError("Either a session id or a profile id is required")

    @classmethod
    def parse(cls, member: str) -> "ActorId":
        """Parse a stored set member back into an actor.

        Raises:
            ValueError: If the member has no known kind prefix
        """
        kind, sep, value = member.partition(":")
        if not sep:
            raise ValueError(f"Malformed actor member: {member!r}")
        return cls(kind=ActorKind(kind), value=value)

    @property
    def member(self) -> str:
        """Storage form used as a set member."""
        return f"{self.kind.value}:{self.value}"

    def __str__(self) -> str:
        return self.member

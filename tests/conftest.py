"""Test configuration and fixtures."""

from datetime import datetime

import logfire
import pytest

from tally.domain.model import Post
from tally.domain.repository import PostRepository
from tally.domain.value import PostId


@pytest.fixture(scope="session", autouse=True)
def quiet_logfire():
    """Keep telemetry local and silent during tests."""
    logfire.configure(send_to_logfire=False, console=False)


async def seed_post(post_repo: PostRepository, post_id: str, likes: int = 0) -> Post:
    """Helper to store a durable post row.

    Args:
        post_repo: Post repository to save into
        post_id: Post ID
        likes: Durable like count

    Returns:
        The saved post
    """
    post = Post(
        id=PostId(post_id),
        likes=likes,
        created_at=datetime.now(),
        updated_at=datetime.now(),
    )
    return await post_repo.save(post)

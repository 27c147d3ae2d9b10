"""Shared pytest fixtures for the blog admin tests."""

import os
from pathlib import Path
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

# Keep the default engine away from the working directory
os.environ.setdefault("ASYNC_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from src.core.database import Database  # noqa: E402
from src.core.exceptions import ConflictException, NotFoundException  # noqa: E402
from src.apps.blog.models.post import Post  # noqa: E402
from src.apps.blog.repositories.post_repository import PostRepository  # noqa: E402
from src.apps.blog.schemas.post import PostForm  # noqa: E402
from src.main import create_app  # noqa: E402


class InMemoryPostStore:
    """PostStore kept in a dict, recording every call made to it."""

    def __init__(self, posts: Optional[List[Post]] = None):
        self.posts: Dict[str, Post] = {post.slug: post for post in posts or []}
        self.calls: List[str] = []

    async def find_all(self) -> List[Post]:
        self.calls.append("find_all")
        return list(self.posts.values())

    async def find_by_slug(self, slug: str) -> Optional[Post]:
        self.calls.append("find_by_slug")
        return self.posts.get(slug)

    async def create(self, post: PostForm) -> Post:
        self.calls.append("create")
        if post.slug in self.posts:
            raise ConflictException(f"Post already exists: slug={post.slug!r}")
        created = Post(slug=post.slug, title=post.title, markdown=post.markdown)
        self.posts[post.slug] = created
        return created

    async def update_by_slug(self, post: PostForm) -> Post:
        self.calls.append("update_by_slug")
        existing = self.posts.get(post.slug)
        if existing is None:
            raise NotFoundException(f"Post not found: slug={post.slug!r}")
        existing.title = post.title
        existing.markdown = post.markdown
        return existing

    async def delete_by_slug(self, slug: str) -> None:
        self.calls.append("delete_by_slug")
        if slug not in self.posts:
            raise NotFoundException(f"Post not found: slug={slug!r}")
        del self.posts[slug]


def sqlite_url(path: Path) -> str:
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def memory_store() -> InMemoryPostStore:
    """In-memory store holding one post, slug "hello"."""
    return InMemoryPostStore(
        [Post(slug="hello", title="Hello", markdown="# Hello\n\nWorld")]
    )


@pytest.fixture
async def database(tmp_path: Path):
    """SQLite database on a temp file with all tables created."""
    db = Database(sqlite_url(tmp_path / "blog.db"))
    await db.create_all()
    try:
        yield db
    finally:
        await db.disconnect()


@pytest.fixture
def repository(database: Database) -> PostRepository:
    return PostRepository(database.get_session)


@pytest.fixture
def client(tmp_path: Path):
    """TestClient around an app bound to a fresh SQLite database."""
    app = create_app(Database(sqlite_url(tmp_path / "web.db")))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def seeded_client(client: TestClient) -> TestClient:
    """Client whose database holds the post "hello"."""
    response = client.post(
        "/api/posts",
        json={"slug": "hello", "title": "Hello", "markdown": "# Hello\n\nWorld"},
    )
    assert response.status_code == 201
    return client

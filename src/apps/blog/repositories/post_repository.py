"""Post repository."""

from typing import List, Optional, Protocol

from src.core.bases.base_repository import BaseRepository
from src.apps.blog.models.post import Post
from src.apps.blog.schemas.post import PostForm


class PostStore(Protocol):
    """Data access the post handlers depend on."""

    async def find_all(self) -> List[Post]: ...

    async def find_by_slug(self, slug: str) -> Optional[Post]: ...

    async def create(self, post: PostForm) -> Post: ...

    async def update_by_slug(self, post: PostForm) -> Post: ...

    async def delete_by_slug(self, slug: str) -> None: ...


class PostRepository(BaseRepository[Post]):
    """Post repository class."""

    model = Post
    key_field = "slug"

    async def find_all(self) -> List[Post]:
        return await self.get_all()

    async def find_by_slug(self, slug: str) -> Optional[Post]:
        return await self.get_by_key(slug)

    async def update_by_slug(self, post: PostForm) -> Post:
        return await self.update_by_key(post.slug, post)

    async def delete_by_slug(self, slug: str) -> None:
        await self.delete_by_key(slug)

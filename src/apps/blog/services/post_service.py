"""Post service."""

from typing import Any, List, Mapping, Optional, Union

import markdown
import structlog
from pydantic import BaseModel

from src.core.bases.base_service import BaseService
from src.core.config import settings
from src.core.exceptions import InvalidInputException, NotFoundException
from src.apps.blog.models.post import Post
from src.apps.blog.repositories.post_repository import PostStore
from src.apps.blog.schemas.post import (
    RESERVED_SLUGS,
    PostFormErrors,
    decode_post_form,
    form_value,
    read_intent,
)

logger = structlog.get_logger(__name__)

MARKDOWN_EXTENSIONS = ["fenced_code", "tables"]


class Redirect(BaseModel):
    """Tell the caller to send the browser elsewhere."""
    url: str


FormResult = Union[Redirect, PostFormErrors]


class PostService(BaseService[Post]):
    """Post service class.

    Besides the generic CRUD used by the JSON API, this handles the admin
    forms: ``load`` and ``submit`` back the edit page, ``create_from_form``
    backs the new-post page. Each form submission makes at most one call
    to the store.
    """

    def __init__(self, repository: PostStore, admin_route: Optional[str] = None):
        super().__init__(repository)  # type: ignore[arg-type]
        self.store = repository
        self.admin_route = admin_route or settings.ADMIN_ROUTE

    async def list_posts(self) -> List[Post]:
        return await self.store.find_all()

    async def load(self, slug: Optional[str]) -> Post:
        """Fetch the post behind the edit page."""
        if not slug:
            raise InvalidInputException("slug is required")
        post = await self.store.find_by_slug(slug)
        if post is None:
            raise NotFoundException(f"Post not found: {slug}")
        return post

    async def submit(self, form: Mapping[str, Any]) -> FormResult:
        """Handle the edit form, either deleting or updating the post."""
        if read_intent(form) == "delete":
            slug = form_value(form, "slug")
            if not slug:
                raise InvalidInputException("slug is required")
            await self.store.delete_by_slug(slug)
            logger.info("post_deleted", slug=slug)
            return Redirect(url=self.admin_route)

        decoded = decode_post_form(form)
        if isinstance(decoded, PostFormErrors):
            self._log_invalid(decoded)
            return decoded

        await self.store.update_by_slug(decoded)
        logger.info("post_updated", slug=decoded.slug)
        return Redirect(url=self.admin_route)

    async def create_from_form(self, form: Mapping[str, Any]) -> FormResult:
        """Handle the new-post form."""
        decoded = decode_post_form(form)
        if isinstance(decoded, PostFormErrors):
            self._log_invalid(decoded)
            return decoded
        if decoded.slug in RESERVED_SLUGS:
            errors = PostFormErrors(slug="Slug is reserved")
            self._log_invalid(errors)
            return errors

        await self.store.create(decoded)
        logger.info("post_created", slug=decoded.slug)
        return Redirect(url=self.admin_route)

    def render(self, post: Post) -> str:
        return markdown.markdown(post.markdown, extensions=MARKDOWN_EXTENSIONS)

    @staticmethod
    def _log_invalid(errors: PostFormErrors) -> None:
        fields = [name for name, message in errors.model_dump().items() if message]
        logger.info("post_form_invalid", fields=fields)

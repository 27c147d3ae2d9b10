"""Post router."""

from fastapi import Request

from src.core.bases.base_router import BaseRouter
from src.apps.blog.services.post_service import PostService
from src.apps.blog.repositories.post_repository import PostRepository
from src.apps.blog.schemas.post import PostCreate, PostUpdate


def get_post_repository(request: Request) -> PostRepository:
    """Get post repository bound to the application's database."""
    return PostRepository(request.app.state.database.get_session)


def get_post_service(request: Request) -> PostService:
    """Get post service instance."""
    return PostService(get_post_repository(request))


class PostRouter(BaseRouter):
    """Post router class."""

    def __init__(self):
        super().__init__(
            get_service=get_post_service,
            create_schema=PostCreate,
            update_schema=PostUpdate,
            prefix="/api/posts",
            tags=["Posts API"],
        )


# Router instance
router = PostRouter().get_router()

"""Post model."""

from sqlmodel import Field
from src.core.database import TimestampedModel


class Post(TimestampedModel, table=True):
    """Post model class."""

    __tablename__ = "blog_posts"  # type: ignore
    slug: str = Field(primary_key=True)
    title: str = Field()
    markdown: str = Field()

import asyncio
from typing import Optional

import typer
import uvicorn

from src.core.config import settings
from src.core.database import Database
from src.core.exceptions import ConflictException, NotFoundException
from src.apps.blog.repositories.post_repository import PostRepository
from src.apps.blog.schemas.post import PostForm

app = typer.Typer(help="CLI for managing the blog database.")

SEED_POSTS = [
    PostForm(
        slug="my-first-post",
        title="My First Post",
        markdown="# This is my first post\n\nIsn't it great?",
    ),
    PostForm(
        slug="90s-mixtape",
        title="A Mixtape I Made Just For You",
        markdown=(
            "# 90s Mixtape\n\n"
            "- I wish (Skee-Lo)\n"
            "- This Is How We Do It (Montell Jordan)\n"
            "- Everlong (Foo Fighters)\n"
            "- Ms. Jackson (Outkast)\n"
            "- Interstate Love Song (Stone Temple Pilots)\n"
            "- Killing Me Softly With His Song (Fugees, Ms. Lauryn Hill)\n"
            "- Just a Friend (Biz Markie)\n"
            "- The Man Who Sold The World (Nirvana)\n"
            "- Semi-Charmed Life (Third Eye Blind)\n"
            "- ...Baby One More Time (Britney Spears)\n"
            "- Better Man (Pearl Jam)\n"
            "- It's All Coming Back to Me Now (Céline Dion)\n"
            "- This Kiss (Faith Hill)\n"
            "- Fly Away (Lenny Kravits)\n"
            "- Scar Tissue (Red Hot Chili Peppers)\n"
            "- Santa Monica (Everclear)\n"
            "- C'mon N' Ride it (Quad City DJ's)\n"
        ),
    ),
]

DatabaseUrlOption = typer.Option(
    None, "--database-url", help="Async SQLAlchemy URL; defaults to ASYNC_DATABASE_URL."
)


# ---------------------------
# Helpers
# ---------------------------
def get_database(database_url: Optional[str]) -> Database:
    return Database(database_url or settings.ASYNC_DATABASE_URL)


async def _init_db(db: Database) -> None:
    try:
        await db.create_all()
    finally:
        await db.disconnect()


async def _seed(db: Database) -> list:
    repository = PostRepository(db.get_session)
    created = []
    try:
        await db.create_all()
        for post in SEED_POSTS:
            try:
                await repository.create(post)
            except ConflictException:
                continue
            created.append(post.slug)
    finally:
        await db.disconnect()
    return created


async def _list_posts(db: Database) -> list:
    repository = PostRepository(db.get_session)
    try:
        return await repository.find_all()
    finally:
        await db.disconnect()


async def _delete_post(db: Database, slug: str) -> None:
    repository = PostRepository(db.get_session)
    try:
        await repository.delete_by_slug(slug)
    finally:
        await db.disconnect()


# ---------------------------
# Commands
# ---------------------------
@app.command()
def init_db(database_url: Optional[str] = DatabaseUrlOption):
    """Create the database tables."""
    asyncio.run(_init_db(get_database(database_url)))
    print("✅ Database tables created")


@app.command()
def seed(database_url: Optional[str] = DatabaseUrlOption):
    """Insert the sample posts, skipping slugs that already exist."""
    created = asyncio.run(_seed(get_database(database_url)))
    if not created:
        print("📁 Sample posts already present.")
        return
    for slug in created:
        print(f"✅ Created: {slug}")


@app.command()
def list_posts(database_url: Optional[str] = DatabaseUrlOption):
    """List all posts."""
    posts = asyncio.run(_list_posts(get_database(database_url)))
    if not posts:
        print("📁 No posts found.")
        return
    for post in posts:
        print(f"  📄 {post.slug}: {post.title}")


@app.command()
def delete_post(slug: str, database_url: Optional[str] = DatabaseUrlOption):
    """Delete the post with the given slug."""
    try:
        asyncio.run(_delete_post(get_database(database_url), slug))
    except NotFoundException as e:
        print(f"❌ {e.detail}")
        raise typer.Exit(1)
    print(f"🗑️  Deleted: {slug}")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Interface to bind."),
    port: int = typer.Option(8000, help="Port to listen on."),
    reload: bool = typer.Option(False, help="Enable auto-reload in development."),
):
    """Run the web server."""
    uvicorn.run(
        "src.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


# ---------------------------
# Entrypoint
# ---------------------------
if __name__ == "__main__":
    app()

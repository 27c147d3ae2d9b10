"""Tests for the post form handlers in PostService."""

import pytest
from starlette.datastructures import FormData

from src.core.exceptions import (
    ConflictException,
    FormShapeException,
    InvalidInputException,
    NotFoundException,
)
from src.apps.blog.schemas.post import PostForm, PostFormErrors
from src.apps.blog.services.post_service import PostService, Redirect

ADMIN = "/posts/admin"


@pytest.fixture
def service(memory_store) -> PostService:
    return PostService(memory_store, admin_route=ADMIN)


class TestLoad:
    async def test_returns_requested_post(self, service):
        post = await service.load("hello")
        assert post.slug == "hello"

    async def test_absent_slug_not_found(self, service):
        """The error names the slug that was asked for."""
        with pytest.raises(NotFoundException, match="missing"):
            await service.load("missing")

    @pytest.mark.parametrize("slug", ["", None])
    async def test_empty_slug_is_invalid_input(self, service, memory_store, slug):
        with pytest.raises(InvalidInputException):
            await service.load(slug)
        assert memory_store.calls == []


class TestSubmitDelete:
    async def test_deletes_and_redirects(self, service, memory_store):
        result = await service.submit({"submit": "delete", "slug": "hello"})

        assert result == Redirect(url=ADMIN)
        assert "hello" not in memory_store.posts
        assert memory_store.calls == ["delete_by_slug"]

    async def test_second_delete_not_found(self, service):
        await service.submit({"submit": "delete", "slug": "hello"})
        with pytest.raises(NotFoundException):
            await service.submit({"submit": "delete", "slug": "hello"})

    async def test_delete_ignores_other_fields(self, service, memory_store):
        """Empty title and markdown do not block a delete."""
        result = await service.submit(
            {"submit": "delete", "slug": "hello", "title": "", "markdown": ""}
        )
        assert isinstance(result, Redirect)
        assert memory_store.calls == ["delete_by_slug"]

    async def test_delete_without_slug_is_invalid(self, service, memory_store):
        with pytest.raises(InvalidInputException):
            await service.submit({"submit": "delete"})
        assert memory_store.calls == []


class TestSubmitUpdate:
    async def test_persists_and_redirects(self, service, memory_store):
        result = await service.submit(
            {"submit": "update", "slug": "hello", "title": "T2", "markdown": "M2"}
        )

        assert result == Redirect(url=ADMIN)
        assert memory_store.calls == ["update_by_slug"]
        post = await service.load("hello")
        assert (post.title, post.markdown) == ("T2", "M2")

    async def test_missing_intent_means_update(self, service, memory_store):
        await service.submit({"slug": "hello", "title": "T2", "markdown": "M2"})
        assert memory_store.calls == ["update_by_slug"]

    @pytest.mark.parametrize(
        "empty, message",
        [
            ("title", "Title is required"),
            ("slug", "Slug is required"),
            ("markdown", "Markdown is required"),
        ],
    )
    async def test_empty_field_returns_errors(self, service, memory_store, empty, message):
        """Validation failures never reach the store."""
        form = {"submit": "update", "slug": "hello", "title": "T2", "markdown": "M2"}
        form[empty] = ""

        result = await service.submit(form)

        assert isinstance(result, PostFormErrors)
        expected = {"title": None, "slug": None, "markdown": None, empty: message}
        assert result.model_dump() == expected
        assert memory_store.calls == []
        assert memory_store.posts["hello"].title == "Hello"

    async def test_all_fields_empty(self, service, memory_store):
        """Every empty field is reported in one pass."""
        result = await service.submit(
            {"submit": "update", "slug": "", "title": "", "markdown": ""}
        )

        assert isinstance(result, PostFormErrors)
        assert result.model_dump() == {
            "title": "Title is required",
            "slug": "Slug is required",
            "markdown": "Markdown is required",
        }
        assert memory_store.calls == []

    async def test_unknown_slug_not_found(self, service):
        with pytest.raises(NotFoundException):
            await service.submit({"slug": "ghost", "title": "T", "markdown": "M"})

    async def test_repeated_field_is_fatal(self, service, memory_store):
        form = FormData(
            [
                ("submit", "update"),
                ("slug", "hello"),
                ("title", "T2"),
                ("markdown", "one"),
                ("markdown", "two"),
            ]
        )
        with pytest.raises(FormShapeException):
            await service.submit(form)
        assert memory_store.calls == []


class TestCreateFromForm:
    async def test_creates_and_redirects(self, service, memory_store):
        result = await service.create_from_form(
            {"slug": "fresh", "title": "Fresh", "markdown": "body"}
        )
        assert result == Redirect(url=ADMIN)
        assert memory_store.posts["fresh"].title == "Fresh"

    @pytest.mark.parametrize("slug", ["new", "admin"])
    async def test_reserved_slug(self, service, memory_store, slug):
        result = await service.create_from_form(
            {"slug": slug, "title": "Newsy", "markdown": "body"}
        )
        assert isinstance(result, PostFormErrors)
        assert result.slug == "Slug is reserved"
        assert memory_store.calls == []

    async def test_errors_skip_store(self, service, memory_store):
        result = await service.create_from_form({"slug": "fresh"})
        assert isinstance(result, PostFormErrors)
        assert result.title == "Title is required"
        assert memory_store.calls == []

    async def test_duplicate_slug_conflicts(self, service):
        with pytest.raises(ConflictException):
            await service.create_from_form(
                {"slug": "hello", "title": "Again", "markdown": "body"}
            )


class TestListAndRender:
    async def test_list_posts(self, service):
        posts = await service.list_posts()
        assert [post.slug for post in posts] == ["hello"]

    async def test_render_markdown(self, service):
        post = await service.load("hello")
        html = service.render(post)
        assert "<h1>Hello</h1>" in html
        assert "<p>World</p>" in html


async def test_round_trip_against_sqlite(repository):
    """The handler behaves the same on the real repository."""
    service = PostService(repository, admin_route=ADMIN)
    await repository.create(PostForm(slug="a", title="T", markdown="M"))

    post = await service.load("a")
    assert (post.slug, post.title, post.markdown) == ("a", "T", "M")

    await service.submit({"submit": "update", "slug": "a", "title": "T2", "markdown": "M2"})
    post = await service.load("a")
    assert (post.title, post.markdown) == ("T2", "M2")

    await service.submit({"submit": "delete", "slug": "a"})
    with pytest.raises(NotFoundException):
        await service.load("a")

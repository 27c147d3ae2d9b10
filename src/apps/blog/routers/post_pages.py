"""HTML pages for reading and administering posts."""

from typing import Any, Dict, Mapping, Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse, Response

from src.core.exceptions import ConflictException
from src.core.templating import templates
from src.apps.blog.routers.post_router import get_post_service
from src.apps.blog.schemas.post import POST_FORM_FIELDS, PostFormErrors
from src.apps.blog.services.post_service import FormResult, PostService, Redirect

router = APIRouter(prefix="/posts", tags=["Posts"])


def _submitted_values(form: Mapping[str, Any]) -> Dict[str, str]:
    """Text the user typed, for refilling the form after an error."""
    values = {}
    for name in POST_FORM_FIELDS:
        value = form.get(name)
        values[name] = value if isinstance(value, str) else ""
    return values


def _render_form(
    request: Request,
    *,
    values: Dict[str, str],
    errors: Optional[PostFormErrors] = None,
    is_new: bool,
    status_code: int = status.HTTP_200_OK,
) -> Response:
    return templates.TemplateResponse(
        request,
        "posts/admin/form.html",
        {
            "values": values,
            "errors": errors or PostFormErrors(),
            "is_new": is_new,
        },
        status_code=status_code,
    )


def _respond(
    request: Request, result: FormResult, form: Mapping[str, Any], is_new: bool
) -> Response:
    if isinstance(result, Redirect):
        return RedirectResponse(result.url, status_code=status.HTTP_303_SEE_OTHER)
    return _render_form(
        request,
        values=_submitted_values(form),
        errors=result,
        is_new=is_new,
        status_code=422,
    )


@router.get("", summary="Post index")
async def post_index(request: Request, service: PostService = Depends(get_post_service)):
    posts = await service.list_posts()
    return templates.TemplateResponse(request, "posts/index.html", {"posts": posts})


@router.get("/admin", summary="Admin post listing")
async def admin_index(request: Request, service: PostService = Depends(get_post_service)):
    posts = await service.list_posts()
    return templates.TemplateResponse(request, "posts/admin/index.html", {"posts": posts})


@router.get("/admin/new", summary="New post form")
async def new_post_form(request: Request):
    return _render_form(request, values=dict.fromkeys(POST_FORM_FIELDS, ""), is_new=True)


@router.post("/admin/new", summary="Create a post")
async def create_post(request: Request, service: PostService = Depends(get_post_service)):
    form = await request.form()
    try:
        result = await service.create_from_form(form)
    except ConflictException:
        return _render_form(
            request,
            values=_submitted_values(form),
            errors=PostFormErrors(slug="Slug already exists"),
            is_new=True,
            status_code=status.HTTP_409_CONFLICT,
        )
    return _respond(request, result, form, is_new=True)


@router.get("/admin/{slug}", summary="Edit post form")
async def edit_post_form(
    slug: str, request: Request, service: PostService = Depends(get_post_service)
):
    post = await service.load(slug)
    values = {"title": post.title, "slug": post.slug, "markdown": post.markdown}
    return _render_form(request, values=values, is_new=False)


@router.post("/admin/{slug}", summary="Update or delete a post")
async def submit_post(
    slug: str, request: Request, service: PostService = Depends(get_post_service)
):
    # The form's own slug field is the match key, not the path slug
    form = await request.form()
    result = await service.submit(form)
    return _respond(request, result, form, is_new=False)


@router.get("/{slug}", summary="Read a post")
async def post_detail(
    slug: str, request: Request, service: PostService = Depends(get_post_service)
):
    post = await service.load(slug)
    return templates.TemplateResponse(
        request,
        "posts/detail.html",
        {"post": post, "html": service.render(post)},
    )

"""Post schemas and form decoding."""

from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel, Field, field_validator

from src.core.exceptions import FormShapeException

POST_FORM_FIELDS = ("title", "slug", "markdown")

# Path segments the admin and public pages already use
RESERVED_SLUGS = frozenset({"admin", "new"})


class PostForm(BaseModel):
    """A post submission with every field present."""
    slug: str = Field(min_length=1)
    title: str = Field(min_length=1)
    markdown: str = Field(min_length=1)


class PostCreate(PostForm):
    """Schema for creating a post."""

    @field_validator("slug")
    @classmethod
    def slug_not_reserved(cls, value: str) -> str:
        if value in RESERVED_SLUGS:
            raise ValueError("Slug is reserved")
        return value


class PostUpdate(BaseModel):
    """Schema for replacing a post's content."""
    title: str = Field(min_length=1)
    markdown: str = Field(min_length=1)


class PostFormErrors(BaseModel):
    """Per-field error messages; None means the field is fine."""
    title: Optional[str] = None
    slug: Optional[str] = None
    markdown: Optional[str] = None

    @property
    def has_errors(self) -> bool:
        return any(message for message in self.model_dump().values())


def _values(form: Mapping[str, Any], name: str) -> List[Any]:
    if hasattr(form, "getlist"):
        return list(form.getlist(name))  # type: ignore[attr-defined]
    value = form.get(name)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def form_value(form: Mapping[str, Any], name: str) -> Optional[str]:
    """Single text value of a form field, None when absent.

    Raises FormShapeException if the field was sent more than once or
    carries something other than text (an upload, for instance).
    """
    values = _values(form, name)
    if not values:
        return None
    if len(values) > 1 or not isinstance(values[0], str):
        raise FormShapeException(name)
    return values[0]


def read_intent(form: Mapping[str, Any]) -> str:
    """Return "delete" or "update" from the submit button value."""
    values = _values(form, "submit")
    if values and values[0] == "delete":
        return "delete"
    return "update"


def decode_post_form(form: Mapping[str, Any]) -> Union[PostForm, PostFormErrors]:
    """Decode a submitted post form.

    Every empty field is reported at once. Shape is only checked once all
    fields are present, so an invalid submission never reaches the store.
    """
    errors = PostFormErrors()
    for name in POST_FORM_FIELDS:
        values = _values(form, name)
        if not values or values[0] in ("", None):
            setattr(errors, name, f"{name.capitalize()} is required")
    if errors.has_errors:
        return errors

    title = form_value(form, "title")
    slug = form_value(form, "slug")
    markdown = form_value(form, "markdown")
    return PostForm(slug=slug, title=title, markdown=markdown)  # type: ignore[arg-type]

"""Blog post routes: public reads, owner-scoped writes and the admin path."""

from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import ORJSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from blogapi.auth.permissions import CreatorDep, PostAdminDeleteDep, PostAdminUpdateDep
from blogapi.configs.settings import MAX_CATEGORY_LENGTH, MAX_TITLE_LENGTH
from blogapi.dependencies import CurrentIdentity, PostServiceDep
from blogapi.errors import ValidationError
from blogapi.schemas.post import PostDraft, PostResponse
from blogapi.services.images import ImageUpload

router = APIRouter(prefix="/blog", tags=["📝 Blog"])

NOT_FOUND = {
    "description": "Not Found",
    "content": {"application/json": {"example": {"detail": "Post not found"}}},
}
CONFLICT = {
    "description": "Conflict",
    "content": {"application/json": {"example": {"detail": "A post with this title already exists"}}},
}
FORBIDDEN = {
    "description": "Forbidden",
    "content": {"application/json": {"example": {"detail": "Not enough permissions"}}},
}
POST_EXAMPLE = {
    "id": 1,
    "title": "Intro",
    "text": "Hello there",
    "category": "General",
    "coverImage": "2b1f0c8e5d7a4f4e9a3c6b1d0e2f4a6cintro.png",
    "ownerId": "123e4567-e89b-12d3-a456-426614174000",
    "tags": ["go", "infra"],
    "createdAt": "2025-01-01T10:00:00Z",
    "updatedAt": None,
}

Title = Annotated[str, Form(min_length=1, max_length=MAX_TITLE_LENGTH)]
Text = Annotated[str, Form(min_length=1)]
Category = Annotated[str, Form(min_length=1, max_length=MAX_CATEGORY_LENGTH)]
Tags = Annotated[list[str], Form()]
CoverImage = Annotated[UploadFile | None, File(alias="coverImage")]


def build_draft(title: str, text: str, category: str, tags: list[str]) -> PostDraft:
    """Build a post draft, reporting rejected fields like request validation does."""
    try:
        return PostDraft(title=title, text=text, category=category, tags=tags)
    except PydanticValidationError as e:
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in e.errors()
        ]
        raise ValidationError(errors=errors) from e


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=list[PostResponse],
    summary="List posts",
    description="All posts in ascending id order.",
    responses={200: {"content": {"application/json": {"example": [POST_EXAMPLE]}}}},
    operation_id="blog_list",
)
async def list_posts(posts: PostServiceDep) -> list[PostResponse]:
    """
    List every post.

    Parameters
    ----------
    posts : PostService
        Post service dependency.

    Returns
    -------
    list[PostResponse]
        Posts ordered by id.
    """
    return await posts.list_posts()


@router.get(
    "/tag/{tag}",
    response_class=ORJSONResponse,
    response_model=list[PostResponse],
    summary="List posts by tag",
    description="Posts carrying the exact tag name. Unknown tags give an empty list.",
    operation_id="blog_list_by_tag",
)
async def list_posts_by_tag(tag: str, posts: PostServiceDep) -> list[PostResponse]:
    """List the posts tagged with ``tag``."""
    return await posts.list_by_tag(tag)


@router.get(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    summary="Get post",
    responses={200: {"content": {"application/json": {"example": POST_EXAMPLE}}}, 404: NOT_FOUND},
    operation_id="blog_get",
)
async def get_post(post_id: int, posts: PostServiceDep) -> PostResponse:
    """
    Get one post by id.

    Raises
    ------
    PostNotFoundError
        If no post has this id.
    """
    return await posts.get_post(post_id)


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    status_code=HTTP_201_CREATED,
    summary="Create post",
    description="Create a post owned by the caller, with tags and an optional cover image.",
    responses={201: {"content": {"application/json": {"example": POST_EXAMPLE}}}, 409: CONFLICT},
    operation_id="blog_create",
)
async def create_post(
    identity: CreatorDep,
    posts: PostServiceDep,
    title: Title,
    text: Text,
    category: Category,
    tags: Tags = [],  # noqa: B006
    cover_image: CoverImage = None,
) -> PostResponse:
    """
    Create a post.

    Parameters
    ----------
    identity : Identity
        Authenticated caller, who becomes the owner.
    posts : PostService
        Post service dependency.
    title, text, category : str
        Post fields.
    tags : list[str]
        Tag names; repeated form fields.
    cover_image : UploadFile | None
        Optional cover image.

    Returns
    -------
    PostResponse
        The created post.

    Raises
    ------
    DuplicateEntryError
        If the title is already used.
    """
    draft = build_draft(title, text, category, tags)
    return await posts.create(draft, await ImageUpload.from_upload(cover_image), identity)


@router.put(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    summary="Update own post",
    description="Replace the content, tags and cover image of a post the caller owns.",
    responses={404: NOT_FOUND, 409: CONFLICT},
    operation_id="blog_update",
)
async def update_post(
    post_id: int,
    identity: CurrentIdentity,
    posts: PostServiceDep,
    title: Title,
    text: Text,
    category: Category,
    tags: Tags = [],  # noqa: B006
    cover_image: CoverImage = None,
) -> PostResponse:
    """
    Update a post through the owner path.

    A missing post and a post owned by someone else give the same 404.
    """
    draft = build_draft(title, text, category, tags)
    image = await ImageUpload.from_upload(cover_image)
    return await posts.update(post_id, draft, image, identity, privileged=False)


@router.delete(
    "/{post_id}",
    status_code=HTTP_204_NO_CONTENT,
    summary="Delete own post",
    responses={404: NOT_FOUND},
    operation_id="blog_delete",
)
async def delete_post(post_id: int, identity: CurrentIdentity, posts: PostServiceDep) -> Response:
    """
    Delete a post through the owner path.

    A missing post and a post owned by someone else give the same 404.
    """
    await posts.delete(post_id, identity, privileged=False)
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.put(
    "/admin/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    summary="Update any post",
    description="Admin path. Ownership is left unchanged.",
    responses={403: FORBIDDEN, 404: NOT_FOUND, 409: CONFLICT},
    operation_id="blog_admin_update",
)
async def admin_update_post(
    post_id: int,
    identity: PostAdminUpdateDep,
    posts: PostServiceDep,
    title: Title,
    text: Text,
    category: Category,
    tags: Tags = [],  # noqa: B006
    cover_image: CoverImage = None,
) -> PostResponse:
    """Update any post. Requires the ADMIN role."""
    draft = build_draft(title, text, category, tags)
    image = await ImageUpload.from_upload(cover_image)
    return await posts.update(post_id, draft, image, identity, privileged=True)


@router.delete(
    "/admin/{post_id}",
    status_code=HTTP_204_NO_CONTENT,
    summary="Delete any post",
    responses={403: FORBIDDEN, 404: NOT_FOUND},
    operation_id="blog_admin_delete",
)
async def admin_delete_post(post_id: int, identity: PostAdminDeleteDep, posts: PostServiceDep) -> Response:
    """Delete any post. Requires the ADMIN role."""
    await posts.delete(post_id, identity, privileged=True)
    return Response(status_code=HTTP_204_NO_CONTENT)

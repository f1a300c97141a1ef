"""Blog post routes: public listing and reads, authenticated create, owner-or-admin update/delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from scribe.api.v1.auth import get_current_user
from scribe.core.config import get_settings
from scribe.core.database import get_db
from scribe.schemas.auth import CurrentUser
from scribe.schemas.common import Envelope
from scribe.schemas.post import PostCreate, PostOut, PostUpdate
from scribe.services.policy import Action, ensure_can
from scribe.services.post_store import PostStore

router = APIRouter()


def get_post_store(db: Annotated[Session, Depends(get_db)]) -> PostStore:
    """Dependency: a PostStore bound to the request's session."""
    return PostStore(db, max_image_bytes=get_settings().POST_IMAGE_MAX_BYTES)


def _many(posts) -> Envelope[list[PostOut]]:
    items = [PostOut.model_validate(p) for p in posts]
    return Envelope[list[PostOut]](success=True, count=len(items), data=items)


@router.get("", response_model=Envelope[list[PostOut]], response_model_exclude_unset=True)
def list_posts(
    store: Annotated[PostStore, Depends(get_post_store)],
    search: Annotated[str | None, Query(max_length=200)] = None,
    category: Annotated[str | None, Query(max_length=50)] = None,
) -> Envelope[list[PostOut]]:
    """
    List posts newest first.

    - **search**: case-insensitive text matched against title, description or category.
    - **category**: exact category; omit or send `All` for every category.
    """
    return _many(store.list_posts(search=search, category=category))


@router.get(
    "/categories/list",
    response_model=Envelope[list[str]],
    response_model_exclude_unset=True,
)
def list_categories(
    store: Annotated[PostStore, Depends(get_post_store)],
) -> Envelope[list[str]]:
    """Categories used by at least one post, sorted."""
    return Envelope[list[str]](success=True, data=store.distinct_categories())


@router.get(
    "/user/{user_id}",
    response_model=Envelope[list[PostOut]],
    response_model_exclude_unset=True,
)
def list_user_posts(
    user_id: int,
    store: Annotated[PostStore, Depends(get_post_store)],
) -> Envelope[list[PostOut]]:
    """Posts written by one user, newest first."""
    return _many(store.list_by_author(user_id))


@router.get("/{post_id}", response_model=Envelope[PostOut], response_model_exclude_unset=True)
def get_post(
    post_id: int,
    store: Annotated[PostStore, Depends(get_post_store)],
) -> Envelope[PostOut]:
    """Fetch a single post. Public."""
    post = store.find_by_id(post_id)
    return Envelope[PostOut](success=True, data=PostOut.model_validate(post))


@router.post(
    "",
    response_model=Envelope[PostOut],
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
def create_post(
    body: PostCreate,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    store: Annotated[PostStore, Depends(get_post_store)],
) -> Envelope[PostOut]:
    """
    Create a post owned by the authenticated user.

    The author is always the caller; author fields in the body are ignored.
    """
    ensure_can(Action.CREATE, current_user)
    post = store.create(
        author_id=current_user.id,
        author_name=current_user.username,
        fields=body.model_dump(),
    )
    return Envelope[PostOut](
        success=True,
        message="Blog created successfully",
        data=PostOut.model_validate(post),
    )


@router.put("/{post_id}", response_model=Envelope[PostOut], response_model_exclude_unset=True)
def update_post(
    post_id: int,
    body: PostUpdate,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    store: Annotated[PostStore, Depends(get_post_store)],
) -> Envelope[PostOut]:
    """Update the fields present in the body. Owner or admin only."""
    post = store.find_by_id(post_id)
    ensure_can(Action.UPDATE, current_user, post.author_id)
    post = store.update(post_id, body.model_dump(exclude_unset=True))
    return Envelope[PostOut](
        success=True,
        message="Blog updated successfully",
        data=PostOut.model_validate(post),
    )


@router.delete("/{post_id}", response_model=Envelope, response_model_exclude_unset=True)
def delete_post(
    post_id: int,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    store: Annotated[PostStore, Depends(get_post_store)],
) -> Envelope:
    """Delete a post permanently. Owner or admin only."""
    post = store.find_by_id(post_id)
    ensure_can(Action.DELETE, current_user, post.author_id)
    store.delete(post_id)
    return Envelope(success=True, message="Blog deleted successfully")

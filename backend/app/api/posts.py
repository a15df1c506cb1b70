"""Blog posts API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_admin
from app.exceptions import DuplicateSlugError, PostNotFoundError
from app.models.user import User
from app.schemas.post import PostCreate, PostResponse, PostUpdate
from app.services import posts as post_service

router = APIRouter(prefix="/posts", tags=["posts"])


def _not_found(e: PostNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("", response_model=list[PostResponse])
def list_posts(db: Session = Depends(get_db)):
    """List all posts, newest first (no auth required)."""
    return post_service.list_posts(db)


@router.get("/slug/{slug}", response_model=PostResponse)
def get_post_by_slug(slug: str, db: Session = Depends(get_db)):
    """Get a post by its slug."""
    try:
        return post_service.get_post_for_slug(db, slug)
    except PostNotFoundError as e:
        raise _not_found(e)


@router.get("/{post_id}", response_model=PostResponse)
def get_post(post_id: int, db: Session = Depends(get_db)):
    """Get a post by id."""
    try:
        return post_service.get_post(db, post_id)
    except PostNotFoundError as e:
        raise _not_found(e)


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    post_data: PostCreate,
    response: Response,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Create a post."""
    post = post_service.create_post(
        db,
        title=post_data.title,
        content=post_data.content,
        slug=post_data.slug,
        hero_image=post_data.hero_image,
    )
    db.commit()
    db.refresh(post)

    response.headers["Location"] = f"/api/posts/slug/{post.slug}"
    return post


@router.patch("/{post_id}", response_model=PostResponse)
def update_post(
    post_id: int,
    post_data: PostUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Partially update a post."""
    try:
        post = post_service.update_post(db, post_id, post_data.model_dump(exclude_unset=True))
    except PostNotFoundError as e:
        raise _not_found(e)
    except DuplicateSlugError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    db.commit()
    db.refresh(post)
    return post


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    post_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Delete a post."""
    try:
        post_service.delete_post(db, post_id)
    except PostNotFoundError as e:
        raise _not_found(e)

    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)

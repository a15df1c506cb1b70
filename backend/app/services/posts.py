"""Blog post service."""
import re

from sqlalchemy.orm import Session

from app.exceptions import DuplicateSlugError, PostNotFoundError
from app.models.post import Post

FALLBACK_SLUG = "post"


def normalize_slug(raw: str | None) -> str:
    """Lower-case, keep [a-z0-9 -], turn whitespace runs into single dashes."""
    if raw is None:
        return FALLBACK_SLUG
    slug = raw.strip().lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-{2,}", "-", slug)
    return slug if slug.strip() else FALLBACK_SLUG


def ensure_unique_slug(db: Session, base: str) -> str:
    """Append -2, -3, ... to ``base`` until no post uses it."""
    candidate = base
    suffix = 2
    while get_post_by_slug(db, candidate) is not None:
        candidate = f"{base}-{suffix}"
        suffix += 1
    return candidate


def get_post_by_slug(db: Session, slug: str) -> Post | None:
    return db.query(Post).filter(Post.slug == slug).first()


def list_posts(db: Session) -> list[Post]:
    """All posts, newest first."""
    return db.query(Post).order_by(Post.created_at.desc(), Post.id.desc()).all()


def get_post(db: Session, post_id: int) -> Post:
    post = db.query(Post).filter(Post.id == post_id).first()
    if post is None:
        raise PostNotFoundError(f"Post not found: id={post_id}")
    return post


def get_post_for_slug(db: Session, slug: str) -> Post:
    post = get_post_by_slug(db, slug)
    if post is None:
        raise PostNotFoundError(f"Post not found: slug={slug}")
    return post


def create_post(
    db: Session,
    title: str,
    content: str,
    slug: str | None = None,
    hero_image: str | None = None,
) -> Post:
    """Create a post, deriving the slug from the title when none is given."""
    base_slug = normalize_slug(slug if slug and slug.strip() else title)
    post = Post(
        title=title,
        content=content,
        hero_image=hero_image,
        slug=ensure_unique_slug(db, base_slug),
    )
    db.add(post)
    db.flush()
    return post


def update_post(db: Session, post_id: int, changes: dict) -> Post:
    """Apply a partial update. Keys absent from ``changes`` are left as-is."""
    post = get_post(db, post_id)

    for field in ("title", "content", "hero_image"):
        if changes.get(field) is not None:
            setattr(post, field, changes[field])

    if changes.get("slug") is not None:
        normalized = normalize_slug(changes["slug"])
        if normalized != post.slug:
            existing = get_post_by_slug(db, normalized)
            if existing is not None and existing.id != post.id:
                raise DuplicateSlugError(f"Slug already in use: {normalized}")
            post.slug = normalized

    db.flush()
    return post


def delete_post(db: Session, post_id: int) -> None:
    deleted = db.query(Post).filter(Post.id == post_id).delete(synchronize_session=False)
    if not deleted:
        raise PostNotFoundError(f"Post not found: id={post_id}")

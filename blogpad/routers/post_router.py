import logging
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from blogpad.database import get_db
from blogpad.models import Post
from blogpad.schemas import PostInput, PostPayload, PostResponse, PostListResponse
from blogpad.dependencies import RequestContext, require_auth
from blogpad.errors import NotFoundError, ServerError, ValidationError

router = APIRouter(prefix="/api/v1/posts", tags=["posts"])
logger = logging.getLogger(__name__)


@router.get("", response_model=PostListResponse)
def list_posts(db: Session = Depends(get_db)):
    try:
        posts = db.query(Post).order_by(Post.created_at).all()
    except SQLAlchemyError:
        logger.exception("Error fetching posts")
        raise ServerError("Error fetching posts")

    return PostListResponse(data=[PostResponse.model_validate(p) for p in posts])


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    payload: PostPayload,
    context: RequestContext = Depends(require_auth),
    db: Session = Depends(get_db)
):
    """
    Create a post from any accepted payload shape.

    Both title and content (or body) are required; checked before
    anything is written.
    """
    fields = payload.normalize()
    if fields.missing_fields():
        raise ValidationError(
            "Missing required fields: title and content (or body)."
        )

    post = Post(title=fields.title, content=fields.content)
    try:
        db.add(post)
        db.commit()
        db.refresh(post)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating post for user %s", context.user_id)
        raise ServerError("Error creating post")

    logger.info("User %s created post %s", context.user_id, post.id)
    return post


@router.get("/{post_id}", response_model=PostResponse)
def get_post(post_id: str, db: Session = Depends(get_db)):
    return _get_post_or_404(db, post_id)


@router.put("/{post_id}", response_model=PostResponse)
def update_post(
    post_id: str,
    payload: PostPayload,
    context: RequestContext = Depends(require_auth),
    db: Session = Depends(get_db)
):
    """
    Apply the supplied fields to an existing post.

    Fields absent from the payload are left unchanged.
    """
    post = _get_post_or_404(db, post_id)
    _apply_updates(post, payload.normalize())

    try:
        db.commit()
        db.refresh(post)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error updating post %s", post_id)
        raise ServerError("Error updating post")

    return post


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    post_id: str,
    context: RequestContext = Depends(require_auth),
    db: Session = Depends(get_db)
):
    post = _get_post_or_404(db, post_id)

    try:
        db.delete(post)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error deleting post %s", post_id)
        raise ServerError("Error deleting post")

    logger.info("User %s deleted post %s", context.user_id, post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _get_post_or_404(db: Session, post_id: str) -> Post:
    try:
        post = db.get(Post, post_id)
    except SQLAlchemyError:
        logger.exception("Error fetching post %s", post_id)
        raise ServerError("Error fetching post")

    if post is None:
        raise NotFoundError("Post not found")
    return post


def _apply_updates(post: Post, fields: PostInput):
    if fields.title is not None:
        if not fields.title:
            raise ValidationError("title must not be empty")
        post.title = fields.title
    if fields.content is not None:
        if not fields.content:
            raise ValidationError("content must not be empty")
        post.content = fields.content

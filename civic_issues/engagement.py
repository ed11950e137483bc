"""Upvotes and comments."""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from .database import atomic
from .errors import Conflict, InvalidInput, NotFound
from .lifecycle import get_issue_or_404
from .models.models import Comment, Upvote

logger = logging.getLogger(__name__)


# -------------------------------------------------------
# Upvotes
# -------------------------------------------------------
def upvote_count(db: Session, issue_id: int) -> int:
    return db.query(Upvote).filter(Upvote.issue_id == issue_id).count()


def has_upvoted(db: Session, issue_id: int, user_id: Optional[int]) -> bool:
    if user_id is None:
        return False
    return db.get(Upvote, (issue_id, user_id)) is not None


def upvote_status(db: Session, issue_id: int, user_id: Optional[int] = None) -> dict:
    return {
        "count": upvote_count(db, issue_id),
        "has_upvoted": has_upvoted(db, issue_id, user_id),
    }


def upvote(db: Session, issue_id: int, user_id: int) -> dict:
    """Record one upvote for (issue, user) and return the fresh total."""
    get_issue_or_404(db, issue_id)

    if has_upvoted(db, issue_id, user_id):
        raise Conflict("You have already upvoted this issue")

    try:
        with atomic(db):
            db.add(Upvote(issue_id=issue_id, user_id=user_id))
    except IntegrityError:
        # Lost a race with a concurrent upvote from the same user
        raise Conflict("You have already upvoted this issue")

    logger.debug("User %s upvoted issue %s", user_id, issue_id)
    return {"count": upvote_count(db, issue_id), "has_upvoted": True}


def remove_upvote(db: Session, issue_id: int, user_id: int) -> dict:
    existing = db.get(Upvote, (issue_id, user_id))
    if existing is None:
        raise NotFound("Upvote not found")

    with atomic(db):
        db.delete(existing)

    logger.debug("User %s removed upvote on issue %s", user_id, issue_id)
    return {"count": upvote_count(db, issue_id), "has_upvoted": False}


# -------------------------------------------------------
# Comments
# -------------------------------------------------------
def list_comments(db: Session, issue_id: int) -> List[Comment]:
    get_issue_or_404(db, issue_id)
    return (
        db.query(Comment)
        .options(joinedload(Comment.user))
        .filter(Comment.issue_id == issue_id)
        .order_by(Comment.created_at.desc(), Comment.comment_id.desc())
        .all()
    )


def add_comment(db: Session, issue_id: int, user_id: int, content: Optional[str]) -> Comment:
    text = (content or "").strip()
    if not text:
        raise InvalidInput("Comment content is required")

    get_issue_or_404(db, issue_id)

    comment = Comment(issue_id=issue_id, user_id=user_id, content=text)
    with atomic(db):
        db.add(comment)
    db.refresh(comment)

    logger.debug("User %s commented on issue %s", user_id, issue_id)
    return comment

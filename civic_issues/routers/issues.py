from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from .. import engagement, lifecycle, listing
from ..access import SessionInfo, get_current_session, require_admin, require_session
from ..database import get_db
from ..errors import InvalidInput
from ..models.issue import (
    CommentCreateRequest,
    CommentResponse,
    DeleteResponse,
    IssueCreateRequest,
    IssueDetailResponse,
    IssuePatchRequest,
    IssueResponse,
    IssueSummaryResponse,
    UpvoteStatusResponse,
)

router = APIRouter(prefix="/issues", tags=["Issues"])


# -------------------------------------------------------
# LISTING
# -------------------------------------------------------
@router.get("", response_model=List[IssueSummaryResponse])
def list_issues(
    category: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    sort: str = "newest",
    page: int = 1,
    session: Optional[SessionInfo] = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Paginated issue listing; admins also see pending and rejected issues."""
    return listing.list_issues(
        db,
        session=session,
        category=category,
        status=status_filter,
        sort=sort,
        page=page,
    )


@router.get("/featured", response_model=List[IssueSummaryResponse])
def featured_issues(db: Session = Depends(get_db)):
    return listing.featured_issues(db)


@router.get("/mine", response_model=List[IssueSummaryResponse])
def my_issues(
    session: SessionInfo = Depends(require_session),
    db: Session = Depends(get_db),
):
    """Issues reported by the caller, in any status."""
    return listing.user_issues(db, session.user_id)


# -------------------------------------------------------
# CREATE / READ / UPDATE / DELETE
# -------------------------------------------------------
@router.post("", status_code=status.HTTP_201_CREATED, response_model=IssueResponse)
def create_issue(
    payload: IssueCreateRequest,
    session: SessionInfo = Depends(require_session),
    db: Session = Depends(get_db),
):
    return lifecycle.create_issue(db, payload.model_dump(), author_id=session.user_id)


@router.get("/{issue_id}", response_model=IssueDetailResponse)
def get_issue(issue_id: int, db: Session = Depends(get_db)):
    return listing.issue_detail(db, issue_id)


@router.patch("/{issue_id}", response_model=IssueResponse)
def update_issue(
    issue_id: int,
    payload: IssuePatchRequest,
    _: SessionInfo = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Change status and/or priority.

    A status change goes through the lifecycle and is audited; a bare
    priority change is applied without an audit record.
    """
    if payload.status:
        return lifecycle.transition(db, issue_id, payload.status, payload.priority, payload.note)
    if payload.priority:
        return lifecycle.reprioritize(db, issue_id, payload.priority)
    raise InvalidInput("Status or priority is required")


@router.delete("/{issue_id}", response_model=DeleteResponse)
def delete_issue(
    issue_id: int,
    session: SessionInfo = Depends(require_session),
    db: Session = Depends(get_db),
):
    lifecycle.delete_issue(db, issue_id, session)
    return DeleteResponse(success=True)


# -------------------------------------------------------
# UPVOTES
# -------------------------------------------------------
@router.get("/{issue_id}/upvotes", response_model=UpvoteStatusResponse)
def get_upvotes(
    issue_id: int,
    session: Optional[SessionInfo] = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    user_id = session.user_id if session else None
    return engagement.upvote_status(db, issue_id, user_id)


@router.post("/{issue_id}/upvotes", response_model=UpvoteStatusResponse)
def upvote_issue(
    issue_id: int,
    session: SessionInfo = Depends(require_session),
    db: Session = Depends(get_db),
):
    return engagement.upvote(db, issue_id, session.user_id)


@router.delete("/{issue_id}/upvotes", response_model=UpvoteStatusResponse)
def remove_upvote(
    issue_id: int,
    session: SessionInfo = Depends(require_session),
    db: Session = Depends(get_db),
):
    return engagement.remove_upvote(db, issue_id, session.user_id)


# -------------------------------------------------------
# COMMENTS
# -------------------------------------------------------
@router.get("/{issue_id}/comments", response_model=List[CommentResponse])
def list_comments(issue_id: int, db: Session = Depends(get_db)):
    return engagement.list_comments(db, issue_id)


@router.post("/{issue_id}/comments", status_code=status.HTTP_201_CREATED, response_model=CommentResponse)
def add_comment(
    issue_id: int,
    payload: CommentCreateRequest,
    session: SessionInfo = Depends(require_session),
    db: Session = Depends(get_db),
):
    return engagement.add_comment(db, issue_id, session.user_id, payload.content)

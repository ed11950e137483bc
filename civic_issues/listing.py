"""Read-side issue queries: listings, featured issues and detail views."""
from typing import List, Optional

from sqlalchemy import case
from sqlalchemy.orm import Session, joinedload, selectinload

from .access import SessionInfo
from .errors import InvalidInput, NotFound
from .lifecycle import normalize_status
from .models.models import Comment, Issue, IssueStatus, Priority, PUBLIC_STATUSES

PAGE_SIZE = 10
FEATURED_LIMIT = 6
SORT_OPTIONS = ("newest", "oldest", "priority", "status")

# Higher rank sorts first when ordering by priority
PRIORITY_RANK = case(
    {
        Priority.URGENT.value: 4,
        Priority.HIGH.value: 3,
        Priority.MEDIUM.value: 2,
        Priority.LOW.value: 1,
    },
    value=Issue.priority,
    else_=0,
)

# Lifecycle order when ordering by status
STATUS_RANK = case(
    {status.value: rank for rank, status in enumerate(IssueStatus)},
    value=Issue.status,
    else_=len(IssueStatus),
)


def _with_relations(query):
    return query.options(joinedload(Issue.reporter), selectinload(Issue.images))


def _order_by(sort: str):
    if sort == "oldest":
        return [Issue.created_at.asc(), Issue.issue_id.asc()]
    if sort == "priority":
        return [PRIORITY_RANK.desc(), Issue.created_at.desc(), Issue.issue_id.desc()]
    if sort == "status":
        return [STATUS_RANK.asc(), Issue.created_at.desc(), Issue.issue_id.desc()]
    return [Issue.created_at.desc(), Issue.issue_id.desc()]


def list_issues(
    db: Session,
    session: Optional[SessionInfo] = None,
    category: Optional[str] = None,
    status: Optional[str] = None,
    sort: str = "newest",
    page: int = 1,
) -> List[Issue]:
    """
    One page of issues.

    Anonymous callers and regular users only see approved, in-progress and
    resolved issues; admins see every status.
    """
    if sort not in SORT_OPTIONS:
        raise InvalidInput(f"Invalid sort option: {sort}")
    if page < 1:
        raise InvalidInput("Page must be 1 or greater")

    query = _with_relations(db.query(Issue))

    if session is None or not session.is_admin:
        query = query.filter(Issue.status.in_(PUBLIC_STATUSES))
    if status:
        query = query.filter(Issue.status == normalize_status(status).value)
    if category:
        query = query.filter(Issue.category == category)

    return (
        query.order_by(*_order_by(sort))
        .offset((page - 1) * PAGE_SIZE)
        .limit(PAGE_SIZE)
        .all()
    )


def featured_issues(db: Session) -> List[Issue]:
    return (
        _with_relations(db.query(Issue))
        .filter(Issue.status.in_((IssueStatus.APPROVED.value, IssueStatus.IN_PROGRESS.value)))
        .order_by(*_order_by("priority"))
        .limit(FEATURED_LIMIT)
        .all()
    )


def user_issues(db: Session, user_id: int) -> List[Issue]:
    return (
        _with_relations(db.query(Issue))
        .filter(Issue.reporter_id == user_id)
        .order_by(*_order_by("newest"))
        .all()
    )


def all_issues(db: Session) -> List[Issue]:
    return _with_relations(db.query(Issue)).order_by(*_order_by("newest")).all()


def issue_detail(db: Session, issue_id: int) -> Issue:
    issue = (
        _with_relations(db.query(Issue))
        .options(
            selectinload(Issue.comments).joinedload(Comment.user),
            selectinload(Issue.updates),
        )
        .filter(Issue.issue_id == issue_id)
        .first()
    )
    if issue is None:
        raise NotFound("Issue not found")
    return issue

"""
Issue lifecycle: creation, status/priority transitions and the audit trail.

Status moves along a fixed table of edges::

    PENDING     -> APPROVED, REJECTED
    APPROVED    -> IN_PROGRESS, REJECTED
    IN_PROGRESS -> RESOLVED
    REJECTED    -> APPROVED        (reconsideration)
    RESOLVED    -> (terminal)

Re-entering the current status is always allowed; it is how an admin changes
priority or adds a note without moving the issue. Every status-changing
operation appends exactly one ``StatusUpdate`` in the same transaction as
the change itself.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from .access import SessionInfo, require_owner_or_admin
from .database import atomic
from .errors import InvalidInput, InvalidTransition, NotFound
from .models.models import Image, Issue, IssueStatus, Priority, StatusUpdate

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "description", "location", "city", "state", "zip", "category")

INITIAL_NOTE = "Issue submitted and pending admin approval"

TRANSITIONS = {
    IssueStatus.PENDING: frozenset({IssueStatus.APPROVED, IssueStatus.REJECTED}),
    IssueStatus.APPROVED: frozenset({IssueStatus.IN_PROGRESS, IssueStatus.REJECTED}),
    IssueStatus.IN_PROGRESS: frozenset({IssueStatus.RESOLVED}),
    IssueStatus.REJECTED: frozenset({IssueStatus.APPROVED}),
    IssueStatus.RESOLVED: frozenset(),
}


# -------------------------------------------------------
# Normalisation
# -------------------------------------------------------
def normalize_status(value: Optional[str]) -> IssueStatus:
    """Parse a status case-insensitively; missing or unknown values are InvalidInput."""
    if value is None or not str(value).strip():
        raise InvalidInput("Status is required")
    try:
        return IssueStatus(str(value).strip().upper())
    except ValueError:
        raise InvalidInput(f"Invalid status: {value}")


def normalize_priority(value: Optional[str]) -> Priority:
    if value is None or not str(value).strip():
        raise InvalidInput("Priority is required")
    try:
        return Priority(str(value).strip().upper())
    except ValueError:
        raise InvalidInput(f"Invalid priority: {value}")


# -------------------------------------------------------
# Transition table
# -------------------------------------------------------
def can_transition(current: IssueStatus, target: IssueStatus) -> bool:
    return target == current or target in TRANSITIONS[current]


def validate_transition(current: IssueStatus, target: IssueStatus) -> None:
    if not can_transition(current, target):
        raise InvalidTransition(current.value, target.value)


def describe_transition(status: IssueStatus, priority: Optional[Priority] = None) -> str:
    """Default audit note, e.g. "Issue approved with high priority"."""
    text = f"Issue {status.value.lower().replace('_', ' ')}"
    if priority is not None:
        text += f" with {priority.value.lower()} priority"
    return text


# -------------------------------------------------------
# Operations
# -------------------------------------------------------
def get_issue_or_404(db: Session, issue_id: int) -> Issue:
    issue = db.query(Issue).filter(Issue.issue_id == issue_id).first()
    if issue is None:
        raise NotFound("Issue not found")
    return issue


def create_issue(db: Session, fields: dict, author_id: int) -> Issue:
    """
    Submit a new issue on behalf of ``author_id``.

    The issue always starts PENDING; priority defaults to MEDIUM. Images are
    attached from the pre-uploaded ``image_urls`` and the initial audit
    record is written alongside, all in one commit.
    """
    values = {}
    for name in REQUIRED_FIELDS:
        value = fields.get(name)
        if value is None or not str(value).strip():
            raise InvalidInput("Missing required fields")
        values[name] = str(value).strip()

    raw_priority = fields.get("priority")
    priority = normalize_priority(raw_priority) if raw_priority else Priority.MEDIUM

    issue = Issue(
        **values,
        priority=priority.value,
        status=IssueStatus.PENDING.value,
        reporter_id=author_id,
    )
    image_urls = [url for url in fields.get("image_urls") or [] if url]

    with atomic(db):
        db.add(issue)
        db.flush()
        db.add_all(Image(issue_id=issue.issue_id, url=url) for url in image_urls)
        db.add(StatusUpdate(issue_id=issue.issue_id, status=IssueStatus.PENDING.value, note=INITIAL_NOTE))
    db.refresh(issue)

    logger.info("Issue %s created by user %s", issue.issue_id, author_id)
    return issue


def transition(
    db: Session,
    issue_id: int,
    new_status: Optional[str],
    new_priority: Optional[str] = None,
    note: Optional[str] = None,
) -> Issue:
    """
    Move an issue to ``new_status`` (and optionally ``new_priority``).

    Appends one StatusUpdate carrying the resulting status and either the
    given note or a generated description. The caller's role is checked by
    the route guard before this runs.
    """
    status = normalize_status(new_status)
    priority = normalize_priority(new_priority) if new_priority else None

    issue = get_issue_or_404(db, issue_id)
    current = IssueStatus(issue.status)
    validate_transition(current, status)

    note = (note or "").strip() or describe_transition(status, priority)

    with atomic(db):
        issue.status = status.value
        if priority is not None:
            issue.priority = priority.value
        issue.updated_at = func.now()
        db.add(StatusUpdate(issue_id=issue.issue_id, status=status.value, note=note))
    db.refresh(issue)

    logger.info(
        "Issue %s moved %s -> %s (priority %s)",
        issue.issue_id,
        current.value,
        status.value,
        issue.priority,
    )
    return issue


def reprioritize(db: Session, issue_id: int, new_priority: Optional[str]) -> Issue:
    """Change priority only. Status is untouched so no audit record is written."""
    priority = normalize_priority(new_priority)
    issue = get_issue_or_404(db, issue_id)

    with atomic(db):
        issue.priority = priority.value
        issue.updated_at = func.now()
    db.refresh(issue)

    logger.info("Issue %s reprioritised to %s", issue.issue_id, priority.value)
    return issue


def delete_issue(db: Session, issue_id: int, session: SessionInfo) -> None:
    issue = get_issue_or_404(db, issue_id)
    require_owner_or_admin(session, issue)

    with atomic(db):
        db.delete(issue)

    logger.info("Issue %s deleted by user %s", issue_id, session.user_id)

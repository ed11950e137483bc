"""Aggregate counts behind the admin dashboard."""
from collections import Counter
from typing import Dict

from sqlalchemy import func
from sqlalchemy.orm import Session

from .models.models import Issue, IssueStatus, Priority, Upvote

# Priority colours for consistent chart display
PRIORITY_COLORS = {
    Priority.URGENT.value: "#ef4444",
    Priority.HIGH.value: "#f97316",
    Priority.MEDIUM.value: "#eab308",
    Priority.LOW.value: "#22c55e",
}


def overview(db: Session) -> dict:
    total_issues = db.query(func.count(Issue.issue_id)).scalar() or 0

    by_status: Dict[str, int] = dict(
        db.query(Issue.status, func.count(Issue.issue_id)).group_by(Issue.status).all()
    )
    by_priority = db.query(Issue.priority, func.count(Issue.issue_id)).group_by(Issue.priority).all()

    return {
        "total_issues": total_issues,
        "pending": by_status.get(IssueStatus.PENDING.value, 0),
        "approved": by_status.get(IssueStatus.APPROVED.value, 0),
        "in_progress": by_status.get(IssueStatus.IN_PROGRESS.value, 0),
        "resolved": by_status.get(IssueStatus.RESOLVED.value, 0),
        "rejected": by_status.get(IssueStatus.REJECTED.value, 0),
        "priority_distribution": [
            {"name": priority, "value": count, "color": PRIORITY_COLORS.get(priority)}
            for priority, count in by_priority
        ],
    }


def stats(db: Session) -> dict:
    category_distribution: Counter = Counter()
    priority_distribution: Counter = Counter()
    priority_votes: Counter = Counter()
    monthly_trends: Counter = Counter()

    vote_counts = dict(
        db.query(Upvote.issue_id, func.count(Upvote.user_id)).group_by(Upvote.issue_id).all()
    )

    for issue_id, category, priority, created_at in db.query(
        Issue.issue_id, Issue.category, Issue.priority, Issue.created_at
    ):
        category_distribution[category] += 1
        priority_distribution[priority] += 1
        priority_votes[priority] += vote_counts.get(issue_id, 0)
        if created_at is not None:
            monthly_trends[created_at.strftime("%b")] += 1

    return {
        "category_distribution": dict(category_distribution),
        "priority_votes": dict(priority_votes),
        "priority_distribution": dict(priority_distribution),
        "monthly_trends": dict(monthly_trends),
    }

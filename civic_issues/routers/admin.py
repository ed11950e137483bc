from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import lifecycle, listing, stats
from ..access import require_admin
from ..database import get_db
from ..models.issue import (
    AdminIssueDetailResponse,
    AdminIssueResponse,
    IssuePatchRequest,
    IssueResponse,
    OverviewResponse,
    StatsResponse,
)

# Every route here is admin-only
router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


# -------------------------------------------------------
# ISSUE TRIAGE
# -------------------------------------------------------
@router.get("/issues", response_model=List[AdminIssueResponse])
def list_all_issues(db: Session = Depends(get_db)):
    """Every issue regardless of status, newest first."""
    return listing.all_issues(db)


@router.get("/issues/{issue_id}", response_model=AdminIssueDetailResponse)
def get_issue(issue_id: int, db: Session = Depends(get_db)):
    return listing.issue_detail(db, issue_id)


@router.patch("/issues/{issue_id}", response_model=IssueResponse)
def transition_issue(issue_id: int, payload: IssuePatchRequest, db: Session = Depends(get_db)):
    """Move an issue through its lifecycle; status is required."""
    return lifecycle.transition(db, issue_id, payload.status, payload.priority, payload.note)


# -------------------------------------------------------
# DASHBOARD
# -------------------------------------------------------
@router.get("/overview", response_model=OverviewResponse)
def get_overview(db: Session = Depends(get_db)):
    return stats.overview(db)


@router.get("/stats", response_model=StatsResponse)
def get_stats(db: Session = Depends(get_db)):
    return stats.stats(db)

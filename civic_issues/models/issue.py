from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from .user import UserSummary


# -------- Requests --------
class IssueCreateRequest(BaseModel):
    # Required fields are checked by the lifecycle so a missing one is a 400
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    image_urls: List[str] = []


class IssuePatchRequest(BaseModel):
    status: Optional[str] = None
    priority: Optional[str] = None
    note: Optional[str] = None


class CommentCreateRequest(BaseModel):
    content: Optional[str] = None


# -------- Responses --------
class ImageResponse(BaseModel):
    image_id: int
    url: str

    model_config = ConfigDict(from_attributes=True)


class StatusUpdateResponse(BaseModel):
    update_id: int
    status: str
    note: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CommentResponse(BaseModel):
    comment_id: int
    issue_id: int
    content: str
    created_at: Optional[datetime] = None
    user: Optional[UserSummary] = None

    model_config = ConfigDict(from_attributes=True)


class IssueResponse(BaseModel):
    issue_id: int
    title: str
    description: str
    location: str
    city: str
    state: str
    zip: str
    category: str
    priority: str
    status: str
    reporter_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class IssueSummaryResponse(IssueResponse):
    reporter: Optional[UserSummary] = None
    images: List[ImageResponse] = []
    upvote_count: int = 0
    comment_count: int = 0


class IssueDetailResponse(IssueSummaryResponse):
    comments: List[CommentResponse] = []
    updates: List[StatusUpdateResponse] = []


class AdminIssueResponse(IssueSummaryResponse):
    reported_by: str


class AdminIssueDetailResponse(AdminIssueResponse):
    updates: List[StatusUpdateResponse] = []


class UpvoteStatusResponse(BaseModel):
    count: int
    has_upvoted: bool


class DeleteResponse(BaseModel):
    success: bool


class UploadResponse(BaseModel):
    urls: List[str]


class PriorityDistributionEntry(BaseModel):
    name: str
    value: int
    color: Optional[str] = None


class OverviewResponse(BaseModel):
    total_issues: int
    pending: int
    approved: int
    in_progress: int
    resolved: int
    rejected: int
    priority_distribution: List[PriorityDistributionEntry]


class StatsResponse(BaseModel):
    category_distribution: Dict[str, int]
    priority_votes: Dict[str, int]
    priority_distribution: Dict[str, int]
    monthly_trends: Dict[str, int]

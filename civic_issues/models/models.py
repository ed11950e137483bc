# models.py
from enum import Enum

from sqlalchemy import Column, Integer, String, Text, ForeignKey, TIMESTAMP, select
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, column_property
from ..database import Base
from .user import User  # noqa: F401  registers "users" before the foreign keys below


class IssueStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    REJECTED = "REJECTED"


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


# Statuses visible to the public listing
PUBLIC_STATUSES = (IssueStatus.APPROVED.value, IssueStatus.IN_PROGRESS.value, IssueStatus.RESOLVED.value)


class Issue(Base):
    __tablename__ = "issues"

    issue_id = Column(Integer, primary_key=True, index=True)
    reporter_id = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    zip = Column(String(20), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=IssueStatus.PENDING.value, index=True)
    priority = Column(String(20), nullable=False, default=Priority.MEDIUM.value)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    reporter = relationship("User", back_populates="issues")
    images = relationship("Image", back_populates="issue", cascade="all, delete-orphan")
    comments = relationship(
        "Comment",
        back_populates="issue",
        cascade="all, delete-orphan",
        order_by="[Comment.created_at.desc(), Comment.comment_id.desc()]",
    )
    upvotes = relationship("Upvote", back_populates="issue", cascade="all, delete-orphan")
    updates = relationship(
        "StatusUpdate",
        back_populates="issue",
        cascade="all, delete-orphan",
        order_by="[StatusUpdate.created_at.desc(), StatusUpdate.update_id.desc()]",
    )

    @property
    def reported_by(self) -> str:
        return self.reporter.name if self.reporter is not None else "Anonymous"


class Image(Base):
    __tablename__ = "images"

    image_id = Column(Integer, primary_key=True, index=True)
    issue_id = Column(Integer, ForeignKey("issues.issue_id", ondelete="CASCADE"), nullable=False)
    url = Column(String(1024), nullable=False)

    issue = relationship("Issue", back_populates="images")


class Comment(Base):
    __tablename__ = "comments"

    comment_id = Column(Integer, primary_key=True, index=True)
    issue_id = Column(Integer, ForeignKey("issues.issue_id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())

    issue = relationship("Issue", back_populates="comments")
    user = relationship("User", back_populates="comments")


class Upvote(Base):
    __tablename__ = "upvotes"

    # Composite key: one upvote per (issue, user)
    issue_id = Column(Integer, ForeignKey("issues.issue_id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(TIMESTAMP, server_default=func.now())

    issue = relationship("Issue", back_populates="upvotes")
    user = relationship("User", back_populates="upvotes")


class StatusUpdate(Base):
    """Append-only audit record of an issue's administrative handling."""

    __tablename__ = "updates"

    update_id = Column(Integer, primary_key=True, index=True)
    issue_id = Column(Integer, ForeignKey("issues.issue_id", ondelete="CASCADE"), nullable=False)
    status = Column(String(20), nullable=False)
    note = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())

    issue = relationship("Issue", back_populates="updates")


# Engagement counts, loaded with every Issue
Issue.upvote_count = column_property(
    select(func.count(Upvote.user_id))
    .where(Upvote.issue_id == Issue.issue_id)
    .correlate_except(Upvote)
    .scalar_subquery()
)
Issue.comment_count = column_property(
    select(func.count(Comment.comment_id))
    .where(Comment.issue_id == Issue.issue_id)
    .correlate_except(Comment)
    .scalar_subquery()
)

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func, select
from sqlalchemy.orm import relationship, column_property
from ..model_base import Base, utcnow
from ..issue.models import Issue

class IssueComment(Base):
    __tablename__ = "issue_comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    text = Column(String(500), nullable=False)
    issue_id = Column(Integer, ForeignKey('issues.id'), nullable=False, index=True)
    author_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    is_status_update = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Weak reference: the issue keeps no relationship back to its comments
    issue = relationship('Issue')
    author = relationship('User')

    def __repr__(self):
        return f"<IssueComment(id={self.id}, issue_id={self.issue_id}, is_status_update={self.is_status_update})>"

Issue.comments_count = column_property(
    select(func.count(IssueComment.id))
    .where(IssueComment.issue_id == Issue.id)
    .correlate_except(IssueComment)
    .scalar_subquery()
)

from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String, Text, event
from sqlalchemy.orm import relationship
from app.exceptions import StateError
from ..model_base import Base, utcnow

ISSUE_CATEGORIES = ('infrastructure', 'cleanliness', 'network', 'equipment', 'other')
ISSUE_STATUSES = ('pending', 'in-progress', 'resolved', 'closed')
ISSUE_PRIORITIES = ('low', 'medium', 'high', 'urgent')

INITIAL_STATUS = 'pending'
DEFAULT_PRIORITY = 'medium'

class Issue(Base):
    __tablename__ = "issues"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(100), nullable=False)
    description = Column(String(1000), nullable=False)
    category = Column(String(20), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=INITIAL_STATUS, index=True)
    priority = Column(String(20), nullable=False, default=DEFAULT_PRIORITY, index=True)

    location_building = Column(String(100), nullable=False, index=True)
    location_floor = Column(String(50), nullable=True)
    location_room = Column(String(50), nullable=True)
    location_description = Column(Text, nullable=True)

    images = Column(JSON, nullable=False, default=list)

    reported_by_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    assigned_to_id = Column(Integer, ForeignKey('users.id'), nullable=True)

    resolved_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    reported_by = relationship('User', foreign_keys=[reported_by_id], back_populates='reported_issues')
    assigned_to = relationship('User', foreign_keys=[assigned_to_id], back_populates='assigned_issues')
    status_history = relationship(
        'IssueStatusHistory',
        back_populates='issue',
        cascade='all, delete-orphan',
        order_by='IssueStatusHistory.id'
    )

    @property
    def location(self) -> dict:
        return {
            'building': self.location_building,
            'floor': self.location_floor,
            'room': self.location_room,
            'description': self.location_description,
        }

    @location.setter
    def location(self, value: dict) -> None:
        self.location_building = value.get('building')
        self.location_floor = value.get('floor')
        self.location_room = value.get('room')
        self.location_description = value.get('description')

    def __repr__(self):
        return f"<Issue(id={self.id}, title={self.title}, status={self.status})>"

    def __str__(self):
        return f'#{self.id} {self.title}'

class IssueStatusHistory(Base):
    __tablename__ = "issue_status_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    issue_id = Column(Integer, ForeignKey('issues.id', ondelete='CASCADE'), nullable=False, index=True)
    status = Column(String(20), nullable=False)
    changed_by_id = Column(Integer, ForeignKey('users.id'), nullable=True)
    changed_at = Column(DateTime, nullable=False, default=utcnow)
    note = Column(String(500), nullable=True)

    issue = relationship('Issue', back_populates='status_history')
    changed_by = relationship('User', foreign_keys=[changed_by_id])

    def __repr__(self):
        return f"<IssueStatusHistory(issue_id={self.issue_id}, status={self.status}, changed_at={self.changed_at})>"

@event.listens_for(IssueStatusHistory, 'before_update')
def reject_history_update(mapper, connection, target):
    raise StateError("Status history entries cannot be modified")

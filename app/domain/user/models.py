from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from ..model_base import Base, utcnow

USER_ROLES = ('student', 'admin')

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default='student')
    department = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    reported_issues = relationship('Issue', foreign_keys='Issue.reported_by_id', back_populates='reported_by')
    assigned_issues = relationship('Issue', foreign_keys='Issue.assigned_to_id', back_populates='assigned_to')

    @property
    def is_admin(self) -> bool:
        return self.role == 'admin'

    def __str__(self):
        return f'id - {self.id} email - {self.email}'

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Annotated, List, Literal, Optional
from app.domain.user.schemas import UserInfo, UserDetail, ChangedBy

Category = Literal['infrastructure', 'cleanliness', 'network', 'equipment', 'other']
Status = Literal['pending', 'in-progress', 'resolved', 'closed']
Priority = Literal['low', 'medium', 'high', 'urgent']

Title = Annotated[str, Field(max_length=100)]
Description = Annotated[str, Field(max_length=1000)]
Images = Annotated[List[str], Field(max_length=5)]


def _required_text(value: Optional[str], message: str) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError(message)
    return value

# LOCATION
class Location(BaseModel):
    building: str
    floor: Optional[str] = None
    room: Optional[str] = None
    description: Optional[str] = None

    @field_validator('building')
    @classmethod
    def validate_building(cls, value: str) -> str:
        return _required_text(value, 'Building location is required')

    class Config:
        from_attributes = True

# ISSUE
class CreateIssue(BaseModel):
    title: Title
    description: Description
    category: Category
    priority: Priority = 'medium'
    location: Location
    images: Images = []

    @field_validator('title')
    @classmethod
    def validate_title(cls, value: str) -> str:
        return _required_text(value, 'Title is required')

    @field_validator('description')
    @classmethod
    def validate_description(cls, value: str) -> str:
        return _required_text(value, 'Description is required')

class UpdateIssue(BaseModel):
    """
    Partial update. Only the fields present in the request body are applied,
    so `{"location": {"building": "B", "room": null}}` clears the room while
    an absent `location` key leaves it untouched.
    """
    title: Optional[Title] = None
    description: Optional[Description] = None
    category: Optional[Category] = None
    priority: Optional[Priority] = None
    location: Optional[Location] = None
    images: Optional[Images] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, value: Optional[str]) -> Optional[str]:
        return _required_text(value, 'Title is required')

    @field_validator('description')
    @classmethod
    def validate_description(cls, value: Optional[str]) -> Optional[str]:
        return _required_text(value, 'Description is required')

class ChangeStatus(BaseModel):
    status: Status
    note: Optional[Annotated[str, Field(max_length=500)]] = None

class IssueFilters(BaseModel):
    status: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    my: bool = False
    search: Optional[str] = None

# STATUS HISTORY
class StatusHistoryEntry(BaseModel):
    id: int
    status: Status
    changed_by: Optional[ChangedBy] = None
    changed_at: datetime
    note: Optional[str] = None

    class Config:
        from_attributes = True

class ResponseIssue(BaseModel):
    id: int
    title: str
    description: str
    category: Category
    status: Status
    priority: Priority
    location: Location
    images: List[str]
    reported_by: UserInfo
    assigned_to: Optional[UserInfo] = None
    status_history: List[StatusHistoryEntry]
    resolved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    comments_count: int = 0

    class Config:
        from_attributes = True

class ResponseIssueDetail(ResponseIssue):
    reported_by: UserDetail

class IssuePage(BaseModel):
    issues: List[ResponseIssue]
    page: int
    pages: int
    total: int

from pydantic import BaseModel
from typing import Dict, List
from app.domain.issue.schemas import ResponseIssue

class StatusCounts(BaseModel):
    pending: int = 0
    in_progress: int = 0
    resolved: int = 0
    closed: int = 0
    total: int = 0

class MonthlyTrendEntry(BaseModel):
    year: int
    month: int
    count: int

class DashboardStats(BaseModel):
    status_counts: StatusCounts
    category_stats: Dict[str, int]
    priority_stats: Dict[str, int]
    recent_issues: List[ResponseIssue]
    avg_resolution_time: int
    monthly_trend: List[MonthlyTrendEntry]

class TopReporter(BaseModel):
    id: int
    name: str
    email: str
    count: int

class LocationStat(BaseModel):
    building: str
    count: int

class AdminStats(BaseModel):
    total_users: int
    total_students: int
    urgent_issues: int
    top_reporters: List[TopReporter]
    location_stats: List[LocationStat]

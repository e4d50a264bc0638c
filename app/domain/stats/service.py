"""
Aggregate figures for the dashboards.

Non-admin requesters only ever see figures computed over the issues they
reported; admins see the whole collection.
"""
from sqlalchemy import desc, extract, func
from sqlalchemy.orm import Session, joinedload, selectinload
from app.domain.issue.models import Issue, IssueStatusHistory
from app.domain.issue.permissions import is_admin
from app.domain.model_base import utcnow
from app.domain.user import service as user_service
from app.domain.user.models import User
import calendar
import datetime
import math

RECENT_ISSUES_LIMIT = 5
TREND_MONTHS = 6
TOP_REPORTERS_LIMIT = 5
URGENT_PRIORITIES = ('high', 'urgent')
MILLISECONDS_PER_HOUR = 1000 * 60 * 60


def months_ago(moment: datetime.datetime, months: int) -> datetime.datetime:
    year_offset, month_index = divmod(moment.month - 1 - months, 12)
    year = moment.year + year_offset
    month = month_index + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)

def average_resolution_hours(periods: list[tuple[datetime.datetime, datetime.datetime]]) -> int:
    """Mean of (resolved_at - created_at) in whole hours, rounded half up. 0 when empty."""
    if not periods:
        return 0

    total_ms = sum((resolved_at - created_at).total_seconds() * 1000 for created_at, resolved_at in periods)
    return int(math.floor(total_ms / len(periods) / MILLISECONDS_PER_HOUR + 0.5))

def issue_scope(user: User) -> list:
    if is_admin(user):
        return []
    return [Issue.reported_by_id == user.id]

def count_by(db: Session, column, scope: list) -> dict[str, int]:
    rows = db.query(column, func.count(Issue.id)).filter(*scope).group_by(column).all()
    return {key: count for key, count in rows}

def get_dashboard_stats(db: Session, user: User) -> dict:
    scope = issue_scope(user)

    by_status = count_by(db, Issue.status, scope)
    status_counts = {
        'pending': by_status.get('pending', 0),
        'in_progress': by_status.get('in-progress', 0),
        'resolved': by_status.get('resolved', 0),
        'closed': by_status.get('closed', 0),
    }
    status_counts['total'] = sum(status_counts.values())

    recent_issues = db.query(Issue)\
        .options(
            joinedload(Issue.reported_by),
            joinedload(Issue.assigned_to),
            selectinload(Issue.status_history).joinedload(IssueStatusHistory.changed_by)
        )\
        .filter(*scope)\
        .order_by(Issue.created_at.desc(), Issue.id.desc())\
        .limit(RECENT_ISSUES_LIMIT)\
        .all()

    resolution_periods = db.query(Issue.created_at, Issue.resolved_at)\
        .filter(*scope)\
        .filter(Issue.resolved_at.isnot(None))\
        .all()

    # Monthly trend (last 6 months)
    year = extract('year', Issue.created_at)
    month = extract('month', Issue.created_at)
    trend_rows = db.query(year, month, func.count(Issue.id))\
        .filter(*scope)\
        .filter(Issue.created_at >= months_ago(utcnow(), TREND_MONTHS))\
        .group_by(year, month)\
        .order_by(year, month)\
        .all()

    return {
        'status_counts': status_counts,
        'category_stats': count_by(db, Issue.category, scope),
        'priority_stats': count_by(db, Issue.priority, scope),
        'recent_issues': recent_issues,
        'avg_resolution_time': average_resolution_hours([tuple(row) for row in resolution_periods]),
        'monthly_trend': [
            {'year': int(row_year), 'month': int(row_month), 'count': count}
            for row_year, row_month, count in trend_rows
        ]
    }

def get_admin_stats(db: Session) -> dict:
    urgent_issues = db.query(Issue)\
        .filter(Issue.status == 'pending')\
        .filter(Issue.priority.in_(URGENT_PRIORITIES))\
        .count()

    issue_count = func.count(Issue.id).label('count')

    top_reporters = db.query(User.id, User.name, User.email, issue_count)\
        .join(Issue, Issue.reported_by_id == User.id)\
        .group_by(User.id, User.name, User.email)\
        .order_by(desc('count'), User.id.asc())\
        .limit(TOP_REPORTERS_LIMIT)\
        .all()

    location_stats = db.query(Issue.location_building, issue_count)\
        .group_by(Issue.location_building)\
        .order_by(desc('count'), Issue.location_building.asc())\
        .all()

    return {
        'total_users': user_service.count_users(db),
        'total_students': user_service.count_users(db, role='student'),
        'urgent_issues': urgent_issues,
        'top_reporters': [
            {'id': user_id, 'name': name, 'email': email, 'count': count}
            for user_id, name, email, count in top_reporters
        ],
        'location_stats': [
            {'building': building, 'count': count}
            for building, count in location_stats
        ]
    }

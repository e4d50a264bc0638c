from sqlalchemy.orm import Session, joinedload, selectinload
from sqlalchemy.sql import or_
from typing import Optional, Union
from app.domain.comment import service as comment_service
from app.domain.comment.models import IssueComment
from app.domain.model_base import utcnow
from app.domain.user.models import User
from app.exceptions import NotFoundError, ValidationError
from . import models, schemas
from .permissions import check_admin, check_editable, check_owner_or_admin
import logging
import math

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('title', 'description', 'category', 'priority', 'location', 'images')
REQUIRED_FIELDS = ('title', 'description', 'category', 'priority', 'location')
FILTER_WILDCARD = 'all'


def _issue_query(db: Session):
    return db.query(models.Issue).options(
        joinedload(models.Issue.reported_by),
        joinedload(models.Issue.assigned_to),
        selectinload(models.Issue.status_history).joinedload(models.IssueStatusHistory.changed_by)
    )

def get_issue_by_id(db: Session, issue_id: int) -> Optional[models.Issue]:
    return _issue_query(db).filter(models.Issue.id == issue_id).first()

def get_issue_or_404(db: Session, issue_id: int) -> models.Issue:
    if not (db_issue := get_issue_by_id(db, issue_id)):
        raise NotFoundError("Issue not found")
    return db_issue

def create_issue(db: Session, issue: schemas.CreateIssue, user: User) -> models.Issue:
    issue_dict = issue.model_dump()

    db_issue = models.Issue(
        title=issue_dict['title'],
        description=issue_dict['description'],
        category=issue_dict['category'],
        priority=issue_dict.get('priority') or models.DEFAULT_PRIORITY,
        images=issue_dict.get('images') or [],
        status=models.INITIAL_STATUS,
        reported_by_id=user.id
    )
    db_issue.location = issue_dict['location']
    db_issue.status_history.append(
        models.IssueStatusHistory(
            status=models.INITIAL_STATUS,
            changed_by_id=user.id,
            changed_at=utcnow(),
            note='Issue reported'
        )
    )

    db.add(db_issue)
    db.commit()
    db.refresh(db_issue)

    logger.info(f"Issue {db_issue.id} reported by user {user.id}")
    return db_issue

def update_issue(
    db: Session,
    issue_id: int,
    changes: Union[schemas.UpdateIssue, dict],
    user: User
) -> models.Issue:
    db_issue = get_issue_or_404(db, issue_id)
    check_editable(db_issue, user)

    if isinstance(changes, schemas.UpdateIssue):
        changes = changes.model_dump(exclude_unset=True)

    for attribute, value in changes.items():
        if attribute not in EDITABLE_FIELDS:
            raise ValidationError(f"Field '{attribute}' cannot be edited")

        if value is None:
            if attribute in REQUIRED_FIELDS:
                raise ValidationError(f"Field '{attribute}' cannot be cleared")
            raise ValidationError(f"Field '{attribute}' must be a list")

        setattr(db_issue, attribute, value)

    db.commit()
    db.refresh(db_issue)
    return db_issue

def change_issue_status(
    db: Session,
    issue_id: int,
    new_status: str,
    user: User,
    note: Optional[str] = None
) -> models.Issue:
    check_admin(user)

    if new_status not in models.ISSUE_STATUSES:
        raise ValidationError("Invalid status")

    db_issue = get_issue_or_404(db, issue_id)

    note = (note or '').strip() or f'Status changed to {new_status}'
    now = utcnow()

    # Any status may follow any other; no transition graph is enforced.
    db_issue.status = new_status
    db_issue.status_history.append(
        models.IssueStatusHistory(
            status=new_status,
            changed_by_id=user.id,
            changed_at=now,
            note=note
        )
    )

    # resolved_at is kept when the issue later leaves "resolved"
    if new_status == 'resolved':
        db_issue.resolved_at = now

    db.add(comment_service.build_comment(
        issue_id=db_issue.id,
        author_id=user.id,
        text=note,
        is_status_update=True
    ))

    db.commit()
    db.refresh(db_issue)

    logger.info(f"Issue {db_issue.id} moved to '{new_status}' by user {user.id}")
    return db_issue

def delete_issue(db: Session, issue_id: int, user: User) -> None:
    db_issue = get_issue_or_404(db, issue_id)
    check_owner_or_admin(db_issue, user, 'delete')

    removed_comments = comment_service.delete_comments_by_issue_id(db, issue_id)
    db.delete(db_issue)
    db.commit()

    logger.info(f"Issue {issue_id} deleted by user {user.id} together with {removed_comments} comments")

def get_issue_detail(db: Session, issue_id: int) -> tuple[models.Issue, list[IssueComment]]:
    db_issue = get_issue_or_404(db, issue_id)
    comments = comment_service.get_comments_by_issue_id(db, issue_id)
    return db_issue, comments

def search_issues(
    db: Session,
    filters: schemas.IssueFilters,
    user: User,
    page: int = 1,
    limit: int = 10
) -> dict:
    if page < 1 or limit < 1:
        raise ValidationError("Page and limit must be positive")

    query = db.query(models.Issue)

    # Only the requester's own issues
    if filters.my:
        query = query.filter(models.Issue.reported_by_id == user.id)

    if filters.status and filters.status != FILTER_WILDCARD:
        query = query.filter(models.Issue.status == filters.status)

    if filters.category and filters.category != FILTER_WILDCARD:
        query = query.filter(models.Issue.category == filters.category)

    if filters.priority and filters.priority != FILTER_WILDCARD:
        query = query.filter(models.Issue.priority == filters.priority)

    # Search in title and description
    if filters.search:
        query = query.filter(
            or_(
                models.Issue.title.icontains(filters.search, autoescape=True),
                models.Issue.description.icontains(filters.search, autoescape=True)
            )
        )

    total = query.count()

    issues = query.options(
        joinedload(models.Issue.reported_by),
        joinedload(models.Issue.assigned_to),
        selectinload(models.Issue.status_history).joinedload(models.IssueStatusHistory.changed_by)
    )\
        .order_by(models.Issue.created_at.desc(), models.Issue.id.desc())\
        .offset((page - 1) * limit)\
        .limit(limit)\
        .all()

    return {
        'issues': issues,
        'page': page,
        'pages': math.ceil(total / limit),
        'total': total
    }

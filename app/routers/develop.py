from typing import Annotated
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from faker import Faker
from app.dependencies import get_db, require_admin, DefaultResponseModel
from app.domain.comment.models import IssueComment
from app.domain.issue.models import Issue, IssueStatusHistory, ISSUE_CATEGORIES, ISSUE_PRIORITIES, ISSUE_STATUSES, INITIAL_STATUS
from app.domain.model_base import Base, utcnow
from app.domain.user.models import User
from app.domain.user.service import hash_password
from app.exceptions import StoreError
import datetime
import logging
import random

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix='/develop',
    tags=['Develop']
)

BUILDINGS = ['Main Building', 'Library', 'Science Block', 'Sports Hall', 'Dormitory A', 'Dormitory B']
DEPARTMENTS = ['Computer Science', 'Physics', 'Mathematics', 'Biology', 'History']
SAMPLE_PASSWORD = 'password'


def build_sample_issue(fake: Faker, reporter: User, admin: User) -> Issue:
    created_at = utcnow() - datetime.timedelta(days=random.randint(0, 180), hours=random.randint(0, 23))
    issue_status = random.choice(ISSUE_STATUSES)

    issue = Issue(
        title=fake.sentence(nb_words=5)[:100],
        description=fake.text(max_nb_chars=400),
        category=random.choice(ISSUE_CATEGORIES),
        priority=random.choice(ISSUE_PRIORITIES),
        status=issue_status,
        images=[],
        reported_by_id=reporter.id,
        created_at=created_at
    )
    issue.location = {
        'building': random.choice(BUILDINGS),
        'floor': str(random.randint(0, 5)),
        'room': str(random.randint(100, 599))
    }
    issue.status_history.append(
        IssueStatusHistory(status=INITIAL_STATUS, changed_by_id=reporter.id, changed_at=created_at, note='Issue reported')
    )

    if issue_status != INITIAL_STATUS:
        changed_at = created_at + datetime.timedelta(hours=random.randint(1, 72))
        note = f'Status changed to {issue_status}'
        issue.status_history.append(
            IssueStatusHistory(status=issue_status, changed_by_id=admin.id, changed_at=changed_at, note=note)
        )
        if issue_status == 'resolved':
            issue.resolved_at = changed_at

    return issue


@router.post("/sample-data", status_code=status.HTTP_201_CREATED)
def seed_data(
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    user_amount: int = Query(10, ge=1, le=100, description="Must be between 1 and 100"),
    issue_amount: int = Query(20, ge=1, le=200, description="Must be between 1 and 200")
) -> DefaultResponseModel:
    fake = Faker()
    try:
        users = [
            User(
                name=fake.name(),
                email=fake.unique.email(),
                hashed_password=hash_password(SAMPLE_PASSWORD),
                role='student',
                department=random.choice(DEPARTMENTS)
            ) for _ in range(user_amount)
        ]

        db.add_all(users)
        db.commit()

        issues = [build_sample_issue(fake, random.choice(users), admin) for _ in range(issue_amount)]
        db.add_all(issues)
        db.flush()

        # Every status change leaves a system comment next to the history entry
        for issue in issues:
            for entry in issue.status_history[1:]:
                db.add(IssueComment(
                    issue_id=issue.id,
                    author_id=entry.changed_by_id,
                    text=entry.note,
                    is_status_update=True,
                    created_at=entry.changed_at
                ))

        db.commit()

    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Seeding sample data failed")
        raise StoreError(str(e)) from e

    logger.info(f"Seeded {user_amount} users and {issue_amount} issues")
    return {"message": "Sample data added successfully"}


@router.delete("/clear-database")
def clear_data(
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)]
) -> DefaultResponseModel:
    """Removes every issue and comment, and every account except the caller's."""
    try:
        for table in reversed(Base.metadata.sorted_tables):
            statement = table.delete()
            if table.name == User.__tablename__:
                statement = statement.where(table.c.id != admin.id)
            db.execute(statement)

        db.commit()

    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Clearing the database failed")
        raise StoreError(str(e)) from e

    return {"message": "All data cleared successfully"}

from sqlalchemy.orm import Session
from app.domain.comment.models import IssueComment
from app.domain.issue.models import Issue, IssueStatusHistory
from app.domain.model_base import utcnow
from app.domain.user.models import User
from app.domain.user.service import hash_password
import datetime

DEFAULT_PASSWORD = 'Password123'

def create_test_user(
    session: Session,
    email: str | None = None,
    name: str = 'adam',
    role: str = 'student',
    department: str | None = 'Computer Science'
) -> User:
    email_test = email or 'test@test.pl'
    count = 0

    while session.query(User).filter_by(email=email_test).first():
        count += 1
        email_test = f'test{count}@test.pl'

    user = User(
        name=name,
        email=email_test,
        hashed_password=hash_password(DEFAULT_PASSWORD),
        role=role,
        department=department
    )

    session.add(user)
    session.commit()
    session.refresh(user)

    return user

def create_test_issue(
    session: Session,
    user_id: int,
    title: str = 'Broken projector',
    description: str = 'The projector in the lecture hall does not turn on.',
    category: str = 'equipment',
    priority: str = 'medium',
    status: str = 'pending',
    building: str = 'Main Building',
    created_at: datetime.datetime | None = None,
    resolved_at: datetime.datetime | None = None
) -> Issue:
    created_at = created_at or utcnow()

    issue = Issue(
        title=title,
        description=description,
        category=category,
        priority=priority,
        status=status,
        images=[],
        reported_by_id=user_id,
        created_at=created_at,
        resolved_at=resolved_at
    )
    issue.location = {'building': building, 'floor': '1', 'room': '101'}
    issue.status_history.append(
        IssueStatusHistory(status='pending', changed_by_id=user_id, changed_at=created_at, note='Issue reported')
    )
    if status != 'pending':
        issue.status_history.append(
            IssueStatusHistory(status=status, changed_by_id=user_id, changed_at=created_at, note=f'Status changed to {status}')
        )

    session.add(issue)
    session.commit()
    session.refresh(issue)

    return issue

def create_test_comment(session: Session, issue_id: int, user_id: int, text: str = 'Same problem here') -> IssueComment:
    comment = IssueComment(text=text, issue_id=issue_id, author_id=user_id)

    session.add(comment)
    session.commit()
    session.refresh(comment)

    return comment

def issue_body(**overrides) -> dict:
    body = {
        'title': 'WiFi not working',
        'description': 'No connection on the second floor since Monday.',
        'category': 'network',
        'priority': 'high',
        'location': {'building': 'Library', 'floor': '2', 'room': '204'},
        'images': ['https://images.example.com/campus-issues/wifi.jpg']
    }
    body.update(overrides)
    return body

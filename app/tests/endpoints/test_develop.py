from fastapi.testclient import TestClient
from fastapi import status
from sqlalchemy.orm import Session
from app.domain.comment.models import IssueComment
from app.domain.issue.models import Issue
from app.domain.user.models import User
from ..utils import create_test_issue


def test_seed_sample_data(
    client: TestClient,
    session: Session,
    admin_headers: dict
):
    res = client.post('/api/develop/sample-data', params={'user_amount': 3, 'issue_amount': 8}, headers=admin_headers)

    assert res.status_code == status.HTTP_201_CREATED
    assert session.query(User).filter_by(role='student').count() == 3
    assert session.query(Issue).count() == 8

    for issue in session.query(Issue).all():
        assert issue.status_history[0].status == 'pending'
        assert issue.status_history[-1].status == issue.status
        assert issue.comments_count == len(issue.status_history) - 1
        assert (issue.resolved_at is not None) == (issue.status == 'resolved')

def test_seed_sample_data_admin_only(authorized_client: TestClient):
    res = authorized_client.post('/api/develop/sample-data')

    assert res.status_code == status.HTTP_403_FORBIDDEN

def test_clear_database_keeps_caller(
    client: TestClient,
    session: Session,
    create_user: User,
    create_admin: User,
    admin_headers: dict
):
    create_test_issue(session, create_user.id, status='resolved')

    res = client.delete('/api/develop/clear-database', headers=admin_headers)

    assert res.status_code == status.HTTP_200_OK
    session.expire_all()
    assert session.query(Issue).count() == 0
    assert session.query(IssueComment).count() == 0
    assert [user.id for user in session.query(User).all()] == [create_admin.id]

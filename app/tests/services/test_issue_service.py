from sqlalchemy.orm import Session
from app.domain.comment.models import IssueComment
from app.domain.issue import service
from app.domain.issue.models import Issue
from app.domain.issue.permissions import check_editable, check_owner_or_admin, is_admin
from app.domain.issue.schemas import CreateIssue, IssueFilters, UpdateIssue
from app.domain.user.models import User
from app.exceptions import AuthorizationError, NotFoundError, StateError, ValidationError
from ..utils import create_test_issue, create_test_user, issue_body
import pytest


def test_create_issue_seeds_history(session: Session, create_user: User):
    issue = service.create_issue(session, CreateIssue(**issue_body()), create_user)

    assert issue.status == 'pending'
    assert issue.location_building == 'Library'
    assert [entry.status for entry in issue.status_history] == ['pending']
    assert issue.status_history[0].changed_by_id == create_user.id
    assert issue.comments_count == 0

def test_update_issue_applies_only_present_fields(session: Session, create_user: User):
    issue = create_test_issue(session, create_user.id, priority='low')

    updated = service.update_issue(session, issue.id, UpdateIssue(description='Now smoking as well'), create_user)

    assert updated.description == 'Now smoking as well'
    assert updated.title == 'Broken projector'
    assert updated.priority == 'low'

def test_update_issue_rejects_non_editable_field(session: Session, create_user: User):
    issue = create_test_issue(session, create_user.id)

    with pytest.raises(ValidationError):
        service.update_issue(session, issue.id, {'status': 'resolved'}, create_user)

def test_change_status_adds_system_comment(session: Session, create_user: User, create_admin: User):
    issue = create_test_issue(session, create_user.id)

    changed = service.change_issue_status(session, issue.id, 'resolved', create_admin)

    assert changed.status == 'resolved'
    assert changed.resolved_at is not None
    assert changed.status_history[-1].note == 'Status changed to resolved'
    comment = session.query(IssueComment).filter_by(issue_id=issue.id).one()
    assert comment.is_status_update
    assert comment.author_id == create_admin.id

def test_change_status_checks_role_before_lookup(session: Session, create_user: User):
    with pytest.raises(AuthorizationError):
        service.change_issue_status(session, 404, 'resolved', create_user)

def test_change_status_rejects_unknown_status(session: Session, create_admin: User):
    with pytest.raises(ValidationError):
        service.change_issue_status(session, 404, 'archived', create_admin)

def test_change_status_unknown_issue(session: Session, create_admin: User):
    with pytest.raises(NotFoundError):
        service.change_issue_status(session, 404, 'closed', create_admin)

def test_status_history_is_append_only(session: Session, create_user: User):
    issue = create_test_issue(session, create_user.id)
    entry = issue.status_history[0]

    entry.note = 'Rewritten'
    with pytest.raises(StateError):
        session.commit()

    session.rollback()

def test_delete_issue_removes_history(session: Session, create_user: User):
    issue = create_test_issue(session, create_user.id, status='closed')
    issue_id = issue.id

    service.delete_issue(session, issue_id, create_user)

    assert session.query(Issue).filter_by(id=issue_id).count() == 0

def test_search_issues_empty_page(session: Session, create_user: User):
    create_test_issue(session, create_user.id)

    result = service.search_issues(session, IssueFilters(), create_user, page=3, limit=10)

    assert result['issues'] == []
    assert result['total'] == 1
    assert result['pages'] == 1

def test_search_issues_without_results(session: Session, create_user: User):
    result = service.search_issues(session, IssueFilters(search='nothing'), create_user)

    assert result == {'issues': [], 'page': 1, 'pages': 0, 'total': 0}

@pytest.mark.parametrize(
    'role, is_reporter, issue_status, expected',
    [
        ('student', True, 'pending', None),
        ('student', True, 'in-progress', StateError),
        ('student', False, 'pending', AuthorizationError),
        ('admin', False, 'resolved', None),
        ('admin', False, 'closed', None),
    ]
)
def test_check_editable(session: Session, role: str, is_reporter: bool, issue_status: str, expected):
    reporter = create_test_user(session)
    requester = reporter if is_reporter else create_test_user(session, role=role)
    issue = create_test_issue(session, reporter.id, status=issue_status)

    if expected is None:
        check_editable(issue, requester)
    else:
        with pytest.raises(expected):
            check_editable(issue, requester)

def test_check_owner_or_admin_message(session: Session, create_user: User):
    other = create_test_user(session)
    issue = create_test_issue(session, other.id)

    with pytest.raises(AuthorizationError) as error:
        check_owner_or_admin(issue, create_user, 'delete')

    assert error.value.message == 'Not authorized to delete this issue'

@pytest.mark.parametrize('role, expected', [('admin', True), ('student', False)])
def test_is_admin_follows_role(session: Session, role: str, expected: bool):
    user = create_test_user(session, role=role)

    assert user.is_admin is expected
    assert is_admin(user) is expected
    assert is_admin(None) is False

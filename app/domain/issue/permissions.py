"""
Who may do what with an issue.

Ownership is decided by `reported_by_id`, which never changes after an issue
is created. Admins pass every ownership check.
"""
from app.domain.user.models import User
from app.exceptions import AuthorizationError, StateError
from .models import Issue, INITIAL_STATUS


def is_admin(user: User) -> bool:
    return user is not None and user.is_admin

def is_owner(issue: Issue, user: User) -> bool:
    return user is not None and issue.reported_by_id == user.id

def is_owner_or_admin(issue: Issue, user: User) -> bool:
    return is_owner(issue, user) or is_admin(user)

def check_admin(user: User) -> None:
    if not is_admin(user):
        raise AuthorizationError("Not authorized as an admin")

def check_owner_or_admin(issue: Issue, user: User, action: str) -> None:
    if not is_owner_or_admin(issue, user):
        raise AuthorizationError(f"Not authorized to {action} this issue")

def check_editable(issue: Issue, user: User) -> None:
    """Owners may edit only while the issue is still pending."""
    check_owner_or_admin(issue, user, 'update')

    if not is_admin(user) and issue.status != INITIAL_STATUS:
        raise StateError("Cannot edit issue after it has been processed")

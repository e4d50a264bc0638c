from sqlalchemy.orm import Session
from app.domain.user.models import User
from app.domain.issue.models import Issue
from app.exceptions import NotFoundError, ValidationError
from . import models

MAX_COMMENT_LENGTH = 500

def build_comment(issue_id: int, author_id: int, text: str, is_status_update: bool = False) -> models.IssueComment:
    """Validated, unsaved comment. Callers decide when the session commits."""
    text = (text or '').strip()
    if not text:
        raise ValidationError("Comment text is required")
    if len(text) > MAX_COMMENT_LENGTH:
        raise ValidationError(f"Comment cannot exceed {MAX_COMMENT_LENGTH} characters")

    return models.IssueComment(
        text=text,
        issue_id=issue_id,
        author_id=author_id,
        is_status_update=is_status_update
    )

def create_comment(db: Session, issue_id: int, text: str, author: User) -> models.IssueComment:
    db_comment = build_comment(issue_id=issue_id, author_id=author.id, text=text)

    if db.query(Issue.id).filter(Issue.id == issue_id).first() is None:
        raise NotFoundError("Issue not found")

    db.add(db_comment)
    db.commit()
    db.refresh(db_comment)
    return db_comment

def get_comments_by_issue_id(db: Session, issue_id: int) -> list[models.IssueComment]:
    return db.query(models.IssueComment)\
             .filter(models.IssueComment.issue_id == issue_id)\
             .order_by(models.IssueComment.created_at.asc(), models.IssueComment.id.asc())\
             .all()

def delete_comments_by_issue_id(db: Session, issue_id: int) -> int:
    """Queues the removal of every comment of an issue; the caller commits."""
    return db.query(models.IssueComment)\
             .filter(models.IssueComment.issue_id == issue_id)\
             .delete(synchronize_session=False)

from sqladmin import ModelView
from .models import IssueComment

class IssueCommentView(ModelView, model=IssueComment):
    name = "Comment"
    can_edit = False
    column_list = [
        'id',
        'issue_id',
        'author_id',
        'text',
        'is_status_update',
        'created_at'
    ]

from sqladmin import ModelView
from .models import Issue, IssueStatusHistory

class IssueView(ModelView, model=Issue):
    # Issues are created and deleted through the API only
    can_create = False
    can_delete = False
    column_list = [
        Issue.id,
        Issue.title,
        Issue.category,
        Issue.status,
        Issue.priority,
        Issue.location_building,
        Issue.reported_by_id,
        Issue.assigned_to_id,
        Issue.created_at,
        Issue.resolved_at,
    ]
    column_searchable_list = [Issue.title, Issue.description]
    column_sortable_list = [Issue.id, Issue.created_at, Issue.priority]
    # Status is changed through the API too
    form_columns = [
        Issue.title,
        Issue.description,
        Issue.category,
        Issue.priority,
        Issue.location_building,
        Issue.location_floor,
        Issue.location_room,
        Issue.location_description,
        Issue.assigned_to,
    ]

class IssueStatusHistoryView(ModelView, model=IssueStatusHistory):
    name = "Status history"
    name_plural = "Status history"
    can_create = False
    can_edit = False
    can_delete = False
    column_list = [
        IssueStatusHistory.id,
        IssueStatusHistory.issue_id,
        IssueStatusHistory.status,
        IssueStatusHistory.changed_by_id,
        IssueStatusHistory.changed_at,
        IssueStatusHistory.note,
    ]

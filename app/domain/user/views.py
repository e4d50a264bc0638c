from sqladmin import ModelView
from .models import User

class UserView(ModelView, model=User):
    column_list = [
        'id', 'name', 'email', 'role', 'department', 'created_at'
    ]
    column_searchable_list = ['name', 'email']
    form_excluded_columns = ['hashed_password', 'reported_issues', 'assigned_issues']

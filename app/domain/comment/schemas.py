from pydantic import BaseModel, Field
from datetime import datetime
from typing import Annotated
from app.domain.user.schemas import CommentAuthor

class CreateComment(BaseModel):
    text: Annotated[str, Field(max_length=500)]

class ResponseComment(BaseModel):
    id: int
    text: str
    issue_id: int
    author: CommentAuthor
    is_status_update: bool
    created_at: datetime

    class Config:
        from_attributes = True

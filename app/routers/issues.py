from typing import Annotated, Optional
from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session
from app.dependencies import get_db, authenticate, require_admin, DefaultResponseModel, Responses, ErrorResponse
from app.domain.issue import service, schemas
from app.domain.comment import service as comment_service
from app.domain.comment.schemas import CreateComment, ResponseComment
from app.domain.user.models import User
from pydantic import BaseModel

router = APIRouter(
    prefix='/issues',
    tags=['Issues']
)

NOT_FOUND = ErrorResponse(status.HTTP_404_NOT_FOUND, 'Not Found', ('IssueNotFound', 'Issue not found'))


class IssueWithComments(BaseModel):
    issue: schemas.ResponseIssueDetail
    comments: list[ResponseComment]


@router.get('', status_code=status.HTTP_200_OK)
async def list_issues(
    user: Annotated[User, Depends(authenticate)],
    db: Annotated[Session, Depends(get_db)],
    status_filter: Annotated[Optional[str], Query(alias='status')] = None,
    category: Optional[str] = None,
    priority: Optional[str] = None,
    my: bool = False,
    search: Optional[str] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> schemas.IssuePage:
    filters = schemas.IssueFilters(
        status=status_filter,
        category=category,
        priority=priority,
        my=my,
        search=search
    )
    return service.search_issues(db=db, filters=filters, user=user, page=page, limit=limit)

@router.get(
    '/{issue_id}',
    status_code=status.HTTP_200_OK,
    responses=Responses(NOT_FOUND)
)
async def get_issue(
    issue_id: int,
    user: Annotated[User, Depends(authenticate)],
    db: Annotated[Session, Depends(get_db)]
) -> IssueWithComments:
    db_issue, comments = service.get_issue_detail(db=db, issue_id=issue_id)
    return {"issue": db_issue, "comments": comments}

@router.post(
    '',
    status_code=status.HTTP_201_CREATED,
    responses=Responses(
        ErrorResponse(
            status.HTTP_400_BAD_REQUEST, 'Bad Request',
            ('MissingTitle', 'title: Value error, Title is required'),
            ('InvalidCategory', "category: Input should be 'infrastructure', 'cleanliness', 'network', 'equipment' or 'other'"),
            ('MissingBuilding', 'location.building: Value error, Building location is required'),
        )
    )
)
async def create_issue(
    issue: Annotated[schemas.CreateIssue, Body()],
    user: Annotated[User, Depends(authenticate)],
    db: Annotated[Session, Depends(get_db)]
) -> schemas.ResponseIssue:
    return service.create_issue(db=db, issue=issue, user=user)

@router.put(
    '/{issue_id}',
    status_code=status.HTTP_200_OK,
    responses=Responses(
        ErrorResponse(
            status.HTTP_400_BAD_REQUEST, 'Bad Request',
            ('AlreadyProcessed', 'Cannot edit issue after it has been processed'),
        ),
        ErrorResponse(
            status.HTTP_403_FORBIDDEN, 'Forbidden',
            ('NotOwner', 'Not authorized to update this issue'),
        ),
        NOT_FOUND
    )
)
async def update_issue(
    issue_id: int,
    changes: Annotated[schemas.UpdateIssue, Body()],
    user: Annotated[User, Depends(authenticate)],
    db: Annotated[Session, Depends(get_db)]
) -> schemas.ResponseIssue:
    return service.update_issue(db=db, issue_id=issue_id, changes=changes, user=user)

@router.put(
    '/{issue_id}/status',
    status_code=status.HTTP_200_OK,
    responses=Responses(
        ErrorResponse(
            status.HTTP_400_BAD_REQUEST, 'Bad Request',
            ('InvalidStatus', "status: Input should be 'pending', 'in-progress', 'resolved' or 'closed'"),
        ),
        ErrorResponse(
            status.HTTP_403_FORBIDDEN, 'Forbidden',
            ('NotAdmin', 'Not authorized as an admin'),
        ),
        NOT_FOUND
    )
)
async def change_issue_status(
    issue_id: int,
    body: Annotated[schemas.ChangeStatus, Body()],
    user: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)]
) -> schemas.ResponseIssue:
    return service.change_issue_status(db=db, issue_id=issue_id, new_status=body.status, note=body.note, user=user)

@router.delete(
    '/{issue_id}',
    status_code=status.HTTP_200_OK,
    responses=Responses(
        ErrorResponse(
            status.HTTP_403_FORBIDDEN, 'Forbidden',
            ('NotOwner', 'Not authorized to delete this issue'),
        ),
        NOT_FOUND
    )
)
async def delete_issue(
    issue_id: int,
    user: Annotated[User, Depends(authenticate)],
    db: Annotated[Session, Depends(get_db)]
) -> DefaultResponseModel:
    service.delete_issue(db=db, issue_id=issue_id, user=user)
    return {"message": "Issue deleted successfully"}

@router.post(
    '/{issue_id}/comments',
    status_code=status.HTTP_201_CREATED,
    responses=Responses(
        ErrorResponse(
            status.HTTP_400_BAD_REQUEST, 'Bad Request',
            ('EmptyComment', 'Comment text is required'),
        ),
        NOT_FOUND
    )
)
async def add_comment(
    issue_id: int,
    comment: Annotated[CreateComment, Body()],
    user: Annotated[User, Depends(authenticate)],
    db: Annotated[Session, Depends(get_db)]
) -> ResponseComment:
    return comment_service.create_comment(db=db, issue_id=issue_id, text=comment.text, author=user)

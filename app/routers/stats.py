from typing import Annotated
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.dependencies import get_db, authenticate, require_admin, Responses, ErrorResponse
from app.domain.stats import service, schemas
from app.domain.user.models import User

router = APIRouter(
    prefix='/stats',
    tags=['Stats']
)

@router.get('', status_code=status.HTTP_200_OK)
async def get_dashboard_stats(
    user: Annotated[User, Depends(authenticate)],
    db: Annotated[Session, Depends(get_db)]
) -> schemas.DashboardStats:
    return service.get_dashboard_stats(db=db, user=user)

@router.get(
    '/admin',
    status_code=status.HTTP_200_OK,
    responses=Responses(
        ErrorResponse(status.HTTP_403_FORBIDDEN, 'Forbidden', ('NotAdmin', 'Not authorized as an admin'))
    )
)
async def get_admin_stats(
    user: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)]
) -> schemas.AdminStats:
    return service.get_admin_stats(db=db)

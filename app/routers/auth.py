from typing import Annotated
from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session
from app.dependencies import get_db, authenticate, create_access_token, Responses, ErrorResponse
from app.domain.user import service, schemas
from app.domain.user.models import User
from app.exceptions import AuthenticationError
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
    responses={500: {'description': 'Internal Server Error'}},
)

def with_token(user: User) -> dict:
    return {
        **schemas.UserOut.model_validate(user).model_dump(),
        "token": create_access_token(user.id)
    }

@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    responses=Responses(
        ErrorResponse(
            status.HTTP_400_BAD_REQUEST, 'Bad Request',
            ('UserExists', 'User already exists'),
            ('ShortPassword', 'password: String should have at least 6 characters'),
        )
    )
)
async def register_user(
    body: Annotated[schemas.UserCreate, Body()],
    db: Annotated[Session, Depends(get_db)]
) -> schemas.AuthenticatedUser:
    user = service.create_user(db, body)
    logger.info(f"Registered user {user.id}")
    return with_token(user)

@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    responses=Responses(
        ErrorResponse(
            status.HTTP_401_UNAUTHORIZED, 'Unauthorized',
            ('InvalidCredentials', 'Invalid email or password'),
        )
    )
)
async def login(
    body: Annotated[schemas.UserLogin, Body()],
    db: Annotated[Session, Depends(get_db)]
) -> schemas.AuthenticatedUser:
    if not (user := service.get_user_by_email_and_password(db, body.email, body.password)):
        raise AuthenticationError("Invalid email or password")

    return with_token(user)

@router.get("/me", status_code=status.HTTP_200_OK)
async def get_me(
    user: Annotated[User, Depends(authenticate)]
) -> schemas.UserOut:
    return user

@router.put("/profile", status_code=status.HTTP_200_OK)
async def update_profile(
    changes: Annotated[schemas.UserUpdate, Body()],
    user: Annotated[User, Depends(authenticate)],
    db: Annotated[Session, Depends(get_db)]
) -> schemas.AuthenticatedUser:
    user = service.update_user(db, user, changes)
    return with_token(user)

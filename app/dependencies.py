from typing import Annotated, Any, Literal, Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from pydantic import BaseModel
from app.database import SessionLocal
from app.config import (
    ACCESS_TOKEN_EXPIRE_TIME, SECRET_KEY, ENCRYPTION_ALGORITHM,
    CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET, UPLOAD_FOLDER, IMAGE_HOST_TIMEOUT
)
from app.domain.user.models import User
from app.domain.user.service import get_user
from app.domain.issue.permissions import check_admin
from app.domain.upload.service import ImageHostClient
from app.exceptions import AuthenticationError
import jwt
import datetime


class DefaultResponseModel(BaseModel):
    """Used for type hinting and creating examples"""
    message: str

class DefaultErrorModel(BaseModel):
    """Used for creating examples"""
    message: str

class Example(BaseModel):
    """
    Used for making example response in CreateExampleResponse function
    """
    name: str
    summary: str | None = None
    description: str | None = None
    value: dict | BaseModel

def CreateExampleResponse(
    *,
    code: int,
    description: str = '',
    content_type: Literal[
        'application/json',
        'text/plain',
        'multipart/form-data',
    ] = 'application/json',
    examples: list[Example] = [Example(name="Example", summary=None, description=None, value=DefaultResponseModel(message="example"))]
) -> dict[int, dict[str, Any]]:
    """
    Allows for quick docs building

    Pydantic models can be used as value for example

    Raises `AttributeError` when amount of examples is `<1`

    Usage:
    ```python
    @router.get(
        "/issues/{issue_id}",
        status_code=status.HTTP_200_OK,
        responses={
            **CreateExampleResponse(
                code=404,
                description="Not Found",
                content_type="application/json",
                examples=[
                    Example(name="IssueNotFound", summary="Issue not found", value=DefaultErrorModel(message="Issue not found")),
                ]
            ),
        }
    )
    ```
    """

    if len(examples) < 1:
        raise AttributeError(name="You need to provide atleast one example")

    return {
        code: {
            "description": description,
            "content": {
                content_type: {
                    "examples": {
                        example.name: {
                            "summary": example.summary,
                            "description": example.description,
                            "value": example.value.model_dump() if isinstance(example.value, BaseModel) else example.value
                        }
                        for example in examples
                    }
                }
            }
        }
    }

def Responses(
    *ExampleResponses: dict[int, dict[str, Any]]
) -> dict[int, dict[str, Any]]:
    """
    Merges the example responses for fastapi endpoint

    **Usage**:
    ```python
    @router.post(
        "/",
        status_code=200,
        responses=Responses(
            CreateExampleResponse(...),
            ...
        )
    )
    ```
    Responses sharing a status code and content type have their examples merged.
    """

    output = {}

    for example in ExampleResponses:
        for code, response in example.items():
            if code not in output:
                output[code] = response
                continue

            for content_type, content in response['content'].items():
                if content_type in output[code]['content']:
                    output[code]['content'][content_type]['examples'].update(content['examples'])
                else:
                    output[code]['content'][content_type] = content

    return output

def ErrorResponse(code: int, description: str, *messages: tuple[str, str]) -> dict[int, dict[str, Any]]:
    """Shorthand for documenting error bodies: each message is a `(name, text)` pair."""
    return CreateExampleResponse(
        code=code,
        description=description,
        content_type='application/json',
        examples=[
            Example(name=name, summary=text, value=DefaultErrorModel(message=text))
            for name, text in messages
        ]
    )


def get_db():
    """
    Function responsible for giving access to database
    """

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


class AccessToken(BaseModel):
    user_id: int
    token_type: str
    type: str
    exp: int

bearer_scheme = HTTPBearer(auto_error=False)

def create_token(
    item: dict[str, Any]
) -> str:
    item.update({"token_type": "Bearer"})
    return jwt.encode(item, SECRET_KEY, algorithm=ENCRYPTION_ALGORITHM)

def create_access_token(user_id: int, expires_minutes: int | None = None) -> str:
    expire = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(minutes=expires_minutes or ACCESS_TOKEN_EXPIRE_TIME)
    return create_token({
        "user_id": user_id,
        "type": "access",
        "exp": expire
    })

def decode_access_token(token: str) -> AccessToken:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ENCRYPTION_ALGORITHM])
        access_token = AccessToken(**payload)
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Not authorized, token expired")
    except (jwt.PyJWTError, ValueError):
        raise AuthenticationError("Not authorized, token failed")

    if access_token.type != "access":
        raise AuthenticationError("Not authorized, token failed")

    return access_token

def authenticate(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    db: Annotated[Session, Depends(get_db)]
) -> User:
    """Resolves the requester from the `Authorization: Bearer` header."""

    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authorized, no token")

    access_token = decode_access_token(credentials.credentials)

    if not (user := get_user(db, access_token.user_id)):
        raise AuthenticationError("Not authorized, user not found")

    return user

def require_admin(
    user: Annotated[User, Depends(authenticate)]
) -> User:
    check_admin(user)
    return user


def get_image_host() -> ImageHostClient:
    return ImageHostClient(
        cloud_name=CLOUDINARY_CLOUD_NAME,
        api_key=CLOUDINARY_API_KEY,
        api_secret=CLOUDINARY_API_SECRET,
        folder=UPLOAD_FOLDER,
        timeout=IMAGE_HOST_TIMEOUT
    )

from sqlalchemy.orm import Session
from passlib.context import CryptContext
from app.exceptions import ConflictError, ValidationError
from . import models, schemas
import logging

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=['bcrypt'], deprecated='auto')

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(password: str, hashed_password: str) -> bool:
    return pwd_context.verify(password, hashed_password)

def get_user(db: Session, user_id: int):
    return db.query(models.User).filter(models.User.id == user_id).first()

def get_user_by_email(db: Session, email: str):
    return db.query(models.User).filter(models.User.email == email.strip().lower()).first()

def get_user_by_email_and_password(db: Session, email: str, password: str):
    user = get_user_by_email(db, email)
    if user and verify_password(password, user.hashed_password):
        return user
    return None

def create_user(db: Session, user: schemas.UserCreate, role: str = 'student'):
    if role not in models.USER_ROLES:
        raise ValidationError(f"Invalid role '{role}'")

    if get_user_by_email(db, user.email):
        raise ConflictError("User already exists")

    db_user = models.User(
        name=user.name,
        email=user.email,
        hashed_password=hash_password(user.password),
        department=user.department,
        role=role
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user

def update_user(db: Session, db_user: models.User, changes: schemas.UserUpdate):
    changes = changes.model_dump(exclude_unset=True)

    for attribute, value in changes.items():
        if attribute == 'password':
            if value is None:
                raise ValidationError("Password cannot be empty")
            db_user.hashed_password = hash_password(value)
        elif attribute == 'name':
            if not value or not value.strip():
                raise ValidationError("Name is required")
            db_user.name = value.strip()
        else:
            setattr(db_user, attribute, value)

    db.commit()
    db.refresh(db_user)
    return db_user

def count_users(db: Session, role: str | None = None) -> int:
    query = db.query(models.User)
    if role:
        query = query.filter(models.User.role == role)
    return query.count()

def ensure_admin_account(db: Session, email: str, password: str, name: str = "Administrator"):
    """
    Creates the configured admin account, or promotes an existing user with
    that email to admin. The stored password of an existing user is kept.
    """
    if (user := get_user_by_email(db, email)):
        if user.role != 'admin':
            user.role = 'admin'
            db.commit()
            db.refresh(user)
            logger.info(f"Promoted {user.email} to admin")
        return user

    user = create_user(db, schemas.UserCreate(name=name, email=email, password=password), role='admin')
    logger.info(f"Created admin account {user.email}")
    return user

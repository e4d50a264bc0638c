from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.database import engine, SessionLocal
from app.config import (
    API_PREFIX, AUTO_MIGRATE, CORS_ORIGINS, IS_PRODUCTION,
    ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_NAME, validate_runtime_config
)
from app.domain.model_base import Base
from app.domain.user import models as user_models  # noqa: F401
from app.domain.issue import models as issue_models  # noqa: F401
from app.domain.comment import models as comment_models  # noqa: F401
from app.domain.user.service import ensure_admin_account
from app.exceptions import register_exception_handlers
from app.routers import auth, issues, stats, upload, develop, router
from app.internal.admin import create_admin
from contextlib import asynccontextmanager
from alembic.config import Config as AlembicConfig
from alembic import command
import logging

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("app")

# Functions
def apply_migrations(alembic_cfg):
    try:
        command.upgrade(alembic_cfg, "head")
        logger.info("Migrations applied successfully.")
    except Exception:
        logger.exception("Error during migrations")
        raise

def seed_admin_account() -> None:
    if not (ADMIN_EMAIL and ADMIN_PASSWORD):
        return

    with SessionLocal() as db:
        ensure_admin_account(db, email=ADMIN_EMAIL, password=ADMIN_PASSWORD, name=ADMIN_NAME)

@asynccontextmanager
async def lifespan(app: FastAPI):
    validate_runtime_config()

    if AUTO_MIGRATE:
        logger.info("Applying migrations...")
        apply_migrations(AlembicConfig("alembic.ini"))

    seed_admin_account()

    yield



def create_db() -> None:
    """
    Function responsible for creating the database.
    """

    # Create the database
    Base.metadata.create_all(bind=engine)



def get_application() -> FastAPI:
    """
    Function responsible for preparing the FastAPI application.
    """

    fapp = FastAPI(
        title="Campus Issues API",
        swagger_ui_parameters={
            "syntaxHighlight.theme": "obsidian"
        },
        lifespan=lifespan
    )

    if not AUTO_MIGRATE:
        create_db()


    fapp.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(fapp)

    fapp.include_router(router)
    fapp.include_router(auth.router, prefix=API_PREFIX)
    fapp.include_router(issues.router, prefix=API_PREFIX)
    fapp.include_router(stats.router, prefix=API_PREFIX)
    fapp.include_router(upload.router, prefix=API_PREFIX)

    if not IS_PRODUCTION:
        fapp.include_router(develop.router, prefix=API_PREFIX)


    return fapp



app = get_application()

admin = create_admin(app)

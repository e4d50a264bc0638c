from alembic import context
from app.config import DATABASE_URL
from app.database import engine
from app.domain.model_base import Base
from app.domain.user import models as user_models  # noqa: F401
from app.domain.issue import models as issue_models  # noqa: F401
from app.domain.comment import models as comment_models  # noqa: F401
import logging

# Alembic Config object
config = context.config

target_metadata = Base.metadata

# Custom logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger('alembic.custom')

def process_revision_directives(context, revision, directives):
    """
    Skips writing an autogenerated revision when no schema change was detected.
    """
    if getattr(config.cmd_opts, 'autogenerate', False):
        script = directives[0]
        if script.upgrade_ops.is_empty():
            logger.info("No changes detected, revision not generated.")
            directives[:] = []

def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        process_revision_directives=process_revision_directives
    )

    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connectable = engine

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == 'sqlite',
            process_revision_directives=process_revision_directives
        )

        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

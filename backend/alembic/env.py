"""Alembic environment for the containers and yards tables.

Run from backend/:
  alembic upgrade head
  alembic upgrade head --sql   # print the DDL instead of applying it

The URL always comes from settings.database_url_sync, never alembic.ini.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from drayboard.config import settings
from drayboard.database import Base
from drayboard.models import Container, Yard  # noqa: F401  register tables

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


if context.is_offline_mode():
    context.configure(
        url=settings.database_url_sync,
        target_metadata=Base.metadata,
        literal_binds=True,
    )
    with context.begin_transaction():
        context.run_migrations()
else:
    engine = create_engine(settings.database_url_sync, poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=Base.metadata)
        with context.begin_transaction():
            context.run_migrations()

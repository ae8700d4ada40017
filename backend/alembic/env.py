from logging.config import fileConfig
from alembic import context
from sqlalchemy import engine_from_config, pool
import os

from plansync.db import Base
from plansync.settings import get_settings
from plansync import models  # noqa: F401  # registers every table

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

def get_url():
    # DATABASE_URL wins; otherwise the same URL the service connects to.
    # Pass STORE_URL here to migrate a local record store file.
    return os.getenv("DATABASE_URL") or get_settings().DATABASE_URL

def configure_options(url: str) -> dict:
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        # SQLite cannot ALTER most things in place
        "render_as_batch": url.startswith("sqlite"),
    }

def run_migrations_offline():
    url = get_url()
    context.configure(url=url, literal_binds=True, dialect_opts={"paramstyle": "named"}, **configure_options(url))
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online():
    url = get_url()
    connectable = engine_from_config({"sqlalchemy.url": url}, prefix="sqlalchemy.", poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, **configure_options(url))
        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

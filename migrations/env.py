from logging.config import fileConfig
from sqlalchemy import create_engine
from alembic import context
import os
import sys

config = context.config


if config.config_file_name is not None:
    fileConfig(config.config_file_name)


sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from tablebook.extensions import db
import tablebook.models  # noqa: F401

target_metadata = db.metadata

def get_database_url():
    """Prefers DATABASE_URL, then the URL of the Flask app running `flask db`."""
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    try:
        from flask import current_app
        return current_app.config["SQLALCHEMY_DATABASE_URI"]
    except RuntimeError:
        raise RuntimeError("DATABASE_URL environment variable is not set") from None

def _configure_kwargs(url: str) -> dict:
    # SQLite cannot ALTER most constraints in place.
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": url.startswith("sqlite"),
    }

def run_migrations_offline() -> None:
    """Emit SQL for the migrations without a live connection."""
    url = get_database_url()
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_kwargs(url),
    )

    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online() -> None:
    url = get_database_url()
    connectable = create_engine(url)

    with connectable.connect() as connection:
        context.configure(connection=connection, **_configure_kwargs(url))

        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

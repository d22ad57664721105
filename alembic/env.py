import os
import sys
from logging.config import fileConfig

from sqlalchemy import create_engine
from alembic import context

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from outline_api.config import get_settings  # noqa: E402

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _database_url() -> str:
    """Build a SQLAlchemy URL from the same settings the API connects with."""
    settings = get_settings()
    if settings.database_url.strip():
        # Heroku uses postgres:// but SQLAlchemy requires postgresql://
        url = settings.database_url
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        return url

    db = settings.db_config
    return f"postgresql://{db['user']}:{db['password']}@{db['host']}:{db['port']}/{db['dbname']}"


config.set_main_option("sqlalchemy.url", _database_url())

# Migrations are raw SQL, so there is no metadata to autogenerate from.
target_metadata = None


def run_migrations_offline():
    url = config.get_main_option("sqlalchemy.url")
    context.configure(url=url, target_metadata=target_metadata, literal_binds=True, compare_type=True)

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = create_engine(config.get_main_option("sqlalchemy.url"), future=True)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

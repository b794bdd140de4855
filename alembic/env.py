import os
from logging.config import fileConfig

from sqlalchemy import engine_from_config
from sqlalchemy import pool

from alembic import context

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
# This line sets up loggers basically.
fileConfig(config.config_file_name)

# Database URI from environment takes precedence over alembic.ini
CYCLEJOURNAL_DB_URI = os.environ.get("CYCLEJOURNAL_DB_URI")
if CYCLEJOURNAL_DB_URI is not None:
    config.set_main_option("sqlalchemy.url", CYCLEJOURNAL_DB_URI)

from cyclejournal.journal.models import Base as JournalBase
from cyclejournal.preferences.models import Base as PreferencesBase

target_metadata = (
    JournalBase.metadata,
    PreferencesBase.metadata,
)

# include_name to prevent alembic from messing with non-Cyclejournal tables
from cyclejournal.journal.models import JournalEntry
from cyclejournal.preferences.models import Preference


def include_name(name, type_, parent_names):
    if type_ == "table":
        return name in {
            JournalEntry.__tablename__,
            Preference.__tablename__,
        }
    return True


def run_migrations_offline():
    """Run migrations in 'offline' mode.

    This configures the context with just a URL
    and not an Engine, though an Engine is acceptable
    here as well.  By skipping the Engine creation
    we don't even need a DBAPI to be available.

    Calls to context.execute() here emit the given string to the
    script output.

    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        version_table="cyclejournal_alembic_version",
        include_name=include_name,
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    """Run migrations in 'online' mode.

    In this scenario we need to create an Engine
    and associate a connection with the context.

    """
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            version_table="cyclejournal_alembic_version",
            include_name=include_name,
            render_as_batch=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

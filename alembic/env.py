from logging.config import fileConfig

from sqlalchemy import engine_from_config
from sqlalchemy import pool

from alembic import context

from hungr.config import Config
from hungr.database.database import validate_db_presence
from hungr.database.models import OrmBase

# Alembic Config object, gives access to the values of alembic.ini
config = context.config
config.set_main_option('sqlalchemy.url', Config().database_url.replace('%', '%%'))

# Logging setup from alembic.ini
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Create the database on first deployment
db_url = config.get_main_option('sqlalchemy.url')
validate_db_presence(db_url)

# Models metadata, for 'autogenerate' support
target_metadata = OrmBase.metadata


def run_migrations_offline() -> None:
    """Emit the migration SQL to the script output without connecting."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection, target_metadata=target_metadata, render_as_batch=connection.dialect.name == 'sqlite'
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

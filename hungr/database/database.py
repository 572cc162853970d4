from sqlalchemy import create_engine, Engine, event
from sqlalchemy.orm import sessionmaker

from sqlalchemy_utils import create_database, database_exists

from .models import OrmBase

def new_engine(url: str) -> Engine:
    if url.startswith('sqlite'):
        engine = create_engine(
            url,
            connect_args={'check_same_thread': False}
        )

        @event.listens_for(engine, 'connect')
        def enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute('PRAGMA foreign_keys=ON')
            cursor.close()

        return engine

    return create_engine(url, pool_pre_ping=True)

def new_sessionmaker(engine: Engine):
    return sessionmaker(engine, expire_on_commit=False)

def init_db(engine: Engine):
    # Tests only. Deployments are migrated with alembic
    OrmBase.metadata.create_all(engine)

def validate_db_presence(url: str):
    if not database_exists(url):
        create_database(url)

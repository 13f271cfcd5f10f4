from logging.config import fileConfig

from sqlalchemy import create_engine, pool
from alembic import context

from app.core.config import settings
from app.db.base import Base
from app.models.users import Admin, Influencer, User  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# users / influencers / admins
target_metadata = Base.metadata

# alembic.ini carries no URL; the app settings own it
DATABASE_URL = settings.SQLALCHEMY_DATABASE_URL


def _configure(**options):
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        **options
    )


def run_offline():
    _configure(
        url=DATABASE_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online():
    engine = create_engine(DATABASE_URL, poolclass=pool.NullPool)
    with engine.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_offline()
else:
    run_online()

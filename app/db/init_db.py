from app.db.base import Base
from app.db.session import engine
from app.core.logger import logger
from app.models import users  # noqa: F401  registers tables on Base


def init_db(bind=None):
    bind = bind or engine
    logger.info("DB INIT STARTED")
    Base.metadata.create_all(bind=bind)
    logger.info(f"DB TABLES READY | tables={sorted(Base.metadata.tables)}")

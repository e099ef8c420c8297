# create_tables.py
import logging

from sqlmodel import SQLModel
from app.database import engine
import app.models.registry  # noqa

logger = logging.getLogger(__name__)


def create_db_and_tables():
    SQLModel.metadata.create_all(engine)
    logger.info("Tables ready: %s", ", ".join(sorted(SQLModel.metadata.tables)))

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_db_and_tables()

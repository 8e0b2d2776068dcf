import logging
from tenacity import retry, stop_after_attempt, wait_fixed
from database.database import create_db_engine
from database.models import Base

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@retry(stop=stop_after_attempt(5), wait=wait_fixed(2))
def init_db(bind=None):
    """Create profile, connection, match and session tables if missing."""
    bind = bind or create_db_engine()
    logger.info("Initializing database...")
    try:
        Base.metadata.create_all(bind=bind)
        logger.info(f"Tables created or verified: {', '.join(sorted(Base.metadata.tables))}")
    except Exception as e:
        logger.error(f"Error initializing DB: {e}")
        raise


if __name__ == "__main__":
    init_db()

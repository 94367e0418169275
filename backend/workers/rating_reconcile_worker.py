import asyncio
import logging

from config.env import RATING_RECONCILE_INTERVAL_SECONDS
from database import get_db
from utils.ratings import reconcile_all_ratings

logger = logging.getLogger(__name__)


async def rating_reconcile_worker():
    db = get_db()

    while True:
        try:
            repaired = await reconcile_all_ratings(db)
            if repaired:
                logger.info("RATING_RECONCILE_DONE repaired=%s", repaired)
        except Exception:
            # only repair path for stale aggregates; a bad pass must not end the loop
            logger.exception("RATING_RECONCILE_ERROR")

        await asyncio.sleep(RATING_RECONCILE_INTERVAL_SECONDS)

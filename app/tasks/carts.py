# app/tasks/carts.py
from datetime import timedelta

from app.celery_worker import celery_app
from app.data.database import SessionLocal, utcnow
from app.repos.cart_repo import CartRepo
from app.utils.logging import get_logger
from app.utils.settings import ABANDONED_CART_DAYS

logger = get_logger(__name__)


@celery_app.task(name="app.tasks.carts.purge_abandoned_carts_task")
def purge_abandoned_carts_task(days: int = ABANDONED_CART_DAYS):
    """Deletes anonymous carts nobody touched for `days` days. User carts are kept."""
    logger.info("Purge abandoned carts task started")

    db = SessionLocal()
    repo = CartRepo(db)
    try:
        carts = repo.get_abandoned_anonymous_carts(utcnow() - timedelta(days=days))

        logger.info(f"Found {len(carts)} abandoned anonymous carts")

        for cart in carts:
            repo.delete_cart(cart)
        repo.commit()

        return len(carts)
    except Exception:
        repo.rollback()
        raise
    finally:
        db.close()

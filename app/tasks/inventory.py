# app/tasks/inventory.py
from app.celery_worker import celery_app
from app.data.database import SessionLocal
from app.repos.product_repo import ProductRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="app.tasks.inventory.report_low_stock_task")
def report_low_stock_task():
    logger.info("Low stock report task started")

    db = SessionLocal()
    try:
        rows = ProductRepo(db).get_low_stock()

        for product, category_name in rows:
            logger.warning(
                f"Low stock: product {product.id} ({product.name}, {category_name or 'uncategorized'}) "
                f"has {product.stock_quantity}, threshold {product.low_stock_threshold}"
            )

        logger.info(f"Found {len(rows)} products at or under their stock threshold")
        return [product.id for product, _ in rows]
    finally:
        db.close()

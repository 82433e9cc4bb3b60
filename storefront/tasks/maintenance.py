# storefront/tasks/maintenance.py
from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.services.blacklist_service import BlacklistService
from storefront.services.order_service import OrderService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="storefront.tasks.maintenance.prune_blacklist_task")
def prune_blacklist_task():
    logger.info("Prune blacklist task started")

    db = SessionLocal()
    try:
        return {"removed": BlacklistService(db).prune()}
    finally:
        db.close()


@celery_app.task(name="storefront.tasks.maintenance.reconcile_carts_task")
def reconcile_carts_task():
    logger.info("Reconcile carts task started")

    db = SessionLocal()
    try:
        result = OrderService(db).reconcile_converting_carts()
        logger.info(
            f"Reconciled carts: {result['deleted']} deleted, {result['reactivated']} reactivated"
        )
        return result
    finally:
        db.close()

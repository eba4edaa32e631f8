# backend/artsign/jobs/scheduler.py
"""
Tareas programadas con APScheduler.

Por ahora una sola tarea: marcar como vencidas (OVERDUE) las facturas
impagadas cuya fecha de vencimiento ya pasó. Se ejecuta cada
OVERDUE_CHECK_INTERVAL_MINUTES minutos mientras SCHEDULER_ENABLED esté activo.
"""

import logging
from typing import Callable

from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from sqlalchemy.ext.asyncio import AsyncSession

from artsign.core.config import Settings
from artsign.services.invoice_service import InvoiceService

logger = logging.getLogger(__name__)

OVERDUE_JOB_ID = "update_overdue_invoices"


async def run_overdue_invoices_job(
    invoice_service: InvoiceService,
    session_factory: Callable[[], AsyncSession],
) -> int:
    """Abre su propia sesión y actualiza el estado de las facturas vencidas."""
    try:
        async with session_factory() as db:
            count = await invoice_service.update_overdue_status(db)
    except Exception as e:
        logger.error(f"❌ Tarea '{OVERDUE_JOB_ID}' falló: {e}")
        return 0
    logger.info(f"⏰ Tarea '{OVERDUE_JOB_ID}' completada: {count} facturas vencidas")
    return count


def create_scheduler(
    settings: Settings,
    invoice_service: InvoiceService,
    session_factory: Callable[[], AsyncSession],
) -> AsyncIOScheduler:
    """Construye el planificador con sus tareas registradas (sin arrancarlo)."""
    scheduler = AsyncIOScheduler(
        jobstores={"default": MemoryJobStore()},
        executors={"default": AsyncIOExecutor()},
        job_defaults={
            "coalesce": True,  # Combina ejecuciones pendientes en una
            "max_instances": 1,
            "misfire_grace_time": 60,
        },
        timezone=settings.SCHEDULER_TIMEZONE,
    )
    scheduler.add_job(
        run_overdue_invoices_job,
        "interval",
        minutes=settings.OVERDUE_CHECK_INTERVAL_MINUTES,
        id=OVERDUE_JOB_ID,
        name="Mark overdue invoices",
        kwargs={"invoice_service": invoice_service, "session_factory": session_factory},
        replace_existing=True,
    )
    return scheduler


def start_scheduler(scheduler: AsyncIOScheduler) -> None:
    if not scheduler.running:
        scheduler.start()
        logger.info(f"🕒 Scheduler iniciado con {len(scheduler.get_jobs())} tareas")


def stop_scheduler(scheduler: AsyncIOScheduler) -> None:
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("🕒 Scheduler detenido")

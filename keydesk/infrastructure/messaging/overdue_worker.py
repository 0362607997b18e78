"""Worker periódico que barre reservaciones vencidas."""

import asyncio
import contextlib
import logging
from uuid import uuid4

from keydesk.application.use_cases.reservations import ReservationUseCase

logger = logging.getLogger(__name__)


class OverdueSweepWorker:
    """
    Ejecuta `process_overdue_reservations` cada `interval_seconds`.

    Características:
    - Polling configurable
    - Un fallo del barrido se registra y el worker sigue vivo
    - Graceful shutdown: `stop()` interrumpe la espera en curso
    """

    def __init__(
        self,
        reservation_use_case: ReservationUseCase,
        interval_seconds: float = 60.0,
        worker_id: str | None = None,
    ) -> None:
        self._use_case = reservation_use_case
        self._interval = interval_seconds
        self._worker_id = worker_id or f"sweeper-{uuid4().hex[:8]}"
        self._stop_event = asyncio.Event()
        self._running = False

    @property
    def worker_id(self) -> str:
        return self._worker_id

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Corre hasta que se llame a `stop()`."""
        self._running = True
        self._stop_event.clear()
        logger.info(f"OverdueSweepWorker {self._worker_id} iniciado")

        try:
            while not self._stop_event.is_set():
                await self.run_once()
                with contextlib.suppress(asyncio.TimeoutError):
                    await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
        finally:
            self._running = False
            logger.info(f"OverdueSweepWorker {self._worker_id} detenido")

    async def stop(self) -> None:
        """Detiene el worker de forma graceful."""
        self._stop_event.set()

    async def run_once(self) -> int:
        """
        Ejecuta un barrido.

        Returns:
            Número de reservaciones marcadas como vencidas (0 si el barrido falló).
        """
        try:
            processed = await self._use_case.process_overdue_reservations()
        except Exception as e:
            logger.exception(f"Error en barrido de vencidas: {e}")
            return 0
        if processed:
            logger.info(f"Barrido de vencidas: {processed} reservaciones procesadas")
        return processed

from keydesk.infrastructure.messaging.overdue_worker import OverdueSweepWorker

__all__ = ["OverdueSweepWorker"]

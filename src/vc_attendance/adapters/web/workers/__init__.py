"""Background workers for web adapter."""

from vc_attendance.adapters.web.workers.event_queue_worker import EventQueueWorker, QueuedEvent

__all__ = ["EventQueueWorker", "QueuedEvent"]

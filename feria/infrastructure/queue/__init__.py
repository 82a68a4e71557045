"""Terminal-side durable queue implementations."""

from feria.infrastructure.queue.json_file_queue import JsonFilePendingQueue

__all__ = ["JsonFilePendingQueue"]

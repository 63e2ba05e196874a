import logging
import time
import uuid

logger = logging.getLogger(__name__)


class LogContext:
    """Context manager for timing a spreadsheet operation and logging its outcome"""
    def __init__(self, operation_name: str, **kwargs):
        self.operation_name = operation_name
        self.start_time = None
        self.request_id = kwargs.pop('request_id', None) or str(uuid.uuid4())[:8]
        self.extra = kwargs
        self.failed = False

    def fail(self, message: str):
        """Mark the operation as failed without an exception (a failed Result)."""
        self.failed = True
        logger.warning(
            f"{self.operation_name} returned an error: {message}",
            extra={"request_id": self.request_id, **self.extra}
        )

    def __enter__(self):
        self.start_time = time.time()
        logger.debug(f"Starting {self.operation_name}", extra={"request_id": self.request_id, **self.extra})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.time() - self.start_time
        if exc_type:
            logger.error(
                f"Failed {self.operation_name} in {duration:.2f}s: {str(exc_val)}",
                extra={"request_id": self.request_id, "duration": duration, **self.extra},
                exc_info=(exc_type, exc_val, exc_tb)
            )
        elif not self.failed:
            logger.info(
                f"Completed {self.operation_name} in {duration:.2f}s",
                extra={"request_id": self.request_id, "duration": duration, **self.extra}
            )
        return False

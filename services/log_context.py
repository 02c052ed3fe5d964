import logging
import time
import uuid

logger = logging.getLogger(__name__)


class LogContext:
    """Context manager that logs start, completion and failure of an operation with its duration"""

    def __init__(self, operation_name: str, **kwargs):
        self.operation_name = operation_name
        self.start_time = None
        self.request_id = uuid.uuid4().hex[:8]
        self.extra = kwargs

    def __enter__(self):
        self.start_time = time.perf_counter()
        logger.info(f"[{self.request_id}] Starting {self.operation_name} {self._describe()}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.perf_counter() - self.start_time
        if exc_type:
            logger.warning(
                f"[{self.request_id}] Failed {self.operation_name} in {duration:.3f}s: {exc_val}"
            )
        else:
            logger.info(f"[{self.request_id}] Completed {self.operation_name} in {duration:.3f}s")
        return False

    def _describe(self) -> str:
        return " ".join(f"{key}={value!r}" for key, value in self.extra.items())

"""Custom log handlers for compviz logging."""

import logging
from threading import Lock


class BufferedHandler(logging.Handler):
    """Handler that buffers log records in memory.

    Useful for embedding applications that surface diagnostics in their own
    UI, and for asserting on emitted warnings in tests.
    """

    def __init__(self, max_size: int = 1000) -> None:
        """Initialize buffered handler.

        Args:
            max_size: Maximum number of records to buffer. Later records are
                dropped once the buffer is full.
        """
        super().__init__()
        self.max_size = max_size
        self._buffer: list[logging.LogRecord] = []
        self._lock = Lock()

    def emit(self, record: logging.LogRecord) -> None:
        with self._lock:
            if len(self._buffer) < self.max_size:
                self._buffer.append(record)

    def flush_to(self, handler: logging.Handler) -> None:
        """Flush buffered records to another handler.

        Args:
            handler: Handler to send buffered records to.
        """
        with self._lock:
            for record in self._buffer:
                handler.emit(record)
            self._buffer.clear()

    def get_records(self) -> list[logging.LogRecord]:
        """Get a copy of the buffered records."""
        with self._lock:
            return list(self._buffer)

    def get_messages(self) -> list[str]:
        """Get the formatted messages of the buffered records."""
        return [record.getMessage() for record in self.get_records()]

    def clear(self) -> None:
        """Clear the buffer."""
        with self._lock:
            self._buffer.clear()

"""Concurrent fan-out of per-object operations with aggregated failure reporting."""

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

from s3_client.exceptions import DownloadingFilesFailedError, OperationCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransferEngine:
    """
    Runs one unit of work per object key and joins all of them.

    Without max_workers every key gets its own thread, so a directory with N
    objects runs N transfers at once. Setting max_workers bounds the pool; the
    result contract stays the same.
    """

    def __init__(self, max_workers: int | None = None):
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be positive")
        self._max_workers = max_workers

    def transfer_batch(
        self,
        path: str,
        keys: Sequence[str],
        operation: Callable[[str], T],
        cancel: threading.Event | None = None,
        discard: Callable[[T], None] | None = None,
    ) -> list[T]:
        """
        Applies operation to every key concurrently.

        Every unit runs to completion before anything is reported; one failure
        does not stop its siblings. Successful results are discarded when any
        unit fails.

        Args:
            path: The queried prefix, used for error context.
            keys: Fully materialized object keys.
            operation: Per-key operation returning a result or raising.
            cancel: Optional event; units that start after it is set fail with
                OperationCancelledError.
            discard: Optional cleanup applied to each successful result that
                is dropped because the batch failed.

        Returns:
            The per-key results in completion order.

        Raises:
            DownloadingFilesFailedError: If at least one unit failed. Its errors
                attribute holds every per-key error.
        """
        keys = list(keys)
        if not keys:
            return []

        results: list[T] = []
        errors: list[Exception] = []
        lock = threading.Lock()

        def run(key: str) -> None:
            try:
                if cancel is not None and cancel.is_set():
                    raise OperationCancelledError(key)
                result = operation(key)
            except Exception as e:
                with lock:
                    errors.append(e)
                return
            with lock:
                results.append(result)

        workers = self._max_workers or len(keys)
        with ThreadPoolExecutor(
            max_workers=min(workers, len(keys)), thread_name_prefix="s3-transfer"
        ) as executor:
            for key in keys:
                executor.submit(run, key)

        if errors:
            logger.error(
                "Batch transfer failed",
                extra={"path": path, "keys": len(keys), "failed": len(errors)},
            )
            if discard is not None:
                for result in results:
                    discard(result)
            raise DownloadingFilesFailedError(path, errors)

        logger.info("Batch transfer completed", extra={"path": path, "keys": len(keys)})
        return results

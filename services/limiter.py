import logging
from concurrent.futures import ThreadPoolExecutor

from .core import MAX_CONCURRENCY

logger = logging.getLogger(__name__)


class ConcurrencyLimiter:
    """Admission gate over a fixed-size worker pool.

    At most `max_concurrency` calls run at once; the rest wait in the pool's
    FIFO work queue. There is no timeout: a hung call keeps its slot.
    """

    def __init__(self, max_concurrency: int = MAX_CONCURRENCY):
        self.max_concurrency = max_concurrency
        self._executor = ThreadPoolExecutor(max_workers=max_concurrency, thread_name_prefix='detail')

    def submit(self, fn, *args, **kwargs):
        return self._executor.submit(fn, *args, **kwargs)

    def map_settled(self, fn, items) -> list:
        """Run fn over items; return results in submission order.
        A call that raises yields None instead of aborting the batch.
        """
        items = list(items)
        futures = [self._executor.submit(fn, item) for item in items]
        results = []
        for item, f in zip(items, futures):
            try:
                results.append(f.result())
            except Exception:
                logger.exception('Limited call failed for %r', item)
                results.append(None)
        return results

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

# core/threads.py
import asyncio
import logging

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal

from shrthnder.app.errors import ShorthandError

logger = logging.getLogger(__name__)


class AsyncWorkerSignals(QObject):
    done = Signal(object)
    failed = Signal(str)


class AsyncWorker(QRunnable):
    """
    Runs one coroutine on a pool thread so the UI keeps painting while a
    request is in flight. coro_factory is called on the worker thread.
    """

    def __init__(self, coro_factory):
        super().__init__()
        self.coro_factory = coro_factory
        self.signals = AsyncWorkerSignals()

    def run(self):
        try:
            result = asyncio.run(self.coro_factory())
        except ShorthandError as e:
            self.signals.failed.emit(str(e))
            return
        except Exception as e:
            logger.exception("Background task crashed")
            self.signals.failed.emit(f"{type(e).__name__}: {e}")
            return
        self.signals.done.emit(result)


class Workers:
    pool = QThreadPool.globalInstance()

    @classmethod
    def submit(cls, coro_factory, on_done=None, on_failed=None) -> AsyncWorker:
        worker = AsyncWorker(coro_factory)
        if on_done is not None:
            worker.signals.done.connect(on_done)
        if on_failed is not None:
            worker.signals.failed.connect(on_failed)
        cls.pool.start(worker)
        return worker

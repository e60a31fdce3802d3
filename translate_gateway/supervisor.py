"""
Process supervisor.

Routes every uncaught error to one place, whatever its origin:

- main thread: sys.excepthook
- worker threads: threading.excepthook
- asyncio: the running loop's exception handler (unretrieved task errors)

Policy: log at CRITICAL with the traceback, mark the supervisor failed and
request a graceful shutdown (SIGTERM to ourselves, which uvicorn turns
into a clean stop). main() exits with status 1 when `failed` is set.
An uncaught error on the main thread is already ending the process, so
it is only logged.
"""
from typing import Callable, Optional
import asyncio
import logging
import os
import signal
import sys
import threading


class ProcessSupervisor:
    """Uniform log-and-terminate handling of uncaught errors."""

    def __init__(self, terminate: Optional[Callable[[], None]] = None):
        self.logger = logging.getLogger(__name__)
        self.failed = False
        self._terminate = terminate or self._send_sigterm
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._previous_excepthook = None
        self._previous_threading_excepthook = None
        self._installed = False

    def install(self, logger: Optional[logging.Logger] = None, loop: Optional[asyncio.AbstractEventLoop] = None):
        if self._installed:
            return
        if logger is not None:
            self.logger = logger

        self._previous_excepthook = sys.excepthook
        sys.excepthook = self._excepthook

        self._previous_threading_excepthook = threading.excepthook
        threading.excepthook = self._threading_excepthook

        if loop is not None:
            self._loop = loop
            loop.set_exception_handler(self._loop_exception_handler)

        self._installed = True

    def uninstall(self):
        if not self._installed:
            return

        sys.excepthook = self._previous_excepthook
        threading.excepthook = self._previous_threading_excepthook
        if self._loop is not None and not self._loop.is_closed():
            self._loop.set_exception_handler(None)
        self._loop = None
        self._installed = False

    def handle_fatal(self, exc: BaseException, origin: str, terminate: bool = True):
        self.logger.critical(f"Uncaught exception in {origin}: {exc!r}", exc_info=exc)
        if self.failed:
            return
        self.failed = True
        if terminate:
            self.logger.critical("Shutting down after uncaught exception")
            self._terminate()

    def _excepthook(self, exc_type, exc, tb):
        if issubclass(exc_type, KeyboardInterrupt):
            self._previous_excepthook(exc_type, exc, tb)
            return
        self.handle_fatal(exc, "main thread", terminate=False)

    def _threading_excepthook(self, args):
        if args.exc_type is SystemExit or args.exc_value is None:
            return
        name = args.thread.name if args.thread is not None else "unknown"
        self.handle_fatal(args.exc_value, f"thread {name}")

    def _loop_exception_handler(self, loop, context):
        exc = context.get("exception")
        if exc is None:
            self.logger.error(f"Event loop error: {context.get('message', 'unknown')}")
            return
        self.handle_fatal(exc, "event loop")

    @staticmethod
    def _send_sigterm():
        os.kill(os.getpid(), signal.SIGTERM)

import time
from threading import Event, Thread
from typing import Callable

from datafile_manager.impl.util import log


class RepeatingTask:
    """
    Runs a callback on a fixed schedule from one dedicated worker thread.

    Every invocation runs on that same thread, one after another, so the task itself never lets two
    invocations overlap: an invocation that overruns the interval only delays the next one. This is
    the primary guarantee behind non-overlapping datafile polls. ``DatafileRefresher.poll`` also
    takes a non-blocking lock, which covers the remaining case of a poll called directly (for example
    from a test) while the worker thread is in the middle of one.
    """

    def __init__(self, label, interval: float, initial_delay: float, callable: Callable):
        """
        Creates the task, but does not start the worker thread yet.

        :param label: prefix for the worker thread's name
        :param interval: time in seconds from the start of one invocation to the start of the next
        :param initial_delay: time in seconds to wait before the first invocation
        :param callable: the function to execute repeatedly
        """
        self._interval = interval
        self._initial_delay = initial_delay
        self._action = callable
        self._stopping = Event()
        self._worker = Thread(target=self._run, name=f"{label}.repeating", daemon=True)

    def start(self):
        self._worker.start()

    def stop(self):
        """
        Tells the worker thread to stop after the current invocation, if any. A stopped task cannot
        be restarted.
        """
        self._stopping.set()

    @property
    def stopped(self) -> bool:
        return self._stopping.is_set()

    def _run(self):
        if self._initial_delay > 0 and self._stopping.wait(self._initial_delay):
            return
        while not self._stopping.is_set():
            started = time.monotonic()
            self._invoke()
            remaining = self._interval - (time.monotonic() - started)
            if remaining > 0:
                self._stopping.wait(remaining)

    def _invoke(self):
        try:
            self._action()
        except Exception as e:
            log.exception("Unexpected exception on worker thread: %s" % e)

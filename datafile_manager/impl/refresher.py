"""
Periodic datafile refresh: polls the datafile, and whenever it changes builds a new evaluation
engine and swaps it in.
"""

from enum import Enum
from threading import Event, Lock
from typing import Any, Optional

from datafile_manager.config import Config
from datafile_manager.impl.change_detector import has_changed
from datafile_manager.impl.engine import ActiveEngine, close_engine
from datafile_manager.impl.repeating_task import RepeatingTask
from datafile_manager.impl.util import (NetworkError,
                                        UnsuccessfulResponseError,
                                        http_error_message,
                                        is_http_error_recoverable, log)
from datafile_manager.interfaces import DatafileRequester


class RefresherState(Enum):
    UNINITIALIZED = 'UNINITIALIZED'
    """
    No datafile has been accepted yet. Evaluations are answered by the placeholder engine.
    """

    READY = 'READY'
    """
    The active engine was built from the most recently accepted datafile.
    """


class DatafileRefresher:
    def __init__(self, config: Config, requester: DatafileRequester, active: ActiveEngine, ready: Optional[Event] = None):
        self._config = config
        self._requester = requester
        self._active = active
        self._ready = ready if ready is not None else Event()
        self._state = RefresherState.UNINITIALIZED
        self._last_accepted = None  # type: Optional[Any]
        self._poll_lock = Lock()
        self._swap_lock = Lock()
        self._task = RepeatingTask("datafile_manager.refresher", config.poll_interval, 0, self.poll)

    @property
    def state(self) -> RefresherState:
        return self._state

    @property
    def ready(self) -> Event:
        return self._ready

    @property
    def last_accepted(self) -> Optional[Any]:
        return self._last_accepted

    def start(self):
        log.info("MANAGER: Starting datafile polling with request interval: " + str(self._config.poll_interval))
        self._task.start()

    def stop(self):
        """
        Stops polling. Once this returns, no further engine will be swapped in, even by a poll that
        is still in progress.
        """
        with self._swap_lock:
            if self._task.stopped:
                return
            log.info("MANAGER: Stopping datafile polling")
            self._task.stop()

    def initialized(self) -> bool:
        return self._state is RefresherState.READY

    def is_polling(self) -> bool:
        return self._poll_lock.locked()

    def poll(self) -> bool:
        """
        Runs one refresh cycle. If another cycle is still in progress, returns immediately.

        :return: True if a new engine was swapped in
        """
        if not self._poll_lock.acquire(blocking=False):
            log.debug("MANAGER: Previous datafile poll still in progress; skipping this one")
            return False
        try:
            return self._poll()
        finally:
            self._poll_lock.release()

    def _poll(self) -> bool:
        try:
            candidate = self._requester.get_datafile()
        except UnsuccessfulResponseError as e:
            message = http_error_message(e.status, "datafile request")
            if is_http_error_recoverable(e.status):
                log.warning(message)
            else:
                log.error(message)
            return False
        except NetworkError as e:
            log.warning("MANAGER: Datafile request failed - will retry: %s" % e)
            return False
        except Exception as e:
            log.exception("MANAGER: Unexpected error while requesting datafile: %s" % e)
            return False

        if candidate is None:
            log.warning("MANAGER: Received an empty datafile; ignoring it")
            return False

        if not has_changed(self._last_accepted, candidate):
            return False

        log.debug("MANAGER: Received an updated datafile. Re-initializing client with latest feature flag configuration")
        try:
            engine = self._config.engine_factory(candidate, log, self._config.engine_options)
        except Exception as e:
            log.exception("MANAGER: Could not create evaluation engine from updated datafile: %s" % e)
            return False

        with self._swap_lock:
            if self._task.stopped:
                close_engine(engine)
                return False
            replaced = self._active.engine
            updated = self._active.set(engine, candidate)
            self._last_accepted = candidate
        close_engine(replaced)
        if self._state is RefresherState.UNINITIALIZED:
            log.info("MANAGER: Datafile manager initialized ok")
            self._state = RefresherState.READY
            self._ready.set()
        log.debug("MANAGER: Now serving evaluations from engine version %d" % updated.version)
        return True

"""
This submodule contains the manager class that application code evaluates feature flags through.
"""

import threading
import traceback
import uuid
from typing import Any, Mapping, Optional

from datafile_manager.config import Config
from datafile_manager.impl.datafile_requester import DatafileRequesterImpl
from datafile_manager.impl.engine import (ActiveEngine, EngineVersion,
                                          close_engine)
from datafile_manager.impl.refresher import DatafileRefresher, RefresherState
from datafile_manager.impl.util import log
from datafile_manager.interfaces import DatafileRequester
from datafile_manager.version import VERSION


class DatafileManager:
    """Keeps an evaluation engine in sync with a remotely hosted datafile.

    On construction the manager starts polling the datafile on a background thread. Each time the
    datafile changes, a new evaluation engine is built from it and atomically replaces the previous
    one; :func:`is_feature_enabled` always uses whichever engine is current when it is called.

    Until the first datafile has been retrieved, evaluations log an error and return False.

    Applications can share a single manager through :func:`datafile_manager.configure()` and
    :func:`datafile_manager.get_client()`, or construct and hold instances directly. Manager
    instances are thread-safe.
    """

    def __init__(self, config: Config, start_wait: float = 0):
        """Constructs a new DatafileManager and starts polling.

        :param config: the manager configuration
        :param start_wait: the number of seconds to block waiting for the first datafile; by default
          the constructor returns immediately
        """
        self._config = config
        self._closed = False
        log.setLevel(config.log_level)
        log.debug("MANAGER: Loading datafile manager " + VERSION)

        self._requester = self._make_requester(config)
        self._active = ActiveEngine()
        self._ready = threading.Event()
        self._refresher = DatafileRefresher(config, self._requester, self._active, self._ready)
        self._refresher.start()

        if start_wait > 0:
            log.info("MANAGER: Waiting up to " + str(start_wait) + " seconds for the first datafile...")
            if self.wait_for_initialization(start_wait):
                log.info("MANAGER: Started datafile manager: OK")
            else:
                log.warning("MANAGER: Initialization timeout exceeded or an error occurred. Feature flags may not yet be available.")

    def _make_requester(self, config: Config) -> DatafileRequester:
        if config.datafile_requester_class:
            log.info("MANAGER: Using user-specified datafile requester: " + str(config.datafile_requester_class))
            return config.datafile_requester_class(config)
        return DatafileRequesterImpl(config)

    def get_sdk_key(self) -> str:
        """Returns the configured SDK key."""
        return self._config.sdk_key

    @property
    def config(self) -> Config:
        return self._config

    @property
    def state(self) -> RefresherState:
        return self._refresher.state

    @property
    def active_engine(self) -> EngineVersion:
        """The engine currently serving evaluations, with its version and the datafile it was built from."""
        return self._active.get()

    def is_initialized(self) -> bool:
        """Returns true if at least one datafile has been retrieved and turned into an evaluation engine."""
        return self._refresher.initialized()

    def wait_for_initialization(self, timeout: Optional[float] = None) -> bool:
        """Blocks until the first datafile has been accepted, or the timeout expires.

        :param timeout: maximum number of seconds to wait; None waits indefinitely
        :return: True if the manager is initialized
        """
        return self._ready.wait(timeout)

    def is_feature_enabled(self, feature_key: str, user_id: Optional[str] = None, attributes: Optional[Mapping[str, Any]] = None) -> bool:
        """Determines whether a feature is enabled for a user.

        If ``user_id`` is omitted or empty, a random identifier is generated for this call only. Because
        it changes on every call, the result is not stable for percentage rollouts or experiments; always
        pass a real user id in production.

        This method never raises. If the manager is not initialized yet, or the engine fails, the error is
        logged and False is returned.

        :param feature_key: the key of the feature flag
        :param user_id: the user to evaluate the flag for
        :param attributes: optional user attributes passed to the evaluation engine
        :return: True if the feature is enabled for the user
        """
        if not user_id:
            user_id = uuid.uuid4().hex
            log.info("MANAGER: No user_id passed to is_feature_enabled. Using random string '%s' instead." % user_id)

        # read the reference once; a swap during the evaluation does not affect this call
        engine = self._active.engine
        try:
            return bool(engine.is_feature_enabled(feature_key, user_id, attributes))
        except Exception as e:
            log.error("Unexpected error while evaluating feature flag \"%s\": %s" % (feature_key, repr(e)))
            log.debug(traceback.format_exc())
            return False

    def close(self):
        """Stops polling, closes the current evaluation engine and releases network connections.

        Do not attempt to use the manager after calling this method.
        """
        if self._closed:
            return
        self._closed = True
        log.info("MANAGER: Closing datafile manager..")
        self._refresher.stop()
        close_engine(self._active.engine)
        close = getattr(self._requester, 'close', None)
        if callable(close):
            close()

    # These magic methods allow a manager object to be automatically cleaned up by the "with" scope operator
    def __enter__(self):
        return self

    def __exit__(self, type, value, traceback):
        self.close()


__all__ = ['DatafileManager', 'Config']

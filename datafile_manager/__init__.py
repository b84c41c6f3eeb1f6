"""
The datafile_manager module contains the most common top-level entry points for the library.
"""

import threading

from datafile_manager.impl.util import (ComparisonError, ConfigurationError,
                                        DatafileManagerError, NetworkError,
                                        UninitializedError,
                                        UnsuccessfulResponseError, log)
from datafile_manager.version import VERSION

from .client import DatafileManager
from .config import Config, HTTPConfig

__version__ = VERSION

__manager = None
__lock = threading.Lock()


def configure(config: Config) -> DatafileManager:
    """Creates the shared datafile manager from the given configuration and starts it polling.

    If a shared manager already exists, it is replaced: the new manager is created first, then the
    old one is closed so that its polling thread stops. Code holding on to the old instance will
    keep seeing its last engine, so prefer calling :func:`get_client()` where you evaluate flags.

    :param config: the manager configuration
    :return: the new shared manager
    """
    global __manager
    global __lock
    new_manager = DatafileManager(config)
    with __lock:
        old_manager = __manager
        __manager = new_manager
    if old_manager:
        log.info("MANAGER: Reconfiguring datafile manager " + VERSION + " with new config")
        old_manager.close()
    return new_manager


def get_client() -> DatafileManager:
    """Returns the shared datafile manager created by :func:`configure()`.

    Every call returns the same instance until :func:`configure()` is called again.

    If you need several managers with different configurations, construct
    :class:`datafile_manager.client.DatafileManager` directly instead.

    :raises ConfigurationError: if :func:`configure()` has not been called
    """
    global __manager
    global __lock
    with __lock:
        if __manager is None:
            raise ConfigurationError("configure was not called")
        return __manager


# for testing only
def _reset_client():
    global __manager
    global __lock
    with __lock:
        m = __manager
        __manager = None
    if m:
        m.close()


__all__ = [
    'ComparisonError',
    'Config',
    'ConfigurationError',
    'DatafileManager',
    'DatafileManagerError',
    'HTTPConfig',
    'NetworkError',
    'UninitializedError',
    'UnsuccessfulResponseError',
    'configure',
    'get_client',
    'client',
    'config',
    'integrations',
    'interfaces',
]

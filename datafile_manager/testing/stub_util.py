from threading import Event

from datafile_manager.interfaces import DatafileRequester, EvaluationEngine
from datafile_manager.testing.sync_util import wait_until


class MockDatafileRequester(DatafileRequester):
    """
    Returns ``datafile`` (or raises ``exception``) on each request. Setting ``block`` makes requests
    wait until ``unblock()`` is called.
    """

    def __init__(self, *_):
        self.datafile = None
        self.exception = None
        self.request_count = 0
        self.block = False
        self.entered = Event()
        self._release = Event()
        self.closed = False

    def unblock(self):
        self._release.set()

    def get_datafile(self):
        self.request_count += 1
        if self.block:
            self.entered.set()
            self._release.wait(5)
        if self.exception is not None:
            raise self.exception
        return self.datafile

    def close(self):
        self.closed = True


class StubEngine(EvaluationEngine):
    """
    Answers from the ``flags`` map of the datafile it was built from, regardless of user.
    """

    def __init__(self, datafile, logger, options):
        self.datafile = datafile
        self.logger = logger
        self.options = options
        self.calls = []
        self.closed = False

    def is_feature_enabled(self, feature_key, user_id, attributes=None):
        self.calls.append((feature_key, user_id, attributes))
        return bool(self.datafile.get('flags', {}).get(feature_key, False))

    def close(self):
        self.closed = True


class FailingEngine(EvaluationEngine):
    def is_feature_enabled(self, feature_key, user_id, attributes=None):
        raise Exception("engine failure")

    def close(self):
        raise Exception("close failure")


class EngineRecorder:
    """An engine factory that builds :class:`StubEngine` instances and remembers them."""

    def __init__(self):
        self.engines = []
        self.exception = None

    def __call__(self, datafile, logger, options):
        if self.exception is not None:
            raise self.exception
        engine = StubEngine(datafile, logger, options)
        self.engines.append(engine)
        return engine


def poll_once(refresher):
    """Runs one refresh cycle directly, after any cycle already running on the timer thread has finished."""
    wait_until(lambda: not refresher.is_polling(), timeout=2)
    return refresher.poll()

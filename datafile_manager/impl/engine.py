from collections import namedtuple
from typing import Any, Mapping, Optional

from datafile_manager.impl.util import UninitializedError, log
from datafile_manager.interfaces import EvaluationEngine

EngineVersion = namedtuple('EngineVersion', ['engine', 'version', 'datafile'])


class UninitializedEngine(EvaluationEngine):
    """
    Stands in for a real engine until the first datafile has been accepted. Every evaluation logs
    an error and answers False.
    """

    def is_feature_enabled(self, feature_key: str, user_id: str, attributes: Optional[Mapping[str, Any]] = None) -> bool:
        log.error(str(UninitializedError(feature_key)))
        return False


class ActiveEngine:
    """
    Holds the engine that evaluations are currently served from.

    There is a single writer (the refresher) and any number of readers. Each update replaces the
    whole :class:`EngineVersion` with one reference assignment, so readers never need a lock and
    never see an engine paired with the wrong datafile or version. Versions only increase.
    """

    def __init__(self, placeholder: Optional[EvaluationEngine] = None):
        self.__current = EngineVersion(placeholder or UninitializedEngine(), 0, None)

    def get(self) -> EngineVersion:
        return self.__current

    @property
    def engine(self) -> EvaluationEngine:
        return self.__current.engine

    @property
    def version(self) -> int:
        return self.__current.version

    def set(self, engine: EvaluationEngine, datafile: Any) -> EngineVersion:
        updated = EngineVersion(engine, self.__current.version + 1, datafile)
        self.__current = updated
        return updated


def close_engine(engine: EvaluationEngine):
    """Closes an engine that no longer serves evaluations. Failures are logged, not raised."""
    close = getattr(engine, 'close', None)
    if not callable(close):
        return
    try:
        close()
    except Exception as e:
        log.warning("MANAGER: Error while closing replaced evaluation engine: %s" % repr(e))

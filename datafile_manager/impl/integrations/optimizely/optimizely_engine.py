import json

have_optimizely = False
try:
    from optimizely import optimizely
    have_optimizely = True
except ImportError:
    pass

from datafile_manager.interfaces import EvaluationEngine


class _OptimizelyEngine(EvaluationEngine):
    def __init__(self, datafile, logger, options):
        if not have_optimizely:
            raise NotImplementedError("Cannot use the Optimizely evaluation engine because the optimizely-sdk package is not installed")
        self._client = optimizely.Optimizely(datafile=json.dumps(datafile), logger=logger, **options)

    @property
    def client(self):
        return self._client

    def is_feature_enabled(self, feature_key, user_id, attributes=None):
        return bool(self._client.is_feature_enabled(feature_key, user_id, attributes))

    def close(self):
        # stops the client's event processing thread
        self._client.close()

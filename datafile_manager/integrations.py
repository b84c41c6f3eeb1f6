"""
This submodule contains factory methods for evaluation engines backed by third-party SDKs.
"""

import logging
from typing import Any, Dict

from datafile_manager.impl.integrations.optimizely.optimizely_engine import \
    _OptimizelyEngine
from datafile_manager.interfaces import EvaluationEngine


class Optimizely:
    """Provides factory methods for evaluating flags with the Optimizely Python SDK."""

    @staticmethod
    def engine_factory(datafile: Any, logger: logging.Logger, options: Dict[str, Any]) -> EvaluationEngine:
        """Creates an :class:`datafile_manager.interfaces.EvaluationEngine` backed by an
        ``optimizely.optimizely.Optimizely`` instance built from the given datafile.

        This is the default ``engine_factory`` of :class:`datafile_manager.config.Config`. To use it, you
        must first install the ``optimizely-sdk`` package (``pip install datafile-manager[optimizely]``).
        ::

            from datafile_manager import Config
            config = Config('my-sdk-key', engine_options={'skip_json_validation': True})

        :param datafile: the parsed datafile
        :param logger: the logger that the Optimizely client will write to
        :param options: extra keyword arguments for the ``Optimizely`` constructor, taken from
          ``Config.engine_options``
        """
        return _OptimizelyEngine(datafile, logger, options)

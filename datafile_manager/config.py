"""
This submodule contains the :class:`Config` class for configuring a datafile manager.

Note that the same class can also be imported from the top-level ``datafile_manager`` module.
"""

import logging
from typing import Any, Callable, Dict, Optional
from urllib import parse

from datafile_manager.impl.util import ConfigurationError
from datafile_manager.interfaces import DatafileRequester, EvaluationEngine

DATAFILE_PATH = '/datafiles/%s.json'


class HTTPConfig:
    """Advanced HTTP configuration options for the datafile requests.

    This class groups together HTTP/HTTPS-related configuration properties that rarely need to be changed.
    If you need to set these, construct an ``HTTPConfig`` instance and pass it as the ``http`` parameter when
    you construct the main :class:`Config`.
    """

    def __init__(
        self,
        connect_timeout: float = 10,
        read_timeout: float = 15,
        http_proxy: Optional[str] = None,
        ca_certs: Optional[str] = None,
        disable_ssl_verification: bool = False,
    ):
        """
        :param connect_timeout: The connect timeout for network connections in seconds.
        :param read_timeout: The read timeout for network connections in seconds. Together with
          ``connect_timeout`` this bounds how long a single poll can take.
        :param http_proxy: Use a proxy when fetching the datafile. This is the full URI of the
          proxy; for example: http://my-proxy.com:1234. Setting this overrides any proxy specified
          by the ``https_proxy`` or ``http_proxy`` environment variables.
        :param ca_certs: If using a custom certificate authority, set this to the file path of the
          certificate bundle.
        :param disable_ssl_verification: If true, completely disables SSL verification and certificate
          verification for secure requests. This is unsafe and should not be used in a production environment.
        """
        if connect_timeout <= 0 or read_timeout <= 0:
            raise ConfigurationError("HTTP timeouts must be positive")
        self.__connect_timeout = connect_timeout
        self.__read_timeout = read_timeout
        self.__http_proxy = http_proxy
        self.__ca_certs = ca_certs
        self.__disable_ssl_verification = disable_ssl_verification

    @property
    def connect_timeout(self) -> float:
        return self.__connect_timeout

    @property
    def read_timeout(self) -> float:
        return self.__read_timeout

    @property
    def http_proxy(self) -> Optional[str]:
        return self.__http_proxy

    @property
    def ca_certs(self) -> Optional[str]:
        return self.__ca_certs

    @property
    def disable_ssl_verification(self) -> bool:
        return self.__disable_ssl_verification


def _default_engine_factory(datafile: Any, logger: logging.Logger, options: Dict[str, Any]) -> EvaluationEngine:
    # imported here so that the optimizely-sdk package is only required when it is actually used
    from datafile_manager.integrations import Optimizely

    return Optimizely.engine_factory(datafile, logger, options)


class Config:
    """Configuration options for a :class:`datafile_manager.client.DatafileManager`.

    To use these options, create an instance of ``Config`` and pass it to either
    :func:`datafile_manager.configure()` if you are using the shared manager, or the
    :class:`datafile_manager.client.DatafileManager` constructor otherwise.
    """

    def __init__(
        self,
        sdk_key: str,
        log_level: int = logging.DEBUG,
        engine_options: Optional[Dict[str, Any]] = None,
        poll_interval: float = 1,
        base_uri: str = 'https://cdn.optimizely.com',
        datafile_requester_class: Optional[Callable[['Config'], DatafileRequester]] = None,
        engine_factory: Optional[Callable[[Any, logging.Logger, Dict[str, Any]], EvaluationEngine]] = None,
        http: HTTPConfig = HTTPConfig(),
    ):
        """
        :param sdk_key: The key identifying the datafile to poll. This is always required.
        :param log_level: The level for the ``datafile_manager`` logger, which is also handed to the
          evaluation engine. The logger is shared by every manager in the process and is set when a
          manager is constructed, so the most recently constructed manager determines its level.
          Defaults to ``logging.DEBUG``.
        :param engine_options: Options passed through verbatim, as keyword arguments, to the evaluation
          engine each time a new datafile is accepted.
        :param poll_interval: The number of seconds between datafile requests. Polls never overlap; a
          request that takes longer than this delays the next one.
        :param base_uri: The base URL of the datafile CDN. Most users should use the default value.
        :param datafile_requester_class: A factory, taking this ``Config``, for the component that
          fetches the datafile. Mostly useful for testing.
        :param engine_factory: A callable ``(datafile, logger, options)`` that builds an
          :class:`datafile_manager.interfaces.EvaluationEngine` from a datafile. Defaults to
          :func:`datafile_manager.integrations.Optimizely.engine_factory`.
        :param http: Optional properties for customizing the manager's HTTP connections.
        """
        if sdk_key is None or sdk_key == '':
            raise ConfigurationError("sdk_key is required")
        if not isinstance(sdk_key, str):
            raise ConfigurationError("sdk_key must be a string")
        if poll_interval <= 0:
            raise ConfigurationError("poll_interval must be positive")

        self.__sdk_key = sdk_key
        self.__log_level = log_level
        self.__engine_options = dict(engine_options or {})
        self.__poll_interval = poll_interval
        self.__base_uri = base_uri.rstrip('/')
        self.__datafile_requester_class = datafile_requester_class
        self.__engine_factory = engine_factory or _default_engine_factory
        self.__http = http

    def copy_with_new_sdk_key(self, new_sdk_key: str) -> 'Config':
        """Returns a new ``Config`` instance that is the same as this one, except for having a different SDK key.

        :param new_sdk_key: the new SDK key
        """
        return Config(
            sdk_key=new_sdk_key,
            log_level=self.__log_level,
            engine_options=self.__engine_options,
            poll_interval=self.__poll_interval,
            base_uri=self.__base_uri,
            datafile_requester_class=self.__datafile_requester_class,
            engine_factory=self.__engine_factory,
            http=self.__http,
        )

    @property
    def sdk_key(self) -> str:
        return self.__sdk_key

    @property
    def log_level(self) -> int:
        return self.__log_level

    @property
    def engine_options(self) -> Dict[str, Any]:
        # a copy, so that callers cannot change what later engines receive
        return dict(self.__engine_options)

    @property
    def poll_interval(self) -> float:
        return self.__poll_interval

    @property
    def base_uri(self) -> str:
        return self.__base_uri

    @property
    def datafile_uri(self) -> str:
        return self.__base_uri + DATAFILE_PATH % parse.quote(self.__sdk_key, safe='')

    @property
    def datafile_requester_class(self) -> Optional[Callable[['Config'], DatafileRequester]]:
        return self.__datafile_requester_class

    @property
    def engine_factory(self) -> Callable[[Any, logging.Logger, Dict[str, Any]], EvaluationEngine]:
        return self.__engine_factory

    @property
    def http(self) -> HTTPConfig:
        return self.__http


__all__ = ['Config', 'HTTPConfig']

"""
This submodule contains interfaces for the components that a datafile manager is built from.
Applications normally only need these to supply a custom evaluation engine or, in tests, a custom
datafile requester.
"""

from abc import ABCMeta, abstractmethod
from typing import Any, Mapping, Optional


class DatafileRequester:
    """
    Interface for the component that retrieves the current datafile. The default implementation
    performs an HTTP request; it can be replaced for testing purposes.
    """

    __metaclass__ = ABCMeta

    @abstractmethod
    def get_datafile(self) -> Any:
        """
        Retrieves the current datafile.

        :return: the parsed datafile document
        :raises datafile_manager.NetworkError: if the datafile could not be retrieved
        """


class EvaluationEngine:
    """
    Interface for an object that answers feature flag questions from one specific datafile.

    A new engine is built every time a changed datafile is accepted; engines are never updated
    in place. Implementations must be safe to call from multiple threads.
    """

    __metaclass__ = ABCMeta

    @abstractmethod
    def is_feature_enabled(self, feature_key: str, user_id: str, attributes: Optional[Mapping[str, Any]] = None) -> bool:
        """
        Determines whether a feature is enabled for a user.

        :param feature_key: the key of the feature flag
        :param user_id: the user to evaluate the flag for
        :param attributes: optional user attributes used for targeting
        :return: True if the feature is enabled for the user
        """

    def close(self):
        """
        Releases any threads or connections held by the engine. Called once the engine has been
        replaced by a newer one, or when the manager is closed. The default implementation does
        nothing.
        """
        pass

import logging

log = logging.getLogger('datafile_manager')

_RETRYABLE_STATUSES = [400, 408, 429]


class DatafileManagerError(Exception):
    """Base class for all errors raised by the datafile manager."""


class ConfigurationError(DatafileManagerError):
    """
    The manager was constructed with an invalid configuration. This indicates a programming
    error and is always raised to the caller.
    """


class NetworkError(DatafileManagerError):
    """
    A datafile could not be retrieved: a transport failure, a timeout, an undecodable body or an
    unsuccessful HTTP status. The refresher recovers from this by skipping the current poll.
    """


class UnsuccessfulResponseError(NetworkError):
    def __init__(self, status):
        super(UnsuccessfulResponseError, self).__init__("HTTP error %d" % status)
        self._status = status

    @property
    def status(self):
        return self._status


class UninitializedError(DatafileManagerError):
    """
    A feature flag was evaluated before any datafile had been accepted. This is only ever logged;
    the evaluation call answers with a safe default instead.
    """

    def __init__(self, feature_key=None):
        super(UninitializedError, self).__init__(
            "MANAGER: is_feature_enabled called for \"%s\" but the datafile manager is not yet initialized. "
            "If you just started a web application or app server, try the request again; "
            "otherwise create the manager earlier in your application startup code "
            "or evaluate flags later in your application lifecycle." % feature_key
        )
        self.feature_key = feature_key


class ComparisonError(DatafileManagerError):
    """Two datafiles could not be compared structurally."""


def throw_if_unsuccessful_response(resp):
    if resp.status >= 400:
        raise UnsuccessfulResponseError(resp.status)


def is_http_error_recoverable(status):
    if status >= 400 and status < 500:
        return status in _RETRYABLE_STATUSES  # all other 4xx besides these are unlikely to fix themselves
    return True


def http_error_description(status):
    return "HTTP error %d%s" % (status, " (unknown SDK key)" if status in (401, 403, 404) else "")


def http_error_message(status, context, retryable_message="will retry"):
    return "Received %s for %s - %s" % (
        http_error_description(status),
        context,
        retryable_message if is_http_error_recoverable(status) else "will keep polling, but this is unlikely to succeed",
    )

import pytest

from datafile_manager.config import Config, HTTPConfig
from datafile_manager.impl.datafile_requester import DatafileRequesterImpl
from datafile_manager.impl.util import NetworkError, UnsuccessfulResponseError
from datafile_manager.testing.http_util import (BasicResponse, JsonResponse,
                                                SlowResponse, start_server)
from datafile_manager.version import VERSION

datafile_path = '/datafiles/abc123.json'


def make_requester(server, **kwargs):
    return DatafileRequesterImpl(Config('abc123', base_uri=server.uri, **kwargs))


def test_get_datafile_returns_data():
    with start_server() as server:
        datafile = {'flags': {'f1': True}, 'revision': '1'}
        server.for_path(datafile_path, JsonResponse(datafile))

        assert make_requester(server).get_datafile() == datafile


def test_request_uri_is_built_from_sdk_key():
    with start_server() as server:
        server.for_path(datafile_path, JsonResponse({}))
        requester = make_requester(server)
        assert requester.uri == server.uri + datafile_path

        requester.get_datafile()
        req = server.require_request()
        assert req.method == 'GET'
        assert req.path == datafile_path


def test_get_datafile_sends_headers():
    with start_server() as server:
        server.for_path(datafile_path, JsonResponse({}))

        make_requester(server).get_datafile()
        req = server.require_request()
        assert req.headers['User-Agent'] == 'PythonDatafileManager/' + VERSION
        assert req.headers['Accept-Encoding'] == 'gzip'
        assert req.headers.get('If-None-Match') is None


def test_get_datafile_can_use_cached_data():
    with start_server() as server:
        datafile = {'flags': {'f1': True}}
        etag = 'my-etag'
        requester = make_requester(server)

        server.for_path(datafile_path, JsonResponse(datafile, {'Etag': etag}))
        assert requester.get_datafile() == datafile
        server.require_request()

        server.for_path(datafile_path, BasicResponse(304))
        assert requester.get_datafile() == datafile
        req = server.require_request()
        assert req.headers['If-None-Match'] == etag


def test_get_datafile_replaces_cached_data_when_etag_changes():
    with start_server() as server:
        requester = make_requester(server)

        server.for_path(datafile_path, JsonResponse({'revision': '1'}, {'Etag': 'etag-1'}))
        assert requester.get_datafile() == {'revision': '1'}
        server.require_request()

        server.for_path(datafile_path, JsonResponse({'revision': '2'}, {'Etag': 'etag-2'}))
        assert requester.get_datafile() == {'revision': '2'}
        req = server.require_request()
        assert req.headers['If-None-Match'] == 'etag-1'

        server.for_path(datafile_path, BasicResponse(304))
        assert requester.get_datafile() == {'revision': '2'}
        req = server.require_request()
        assert req.headers['If-None-Match'] == 'etag-2'


@pytest.mark.parametrize('status', [400, 403, 404, 500, 503])
def test_unsuccessful_status_raises(status):
    with start_server() as server:
        server.for_path(datafile_path, BasicResponse(status))

        with pytest.raises(UnsuccessfulResponseError) as exc_info:
            make_requester(server).get_datafile()
        assert exc_info.value.status == status
        assert isinstance(exc_info.value, NetworkError)


def test_missing_datafile_raises_not_found():
    with start_server() as server:
        with pytest.raises(UnsuccessfulResponseError) as exc_info:
            make_requester(server).get_datafile()
        assert exc_info.value.status == 404


def test_invalid_json_raises_network_error():
    with start_server() as server:
        server.for_path(datafile_path, BasicResponse(200, '{"flags": {'))

        with pytest.raises(NetworkError):
            make_requester(server).get_datafile()


def test_connection_failure_raises_network_error():
    with start_server() as server:
        uri = server.uri
    requester = DatafileRequesterImpl(Config('abc123', base_uri=uri, http=HTTPConfig(connect_timeout=0.5, read_timeout=0.5)))

    with pytest.raises(NetworkError):
        requester.get_datafile()


def test_read_timeout_raises_network_error():
    with start_server() as server:
        slow = SlowResponse(JsonResponse({}))
        server.for_path(datafile_path, slow)
        requester = make_requester(server, http=HTTPConfig(connect_timeout=1, read_timeout=0.2))
        try:
            with pytest.raises(NetworkError):
                requester.get_datafile()
        finally:
            slow.release()

"""
Default implementation of datafile polling requests.
"""

import json
from collections import namedtuple

import urllib3

from datafile_manager.impl.http import _http_factory
from datafile_manager.impl.util import (NetworkError,
                                        throw_if_unsuccessful_response, log)
from datafile_manager.interfaces import DatafileRequester

CacheEntry = namedtuple('CacheEntry', ['data', 'etag'])


class DatafileRequesterImpl(DatafileRequester):
    def __init__(self, config):
        self._cache = None
        self._http_factory = _http_factory(config)
        self._http = self._http_factory.create_pool_manager(1, config.base_uri)
        self._config = config
        self._uri = config.datafile_uri

    @property
    def uri(self) -> str:
        return self._uri

    def get_datafile(self):
        hdrs = dict(self._http_factory.base_headers)
        hdrs['Accept-Encoding'] = 'gzip'
        cache_entry = self._cache
        if cache_entry is not None:
            hdrs['If-None-Match'] = cache_entry.etag
        try:
            r = self._http.request('GET', self._uri, headers=hdrs, timeout=self._http_factory.timeout, retries=1)
        except urllib3.exceptions.HTTPError as e:
            raise NetworkError("datafile request to %s failed: %s" % (self._uri, e)) from e
        throw_if_unsuccessful_response(r)

        if r.status == 304 and cache_entry is not None:
            data = cache_entry.data
            etag = cache_entry.etag
            from_cache = True
        else:
            try:
                data = json.loads(r.data.decode('UTF-8'))
            except ValueError as e:
                raise NetworkError("datafile from %s was not valid JSON: %s" % (self._uri, e)) from e
            etag = r.headers.get('ETag')
            from_cache = False
            if etag is not None:
                self._cache = CacheEntry(data=data, etag=etag)
        log.debug("%s response status:[%d] From cache? [%s] ETag:[%s]", self._uri, r.status, from_cache, etag)

        return data

    def close(self):
        self._http.clear()

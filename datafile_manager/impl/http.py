from os import environ
from typing import Optional

import certifi
import urllib3

from datafile_manager.version import VERSION


def _base_headers(config):
    return {'User-Agent': 'PythonDatafileManager/' + VERSION, 'Accept': 'application/json'}


def _http_factory(config):
    return HTTPFactory(_base_headers(config), config.http)


class HTTPFactory:
    def __init__(self, base_headers, http_config):
        self.__base_headers = base_headers
        self.__http_config = http_config
        self.__timeout = urllib3.Timeout(connect=http_config.connect_timeout, read=http_config.read_timeout)

    @property
    def base_headers(self):
        return self.__base_headers

    @property
    def timeout(self):
        return self.__timeout

    def create_pool_manager(self, num_pools, target_base_uri):
        proxy_url = self.__http_config.http_proxy or _get_proxy_url(target_base_uri)

        if self.__http_config.disable_ssl_verification:
            cert_reqs = 'CERT_NONE'
            ca_certs = None
        else:
            cert_reqs = 'CERT_REQUIRED'
            ca_certs = self.__http_config.ca_certs or certifi.where()

        if proxy_url is None:
            return urllib3.PoolManager(num_pools=num_pools, cert_reqs=cert_reqs, ca_certs=ca_certs)

        url = urllib3.util.parse_url(proxy_url)
        proxy_headers = None
        if url.auth is not None:
            proxy_headers = urllib3.util.make_headers(proxy_basic_auth=url.auth)
        return urllib3.ProxyManager(proxy_url, num_pools=num_pools, cert_reqs=cert_reqs, ca_certs=ca_certs, proxy_headers=proxy_headers)


def _get_proxy_url(target_base_uri: Optional[str]) -> Optional[str]:
    """
    Picks the proxy for the target from the https_proxy or http_proxy environment variable,
    depending on the target's scheme. A no_proxy value of '*' or one matching the target host
    disables the proxy.
    """
    if target_base_uri is None:
        return None

    url = urllib3.util.parse_url(target_base_uri)
    proxy_url = environ.get('https_proxy') if url.scheme == 'https' else environ.get('http_proxy')
    if proxy_url is None:
        return None

    no_proxy = [entry.strip().split(':')[0] for entry in environ.get('no_proxy', '').split(',')]
    if '*' in no_proxy:
        return None
    host = url.host or ''
    if any(entry and host.endswith(entry) for entry in no_proxy):
        return None

    return proxy_url

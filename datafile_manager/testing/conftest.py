import pytest

import datafile_manager


@pytest.fixture(autouse=True)
def no_proxy_from_environment(monkeypatch):
    # the mock server is always reached directly
    for name in ('http_proxy', 'https_proxy', 'no_proxy'):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_shared_manager():
    yield
    datafile_manager._reset_client()

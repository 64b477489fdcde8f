import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--network", action="store_true", default=False,
        help="run tests that need network access")


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "network: marks tests as requiring network access (may be slow)"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--network"):
        return
    skip_network = pytest.mark.skip(reason="needs --network to run")
    for item in items:
        if "network" in item.keywords:
            item.add_marker(skip_network)


class FakeLoader(object):
    """
    Serves documents from a dict keyed by URL and records every request.
    """

    def __init__(self, documents, context_urls=None):
        self.documents = documents
        self.context_urls = context_urls or {}
        self.requests = []

    def __call__(self, url, options=None):
        self.requests.append(url)
        if url not in self.documents:
            raise Exception('no document for %s' % url)
        return {
            'contextUrl': self.context_urls.get(url),
            'documentUrl': url,
            'document': self.documents[url],
        }


@pytest.fixture
def fake_loader():
    """Builds a FakeLoader for a dict of URL to document."""
    return FakeLoader

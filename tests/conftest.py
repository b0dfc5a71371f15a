import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def _billing_domain(request):
    """Initialize the billing domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from billing.domain import billing

    billing.init()
    return billing


@pytest.fixture(autouse=True)
def run_around_tests(_billing_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _billing_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture(autouse=True)
def clients():
    """Fresh fake collaborators for every test."""
    from billing.wiring import build_clients, install, uninstall

    installed = install(build_clients("fake"))
    yield installed
    uninstall()

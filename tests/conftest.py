import pytest

from appgraph.config import Configuration, set_configuration


@pytest.fixture(autouse=True)
def _empty_configuration():
    """Each test starts without any externally configured connection strings."""
    set_configuration(Configuration())
    yield
    set_configuration(Configuration())

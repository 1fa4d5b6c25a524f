import pytest

from scalar_grad import use_graph


@pytest.fixture(autouse=True)
def graph():
    """Every test builds into its own arena."""
    with use_graph() as g:
        yield g

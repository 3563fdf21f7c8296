import matplotlib
import pytest

from machine import Machine
from stats import Costs

matplotlib.use("Agg")


@pytest.fixture
def small_machine():
    """RAM 10, L1=2, L2=4, L3=6, direct mapping, costs 1/2/3/4."""
    return Machine(10, 2, 4, 6, policy="direct", costs=Costs(1, 2, 3, 4))

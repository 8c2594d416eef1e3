import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from iqdemod.config import clear_config


@pytest.fixture(autouse=True)
def _isolated_config():
    """Every test starts and ends without a global configuration."""
    clear_config()
    yield
    clear_config()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)

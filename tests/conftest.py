"""Shared fixtures: seeded generators and small protocol instances."""

import numpy as np
import pytest

from basefold_spec import BasefoldConfig, BasefoldProtocol

TOY_MODULUS = 97


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(12345)


@pytest.fixture
def toy_protocol() -> BasefoldProtocol:
    """RM(1, 2) followed by RM(1, 1) over GF(97): k = 3, two rounds."""
    return BasefoldProtocol.from_config(
        BasefoldConfig(variables=2, degree=1, modulus=TOY_MODULUS, seed=7)
    )


@pytest.fixture
def default_protocol() -> BasefoldProtocol:
    """Default parameters: RM(2, 4), RM(3, 3), RM(2, 2), RM(1, 1)."""
    return BasefoldProtocol.from_config(BasefoldConfig(seed=11))

import numpy as np
import pytest

from minvar_anneal.config import AnnealingConfig
from minvar_anneal.problem import ProblemSpec, create_problem


@pytest.fixture
def two_asset_problem() -> ProblemSpec:
    """Uncorrelated assets: sigma=(0.2, 0.3), returns (10%, 20%), target 12%."""
    return create_problem(
        expected_returns=[0.10, 0.20],
        covariance=[[0.04, 0.0], [0.0, 0.09]],
        target_return=0.12,
        initial_weights=[0.5, 0.5],
    )


@pytest.fixture
def three_asset_problem() -> ProblemSpec:
    """Three correlated assets starting from equal weights."""
    return create_problem(
        expected_returns=[0.06, 0.09, 0.14],
        covariance=np.array(
            [
                [0.020, 0.004, 0.002],
                [0.004, 0.050, 0.010],
                [0.002, 0.010, 0.120],
            ]
        ),
        target_return=0.08,
    )


@pytest.fixture
def fast_config() -> AnnealingConfig:
    """Default schedule with short temperature levels."""
    return AnnealingConfig(inner_iterations=50)

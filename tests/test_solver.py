import numpy as np
import pytest

from mnistff.network import Network
from mnistff.solver import RMSPropSolver


def test_defaults():
    solver = RMSPropSolver()
    assert solver.learn_rate == 0.001
    assert solver.eps == 1e-8
    assert solver.rho == 0.999
    assert solver.batch_size == 1.0


def test_first_step_moves_by_learn_rate_against_sign():
    solver = RMSPropSolver(learn_rate=0.5, eps=0.0, rho=0.0)
    param = np.array([1.0, 1.0, 1.0])
    solver.step([param], [np.array([3.0, -2.0, 0.0])])
    np.testing.assert_allclose(param, [0.5, 1.5, 1.0])


def test_zero_gradient_leaves_parameter_unchanged():
    solver = RMSPropSolver()
    param = np.array([[0.25, -0.75]])
    original = param.copy()
    solver.step([param], [np.zeros_like(param)])
    np.testing.assert_array_equal(param, original)


def test_updates_in_place():
    solver = RMSPropSolver()
    param = np.ones((2, 2))
    ref = param
    solver.step([param], [np.ones((2, 2))])
    assert ref is param
    assert np.all(param < 1.0)


def test_batch_size_scales_gradient():
    a = RMSPropSolver(learn_rate=0.01, eps=1e-4, rho=0.9, batch_size=1)
    b = RMSPropSolver(learn_rate=0.01, eps=1e-4, rho=0.9, batch_size=4)
    grad = np.array([0.01, -0.02, 0.03])
    pa = np.zeros(3)
    pb = np.zeros(3)
    for _ in range(3):
        a.step([pa], [grad])
        b.step([pb], [grad * 4])
    np.testing.assert_allclose(pa, pb)


def test_cache_persists_between_steps():
    solver = RMSPropSolver(learn_rate=0.1, eps=0.0, rho=0.5)
    param = np.array([0.0])
    grad = np.array([2.0])
    solver.step([param], [grad])
    first = -param[0]
    before = param[0]
    solver.step([param], [grad])
    second = before - param[0]
    assert first > 0 and second > 0
    assert second < first


def test_mismatched_counts_raise():
    solver = RMSPropSolver()
    with pytest.raises(ValueError):
        solver.step([np.zeros(2), np.zeros(2)], [np.zeros(2)])


def test_mismatched_shape_raises():
    solver = RMSPropSolver()
    with pytest.raises(ValueError):
        solver.step([np.zeros((2, 2))], [np.zeros(3)])


def test_non_array_parameter_raises():
    solver = RMSPropSolver()
    with pytest.raises(TypeError):
        solver.step([[0.0, 1.0]], [np.zeros(2)])


@pytest.mark.parametrize(
    "kwargs",
    [{"batch_size": 0}, {"rho": 1.5}, {"learn_rate": 0}, {"eps": -1.0}],
)
def test_invalid_settings_raise(kwargs):
    with pytest.raises(ValueError):
        RMSPropSolver(**kwargs)


def test_step_on_network_learnables_keeps_dtype_and_shape():
    network = Network(dtype=np.float32, rng=np.random.default_rng(1))
    rng = np.random.default_rng(2)
    x = rng.random((4, 784))
    targets = np.full((4, 10), 0.1)
    targets[:, 3] = 0.9
    _, grads = network.gradients(x, targets)
    before = [w.copy() for w in network.learnables()]
    RMSPropSolver(batch_size=4).step(network.learnables(), grads)
    for old, new in zip(before, network.learnables()):
        assert new.dtype == np.float32
        assert new.shape == old.shape
    assert any(not np.array_equal(o, n) for o, n in zip(before, network.learnables()))
"""
Tests for the backpropagation Trainer.

These tests verify:
    - The update matches the gradient of the squared error
    - The returned prediction is the pre-update one
    - Invalid samples leave the weights untouched
    - Per-sample error
"""

import os
import sys

import numpy as np
import pytest
import torch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from anndrive.ai.errors import DimensionError
from anndrive.ai.network import Network
from anndrive.ai.trainer import Trainer, TrainingSample


@pytest.fixture
def network():
    return Network(5, 2, 2, 6, initial_alpha=0.3, seed=11)


@pytest.fixture
def trainer(network):
    return Trainer(network)


@pytest.fixture
def sample():
    return TrainingSample.of([1.0, 0.5, 0.0, 0.0, 0.5], [0.9, 0.2])


def expected_update(store, sample, alpha):
    """Reference step: w -= alpha * d(0.5 * sum((t - y)^2))/dw via autograd."""
    params = [
        (w.clone().requires_grad_(True), b.clone().requires_grad_(True))
        for w, b in store.layers
    ]
    x = torch.tensor(sample.inputs, dtype=torch.float64)
    for w, b in params:
        x = torch.sigmoid(w @ x + b)
    targets = torch.tensor(sample.targets, dtype=torch.float64)
    loss = 0.5 * ((targets - x) ** 2).sum()
    loss.backward()
    return [
        ((w - alpha * w.grad).detach(), (b - alpha * b.grad).detach())
        for w, b in params
    ]


class TestTrainingSample:
    """Test the sample container."""

    def test_of_converts_to_float_tuples(self):
        s = TrainingSample.of([1, 0, 0, 0, 0], np.array([0.5, 0.25]))
        assert s.inputs == (1.0, 0.0, 0.0, 0.0, 0.0)
        assert s.targets == (0.5, 0.25)
        assert all(isinstance(v, float) for v in s.inputs + s.targets)

    def test_frozen(self, sample):
        with pytest.raises(Exception):
            sample.targets = (0.0, 0.0)


class TestTrainOne:
    """Test a single backpropagation step."""

    def test_matches_gradient_descent(self, network, trainer, sample):
        before = network.weights_snapshot()
        expected = expected_update(before, sample, network.alpha)

        trainer.train_one(sample)

        after = network.weights_snapshot()
        for (w, b), (ew, eb) in zip(after.layers, expected):
            assert torch.allclose(w, ew, atol=1e-12)
            assert torch.allclose(b, eb, atol=1e-12)

    def test_returns_pre_update_prediction(self, network, trainer, sample):
        before = network.forward(sample.inputs)
        predicted = trainer.train_one(sample)
        assert np.array_equal(predicted, before)
        assert not np.array_equal(network.forward(sample.inputs), before)

    def test_moves_toward_target(self, network, trainer, sample):
        error_before = Trainer.sample_error(sample.targets, network.forward(sample.inputs))
        trainer.train_one(sample)
        error_after = Trainer.sample_error(sample.targets, network.forward(sample.inputs))
        assert error_after < error_before

    def test_repeated_training_fits_sample(self, network, trainer, sample):
        for _ in range(500):
            trainer.train_one(sample)
        assert np.allclose(network.forward(sample.inputs), sample.targets, atol=0.05)

    def test_alpha_not_changed(self, network, trainer, sample):
        alpha = network.alpha
        trainer.train_one(sample)
        assert network.alpha == alpha

    def test_wrong_input_length_leaves_weights(self, network, trainer):
        before = network.weights_snapshot()
        with pytest.raises(DimensionError) as exc:
            trainer.train_one(TrainingSample.of([0.5] * 4, [0.5, 0.5]))
        assert exc.value.kind == 'input'
        assert network.weights_snapshot() == before

    def test_wrong_target_length_leaves_weights(self, network, trainer):
        before = network.weights_snapshot()
        with pytest.raises(DimensionError) as exc:
            trainer.train_one(TrainingSample.of([0.5] * 5, [0.5, 0.5, 0.5]))
        assert exc.value.kind == 'target'
        assert network.weights_snapshot() == before


class TestSampleError:
    """Test per-sample error."""

    def test_zero_when_exact(self):
        assert Trainer.sample_error([0.3, 0.7], [0.3, 0.7]) == 0.0

    def test_mean_of_squares(self):
        assert Trainer.sample_error([0.3, 0.7], [0.5, 0.5]) == pytest.approx(0.04)

    def test_single_output(self):
        assert Trainer.sample_error([1.0], [0.5]) == pytest.approx(0.25)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

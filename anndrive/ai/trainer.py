"""
Backpropagation Step
====================

Online (one sample at a time) gradient step for the steering network.

For a sample with target t the output error is e = t - y. Deltas are pushed
back through the layers with the sigmoid derivative a * (1 - a):

    delta_out = e * y * (1 - y)
    delta_l   = (W_{l+1}^T · delta_{l+1}) * a_l * (1 - a_l)

and every parameter moves by alpha times its gradient:

    W_l += alpha * outer(delta_l, a_{l-1})
    b_l += alpha * delta_l

Deltas are computed from the weights as they were before the step.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
import torch

from .errors import DimensionError
from .network import Network


@dataclass(frozen=True)
class TrainingSample:
    """A recorded sensor reading and the steering targets for it."""
    inputs: Tuple[float, ...]
    targets: Tuple[float, ...]

    @classmethod
    def of(cls, inputs: Sequence[float], targets: Sequence[float]) -> 'TrainingSample':
        return cls(tuple(float(v) for v in inputs), tuple(float(v) for v in targets))


class Trainer:
    """
    Applies one backpropagation update per presented sample.

    Example:
        >>> trainer = Trainer(net)
        >>> predicted = trainer.train_one(TrainingSample.of([0, 0, 0, 0, 0], [0.3, 0.7]))
        >>> error = Trainer.sample_error([0.3, 0.7], predicted)
    """

    def __init__(self, network: Network):
        self.network = network

    def _check_sample(self, sample: TrainingSample) -> None:
        topology = self.network.topology
        if len(sample.inputs) != topology.input_count:
            raise DimensionError('input', topology.input_count, len(sample.inputs))
        if len(sample.targets) != topology.output_count:
            raise DimensionError('target', topology.output_count, len(sample.targets))

    def train_one(self, sample: TrainingSample) -> np.ndarray:
        """
        Run a forward pass and one weight update for ``sample``.

        Args:
            sample: Training sample matching the network topology

        Returns:
            The prediction made before the update

        Raises:
            DimensionError: If the sample does not fit the topology.
                No weights are changed in that case.
        """
        self._check_sample(sample)

        net = self.network
        activations = net.forward_activations(sample.inputs)
        predicted = activations[-1]
        targets = torch.tensor(sample.targets, dtype=predicted.dtype)

        alpha = net.alpha
        delta = (targets - predicted) * predicted * (1 - predicted)

        with torch.no_grad():
            for index in range(len(net.layers) - 1, -1, -1):
                layer = net.layers[index]
                layer_input = activations[index]

                # Propagate before this layer's weights change
                if index > 0:
                    next_delta = (layer.weight.t() @ delta) * layer_input * (1 - layer_input)

                layer.weight.add_(torch.outer(delta, layer_input), alpha=alpha)
                layer.bias.add_(delta, alpha=alpha)

                if index > 0:
                    delta = next_delta

        return predicted.numpy().copy()

    @staticmethod
    def sample_error(targets: Sequence[float], predicted: Sequence[float]) -> float:
        """Mean of squared per-output differences."""
        diff = np.asarray(targets, dtype=np.float64) - np.asarray(predicted, dtype=np.float64)
        return float(np.mean(diff * diff))

"""
Steering Network
================

Small fully connected network mapping ray sensor proximities to steering
commands.

Architecture:
    Input (sensors) → Hidden Layers (sigmoid) → Output (sigmoid)

Every layer computes sigmoid(W·x + b), so all outputs lie in (0, 1). The host
maps them back to [-1, 1] translation and rotation commands.

Weights are not trained with an optimizer or autograd. ``Trainer`` applies the
backpropagation step by hand using the activations returned by
``forward_activations``; see trainer.py.

Key Features:
    - Deterministic initialization from a seed
    - Snapshot/restore of all weights for epoch rollback
    - Single-line text serialization for checkpoints
    - Learning rate (alpha) with a single clamped writer
"""

import math
from typing import Dict, List, Optional, Sequence

import numpy as np
import torch
import torch.nn as nn

from config import Config
from anndrive.utils.logger import get_logger

from .errors import DimensionError, TopologyMismatch
from .weights import (
    DTYPE, Topology, WeightStore, deserialize_weights, serialize_weights,
)


ALPHA_MIN = 0.01
ALPHA_MAX = 0.9

logger = get_logger(__name__)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class Network(nn.Module):
    """
    Feedforward sigmoid network with an adaptive learning rate.

    Attributes:
        topology (Topology): Immutable layer layout
        layers (nn.ModuleList): One nn.Linear per trainable layer

    Example:
        >>> net = Network(5, 2, 1, 10, initial_alpha=0.05, seed=0)
        >>> net.forward([0.5, 0.0, 0.0, 1.0, 0.5]).shape
        (2,)
    """

    def __init__(
        self,
        input_count: int,
        output_count: int,
        hidden_layer_count: int,
        neurons_per_layer: int,
        initial_alpha: float,
        seed: Optional[int] = None,
        alpha_min: float = ALPHA_MIN,
        alpha_max: float = ALPHA_MAX,
    ):
        """
        Initialize the network.

        Args:
            input_count: Number of sensor inputs
            output_count: Number of outputs
            hidden_layer_count: Number of hidden layers
            neurons_per_layer: Neurons in each hidden layer
            initial_alpha: Starting learning rate, clamped into [alpha_min, alpha_max]
            seed: Seed for weight initialization (None for random)
            alpha_min: Lower learning rate bound
            alpha_max: Upper learning rate bound
        """
        super().__init__()

        self.topology = Topology(input_count, output_count, hidden_layer_count, neurons_per_layer)
        self.alpha_min = alpha_min
        self.alpha_max = alpha_max

        self._alpha = clamp(float(initial_alpha), alpha_min, alpha_max)
        if self._alpha != initial_alpha:
            logger.warning(
                f"Initial alpha {initial_alpha} outside [{alpha_min}, {alpha_max}], "
                f"clamped to {self._alpha}"
            )

        self.layers = nn.ModuleList()
        self._build_network()
        self._init_weights(seed)

    @classmethod
    def from_config(cls, config: Config, seed: Optional[int] = None) -> 'Network':
        """Build a network from the topology and alpha settings in ``config``."""
        return cls(
            input_count=config.INPUT_COUNT,
            output_count=config.OUTPUT_COUNT,
            hidden_layer_count=config.HIDDEN_LAYER_COUNT,
            neurons_per_layer=config.NEURONS_PER_HIDDEN_LAYER,
            initial_alpha=config.INITIAL_ALPHA,
            seed=config.SEED if seed is None else seed,
            alpha_min=config.ALPHA_MIN,
            alpha_max=config.ALPHA_MAX,
        )

    def __repr__(self):
        return f"<Network layers={self.topology.layer_sizes} alpha={self._alpha:.4f}>"

    def _build_network(self) -> None:
        """Construct the linear layers."""
        for rows, cols in self.topology.layer_shapes:
            layer = nn.Linear(cols, rows, dtype=DTYPE)
            layer.requires_grad_(False)
            self.layers.append(layer)

    def _init_weights(self, seed: Optional[int]) -> None:
        """
        Small uniform weights in ±1/sqrt(fan_in) to break symmetry.
        The same seed always yields the same weights.
        """
        generator = torch.Generator()
        if seed is None:
            generator.seed()
        else:
            generator.manual_seed(seed)

        with torch.no_grad():
            for layer in self.layers:
                bound = 1 / math.sqrt(layer.in_features)
                layer.weight.uniform_(-bound, bound, generator=generator)
                layer.bias.uniform_(-bound, bound, generator=generator)

    # =========================================================================
    # LEARNING RATE
    # =========================================================================

    @property
    def alpha(self) -> float:
        """Current learning rate."""
        return self._alpha

    def adjust_alpha(self, delta: float) -> float:
        """Shift the learning rate by ``delta``, clamped to the bounds. Returns the new value."""
        self._alpha = clamp(self._alpha + delta, self.alpha_min, self.alpha_max)
        return self._alpha

    # =========================================================================
    # EVALUATION
    # =========================================================================

    def _as_input(self, inputs: Sequence[float]) -> torch.Tensor:
        x = torch.as_tensor(np.asarray(inputs, dtype=np.float64), dtype=DTYPE).reshape(-1)
        if x.numel() != self.topology.input_count:
            raise DimensionError('input', self.topology.input_count, x.numel())
        return x

    def forward_activations(self, inputs: Sequence[float]) -> List[torch.Tensor]:
        """
        Run the forward pass keeping every layer's output.

        Returns:
            [inputs, hidden_1, ..., hidden_k, outputs] as 1-D tensors
        """
        x = self._as_input(inputs)
        activations = [x]
        with torch.no_grad():
            for layer in self.layers:
                x = torch.sigmoid(layer(x))
                activations.append(x)
        return activations

    def forward(self, inputs: Sequence[float]) -> np.ndarray:
        """
        Evaluate the network on a single input vector.

        Args:
            inputs: Sequence of length input_count

        Returns:
            Array of length output_count with values in (0, 1)

        Raises:
            DimensionError: If the input length does not match the topology
        """
        return self.forward_activations(inputs)[-1].numpy().copy()

    # =========================================================================
    # WEIGHTS
    # =========================================================================

    def weights_snapshot(self) -> WeightStore:
        """Copy of every weight and bias."""
        return WeightStore(
            self.topology,
            [(layer.weight, layer.bias) for layer in self.layers],
        )

    def restore_weights(self, store: WeightStore) -> None:
        """
        Replace all weights with those in ``store``.

        Raises:
            TopologyMismatch: If the store was built for another topology.
                The current weights are left unchanged.
        """
        if store.topology != self.topology:
            raise TopologyMismatch(
                f"Cannot restore weights for {store.topology.layer_sizes} "
                f"into network {self.topology.layer_sizes}"
            )
        with torch.no_grad():
            for layer, (weight, bias) in zip(self.layers, store.layers):
                layer.weight.copy_(weight)
                layer.bias.copy_(bias)

    def serialize(self) -> str:
        """Encode all weights as a single line of text."""
        return serialize_weights(self.weights_snapshot())

    @staticmethod
    def deserialize(text: str) -> WeightStore:
        """
        Decode a line produced by ``serialize``.

        Raises:
            ParseError: If the text is malformed
            WeightFormatVersionError: If the text was written by another codec version
        """
        return deserialize_weights(text)

    # =========================================================================
    # INSPECTION
    # =========================================================================

    def get_layer_info(self) -> List[Dict]:
        """
        Get information about each layer for display.

        Returns:
            List of dicts with layer metadata
        """
        info = [{
            'name': 'Input',
            'neurons': self.topology.input_count,
            'type': 'input'
        }]

        for i, layer in enumerate(self.layers[:-1]):
            info.append({
                'name': f'Hidden {i + 1}',
                'neurons': layer.out_features,
                'type': 'hidden'
            })

        info.append({
            'name': 'Output',
            'neurons': self.topology.output_count,
            'type': 'output'
        })

        return info

    def get_weights(self) -> List[np.ndarray]:
        """Weight matrices as numpy arrays, input side first."""
        return [layer.weight.detach().cpu().numpy().copy() for layer in self.layers]

    def count_parameters(self) -> int:
        """Return total number of weights and biases."""
        return sum(p.numel() for p in self.parameters())

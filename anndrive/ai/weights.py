"""
Weight Storage
==============

Topology and flat parameter storage for the steering network, plus the
single-line text codec used for checkpoints.

Wire format (version 1):

    anndrive-weights/1;<inputs>,<outputs>,<hidden_layers>,<neurons>;<v0>,<v1>,...

Values are written layer by layer (input side first). Within a layer the
weight matrix comes first in row-major order (one row per neuron), followed
by the bias vector. Each value is the ``repr`` of a Python float, which
round-trips float64 exactly.
"""

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import torch

from .errors import ParseError, TopologyMismatch, WeightFormatVersionError


FORMAT_MAGIC = 'anndrive-weights'
FORMAT_VERSION = 1

FIELD_DELIMITER = ';'
VALUE_DELIMITER = ','

DTYPE = torch.float64


@dataclass(frozen=True)
class Topology:
    """
    Shape of a fully connected network.

    Example:
        >>> Topology(5, 2, 1, 10).layer_sizes
        [5, 10, 2]
    """
    input_count: int
    output_count: int
    hidden_layer_count: int
    neurons_per_hidden_layer: int

    def __post_init__(self):
        for name in ('input_count', 'output_count',
                     'hidden_layer_count', 'neurons_per_hidden_layer'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

    @property
    def layer_sizes(self) -> List[int]:
        """Neuron count of every layer, input layer included."""
        hidden = [self.neurons_per_hidden_layer] * self.hidden_layer_count
        return [self.input_count] + hidden + [self.output_count]

    @property
    def layer_shapes(self) -> List[Tuple[int, int]]:
        """(outputs, inputs) weight matrix shape of every trainable layer."""
        sizes = self.layer_sizes
        return [(sizes[i + 1], sizes[i]) for i in range(len(sizes) - 1)]

    @property
    def parameter_count(self) -> int:
        return sum(rows * cols + rows for rows, cols in self.layer_shapes)

    def header(self) -> str:
        return VALUE_DELIMITER.join(str(v) for v in (
            self.input_count, self.output_count,
            self.hidden_layer_count, self.neurons_per_hidden_layer,
        ))


class WeightStore:
    """
    All trainable parameters of a network as per-layer (weight, bias) pairs.

    A store always matches its topology: the constructor rejects layers whose
    shapes disagree with it. Stores never share tensors with a live network;
    ``Network.weights_snapshot`` and ``Network.restore_weights`` copy.
    """

    def __init__(self, topology: Topology, layers: Sequence[Tuple[torch.Tensor, torch.Tensor]]):
        shapes = topology.layer_shapes
        if len(layers) != len(shapes):
            raise TopologyMismatch(
                f"expected {len(shapes)} layers for {topology}, got {len(layers)}"
            )
        for index, ((weight, bias), (rows, cols)) in enumerate(zip(layers, shapes)):
            if tuple(weight.shape) != (rows, cols) or tuple(bias.shape) != (rows,):
                raise TopologyMismatch(
                    f"layer {index}: got weight {tuple(weight.shape)} / bias "
                    f"{tuple(bias.shape)}, expected ({rows}, {cols}) / ({rows},)"
                )
        self.topology = topology
        self.layers: List[Tuple[torch.Tensor, torch.Tensor]] = [
            (weight.detach().to(DTYPE).clone(), bias.detach().to(DTYPE).clone())
            for weight, bias in layers
        ]

    def __eq__(self, other) -> bool:
        if not isinstance(other, WeightStore):
            return NotImplemented
        if self.topology != other.topology:
            return False
        return all(
            torch.equal(w1, w2) and torch.equal(b1, b2)
            for (w1, b1), (w2, b2) in zip(self.layers, other.layers)
        )

    def __repr__(self):
        return f"<WeightStore {self.topology.layer_sizes} params={self.parameter_count}>"

    @property
    def parameter_count(self) -> int:
        return self.topology.parameter_count

    def copy(self) -> 'WeightStore':
        return WeightStore(self.topology, self.layers)

    def to_flat(self) -> List[float]:
        """Every parameter in wire order."""
        values: List[float] = []
        for weight, bias in self.layers:
            values.extend(weight.reshape(-1).tolist())
            values.extend(bias.tolist())
        return values

    @classmethod
    def from_flat(cls, topology: Topology, values: Sequence[float]) -> 'WeightStore':
        """Rebuild a store from values laid out in wire order."""
        if len(values) != topology.parameter_count:
            raise TopologyMismatch(
                f"{topology} needs {topology.parameter_count} values, got {len(values)}"
            )
        flat = torch.tensor(list(values), dtype=DTYPE)
        layers = []
        offset = 0
        for rows, cols in topology.layer_shapes:
            weight = flat[offset:offset + rows * cols].reshape(rows, cols)
            offset += rows * cols
            bias = flat[offset:offset + rows]
            offset += rows
            layers.append((weight, bias))
        return cls(topology, layers)


def serialize_weights(store: WeightStore) -> str:
    """Encode a store as a single line of text."""
    values = VALUE_DELIMITER.join(repr(float(v)) for v in store.to_flat())
    return FIELD_DELIMITER.join((
        f"{FORMAT_MAGIC}/{FORMAT_VERSION}",
        store.topology.header(),
        values,
    ))


def _parse_version(field: str) -> None:
    magic, sep, version = field.partition('/')
    if magic != FORMAT_MAGIC or not sep:
        raise ParseError(f"Not a serialized weight line (header {field!r})")
    if version != str(FORMAT_VERSION):
        raise WeightFormatVersionError(version)


def _parse_topology(field: str) -> Topology:
    parts = field.split(VALUE_DELIMITER)
    if len(parts) != 4:
        raise ParseError(f"Topology field needs 4 counts, got {field!r}")
    try:
        return Topology(*(int(p) for p in parts))
    except ValueError as e:
        raise ParseError(f"Invalid topology field {field!r}: {e}") from e


def _parse_values(field: str) -> List[float]:
    values = []
    for index, token in enumerate(field.split(VALUE_DELIMITER)):
        try:
            value = float(token)
        except ValueError:
            raise ParseError(f"Value {index} is not a number: {token!r}") from None
        if not math.isfinite(value):
            raise ParseError(f"Value {index} is not finite: {token!r}")
        values.append(value)
    return values


def deserialize_weights(text: str) -> WeightStore:
    """
    Decode a line produced by ``serialize_weights``.

    Raises:
        WeightFormatVersionError: The line was written by another codec version
        ParseError: The line is malformed
    """
    fields = text.strip().split(FIELD_DELIMITER)
    _parse_version(fields[0])
    if len(fields) != 3:
        raise ParseError(f"Expected 3 fields, got {len(fields)}")

    topology = _parse_topology(fields[1])
    values = _parse_values(fields[2])
    if len(values) != topology.parameter_count:
        raise ParseError(
            f"Topology {topology.layer_sizes} needs {topology.parameter_count} values, "
            f"got {len(values)}"
        )
    return WeightStore.from_flat(topology, values)

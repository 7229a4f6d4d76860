"""
AI Module
=========

Steering network, backpropagation and adaptive-rate training.

Classes:
    Network        - Feedforward sigmoid network with snapshot/restore
    WeightStore    - All trainable parameters, serializable to one line
    Trainer        - One backpropagation step per sample
    EpochScheduler - Epoch loop with rollback and learning rate adaptation
"""

from .errors import (
    NetworkError, DimensionError, TopologyMismatch, ParseError,
    WeightFormatVersionError, EmptyDatasetError,
)
from .weights import Topology, WeightStore, serialize_weights, deserialize_weights
from .network import Network
from .trainer import Trainer, TrainingSample
from .scheduler import EpochScheduler, EpochStats, TrainingMetrics, TrainingState

__all__ = [
    'Network', 'Topology', 'WeightStore', 'serialize_weights', 'deserialize_weights',
    'Trainer', 'TrainingSample',
    'EpochScheduler', 'EpochStats', 'TrainingMetrics', 'TrainingState',
    'NetworkError', 'DimensionError', 'TopologyMismatch', 'ParseError',
    'WeightFormatVersionError', 'EmptyDatasetError',
]

"""
Driving Module
==============

Connects the steering network to a host object.

Classes:
    DriveController - Frame-driven training and live steering
    SensorRig       - Interface a host implements for ray sensors
"""

from .controller import DriveController, DriveCommand, TrainingStatus, outputs_to_controls
from .sensors import SensorRig, SENSOR_DIRECTIONS, proximities
from .dataset import load_training_set, parse_sample_line, parse_training_lines
from .checkpoint import save_weights, load_weights
from .mapping import map_range, proximity

__all__ = [
    'DriveController', 'DriveCommand', 'TrainingStatus', 'outputs_to_controls',
    'SensorRig', 'SENSOR_DIRECTIONS', 'proximities',
    'load_training_set', 'parse_sample_line', 'parse_training_lines',
    'save_weights', 'load_weights', 'map_range', 'proximity',
]

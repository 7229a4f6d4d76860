"""
Sensor Interface
================

Abstract ray sensor rig that a host object implements so the controller can
read obstacle distances without knowing how rays are cast.

To attach the controller to a host:
1. Subclass SensorRig
2. Implement ray_distance() with the host's ray cast
3. Pass the rig to DriveController
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

import numpy as np

from .mapping import proximity


# Order matches the network inputs and the recorded training data
SENSOR_DIRECTIONS = ('forward', 'right', 'left', 'right45', 'left45')


class SensorRig(ABC):
    """
    Five ray sensors mounted on the host object.

    Methods:
        ray_distance(direction) -> Optional[float]
            Distance to the first hit along ``direction`` within
            ``visible_distance``, or None if the ray hits nothing
    """

    @abstractmethod
    def ray_distance(self, direction: str, visible_distance: float) -> Optional[float]:
        """
        Cast one ray.

        Args:
            direction: One of SENSOR_DIRECTIONS
            visible_distance: Maximum ray length

        Returns:
            Hit distance, or None without a hit
        """
        pass

    def read_distances(self, visible_distance: float) -> list:
        """Hit distances for every direction, in SENSOR_DIRECTIONS order."""
        return [self.ray_distance(d, visible_distance) for d in SENSOR_DIRECTIONS]


def proximities(distances: Sequence[Optional[float]], visible_distance: float) -> np.ndarray:
    """
    Convert hit distances into network inputs.

    Missing hits read 0; hits read their quantized proximity (see mapping.proximity).
    """
    return np.array(
        [0.0 if d is None else proximity(d, visible_distance) for d in distances],
        dtype=np.float64,
    )

"""
Drive Controller
================

Host-side driver that trains the steering network and then drives with it.

Lifecycle:
    1. start()  - Restore a checkpoint, or load the training set
    2. tick()   - One training epoch per host frame until training finishes,
                  then save a checkpoint
    3. drive()  - Each frame after training: read sensors, evaluate the
                  network, return the motion to apply

The controller never moves anything itself; the host applies the returned
DriveCommand to its object.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from config import Config
from anndrive.ai.errors import EmptyDatasetError, NetworkError
from anndrive.ai.network import Network
from anndrive.ai.scheduler import EpochScheduler, EpochStats
from anndrive.utils.logger import get_logger

from .checkpoint import load_weights, save_weights
from .dataset import load_training_set
from .mapping import map_range
from .sensors import SensorRig, proximities


logger = get_logger(__name__)


@dataclass
class TrainingStatus:
    """What the progress display shows."""
    sse: float
    alpha: float
    progress: float
    done: bool


@dataclass
class DriveCommand:
    """Motion for one frame."""
    translation: float
    rotation: float


def outputs_to_controls(outputs: Sequence[float]) -> Tuple[float, float]:
    """
    Map network outputs in [0, 1] to translation and rotation inputs in [-1, 1].

    Translation runs from 1 at output 0 down to -1 at output 1; rotation runs
    from -1 up to 1.
    """
    translation = map_range(1, -1, 0, 1, float(outputs[0]))
    rotation = map_range(-1, 1, 0, 1, float(outputs[1]))
    return translation, rotation


class DriveController:
    """
    Trains a steering network from recorded data and drives with it.

    Example:
        >>> controller = DriveController(Config(EPOCHS=500), sensors=rig)
        >>> controller.start()
        >>> while not controller.training_done:
        ...     controller.tick()
        >>> command = controller.drive(delta_time=1 / 60)
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        sensors: Optional[SensorRig] = None,
        network: Optional[Network] = None,
    ):
        """
        Initialize the controller.

        Args:
            config: Configuration object
            sensors: Sensor rig read by drive() when no distances are passed
            network: Network to use instead of building one from config
        """
        self.config = config or Config()
        self.sensors = sensors
        self.network = network or Network.from_config(self.config)
        self.scheduler: Optional[EpochScheduler] = None

        self.training_done = False
        self.loaded_from_file = False
        self._sse = self.config.INITIAL_SSE

    def start(self) -> None:
        """Restore saved weights or prepare training."""
        if self.config.LOAD_FROM_FILE and self._restore_checkpoint():
            self.loaded_from_file = True
            self.training_done = True
            return

        samples = load_training_set(self.config.TRAINING_DATA_PATH, self.config.INPUT_COUNT)
        try:
            self.scheduler = EpochScheduler(
                self.network,
                samples,
                max_epochs=self.config.EPOCHS,
                alpha_step=self.config.ALPHA_STEP,
                initial_sse=self.config.INITIAL_SSE,
                log_every=self.config.LOG_EVERY,
            )
        except EmptyDatasetError as e:
            logger.error(f"Cannot train: {e} in {self.config.TRAINING_DATA_PATH}")
            self.training_done = True
            return

        logger.info(
            f"Training {self.network.topology.layer_sizes} on {len(samples)} samples "
            f"for {self.config.EPOCHS} epochs"
        )

    def _restore_checkpoint(self) -> bool:
        try:
            return load_weights(self.network, self.config.WEIGHTS_PATH)
        except NetworkError as e:
            logger.warning(f"Ignoring checkpoint {self.config.WEIGHTS_PATH}: {e}")
            return False

    def tick(self) -> Optional[EpochStats]:
        """
        Advance training by one epoch.

        Returns:
            The epoch's statistics, or None when there is nothing to train
        """
        if self.training_done or self.scheduler is None:
            return None

        stats = self.scheduler.run_epoch()
        if stats is not None:
            self._sse = stats.last_accepted_sse

        if self.scheduler.is_converged:
            self._finish_training()
        return stats

    def stop(self) -> None:
        """Stop training after the current epoch."""
        if self.scheduler is not None:
            self.scheduler.stop()

    def _finish_training(self) -> None:
        self.training_done = True
        save_weights(self.network, self.config.WEIGHTS_PATH)

    def status(self) -> TrainingStatus:
        progress = self.scheduler.progress if self.scheduler is not None else 0.0
        return TrainingStatus(
            sse=self._sse,
            alpha=self.network.alpha,
            progress=progress,
            done=self.training_done,
        )

    def predict(self, sensor_inputs: Sequence[float]) -> Tuple[float, float]:
        """Translation and rotation inputs in [-1, 1] for one proximity vector."""
        return outputs_to_controls(self.network.forward(sensor_inputs))

    def drive(
        self,
        delta_time: float,
        distances: Optional[Sequence[Optional[float]]] = None,
    ) -> Optional[DriveCommand]:
        """
        Compute this frame's motion.

        Args:
            delta_time: Seconds since the previous frame
            distances: Ray hit distances in SENSOR_DIRECTIONS order
                (read from the sensor rig when omitted)

        Returns:
            The motion to apply, or None while training is still running
        """
        if not self.training_done:
            return None

        if distances is None:
            if self.sensors is None:
                raise ValueError("No distances given and no sensor rig attached")
            distances = self.sensors.read_distances(self.config.VISIBLE_DISTANCE)

        inputs: np.ndarray = proximities(distances, self.config.VISIBLE_DISTANCE)
        translation_input, rotation_input = self.predict(inputs)

        return DriveCommand(
            translation=translation_input * self.config.SPEED * delta_time,
            rotation=rotation_input * self.config.ROTATION_SPEED * delta_time,
        )

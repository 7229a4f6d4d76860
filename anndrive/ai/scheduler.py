"""
Epoch Scheduler
===============

Drives repeated sweeps over the training set with an adaptive learning rate:

    1. Snapshot the weights
    2. Train on every sample, accumulating squared error
    3. Normalize the error by the sample count
    4. Error did not improve: restore the snapshot and shrink alpha
       Error improved: keep the weights, grow alpha, remember the error

One call to ``run_epoch`` performs exactly one sweep, so a host can drive
training one epoch per frame or timer tick. Stop requests only take effect
between epochs, so the weights are never left half-updated.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

import numpy as np

from anndrive.utils.logger import get_logger, log_epoch_metrics

from .errors import EmptyDatasetError
from .network import Network
from .trainer import Trainer, TrainingSample


logger = get_logger(__name__)


class TrainingState(Enum):
    TRAINING = 'training'
    CONVERGED = 'converged'


@dataclass
class EpochStats:
    """Statistics for a single epoch."""
    epoch: int
    epoch_sse: float
    last_accepted_sse: float
    alpha: float
    accepted: bool
    progress: float
    samples: int
    duration: float


class TrainingMetrics:
    """
    Tracks epoch statistics over time.

    Metrics tracked:
        - Epoch errors
        - Best accepted error so far
        - Learning rate values
        - Accept/rollback decisions
    """

    def __init__(self, history_length: int = 1000):
        """
        Initialize metrics tracker.

        Args:
            history_length: Maximum history to store
        """
        self.history_length = history_length

        self.errors: List[float] = []
        self.accepted_errors: List[float] = []
        self.alphas: List[float] = []
        self.accepted: List[bool] = []
        self.durations: List[float] = []

    def __len__(self):
        return len(self.errors)

    def add(self, stats: EpochStats) -> None:
        """Add epoch statistics."""
        self.errors.append(stats.epoch_sse)
        self.accepted_errors.append(stats.last_accepted_sse)
        self.alphas.append(stats.alpha)
        self.accepted.append(stats.accepted)
        self.durations.append(stats.duration)

        # Trim to history length
        if len(self.errors) > self.history_length:
            for attr in ['errors', 'accepted_errors', 'alphas', 'accepted', 'durations']:
                setattr(self, attr, getattr(self, attr)[-self.history_length:])

    def get_recent_average(self, metric: str, n: int = 100) -> Optional[float]:
        """Get average of last n values for a metric, or None without history."""
        values = getattr(self, metric, [])
        if not values:
            return None
        return float(np.mean(values[-n:]))

    def best_sse(self) -> Optional[float]:
        """Lowest accepted error recorded."""
        return min(self.accepted_errors) if self.accepted_errors else None

    def acceptance_rate(self, n: int = 100) -> float:
        """Fraction of the last n epochs whose updates were kept."""
        if not self.accepted:
            return 0.0
        recent = self.accepted[-n:]
        return sum(recent) / len(recent)


class EpochScheduler:
    """
    Adaptive-rate training loop with per-epoch rollback.

    Example:
        >>> scheduler = EpochScheduler(net, samples, max_epochs=1000)
        >>> scheduler.run()
        >>> scheduler.last_accepted_sse, scheduler.alpha, scheduler.progress
    """

    def __init__(
        self,
        network: Network,
        samples: Sequence[TrainingSample],
        max_epochs: int,
        alpha_step: float = 0.001,
        initial_sse: float = 1.0,
        log_every: int = 100,
        history_length: int = 1000,
    ):
        """
        Initialize the scheduler.

        Args:
            network: Network to train; owned exclusively by this scheduler while training
            samples: Training samples, swept in the given order every epoch
            max_epochs: Epoch budget
            alpha_step: Learning rate change after each epoch
            initial_sse: Error the first epoch has to beat
            log_every: Log progress at INFO every N epochs
            history_length: Epochs of statistics to keep

        Raises:
            EmptyDatasetError: If ``samples`` is empty
            ValueError: If ``max_epochs`` is not positive
        """
        if max_epochs < 1:
            raise ValueError(f"max_epochs must be positive, got {max_epochs}")
        if not samples:
            raise EmptyDatasetError("No eligible training samples")

        self.network = network
        self.samples: List[TrainingSample] = list(samples)
        self.max_epochs = max_epochs
        self.alpha_step = alpha_step
        self.log_every = log_every

        self.trainer = Trainer(network)
        self.metrics = TrainingMetrics(history_length)

        self._last_accepted_sse = initial_sse
        self._epoch = 0
        self._state = TrainingState.TRAINING
        self._stop_requested = False

    # =========================================================================
    # OBSERVABLE STATE
    # =========================================================================

    @property
    def last_accepted_sse(self) -> float:
        return self._last_accepted_sse

    @property
    def alpha(self) -> float:
        return self.network.alpha

    @property
    def epoch(self) -> int:
        """Number of epochs completed."""
        return self._epoch

    @property
    def progress(self) -> float:
        """Fraction of the epoch budget consumed."""
        return self._epoch / self.max_epochs

    @property
    def state(self) -> TrainingState:
        return self._state

    @property
    def is_converged(self) -> bool:
        return self._state is TrainingState.CONVERGED

    # =========================================================================
    # CONTROL
    # =========================================================================

    def stop(self) -> None:
        """Request a stop. Takes effect before the next epoch starts."""
        self._stop_requested = True

    def run_epoch(self) -> Optional[EpochStats]:
        """
        Perform one full sweep and decide whether to keep it.

        Returns:
            Statistics of the epoch, or None if training has already finished

        An exception raised during the sweep restores the pre-epoch weights
        before it propagates; the epoch is not counted.
        """
        if self._state is TrainingState.CONVERGED:
            return None
        if self._stop_requested:
            self._finish('stop requested')
            return None

        start_time = time.time()
        snapshot = self.network.weights_snapshot()

        total_error = 0.0
        try:
            for sample in self.samples:
                predicted = self.trainer.train_one(sample)
                total_error += Trainer.sample_error(sample.targets, predicted)
        except BaseException:
            # Roll back a partial sweep, KeyboardInterrupt included
            self.network.restore_weights(snapshot)
            raise
        epoch_sse = total_error / len(self.samples)

        accepted = epoch_sse < self._last_accepted_sse
        if accepted:
            self.network.adjust_alpha(self.alpha_step)
            self._last_accepted_sse = epoch_sse
        else:
            self.network.restore_weights(snapshot)
            self.network.adjust_alpha(-self.alpha_step)

        self._epoch += 1
        stats = EpochStats(
            epoch=self._epoch,
            epoch_sse=epoch_sse,
            last_accepted_sse=self._last_accepted_sse,
            alpha=self.network.alpha,
            accepted=accepted,
            progress=self.progress,
            samples=len(self.samples),
            duration=time.time() - start_time,
        )
        self.metrics.add(stats)

        if self._epoch % self.log_every == 0 or self._epoch == 1:
            log_epoch_metrics(self._epoch, epoch_sse, stats.alpha, accepted,
                              progress=stats.progress, samples=stats.samples)
        elif not accepted:
            logger.debug(
                f"Epoch {self._epoch} rolled back (sse={epoch_sse:.6f} >= "
                f"{self._last_accepted_sse:.6f}), alpha={stats.alpha:.4f}"
            )

        if self._epoch >= self.max_epochs:
            self._finish('epoch budget exhausted')

        return stats

    def run(self, progress_callback: Optional[Callable[[EpochStats], None]] = None) -> TrainingMetrics:
        """
        Run epochs until the budget is exhausted or a stop is requested.

        Args:
            progress_callback: Called with the statistics of every epoch

        Returns:
            Training metrics
        """
        while True:
            stats = self.run_epoch()
            if stats is None:
                break
            if progress_callback:
                progress_callback(stats)
        return self.metrics

    def _finish(self, reason: str) -> None:
        self._state = TrainingState.CONVERGED
        logger.info(
            f"Training finished ({reason}) after {self._epoch} epochs | "
            f"sse={self._last_accepted_sse:.6f} | alpha={self.network.alpha:.4f} | "
            f"accepted={self.metrics.acceptance_rate(len(self.metrics) or 1) * 100:.1f}%"
        )

"""
Configuration file for the ANN steering driver
==============================================

Network topology, training schedule, driving and display settings are
centralized here. Modify these values to experiment with different setups.

Usage:
    from config import Config
    cfg = Config()
    print(cfg.INITIAL_ALPHA)
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import os


@dataclass
class Config:
    """
    Central configuration for the entire project.

    Sections:
    1. Neural Network - Topology
    2. Training - Learning rate schedule and epoch budget
    3. Driving - Sensor range and motion speeds
    4. Visualization - HUD options
    5. System - Paths, logging and seeding
    """

    # =========================================================================
    # NEURAL NETWORK ARCHITECTURE
    # =========================================================================

    # Five ray sensors: forward, right, left, right 45 degrees, left 45 degrees
    INPUT_COUNT: int = 5

    # Translation and rotation
    OUTPUT_COUNT: int = 2

    HIDDEN_LAYER_COUNT: int = 1
    NEURONS_PER_HIDDEN_LAYER: int = 10

    # =========================================================================
    # TRAINING HYPERPARAMETERS
    # =========================================================================

    # Starting learning rate. Values outside [ALPHA_MIN, ALPHA_MAX] are clamped
    # when the network is built.
    INITIAL_ALPHA: float = 0.00005

    # Learning rate bounds and the per-epoch adjustment step
    ALPHA_MIN: float = 0.01
    ALPHA_MAX: float = 0.9
    ALPHA_STEP: float = 0.001

    # Error an epoch has to beat before anything is accepted
    INITIAL_SSE: float = 1.0

    # Number of full sweeps over the training set
    EPOCHS: int = 50000

    # =========================================================================
    # DRIVING
    # =========================================================================

    # Ray cast length in world units
    VISIBLE_DISTANCE: float = 200.0

    # Motion speeds (units per second, degrees per second)
    SPEED: float = 50.0
    ROTATION_SPEED: float = 100.0

    # Skip training and drive with the saved weights
    LOAD_FROM_FILE: bool = False

    # =========================================================================
    # VISUALIZATION SETTINGS
    # =========================================================================

    HUD_ENABLED: bool = True
    HUD_ORIGIN: Tuple[int, int] = (25, 25)
    HUD_LINE_SPACING: int = 15
    HUD_FONT_SIZE: int = 20
    COLOR_BACKGROUND: Tuple[int, int, int] = (15, 15, 35)
    COLOR_TEXT: Tuple[int, int, int] = (255, 255, 255)

    SCREEN_WIDTH: int = 400
    SCREEN_HEIGHT: int = 120

    # Frames per second when training under the HUD (one epoch per frame)
    FPS: int = 60

    # =========================================================================
    # SYSTEM SETTINGS
    # =========================================================================

    # Paths
    DATA_DIR: str = 'data'
    TRAINING_DATA_FILE: str = 'trainingData2.txt'
    WEIGHTS_FILE: str = 'weights.txt'
    LOG_DIR: str = 'logs'

    # 'DEBUG', 'INFO', 'WARNING' or 'ERROR'
    LOG_LEVEL: str = 'INFO'

    # Log progress every N epochs (rejected epochs are logged at DEBUG)
    LOG_EVERY: int = 100

    # Random seed for weight initialization (None for random)
    SEED: Optional[int] = None

    @property
    def TRAINING_DATA_PATH(self) -> str:
        return os.path.join(self.DATA_DIR, self.TRAINING_DATA_FILE)

    @property
    def WEIGHTS_PATH(self) -> str:
        return os.path.join(self.DATA_DIR, self.WEIGHTS_FILE)

    def __post_init__(self):
        """Validation."""
        assert self.INPUT_COUNT > 0, "Input count must be positive"
        assert self.OUTPUT_COUNT > 0, "Output count must be positive"
        assert self.HIDDEN_LAYER_COUNT > 0, "Need at least one hidden layer"
        assert self.NEURONS_PER_HIDDEN_LAYER > 0, "Hidden layers need neurons"
        assert 0 < self.ALPHA_MIN <= self.ALPHA_MAX, "Alpha bounds must satisfy 0 < min <= max"
        assert self.ALPHA_STEP > 0, "Alpha step must be positive"
        assert self.EPOCHS > 0, "Epoch budget must be positive"
        assert self.VISIBLE_DISTANCE > 0, "Visible distance must be positive"
        assert self.LOG_EVERY > 0, "LOG_EVERY must be positive"
        assert self.LOG_LEVEL in ('DEBUG', 'INFO', 'WARNING', 'ERROR'), \
            f"Unknown log level {self.LOG_LEVEL}"


# Global config instance for easy importing
config = Config()


if __name__ == "__main__":
    cfg = Config()
    print("=" * 60)
    print("ANN Drive - Configuration Summary")
    print("=" * 60)
    print(f"\nNeural Network:")
    print(f"   Inputs: {cfg.INPUT_COUNT}")
    print(f"   Hidden: {cfg.HIDDEN_LAYER_COUNT} x {cfg.NEURONS_PER_HIDDEN_LAYER}")
    print(f"   Outputs: {cfg.OUTPUT_COUNT}")
    print(f"\nTraining:")
    print(f"   Alpha: {cfg.INITIAL_ALPHA} in [{cfg.ALPHA_MIN}, {cfg.ALPHA_MAX}] step {cfg.ALPHA_STEP}")
    print(f"   Epochs: {cfg.EPOCHS}")
    print(f"\nFiles:")
    print(f"   Training data: {cfg.TRAINING_DATA_PATH}")
    print(f"   Weights: {cfg.WEIGHTS_PATH}")
    print("=" * 60)

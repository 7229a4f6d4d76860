"""
ANN Drive - Source Package
==========================

Sensor-driven steering for a game object, learned by a small neural network
from recorded driving samples.

Modules:
    ai/         - Network, backpropagation and the epoch scheduler
    driving/    - Training data, sensors and the frame-driven controller
    visualizer/ - Training progress overlay
    utils/      - Logging
"""

__version__ = "1.0.0"

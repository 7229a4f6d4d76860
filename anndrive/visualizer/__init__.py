"""
Visualizer Module
=================

Classes:
    TrainingHUD - On-screen training statistics overlay
"""

from .hud import TrainingHUD

__all__ = ['TrainingHUD']

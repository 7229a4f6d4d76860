#!/usr/bin/env python3
"""
ANN Drive - Main Entry Point
============================

Trains the steering network from recorded driving data, saves the weights,
and optionally evaluates a sensor reading with the trained network.

Usage:
    # Train headless from data/trainingData2.txt, save data/weights.txt
    python main.py

    # Train with the progress HUD (one epoch per frame)
    python main.py --hud

    # Short run with a fixed seed
    python main.py --epochs 500 --seed 42

    # Skip training, load saved weights and steer for one reading
    python main.py --load --predict 1 0.5 0 0 0.5

Press ESC or close the HUD window to stop training after the current epoch.
"""

# Suppress pygame's pkg_resources deprecation warning (pygame issue #4557)
import warnings
warnings.filterwarnings("ignore", category=UserWarning, module="pygame.pkgdata")

import argparse
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import Config
from anndrive.driving.controller import DriveController
from anndrive.utils.logger import LogLevel, get_log_path, get_logger, setup_logging


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Train a steering network from recorded driving samples',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        '--data', type=str, default=None, metavar='PATH',
        help='Training data file (default: data/trainingData2.txt)'
    )
    parser.add_argument(
        '--weights', type=str, default=None, metavar='PATH',
        help='Weights file to load/save (default: data/weights.txt)'
    )
    parser.add_argument(
        '--epochs', type=int, default=None,
        help='Number of training epochs'
    )
    parser.add_argument(
        '--load', action='store_true',
        help='Load saved weights instead of training'
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Seed for weight initialization'
    )
    parser.add_argument(
        '--hud', action='store_true',
        help='Show the training HUD window'
    )
    parser.add_argument(
        '--predict', type=float, nargs=5, default=None,
        metavar=('FWD', 'RIGHT', 'LEFT', 'RIGHT45', 'LEFT45'),
        help='Sensor proximities to steer for after training'
    )
    parser.add_argument(
        '--log-level', type=str, default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging verbosity'
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Config:
    """Apply command line overrides to the default configuration."""
    config = Config()
    # Absolute file names take precedence over DATA_DIR in the path properties
    if args.data:
        config.TRAINING_DATA_FILE = os.path.abspath(args.data)
    if args.weights:
        config.WEIGHTS_FILE = os.path.abspath(args.weights)
    if args.epochs is not None:
        config.EPOCHS = args.epochs
    if args.seed is not None:
        config.SEED = args.seed
    if args.log_level:
        config.LOG_LEVEL = args.log_level
    config.LOAD_FROM_FILE = args.load
    config.__post_init__()
    return config


def train_headless(controller: DriveController) -> None:
    """Run epochs back to back until training finishes."""
    try:
        while not controller.training_done:
            controller.tick()
    except KeyboardInterrupt:
        get_logger(__name__).warning("Interrupted, stopping after the current epoch")
        controller.stop()
        controller.tick()


def train_with_hud(controller: DriveController, config: Config) -> None:
    """Run one epoch per frame while drawing the HUD."""
    import pygame
    from anndrive.visualizer.hud import TrainingHUD

    pygame.init()
    screen = pygame.display.set_mode((config.SCREEN_WIDTH, config.SCREEN_HEIGHT))
    pygame.display.set_caption("ANN Drive - Training")
    clock = pygame.time.Clock()
    hud = TrainingHUD(config)

    try:
        while not controller.training_done:
            for event in pygame.event.get():
                if event.type == pygame.QUIT or (
                        event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE):
                    controller.stop()

            controller.tick()

            screen.fill(config.COLOR_BACKGROUND)
            hud.render(screen, controller.status())
            pygame.display.flip()
            clock.tick(config.FPS)
    finally:
        pygame.quit()


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    config = build_config(args)

    setup_logging(log_dir=config.LOG_DIR, level=LogLevel[config.LOG_LEVEL])
    logger = get_logger(__name__)
    log_path = get_log_path()
    if log_path is not None:
        logger.info(f"Logging to {log_path}")

    controller = DriveController(config)
    controller.start()

    if args.hud:
        train_with_hud(controller, config)
    else:
        train_headless(controller)

    status = controller.status()
    logger.info(f"SSE: {status.sse} | Alpha: {status.alpha} | Trained: {status.progress}")

    if args.predict is not None:
        translation, rotation = controller.predict(args.predict)
        print(f"translation={translation:.4f} rotation={rotation:.4f}")


if __name__ == "__main__":
    main()

"""
Tests for the command line entry point.
"""

import logging
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import main
from config import Config
from anndrive.ai.network import Network
from anndrive.ai.trainer import Trainer
from anndrive.driving.controller import DriveController
from anndrive.utils import logger as logger_module
from anndrive.utils.logger import LogLevel


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / 'samples.txt'
    path.write_text("1,0.5,0,0,0.5,-0.5,0.5\n0,0,0,0,0,1,0.25\n1,1,1,1,1,0,0\n")
    return path


class TestBuildConfig:
    """Test command line overrides."""

    def test_defaults(self):
        config = main.build_config(main.parse_args([]))
        assert config.EPOCHS == 50000
        assert not config.LOAD_FROM_FILE
        assert config.WEIGHTS_PATH == os.path.join('data', 'weights.txt')

    def test_overrides(self, tmp_path):
        args = main.parse_args([
            '--data', str(tmp_path / 'd.txt'), '--weights', str(tmp_path / 'w.txt'),
            '--epochs', '7', '--seed', '3', '--load', '--log-level', 'DEBUG',
        ])
        config = main.build_config(args)
        assert config.TRAINING_DATA_PATH == str(tmp_path / 'd.txt')
        assert config.WEIGHTS_PATH == str(tmp_path / 'w.txt')
        assert config.EPOCHS == 7
        assert config.SEED == 3
        assert config.LOAD_FROM_FILE
        assert config.LOG_LEVEL == 'DEBUG'

    def test_invalid_epochs(self):
        with pytest.raises(AssertionError):
            main.build_config(main.parse_args(['--epochs', '0']))

    def test_predict_needs_five_values(self):
        with pytest.raises(SystemExit):
            main.parse_args(['--predict', '1', '0'])


class TestMain:
    """End-to-end runs without the HUD."""

    def test_train_then_load(self, tmp_path, data_file, capsys):
        weights = tmp_path / 'weights.txt'
        common = ['--data', str(data_file), '--weights', str(weights)]

        main.main(common + ['--epochs', '4', '--seed', '1', '--predict', '1', '0.5', '0', '0', '0.5'])
        trained = capsys.readouterr().out.strip()
        assert weights.exists()
        assert trained.startswith('translation=')

        main.main(common + ['--load', '--seed', '2', '--predict', '1', '0.5', '0', '0', '0.5'])
        assert capsys.readouterr().out.strip() == trained

    def test_missing_data(self, tmp_path):
        weights = tmp_path / 'weights.txt'
        main.main(['--data', str(tmp_path / 'none.txt'), '--weights', str(weights), '--epochs', '3'])
        assert not weights.exists()


class TestInterrupt:
    """Ctrl-C during headless training."""

    def test_saves_last_committed_weights(self, tmp_path, data_file, monkeypatch):
        config = Config(EPOCHS=10, SEED=3, INITIAL_ALPHA=0.3)
        config.TRAINING_DATA_FILE = str(data_file)
        config.WEIGHTS_FILE = str(tmp_path / 'weights.txt')
        controller = DriveController(config)
        controller.start()
        controller.tick()
        committed = controller.network.weights_snapshot()

        original = Trainer.train_one
        calls = []

        def interrupt_second_sample(self, sample):
            calls.append(sample)
            if len(calls) == 2:
                raise KeyboardInterrupt
            return original(self, sample)

        monkeypatch.setattr(Trainer, 'train_one', interrupt_second_sample)
        main.train_headless(controller)

        assert controller.training_done
        assert controller.scheduler.epoch == 1
        with open(config.WEIGHTS_PATH) as f:
            assert Network.deserialize(f.readline()) == committed


class TestLogging:
    """Logging settings reach the log system."""

    @pytest.fixture
    def unconfigured(self, tmp_path, monkeypatch):
        """Logging as it is before the application configures it."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(logger_module, '_initialized', False)
        monkeypatch.setattr(logger_module, '_auto_configured', False)
        yield tmp_path
        logger_module.setup_logging(console_output=False, file_output=False, force=True)

    def test_log_level_and_file(self, unconfigured, data_file):
        main.main([
            '--data', str(data_file), '--weights', str(unconfigured / 'w.txt'),
            '--epochs', '3', '--log-level', 'WARNING',
        ])

        assert logging.getLogger('anndrive').level == logging.WARNING
        log_files = list((unconfigured / 'logs').glob('training_*.log'))
        assert len(log_files) == 1
        assert logger_module.get_log_path().resolve() == log_files[0].resolve()

    def test_module_loggers_do_not_lock_configuration(self, unconfigured):
        logger_module.get_logger('anndrive.driving.controller')
        assert logging.getLogger('anndrive').level == logging.INFO

        logger_module.setup_logging(level=LogLevel.ERROR, console_output=False, file_output=False)
        assert logging.getLogger('anndrive').level == logging.ERROR


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

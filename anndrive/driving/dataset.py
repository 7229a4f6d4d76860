"""
Training Data
=============

Reads recorded driving samples.

Each line holds comma-separated numbers: the sensor readings followed by the
two raw control values (translation, rotation) in [-1, 1]:

    fwd,right,left,right45,left45,translation,rotation

A line only becomes a training sample when both control values are non-zero;
a zero means no maneuver was recorded for that frame. Control values are
mapped from [-1, 1] to [0, 1] to match the network's sigmoid outputs.
"""

import math
import os
from typing import Iterable, List, Optional

from anndrive.ai.errors import ParseError
from anndrive.ai.trainer import TrainingSample
from anndrive.utils.logger import get_logger

from .mapping import map_range


CONTROL_COUNT = 2

logger = get_logger(__name__)


def is_recorded_maneuver(translation: float, rotation: float) -> bool:
    """True unless either control value carries the "nothing recorded" zero."""
    return translation != 0 and rotation != 0


def control_to_target(value: float) -> float:
    return float(map_range(0, 1, -1, 1, value))


def parse_sample_line(line: str, input_count: int = 5, line_number: Optional[int] = None) -> Optional[TrainingSample]:
    """
    Parse one recorded line.

    Args:
        line: Comma-separated sensor readings and control values
        input_count: Number of sensor readings expected before the controls
        line_number: Reported in errors (1-based)

    Returns:
        The training sample, or None for blank lines and lines without a maneuver

    Raises:
        ParseError: If the line has the wrong number of fields or a non-numeric
            or non-finite field
    """
    where = f"line {line_number}" if line_number is not None else "line"
    text = line.strip()
    if not text:
        return None

    fields = text.split(',')
    expected = input_count + CONTROL_COUNT
    if len(fields) != expected:
        raise ParseError(f"{where}: expected {expected} fields, got {len(fields)}")
    try:
        values = [float(f) for f in fields]
    except ValueError as e:
        raise ParseError(f"{where}: {e}") from e
    if not all(math.isfinite(v) for v in values):
        raise ParseError(f"{where}: non-finite value in {text!r}")

    translation, rotation = values[input_count:]
    if not is_recorded_maneuver(translation, rotation):
        return None

    return TrainingSample(
        inputs=tuple(values[:input_count]),
        targets=(control_to_target(translation), control_to_target(rotation)),
    )


def parse_training_lines(lines: Iterable[str], input_count: int = 5) -> List[TrainingSample]:
    """Parse every line, keeping only recorded maneuvers, in file order."""
    samples = []
    skipped = 0
    for number, line in enumerate(lines, start=1):
        sample = parse_sample_line(line, input_count, number)
        if sample is None:
            if line.strip():
                skipped += 1
            continue
        samples.append(sample)
    if skipped:
        logger.debug(f"Skipped {skipped} lines without a recorded maneuver")
    return samples


def load_training_set(path: str, input_count: int = 5) -> List[TrainingSample]:
    """
    Load training samples from a file.

    A missing file yields an empty list.

    Raises:
        ParseError: If a line is malformed
    """
    if not os.path.exists(path):
        logger.warning(f"Training data not found: {path}")
        return []

    with open(path, 'r', encoding='utf-8') as f:
        samples = parse_training_lines(f, input_count)

    logger.info(f"Loaded {len(samples)} training samples from {path}")
    return samples

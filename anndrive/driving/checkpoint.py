"""
Weight Checkpoints
==================

Saves and loads the single-line weight encoding to a text file.
"""

import os

from anndrive.ai.network import Network
from anndrive.utils.logger import log_model_event


def save_weights(network: Network, path: str) -> None:
    """Write the network's serialized weights as one line, creating the directory if needed."""
    dir_path = os.path.dirname(path)
    if dir_path:
        os.makedirs(dir_path, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        f.write(network.serialize())
        f.write('\n')

    log_model_event('save', path, params=network.count_parameters(), alpha=f"{network.alpha:.4f}")


def load_weights(network: Network, path: str) -> bool:
    """
    Restore weights saved by ``save_weights``.

    Returns:
        False if there is no checkpoint at ``path``, True once restored

    Raises:
        ParseError: If the file content is malformed
        TopologyMismatch: If the checkpoint was saved for another topology
    """
    if not os.path.exists(path):
        log_model_event('skip', path, reason='no checkpoint')
        return False

    with open(path, 'r', encoding='utf-8') as f:
        line = f.readline()

    network.restore_weights(Network.deserialize(line))
    log_model_event('load', path, params=network.count_parameters())
    return True

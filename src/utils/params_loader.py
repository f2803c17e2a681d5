from src.utils.exceptions import InvalidConfigurationError, ResourceUnavailableError

from dataclasses import dataclass
from typing import Sequence

import os
import logging
import numpy as np


NUM_REQUIRED_PARAMS = 4
VALID_STRATEGIES = range(1, 6)


@dataclass(frozen=True)
class NetworkParameters:
    num_nodes: int
    packet_size_bytes: float
    simulation_time_ms: float
    strategy: int


def validate_network_parameters(values: Sequence[float]) -> None:
    """
    Validates a raw sequence of network parameters.

    Only the first four values are considered: number of nodes, packet size
    (bytes), simulation time (ms) and backoff strategy. Extra values are ignored.

    Args:
        values (Sequence[float]): The raw parameters.

    Raises:
        InvalidConfigurationError: If a parameter is missing, non-positive or out of range.
    """
    if len(values) < NUM_REQUIRED_PARAMS:
        raise InvalidConfigurationError(
            f"Expected {NUM_REQUIRED_PARAMS} parameters (number of nodes, packet size, simulation time, backoff strategy), got {len(values)}."
        )

    num_nodes, packet_size_bytes, simulation_time_ms, strategy = (
        float(v) for v in values[:NUM_REQUIRED_PARAMS]
    )

    named_values = {
        "number of nodes": num_nodes,
        "packet size": packet_size_bytes,
        "simulation time": simulation_time_ms,
        "backoff strategy": strategy,
    }
    for name, value in named_values.items():
        if not np.isfinite(value):
            raise InvalidConfigurationError(f"Invalid {name}: {value}. It must be finite.")
        if value <= 0:
            raise InvalidConfigurationError(f"Invalid {name}: {value}. It must be positive.")

    if not num_nodes.is_integer():
        raise InvalidConfigurationError(
            f"Invalid number of nodes: {num_nodes}. It must be an integer."
        )

    if not strategy.is_integer() or int(strategy) not in VALID_STRATEGIES:
        raise InvalidConfigurationError(
            f"Invalid backoff strategy: {strategy}. It must be an integer between {VALID_STRATEGIES.start} and {VALID_STRATEGIES.stop - 1}."
        )


def parse_network_parameters(values: Sequence[float]) -> NetworkParameters:
    """
    Validates a raw sequence of network parameters and builds NetworkParameters from it.

    Args:
        values (Sequence[float]): The raw parameters.

    Returns:
        NetworkParameters: The validated parameters.

    Raises:
        InvalidConfigurationError: If the parameters are not valid.
    """
    validate_network_parameters(values)

    num_nodes, packet_size_bytes, simulation_time_ms, strategy = (
        float(v) for v in values[:NUM_REQUIRED_PARAMS]
    )
    return NetworkParameters(
        num_nodes=int(num_nodes),
        packet_size_bytes=packet_size_bytes,
        simulation_time_ms=simulation_time_ms,
        strategy=int(strategy),
    )


def read_network_parameters(
    filepath: str, logger: logging.Logger = None
) -> NetworkParameters:
    """
    Reads the network parameters from a whitespace separated numeric file.

    Args:
        filepath (str): Path to the parameters file.
        logger (logging.Logger, optional): Logger used to report the loaded parameters. Defaults to None.

    Returns:
        NetworkParameters: The validated parameters.

    Raises:
        ResourceUnavailableError: If the file cannot be read or does not contain a numeric stream.
        InvalidConfigurationError: If the parameters are not valid.
    """
    if not os.path.isfile(filepath):
        raise ResourceUnavailableError(f"Parameters file '{filepath}' not found.")

    try:
        with open(filepath, "r") as file:
            content = file.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceUnavailableError(
            f"Parameters file '{filepath}' could not be read: {e}"
        ) from e

    try:
        values = np.array(content.split(), dtype=float)
    except ValueError as e:
        raise ResourceUnavailableError(
            f"Parameters file '{filepath}' is not a numeric stream: {e}"
        ) from e

    params = parse_network_parameters(values)

    if logger:
        logger.info(
            f"Loaded parameters from '{filepath}' -> Nodes: {params.num_nodes}, Packet size: {params.packet_size_bytes:g} bytes, Simulation time: {params.simulation_time_ms:g} ms, Strategy: {params.strategy}"
        )

    return params

from src.sim_params import SimParams as sparams
from src.user_config import UserConfig as cfg

from src.sim_config import SimulationConfig
from src.utils.event_logger import get_logger
from src.utils.file_manager import get_unique_filename

import numpy as np
import pandas as pd
import simpy
import json
import os


EVENT_HISTORY_COLUMNS = ["timestamp_us", "outcome", "num_nodes_involved", "backoff_us", "cw"]


class SimulationStats:
    def __init__(self, num_nodes: int, cw_min: int, record_history: bool = False):
        self.iterations = 0
        self.total_time_us = 0.0
        self.successful_time_us = 0.0

        self.successes = 0
        self.collisions = 0
        self.collided_nodes = 0  # Nodes involved in collisions (a node can be counted more than once)

        self.successes_per_node = [0] * num_nodes
        self.collisions_per_node = [0] * num_nodes

        self.max_cw = cw_min
        self.cw_sum = 0  # Sum of the contention window after each event

        self.record_history = record_history
        self.event_history = []

    @property
    def total_time_s(self) -> float:
        return self.total_time_us / 1e6

    @property
    def successful_time_s(self) -> float:
        return self.successful_time_us / 1e6

    def add_success(self, node: int, packet_tx_time_us: float):
        self.successes += 1
        self.successful_time_us += packet_tx_time_us
        self.successes_per_node[node] += 1

    def add_collision(self, nodes: list[int]):
        self.collisions += 1
        self.collided_nodes += len(nodes)
        for node in nodes:
            self.collisions_per_node[node] += 1

    def add_iteration(self, packet_tx_time_us: float, cw: int):
        self.iterations += 1
        self.total_time_us += packet_tx_time_us
        self.cw_sum += cw
        self.max_cw = max(self.max_cw, cw)

    def add_to_event_history(
        self, timestamp_us: float, outcome: str, nodes: list[int], backoff_us: int, cw: int
    ):
        if not self.record_history:
            return
        self.event_history.append(
            {
                "timestamp_us": timestamp_us,
                "outcome": outcome,
                "num_nodes_involved": len(nodes),
                "backoff_us": backoff_us,
                "cw": cw,
            }
        )

    def get_event_history(self) -> pd.DataFrame:
        return pd.DataFrame(self.event_history, columns=EVENT_HISTORY_COLUMNS)

    def __eq__(self, other):
        if not isinstance(other, SimulationStats):
            return NotImplemented
        return self.to_dict() == other.to_dict() and self.event_history == other.event_history

    def to_dict(self) -> dict:
        return {
            "iterations": self.iterations,
            "total_time_us": self.total_time_us,
            "successful_time_us": self.successful_time_us,
            "successes": self.successes,
            "collisions": self.collisions,
            "collided_nodes": self.collided_nodes,
            "successes_per_node": list(self.successes_per_node),
            "collisions_per_node": list(self.collisions_per_node),
            "max_cw": self.max_cw,
        }

    def __repr__(self):
        return f"{self.__class__.__name__}(iterations={self.iterations}, total_time_us={self.total_time_us}, successful_time_us={self.successful_time_us})"


def compute_utilization(stats: SimulationStats) -> float:
    """Fraction of the simulated time spent in successful transmissions."""
    if stats.total_time_us <= 0:
        return 0.0
    return stats.successful_time_us / stats.total_time_us


def compute_jain_fairness(values: list[float]) -> float:
    """
    Jain's fairness index of a list of non-negative values.

    Returns 1 when all values are equal and 1/n when a single element holds
    everything. An all-zero input is considered fair.
    """
    x = np.asarray(values, dtype=float)
    if x.size == 0 or not np.any(x):
        return 1.0
    return float(x.sum() ** 2 / (x.size * np.square(x).sum()))


class ResultsAggregator:
    def __init__(
        self,
        cfg: cfg,
        sparams: sparams,
        config: SimulationConfig,
        stats: SimulationStats,
        env: simpy.Environment = None,
    ):
        self.cfg = cfg
        self.sparams = sparams

        self.config = config
        self.stats = stats

        self.utilization = 0.0
        self.collision_ratio = 0.0
        self.throughput_Mbits_per_sec = 0.0
        self.avg_cw = 0.0
        self.fairness_index = 1.0

        self.event_history = pd.DataFrame(columns=EVENT_HISTORY_COLUMNS)

        self.name = "STATS"
        self.logger = get_logger(self.name, cfg, sparams, env)

    def collect_stats(self) -> float:
        """Reduces the accumulated counters into summary statistics and returns the utilization."""
        stats = self.stats

        self.utilization = compute_utilization(stats)
        self.collision_ratio = (
            stats.collisions / stats.iterations if stats.iterations > 0 else 0
        )
        self.throughput_Mbits_per_sec = (
            stats.successes * self.config.packet_size_bytes * 8 / stats.total_time_us
            if stats.total_time_us > 0
            else 0
        )
        self.avg_cw = stats.cw_sum / stats.iterations if stats.iterations > 0 else 0
        self.fairness_index = compute_jain_fairness(stats.successes_per_node)

        if stats.record_history:
            self.event_history = stats.get_event_history()

        self.logger.info(
            f"Iterations: {stats.iterations}, Successes: {stats.successes}, Collisions: {stats.collisions}, Utilization: {self.utilization:.4f}"
        )

        if self.cfg.ENABLE_STATS_COLLECTION:
            self.save_stats()

        return self.utilization

    def summary(self) -> dict:
        return {
            "config": {
                "num_nodes": self.config.num_nodes,
                "packet_size_bytes": self.config.packet_size_bytes,
                "simulation_time_us": self.config.simulation_time_us,
                "strategy": int(self.config.strategy),
                "data_rate_bps": self.config.data_rate_bps,
                "slot_time_us": self.config.slot_time_us,
                "cw_min": self.config.cw_min,
            },
            "global_stats": {
                **self.stats.to_dict(),
                "utilization": self.utilization,
                "collision_ratio": self.collision_ratio,
                "throughput_Mbits_per_sec": self.throughput_Mbits_per_sec,
                "avg_cw": self.avg_cw,
                "fairness_index": self.fairness_index,
            },
        }

    def save_stats(self) -> str:
        """Save statistics to JSON."""
        os.makedirs(self.cfg.STATS_SAVE_PATH, exist_ok=True)

        filepath = get_unique_filename(self.cfg.STATS_SAVE_PATH, "session_stats", "json")

        with open(filepath, "w") as f:
            json.dump(self.summary(), f, indent=4)

        self.logger.info(f"Statistics saved to {filepath}")
        return filepath

    def display_stats(self):
        """Print a summary of the simulation statistics."""
        stats = self.stats
        print("\033[93m" + "Simulation Statistics Summary:" + "\033[0m")
        print(f"Iterations: {stats.iterations}")
        print(f"Total Simulated Time: {stats.total_time_us:.2f} µs")
        print(
            f"Successful Transmission Time: {stats.successful_time_us:.2f} µs ({self.utilization:.2%})"
        )
        print(f"Successful Transmissions: {stats.successes}")
        print(
            f"Collisions: {stats.collisions} ({self.collision_ratio:.2%} of the events, {stats.collided_nodes} nodes involved)"
        )
        print(f"Throughput: {self.throughput_Mbits_per_sec:.3f} Mbps")
        print(f"Average CW: {self.avg_cw:.2f}, Max CW: {stats.max_cw}")
        print(f"Jain's Fairness Index: {self.fairness_index:.4f}")

        print("\033[93m" + "\nPer-Node Stats:" + "\033[0m")
        for node, (successes, collisions) in enumerate(
            zip(stats.successes_per_node, stats.collisions_per_node)
        ):
            print(f"  Node {node}: Successes: {successes}, Collisions: {collisions}")


def format_results(
    num_nodes: int,
    packet_size_bytes: float,
    simulation_time_s: float,
    strategy: int,
    utilization: float,
) -> str:
    return (
        f"Number of Nodes: {num_nodes} ; Packet Size: {packet_size_bytes:g} ; "
        f"Simulation Time(s): {simulation_time_s:g} ; Backoff Strategy: {int(strategy)} ; "
        f"Network Utilization: {utilization:.4f}"
    )


def display_results(
    num_nodes: int,
    packet_size_bytes: float,
    simulation_time_s: float,
    strategy: int,
    utilization: float,
):
    print(
        format_results(
            num_nodes, packet_size_bytes, simulation_time_s, strategy, utilization
        )
    )

from src.user_config import UserConfig as cfg
from src.sim_params import SimParams as sparams

from src.sim_config import SimulationConfig
from src.components.engine import run_simulation
from src.utils.event_logger import get_logger

from tqdm import tqdm

import concurrent.futures
import pandas as pd
import os


SWEEP_COLUMNS = [
    "strategy",
    "num_nodes",
    "seed",
    "utilization",
    "iterations",
    "successes",
    "collisions",
    "max_cw",
]


def run_sweep_point(
    config: SimulationConfig, cfg: cfg = cfg, sparams: sparams = sparams, seed: int = None
) -> dict:
    """Runs a single simulation of the sweep with its own state and random generator."""
    utilization, stats = run_simulation(config, cfg, sparams, seed=seed)
    return {
        "strategy": int(config.strategy),
        "num_nodes": config.num_nodes,
        "seed": seed,
        "utilization": utilization,
        "iterations": stats.iterations,
        "successes": stats.successes,
        "collisions": stats.collisions,
        "max_cw": stats.max_cw,
    }


def build_sweep_configs(
    sparams: sparams,
    node_counts: list[int],
    strategies: list[int],
    packet_size_bytes: float,
    simulation_time_ms: float,
) -> list[SimulationConfig]:
    return [
        SimulationConfig(
            num_nodes=n,
            packet_size_bytes=packet_size_bytes,
            simulation_time_us=simulation_time_ms * 1e3,
            strategy=strategy,
            data_rate_bps=sparams.DATA_RATE_bps,
            slot_time_us=sparams.SLOT_TIME_us,
            cw_min=sparams.CW_MIN,
            backoff_unit_us=sparams.BACKOFF_UNIT_us,
        )
        for strategy in strategies
        for n in node_counts
    ]


def run_strategy_sweep(
    cfg: cfg,
    sparams: sparams,
    node_counts: list[int],
    strategies: list[int],
    packet_size_bytes: float,
    simulation_time_ms: float,
    seed: int = None,
    max_workers: int = None,
) -> pd.DataFrame:
    """
    Runs every backoff strategy for every number of nodes.

    Each simulation uses an independent configuration, state and random
    generator. With a base seed, the i-th simulation is seeded with seed + i so
    that the sweep is reproducible whatever the number of workers.

    Args:
        cfg (cfg): The UserConfig object.
        sparams (sparams): The SimParams object.
        node_counts (list[int]): Numbers of nodes to simulate.
        strategies (list[int]): Backoff strategies to simulate.
        packet_size_bytes (float): Packet size in bytes.
        simulation_time_ms (float): Duration of every simulation in milliseconds.
        seed (int, optional): Base seed. Defaults to None.
        max_workers (int, optional): Number of worker processes. If 1, simulations run sequentially in this process. Defaults to half of the CPU cores.

    Returns:
        pd.DataFrame: One row per simulation, sorted by strategy and number of nodes.
    """
    logger = get_logger("SWEEP", cfg, sparams)

    configs = build_sweep_configs(
        sparams, node_counts, strategies, packet_size_bytes, simulation_time_ms
    )
    seeds = [seed + i if seed is not None else None for i in range(len(configs))]

    if max_workers is None:
        max_workers = max(1, (os.cpu_count() or 2) // 2)

    logger.info(
        f"Running {len(configs)} simulations ({len(strategies)} strategies x {len(node_counts)} node counts) with {max_workers} worker(s)..."
    )

    rows = []
    if max_workers == 1:
        for config, point_seed in tqdm(zip(configs, seeds), total=len(configs)):
            rows.append(run_sweep_point(config, cfg, sparams, point_seed))
    else:
        with concurrent.futures.ProcessPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(run_sweep_point, config, cfg, sparams, point_seed)
                for config, point_seed in zip(configs, seeds)
            ]
            for future in tqdm(
                concurrent.futures.as_completed(futures), total=len(futures)
            ):
                rows.append(future.result())

    results = (
        pd.DataFrame(rows, columns=SWEEP_COLUMNS)
        .sort_values(["strategy", "num_nodes"])
        .reset_index(drop=True)
    )

    logger.success(f"Strategy sweep completed ({len(results)} simulations).")
    return results

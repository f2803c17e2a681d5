from src.user_config import UserConfig as cfg
from src.sim_params import SimParams as sparams

from src.sim_config import SimulationConfig
from src.components.backoff import BackoffStrategy
from src.components.engine import ContentionSimulator
from src.utils.exceptions import InvalidConfigurationError
from src.utils.params_loader import NetworkParameters

import os
import simpy
import random
import logging


VALID_MODULES = ["ENGINE", "PARAMS", "STATS", "SWEEP", "PLOTTER"]
VALID_LOG_LEVELS = ["HEADER", "DEBUG", "DEFAULT", "INFO", "SUCCESS", "WARNING", "ALL"]


def _invalid(logger: logging.Logger, message: str):
    logger.error(message)
    raise InvalidConfigurationError(message)


def validate_params(sparams: sparams, logger: logging.Logger):
    if (
        not isinstance(sparams.DATA_RATE_bps, (int, float))
        or isinstance(sparams.DATA_RATE_bps, bool)
        or sparams.DATA_RATE_bps <= 0
    ):
        _invalid(
            logger,
            f"Invalid DATA_RATE_bps: {sparams.DATA_RATE_bps}. It must be a positive number.",
        )

    positive_int_params = {
        "SLOT_TIME_us": sparams.SLOT_TIME_us,
        "CW_MIN": sparams.CW_MIN,
        "BACKOFF_UNIT_us": sparams.BACKOFF_UNIT_us,
    }

    for name, value in positive_int_params.items():
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            _invalid(logger, f"Invalid {name}: {value}. It must be a positive integer.")

    logger.success("Simulation parameters validated.")


def validate_config(cfg: cfg, logger: logging.Logger) -> None:
    if cfg.SEED is not None and (
        not isinstance(cfg.SEED, int) or isinstance(cfg.SEED, bool)
    ):
        _invalid(logger, f"Invalid SEED: {cfg.SEED}. It must be an integer or None.")

    bool_settings = {
        "ENABLE_CONSOLE_LOGGING": cfg.ENABLE_CONSOLE_LOGGING,
        "USE_COLORS_IN_LOGS": cfg.USE_COLORS_IN_LOGS,
        "ENABLE_LOGS_RECORDING": cfg.ENABLE_LOGS_RECORDING,
        "ENABLE_EVENT_HISTORY": cfg.ENABLE_EVENT_HISTORY,
        "ENABLE_STATS_COLLECTION": cfg.ENABLE_STATS_COLLECTION,
        "ENABLE_FIGS_DISPLAY": cfg.ENABLE_FIGS_DISPLAY,
        "ENABLE_FIGS_SAVING": cfg.ENABLE_FIGS_SAVING,
        "ENABLE_STRATEGY_SWEEP": cfg.ENABLE_STRATEGY_SWEEP,
    }

    for name, value in bool_settings.items():
        if not isinstance(value, bool):
            _invalid(logger, f"Invalid {name}: '{value}'. It must be a boolean.")

    str_settings = {
        "INPUT_PARAMS_PATH": cfg.INPUT_PARAMS_PATH,
        "LOGS_RECORDING_PATH": cfg.LOGS_RECORDING_PATH,
        "STATS_SAVE_PATH": cfg.STATS_SAVE_PATH,
        "FIGS_SAVE_PATH": cfg.FIGS_SAVE_PATH,
    }
    for name, value in str_settings.items():
        if not isinstance(value, str):
            _invalid(logger, f"Invalid {name}: '{value}'. It must be a string.")

    for module, levels in cfg.EXCLUDED_LOGS.items():
        if module not in VALID_MODULES:
            logger.warning(f"Invalid module name: '{module}' in EXCLUDED_LOGS.")

        for level in levels:
            if level not in VALID_LOG_LEVELS:
                logger.warning(
                    f"Invalid log level: '{level}' for module: '{module}' in EXCLUDED_LOGS."
                )

    if cfg.ENABLE_STRATEGY_SWEEP:
        if not cfg.SWEEP_NODE_COUNTS or not all(
            isinstance(n, int) and not isinstance(n, bool) and n > 0
            for n in cfg.SWEEP_NODE_COUNTS
        ):
            _invalid(
                logger,
                f"Invalid SWEEP_NODE_COUNTS: {cfg.SWEEP_NODE_COUNTS}. It must be a non-empty list of positive integers.",
            )
        valid_strategies = {int(s) for s in BackoffStrategy}
        if not cfg.SWEEP_STRATEGIES or not all(
            s in valid_strategies for s in cfg.SWEEP_STRATEGIES
        ):
            _invalid(
                logger,
                f"Invalid SWEEP_STRATEGIES: {cfg.SWEEP_STRATEGIES}. It must be a non-empty list of values in {sorted(valid_strategies)}.",
            )
        if cfg.SWEEP_MAX_WORKERS is not None and (
            not isinstance(cfg.SWEEP_MAX_WORKERS, int) or cfg.SWEEP_MAX_WORKERS < 1
        ):
            _invalid(
                logger,
                f"Invalid SWEEP_MAX_WORKERS: {cfg.SWEEP_MAX_WORKERS}. It must be a positive integer or None.",
            )

    path_settings = {
        cfg.LOGS_RECORDING_PATH: cfg.ENABLE_LOGS_RECORDING,
        cfg.STATS_SAVE_PATH: cfg.ENABLE_STATS_COLLECTION,
        cfg.FIGS_SAVE_PATH: cfg.ENABLE_FIGS_SAVING,
    }

    for path, enabled in path_settings.items():
        if enabled and not os.path.exists(path):
            logger.warning(f"Path '{path}' does not exist. Creating it...")
            os.makedirs(path)

    logger.success("User configuration validated.")


def warn_overwriting_enabled_paths(cfg: cfg, logger: logging.Logger):
    path_settings = {
        "logs": cfg.ENABLE_LOGS_RECORDING,
        "figures": cfg.ENABLE_FIGS_SAVING,
        "statistics": cfg.ENABLE_STATS_COLLECTION,
    }

    enabled_settings = [name for name, enabled in path_settings.items() if enabled]

    if enabled_settings:
        logger.warning(
            f"The following data will be recorded: {', '.join(enabled_settings)}."
        )
    if cfg.ENABLE_LOGS_RECORDING:
        logger.warning(
            f"Existing logs in '{cfg.LOGS_RECORDING_PATH}' will be overwritten."
        )


def validate_settings(cfg: cfg, sparams: sparams, logger: logging.Logger):
    validate_params(sparams, logger)
    validate_config(cfg, logger)
    warn_overwriting_enabled_paths(cfg, logger)


def initialize_simulation(
    cfg: cfg,
    sparams: sparams,
    env: simpy.Environment,
    params: NetworkParameters,
    rng: random.Random = None,
) -> ContentionSimulator:
    """
    Builds a contention simulator from the network parameters and schedules its run.

    Args:
        cfg (cfg): The UserConfig object.
        sparams (sparams): The SimParams object.
        env (simpy.Environment): The simulation environment.
        params (NetworkParameters): The validated network parameters.
        rng (random.Random, optional): Random generator for backoff draws. Defaults to a generator seeded with cfg.SEED.

    Returns:
        ContentionSimulator: The simulator, ready to be run with `env.run()`.
    """
    config = SimulationConfig.from_network_parameters(params, sparams)

    simulator = ContentionSimulator(cfg, sparams, env, config, rng=rng, seed=cfg.SEED)
    simulator.start()

    return simulator

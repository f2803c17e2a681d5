from src.user_config import UserConfig as cfg_module
from src.sim_params import SimParams as sparams_module

from src.utils.plotters import ContentionWindowPlotter, UtilizationPlotter
from src.utils.support import initialize_simulation, validate_settings
from src.utils.params_loader import read_network_parameters
from src.utils.exceptions import InvalidConfigurationError
from src.utils.statistics import display_results
from src.utils.sweep import run_strategy_sweep
from src.utils.event_logger import get_logger
from src.utils.messages import (
    STARTING_EXECUTION_MSG,
    EXECUTION_TERMINATED_MSG,
    STARTING_SIMULATION_MSG,
    SIMULATION_TERMINATED_MSG,
    STARTING_SWEEP_MSG,
    RESULTS_MSG,
    PRESS_TO_EXIT_MSG,
)

import simpy
import sys
import matplotlib.pyplot as plt


def main(argv: list[str] = None):
    argv = sys.argv[1:] if argv is None else argv

    print(STARTING_EXECUTION_MSG)

    logger = get_logger("MAIN", cfg_module, sparams_module)

    params_path = argv[0] if argv else cfg_module.INPUT_PARAMS_PATH

    try:
        validate_settings(cfg_module, sparams_module, logger)
        params = read_network_parameters(
            params_path, get_logger("PARAMS", cfg_module, sparams_module)
        )
    except InvalidConfigurationError as e:
        logger.critical(f"Invalid input parameters: {e}")
        return

    print(STARTING_SIMULATION_MSG)

    env = simpy.Environment()
    simulator = initialize_simulation(cfg_module, sparams_module, env, params)

    env.run()

    results = simulator.collect_results()

    print(SIMULATION_TERMINATED_MSG)

    print(RESULTS_MSG)
    results.display_stats()
    display_results(
        params.num_nodes,
        params.packet_size_bytes,
        simulator.config.simulation_time_s,
        params.strategy,
        results.utilization,
    )

    ContentionWindowPlotter(cfg_module, sparams_module).plot_cw_evolution(
        results.event_history, params.strategy
    )

    if cfg_module.ENABLE_STRATEGY_SWEEP:
        print(STARTING_SWEEP_MSG)

        sweep_results = run_strategy_sweep(
            cfg_module,
            sparams_module,
            cfg_module.SWEEP_NODE_COUNTS,
            cfg_module.SWEEP_STRATEGIES,
            params.packet_size_bytes,
            params.simulation_time_ms,
            seed=cfg_module.SEED,
            max_workers=cfg_module.SWEEP_MAX_WORKERS,
        )
        logger.info(f"Strategy sweep results:\n{sweep_results.to_string(index=False)}")

        UtilizationPlotter(cfg_module, sparams_module).plot_utilization(sweep_results)

    if len(plt.get_fignums()) > 0:
        input(PRESS_TO_EXIT_MSG)

    print(EXECUTION_TERMINATED_MSG)


if __name__ == "__main__":
    main()

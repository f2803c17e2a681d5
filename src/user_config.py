class UserConfig:
    # --- Simulation Parameters --- #
    SEED = 1  # Set to None for random behavior

    # Path to the network parameters file. Expected content (whitespace separated):
    # number of nodes, packet size (bytes), simulation time (ms), backoff strategy (1-5)
    INPUT_PARAMS_PATH = "input_network.txt"

    # --- Logging Configuration --- #
    ENABLE_CONSOLE_LOGGING = True  # Enable/disable displaying logs in the console (may affect performance)
    USE_COLORS_IN_LOGS = True  # Enable/disable colored logs

    ENABLE_LOGS_RECORDING = (
        False  # Enable/disable recording logs (may affect performance)
    )
    LOGS_RECORDING_PATH = "data/events"  # Path to the directory where logs will be recorded

    # Logging exclusions (if ENABLE_CONSOLE_LOGGING or ENABLE_LOGS_RECORDING is enabled)
    # Format: { "<module_name>": ["<excluded_log_level_1>", "<excluded_log_level_2>", ...] }
    # <module_name>: Module name (e.g., "ENGINE", "PARAMS", "STATS", "SWEEP", "PLOTTER")
    # <excluded_log_level>: Log levels to exclude (e.g., "HEADER","DEBUG", "INFO", "WARNING", "ALL")
    EXCLUDED_LOGS = {
        "ENGINE": ["HEADER", "DEBUG"],
        "PARAMS": [],
        "STATS": [],
        "SWEEP": [],
        "PLOTTER": [],
    }

    # --- Event History --- #
    # Keep a record of every contention event (timestamp, outcome, nodes, contention window).
    # Required by the contention window plot. May affect performance on long simulations.
    ENABLE_EVENT_HISTORY = True

    # --- Statistics Collection --- #
    ENABLE_STATS_COLLECTION = False  # Enable/disable saving statistics to a JSON file
    STATS_SAVE_PATH = "data/statistics"

    # --- Visualization --- #
    ENABLE_FIGS_DISPLAY = False  # Enable/disable displaying figures
    ENABLE_FIGS_SAVING = False  # Enable/disable saving figures
    FIGS_SAVE_PATH = "figs/sim"

    # --- Strategy Sweep --- #
    # Runs every backoff strategy for every number of nodes below, using the packet size
    # and simulation time of the parameters file, and plots the utilization of each one.
    ENABLE_STRATEGY_SWEEP = False
    SWEEP_NODE_COUNTS = [2, 4, 8, 16, 32, 64]
    SWEEP_STRATEGIES = [1, 2, 3, 4, 5]
    SWEEP_MAX_WORKERS = None  # None: half of the available CPU cores. 1: run sequentially

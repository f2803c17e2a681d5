class UserConfig:
    # --- Simulation Parameters --- #
    SEED = 1

    INPUT_PARAMS_PATH = "input_network.txt"

    # --- Logging Configuration --- #
    ENABLE_CONSOLE_LOGGING = False
    USE_COLORS_IN_LOGS = True

    ENABLE_LOGS_RECORDING = False
    LOGS_RECORDING_PATH = "tests/events"
    EXCLUDED_LOGS = {
        "ENGINE": ["ALL"],
        "SWEEP": ["ALL"],
    }

    # --- Event History --- #
    ENABLE_EVENT_HISTORY = True

    # --- Statistics Collection --- #
    ENABLE_STATS_COLLECTION = False
    STATS_SAVE_PATH = "tests/statistics"

    # --- Visualization --- #
    ENABLE_FIGS_DISPLAY = False
    ENABLE_FIGS_SAVING = False
    FIGS_SAVE_PATH = "figs/tests"

    # --- Strategy Sweep --- #
    ENABLE_STRATEGY_SWEEP = False
    SWEEP_NODE_COUNTS = [2, 4, 8]
    SWEEP_STRATEGIES = [1, 2, 3, 4, 5]
    SWEEP_MAX_WORKERS = 1

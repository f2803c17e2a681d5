# Starting execution message
STARTING_EXECUTION_MSG = (
    "\033[93m" + "=" * 22 + "  STARTING EXECUTION  " + "=" * 22 + "\033[0m"
)

# Starting simulation message
STARTING_SIMULATION_MSG = (
    "\033[93m" + "=" * 21 + "  STARTING SIMULATION  " + "=" * 21 + "\033[0m"
)

# Starting strategy sweep message
STARTING_SWEEP_MSG = (
    "\033[93m" + "=" * 20 + "  STARTING STRATEGY SWEEP  " + "=" * 19 + "\033[0m"
)

# Starting test message
STARTING_TEST_MSG = "\033[93m" + "=" * 24 + "  STARTING TEST  " + "=" * 24 + "\033[0m"

# Test completed message
TEST_COMPLETED_MSG = "\033[93m" + "=" * 23 + "  TEST COMPLETED  " + "=" * 23 + "\033[0m"

# Results message
RESULTS_MSG = "\033[93m" + "=" * 27 + "  RESULTS  " + "=" * 28 + "\033[0m"

# Simulation terminated message
SIMULATION_TERMINATED_MSG = (
    "\033[93m" + "=" * 20 + "  SIMULATION TERMINATED  " + "=" * 20 + "\033[0m"
)

# Execution terminated message
EXECUTION_TERMINATED_MSG = (
    "\033[93m" + "=" * 21 + "  EXECUTION TERMINATED  " + "=" * 21 + "\033[0m"
)

# Press enter to exit message
PRESS_TO_EXIT_MSG = (
    "\033[93m"
    + "=" * 10
    + "  Press Enter to exit and close all plots   "
    + "=" * 10
    + "\033[0m"
)

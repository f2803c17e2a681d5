from tests._user_config_tests import UserConfig as cfg_module
from tests._sim_params_tests import SimParams as sparams_module

from src.main import main
from src.utils.event_logger import get_logger
from src.utils.messages import STARTING_TEST_MSG, TEST_COMPLETED_MSG
from src.utils.exceptions import InvalidConfigurationError
from src.utils.params_loader import parse_network_parameters
from src.utils.support import initialize_simulation, validate_settings

import simpy
import pytest


logger = get_logger("TEST", cfg_module, sparams_module)


def test_valid_settings():
    validate_settings(cfg_module, sparams_module, logger)


@pytest.mark.parametrize(
    "name, value",
    [("SEED", "one"), ("ENABLE_EVENT_HISTORY", 1), ("STATS_SAVE_PATH", None)],
)
def test_invalid_user_config(monkeypatch, name, value):
    monkeypatch.setattr(cfg_module, name, value)

    with pytest.raises(InvalidConfigurationError):
        validate_settings(cfg_module, sparams_module, logger)


@pytest.mark.parametrize(
    "name, value",
    [("DATA_RATE_bps", 0), ("SLOT_TIME_us", 9.5), ("CW_MIN", 0), ("BACKOFF_UNIT_us", -1)],
)
def test_invalid_sim_params(monkeypatch, name, value):
    monkeypatch.setattr(sparams_module, name, value)

    with pytest.raises(InvalidConfigurationError):
        validate_settings(cfg_module, sparams_module, logger)


def test_invalid_sweep_settings(monkeypatch):
    monkeypatch.setattr(cfg_module, "ENABLE_STRATEGY_SWEEP", True)
    monkeypatch.setattr(cfg_module, "SWEEP_STRATEGIES", [1, 7])

    with pytest.raises(InvalidConfigurationError):
        validate_settings(cfg_module, sparams_module, logger)


def test_initialize_simulation():
    params = parse_network_parameters([4, 1000, 100, 1])
    env = simpy.Environment()

    simulator = initialize_simulation(cfg_module, sparams_module, env, params)
    env.run()
    results = simulator.collect_results()

    assert simulator.config.num_nodes == 4
    assert simulator.stats.iterations > 0
    assert 0 < results.utilization <= 1
    assert env.now == pytest.approx(simulator.stats.total_time_us)


def test_main_prints_results(tmp_path, capsys):
    filepath = tmp_path / "input_network.txt"
    filepath.write_text("4 1000 100 1")

    main([str(filepath)])

    out = capsys.readouterr().out
    assert "Number of Nodes: 4 ; Packet Size: 1000 ; Simulation Time(s): 0.1 ; Backoff Strategy: 1" in out
    assert "Network Utilization: " in out


def test_main_rejects_invalid_parameters(tmp_path):
    filepath = tmp_path / "input_network.txt"
    filepath.write_text("0 1500 10 2")

    with pytest.raises(SystemExit):
        main([str(filepath)])


if __name__ == "__main__":
    print(STARTING_TEST_MSG)

    test_valid_settings()
    test_initialize_simulation()

    print(TEST_COMPLETED_MSG)

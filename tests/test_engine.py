from tests._user_config_tests import UserConfig as cfg_module
from tests._sim_params_tests import SimParams as sparams_module

from src.sim_config import SimulationConfig
from src.components.backoff import BackoffStrategy, EventOutcome, MIN_DECREASED_CW
from src.components.engine import ContentionSimulator, run_simulation
from src.utils.event_logger import get_logger
from src.utils.messages import (
    STARTING_TEST_MSG,
    TEST_COMPLETED_MSG,
    STARTING_SIMULATION_MSG,
    SIMULATION_TERMINATED_MSG,
)

import random
import simpy
import pytest


cfg_module.ENABLE_EVENT_HISTORY = True

STRATEGIES = [int(s) for s in BackoffStrategy]


def make_config(
    num_nodes: int = 4,
    packet_size_bytes: float = 1000,
    simulation_time_ms: float = 100,
    strategy: int = 1,
) -> SimulationConfig:
    return SimulationConfig(
        num_nodes=num_nodes,
        packet_size_bytes=packet_size_bytes,
        simulation_time_us=simulation_time_ms * 1e3,
        strategy=strategy,
        data_rate_bps=sparams_module.DATA_RATE_bps,
        slot_time_us=sparams_module.SLOT_TIME_us,
        cw_min=sparams_module.CW_MIN,
        backoff_unit_us=sparams_module.BACKOFF_UNIT_us,
    )


def make_simulator(config: SimulationConfig, seed: int = 1) -> ContentionSimulator:
    env = simpy.Environment()
    return ContentionSimulator(cfg_module, sparams_module, env, config, seed=seed)


def test_end_to_end_example():
    config = make_config(num_nodes=4, packet_size_bytes=1000, simulation_time_ms=100, strategy=1)

    utilizations = []
    for seed in range(20):
        utilization, stats = run_simulation(config, cfg_module, sparams_module, seed=seed)

        assert stats.iterations > 0
        assert 0 < utilization <= 1
        utilizations.append(utilization)

    # A run without any collision reaches full utilization, but not every run does
    assert any(u < 1 for u in utilizations)


class TiedStartRandom(random.Random):
    """Seeded generator whose first `ties` draws all return the same value."""

    ties = 0
    value = 4

    def randint(self, a: int, b: int) -> int:
        if self.ties > 0:
            self.ties -= 1
            return self.value
        return super().randint(a, b)


def test_end_to_end_example_with_collision():
    config = make_config(num_nodes=4, packet_size_bytes=1000, simulation_time_ms=100, strategy=1)

    rng = TiedStartRandom(1)
    rng.ties = config.num_nodes

    utilization, stats = run_simulation(config, cfg_module, sparams_module, rng=rng)

    assert stats.iterations > 0
    assert stats.collisions > 0
    assert stats.successes > 0
    assert 0 < utilization < 1


def test_initial_backoffs_within_cw_min():
    config = make_config(num_nodes=50)
    for seed in range(10):
        simulator = make_simulator(config, seed)
        assert len(simulator.backoffs_us) == 50
        assert all(0 <= b <= config.cw_min for b in simulator.backoffs_us)
        assert simulator.cw == config.cw_min


@pytest.mark.parametrize("strategy", STRATEGIES)
@pytest.mark.parametrize("num_nodes", [1, 3, 20])
def test_utilization_bounds(strategy, num_nodes):
    config = make_config(num_nodes=num_nodes, simulation_time_ms=50, strategy=strategy)

    utilization, stats = run_simulation(config, cfg_module, sparams_module, seed=3)

    assert 0 <= utilization <= 1
    assert utilization == pytest.approx(stats.successful_time_us / stats.total_time_us)
    assert stats.successes + stats.collisions == stats.iterations


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_total_time_is_multiple_of_packet_tx_time(strategy):
    config = make_config(num_nodes=6, packet_size_bytes=1500, simulation_time_ms=30, strategy=strategy)

    _, stats = run_simulation(config, cfg_module, sparams_module, seed=9)

    assert stats.iterations > 0
    assert stats.total_time_us == pytest.approx(stats.iterations * config.packet_tx_time_us)
    assert stats.total_time_us >= config.simulation_time_us
    assert stats.total_time_us - config.packet_tx_time_us < config.simulation_time_us

    timestamps = stats.get_event_history()["timestamp_us"].to_numpy()
    assert len(timestamps) == stats.iterations
    assert all(later > earlier for earlier, later in zip(timestamps, timestamps[1:]))


def test_single_node_never_collides():
    _, stats = run_simulation(make_config(num_nodes=1), cfg_module, sparams_module, seed=2)

    assert stats.collisions == 0
    assert stats.successes == stats.iterations


def test_identical_initial_backoffs_collide_first():
    simulator = make_simulator(make_config(num_nodes=3, strategy=1))
    simulator.backoffs_us = [4, 4, 10]

    event = simulator.step()

    assert event.outcome == EventOutcome.COLLISION
    assert event.nodes == [0, 1]
    assert simulator.stats.collisions == 1
    assert simulator.cw == 2 * sparams_module.CW_MIN
    assert all(0 <= simulator.backoffs_us[n] <= simulator.cw for n in (0, 1))
    assert simulator.backoffs_us[2] == 10


def test_identical_initial_backoffs_collide_first_in_run():
    config = make_config(num_nodes=4, strategy=2)
    env = simpy.Environment()
    simulator = ContentionSimulator(cfg_module, sparams_module, env, config, seed=5)
    simulator.backoffs_us = [7, 7, 7, 7]

    simulator.start()
    env.run()

    history = simulator.stats.get_event_history()
    assert history.loc[0, "outcome"] == EventOutcome.COLLISION
    assert history.loc[0, "num_nodes_involved"] == 4
    assert history.loc[0, "cw"] == sparams_module.CW_MIN + 2


def test_backoff_decrement_excludes_event_nodes():
    # One iteration: the simulation lasts exactly one packet transmission time
    config = make_config(num_nodes=3, strategy=2)
    config = SimulationConfig(
        num_nodes=3,
        packet_size_bytes=config.packet_size_bytes,
        simulation_time_us=config.packet_tx_time_us,
        strategy=2,
    )
    env = simpy.Environment()
    simulator = ContentionSimulator(cfg_module, sparams_module, env, config, seed=4)
    simulator.backoffs_us = [3, 10, 20]

    simulator.start()
    env.run()

    assert simulator.stats.iterations == 1
    assert simulator.stats.successes == 1
    assert 0 <= simulator.backoffs_us[0] <= sparams_module.CW_MIN
    assert simulator.backoffs_us[1:] == [10 - config.slot_time_us, 20 - config.slot_time_us]
    assert env.now == pytest.approx(config.packet_tx_time_us)


def test_binary_exponential_resets_after_every_success():
    config = make_config(num_nodes=20, simulation_time_ms=200, strategy=1)
    _, stats = run_simulation(config, cfg_module, sparams_module, seed=8)

    history = stats.get_event_history()
    successes = history[history["outcome"] == EventOutcome.SUCCESS]

    assert stats.collisions > 0
    assert not successes.empty
    assert (successes["cw"] == sparams_module.CW_MIN).all()


@pytest.mark.parametrize("strategy", [1, 3, 5])
def test_exponential_strategies_double_on_collision(strategy):
    config = make_config(num_nodes=20, simulation_time_ms=200, strategy=strategy)
    _, stats = run_simulation(config, cfg_module, sparams_module, seed=12)

    assert stats.collisions > 0

    prev_cw = sparams_module.CW_MIN
    for outcome, cw in stats.get_event_history()[["outcome", "cw"]].itertuples(index=False):
        if outcome == EventOutcome.COLLISION:
            assert cw == 2 * prev_cw
        prev_cw = cw


@pytest.mark.parametrize("strategy", [2, 4])
def test_linear_strategies_increase_on_collision(strategy):
    config = make_config(num_nodes=20, simulation_time_ms=200, strategy=strategy)
    _, stats = run_simulation(config, cfg_module, sparams_module, seed=12)

    prev_cw = sparams_module.CW_MIN
    for outcome, cw in stats.get_event_history()[["outcome", "cw"]].itertuples(index=False):
        if outcome == EventOutcome.COLLISION:
            assert cw == prev_cw + 2
        prev_cw = cw


@pytest.mark.parametrize("strategy", [4, 5])
def test_decreasing_strategies_stay_above_floor(strategy):
    config = make_config(num_nodes=2, simulation_time_ms=200, strategy=strategy)
    _, stats = run_simulation(config, cfg_module, sparams_module, seed=21)

    history = stats.get_event_history()
    successes = history[history["outcome"] == EventOutcome.SUCCESS]

    assert not successes.empty
    assert (successes["cw"] >= MIN_DECREASED_CW).all()


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_fixed_seed_is_deterministic(strategy):
    config = make_config(num_nodes=8, simulation_time_ms=50, strategy=strategy)

    utilization_a, stats_a = run_simulation(config, cfg_module, sparams_module, seed=42)
    utilization_b, stats_b = run_simulation(config, cfg_module, sparams_module, seed=42)

    assert utilization_a == utilization_b
    assert stats_a == stats_b


def test_injected_rng_matches_seed():
    config = make_config(num_nodes=8, simulation_time_ms=50, strategy=3)

    utilization_a, stats_a = run_simulation(config, cfg_module, sparams_module, seed=5)
    utilization_b, stats_b = run_simulation(
        config, cfg_module, sparams_module, rng=random.Random(5)
    )

    assert utilization_a == utilization_b
    assert stats_a == stats_b


def test_runs_do_not_share_state():
    config = make_config(num_nodes=8, simulation_time_ms=50, strategy=1)

    _, stats_a = run_simulation(config, cfg_module, sparams_module, seed=5)
    run_simulation(make_config(num_nodes=30, strategy=3), cfg_module, sparams_module, seed=6)
    _, stats_b = run_simulation(config, cfg_module, sparams_module, seed=5)

    assert stats_a == stats_b


if __name__ == "__main__":
    print(STARTING_TEST_MSG)

    logger = get_logger("TEST", cfg_module, sparams_module)

    print(STARTING_SIMULATION_MSG)

    for strategy in STRATEGIES:
        utilization, stats = run_simulation(
            make_config(strategy=strategy), cfg_module, sparams_module, seed=cfg_module.SEED
        )
        logger.info(
            f"Strategy {strategy} -> Utilization: {utilization:.4f}, Iterations: {stats.iterations}, Collisions: {stats.collisions}"
        )

    print(SIMULATION_TERMINATED_MSG)

    test_end_to_end_example()
    test_end_to_end_example_with_collision()
    test_identical_initial_backoffs_collide_first()
    test_backoff_decrement_excludes_event_nodes()

    print(TEST_COMPLETED_MSG)

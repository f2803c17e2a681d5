from src.sim_params import SimParams as sparams
from src.user_config import UserConfig as cfg

from src.sim_config import SimulationConfig
from src.components.backoff import BackoffPolicy, EventOutcome, get_backoff_policy
from src.components.collision import ContentionEvent, detect_contention_event
from src.utils.event_logger import get_logger
from src.utils.statistics import SimulationStats, ResultsAggregator

import simpy
import random


class ContentionSimulator:
    """
    Shared-medium contention simulator.

    Owns the per-node backoffs, the contention window shared by all nodes and
    the simulation statistics. Every iteration resolves one contention event
    (a success or a collision) and advances the simulation clock by one packet
    transmission time, whatever the backoff of the winning node(s) was.
    """

    def __init__(
        self,
        cfg: cfg,
        sparams: sparams,
        env: simpy.Environment,
        config: SimulationConfig,
        rng: random.Random = None,
        seed: int = None,
    ):
        """
        Initialize a ContentionSimulator.

        Args:
            cfg (cfg): The UserConfig object.
            sparams (sparams): The SimParams object.
            env (simpy.Environment): The simulation environment (time in microseconds).
            config (SimulationConfig): The configuration of the run.
            rng (random.Random, optional): Random generator for backoff draws. Defaults to a new generator seeded with `seed`.
            seed (int, optional): Seed of the generator created when `rng` is not provided. Defaults to None.
        """
        self.cfg = cfg
        self.sparams = sparams
        self.env = env

        self.config = config
        self.rng = rng if rng is not None else random.Random(seed)

        self.policy: BackoffPolicy = get_backoff_policy(
            config.strategy, config.cw_min, config.backoff_unit_us
        )

        self.cw: int = config.cw_min
        self.backoffs_us: list[int] = [
            self.policy.draw_backoff_us(config.cw_min, self.rng)
            for _ in range(config.num_nodes)
        ]

        self.stats = SimulationStats(
            config.num_nodes, config.cw_min, record_history=cfg.ENABLE_EVENT_HISTORY
        )
        self.results: ResultsAggregator = None

        self.process: simpy.Process = None

        self.name = "ENGINE"
        self.logger = get_logger(self.name, cfg, sparams, env)

    def _handle_success(self, node: int):
        self.stats.add_success(node, self.config.packet_tx_time_us)

        self.cw, self.backoffs_us[node] = self.policy.next_backoff(
            EventOutcome.SUCCESS, self.cw, self.rng
        )

        self.logger.debug(
            f"Node {node} -> Transmission successful, CW: {self.cw}, new backoff: {self.backoffs_us[node]} us"
        )

    def _handle_collision(self, nodes: list[int]):
        self.stats.add_collision(nodes)

        self.cw = self.policy.on_collision(self.cw)
        for node in nodes:
            self.backoffs_us[node] = self.policy.draw_backoff_us(self.cw, self.rng)

        self.logger.debug(
            f"Nodes {', '.join(map(str, nodes))} -> Collision, CW: {self.cw}, new backoffs: {[self.backoffs_us[n] for n in nodes]} us"
        )

    def _decrement_backoffs(self, excluded_nodes: list[int]):
        """Decrements by one slot the backoff of every node not involved in the last event."""
        excluded = set(excluded_nodes)
        for node in range(self.config.num_nodes):
            if node not in excluded:
                self.backoffs_us[node] -= self.config.slot_time_us

    def step(self) -> ContentionEvent:
        """
        Resolves the next contention event and updates the contention window and backoffs of the nodes involved.

        Returns:
            ContentionEvent: The resolved event.
        """
        event = detect_contention_event(self.backoffs_us)

        if event.is_collision:
            self._handle_collision(event.nodes)
        else:
            self._handle_success(event.nodes[0])

        self.stats.add_to_event_history(
            self.env.now, event.outcome, event.nodes, event.backoff_us, self.cw
        )
        return event

    def run(self):
        self.logger.header(
            f"Starting simulation -> Nodes: {self.config.num_nodes}, Strategy: {self.policy.name} ({int(self.config.strategy)}), Packet tx time: {self.config.packet_tx_time_us:.2f} us, Duration: {self.config.simulation_time_us:.0f} us"
        )

        while self.stats.total_time_us < self.config.simulation_time_us:
            event = self.step()

            yield self.env.timeout(self.config.packet_tx_time_us)

            self._decrement_backoffs(event.nodes)
            self.stats.add_iteration(self.config.packet_tx_time_us, self.cw)

        self.logger.success(
            f"Simulation finished after {self.stats.iterations} iterations ({self.stats.successes} successes, {self.stats.collisions} collisions)"
        )

    def start(self) -> simpy.Process:
        self.process = self.env.process(self.run())
        return self.process

    def collect_results(self) -> ResultsAggregator:
        self.results = ResultsAggregator(
            self.cfg, self.sparams, self.config, self.stats, self.env
        )
        self.results.collect_stats()
        return self.results


def run_simulation(
    config: SimulationConfig,
    cfg: cfg = cfg,
    sparams: sparams = sparams,
    seed: int = None,
    rng: random.Random = None,
) -> tuple[float, SimulationStats]:
    """
    Runs a simulation to completion.

    Args:
        config (SimulationConfig): The configuration of the run.
        cfg (cfg, optional): The UserConfig object. Defaults to UserConfig.
        sparams (sparams, optional): The SimParams object. Defaults to SimParams.
        seed (int, optional): Seed of the backoff random generator. Defaults to None.
        rng (random.Random, optional): Random generator to use instead of seeding a new one. Defaults to None.

    Returns:
        tuple[float, SimulationStats]: The channel utilization and the simulation statistics.
    """
    env = simpy.Environment()

    simulator = ContentionSimulator(cfg, sparams, env, config, rng=rng, seed=seed)
    simulator.start()

    env.run()

    results = simulator.collect_results()
    return results.utilization, simulator.stats

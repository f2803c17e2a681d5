from src.sim_params import SimParams as sparams

from src.components.backoff import BackoffStrategy
from src.utils.exceptions import InvalidConfigurationError
from src.utils.params_loader import NetworkParameters

from dataclasses import dataclass


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require_positive(name: str, value, integer: bool = False) -> None:
    if not _is_number(value) or value != value:  # NaN
        raise InvalidConfigurationError(f"Invalid {name}: {value}. It must be a number.")
    if value <= 0:
        raise InvalidConfigurationError(f"Invalid {name}: {value}. It must be positive.")
    if integer and not float(value).is_integer():
        raise InvalidConfigurationError(
            f"Invalid {name}: {value}. It must be a positive integer."
        )


@dataclass(frozen=True)
class SimulationConfig:
    """
    Read-only inputs of a single simulation run.

    Times are expressed in microseconds. Every field is validated on
    construction, so an instance can only exist for a runnable simulation.
    """

    num_nodes: int
    packet_size_bytes: float
    simulation_time_us: float
    strategy: BackoffStrategy
    data_rate_bps: float = sparams.DATA_RATE_bps
    slot_time_us: int = sparams.SLOT_TIME_us
    cw_min: int = sparams.CW_MIN
    backoff_unit_us: int = sparams.BACKOFF_UNIT_us

    def __post_init__(self):
        _require_positive("num_nodes", self.num_nodes, integer=True)
        _require_positive("packet_size_bytes", self.packet_size_bytes)
        _require_positive("simulation_time_us", self.simulation_time_us)
        _require_positive("data_rate_bps", self.data_rate_bps)
        _require_positive("slot_time_us", self.slot_time_us, integer=True)
        _require_positive("cw_min", self.cw_min, integer=True)
        _require_positive("backoff_unit_us", self.backoff_unit_us, integer=True)

        if (
            not _is_number(self.strategy)
            or not float(self.strategy).is_integer()
            or int(self.strategy) not in {s.value for s in BackoffStrategy}
        ):
            raise InvalidConfigurationError(
                f"Invalid strategy: {self.strategy}. It must be one of {[int(s) for s in BackoffStrategy]}."
            )

        # Normalize numeric types so that backoff arithmetic stays integer
        object.__setattr__(self, "num_nodes", int(self.num_nodes))
        object.__setattr__(self, "strategy", BackoffStrategy(int(self.strategy)))
        object.__setattr__(self, "slot_time_us", int(self.slot_time_us))
        object.__setattr__(self, "cw_min", int(self.cw_min))
        object.__setattr__(self, "backoff_unit_us", int(self.backoff_unit_us))

    @property
    def packet_tx_time_us(self) -> float:
        return self.packet_size_bytes * 8 / self.data_rate_bps * 1e6

    @property
    def packet_tx_time_s(self) -> float:
        return self.packet_tx_time_us / 1e6

    @property
    def simulation_time_s(self) -> float:
        return self.simulation_time_us / 1e6

    @property
    def slot_time_s(self) -> float:
        return self.slot_time_us / 1e6

    @classmethod
    def from_network_parameters(
        cls, params: NetworkParameters, sparams: sparams = sparams
    ) -> "SimulationConfig":
        """
        Builds the configuration of a run from the network parameters and the simulation constants.

        Args:
            params (NetworkParameters): Validated network parameters.
            sparams (sparams, optional): The SimParams object. Defaults to SimParams.

        Returns:
            SimulationConfig: The simulation configuration.
        """
        return cls(
            num_nodes=params.num_nodes,
            packet_size_bytes=params.packet_size_bytes,
            simulation_time_us=params.simulation_time_ms * 1e3,
            strategy=params.strategy,
            data_rate_bps=sparams.DATA_RATE_bps,
            slot_time_us=sparams.SLOT_TIME_us,
            cw_min=sparams.CW_MIN,
            backoff_unit_us=sparams.BACKOFF_UNIT_us,
        )

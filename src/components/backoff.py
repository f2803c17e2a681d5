from enum import IntEnum

import random


MIN_DECREASED_CW = 2  # Floor applied by the decreasing strategies after a success


class BackoffStrategy(IntEnum):
    BINARY_EXPONENTIAL = 1
    LINEAR = 2
    EXPONENTIAL_RESET = 3
    LINEAR_DECREASE = 4
    EXPONENTIAL_DECREASE = 5


class EventOutcome:
    SUCCESS = "SUCCESS"
    COLLISION = "COLLISION"


class BackoffPolicy:
    """
    Contention window update policy shared by all nodes.

    Subclasses define how the window reacts to a successful transmission and to
    a collision. The window is never stored by the policy: it is passed in and
    returned on every call so that the engine remains its only owner.
    """

    strategy: BackoffStrategy = None
    name: str = "Backoff"

    def __init__(self, cw_min: int, backoff_unit_us: int = 1):
        """
        Initialize a BackoffPolicy.

        Args:
            cw_min (int): Minimum (and initial) contention window.
            backoff_unit_us (int, optional): Duration of one contention window unit in microseconds. Defaults to 1.
        """
        self.cw_min = cw_min
        self.backoff_unit_us = backoff_unit_us

    def on_success(self, cw: int) -> int:
        raise NotImplementedError

    def on_collision(self, cw: int) -> int:
        raise NotImplementedError

    def update_cw(self, outcome: str, cw: int) -> int:
        """Returns the contention window that follows an event with the given outcome."""
        if outcome == EventOutcome.SUCCESS:
            return self.on_success(cw)
        if outcome == EventOutcome.COLLISION:
            return self.on_collision(cw)
        raise ValueError(f"Unknown event outcome: {outcome}")

    def draw_backoff_us(self, cw: int, rng: random.Random) -> int:
        """Draws a backoff uniformly from [0, cw] units, in microseconds."""
        return rng.randint(0, cw) * self.backoff_unit_us

    def next_backoff(self, outcome: str, cw: int, rng: random.Random) -> tuple[int, int]:
        """
        Updates the contention window after an event and draws a fresh backoff.

        Args:
            outcome (str): EventOutcome.SUCCESS or EventOutcome.COLLISION.
            cw (int): Current contention window.
            rng (random.Random): Random generator used for the draw.

        Returns:
            tuple[int, int]: The new contention window and the backoff in microseconds.
        """
        new_cw = self.update_cw(outcome, cw)
        return new_cw, self.draw_backoff_us(new_cw, rng)

    def __repr__(self):
        return f"{self.__class__.__name__}(strategy={int(self.strategy)}, cw_min={self.cw_min})"


class BinaryExponentialBackoff(BackoffPolicy):
    strategy = BackoffStrategy.BINARY_EXPONENTIAL
    name = "Binary Exponential Backoff"

    def on_success(self, cw: int) -> int:
        return self.cw_min

    def on_collision(self, cw: int) -> int:
        return cw * 2


class LinearBackoff(BackoffPolicy):
    strategy = BackoffStrategy.LINEAR
    name = "Linear Backoff"

    def on_success(self, cw: int) -> int:
        return cw

    def on_collision(self, cw: int) -> int:
        return cw + 2


class ExponentialResetBackoff(BackoffPolicy):
    strategy = BackoffStrategy.EXPONENTIAL_RESET
    name = "Exponential Backoff with Reset"

    def on_success(self, cw: int) -> int:
        return cw

    def on_collision(self, cw: int) -> int:
        return cw * 2


class LinearDecreaseBackoff(BackoffPolicy):
    strategy = BackoffStrategy.LINEAR_DECREASE
    name = "Linear Decrease Backoff"

    def on_success(self, cw: int) -> int:
        return max(cw - 2, MIN_DECREASED_CW)

    def on_collision(self, cw: int) -> int:
        return cw + 2


class ExponentialDecreaseBackoff(BackoffPolicy):
    strategy = BackoffStrategy.EXPONENTIAL_DECREASE
    name = "Exponential Decrease Backoff"

    def on_success(self, cw: int) -> int:
        return max(cw - 2, MIN_DECREASED_CW)

    def on_collision(self, cw: int) -> int:
        return cw * 2


BACKOFF_POLICIES = {
    policy.strategy: policy
    for policy in (
        BinaryExponentialBackoff,
        LinearBackoff,
        ExponentialResetBackoff,
        LinearDecreaseBackoff,
        ExponentialDecreaseBackoff,
    )
}


def get_backoff_policy(
    strategy: int, cw_min: int, backoff_unit_us: int = 1
) -> BackoffPolicy:
    """
    Returns the backoff policy implementing the given strategy.

    Args:
        strategy (int): Strategy identifier (1 to 5).
        cw_min (int): Minimum contention window.
        backoff_unit_us (int, optional): Duration of one contention window unit in microseconds. Defaults to 1.

    Returns:
        BackoffPolicy: The policy instance.

    Raises:
        ValueError: If the strategy identifier is not one of the supported strategies.
    """
    return BACKOFF_POLICIES[BackoffStrategy(strategy)](cw_min, backoff_unit_us)

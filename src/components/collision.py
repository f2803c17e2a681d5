from src.components.backoff import EventOutcome


class ContentionEvent:
    def __init__(self, backoff_us: int, nodes: list[int]):
        """
        Initializes a ContentionEvent.

        Args:
            backoff_us (int): The minimum backoff among all nodes, in microseconds.
            nodes (list[int]): Indexes of the nodes whose backoff equals the minimum.
        """
        self.backoff_us: int = backoff_us
        self.nodes: list[int] = nodes

        self.outcome: str = (
            EventOutcome.SUCCESS if len(nodes) == 1 else EventOutcome.COLLISION
        )

    @property
    def is_collision(self) -> bool:
        return self.outcome == EventOutcome.COLLISION

    def __repr__(self):
        return f"{self.__class__.__name__}(outcome={self.outcome}, backoff_us={self.backoff_us}, nodes={self.nodes})"


def detect_contention_event(backoffs_us: list[int]) -> ContentionEvent:
    """
    Finds the node(s) whose backoff expires first.

    A single node reaching the minimum transmits successfully, two or more
    nodes reaching it in the same slot collide.

    Args:
        backoffs_us (list[int]): Current backoff of every node, in microseconds.

    Returns:
        ContentionEvent: The next contention event.

    Raises:
        ValueError: If there are no nodes.
    """
    if not backoffs_us:
        raise ValueError("Cannot detect a contention event without nodes.")

    min_backoff_us = min(backoffs_us)
    nodes = [i for i, backoff_us in enumerate(backoffs_us) if backoff_us == min_backoff_us]

    return ContentionEvent(min_backoff_us, nodes)

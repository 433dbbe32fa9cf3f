"""Rail network topology and hop-count shortest paths."""

import logging
from collections import deque
from collections.abc import Iterable, Mapping, Sequence

logger = logging.getLogger(__name__)


class StationGraph:
    """Symmetric adjacency map of rail station ids.

    Neighbor order is insertion order, so breadth-first search breaks ties
    the same way on every run.
    """

    def __init__(self) -> None:
        self._adjacency: dict[str, dict[str, None]] = {}

    @classmethod
    def from_adjacency(cls, adjacency: Mapping[str, Iterable[str]]) -> "StationGraph":
        """Build a graph from an explicit adjacency map.

        Raises:
            ValueError: If an edge A -> B has no matching B -> A.
        """
        adjacency = {station: list(neighbors) for station, neighbors in adjacency.items()}
        for station, neighbors in adjacency.items():
            for neighbor in neighbors:
                if station not in adjacency.get(neighbor, ()):
                    raise ValueError(
                        f"Asymmetric adjacency: {station} -> {neighbor} has no reverse edge"
                    )

        graph = cls()
        for station, neighbors in adjacency.items():
            graph._adjacency.setdefault(station, {})
            for neighbor in neighbors:
                graph.add_edge(station, neighbor)
        return graph

    @classmethod
    def from_lines(cls, lines: Mapping[str, Sequence[Sequence[str]]]) -> "StationGraph":
        """Build a graph by chaining each line's station sequences.

        Args:
            lines: Line code -> list of ordered station-id sequences (one per
                   branch).
        """
        graph = cls()
        for branches in lines.values():
            for sequence in branches:
                for current, following in zip(sequence, sequence[1:]):
                    graph.add_edge(current, following)
        logger.debug(f"Built station graph: {len(graph)} stations")
        return graph

    def add_edge(self, a: str, b: str) -> None:
        """Connect two stations in both directions."""
        if a == b:
            return
        self._adjacency.setdefault(a, {})[b] = None
        self._adjacency.setdefault(b, {})[a] = None

    def neighbors(self, station_id: str) -> list[str]:
        return list(self._adjacency.get(station_id, {}))

    def __contains__(self, station_id: object) -> bool:
        return station_id in self._adjacency

    def __len__(self) -> int:
        return len(self._adjacency)

    def shortest_path(self, start: str, end: str) -> list[str]:
        """Breadth-first search for a minimum-hop path.

        Returns:
            Station ids from start to end inclusive. Empty if either id is
            unknown, if no path exists, or if start == end (callers handle
            the same-station case themselves).
        """
        if start == end or start not in self._adjacency or end not in self._adjacency:
            return []

        previous: dict[str, str | None] = {start: None}
        queue = deque([start])
        while queue:
            current = queue.popleft()
            for neighbor in self._adjacency[current]:
                if neighbor in previous:
                    continue
                previous[neighbor] = current
                if neighbor == end:
                    return self._unwind(previous, end)
                queue.append(neighbor)
        return []

    @staticmethod
    def _unwind(previous: dict[str, str | None], end: str) -> list[str]:
        path = [end]
        node = previous[end]
        while node is not None:
            path.append(node)
            node = previous[node]
        path.reverse()
        return path

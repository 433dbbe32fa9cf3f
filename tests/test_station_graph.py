"""Tests for the rail topology graph."""

import pytest

from hktransit_mcp.services.station_graph import StationGraph


@pytest.fixture
def loop_graph() -> StationGraph:
    """A square A-B-C-D-A plus a spur D-E."""
    return StationGraph.from_lines({"SQ": [["A", "B", "C", "D", "A"]], "SP": [["D", "E"]]})


class TestConstruction:
    def test_from_lines_is_symmetric(self, loop_graph: StationGraph):
        for station in ["A", "B", "C", "D", "E"]:
            for neighbor in loop_graph.neighbors(station):
                assert station in loop_graph.neighbors(neighbor)

    def test_from_adjacency_rejects_one_way_edges(self):
        with pytest.raises(ValueError, match="Asymmetric"):
            StationGraph.from_adjacency({"A": ["B"], "B": []})

    def test_from_adjacency_accepts_symmetric_map(self):
        graph = StationGraph.from_adjacency({"A": ["B"], "B": ["A", "C"], "C": ["B"]})
        assert graph.shortest_path("A", "C") == ["A", "B", "C"]

    def test_self_loops_are_ignored(self):
        graph = StationGraph()
        graph.add_edge("A", "A")
        assert "A" not in graph
        assert len(graph) == 0

    def test_neighbors_keep_insertion_order(self, loop_graph: StationGraph):
        assert loop_graph.neighbors("D") == ["C", "A", "E"]


class TestShortestPath:
    def test_adjacent_stations(self, loop_graph: StationGraph):
        assert loop_graph.shortest_path("A", "B") == ["A", "B"]

    def test_uses_fewest_hops(self, loop_graph: StationGraph):
        assert loop_graph.shortest_path("A", "E") == ["A", "D", "E"]

    def test_equal_length_paths_break_ties_by_insertion_order(
        self, loop_graph: StationGraph
    ):
        # A-B-C and A-D-C are both two hops; B was linked to A first
        assert loop_graph.shortest_path("A", "C") == ["A", "B", "C"]

    def test_same_station_returns_empty(self, loop_graph: StationGraph):
        assert loop_graph.shortest_path("A", "A") == []

    def test_unknown_station_returns_empty(self, loop_graph: StationGraph):
        assert loop_graph.shortest_path("A", "ZZZ") == []
        assert loop_graph.shortest_path("ZZZ", "A") == []

    def test_disconnected_component_returns_empty(self):
        graph = StationGraph.from_lines({"X": [["A", "B"]], "Y": [["C", "D"]]})
        assert graph.shortest_path("A", "D") == []

    def test_path_is_reversible(self, loop_graph: StationGraph):
        forward = loop_graph.shortest_path("B", "E")
        backward = loop_graph.shortest_path("E", "B")
        assert len(forward) == len(backward)
        assert forward[0] == "B" and forward[-1] == "E"

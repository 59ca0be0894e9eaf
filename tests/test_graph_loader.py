"""Tests for the adjacency-matrix loader."""

from pathlib import Path

import pytest

from cluster_rank.errors import LoadError
from cluster_rank.graph.loader import load_graph, parse_graph_matrix, split_fields

from conftest import EXAMPLE_MATRIX


class TestParseGraphMatrix:
    def test_example_matrix(self):
        graph = parse_graph_matrix(EXAMPLE_MATRIX.splitlines())

        assert [node.label for node in graph] == ["A", "B", "C", "D"]
        assert graph.keys() == [0, 1, 2, 3]
        assert graph.edge_count == 5
        assert graph.outgoing(0) == {1: 2.0, 2: 1.0, 3: 4.0}
        assert graph.incoming(0) == {1: 3.0, 2: 1.0}
        assert graph.outgoing(3) == {}

    def test_zero_means_no_edge(self):
        graph = parse_graph_matrix(["A B", "0 0", "0.0 0"])

        assert graph.edge_count == 0

    def test_fractional_weights_and_self_loops(self):
        graph = parse_graph_matrix(["A B", "0.5 1.25", "0 2"])

        assert graph.outgoing(0) == {0: 0.5, 1: 1.25}
        assert graph.outgoing(1) == {1: 2.0}

    def test_custom_separator(self):
        graph = parse_graph_matrix(["A, B", "0, 2", "3, 0"], separator=",")

        assert [node.label for node in graph] == ["A", "B"]
        assert graph.outgoing(0) == {1: 2.0}
        assert graph.outgoing(1) == {0: 3.0}

    def test_whitespace_separator_tolerates_alignment(self):
        graph = parse_graph_matrix(["A   B", "0   2", "\t3 0  "], separator=" ")

        assert graph.outgoing(1) == {0: 3.0}

    def test_trailing_blank_lines_ignored(self):
        graph = parse_graph_matrix(["A B", "0 1", "1 0", "", "  "])

        assert graph.size() == 2

    def test_split_fields_tab(self):
        assert split_fields("a\tb\tc\n", "\t") == ["a", "b", "c"]

    def test_tab_separator_keeps_multi_word_labels(self):
        graph = parse_graph_matrix(["New York\tBoston", "0\t1", "1\t0"], separator="\t")

        assert [node.label for node in graph] == ["New York", "Boston"]
        assert graph.outgoing(0) == {1: 1.0}
        assert graph.outgoing(1) == {0: 1.0}

    def test_tab_separator_does_not_collapse_empty_fields(self):
        with pytest.raises(LoadError, match="row 1: expected 2 weights, got 3"):
            parse_graph_matrix(["A\tB", "0\t\t1", "1\t0"], separator="\t")


class TestMalformedMatrix:
    def test_empty_input(self):
        with pytest.raises(LoadError, match="empty"):
            parse_graph_matrix([])

    def test_wrong_field_count(self):
        with pytest.raises(LoadError, match="row 2: expected 3 weights, got 2"):
            parse_graph_matrix(["A B C", "0 1 1", "1 0", "1 1 0"])

    def test_non_numeric_weight(self):
        with pytest.raises(LoadError, match="non-numeric weight 'x'"):
            parse_graph_matrix(["A B", "0 x", "1 0"])

    def test_negative_weight(self):
        with pytest.raises(LoadError, match="non-negative"):
            parse_graph_matrix(["A B", "0 -1", "1 0"])

    def test_non_finite_weight(self):
        with pytest.raises(LoadError):
            parse_graph_matrix(["A B", "0 nan", "1 0"])

    def test_missing_rows(self):
        with pytest.raises(LoadError, match="not square"):
            parse_graph_matrix(["A B C", "0 1 1", "1 0 0"])

    def test_extra_rows(self):
        with pytest.raises(LoadError, match="not square"):
            parse_graph_matrix(["A B", "0 1", "1 0", "1 1"])

    def test_blank_row_inside_matrix(self):
        with pytest.raises(LoadError):
            parse_graph_matrix(["A B", "", "0 1", "1 0"])


class TestLoadGraph:
    def test_load_file(self, example_matrix_file: Path):
        graph = load_graph(example_matrix_file)

        assert graph.size() == 4
        assert graph.edge_count == 5

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(LoadError, match="cannot read"):
            load_graph(tmp_path / "missing.txt")

    def test_undecodable_file(self, tmp_path: Path):
        path = tmp_path / "binary.txt"
        path.write_bytes(b"\xff\xfe\x00A B\n")

        with pytest.raises(LoadError):
            load_graph(path)

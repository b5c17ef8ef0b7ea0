#!/usr/bin/env python3
"""Tests for dotted-path payload lookup."""

from samples import first_present, first_value, resolve_path
from samples.paths import MISSING


class TestResolvePath:
    """Tests for resolve_path."""

    def test_top_level_key(self):
        assert resolve_path({"obra": "Site A"}, "obra") == "Site A"

    def test_nested_keys(self):
        tree = {"cliente": {"nome": "ACME"}}
        assert resolve_path(tree, "cliente.nome") == "ACME"

    def test_missing_key_returns_missing(self):
        assert resolve_path({"cliente": {}}, "cliente.nome") is MISSING
        assert resolve_path({}, "cliente") is MISSING

    def test_walking_through_scalar_returns_missing(self):
        assert resolve_path({"cliente": "ACME"}, "cliente.nome") is MISSING

    def test_none_value_is_returned(self):
        assert resolve_path({"cliente": None}, "cliente") is None

    def test_numeric_segment_indexes_lists(self):
        tree = {"amostras": [{"codigo": "A1"}, {"codigo": "A2"}]}
        assert resolve_path(tree, "amostras.1.codigo") == "A2"
        assert resolve_path(tree, "amostras.5.codigo") is MISSING
        assert resolve_path(tree, "amostras.x") is MISSING

    def test_strings_are_not_indexed(self):
        assert resolve_path({"code": "A1"}, "code.0") is MISSING

    def test_non_container_root(self):
        assert resolve_path(None, "a") is MISSING
        assert resolve_path(42, "a") is MISSING


class TestFirstPresent:
    """Tests for first_present / first_value."""

    def test_first_candidate_wins(self):
        tree = {"obra": "Site A", "cliente": {"nome": "ACME"}}
        assert first_present(tree, ["obra", "cliente.nome"]) == "Site A"

    def test_falls_through_missing_none_and_blank(self):
        tree = {"a": None, "b": "   ", "c": "found"}
        assert first_present(tree, ["x", "a", "b", "c"]) == "found"

    def test_skips_containers(self):
        tree = {"compartimento": {"id": 1}, "sistema": "Motor"}
        assert first_present(tree, ["compartimento", "sistema"]) == "Motor"

    def test_coerces_and_trims(self):
        assert first_present({"horimetro": 1520}, ["horimetro"]) == "1520"
        assert first_present({"h": " 12.5 "}, ["h"]) == "12.5"

    def test_zero_is_a_value(self):
        assert first_present({"horas": 0}, ["horas"]) == "0"

    def test_none_when_nothing_resolves(self):
        assert first_present({}, ["a", "b.c"]) is None
        assert first_present(None, ["a"]) is None

    def test_first_value_keeps_raw_type(self):
        assert first_value({"a": "", "b": 1709596800000}, ["a", "b"]) == 1709596800000

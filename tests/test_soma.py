"""
Tests for Soma: raw construction, accessors and centroid
"""
import pytest

from morphologycore import MalformedInput, Soma


class TestSomaCenter:
    """Centroid law"""

    def test_no_points_has_no_center(self):
        assert Soma().get_center() is None

    def test_single_point_is_center(self):
        soma = Soma()
        soma.add_point(1, 2, 3)
        assert soma.get_center() == [1.0, 2.0, 3.0]

    def test_two_points_average(self):
        soma = Soma()
        soma.add_point(0, 0, 0)
        soma.add_point(2, 2, 2)
        assert soma.get_center() == [1.0, 1.0, 1.0]

    def test_center_is_a_copy(self):
        soma = Soma()
        soma.add_point(1, 2, 3)
        soma.get_center()[0] = 42
        assert soma.get_center() == [1.0, 2.0, 3.0]


class TestSomaInitWithRaw:
    """Bulk construction from a raw soma record"""

    def test_point_collection(self):
        soma = Soma()
        raw = {"id": "s", "points": [
            {"position": [0, 0, 0], "radius": 2},
            {"position": [2, 0, 0], "radius": 4},
        ]}
        assert soma.init_with_raw_section(raw) == "s"
        assert soma.get_points() == [[0.0, 0.0, 0.0], [2.0, 0.0, 0.0]]
        assert soma.get_radius() == 3.0
        assert soma.get_center() == [1.0, 0.0, 0.0]

    def test_explicit_radius_wins(self):
        soma = Soma()
        soma.init_with_raw_section({"id": 1, "radius": 8, "points": [{"position": [0, 0, 0], "radius": 2}]})
        assert soma.get_radius() == 8.0

    def test_single_center_shape(self):
        soma = Soma()
        soma.init_with_raw_section({"id": 1, "center": [1, 2, 3], "radius": 6})
        assert soma.get_center() == [1.0, 2.0, 3.0]
        assert soma.get_radius() == 6.0

    def test_single_center_without_radius(self):
        soma = Soma()
        assert soma.init_with_raw_section({"id": 1, "center": [0, 0, 0], "radius": None}) == 1
        assert soma.get_center() == [0.0, 0.0, 0.0]
        assert soma.get_radius() is None

    def test_empty_points(self):
        soma = Soma()
        soma.init_with_raw_section({"id": 1, "points": []})
        assert soma.get_center() is None
        assert soma.get_radius() is None

    @pytest.mark.parametrize("raw", [
        {"id": 1},
        {"id": 1, "points": [{"position": [0, 0, 0]}]},
        {"id": 1, "center": [0, 0]},
        {"id": 1, "points": [], "radius": "big"},
        "soma",
    ])
    def test_malformed_raises(self, raw):
        soma = Soma()
        with pytest.raises(MalformedInput):
            soma.init_with_raw_section(raw)
        assert soma.get_points() == []


class TestSomaAccessors:

    def test_type_is_soma(self):
        soma = Soma()
        assert soma.get_typename() == "soma"
        assert soma.get_typevalue() == 1

    def test_id_and_radius(self):
        soma = Soma()
        soma.set_id("cell-1")
        soma.set_radius(4)
        assert soma.get_id() == "cell-1"
        assert soma.get_radius() == 4.0

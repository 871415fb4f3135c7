"""Tests for catalog queries: sort, filter, search, lookup."""

import pytest

from cpu_data import CPU, get_all_cpus
from cpu_catalog import (
    CatalogQueryError,
    cpu_to_dict,
    filter_cpus,
    find_cpu,
    get_cpu_details,
    search_cpus,
    slugify,
    sort_cpus,
)


def _names(cpus):
    return [c.name for c in cpus]


class TestSortCpus:
    """Sorting returns new lists and leaves the catalog alone."""

    def test_sort_by_price_ascending(self):
        assert _names(sort_cpus("price")) == [
            "Core i3-12100F",
            "Ryzen 5 5600",
            "Core i5-13600K",
            "Ryzen 7 7800X3D",
        ]

    def test_sort_by_open_speed_descending(self):
        assert _names(sort_cpus("openSpeed", descending=True)) == [
            "Ryzen 7 7800X3D",
            "Core i5-13600K",
            "Ryzen 5 5600",
            "Core i3-12100F",
        ]

    def test_sort_by_year_is_stable(self):
        # both 2022 parts keep their catalog order
        assert _names(sort_cpus("year")) == [
            "Ryzen 5 5600",
            "Core i5-13600K",
            "Core i3-12100F",
            "Ryzen 7 7800X3D",
        ]

    def test_snake_case_alias(self):
        assert sort_cpus("open_speed") == sort_cpus("openSpeed")

    def test_unknown_key_raises(self):
        with pytest.raises(CatalogQueryError):
            sort_cpus("cores")

    def test_catalog_untouched(self):
        before = get_all_cpus()
        sort_cpus("price", descending=True)
        assert get_all_cpus() == before
        assert get_all_cpus()[0].name == "Ryzen 7 7800X3D"


class TestFilterCpus:
    """Bounds combine and keep catalog order."""

    def test_min_speed_is_exclusive(self):
        assert _names(filter_cpus(min_speed=900)) == [
            "Ryzen 7 7800X3D", "Core i5-13600K"]
        assert _names(filter_cpus(min_speed=920)) == ["Ryzen 7 7800X3D"]

    def test_max_price_is_inclusive(self):
        assert _names(filter_cpus(max_price=799)) == [
            "Ryzen 5 5600", "Core i3-12100F"]

    def test_year(self):
        assert _names(filter_cpus(year=2022)) == [
            "Core i5-13600K", "Core i3-12100F"]

    def test_combined(self):
        assert _names(filter_cpus(min_speed=500, max_price=2000, year=2022)) == [
            "Core i5-13600K", "Core i3-12100F"]

    def test_no_bounds_returns_everything(self):
        assert filter_cpus() == list(get_all_cpus())

    def test_negative_bound_raises(self):
        with pytest.raises(CatalogQueryError):
            filter_cpus(max_price=-1)

    @pytest.mark.parametrize("bounds", [
        {"max_price": float("nan")},
        {"min_speed": float("nan")},
        {"min_speed": float("inf")},
        {"year": 2022.5},
    ])
    def test_non_finite_or_fractional_bound_raises(self, bounds):
        with pytest.raises(CatalogQueryError):
            filter_cpus(**bounds)

    def test_custom_sequence(self):
        cpus = [CPU("A", 2020, 10, 5), CPU("B", 2021, 20, 50)]
        assert _names(filter_cpus(max_price=10, cpus=cpus)) == ["A"]


class TestSearchAndLookup:
    """Name search, lookup by name/slug and the details payload."""

    def test_search_ignores_case_and_punctuation(self):
        assert _names(search_cpus("i5 13600")) == ["Core i5-13600K"]
        assert _names(search_cpus("RYZEN")) == [
            "Ryzen 7 7800X3D", "Ryzen 5 5600"]

    def test_search_no_hits(self):
        assert search_cpus("xeon") == []

    def test_search_empty_query_raises(self):
        with pytest.raises(CatalogQueryError):
            search_cpus("  ")

    def test_slugify(self):
        assert slugify("Core i5-13600K") == "core-i5-13600k"

    @pytest.mark.parametrize("raw", [
        "Ryzen 5 5600",
        "ryzen 5 5600",
        "ryzen-5-5600",
        "cpu:ryzen-5-5600",
    ])
    def test_find_cpu(self, raw):
        assert find_cpu(raw).name == "Ryzen 5 5600"

    def test_find_cpu_miss(self):
        assert find_cpu("Ryzen 9 7950X") is None
        assert find_cpu("") is None

    def test_details_found(self):
        details = get_cpu_details("core-i3-12100f")
        assert details["found"] is True
        assert details["id"] == "cpu:core-i3-12100f"
        assert details["cpu"] == {
            "name": "Core i3-12100F", "year": 2022, "openSpeed": 580, "price": 699}

    def test_details_suggestions(self):
        details = get_cpu_details("Ryzen 9 7950X")
        assert details["found"] is False
        assert [s["name"] for s in details["suggestions"]] == [
            "Ryzen 7 7800X3D", "Ryzen 5 5600"]

    def test_details_nothing(self):
        details = get_cpu_details("Pentium")
        assert details["found"] is False
        assert "suggestions" not in details

    def test_details_requires_name(self):
        assert get_cpu_details("")["found"] is False
        assert get_cpu_details(None)["found"] is False

    def test_details_custom_sequence(self):
        cpus = [CPU("Athlon 3000G", 2019, 300, 400)]
        assert get_cpu_details("athlon-3000g", cpus=cpus)["cpu"]["price"] == 400
        assert get_cpu_details("Ryzen 5 5600", cpus=cpus)["found"] is False


class TestRendering:

    def test_cpu_to_dict_uses_open_speed_key(self):
        assert cpu_to_dict(get_all_cpus()[0]) == {
            "name": "Ryzen 7 7800X3D", "year": 2023, "openSpeed": 980, "price": 2699}

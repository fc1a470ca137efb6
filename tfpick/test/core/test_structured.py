"""Tests for tfpick.core.structured module."""

from tfpick.core.structured import as_str_dict, get_float, get_str, get_table, is_str_dict


class TestStrDict:
    def test_is_str_dict(self) -> None:
        assert is_str_dict({"a": 1})
        assert not is_str_dict({1: "a"})
        assert not is_str_dict(["a"])

    def test_as_str_dict(self) -> None:
        assert as_str_dict({"a": 1}) == {"a": 1}
        assert as_str_dict("a") is None


class TestGetters:
    def test_get_str(self) -> None:
        table = {"a": " x ", "b": "", "c": 3}
        assert get_str(table, "a") == "x"
        assert get_str(table, "b") is None
        assert get_str(table, "c") is None
        assert get_str(table, "missing") is None

    def test_get_float(self) -> None:
        table = {"i": 3, "f": 2.5, "b": True, "s": "1"}
        assert get_float(table, "i") == 3.0
        assert get_float(table, "f") == 2.5
        assert get_float(table, "b") is None
        assert get_float(table, "s") is None

    def test_get_table(self) -> None:
        table = {"t": {"k": "v"}, "n": 1}
        assert get_table(table, "t") == {"k": "v"}
        assert get_table(table, "n") is None

"""
Unit tests for the Parameter Store (Subtask 1.1).

Tests cover:
- Dotted key construction
- Typed getters and default-base fallback
- Parameter file loading
- Rejection of malformed values
"""

import pytest

from src.genevec.core.exceptions import ConfigurationError, ParameterError
from src.genevec.core.parameters import ParameterStore, param_key


class TestParamKey:
    """Test suite for dotted key construction."""

    def test_joins_parts(self):
        """Test parts are joined with dots."""
        assert param_key("pop.subpop.0.species", "min-gene") == "pop.subpop.0.species.min-gene"

    def test_skips_empty_parts(self):
        """Test None and empty parts are dropped."""
        assert param_key("base", None, "mutation-stdev", "") == "base.mutation-stdev"

    def test_numeric_parts(self):
        """Test segment and gene indices become key parts."""
        assert param_key("base", "segment", 1, "start") == "base.segment.1.start"
        assert param_key("base", "mutation-stdev", 7) == "base.mutation-stdev.7"


class TestParameterStore:
    """Test suite for typed parameter access."""

    def test_typed_getters(self):
        """Test string values are converted by the typed getters."""
        store = ParameterStore({
            "a.float": "0.25",
            "a.int": "12",
            "a.bool": "false",
            "a.text": "  gauss  ",
        })

        assert store.get_float("a.float") == 0.25
        assert store.get_int("a.int") == 12
        assert store.get_bool("a.bool") is False
        assert store.get_string("a.text") == "gauss"

    def test_native_values(self):
        """Test native Python values pass through."""
        store = ParameterStore({"x": 3, "y": 1.5, "z": True, "w": 4.0})

        assert store.get_int("x") == 3
        assert store.get_float("y") == 1.5
        assert store.get_bool("z") is True
        assert store.get_int("w") == 4

    def test_missing_returns_default(self):
        """Test missing keys return the supplied default."""
        store = ParameterStore()

        assert store.get_float("missing") is None
        assert store.get_int("missing", default=100) == 100
        assert store.get_bool("missing", default=True) is True
        assert not store.exists("missing")

    def test_default_base_fallback(self):
        """Test the default-base key is used only when the primary key is missing."""
        store = ParameterStore({
            "vector.species.min-gene": "-1",
            "vector.species.max-gene": "1",
            "pop.species.max-gene": "2",
        })

        assert store.get_float("pop.species.min-gene", "vector.species.min-gene") == -1.0
        assert store.get_float("pop.species.max-gene", "vector.species.max-gene") == 2.0
        assert store.exists("pop.species.min-gene", "vector.species.min-gene")

    @pytest.mark.parametrize("text", ["true", "TRUE", "yes", "on", "1"])
    def test_true_spellings(self, text):
        """Test accepted spellings of true."""
        assert ParameterStore({"b": text}).get_bool("b") is True

    @pytest.mark.parametrize("text", ["false", "No", "off", "0"])
    def test_false_spellings(self, text):
        """Test accepted spellings of false."""
        assert ParameterStore({"b": text}).get_bool("b") is False

    def test_malformed_values_raise(self):
        """Test unparsable values raise ParameterError carrying the key."""
        store = ParameterStore({"f": "abc", "i": "1.5", "b": "maybe", "t": True})

        with pytest.raises(ParameterError) as exc_info:
            store.get_float("f")
        assert exc_info.value.key == "f"
        assert exc_info.value.value == "abc"

        with pytest.raises(ParameterError):
            store.get_int("i")
        with pytest.raises(ParameterError):
            store.get_bool("b")
        with pytest.raises(ParameterError):
            store.get_float("t")

    def test_parameter_error_is_configuration_error(self):
        """Test ParameterError can be caught as a ConfigurationError or ValueError."""
        store = ParameterStore({"i": "ten"})

        with pytest.raises(ConfigurationError):
            store.get_int("i")
        with pytest.raises(ValueError):
            store.get_int("i")

    def test_set_remove_and_iteration(self):
        """Test mutation and container protocol."""
        store = ParameterStore({"a": "1"})
        store.set("b", "2")
        assert len(store) == 2
        assert set(store) == {"a", "b"}

        store.remove("a")
        assert "a" not in store
        assert store.to_dict() == {"b": "2"}

        with pytest.raises(ParameterError):
            store.set("", "x")


class TestParameterFile:
    """Test suite for loading parameter files."""

    def test_from_file(self, tmp_path):
        """Test key = value lines, comments and blank lines."""
        params = tmp_path / "species.params"
        params.write_text(
            "# species\n"
            "\n"
            "pop.subpop.0.species.genome-size = 3\n"
            "pop.subpop.0.species.mutation-type=gauss\n"
            "pop.subpop.0.species.mutation-stdev = 0.5\n"
            "pop.subpop.0.species.mutation-stdev = 0.75\n"
        )

        store = ParameterStore.from_file(params)

        assert store.get_int("pop.subpop.0.species.genome-size") == 3
        assert store.get_string("pop.subpop.0.species.mutation-type") == "gauss"
        assert store.get_float("pop.subpop.0.species.mutation-stdev") == 0.75

    def test_from_file_rejects_bad_line(self, tmp_path):
        """Test a line without '=' is reported with its line number."""
        params = tmp_path / "bad.params"
        params.write_text("a = 1\nnot a parameter\n")

        with pytest.raises(ParameterError, match=":2:"):
            ParameterStore.from_file(params)

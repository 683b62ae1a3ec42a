"""
Parameter store for species configuration.

Parameters are addressed by dotted keys such as ``pop.subpop.0.species.min-gene``.
Every lookup takes a primary key and an optional key under a default base; the
primary key wins when both are present.
"""

from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

from src.genevec.core.exceptions import ParameterError


_TRUE_VALUES = {"true", "yes", "on", "1"}
_FALSE_VALUES = {"false", "no", "off", "0"}


def param_key(*parts: Any) -> str:
    """Join key parts with dots, skipping empty parts."""
    return ".".join(str(p) for p in parts if p is not None and str(p) != "")


class ParameterStore:
    """
    Dotted-key parameter database with typed getters.

    Values may be given as strings (as read from a parameter file) or as
    native Python values; typed getters convert either form.
    """

    def __init__(self, parameters: Optional[Mapping[str, Any]] = None):
        self._parameters: Dict[str, Any] = {}
        for key, value in (parameters or {}).items():
            self.set(key, value)

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "ParameterStore":
        """
        Load parameters from a ``key = value`` file.

        Blank lines and lines starting with ``#`` are ignored. Later
        definitions of the same key replace earlier ones.
        """
        store = cls()
        with open(filepath, "r", encoding="utf-8") as f:
            for lineno, raw_line in enumerate(f, start=1):
                line = raw_line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" not in line:
                    raise ParameterError(
                        f"{filepath}:{lineno}: expected 'key = value', got {line!r}"
                    )
                key, value = line.split("=", 1)
                store.set(key.strip(), value.strip())
        return store

    def set(self, key: str, value: Any) -> None:
        """Set (or replace) a parameter."""
        if not key:
            raise ParameterError("Parameter key must not be empty")
        self._parameters[key.strip()] = value

    def remove(self, key: str) -> None:
        self._parameters.pop(key, None)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._parameters)

    def __contains__(self, key: str) -> bool:
        return key in self._parameters

    def __iter__(self) -> Iterator[str]:
        return iter(self._parameters)

    def __len__(self) -> int:
        return len(self._parameters)

    def _lookup(self, key: str, default_key: Optional[str]) -> Tuple[Any, Optional[str]]:
        if key in self._parameters:
            return self._parameters[key], key
        if default_key and default_key in self._parameters:
            return self._parameters[default_key], default_key
        return None, None

    def exists(self, key: str, default_key: Optional[str] = None) -> bool:
        """Return True if the key (or its default-base key) is defined."""
        return self._lookup(key, default_key)[1] is not None

    def get_string(
        self,
        key: str,
        default_key: Optional[str] = None,
        default: Optional[str] = None
    ) -> Optional[str]:
        value, found = self._lookup(key, default_key)
        if found is None:
            return default
        return str(value).strip()

    def get_float(
        self,
        key: str,
        default_key: Optional[str] = None,
        default: Optional[float] = None
    ) -> Optional[float]:
        value, found = self._lookup(key, default_key)
        if found is None:
            return default
        if isinstance(value, bool):
            raise ParameterError(f"Parameter {found} must be a number, got {value!r}", found, value)
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ParameterError(f"Parameter {found} must be a number, got {value!r}", found, value)

    def get_int(
        self,
        key: str,
        default_key: Optional[str] = None,
        default: Optional[int] = None
    ) -> Optional[int]:
        value, found = self._lookup(key, default_key)
        if found is None:
            return default
        if isinstance(value, bool):
            raise ParameterError(f"Parameter {found} must be an integer, got {value!r}", found, value)
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            if value.is_integer():
                return int(value)
            raise ParameterError(f"Parameter {found} must be an integer, got {value!r}", found, value)
        try:
            return int(str(value).strip())
        except ValueError:
            raise ParameterError(f"Parameter {found} must be an integer, got {value!r}", found, value)

    def get_bool(
        self,
        key: str,
        default_key: Optional[str] = None,
        default: Optional[bool] = None
    ) -> Optional[bool]:
        value, found = self._lookup(key, default_key)
        if found is None:
            return default
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        raise ParameterError(f"Parameter {found} must be a boolean, got {value!r}", found, value)

    def __repr__(self) -> str:
        return f"ParameterStore(parameters={len(self._parameters)})"

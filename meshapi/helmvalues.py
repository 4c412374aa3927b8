"""Free-form nested values addressed by dotted paths."""

from __future__ import annotations

import copy
import json
import math
from decimal import Decimal
from typing import Any, Callable, Optional, Union

import yaml


class HelmValuesError(ValueError):
    """Raised when a path cannot be read or written as requested."""


def _json_path(fields: list[str]) -> str:
    return "." + ".".join(fields)


def _type_name(value: Any) -> str:
    return type(value).__name__


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return format(Decimal(repr(value)).normalize(), "f")


def _jsonify(value: Any) -> Any:
    if isinstance(value, dict):
        return {_key_text(k): _jsonify(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_jsonify(item) for item in value]
    return value


def _key_text(key: Any) -> str:
    if isinstance(key, bool):
        return "true" if key else "false"
    return key if isinstance(key, str) else str(key)


class HelmValues:
    """A mapping of chart values, read and written through dotted paths."""

    __slots__ = ("_data",)
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, values: Optional[dict[str, Any]] = None) -> None:
        self._data: Optional[dict[str, Any]] = {} if values is None else values

    @classmethod
    def _wrap(cls, data: Optional[dict[str, Any]]) -> "HelmValues":
        obj = cls.__new__(cls)
        obj._data = data
        return obj

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HelmValues):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        return f"HelmValues({self._data!r})"

    def get_content(self) -> Optional[dict[str, Any]]:
        """The underlying mapping, not copied."""
        return self._data

    def _lookup(self, path: str) -> tuple[Any, bool]:
        if self._data is None:
            return None, False
        fields = path.split(".")
        value: Any = self._data
        for index, name in enumerate(fields):
            if value is None:
                return None, False
            if not isinstance(value, dict):
                raise HelmValuesError(
                    f"{_json_path(fields[:index + 1])} accessor error: {value!r} is of the "
                    f"type {_type_name(value)}, expected map"
                )
            if name not in value:
                return None, False
            value = value[name]
        return value, True

    def _quiet_value(self, path: str) -> Any:
        try:
            return self._lookup(path)[0]
        except HelmValuesError:
            return None

    def _typed(self, path: str, accept: Callable[[Any], bool], expected: str) -> Any:
        value, found = self._lookup(path)
        if not found or value is None:
            return None
        if not accept(value):
            raise HelmValuesError(
                f"{path} accessor error: {value!r} is of the type {_type_name(value)}, "
                f"expected {expected}"
            )
        return value

    def get_field(self, path: str) -> Any:
        """The value at ``path`` without copying, or ``None`` when absent."""
        return self._lookup(path)[0]

    def get_bool(self, path: str) -> Optional[bool]:
        return self._typed(path, lambda v: isinstance(v, bool), "bool")

    def get_and_remove_bool(self, path: str) -> Optional[bool]:
        value = self.get_bool(path)
        self.remove_field(path)
        return value

    def get_string(self, path: str) -> Optional[str]:
        return self._typed(path, lambda v: isinstance(v, str), "string")

    def get_and_remove_string(self, path: str) -> Optional[str]:
        value = self.get_string(path)
        self.remove_field(path)
        return value

    def get_force_number_to_string(self, path: str) -> Optional[str]:
        """A string, or a number rendered as a string, at ``path``."""
        value, found = self._lookup(path)
        if not found or value is None:
            return None
        if isinstance(value, str):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, float):
            return _format_float(value)
        raise HelmValuesError(f"could not convert type to string: {_type_name(value)}={value!r}")

    def get_and_remove_force_number_to_string(self, path: str) -> Optional[str]:
        value = self.get_force_number_to_string(path)
        self.remove_field(path)
        return value

    def get_int(self, path: str) -> Optional[int]:
        return self._typed(
            path, lambda v: isinstance(v, int) and not isinstance(v, bool), "int"
        )

    def get_and_remove_int(self, path: str) -> Optional[int]:
        value = self.get_int(path)
        self.remove_field(path)
        return value

    def get_float(self, path: str) -> Optional[float]:
        return self._typed(path, lambda v: isinstance(v, float), "float")

    def get_and_remove_float(self, path: str) -> Optional[float]:
        value = self.get_float(path)
        self.remove_field(path)
        return value

    def _list_at(self, path: str, strings_only: bool) -> Optional[list[Any]]:
        if self._data is None:
            return None
        try:
            value, found = self._lookup(path)
            if not found:
                return None
            if not isinstance(value, list):
                raise HelmValuesError(
                    f"{path} accessor error: {value!r} is of the type {_type_name(value)}, "
                    f"expected list"
                )
            if strings_only:
                for item in value:
                    if not isinstance(item, str):
                        raise HelmValuesError(
                            f"{path} accessor error: contains non-string value in the list: "
                            f"{item!r} is of the type {_type_name(item)}, expected string"
                        )
                return list(value)
            return copy.deepcopy(value)
        except HelmValuesError:
            if self._quiet_value(path) is None:
                return None
            raise

    def get_string_list(self, path: str) -> Optional[list[str]]:
        """A copy of the list of strings at ``path``."""
        return self._list_at(path, strings_only=True)

    def get_and_remove_string_list(self, path: str) -> Optional[list[str]]:
        value = self.get_string_list(path)
        self.remove_field(path)
        return value

    def get_list(self, path: str) -> Optional[list[Any]]:
        """A deep copy of the list at ``path``."""
        return self._list_at(path, strings_only=False)

    def get_and_remove_list(self, path: str) -> Optional[list[Any]]:
        value = self.get_list(path)
        self.remove_field(path)
        return value

    def get_map(self, path: str) -> Optional[dict[str, Any]]:
        """A deep copy of the mapping at ``path``."""
        value, found = self._lookup(path)
        if not found or value is None:
            return None
        if not isinstance(value, dict):
            raise HelmValuesError(
                f"{path} accessor error: {value!r} is of the type {_type_name(value)}, "
                f"expected map"
            )
        return copy.deepcopy(value)

    def set_field(self, path: str, value: Any) -> None:
        """Store a copy of ``value`` at ``path``, creating mappings on the way."""
        if self._data is None:
            self._data = {}
        fields = path.split(".")
        target = self._data
        for index, name in enumerate(fields[:-1]):
            if name in target:
                child = target[name]
                if not isinstance(child, dict):
                    raise HelmValuesError(
                        f"value cannot be set because {_json_path(fields[:index + 1])} "
                        f"is not a map"
                    )
                target = child
            else:
                child = {}
                target[name] = child
                target = child
        target[fields[-1]] = copy.deepcopy(value)

    def set_string_list(self, path: str, value: list[str]) -> None:
        self.set_field(path, list(value))

    def remove_field(self, path: str) -> None:
        """Delete the value at ``path`` if it exists."""
        if self._data is None:
            return
        fields = path.split(".")
        target = self._data
        for name in fields[:-1]:
            child = target.get(name)
            if not isinstance(child, dict):
                return
            target = child
        target.pop(fields[-1], None)

    def to_json(self) -> str:
        return json.dumps(self._data, sort_keys=True, separators=(",", ":"))

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "HelmValues":
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise HelmValuesError(str(exc)) from exc
        if data is not None and not isinstance(data, dict):
            raise HelmValuesError(f"cannot unmarshal {_type_name(data)} into HelmValues")
        return cls._wrap(data)

    def to_yaml(self) -> str:
        if self._data is None:
            return "null\n"
        return yaml.safe_dump(
            self._data, default_flow_style=False, sort_keys=True, allow_unicode=True
        )

    @classmethod
    def from_yaml(cls, text: Union[str, bytes]) -> "HelmValues":
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise HelmValuesError(str(exc)) from exc
        if data is not None and not isinstance(data, dict):
            raise HelmValuesError(f"cannot unmarshal {_type_name(data)} into HelmValues")
        return cls._wrap(_jsonify(data))

    def deep_copy(self) -> "HelmValues":
        return type(self)._wrap(copy.deepcopy(self._data))
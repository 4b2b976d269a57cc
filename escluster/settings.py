from __future__ import annotations

import os
import re
from datetime import timedelta
from typing import Dict, Optional, Union, Mapping, Iterator, List

from escluster import constants

_TIME_VALUE_RE = re.compile(r"^\s*(\d+)\s*(ms|s|m|h|d)?\s*$")
_TIME_UNITS = {
    "ms": lambda v: timedelta(milliseconds=v),
    "s": lambda v: timedelta(seconds=v),
    "m": lambda v: timedelta(minutes=v),
    "h": lambda v: timedelta(hours=v),
    "d": lambda v: timedelta(days=v),
}


class Settings(Mapping[str, str]):
    """
    Immutable flat key/value view of client configuration.

    Every value is kept as a string, the way the cluster reports its own settings,
    and is converted on read by the typed getters.
    """

    EMPTY: Settings = None

    def __init__(self, values: Optional[Dict[str, str]] = None):
        self.__values = dict(values) if values else {}

    def __getitem__(self, key: str) -> str:
        return self.__values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.__values)

    def __len__(self) -> int:
        return len(self.__values)

    def __repr__(self):
        return f"Settings({self.__values!r})"

    @staticmethod
    def builder() -> SettingsBuilder:
        return SettingsBuilder()

    def get_as_bool(self, key: str, default: Optional[bool] = None) -> Optional[bool]:
        value = self.get(key)
        if value is None:
            return default
        return Settings.parse_bool(key, value)

    def get_as_int(self, key: str, default: Optional[int] = None) -> Optional[int]:
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"Failed to parse int setting [{key}] with value [{value}]")

    def get_as_timedelta(self, key: str, default: Optional[timedelta] = None) -> Optional[timedelta]:
        value = self.get(key)
        if value is None:
            return default
        match = _TIME_VALUE_RE.match(value)
        if not match:
            raise ValueError(f"Failed to parse time setting [{key}] with value [{value}]")
        return _TIME_UNITS[match.group(2) or "ms"](int(match.group(1)))

    def get_as_list(self, key: str, default: Optional[List[str]] = None) -> Optional[List[str]]:
        value = self.get(key)
        if value is None:
            return default
        value = value.strip()
        if value.startswith("[") and value.endswith("]"):
            value = value[1:-1]
        return [item.strip() for item in value.split(",") if item.strip()]

    def get_by_prefix(self, prefix: str) -> Settings:
        return Settings({key[len(prefix) :]: value for key, value in self.__values.items() if key.startswith(prefix)})

    @staticmethod
    def parse_bool(key: str, value: Union[str, bool]) -> bool:
        if isinstance(value, bool):
            return value
        if value.lower() == "true":
            return True
        if value.lower() == "false":
            return False
        raise ValueError(f"Failed to parse value [{value}] as only [true] or [false] are allowed for [{key}]")

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> Settings:
        # ESCLUSTER_CLUSTER__NAME -> cluster.name
        environ = os.environ if environ is None else environ
        prefix = constants.Settings.ENV_PREFIX
        values = {}
        for key, value in environ.items():
            if key.startswith(prefix) and len(key) > len(prefix):
                values[key[len(prefix) :].lower().replace("__", ".")] = value
        return cls(values)


Settings.EMPTY = Settings()


class SettingsBuilder:
    def __init__(self):
        self.__values: Dict[str, str] = {}

    def put(self, key_or_settings: Union[str, Mapping[str, object]], value: object = None) -> SettingsBuilder:
        if isinstance(key_or_settings, Mapping):
            for key, inner_value in key_or_settings.items():
                self.put(key, inner_value)
            return self

        if value is None:
            self.__values.pop(key_or_settings, None)
        elif isinstance(value, bool):
            self.__values[key_or_settings] = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            self.__values[key_or_settings] = ",".join(map(str, value))
        else:
            self.__values[key_or_settings] = str(value)
        return self

    def put_if_absent(self, key: str, value: object) -> SettingsBuilder:
        if key not in self.__values:
            self.put(key, value)
        return self

    def remove(self, key: str) -> SettingsBuilder:
        self.__values.pop(key, None)
        return self

    def build(self) -> Settings:
        return Settings(self.__values)

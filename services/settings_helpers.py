"""Helpers for reading typed settings from the environment."""

from __future__ import annotations

import os
from typing import Any


def _coerce_value(raw: str, value_type: str, default: Any) -> Any:
    try:
        if value_type == "float":
            return float(raw)
        if value_type == "bool":
            return raw.lower() in ("true", "1", "yes", "on")
        return raw
    except ValueError:
        return default


def get_setting(env_var: str, default: Any, value_type: str = "string") -> Any:
    """Get a setting from the environment, falling back to a default.

    Empty values are treated as unset. Values that fail to coerce to
    value_type fall back to the default as well.
    """
    raw = os.getenv(env_var)
    if raw is not None and raw != "":
        return _coerce_value(raw, value_type, default)
    return default


def get_float_setting(env_var: str, default: float) -> float:
    return float(get_setting(env_var, default, "float"))


def get_bool_setting(env_var: str, default: bool) -> bool:
    return bool(get_setting(env_var, default, "bool"))

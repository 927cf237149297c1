# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Helpers for CLI flags whose defaults can come from the environment."""

import os
from typing import Any, Callable, Optional, TypeVar, Union

T = TypeVar("T")


def env_or_default(
    env_var: str,
    default: T,
    value_type: Optional[Union[type, Callable[..., Any]]] = None,
) -> T:
    """
    Get value from environment variable or return default.

    Args:
        env_var: Environment variable name (e.g., "NOMAD_ADDR")
        default: Default value if env var not set
        value_type: Type used to convert the env value. If None, the type is
        taken from type(default); a None default leaves the value as a string.

    Returns:
        Environment variable value (type-converted) or default
    """
    value = os.environ.get(env_var)
    if value is None or value == "":
        return default

    if value_type is None and default is None:
        return value  # type: ignore[return-value]

    target_type = value_type if value_type is not None else type(default)
    if target_type is bool:
        return value.lower() in ("true", "1", "yes", "on")  # type: ignore
    return target_type(value)  # type: ignore


def add_argument(
    parser,
    *,
    flag_name: str,
    env_var: str,
    default: Any,
    help: str,
    arg_type: Optional[Union[type, Callable[..., Any]]] = str,
    **kwargs: Any,
) -> None:
    """
    Add a CLI argument whose default is read from ``env_var`` when set.

    Args:
        parser: ArgumentParser or argument group
        flag_name: Flag (must start with '--', e.g., "--address")
        env_var: Environment variable name
        default: Default value when neither flag nor env var is given
        help: Help text
        arg_type: Type for the argument (default: str)
    """
    value_type = arg_type if isinstance(arg_type, type) else None
    kwargs.update(
        {
            "dest": kwargs.get("dest") or flag_name.lstrip("-").replace("-", "_"),
            "default": env_or_default(env_var, default, value_type=value_type),
            "help": f"{help} (env var: {env_var} | default: {default})",
        }
    )
    if arg_type is not None:
        kwargs["type"] = arg_type
    parser.add_argument(flag_name, **kwargs)

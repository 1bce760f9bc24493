#!/usr/bin/env python3
"""
Artifact Store Credentials

Reads the artifact store connection settings from CAFCE_-prefixed environment
variables:

    CAFCE_AWS_SERVER_ADDRESS  (required)
    CAFCE_AWS_ACCESS_KEY      (required)
    CAFCE_AWS_SECRET_KEY      (required)
    CAFCE_AWS_INSECURE        (optional, default false)
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from typeguard import typechecked

from cafce.errors import CafceError


ENV_PREFIX = "CAFCE_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class EnvError(CafceError):
    """Required environment variable missing or invalid"""


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise EnvError(f"{name} must be a boolean, got {value!r}")


@typechecked
@dataclass
class Env:
    """Artifact store credentials. The secret key is excluded from repr."""

    aws_server_address: str
    aws_access_key: str
    aws_secret_key: str = field(repr=False)
    aws_insecure: bool = False

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "Env":
        """
        Load credentials from the process environment (or a given mapping).

        Raises:
            EnvError: If a required variable is unset or a value is invalid
        """
        if environ is None:
            environ = os.environ

        def required(name: str) -> str:
            var = f"{ENV_PREFIX}{name}"
            value = environ.get(var)
            if not value:
                raise EnvError(f"Missing environment variable: {var}")
            return value

        insecure_var = f"{ENV_PREFIX}AWS_INSECURE"
        return cls(
            aws_server_address=required("AWS_SERVER_ADDRESS"),
            aws_access_key=required("AWS_ACCESS_KEY"),
            aws_secret_key=required("AWS_SECRET_KEY"),
            aws_insecure=_parse_bool(insecure_var, environ.get(insecure_var, "")),
        )

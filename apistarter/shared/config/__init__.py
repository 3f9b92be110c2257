# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .settings import AppConfig, DatabaseConfig, JwtConfig, SecurityConfig, load_config, parse_duration

__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "JwtConfig",
    "SecurityConfig",
    "load_config",
    "parse_duration",
]

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .settings import (
    AppConfig,
    AssetStoreConfig,
    DatabaseConfig,
    PostsConfig,
    SecurityConfig,
    load_config,
)

__all__ = [
    "AppConfig",
    "AssetStoreConfig",
    "DatabaseConfig",
    "PostsConfig",
    "SecurityConfig",
    "load_config",
]

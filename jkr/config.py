# -*- coding: utf-8 -*-
"""Location: ./jkr/config.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

jkr Codec Configuration.
This module defines the ambient settings of the codec using Pydantic.
It loads configuration from environment variables with sensible defaults.
The compression level is part of the file format and is not a setting.

Environment variables:
- JKR_LOG_LEVEL: Level of the ``jkr`` logger (default: unset, the level is left to the application)
- JKR_MAX_DEPTH: Deepest table nesting accepted when encoding or decoding (default: 200, at most 400)
- JKR_MAX_DECOMPRESSED_BYTES: Default bound on decompressed payload size (default: unbounded)
- JKR_READ_CHUNK_SIZE: Bytes requested per read from an input stream (default: 65536)

Examples:
    >>> from jkr.config import Settings
    >>> s = Settings(log_level="debug")
    >>> s.log_level
    'DEBUG'
    >>> s.max_depth
    200
    >>> Settings(max_decompressed_bytes=1024).max_decompressed_bytes
    1024
"""

# Standard
from functools import lru_cache
from typing import Any, Literal, Optional

# Third-Party
from pydantic import Field, field_validator, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict

# First-Party
from jkr.constants import MAX_NESTING_LIMIT


class Settings(BaseSettings):
    """
    jkr codec configuration settings.

    Examples:
        >>> from jkr.config import Settings
        >>> s = Settings()
        >>> s.read_chunk_size
        65536
        >>> s.max_decompressed_bytes is None
        True
        >>> try:
        ...     Settings(log_level="verbose")
        ... except ValueError:
        ...     print("error")
        error
    """

    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = Field(default=None, description="Level of the jkr package logger; None leaves it unset")
    max_depth: PositiveInt = Field(default=200, le=MAX_NESTING_LIMIT, description="Deepest table nesting accepted by the encoder and decoder")
    max_decompressed_bytes: Optional[PositiveInt] = Field(default=None, description="Default bound on the decompressed literal size; None means unbounded")
    read_chunk_size: PositiveInt = Field(default=64 * 1024, description="Bytes requested per read from an input stream")

    model_config = SettingsConfigDict(env_prefix="JKR_", env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore")

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Optional[str]) -> Optional[str]:
        """
        Normalize and validate the log level value.

        The value is uppercased before validation so that "debug", "Debug",
        etc. are all accepted as "DEBUG".

        Args:
            v (Optional[str]): The log level string provided via configuration or environment, or None.

        Returns:
            Optional[str]: The validated and normalized (uppercase) log level, or None when unset.

        Raises:
            ValueError: If the provided value is not one of
                {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}.
        """
        if v is None:
            return None
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_up = str(v).upper()
        if v_up not in allowed:
            raise ValueError(f"Invalid log_level: {v}")
        return v_up


@lru_cache()
def get_settings(**kwargs: Any) -> Settings:
    """Get cached settings instance.

    Args:
        **kwargs: Keyword arguments to pass to the Settings setup.

    Returns:
        Settings: A cached instance of the Settings class.

    Examples:
        >>> settings = get_settings()
        >>> isinstance(settings, Settings)
        True
        >>> settings is get_settings()
        True
    """
    return Settings(**kwargs)


# Lazy "instance" of settings
class LazySettingsWrapper:
    """Lazily initialize settings singleton on getattr"""

    def __getattr__(self, key: str) -> Any:
        """Get the real settings object and forward to it

        Args:
            key: The key to fetch from settings

        Returns:
            Any: The value of the attribute on the settings
        """
        return getattr(get_settings(), key)


settings = LazySettingsWrapper()

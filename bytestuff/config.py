"""CLI configuration via pydantic-settings."""

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings

_VARIANT_ALIASES = {"cobs/r": "cobsr", "reduced": "cobsr"}


class Settings(BaseSettings):
    model_config = {
        "env_prefix": "BYTESTUFF_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    # Codec
    VARIANT: str = "cobs"

    # Framing
    APPEND_DELIMITER: bool = False
    MAX_FRAME_SIZE: int | None = None

    # I/O
    HEX: bool = False
    LOG_LEVEL: str = "INFO"

    @field_validator("VARIANT", mode="before")
    @classmethod
    def normalize_variant(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip().lower()
            v = _VARIANT_ALIASES.get(v, v)
            if v not in ("cobs", "cobsr"):
                raise ValueError(f"VARIANT must be one of 'cobs', 'cobsr', got '{v}'")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        if not isinstance(getattr(logging, v.upper(), None), int):
            raise ValueError(f"Invalid log level: {v!r}")
        return v.upper()

    @field_validator("MAX_FRAME_SIZE")
    @classmethod
    def validate_max_frame_size(cls, v: int | None) -> int | None:
        if v is not None and v <= 0:
            raise ValueError(f"MAX_FRAME_SIZE must be positive, got {v}")
        return v

    @property
    def reduced(self) -> bool:
        return self.VARIANT == "cobsr"

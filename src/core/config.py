"""
Process-wide token defaults.

Loaded lazily from the environment, overridable per TokenRegistry instance.
"""
import os
import string
from typing import Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ALPHABET = string.ascii_letters + string.digits

ENV_PREFIX = "FORM_TOKEN_"

class TokenSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    token_length: int = Field(default=16, ge=1)
    # Must stay finite: every page load adds a token to the bucket
    token_limit: int = Field(default=10, ge=1)
    max_usage: int = Field(default=1, ge=1)
    alphabet: str = DEFAULT_ALPHABET

    @field_validator("alphabet")
    @classmethod
    def _check_alphabet(cls, value: str) -> str:
        if len(set(value)) < 2:
            raise ValueError("alphabet needs at least two distinct characters")
        return value

def load_settings(environ: Optional[Mapping[str, str]] = None) -> TokenSettings:
    """
    Builds settings from FORM_TOKEN_* variables.
    Raises pydantic.ValidationError on bad values.
    """
    env = os.environ if environ is None else environ
    fields = {
        "token_length": env.get(ENV_PREFIX + "LENGTH"),
        "token_limit": env.get(ENV_PREFIX + "LIMIT"),
        "max_usage": env.get(ENV_PREFIX + "MAX_USAGE"),
        "alphabet": env.get(ENV_PREFIX + "ALPHABET"),
    }
    return TokenSettings(**{k: v for k, v in fields.items() if v is not None})

_settings: Optional[TokenSettings] = None

def get_settings() -> TokenSettings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings

def set_settings(settings: Optional[TokenSettings]):
    """Replaces the process-wide defaults. None reloads from the environment on next use."""
    global _settings
    _settings = settings

"""Configuration system for exact-entropy.

Uses pydantic-settings for declarative, layered configuration:
init kwargs -> environment variables (EXACT_ENTROPY_*) -> .env file -> field defaults.

Overrides are applied via resolve_config() which creates a new config
instance without mutating the defaults.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from exact_entropy.exceptions import ConfigValidationError


class EntropyConfig(BaseSettings):
    """Configuration for exact-entropy.

    Resolution order: init kwargs -> env vars (EXACT_ENTROPY_*) -> .env file -> defaults.

    Fields are grouped by the backend or subsystem that reads them. Only the
    factory and the backends look at this object; the algorithms never do.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXACT_ENTROPY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Source selection ---

    raw_source_type: str = Field(
        default="local",
        description="Primary raw octet backend identifier",
    )
    fallback_mode: str = Field(
        default="error",
        description="Fallback backend: 'error' (none), 'local', 'mock_uniform'",
    )

    # --- Local backend ---

    local_device_path: str = Field(
        default="",
        description="Device or file to read octets from (empty = os.urandom)",
    )

    # --- Counter-mode cipher backend ---

    counter_key_hex: str = Field(
        default="",
        description="AES key for the counter stream, hex encoded (16, 24 or 32 bytes)",
    )
    counter_seed: str = Field(
        default="",
        description="Text seed hashed into an AES key when counter_key_hex is empty",
    )

    # --- Network backend ---

    network_checkbuf_url: str = Field(
        default="https://www.random.org/cgi-bin/checkbuf",
        description="Endpoint reporting the remote buffer fill level as 'NN%'",
    )
    network_batch_url: str = Field(
        default="https://www.random.org/cgi-bin/randbyte?nbytes=256&format=f",
        description="Endpoint returning one batch of raw random octets",
    )
    network_timeout_s: float = Field(
        default=10.0,
        description="HTTP request timeout in seconds",
    )
    throttle_low_pct: int = Field(
        default=20,
        description="Below this fill level, wait and re-query before fetching",
    )
    throttle_high_pct: int = Field(
        default=50,
        description="At or above this fill level, fetch immediately",
    )
    throttle_wait_s: float = Field(
        default=10.0,
        description="Sleep between fill-level queries while below the low mark",
    )
    throttle_backoff_s_per_pct: float = Field(
        default=0.2,
        description="Seconds slept per percentage point short of the high mark",
    )

    # --- Mock backend ---

    mock_seed: int | None = Field(
        default=None,
        description="Seed for the mock backend (None = fresh OS entropy)",
    )

    # --- Logging ---

    log_level: str = Field(
        default="none",
        description="Draw logging verbosity: 'none', 'summary', 'full'",
    )
    diagnostic_mode: bool = Field(
        default=False,
        description="Store all draw records in memory for analysis",
    )


_ALL_FIELDS: frozenset[str] = frozenset(EntropyConfig.model_fields.keys())


def resolve_config(
    defaults: EntropyConfig,
    overrides: dict[str, Any] | None,
) -> EntropyConfig:
    """Create a new config instance merging defaults with overrides.

    Args:
        defaults: The base configuration loaded from environment.
        overrides: Field name to value mapping.

    Returns:
        A new EntropyConfig with overrides applied, or *defaults* itself
        when there is nothing to override.

    Raises:
        ConfigValidationError: If a key is unknown or a value fails validation.
    """
    if not overrides:
        return defaults

    unknown = sorted(set(overrides) - _ALL_FIELDS)
    if unknown:
        raise ConfigValidationError(f"Unknown config field(s): {', '.join(unknown)}")

    # model_copy(update=...) skips validation; model_validate coerces types.
    merged = defaults.model_dump()
    merged.update(overrides)
    try:
        return EntropyConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc

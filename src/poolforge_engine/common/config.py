"""Poolforge-Engine configuration via pydantic-settings."""

import warnings
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

QUANTITY_POLICIES = ("lenient", "strict")

class PoolforgeSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="POOLFORGE_")

    environment: str = "development"
    log_level: str = "INFO"

    # Quantity parsing
    # "lenient" coerces unparseable quantities to 0, "strict" rejects them.
    quantity_policy: str = "lenient"
    unlimited_token: str = "unlimited"

    # Pool defaults
    default_consumer_type: str = "system"

    def validate_policy(self) -> None:
        """Raise if the configured quantity policy is unknown."""
        if self.quantity_policy not in QUANTITY_POLICIES:
            raise ValueError(
                f"POOLFORGE_QUANTITY_POLICY must be one of {', '.join(QUANTITY_POLICIES)}, "
                f"got: {self.quantity_policy!r}"
            )

        if self.environment != "development" and self.quantity_policy == "lenient":
            warnings.warn(
                "Lenient quantity parsing is active outside development; "
                "malformed quantities will silently become 0. "
                "Set POOLFORGE_QUANTITY_POLICY=strict to reject them.",
                UserWarning,
                stacklevel=2,
            )

@lru_cache
def get_settings() -> PoolforgeSettings:
    settings = PoolforgeSettings()
    settings.validate_policy()
    return settings

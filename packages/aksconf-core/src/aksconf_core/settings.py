"""Engine settings for aksconf.

EngineSettings is passed explicitly to the engine. The engine never reads
process-wide state on its own; ``EngineSettings.from_env()`` is a convenience
for callers (such as the CLI) that want environment-driven settings.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from aksconf_core.errors import SettingsError

# Environment variable for the validation worker count
MAX_WORKERS_ENV_VAR = "AKSCONF_MAX_WORKERS"

# Default validation worker count
DEFAULT_MAX_WORKERS = 4


class EngineSettings(BaseModel):
    """Settings for one ConfigEngine.

    Attributes:
        max_workers: Worker threads for field and section checks.
            0 or 1 runs every check on the calling thread.

    Example:
        >>> EngineSettings(max_workers=0).max_workers
        0
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_workers: int = Field(
        default=DEFAULT_MAX_WORKERS,
        ge=0,
        le=64,
        description="Worker threads for validation (0 = sequential)",
    )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineSettings:
        """Build settings from environment variables.

        Args:
            environ: Environment mapping. Defaults to ``os.environ``.

        Returns:
            EngineSettings with values from the environment, defaults otherwise.

        Raises:
            SettingsError: If AKSCONF_MAX_WORKERS is not an integer in 0..64.
        """
        env = os.environ if environ is None else environ
        raw = env.get(MAX_WORKERS_ENV_VAR, "").strip()
        if not raw:
            return cls()

        try:
            max_workers = int(raw)
        except ValueError as e:
            raise SettingsError(MAX_WORKERS_ENV_VAR, f"expected an integer, got {raw!r}") from e

        try:
            return cls(max_workers=max_workers)
        except ValidationError as e:
            raise SettingsError(MAX_WORKERS_ENV_VAR, "must be between 0 and 64") from e

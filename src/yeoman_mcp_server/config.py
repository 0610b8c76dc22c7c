"""Server configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

GENERATOR_DIR_ENV = "YEOMAN_MCP_GENERATOR_DIR"
DEFAULT_REGISTRY_URL = "https://registry.npmjs.org/-/v1/search"


class ServerConfig(BaseModel):
    """Immutable settings shared by every tool invocation.

    Attributes:
        generator_dir: Persistent workspace for installed generators. When unset,
            every invocation installs into a disposable temporary directory.
        npm_command: Package manager executable used for installs.
        runner_package: npm package providing the ``yo`` runner.
        registry_url: npm registry search endpoint.
        search_timeout: Seconds allowed for a registry search request.
        install_timeout: Seconds allowed for ``npm install``.
        help_timeout: Seconds allowed for ``yo <generator> --help``.
        run_timeout: Seconds allowed for a generator run.

    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    generator_dir: Path | None = None
    npm_command: str = "npm"
    runner_package: str = "yo"
    registry_url: str = DEFAULT_REGISTRY_URL
    search_timeout: float = Field(default=30.0, gt=0)
    install_timeout: float = Field(default=600.0, gt=0)
    help_timeout: float = Field(default=60.0, gt=0)
    run_timeout: float = Field(default=900.0, gt=0)

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, **overrides: object
    ) -> ServerConfig:
        """Build a configuration, reading the generator directory from the environment.

        Explicit ``overrides`` that are not ``None`` take precedence.
        """
        environ = os.environ if environ is None else environ
        values: dict[str, object] = {}
        generator_dir = environ.get(GENERATOR_DIR_ENV, "").strip()
        if generator_dir:
            values["generator_dir"] = Path(generator_dir).expanduser()
        values.update(
            {key: value for key, value in overrides.items() if value is not None}
        )
        return cls.model_validate(values)

"""Run configuration model for agenteval.

Captures agenteval.yaml fields with sensible defaults for run-level
settings like trials, timeouts, concurrency, and cost budget. Keys are
accepted in snake_case or camelCase.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, ValidationError
from pydantic.alias_generators import to_camel

from agenteval.errors import ConfigurationError
from agenteval.models.suite import AIConfig

CONFIG_FILENAME = "agenteval.yaml"

DEFAULT_INCLUDE: list[str] = ["**/*.eval.py", "**/*_eval.py"]
DEFAULT_EXCLUDE: list[str] = [
    "**/.venv/**",
    "**/node_modules/**",
    "**/.git/**",
    "**/__pycache__/**",
]


class _ConfigModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid", alias_generator=to_camel, populate_by_name=True
    )


class ProviderConfig(_ConfigModel):
    """Credentials and endpoint for one builtin provider."""

    api_key: str | None = None
    base_url: HttpUrl | None = None


class ProvidersConfig(_ConfigModel):
    anthropic: ProviderConfig | None = None
    openai: ProviderConfig | None = None


class JudgeConfig(_ConfigModel):
    """Run-level default judge, used when neither task nor suite sets one."""

    provider: Literal["anthropic", "openai"]
    model: str

    def to_ai_config(self) -> AIConfig:
        return AIConfig(provider=self.provider, model=self.model)


class RunConfig(_ConfigModel):
    """Run-level configuration loaded from agenteval.yaml.

    ``timeout`` is in milliseconds. An absent ``max_cost`` means
    unlimited spend.
    """

    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    include: list[str] = Field(default_factory=lambda: list(DEFAULT_INCLUDE))
    exclude: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    trials: int = Field(default=1, ge=1)
    timeout: int = Field(default=60_000, gt=0)
    parallel: bool = True
    max_concurrency: int = Field(default=5, ge=1)
    max_cost: float | None = Field(default=None, ge=0.0)
    reporters: list[Literal["console", "json"]] = Field(
        default_factory=lambda: ["console"]
    )
    judge: JudgeConfig | None = None


def find_project_root(start: Path | None = None) -> Path:
    """Walk up from start (default: cwd) looking for agenteval.yaml.

    Returns:
        The directory containing agenteval.yaml, or cwd if none is found.
    """
    current = (start or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent
    while current != current.parent:
        if (current / CONFIG_FILENAME).exists():
            return current
        current = current.parent
    return Path.cwd()


def load_config(project_root: Path | None = None) -> RunConfig:
    """Load RunConfig from agenteval.yaml. Returns defaults if not found.

    Raises:
        ConfigurationError: If the file is not valid YAML or does not
            match the RunConfig schema.
    """
    if project_root is None:
        project_root = find_project_root()
    config_path = project_root / CONFIG_FILENAME
    if not config_path.exists():
        return RunConfig()
    return load_config_file(config_path)


def load_config_file(config_path: Path) -> RunConfig:
    """Load and validate a specific config file."""
    import yaml

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid agenteval config {config_path}: {exc}") from exc
    if raw is None:
        return RunConfig()

    try:
        return RunConfig.model_validate(raw)
    except ValidationError as exc:
        errors = "\n".join(
            f"  - {'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigurationError(f"Invalid agenteval config:\n{errors}") from exc

"""Configuration loader for secfeed."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import yaml

LLM_CLIENTS = ("openai", "ollama")
CLASSIFICATION_ENGINES = ("llm", "embeddings")

DEFAULT_CONFIG_PATH = "config.yml"
DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"


class ConfigError(ValueError):
    """Raised when the configuration file is missing or invalid."""


@dataclass(frozen=True)
class FeedSource:
    name: str
    url: str


@dataclass(frozen=True)
class Category:
    name: str
    description: str = ""


@dataclass
class ClassificationConfig:
    engine: str = "llm"
    model: str = "gpt-4o-mini"
    threshold: float = 7.0

    def __post_init__(self) -> None:
        if self.engine not in CLASSIFICATION_ENGINES:
            raise ConfigError(
                f"Invalid classification engine: {self.engine}. "
                f"Must be one of {list(CLASSIFICATION_ENGINES)}"
            )


@dataclass
class SummaryConfig:
    model: str = "gpt-4o"


@dataclass
class LLMConfig:
    client: str = "openai"
    classification: ClassificationConfig = field(default_factory=ClassificationConfig)
    summary: SummaryConfig = field(default_factory=SummaryConfig)

    def __post_init__(self) -> None:
        if self.client not in LLM_CLIENTS:
            raise ConfigError(f"Invalid llm client: {self.client}. Must be one of {list(LLM_CLIENTS)}")

    @property
    def models(self) -> list[str]:
        """Distinct models used for chat completions, in configuration order."""
        models = [self.summary.model]
        if self.classification.engine == "llm" and self.classification.model not in models:
            models.insert(0, self.classification.model)
        return models


@dataclass
class ReportingConfig:
    slack: bool = False
    stdout: bool = True
    debug: bool = False


@dataclass
class EnrichConfig:
    always_fetch: bool = False
    request_timeout: float = 5.0


@dataclass
class Config:
    init_pull: int = 1  # days
    poll_interval_minutes: float = 5
    queue_size: int = 16
    categories: list[Category] = field(default_factory=list)
    rss_feed: list[FeedSource] = field(default_factory=list)
    llm: LLMConfig = field(default_factory=LLMConfig)
    reporting: ReportingConfig = field(default_factory=ReportingConfig)
    enrich: EnrichConfig = field(default_factory=EnrichConfig)

    def __post_init__(self) -> None:
        if self.init_pull <= 0:
            raise ConfigError(f"init_pull must be a positive number of days, got {self.init_pull}")
        if self.poll_interval_minutes <= 0:
            raise ConfigError(f"poll_interval_minutes must be positive, got {self.poll_interval_minutes}")
        if self.queue_size <= 0:
            raise ConfigError(f"queue_size must be positive, got {self.queue_size}")


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> Config:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML config file

    Returns:
        Loaded Config object

    Raises:
        ConfigError: If the file doesn't exist or holds invalid values
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse config file {config_path}: {exc}") from exc

    return parse_config(data or {})


def parse_config(data: dict[str, Any]) -> Config:
    """Parse config dictionary into Config object."""
    llm_data = data.get("llm") or {}
    cls_data = llm_data.get("classification") or {}
    reporting_data = data.get("reporting") or {}
    enrich_data = data.get("enrich") or {}

    engine = cls_data.get("engine", "llm")
    classification = ClassificationConfig(
        engine=engine,
        model=cls_data.get("model", DEFAULT_EMBEDDING_MODEL if engine == "embeddings" else "gpt-4o-mini"),
        threshold=_number(cls_data, "threshold", 7.0, float),
    )

    llm = LLMConfig(
        client=llm_data.get("client", "openai"),
        classification=classification,
        summary=SummaryConfig(model=(llm_data.get("summary") or {}).get("model", "gpt-4o")),
    )

    reporting = ReportingConfig(
        slack=bool(reporting_data.get("slack", False)),
        stdout=bool(reporting_data.get("stdout", True)),
        debug=bool(reporting_data.get("debug", False)),
    )

    enrich = EnrichConfig(
        always_fetch=bool(enrich_data.get("always_fetch", False)),
        request_timeout=_number(enrich_data, "request_timeout", 5.0, float),
    )

    return Config(
        init_pull=_number(data, "init_pull", 1, int),
        poll_interval_minutes=_number(data, "poll_interval_minutes", 5, float),
        queue_size=_number(data, "queue_size", 16, int),
        categories=[_parse_category(c) for c in data.get("categories") or []],
        rss_feed=[_parse_feed(f) for f in data.get("rss_feed") or []],
        llm=llm,
        reporting=reporting,
        enrich=enrich,
    )


def _number(data: dict[str, Any], key: str, default: Any, cast: Callable[[Any], Any]) -> Any:
    value = data.get(key, default)
    # bool is an int subclass but never a sensible count
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be a number, got {value!r}")
    try:
        return cast(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be a number, got {value!r}") from exc


def _parse_category(data: Any) -> Category:
    # A bare string is accepted as a category without description
    if isinstance(data, str):
        data = {"name": data}
    name = (data.get("name") or "").strip()
    if not name:
        raise ConfigError(f"Category without a name: {data}")
    return Category(name=name, description=(data.get("description") or "").strip())


def _parse_feed(data: dict[str, Any]) -> FeedSource:
    url = (data.get("url") or "").strip()
    if not url:
        raise ConfigError(f"RSS feed without a url: {data}")
    return FeedSource(name=data.get("name") or url, url=url)

"""Load settings.yaml into typed dataclasses. Validates ranges at startup."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from forum_analyzer.models import AnalysisOptions, GeneratorOptions

logger = logging.getLogger(__name__)

_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"


@dataclass
class DefaultsConfig:
    max_workers: int = 8
    output_dir: Path = Path("./output")
    inbox_dir: Path = Path("./inbox")
    top_topics: int = 5


@dataclass
class AppConfig:
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    analysis: AnalysisOptions = field(default_factory=AnalysisOptions)
    generator: GeneratorOptions = field(default_factory=GeneratorOptions)


def _ratio(section: str, key: str, value: object) -> float:
    ratio = float(value)  # type: ignore[arg-type]
    if not 0.0 <= ratio <= 1.0:
        raise ValueError(f"{section}.{key} must be between 0 and 1, got {ratio}")
    return ratio


def _positive(section: str, key: str, value: object) -> int:
    number = int(value)  # type: ignore[call-overload]
    if number < 1:
        raise ValueError(f"{section}.{key} must be >= 1, got {number}")
    return number


def load_config(settings_path: Path = _SETTINGS_PATH) -> AppConfig:
    """Load and validate configuration from settings.yaml.

    Raises FileNotFoundError if the settings file is missing and ValueError for
    out-of-range values. Missing sections or keys keep their built-in defaults.
    """
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    base = AppConfig()

    defaults_raw = raw.get("defaults") or {}
    defaults = DefaultsConfig(
        max_workers=_positive("defaults", "max_workers", defaults_raw.get("max_workers", base.defaults.max_workers)),
        output_dir=Path(defaults_raw.get("output_dir", base.defaults.output_dir)),
        inbox_dir=Path(defaults_raw.get("inbox_dir", base.defaults.inbox_dir)),
        top_topics=_positive("defaults", "top_topics", defaults_raw.get("top_topics", base.defaults.top_topics)),
    )

    analysis_raw = raw.get("analysis") or {}
    analysis = AnalysisOptions(
        min_engagement_threshold=_ratio(
            "analysis", "min_engagement_threshold",
            analysis_raw.get("min_engagement_threshold", base.analysis.min_engagement_threshold),
        ),
        proposal_threshold=_ratio(
            "analysis", "proposal_threshold",
            analysis_raw.get("proposal_threshold", base.analysis.proposal_threshold),
        ),
        include_sentiment=bool(analysis_raw.get("include_sentiment", base.analysis.include_sentiment)),
        include_consensus=bool(analysis_raw.get("include_consensus", base.analysis.include_consensus)),
    )

    generator_raw = raw.get("generator") or {}
    generator = GeneratorOptions(
        include_temperature_check=bool(
            generator_raw.get("include_temperature_check", base.generator.include_temperature_check)
        ),
        poll_duration=_positive(
            "generator", "poll_duration",
            generator_raw.get("poll_duration", base.generator.poll_duration),
        ),
        minimum_participation_threshold=_ratio(
            "generator", "minimum_participation_threshold",
            generator_raw.get("minimum_participation_threshold", base.generator.minimum_participation_threshold),
        ),
        require_budget_estimate=bool(
            generator_raw.get("require_budget_estimate", base.generator.require_budget_estimate)
        ),
    )

    logger.debug("Loaded settings from %s", settings_path)
    return AppConfig(defaults=defaults, analysis=analysis, generator=generator)

"""TOML configuration loader for SnapTally."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

from .analysis.api import DEFAULT_BASE_URL


@dataclass
class TesseractConfig:
    lang: str = "eng"
    psm: int = 6
    tesseract_cmd: str = ""
    preprocess: bool = True


@dataclass
class RecognizerConfig:
    backend: str = "tesseract"
    tesseract: TesseractConfig = field(default_factory=TesseractConfig)


@dataclass
class ApiAnalyzerConfig:
    base_url: str = DEFAULT_BASE_URL
    api_key: str = ""
    timeout: float = 60.0


@dataclass
class ClaudeAnalyzerConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"


@dataclass
class AnalyzerConfig:
    backend: str = "api"
    api: ApiAnalyzerConfig = field(default_factory=ApiAnalyzerConfig)
    claude: ClaudeAnalyzerConfig = field(default_factory=ClaudeAnalyzerConfig)


@dataclass
class SettingsConfig:
    db_path: str = "~/.config/snaptally/settings.db"


@dataclass
class BatchConfig:
    high_confidence: float = 0.8
    medium_confidence: float = 0.5


@dataclass
class SnapTallyConfig:
    recognizer: RecognizerConfig = field(default_factory=RecognizerConfig)
    analyzer: AnalyzerConfig = field(default_factory=AnalyzerConfig)
    settings: SettingsConfig = field(default_factory=SettingsConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)


def load_config(path: str | Path | None = None) -> SnapTallyConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    API keys can be overridden via environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    rec = raw.get("recognizer", {})
    ana = raw.get("analyzer", {})
    stg = raw.get("settings", {})
    bat = raw.get("batch", {})

    tess_cfg = rec.get("tesseract", {})
    api_cfg = ana.get("api", {})
    claude_cfg = ana.get("claude", {})

    # Resolve API keys: config file → environment variable
    api_key = api_cfg.get("api_key", "") or os.environ.get("SNAPTALLY_API_KEY", "")
    claude_api_key = claude_cfg.get("api_key", "") or os.environ.get(
        "ANTHROPIC_API_KEY", ""
    )

    return SnapTallyConfig(
        recognizer=RecognizerConfig(
            backend=rec.get("backend", "tesseract"),
            tesseract=TesseractConfig(
                lang=tess_cfg.get("lang", "eng"),
                psm=tess_cfg.get("psm", 6),
                tesseract_cmd=tess_cfg.get("tesseract_cmd", ""),
                preprocess=tess_cfg.get("preprocess", True),
            ),
        ),
        analyzer=AnalyzerConfig(
            backend=ana.get("backend", "api"),
            api=ApiAnalyzerConfig(
                base_url=api_cfg.get("base_url", DEFAULT_BASE_URL),
                api_key=api_key,
                timeout=api_cfg.get("timeout", 60.0),
            ),
            claude=ClaudeAnalyzerConfig(
                api_key=claude_api_key,
                model=claude_cfg.get("model", "claude-sonnet-4-5-20250929"),
            ),
        ),
        settings=SettingsConfig(
            db_path=stg.get("db_path", "~/.config/snaptally/settings.db"),
        ),
        batch=BatchConfig(
            high_confidence=bat.get("high_confidence", 0.8),
            medium_confidence=bat.get("medium_confidence", 0.5),
        ),
    )

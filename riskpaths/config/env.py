from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

DEFAULT_MODELS = ("mistral-medium-latest", "mistral-small-latest", "open-mistral-7b")


@dataclass(frozen=True)
class GeneratorConfig:
    api_key: str | None = None
    base_url: str = "https://api.mistral.ai/v1"
    models: Tuple[str, ...] = DEFAULT_MODELS
    timeout_sec: float = 60.0
    temperature: float = 0.3
    max_tokens: int = 4000
    fallback_delay_sec: float = 1.0  # pause before the next model after a non-429 error


def get_generator_config() -> GeneratorConfig:
    models = tuple(m.strip() for m in os.getenv("MISTRAL_MODELS", "").split(",") if m.strip())
    return GeneratorConfig(
        api_key=os.getenv("MISTRAL_API_KEY"),
        base_url=os.getenv("MISTRAL_BASE_URL", "https://api.mistral.ai/v1").rstrip("/"),
        models=models or DEFAULT_MODELS,
        timeout_sec=float(os.getenv("MISTRAL_TIMEOUT_SEC", "60")),
    )


@dataclass(frozen=True)
class ReportStoreConfig:
    root: Path


def get_report_store_config() -> ReportStoreConfig:
    return ReportStoreConfig(root=Path(os.getenv("REPORTS_ROOT", "./reports_store")).resolve())

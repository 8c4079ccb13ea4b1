"""Pydantic-based settings loaded from YAML with env-var overrides."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class AppSettings(BaseSettings):
    """Application configuration with YAML + env var support.

    Env vars are prefixed with ``AUTOAPPLY_``.
    Example: ``AUTOAPPLY_DATABASE_PATH=/var/lib/autoapply/state.db``
    """

    model_config = {"env_prefix": "AUTOAPPLY_"}

    # --- storage ---
    database_path: str = ".state/autoapply.db"

    # --- browser ---
    headless: bool = True
    slow_mo: int = 50  # ms between Playwright actions
    navigation_timeout_ms: int = 30_000

    # --- automation ---
    sources: list[str] = Field(default_factory=lambda: ["linkedin", "indeed"])
    max_result_pages: int = 1
    max_form_steps: int = 10
    simulation_mode: bool = False

    # --- http ---
    host: str = "127.0.0.1"
    port: int = 8000
    poll_interval_seconds: int = 5

    # --- logging ---
    log_level: str = "INFO"

    # --- foreground run (``python -m autoapply run``) ---
    user_id: str = "local"
    job_titles: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    exclude_companies: list[str] = Field(default_factory=list)
    include_remote: bool = True
    salary_min: int = 0
    salary_max: int = 0

    @field_validator("sources")
    @classmethod
    def _normalise_sources(cls, v: list[str]) -> list[str]:
        return [s.strip().lower() for s in v if s.strip()]

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, v: str) -> str:
        return v.strip().upper()

    # ---- factory ----

    @classmethod
    def from_yaml(cls, path: str | Path | None = None) -> "AppSettings":
        """Load settings from a YAML file, then overlay env vars.

        Env vars (``AUTOAPPLY_*``) take priority over YAML values.
        """
        if path is None:
            path = _PROJECT_ROOT / "settings.yaml"
        path = Path(path)
        raw: dict[str, Any] = {}
        if path.exists():
            with open(path) as fh:
                raw = yaml.safe_load(fh) or {}

        prefix = "AUTOAPPLY_"
        for key in list(raw.keys()):
            if f"{prefix}{key.upper()}" in os.environ:
                del raw[key]

        return cls(**raw)

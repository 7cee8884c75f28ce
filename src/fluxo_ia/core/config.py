"""
Fluxo-IA Configuration Module

Handles environment-wide settings using pydantic-settings, plus the
per-run options accepted by the test runner.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from fluxo_ia.core.state import ReportFormat


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Browser
    headless: bool = Field(default=False)
    slow_mo: int = Field(default=50)
    viewport_width: int = Field(default=1280)
    viewport_height: int = Field(default=720)
    default_timeout: int = Field(default=30)
    record_video: bool = Field(default=False)
    video_dir: str = Field(default="videos")

    # Artifacts
    screenshot_dir: str = Field(default=".")
    report_dir: str = Field(default="relatorios")
    report_format: ReportFormat = Field(default=ReportFormat.JSON)

    # Application Settings
    log_level: str = Field(default="INFO")


class RunOptions(BaseModel):
    """
    Options for a single flow run.

    Accepts both snake_case names and the camelCase keys used by
    existing flow scripts (``tempoEspera``, ``pararNaFalha``...). Unknown
    keys are rejected.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    capture_screenshots: bool = Field(default=True, alias="captureScreenshots")
    capture_logs: bool = Field(default=True, alias="captureLogs")
    capture_network: bool = Field(default=False, alias="captureNetwork")
    report_format: ReportFormat = Field(
        default_factory=lambda: settings.report_format, alias="reportFormat"
    )
    report_dir: Path = Field(
        default_factory=lambda: Path(settings.report_dir), alias="reportDir"
    )
    tempo_espera: int = Field(default=0, ge=0, alias="tempoEspera")  # ms between steps
    parar_na_falha: bool = Field(default=False, alias="pararNaFalha")
    manter_aberto: bool = Field(default=False, alias="manterAberto")


# Global settings instance
settings = Settings()

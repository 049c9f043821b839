"""
Runtime configuration for the assessment engine.

Values come from the environment (or a project-level `.env`). Tests and hosts
can also build an `AssessmentSettings` directly with overrides, e.g. a tiny
`tick_seconds` so countdowns finish quickly.
"""
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).parent


class AssessmentSettings(BaseSettings):
    # Text-evaluation service
    anthropic_model: str = Field(default="claude-sonnet-4-20250514", validation_alias="ASSESSMENT_MODEL")
    max_tokens: int = Field(default=1000, validation_alias="ASSESSMENT_MAX_TOKENS")
    evaluation_timeout_seconds: float = Field(default=30.0, validation_alias="ASSESSMENT_EVALUATION_TIMEOUT")

    # Timers (seconds)
    tick_seconds: float = Field(default=1.0, validation_alias="ASSESSMENT_TICK_SECONDS")
    narration_delay_seconds: float = Field(default=0.8, validation_alias="ASSESSMENT_NARRATION_DELAY")
    transcript_grace_seconds: float = Field(default=0.5, validation_alias="ASSESSMENT_TRANSCRIPT_GRACE")

    # Narration
    preferred_voice_name: str = Field(default="Google US English", validation_alias="ASSESSMENT_VOICE_NAME")
    voice_locale: str = Field(default="en-US", validation_alias="ASSESSMENT_VOICE_LOCALE")
    narration_rate: float = Field(default=1.0, validation_alias="ASSESSMENT_NARRATION_RATE")
    listening_rate: float = Field(default=0.9, validation_alias="ASSESSMENT_LISTENING_RATE")

    # Where finished assessments are written by the JSON result sink
    results_dir: Optional[Path] = Field(default=None, validation_alias="ASSESSMENT_RESULTS_DIR")

    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        extra="ignore",
        populate_by_name=True,
    )

    def resolved_results_dir(self) -> Path:
        return self.results_dir or PROJECT_ROOT / "results"


settings = AssessmentSettings()

"""Application configuration and settings management."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="MINUTES_EXPORT_", extra="ignore")

    app_name: str = Field(default="Minutes Export API", description="Human readable application name.")
    environment: Literal["local", "development", "staging", "production"] = Field(
        default="local",
        description="Deployment environment name.",
    )
    log_level: str = Field(default="INFO", description="Root logging level.")
    ollama_base_url: str = Field(
        default="http://localhost:11434",
        description="Base URL for the Ollama service.",
    )
    ollama_model: str = Field(default="llama3.2", description="Model used to draft documents.")
    ollama_timeout: float = Field(default=120.0, description="Timeout in seconds for a single LLM call.")
    llm_temperature: float = Field(default=0.7, description="Sampling temperature for generation.")
    llm_retries: int = Field(default=2, ge=0, description="Extra attempts after a failed LLM call.")
    llm_backoff_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Base delay between retries; attempt N waits N times this value.",
    )
    llm_max_input_chars: int = Field(
        default=15000,
        gt=0,
        description="Transcripts longer than this are truncated before being sent.",
    )
    generation_system_prompt: str = Field(
        default=(
            "You are an expert meeting secretary. Turn the provided transcript into Minutes of"
            " Meeting written in Markdown: a title heading, short sections for discussion topics"
            " and decisions, bullet lists for action items and a pipe table where tabular data"
            " helps. Reply with Markdown only."
        ),
        description="System prompt used when drafting Markdown from a transcript.",
    )
    mom_system_prompt: str = Field(
        default=(
            "You are an expert meeting secretary. Extract Minutes of Meeting from the transcript as a"
            " JSON object with the keys projectName, meetingTitle, meetingObjective, meetingDate,"
            " meetingTime, meetingLocation, attendees [{name, role}], topics [{topic, keyPoints,"
            " decision}], actionItems [{action, pic, dueDate}], risks [{risk, impact, mitigation}],"
            " openIssues [{question, owner}] and nextMeeting {date, agenda, expectedOutcome}. Use"
            " empty strings or lists when the transcript does not say."
        ),
        description="System prompt used when drafting structured minutes.",
    )
    default_export_stem: str = Field(
        default="minutes-of-meeting",
        description="File name stem used when a download request does not provide one.",
    )
    quiet_pdf_loggers: list[str] = Field(
        default_factory=lambda: ["pdfminer", "pdfplumber"],
        description="Loggers silenced while text is extracted from uploaded PDFs.",
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()


settings = get_settings()

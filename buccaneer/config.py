"""Runtime settings, read from the environment (and .env via python-dotenv)."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel

ROOT = Path(__file__).parent.parent

DEFAULT_DATA_DIR = ROOT / "data"
DEFAULT_STATIC_DIR = ROOT / "static"


class Settings(BaseModel):
    llm_url: str = "http://localhost:11434"
    llm_model: str = "gpt-oss:20b"
    llm_format: Literal["ollama", "openai", "echo"] = "ollama"
    llm_api_key: str = ""
    llm_timeout: float = 120.0
    max_rounds: int = 6
    request_budget: float | None = None  # seconds; None = no wall-clock limit
    data_dir: Path = DEFAULT_DATA_DIR
    static_dir: Path = DEFAULT_STATIC_DIR

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from environment variables; unset or empty ones keep defaults."""
        load_dotenv(ROOT / ".env")
        env = {
            "llm_url": os.getenv("LLM_URL"),
            "llm_model": os.getenv("LLM_MODEL"),
            "llm_format": os.getenv("LLM_FORMAT"),
            "llm_api_key": os.getenv("LLM_API_KEY"),
            "llm_timeout": os.getenv("LLM_TIMEOUT"),
            "max_rounds": os.getenv("MAX_ROUNDS"),
            "request_budget": os.getenv("REQUEST_BUDGET"),
            "data_dir": os.getenv("DATA_DIR"),
            "static_dir": os.getenv("STATIC_DIR"),
        }
        return cls.model_validate({k: v for k, v in env.items() if v})

"""
Configuration management for Causal Sage.
"""
import logging
import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

from ..llm.reasoner import ReasonerOptions


class Config(BaseModel):
    """Configuration class for one causal extraction run."""

    model_config = ConfigDict(frozen=True)

    # Variable canonicalization
    similarity_threshold: float = 0.85
    grouping_strategy: Literal["components", "greedy"] = "components"

    # Reasoner / embedder
    llm_model: str = "llama3.1"
    embedding_model: str = "bge-m3:latest"
    temperature: float = 0.0
    top_p: float = 1.0
    seed: Optional[int] = 42
    base_url: str = "http://localhost:11434/v1"
    api_key: str = "ollama"
    request_timeout: float = 60.0
    embedding_max_workers: int = 8

    # Pipeline passes
    loop_closure: bool = True
    verify_polarity: bool = True

    # Logging
    log_level: str = "INFO"

    @field_validator("similarity_threshold")
    @classmethod
    def _check_threshold(cls, value: float) -> float:
        if not 0.0 < value <= 1.0:
            raise ValueError(f"similarity_threshold must be in (0, 1], got {value}")
        return value

    @field_validator("embedding_max_workers")
    @classmethod
    def _check_workers(cls, value: int) -> int:
        if value < 1:
            raise ValueError("embedding_max_workers must be at least 1")
        return value

    def reasoner_options(self) -> ReasonerOptions:
        """Sampling options shared by every Reasoner call of a run."""
        return ReasonerOptions(
            model=self.llm_model,
            temperature=self.temperature,
            top_p=self.top_p,
            seed=self.seed,
        )

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        """Load configuration from YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        seed = os.getenv("SEED", "42")
        return cls(
            similarity_threshold=float(os.getenv("SIMILARITY_THRESHOLD", "0.85")),
            grouping_strategy=os.getenv("GROUPING_STRATEGY", "components"),
            llm_model=os.getenv("LLM_MODEL", "llama3.1"),
            embedding_model=os.getenv("EMBEDDING_MODEL", "bge-m3:latest"),
            temperature=float(os.getenv("TEMPERATURE", "0")),
            top_p=float(os.getenv("TOP_P", "1")),
            seed=int(seed) if seed else None,
            base_url=os.getenv("LLM_BASE_URL", "http://localhost:11434/v1"),
            api_key=os.getenv("LLM_API_KEY", "ollama"),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT", "60")),
            embedding_max_workers=int(os.getenv("EMBEDDING_MAX_WORKERS", "8")),
            loop_closure=os.getenv("LOOP_CLOSURE", "true").lower() == "true",
            verify_polarity=os.getenv("VERIFY_POLARITY", "true").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    @classmethod
    def default(cls) -> "Config":
        """Create default configuration."""
        config_path = Path("config.yaml")
        if config_path.exists():
            return cls.from_yaml(config_path)
        return cls.from_env()


def configure_logging(config: Config) -> None:
    """Route library logging to stderr at the configured level."""
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

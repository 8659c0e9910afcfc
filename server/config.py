"""Configuration for the lecture search API server."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


@dataclass
class Settings:
    """
    All paths, limits and LLM options the server needs.

    Defaults resolve relative to the project root.
    Every field is overridable at construction for testing; a field passed
    explicitly is never replaced by an environment variable.
    """
    data_dir: Optional[Path] = None
    synonyms_file: Optional[str] = None
    summary_cache_file: Optional[str] = None
    overview_cache_file: Optional[str] = None

    hybrid_limit: int = 20
    thematic_limit: int = 30
    analysis_context_size: int = 15
    sources_size: int = 10
    not_found_sample_size: int = 10

    # Text generation (Anthropic Messages API). No key => template fallbacks.
    claude_api_key: Optional[str] = None
    llm_model: Optional[str] = None
    llm_base_url: Optional[str] = None
    llm_timeout_s: Optional[int] = None
    llm_summary_max_tokens: int = 4000

    cors_origins: List[str] = field(default_factory=list)
    log_level: Optional[str] = None
    load_env_file: bool = True
    env_file: Optional[Path] = None

    def __post_init__(self):
        project_root = Path(__file__).resolve().parent.parent
        if self.load_env_file:
            load_dotenv(self.env_file or project_root / ".env")

        if self.data_dir is None:
            env_dir = os.environ.get("DATA_DIR")
            self.data_dir = Path(env_dir) if env_dir else project_root / "data"
        self.data_dir = Path(self.data_dir)

        if self.synonyms_file is None:
            self.synonyms_file = os.environ.get("SYNONYMS_FILE", "synonyms.json")
        if self.summary_cache_file is None:
            self.summary_cache_file = os.environ.get("SUMMARY_CACHE_FILE", "lecture-summaries.json")
        if self.overview_cache_file is None:
            self.overview_cache_file = os.environ.get("OVERVIEW_CACHE_FILE", "ga-overviews.json")

        if self.claude_api_key is None:
            self.claude_api_key = os.environ.get("CLAUDE_API_KEY") or None
        if self.llm_model is None:
            self.llm_model = os.environ.get("LLM_MODEL", "claude-sonnet-4-20250514")
        if self.llm_base_url is None:
            self.llm_base_url = os.environ.get("LLM_BASE_URL", "https://api.anthropic.com")
        if self.llm_timeout_s is None:
            self.llm_timeout_s = 120
            try:
                if v := os.environ.get("LLM_TIMEOUT_S"):
                    self.llm_timeout_s = int(v)
            except ValueError:
                pass

        if self.log_level is None:
            self.log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

        if not self.cors_origins:
            env_origins = os.environ.get("CORS_ORIGINS", "*")
            self.cors_origins = [o.strip() for o in env_origins.split(",") if o.strip()]

    @property
    def llm_configured(self) -> bool:
        return bool(self.claude_api_key)

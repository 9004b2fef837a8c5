from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes"}


@dataclass(frozen=True)
class Settings:
    log_level: str = os.getenv("QABOOK_LOG_LEVEL", "WARNING")
    default_format: str = os.getenv("QABOOK_FORMAT", "plain")
    section_level: int = _env_int("QABOOK_SECTION_LEVEL", 1)
    question_level: int = _env_int("QABOOK_QUESTION_LEVEL", 2)
    encoding: str = os.getenv("QABOOK_ENCODING", "utf-8")
    html_toc: bool = _env_bool("QABOOK_HTML_TOC", False)
    title_raw: str = os.getenv("QABOOK_TITLE", "")

    @property
    def title(self) -> str | None:
        return self.title_raw.strip() or None

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current environment."""
        return cls(
            log_level=os.getenv("QABOOK_LOG_LEVEL", "WARNING"),
            default_format=os.getenv("QABOOK_FORMAT", "plain"),
            section_level=_env_int("QABOOK_SECTION_LEVEL", 1),
            question_level=_env_int("QABOOK_QUESTION_LEVEL", 2),
            encoding=os.getenv("QABOOK_ENCODING", "utf-8"),
            html_toc=_env_bool("QABOOK_HTML_TOC", False),
            title_raw=os.getenv("QABOOK_TITLE", ""),
        )


settings = Settings()

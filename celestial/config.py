"""Runtime settings for the Celestial assistant.

Every value can be overridden through an environment variable or a ``.env``
file in the project root, which is loaded when this module is imported.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent

load_dotenv(PROJECT_ROOT / ".env", override=False)

MatchPolicy = Literal["phrase", "tokens"]

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _env_policy() -> MatchPolicy:
    value = os.environ.get("MATCH_POLICY", "phrase").strip().lower()
    if value not in ("phrase", "tokens"):
        raise ValueError(f"MATCH_POLICY must be 'phrase' or 'tokens', got '{value}'.")
    return value  # type: ignore[return-value]


def _env_data_path() -> Path:
    path = Path(os.environ.get("DATA_PATH", "websiteData.json"))
    # Relative paths are anchored at the project root, not the working directory.
    return path if path.is_absolute() else PROJECT_ROOT / path


@dataclass
class Settings:
    # ── Completion API ────────────────────────────────────────────────────────
    api_key: str = field(default_factory=lambda: os.environ.get("OPENAI_API_KEY", ""))
    base_url: str = field(
        default_factory=lambda: os.environ.get("OPENAI_BASE_URL", "https://openrouter.ai/api/v1")
    )
    model: str = field(
        default_factory=lambda: os.environ.get("CHAT_MODEL", "nvidia/nemotron-nano-9b-v2")
    )
    temperature: float = field(
        default_factory=lambda: float(os.environ.get("CHAT_TEMPERATURE", "0.2"))
    )
    max_tokens: int = field(
        default_factory=lambda: int(os.environ.get("CHAT_MAX_TOKENS", "1000"))
    )
    timeout: float = field(
        default_factory=lambda: float(os.environ.get("COMPLETION_TIMEOUT", "30.0"))
    )

    # ── Website data ──────────────────────────────────────────────────────────
    data_path: Path = field(default_factory=_env_data_path)
    preload_data: bool = field(default_factory=lambda: _env_bool("PRELOAD_DATA", True))

    # ── Retrieval ─────────────────────────────────────────────────────────────
    match_policy: MatchPolicy = field(default_factory=_env_policy)
    max_context_chunks: int = field(
        default_factory=lambda: int(os.environ.get("MAX_CONTEXT_CHUNKS", "8"))
    )

    # ── Conversation behaviour ────────────────────────────────────────────────
    greetings_enabled: bool = field(
        default_factory=lambda: _env_bool("GREETINGS_ENABLED", True)
    )
    short_circuit_no_match: bool = field(
        default_factory=lambda: _env_bool("SHORT_CIRCUIT_NO_MATCH", False)
    )
    assistant_name: str = field(
        default_factory=lambda: os.environ.get("ASSISTANT_NAME", "Celestial")
    )
    organization_name: str = field(
        default_factory=lambda: os.environ.get(
            "ORGANIZATION_NAME", "Government Polytechnic Arvi"
        )
    )

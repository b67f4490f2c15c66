"""
Environment-driven settings for the coaching engine.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data" / "coach"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw else default


@dataclass(frozen=True)
class EngineSettings:
    openai_api_key: Optional[str] = None
    llm_model: str = DEFAULT_MODEL
    max_output_tokens: int = 1024
    persona_name: str = "Claru"
    max_daily_cost_usd: float = 5.0
    input_cost_per_million: float = 3.0
    output_cost_per_million: float = 15.0
    data_dir: Path = DEFAULT_DATA_DIR

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "EngineSettings":
        """
        Read settings from the environment, loading a local .env file first.
        """
        if load_env_file:
            load_dotenv()
        data_dir = os.getenv("COACH_DATA_DIR")
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            llm_model=os.getenv("COACH_LLM_MODEL", DEFAULT_MODEL),
            max_output_tokens=_int_env("COACH_MAX_OUTPUT_TOKENS", 1024),
            persona_name=os.getenv("COACH_PERSONA_NAME", "Claru"),
            max_daily_cost_usd=_float_env("COACH_MAX_DAILY_COST_USD", 5.0),
            input_cost_per_million=_float_env("COACH_INPUT_COST_PER_MILLION", 3.0),
            output_cost_per_million=_float_env("COACH_OUTPUT_COST_PER_MILLION", 15.0),
            data_dir=Path(data_dir) if data_dir else DEFAULT_DATA_DIR,
        )

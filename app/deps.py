from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

import yaml
from dotenv import load_dotenv

from core.grammar.vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

ROOT = Path(__file__).resolve().parent.parent


def _load_yaml(path: Path) -> Dict:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


@dataclass(frozen=True)
class AppState:
    vocabulary: Vocabulary
    vocabulary_cfg: Dict
    default_timezone: Optional[str]


def _build_vocabulary(raw: Dict) -> Vocabulary:
    if not raw:
        return DEFAULT_VOCABULARY
    try:
        return Vocabulary.from_mapping(raw)
    except (TypeError, ValueError) as exc:
        logger.warning("Invalid vocabulary config, using the built-in English vocabulary: %s", exc)
        return DEFAULT_VOCABULARY


@lru_cache(maxsize=1)
def get_app_state() -> AppState:
    load_dotenv(ROOT / ".env")
    vocabulary_path = Path(os.getenv("WINDOW_VOCABULARY", ROOT / "config" / "vocabulary.yaml"))
    vocabulary_cfg = _load_yaml(vocabulary_path)
    return AppState(
        vocabulary=_build_vocabulary(vocabulary_cfg),
        vocabulary_cfg=vocabulary_cfg,
        default_timezone=os.getenv("WINDOW_TIMEZONE") or None,
    )


def get_vocabulary() -> Vocabulary:
    return get_app_state().vocabulary


def get_default_timezone() -> Optional[str]:
    return get_app_state().default_timezone

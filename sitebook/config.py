"""Configuration loading (JSON or YAML)."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict

import yaml

DB_URL_ENV = "SITEBOOK_DB_URL"


@dataclass
class ImageConfig:
    max_dim: int = 1280
    jpeg_quality: int = 60


@dataclass
class StoreConfig:
    db_url: str = "sqlite:///sitebook.db"
    echo: bool = False
    upcoming_deadline_limit: int = 5
    recent_expense_limit: int = 5
    recent_shift_limit: int = 10
    image: ImageConfig = field(default_factory=ImageConfig)


def _check_keys(cls, data: Dict[str, Any], section: str) -> None:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown {section} config keys: {', '.join(unknown)}")


def _read_raw(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(text)
    else:
        data = json.loads(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping at the top level")
    return data


def load_config(path: str | Path | None = None) -> StoreConfig:
    """
    Load configuration from a JSON or YAML file.

    Args:
        path: Config file path; None returns defaults

    Returns:
        StoreConfig with the environment override applied
    """
    cfg = StoreConfig()
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        raw = _read_raw(path)
        _check_keys(StoreConfig, raw, "store")

        image_raw = raw.pop("image", None) or {}
        if not isinstance(image_raw, dict):
            raise ValueError("'image' config must be a mapping")
        _check_keys(ImageConfig, image_raw, "image")

        cfg = StoreConfig(**raw, image=ImageConfig(**image_raw))

    env_url = os.environ.get(DB_URL_ENV)
    if env_url:
        cfg.db_url = env_url

    if cfg.image.max_dim <= 0:
        raise ValueError("image.max_dim must be positive")
    if not 1 <= cfg.image.jpeg_quality <= 95:
        raise ValueError("image.jpeg_quality must be between 1 and 95")
    return cfg

"""패키지 리소스(YAML) 로더"""
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

import yaml

from shelfmeta.core.logging import logger

RESOURCE_DIR = Path(__file__).resolve().parent.parent / "resources"


def get_resource_path(relative_path: str) -> Path:
    """shelfmeta/resources 기준 경로"""
    return RESOURCE_DIR / relative_path


@lru_cache(maxsize=8)
def load_yaml_resource(relative_path: str) -> Dict[str, Any]:
    """YAML 리소스를 읽어 캐싱 (파일이 없으면 빈 dict, 문법 오류는 전파)"""
    path = get_resource_path(relative_path)
    if not path.exists():
        logger.warning(f"[RESOURCE] Resource not found: {path}")
        return {}

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Resource {relative_path} must be a mapping, got {type(data).__name__}")
    return data


def load_field_labels() -> Dict[str, Any]:
    """필드 라벨 동의어 테이블 (listing / detail / detail_selectors)"""
    return load_yaml_resource("field_labels.yaml")

"""로깅 설정

- 패키지 로거는 "shelfmeta" 하나
- Production 에서는 DEBUG 를 막고 짧은 포맷 사용
- 검색어/URL 은 사용자 입력이므로 sanitize_for_log 로 정리 후 기록
"""
import logging
import os
import re
import sys
from typing import Optional

from shelfmeta.core.config import settings

LOGGER_NAME = "shelfmeta"

IS_PRODUCTION = os.getenv("ENVIRONMENT", "development") == "production"

_PRODUCTION_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
_DEVELOPMENT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"

# 쿼리스트링의 민감 파라미터 값 (?token=..., &api_key=...)
_SECRET_PARAM = re.compile(r"((?:password|token|api_key|secret|sign)=)[^&\s]+", re.IGNORECASE)
_CONTROL_CHARS = re.compile(r"[\r\n\t]+")


def _resolve_level(raw: str) -> int:
    name = (raw or "INFO").upper()
    if IS_PRODUCTION and name == "DEBUG":
        name = "INFO"
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """패키지 로거 초기화 (여러 번 호출해도 핸들러는 하나)"""
    logger = logging.getLogger(LOGGER_NAME)
    resolved = _resolve_level(level or settings.log_level)
    logger.setLevel(resolved)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                fmt=_PRODUCTION_FORMAT if IS_PRODUCTION else _DEVELOPMENT_FORMAT,
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)

    for handler in logger.handlers:
        handler.setLevel(resolved)

    return logger


logger = setup_logging()


def sanitize_for_log(value: Optional[str], max_length: int = 100) -> str:
    """로그에 남길 사용자 입력 정리

    Args:
        value: 검색어 또는 URL
        max_length: 최대 길이 (초과분은 "..." 로 절단)

    Returns:
        줄바꿈 제거, 민감 쿼리 파라미터 마스킹, 절단된 문자열
    """
    if not value:
        return "[empty]"

    result = _CONTROL_CHARS.sub(" ", value)
    result = _SECRET_PARAM.sub(r"\1***", result)

    if len(result) > max_length:
        result = result[:max_length] + "..."

    return result

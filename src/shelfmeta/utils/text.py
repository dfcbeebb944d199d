"""텍스트 정리/숫자 파싱 헬퍼."""

from __future__ import annotations

import math
import re

_WHITESPACE = re.compile(r"\s+")
_LEADING_NUMBER = re.compile(r"\d+(?:\.\d*)?|\.\d+")
_LABEL_NOISE = re.compile(r"[\s：:]")


def collapse_whitespace(text: str | None) -> str:
    """연속 공백(줄바꿈 포함)을 한 칸으로 줄이고 양끝을 자릅니다."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def normalize_label(label: str | None) -> str:
    """라벨 텍스트에서 공백과 전각/반각 콜론을 제거합니다.

    >>> normalize_label(" 作者： ")
    '作者'
    """
    if not label:
        return ""
    return _LABEL_NOISE.sub("", label).strip()


def parse_word_count(value: str | None) -> int:
    """"123456", "123,456", "123.4万" 형태의 글자 수를 정수로 변환.

    - 쉼표 제거
    - "万" 포함 시 숫자 * 10000 (0.5 는 올림)
    - 그 외에는 숫자만 모아 정수화
    - 비어 있거나 숫자가 없으면 0
    """
    if not value:
        return 0

    text = value.replace(",", "").strip()
    if not text:
        return 0

    if "万" in text:
        # 앞쪽 숫자만 사용 ("1.2.3万" → 1.2)
        m = _LEADING_NUMBER.match(re.sub(r"[^0-9.]", "", text))
        if not m:
            return 0
        return int(math.floor(float(m.group(0)) * 10000 + 0.5))

    digits = re.sub(r"[^\d]", "", text)
    return int(digits) if digits else 0

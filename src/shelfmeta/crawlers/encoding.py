"""응답 바이트 → 텍스트 디코딩 (인코딩 추론).

카탈로그 사이트는 GBK 계열과 UTF-8 페이지가 섞여 있고, Content-Type 헤더에
charset이 빠지는 경우도 많아 여러 출처를 순서대로 확인합니다.

    1. 전송 계층 힌트 (Content-Type charset)
    2. 본문 앞 2KB 의 meta charset 선언
    3. 지역 기본 인코딩 (gbk 계열)

선택된 코덱으로 디코딩이 실패하면 utf-8 로 한 번 더 시도하며,
이 모듈은 호출자에게 디코딩 오류를 절대 전파하지 않습니다.
"""

from __future__ import annotations

import re
from typing import Mapping, Optional

from shelfmeta.core.config import settings
from shelfmeta.core.logging import logger

_HEADER_CHARSET = re.compile(r"charset=([\w-]+)", re.IGNORECASE)
_META_CHARSET = re.compile(r"charset=[\"']?([\w-]+)", re.IGNORECASE)

SNIFF_BYTES = 2048

_ALIASES = {
    "gb2312": "gb18030",
    "gbk": "gb18030",
    "gb18030": "gb18030",
    "utf8": "utf-8",
}


def normalize_encoding(encoding: str) -> str:
    """코덱 별칭 정규화 (GBK 계열 → gb18030, utf8 → utf-8).

    gb18030 은 gb2312/gbk 의 상위 집합이라 4바이트 문자가 섞인 페이지도 읽힙니다.
    """
    lower = encoding.strip().lower()
    return _ALIASES.get(lower, lower)


def extract_header_charset(content_type: Optional[str]) -> Optional[str]:
    if not content_type:
        return None
    m = _HEADER_CHARSET.search(content_type)
    return m.group(1) if m else None


def sniff_meta_charset(content: bytes) -> Optional[str]:
    """본문 앞부분을 ASCII로 보고 meta charset 선언을 찾습니다."""
    if not content:
        return None
    snippet = content[:SNIFF_BYTES].decode("ascii", errors="ignore")
    m = _META_CHARSET.search(snippet)
    return m.group(1) if m else None


class EncodingResolver:
    """헤더/본문/기본값 순서로 인코딩을 정하고 텍스트로 디코딩합니다."""

    def __init__(self, fallback_encoding: Optional[str] = None) -> None:
        self.fallback_encoding = fallback_encoding or settings.fallback_encoding

    def resolve(self, content: bytes, content_type: Optional[str] = None) -> str:
        """사용할 코덱 이름 (정규화 완료)을 반환."""
        declared = extract_header_charset(content_type)
        sniffed = None if declared else sniff_meta_charset(content)
        return normalize_encoding(declared or sniffed or self.fallback_encoding)

    def decode(self, content: bytes, content_type: Optional[str] = None) -> str:
        candidate = self.resolve(content, content_type)
        try:
            return content.decode(candidate)
        except (UnicodeDecodeError, LookupError) as e:
            logger.warning(
                f"[ENCODING] Decode with '{candidate}' failed, falling back to utf-8: "
                f"{type(e).__name__}: {e}"
            )
            return content.decode("utf-8", errors="replace")

    def decode_response(self, content: bytes, headers: Optional[Mapping[str, str]] = None) -> str:
        """응답 헤더 매핑에서 Content-Type을 꺼내 decode()에 위임."""
        return self.decode(content, _get_header(headers, "content-type"))


def _get_header(headers: Optional[Mapping[str, str]], name: str) -> Optional[str]:
    if not headers:
        return None
    value = headers.get(name)
    if value is not None:
        return value
    # 대소문자를 구분하는 일반 dict 대비
    lowered = name.lower()
    for key, val in headers.items():
        if key.lower() == lowered:
            return val
    return None

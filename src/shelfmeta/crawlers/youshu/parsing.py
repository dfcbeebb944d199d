"""youshu.me HTML 파싱 유틸.

이 모듈은 네트워크(fetch)/디코딩과 분리된 순수 파싱 로직만 담습니다.

- 검색 결과: .c_row 행 단위로 제목/링크/표지/소개/라벨-값 메타를 추출
- 상세 페이지: 셀렉터 우선 탐색 → 문서 전체 정규식 탐색 2단계
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Tuple

from selectolax.parser import HTMLParser, Node

from shelfmeta.core.config import settings
from shelfmeta.core.logging import logger
from shelfmeta.schemas.search_schema import DetailMeta, SearchResult, UNKNOWN_AUTHOR
from shelfmeta.utils.resource_loader import load_field_labels
from shelfmeta.utils.text import collapse_whitespace, normalize_label, parse_word_count
from shelfmeta.utils.url import normalize_href, to_proxy_image_url


LISTING_FIELDS = ("author", "category", "platform", "word_count")
DETAIL_FIELDS = ("category", "platform")

# 상세 라벨 뒤 값: 공백/중국어 구두점/구분자 전까지
_DETAIL_VALUE_PATTERN = r"\s*[：:]\s*([^\s，。；;|]+)"


@dataclass
class LabelTable:
    """필드별 라벨 동의어 테이블 (YAML 순서 유지)"""

    fields: Dict[str, Tuple[str, ...]] = field(default_factory=dict)

    def field_for(self, label: str) -> Optional[str]:
        """정규화된 라벨이 속한 필드명 (없으면 None)."""
        for name, labels in self.fields.items():
            if label in labels:
                return name
        return None

    def patterns(self) -> List[Tuple[str, List[re.Pattern[str]]]]:
        return [
            (name, [re.compile(re.escape(label) + _DETAIL_VALUE_PATTERN, re.IGNORECASE) for label in labels])
            for name, labels in self.fields.items()
        ]


def _build_table(raw: Optional[dict], allowed: Iterable[str]) -> LabelTable:
    raw = raw or {}
    fields: Dict[str, Tuple[str, ...]] = {}
    for name in allowed:
        labels = raw.get(name) or []
        fields[name] = tuple(normalize_label(str(label)) for label in labels if label)
    return LabelTable(fields=fields)


@lru_cache(maxsize=1)
def get_listing_table() -> LabelTable:
    return _build_table(load_field_labels().get("listing"), LISTING_FIELDS)


@lru_cache(maxsize=1)
def get_detail_table() -> LabelTable:
    return _build_table(load_field_labels().get("detail"), DETAIL_FIELDS)


@lru_cache(maxsize=1)
def _detail_patterns() -> List[Tuple[str, List[re.Pattern[str]]]]:
    return get_detail_table().patterns()


def get_detail_selectors() -> List[str]:
    return list(load_field_labels().get("detail_selectors") or [])


# ---------------------------------------------------------------------------
# 검색 결과 페이지
# ---------------------------------------------------------------------------

def _node_text(node: Optional[Node]) -> str:
    if node is None:
        return ""
    return collapse_whitespace(node.text() or "")


def _has_class(node: Node, class_name: str) -> bool:
    return class_name in (node.attributes.get("class") or "").split()


def extract_row_meta(row: Node, table: Optional[LabelTable] = None) -> Dict[str, object]:
    """행의 .c_tag 블록에서 (라벨, 값) 쌍을 읽어 필드로 매핑.

    span.c_label 이 현재 라벨을 정하고 뒤따르는 span.c_value 가 그 라벨의 값입니다.
    테이블에 없는 라벨은 조용히 무시합니다.
    """
    table = table or get_listing_table()
    meta: Dict[str, object] = {"author": "", "category": "", "platform": "", "word_count": 0}

    for tag in row.css(".c_tag"):
        current_label = ""
        for span in tag.iter():
            if span.tag != "span":
                continue
            if _has_class(span, "c_label"):
                current_label = normalize_label(span.text() or "")
            elif _has_class(span, "c_value"):
                target = table.field_for(current_label)
                if target is None:
                    continue
                value = _node_text(span)
                meta[target] = parse_word_count(value) if target == "word_count" else value

    return meta


def _parse_row(row: Node, base_url: str) -> Optional[SearchResult]:
    title_node = row.css_first(".c_subject a")
    title = _node_text(title_node)
    if not title:
        return None

    link = (title_node.attributes.get("href") if title_node else "") or ""
    cover_node = row.css_first(".fl img")
    cover_src = (cover_node.attributes.get("src") if cover_node else "") or ""
    description = collapse_whitespace(" ".join(_node_text(n) for n in row.css(".c_description")))

    meta = extract_row_meta(row)
    if not meta["author"]:
        logger.debug(f"[EXTRACT] No author label for '{title}', using default")

    return SearchResult(
        title=title,
        author=str(meta["author"]) or UNKNOWN_AUTHOR,
        cover_url=to_proxy_image_url(normalize_href(cover_src, base_url)),
        platform=str(meta["platform"]) or None,
        category=str(meta["category"]),
        word_count=int(meta["word_count"]),
        description=description,
        source_url=normalize_href(link, base_url),
    )


def extract_search_results(
    html: str,
    max_results: Optional[int] = None,
    base_url: Optional[str] = None,
) -> List[SearchResult]:
    """검색 결과 HTML에서 SearchResult 목록을 문서 순서대로 추출.

    제목이 없는 행은 건너뛰고, 행 하나의 파싱 오류는 해당 행만 버립니다.
    """
    limit = max_results or settings.search_max_results
    base = base_url or settings.catalog_base_url
    parser = HTMLParser(html or "")

    results: List[SearchResult] = []
    for idx, row in enumerate(parser.css(".c_row")):
        try:
            parsed = _parse_row(row, base)
        except Exception as e:
            logger.warning(f"[EXTRACT] Row {idx} skipped: {type(e).__name__}: {e}")
            continue
        if parsed is None:
            logger.debug(f"[EXTRACT] Row {idx} has no title, skipped")
            continue
        results.append(parsed)
        if len(results) >= limit:
            break

    return results


# ---------------------------------------------------------------------------
# 상세 페이지
# ---------------------------------------------------------------------------

def assign_detail_values(text: str, found: Dict[str, str]) -> None:
    """텍스트에서 아직 비어 있는 필드만 라벨 정규식으로 채웁니다.

    이미 채워진 필드는 덮어쓰지 않습니다.
    """
    normalized = collapse_whitespace(text)
    if not normalized:
        return

    for name, patterns in _detail_patterns():
        if found.get(name):
            continue
        for pattern in patterns:
            m = pattern.search(normalized)
            if m and m.group(1).strip():
                found[name] = m.group(1).strip()
                break


def _document_text(html: str) -> str:
    tree = HTMLParser(html)
    tree.strip_tags(["script", "style", "noscript"])
    root = tree.body or tree.root
    if root is None:
        return ""
    return collapse_whitespace(root.text(separator=" "))


def extract_detail(html: str) -> DetailMeta:
    """상세 페이지에서 분류/플랫폼을 추출.

    1차: 메타 정보가 있을 법한 li/p 셀렉터를 우선순위대로 탐색
    2차: 하나라도 비어 있으면 문서 전체 텍스트를 같은 정규식으로 탐색 (느슨한 그물)
    """
    parser = HTMLParser(html or "")
    found: Dict[str, str] = {}

    for selector in get_detail_selectors():
        for node in parser.css(selector):
            assign_detail_values(node.text(separator=" ") or "", found)
        if all(found.get(name) for name in DETAIL_FIELDS):
            break

    if not all(found.get(name) for name in DETAIL_FIELDS):
        logger.debug(f"[EXTRACT] Selector pass incomplete ({sorted(found)}), scanning document text")
        assign_detail_values(_document_text(html or ""), found)

    missing = [name for name in DETAIL_FIELDS if not found.get(name)]
    if missing:
        logger.warning(f"[EXTRACT] Detail fields not found: {missing}")

    return DetailMeta(category=found.get("category"), platform=found.get("platform"))

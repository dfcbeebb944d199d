"""youshu.me 페이지 파싱 (네트워크와 분리된 순수 로직)."""

from .parsing import (
    LabelTable,
    assign_detail_values,
    extract_detail,
    extract_row_meta,
    extract_search_results,
    get_detail_table,
    get_listing_table,
)

__all__ = [
    "LabelTable",
    "assign_detail_values",
    "extract_detail",
    "extract_row_meta",
    "extract_search_results",
    "get_detail_table",
    "get_listing_table",
]

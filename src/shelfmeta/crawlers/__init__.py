"""Catalog crawler modules (HTTP retrieval + encoding + parsing).

공개 API는 이 파일에서만 export합니다.
"""

from .encoding import EncodingResolver
from .http_client import FetchResponse, RetrievalClient, is_transient_error
from .youshu import extract_detail, extract_search_results

__all__ = [
    "EncodingResolver",
    "FetchResponse",
    "RetrievalClient",
    "is_transient_error",
    "extract_detail",
    "extract_search_results",
]

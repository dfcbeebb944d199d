"""URL 정규화 유틸리티"""
import re

from shelfmeta.core.config import settings


_SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


def normalize_href(href: str, base_url: str = settings.catalog_base_url) -> str:
    """상대/프로토콜-상대 href를 절대 URL로 정규화합니다.

    - "http(s)://..." -> 그대로
    - "//host/path" -> "https://host/path"
    - "/path" -> "{base_url}/path"
    - "path" -> "{base_url}/path"

    Examples:
        >>> normalize_href("/book/123", "https://youshu.me")
        'https://youshu.me/book/123'
        >>> normalize_href("//img.youshu.me/a.jpg", "https://youshu.me")
        'https://img.youshu.me/a.jpg'
    """
    if not href:
        return ""

    h = href.strip()
    if not h:
        return ""

    if h.startswith("http"):
        return h

    if h.startswith("//"):
        return f"https:{h}"

    base = base_url.rstrip("/")
    if h.startswith("/"):
        return f"{base}{h}"

    return f"{base}/{h.lstrip('/')}"


def to_proxy_image_url(url: str, template: str = settings.image_proxy_template) -> str:
    """표지 URL을 이미지 프록시로 감쌉니다 (핫링크 차단 회피).

    https 원본은 프록시 규칙에 따라 "ssl:" 접두어를 붙이고 스킴은 제거합니다.

    Examples:
        >>> to_proxy_image_url("https://img.youshu.me/a.jpg")
        'https://images.weserv.nl/?url=ssl:img.youshu.me/a.jpg'
    """
    if not url:
        return ""

    is_https = url.lower().startswith("https://")
    sanitized = _SCHEME_PATTERN.sub("", url)
    return template.format(url=f"{'ssl:' if is_https else ''}{sanitized}")

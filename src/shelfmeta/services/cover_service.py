"""표지 다운로드 서비스 - 원격 이미지를 받아 축소/재인코딩 후 로컬에 저장"""
import asyncio
import io
import re
import time
from pathlib import Path
from typing import Optional

from PIL import Image

from shelfmeta.core.config import settings
from shelfmeta.core.exceptions import CoverDownloadException, InvalidURLException
from shelfmeta.core.logging import logger, sanitize_for_log
from shelfmeta.crawlers.http_client import RetrievalClient

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]')


def build_file_name(raw_title: Optional[str]) -> str:
    """제목으로 안전한 파일명 생성 ("{title}-{ms}.jpg", 제목은 최대 40자)"""
    safe_title = _UNSAFE_FILENAME_CHARS.sub("", raw_title or "cover")
    safe_title = re.sub(r"\s+", "-", safe_title)[:40]
    timestamp = int(time.time() * 1000)
    return f"{safe_title or 'cover'}-{timestamp}.jpg"


def transcode_image(content: bytes, max_width: int, quality: int) -> bytes:
    """max_width 를 넘으면 비율 유지 축소 후 JPEG(quality)로 재인코딩"""
    with Image.open(io.BytesIO(content)) as image:
        image = image.convert("RGB")
        if image.width > max_width:
            height = max(1, round(image.height * max_width / image.width))
            image = image.resize((max_width, height), Image.Resampling.LANCZOS)
        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", quality=quality)
        return buffer.getvalue()


class CoverService:
    """
    표지 다운로드 서비스

    - 수집은 공유 RetrievalClient (단일 시도, cover_timeout_s)
    - 변환은 Pillow (스레드에서 실행해 이벤트 루프를 막지 않음)
    """

    def __init__(
        self,
        client: RetrievalClient,
        cover_dir: Optional[str] = None,
        max_width: Optional[int] = None,
        quality: Optional[int] = None,
    ):
        self.client = client
        self.cover_dir = Path(cover_dir or settings.cover_dir)
        self.max_width = max_width or settings.cover_max_width
        self.quality = quality or settings.cover_quality

    async def download(self, url: str, title: Optional[str] = None) -> str:
        """
        원격 표지를 내려받아 로컬 파일 URI 로 반환

        Args:
            url: 원격 이미지 URL (프록시 URL 포함)
            title: 파일명에 사용할 작품명

        Returns:
            "file://..." 형태의 로컬 파일 URI

        Raises:
            InvalidURLException: url 이 비어 있음
            CoverDownloadException: 다운로드/디코딩/저장 실패
        """
        if not url or not url.strip():
            raise InvalidURLException("url", "封面地址不能为空")

        logger.info(f"[COVER] Downloading cover: {sanitize_for_log(url, 120)}")
        try:
            response = await self.client.fetch(
                url.strip(),
                headers={"Accept": "image/avif,image/webp,image/*,*/*;q=0.8"},
                timeouts_s=[settings.cover_timeout_s],
            )
            data = await asyncio.to_thread(transcode_image, response.content, self.max_width, self.quality)
            path = await asyncio.to_thread(self._write, build_file_name(title), data)
        except Exception as e:
            logger.error(f"[COVER] Cover download failed: {type(e).__name__}: {e}")
            reason = getattr(e, "message", None) or str(e) or type(e).__name__
            raise CoverDownloadException(url, reason) from e

        logger.info(f"[COVER] Saved cover to {path}")
        return path.resolve().as_uri()

    def _write(self, file_name: str, data: bytes) -> Path:
        self.cover_dir.mkdir(parents=True, exist_ok=True)
        path = self.cover_dir / file_name
        path.write_bytes(data)
        return path

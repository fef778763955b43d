"""Turn uploaded statements into raster frames for the extraction service."""

import asyncio
import logging
from io import BytesIO

import pdfplumber
from PIL import Image, UnidentifiedImageError

from statement_ocr.config import Settings
from statement_ocr.errors import DocumentDecodeError, UnsupportedMediaError
from statement_ocr.models import DocumentInput, Frame, MediaKind
from statement_ocr.parsers.validation import ValidationError, validate_file_contents

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
FRAME_MIME_TYPE = "image/jpeg"
PDF_BASE_DPI = 72


class Rasterizer:
    """Converts one document into an ordered, non-empty list of frames."""

    def __init__(self, settings: Settings):
        self.scale = settings.page_render_scale
        self.jpeg_quality = settings.frame_jpeg_quality
        self.image_types = {t.lower() for t in settings.supported_image_types}

    def media_kind(self, mime_type: str) -> MediaKind:
        """
        Classify a declared MIME type.

        Raises:
            UnsupportedMediaError: If the type is neither a supported image nor a PDF
        """
        normalized = (mime_type or "").split(";")[0].strip().lower()
        if normalized == PDF_MIME_TYPE:
            return MediaKind.PAGINATED
        if normalized in self.image_types:
            return MediaKind.IMAGE
        raise UnsupportedMediaError(mime_type)

    async def rasterize(self, document: DocumentInput) -> list[Frame]:
        """Rasterize off the event loop; decoding large PDFs is CPU bound."""
        kind = self.media_kind(document.mime_type)
        try:
            validate_file_contents(document.content, min_size=1)
        except ValidationError as e:
            raise DocumentDecodeError(document.name, str(e)) from e

        if kind == MediaKind.IMAGE:
            frames = await asyncio.to_thread(self._image_frames, document)
        else:
            frames = await asyncio.to_thread(self._pdf_frames, document)

        logger.info(f"Rasterized {document.name} ({kind.value}) into {len(frames)} frame(s)")
        return frames

    def _image_frames(self, document: DocumentInput) -> list[Frame]:
        # The image is sent as-is; only check that it decodes.
        try:
            with Image.open(BytesIO(document.content)) as img:
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise DocumentDecodeError(document.name, f"unreadable image: {e}") from e

        mime_type = document.mime_type.split(";")[0].strip().lower()
        return [Frame(data=document.content, mime_type=mime_type)]

    def _pdf_frames(self, document: DocumentInput) -> list[Frame]:
        frames = []
        resolution = int(round(PDF_BASE_DPI * self.scale))

        try:
            with pdfplumber.open(BytesIO(document.content)) as pdf:
                if not pdf.pages:
                    raise DocumentDecodeError(document.name, "document has no pages")

                for page in pdf.pages:
                    page_image = page.to_image(resolution=resolution)
                    frames.append(self._encode_jpeg(page_image.original))
                    logger.debug(f"Rendered page {page.page_number} of {document.name} at {resolution} DPI")
        except DocumentDecodeError:
            raise
        except Exception as e:
            logger.error(f"PDF rasterization failed for {document.name}: {e}")
            raise DocumentDecodeError(document.name, f"unreadable PDF: {e}") from e

        return frames

    def _encode_jpeg(self, image: Image.Image) -> Frame:
        if image.mode != "RGB":
            image = image.convert("RGB")
        buffer = BytesIO()
        image.save(buffer, format="JPEG", quality=self.jpeg_quality)
        return Frame(data=buffer.getvalue(), mime_type=FRAME_MIME_TYPE)

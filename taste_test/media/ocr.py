"""
OCR module (Image → Text)

Best-effort text recognition for menu photos with Tesseract.
"""

from __future__ import annotations

import io
import logging
import os
from dataclasses import dataclass

import pytesseract
from PIL import Image, ImageOps


@dataclass(frozen=True)
class OcrResult:
    """
    text: Recognized text, stripped. May be empty.
    failed: True when the engine errored or the image could not be decoded.
    """

    text: str = ""
    failed: bool = False

    @property
    def recognized(self) -> bool:
        return bool(self.text) and not self.failed


def perform_ocr(image_bytes: bytes, lang: str | None = None) -> OcrResult:
    """
    Run OCR on raw image bytes.

    Args:
        image_bytes (bytes): Raw image bytes (JPEG, PNG, ...).
        lang (str): Tesseract language codes, e.g. "eng" or "eng+fra".

    Returns:
        OcrResult: Never raises. Engine errors come back as failed results.
    """
    lang = lang or os.getenv("TESSERACT_LANG", "eng")

    try:
        img = Image.open(io.BytesIO(image_bytes))
        # Phone photos carry their rotation in EXIF
        img = ImageOps.exif_transpose(img)
        img = img.convert("L")
    except Exception as e:
        logging.warning("[OCR] Could not decode image: %s", e)
        return OcrResult(failed=True)

    try:
        text = pytesseract.image_to_string(img, lang=lang)
    except Exception as e:
        logging.warning("[OCR] Engine failure: %s", e)
        return OcrResult(failed=True)

    text = text.strip()
    logging.info("[OCR] %d chars recognized", len(text))
    return OcrResult(text=text)

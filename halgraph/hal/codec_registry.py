"""
HAL Codec Registry

Maps media types to pre-built document assemblers with an explicit fallback,
so callers select a codec by format marker instead of constructing one per
request.
"""

import logging
from typing import Dict, List, Optional

from .document_assembler import HalDocumentAssembler

logger = logging.getLogger(__name__)


HAL_JSON = "application/hal+json"


def normalize_media_type(media_type: str) -> str:
    """Lower-case a media type and strip its parameters."""
    return media_type.split(";", 1)[0].strip().lower()


class HalCodecRegistry:
    """Registry of document assemblers keyed by media type."""

    def __init__(self, fallback: Optional[HalDocumentAssembler] = None):
        self._codecs: Dict[str, HalDocumentAssembler] = {}
        self.fallback = fallback

    def register(self, media_type: str, codec: HalDocumentAssembler) -> "HalCodecRegistry":
        """
        Register a codec for a media type, replacing any previous registration.

        Args:
            media_type: Media type, parameters are ignored
            codec: Document assembler handling the media type

        Returns:
            This registry
        """
        if not media_type:
            raise ValueError("Media type must not be None or empty!")
        if codec is None:
            raise ValueError("Codec must not be None!")

        key = normalize_media_type(media_type)
        if key in self._codecs:
            logger.warning(f"Replacing codec registered for {key}")

        self._codecs[key] = codec
        return self

    def supports(self, media_type: Optional[str]) -> bool:
        return media_type is not None and normalize_media_type(media_type) in self._codecs

    def media_types(self) -> List[str]:
        return list(self._codecs)

    def codec_for(self, media_type: Optional[str]) -> HalDocumentAssembler:
        """
        Return the codec registered for a media type, or the fallback.

        Raises:
            LookupError: If nothing is registered for the media type and there is no fallback
        """
        if media_type is not None:
            codec = self._codecs.get(normalize_media_type(media_type))
            if codec is not None:
                return codec

        if self.fallback is None:
            raise LookupError(f"No codec registered for media type {media_type}")

        logger.debug(f"No codec registered for {media_type}, using fallback")
        return self.fallback

#!/usr/bin/env python3
"""
Test suite for HalCodecRegistry.
"""

import pytest
import logging
import sys
from pathlib import Path

# Add the parent directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from halgraph.hal.codec_registry import HalCodecRegistry, HAL_JSON, normalize_media_type
from halgraph.hal.document_assembler import HalDocumentAssembler

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


@pytest.fixture
def assembler():
    return HalDocumentAssembler()


class TestHalCodecRegistry:
    """Tests for media type based codec selection."""

    def test_normalize_media_type(self):
        assert normalize_media_type("Application/HAL+JSON; charset=UTF-8") == HAL_JSON

    def test_codec_for_registered_type(self, assembler):
        registry = HalCodecRegistry().register(HAL_JSON, assembler)

        assert registry.supports(HAL_JSON)
        assert registry.codec_for("application/hal+json;charset=utf-8") is assembler
        assert registry.media_types() == [HAL_JSON]

    def test_fallback(self, assembler):
        """Test that unknown media types use the fallback codec."""
        fallback = HalDocumentAssembler()
        registry = HalCodecRegistry(fallback=fallback).register(HAL_JSON, assembler)

        assert not registry.supports("application/json")
        assert registry.codec_for("application/json") is fallback
        assert registry.codec_for(None) is fallback

    def test_missing_codec_without_fallback(self):
        with pytest.raises(LookupError):
            HalCodecRegistry().codec_for(HAL_JSON)

    def test_replace_registration(self, assembler):
        replacement = HalDocumentAssembler()
        registry = HalCodecRegistry().register(HAL_JSON, assembler).register(HAL_JSON, replacement)

        assert registry.codec_for(HAL_JSON) is replacement

    def test_invalid_registration(self, assembler):
        with pytest.raises(ValueError):
            HalCodecRegistry().register("", assembler)

        with pytest.raises(ValueError):
            HalCodecRegistry().register(HAL_JSON, None)

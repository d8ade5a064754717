"""HalGraph Assembler Factory

Factory functions to create HAL document assemblers and codec registries
from configuration settings.
"""

import logging
from typing import Optional

from ..config.config_loader import HalGraphConfig
from ..utils.hal_errors import HalConfigurationError
from .codec_registry import HalCodecRegistry, HAL_JSON
from .document_assembler import HalDocumentAssembler, ContentMapper, ContentReader

logger = logging.getLogger(__name__)


def create_hal_assembler(config_path: Optional[str] = None, *, config: Optional[HalGraphConfig] = None,
                         content_mapper: Optional[ContentMapper] = None,
                         content_reader: Optional[ContentReader] = None) -> HalDocumentAssembler:
    """
    Create a HAL document assembler based on configuration settings.

    Args:
        config_path: Path to the configuration YAML file (optional if config provided)
        config: Pre-configured HalGraphConfig object (takes precedence over config_path)
        content_mapper: Encoder for plain content values
        content_reader: Decoder for parsed embedded values

    Returns:
        HalDocumentAssembler wired with the configured providers

    Raises:
        HalConfigurationError: If configuration loading fails or configuration is invalid
    """
    try:
        if config is not None:
            hal_config = config
            logger.info("Using provided config object for assembler creation")
        elif config_path is not None:
            hal_config = HalGraphConfig(config_path)
            logger.info(f"Loaded config from {config_path} for assembler creation")
        else:
            hal_config = HalGraphConfig()
            logger.info("Using default config for assembler creation")

        hal_config.validate_config()

        return HalDocumentAssembler(
            relation_provider=hal_config.create_relation_provider(),
            curie_provider=hal_config.create_curie_provider(),
            configuration=hal_config.create_hal_configuration(),
            message_resolver=hal_config.create_message_resolver(),
            content_mapper=content_mapper,
            content_reader=content_reader,
            prefer_collection_rels=hal_config.get_prefer_collection_rels(),
        )

    except HalConfigurationError as e:
        logger.error(f"Configuration error while creating assembler: {e}")
        raise
    except Exception as e:
        logger.error(f"Unexpected error while creating assembler: {e}")
        raise HalConfigurationError(f"Failed to create assembler: {e}") from e


def create_codec_registry(config_path: Optional[str] = None, *,
                          config: Optional[HalGraphConfig] = None) -> HalCodecRegistry:
    """
    Create a codec registry with the configured assembler registered for HAL JSON.

    The same assembler acts as the fallback for unregistered media types.
    """
    assembler = create_hal_assembler(config_path, config=config)
    return HalCodecRegistry(fallback=assembler).register(HAL_JSON, assembler)

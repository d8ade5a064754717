"""
HalGraph Configuration Loader

This module provides functionality to load and validate HalGraph configuration
from YAML files and to build the HAL rendering components (configuration, curie
provider, relation provider, message resolver) it describes.
"""

import importlib
import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List
import logging

from dotenv import load_dotenv

from .hal_configuration import HalConfiguration, RenderSingleLinks, DEFAULT_EMBEDDED_RELATION
from ..curie.curie_provider import CurieProvider, DefaultCurieProvider, ReferencedCurieProvider, NONE
from ..hal.message_resolver import MessageResolver, DictMessageResolver, DEFAULTS_ONLY
from ..relation.relation_provider import (
    LinkRelationProvider,
    FixedLinkRelationProvider,
    DelegatingLinkRelationProvider,
    AnnotationLinkRelationProvider,
    DefaultLinkRelationProvider,
    InflectorLinkRelationProvider,
)
from ..utils.hal_errors import HalConfigurationError, CurieConfigurationError

logger = logging.getLogger(__name__)


CONFIG_PATH_ENV = "HALGRAPH_CONFIG"
CONFIG_SECTIONS = ('hal', 'curies', 'relations', 'messages')


class HalGraphConfig:
    """
    HalGraph configuration loader and manager.

    Loads configuration from YAML files and provides access to configuration
    sections for HAL rendering.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the configuration loader.

        Args:
            config_path: Path to configuration file. If None, uses default locations or built-in defaults.
        """
        self.config_data: Dict[str, Any] = {}
        self.config_path: Optional[str] = None

        if config_path is not None:
            self.load_config(config_path)
        else:
            self._load_default_config()

    def load_config(self, config_path: str) -> None:
        """
        Load configuration from a specific file path.

        Args:
            config_path: Path to the YAML configuration file

        Raises:
            HalConfigurationError: If the file cannot be loaded or parsed
        """
        config_file = Path(config_path)

        if not config_file.exists():
            raise HalConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                self.config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise HalConfigurationError(f"Error parsing YAML configuration: {e}") from e
        except OSError as e:
            raise HalConfigurationError(f"Error loading configuration file: {e}") from e

        if not isinstance(self.config_data, dict):
            raise HalConfigurationError(f"Configuration root must be a mapping: {config_path}")

        self.config_path = str(config_file.absolute())
        logger.info(f"Loaded HalGraph configuration from: {self.config_path}")

    def _load_default_config(self) -> None:
        """
        Load default configuration by searching standard locations or using built-in defaults.
        """
        load_dotenv()

        default_paths = [
            os.environ.get(CONFIG_PATH_ENV),
            "halgraph-config.yaml",
            "halgraph_config/halgraph-config.yaml",
            os.path.expanduser("~/.halgraph/halgraph-config.yaml"),
            "/etc/halgraph/halgraph-config.yaml"
        ]

        for path in default_paths:
            if path and os.path.exists(path):
                try:
                    self.load_config(path)
                    logger.info(f"Found and loaded default config from: {path}")
                    return
                except HalConfigurationError as e:
                    logger.warning(f"Skipping unreadable config {path}: {e}")
                    continue

        self.config_data = {
            'hal': {
                'render_single_links': RenderSingleLinks.AS_SINGLE.value,
                'render_single_links_for': [],
                'enforce_embedded_collections': False,
                'prefer_collection_rels': False,
                'default_relation': DEFAULT_EMBEDDED_RELATION
            },
            'curies': {
                'namespaces': {},
                'default': None,
                'base_uri': None,
                'advertise': 'all'
            },
            'relations': {
                'provider': 'inflector',
                'types': {}
            },
            'messages': {}
        }
        self.config_path = "<built-in defaults>"
        logger.info("Using built-in default configuration")

    def get_hal_config(self) -> Dict[str, Any]:
        """
        Get HAL rendering configuration section.

        Returns:
            Dictionary containing HAL rendering configuration
        """
        return self.config_data.get('hal') or {}

    def get_curies_config(self) -> Dict[str, Any]:
        """
        Get curie configuration section.

        Returns:
            Dictionary containing curie configuration
        """
        return self.config_data.get('curies') or {}

    def get_relations_config(self) -> Dict[str, Any]:
        """
        Get relation provider configuration section.

        Returns:
            Dictionary containing relation provider configuration
        """
        return self.config_data.get('relations') or {}

    def get_messages(self) -> Dict[str, str]:
        """
        Get link title messages keyed by message code.

        Returns:
            Dictionary of message code to message text
        """
        return self.config_data.get('messages') or {}

    def get_render_single_links(self) -> RenderSingleLinks:
        value = self.get_hal_config().get('render_single_links', RenderSingleLinks.AS_SINGLE.value)
        try:
            return RenderSingleLinks(value)
        except ValueError as e:
            raise HalConfigurationError(f"Invalid render_single_links value: {value}") from e

    def get_render_single_links_overrides(self) -> List[Dict[str, Any]]:
        """
        Get the per-pattern render mode overrides in registration order.

        Returns:
            List of dictionaries with 'pattern' and 'mode' keys
        """
        return self.get_hal_config().get('render_single_links_for') or []

    def get_enforce_embedded_collections(self) -> bool:
        return self.get_hal_config().get('enforce_embedded_collections', False)

    def get_prefer_collection_rels(self) -> bool:
        return self.get_hal_config().get('prefer_collection_rels', False)

    def get_default_relation(self) -> str:
        return self.get_hal_config().get('default_relation', DEFAULT_EMBEDDED_RELATION)

    def get_curie_namespaces(self) -> Dict[str, str]:
        return self.get_curies_config().get('namespaces') or {}

    def validate_config(self) -> None:
        """
        Validate the loaded configuration.

        Raises:
            HalConfigurationError: If configuration is invalid
        """
        for section in self.config_data:
            if section not in CONFIG_SECTIONS:
                logger.warning(f"Ignoring unknown configuration section: {section}")

        self.get_render_single_links()

        for override in self.get_render_single_links_overrides():
            if not isinstance(override, dict) or not override.get('pattern'):
                raise HalConfigurationError(f"Render mode override needs a pattern: {override}")
            try:
                RenderSingleLinks(override.get('mode'))
            except ValueError as e:
                raise HalConfigurationError(f"Invalid render mode for pattern {override['pattern']}: {override.get('mode')}") from e

        if not isinstance(self.get_enforce_embedded_collections(), bool):
            raise HalConfigurationError("enforce_embedded_collections must be a boolean value")

        if not isinstance(self.get_prefer_collection_rels(), bool):
            raise HalConfigurationError("prefer_collection_rels must be a boolean value")

        default_relation = self.get_default_relation()
        if not default_relation or not isinstance(default_relation, str):
            raise HalConfigurationError("default_relation must be a non-empty string")

        namespaces = self.get_curie_namespaces()
        if not isinstance(namespaces, dict):
            raise HalConfigurationError("curies.namespaces must be a mapping of curie name to URI template")

        advertise = self.get_curies_config().get('advertise', 'all')
        if advertise not in ('all', 'referenced'):
            raise HalConfigurationError(f"curies.advertise must be 'all' or 'referenced', got {advertise}")

        provider = self.get_relations_config().get('provider', 'inflector')
        if provider not in ('default', 'inflector'):
            raise HalConfigurationError(f"relations.provider must be 'default' or 'inflector', got {provider}")

        logger.info("HalGraph configuration validation passed")

    def create_hal_configuration(self) -> HalConfiguration:
        """
        Build the HAL rendering configuration.

        Returns:
            HalConfiguration with overrides registered in file order
        """
        configuration = HalConfiguration(
            render_single_links=self.get_render_single_links(),
            enforce_embedded_collections=self.get_enforce_embedded_collections(),
            default_relation=self.get_default_relation()
        )

        for override in self.get_render_single_links_overrides():
            configuration = configuration.with_render_single_links_for(
                override['pattern'], RenderSingleLinks(override['mode'])
            )

        return configuration

    def create_curie_provider(self) -> CurieProvider:
        """
        Build the curie provider.

        Returns:
            NONE when no namespaces are configured, otherwise a DefaultCurieProvider
            or ReferencedCurieProvider depending on 'advertise'

        Raises:
            HalConfigurationError: If a curie declaration is invalid
        """
        curies_config = self.get_curies_config()
        namespaces = self.get_curie_namespaces()

        if not namespaces:
            return NONE

        provider_class = ReferencedCurieProvider if curies_config.get('advertise') == 'referenced' else DefaultCurieProvider

        try:
            return provider_class(
                namespaces,
                default_curie=curies_config.get('default'),
                base_uri=curies_config.get('base_uri')
            )
        except CurieConfigurationError as e:
            raise HalConfigurationError(f"Invalid curie configuration: {e}") from e

    def create_relation_provider(self) -> LinkRelationProvider:
        """
        Build the relation provider chain.

        Types configured under 'relations.types' come first, then @relation
        declarations, then the class-name based fallback.

        Returns:
            DelegatingLinkRelationProvider

        Raises:
            HalConfigurationError: If a configured type cannot be imported
        """
        relations_config = self.get_relations_config()
        providers: List[LinkRelationProvider] = []

        for type_name, names in (relations_config.get('types') or {}).items():
            names = names or {}
            providers.append(FixedLinkRelationProvider(
                names.get('item'), names.get('collection'), types=[_import_type(type_name)]
            ))

        providers.append(AnnotationLinkRelationProvider())

        if relations_config.get('provider', 'inflector') == 'default':
            fallback = DefaultLinkRelationProvider()
        else:
            fallback = InflectorLinkRelationProvider()

        return DelegatingLinkRelationProvider(providers, fallback)

    def create_message_resolver(self) -> MessageResolver:
        messages = self.get_messages()
        return DictMessageResolver(messages) if messages else DEFAULTS_ONLY

    def __str__(self) -> str:
        """String representation of the configuration."""
        return f"HalGraphConfig(path={self.config_path}, render_single_links={self.get_render_single_links().value})"


def _import_type(qualified_name: str) -> type:
    """Import a class given its qualified name, e.g. 'myapp.model.Order'."""
    module_name, _, class_name = qualified_name.rpartition('.')

    if not module_name:
        raise HalConfigurationError(f"Type name must be fully qualified: {qualified_name}")

    try:
        return getattr(importlib.import_module(module_name), class_name)
    except (ImportError, AttributeError) as e:
        raise HalConfigurationError(f"Cannot import type {qualified_name}: {e}") from e


# Global configuration instance
_config_instance: Optional[HalGraphConfig] = None


def get_config(config_path: Optional[str] = None) -> HalGraphConfig:
    """
    Get the global configuration instance.

    Args:
        config_path: Optional path to configuration file. Only used on first call.

    Returns:
        HalGraphConfig instance
    """
    global _config_instance

    if _config_instance is None:
        _config_instance = HalGraphConfig(config_path)
        _config_instance.validate_config()

    return _config_instance


def reload_config(config_path: Optional[str] = None) -> HalGraphConfig:
    """
    Reload the global configuration instance.

    Args:
        config_path: Optional path to configuration file

    Returns:
        New HalGraphConfig instance
    """
    global _config_instance

    _config_instance = HalGraphConfig(config_path)
    _config_instance.validate_config()

    return _config_instance

"""
Parser Manager for language-specific source parsers.

This module manages parser registration and selection by language name.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional
import yaml

from parsers.base import SourceParser

logger = logging.getLogger(__name__)


class ParserManager:
    """Manages source parser registration and selection."""

    def __init__(self):
        """Initialize the parser manager."""
        self._parsers: Dict[str, SourceParser] = {}
        self._config_cache: Dict[str, Dict] = {}

    def register_parser(self, parser: SourceParser) -> None:
        """
        Register a source parser.

        Args:
            parser: SourceParser instance to register
        """
        language_name = parser.language_name

        if language_name in self._parsers:
            logger.warning(f"Parser for language '{language_name}' already registered, overwriting")

        self._parsers[language_name] = parser
        logger.info(f"Registered parser for language '{language_name}'")

    def get_parser(self, language_name: str) -> Optional[SourceParser]:
        """
        Get parser by language name.

        Args:
            language_name: Name of the language

        Returns:
            SourceParser instance if found, None otherwise
        """
        return self._parsers.get(language_name)

    def list_supported_languages(self) -> List[str]:
        """List all registered languages."""
        return list(self._parsers.keys())

    def load_parser_config(self, parser_dir: Path) -> Dict:
        """
        Load parser configuration from YAML file.

        Args:
            parser_dir: Directory containing the parser and config.yaml

        Returns:
            Dictionary containing parser configuration

        Raises:
            FileNotFoundError: If config.yaml is not found
            ValueError: If a required field is missing
            yaml.YAMLError: If config.yaml is malformed
        """
        config_path = parser_dir / "config.yaml"

        cache_key = str(config_path)
        if cache_key in self._config_cache:
            return self._config_cache[cache_key]

        if not config_path.exists():
            raise FileNotFoundError(f"Parser configuration not found: {config_path}")

        try:
            with open(config_path, 'r') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse parser configuration {config_path}: {e}")
            raise

        required_fields = ['name', 'version', 'node_kinds']
        for field in required_fields:
            if field not in config:
                raise ValueError(f"Missing required field '{field}' in {config_path}")

        self._config_cache[cache_key] = config

        logger.info(f"Loaded parser configuration from {config_path}")
        return config


_manager: Optional[ParserManager] = None


def get_parser_manager() -> ParserManager:
    """
    Get or create the global parser manager.

    The manager is created with every bundled parser registered.

    Returns:
        ParserManager instance
    """
    global _manager
    if _manager is None:
        from parsers.ruby import RUBY_PARSER_DIR, RubyParser

        manager = ParserManager()
        config = manager.load_parser_config(RUBY_PARSER_DIR)
        manager.register_parser(RubyParser(config=config))
        _manager = manager
    return _manager

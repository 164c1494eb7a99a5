"""
Configuration manager for loading and managing source and feed configurations.
"""

import copy
import yaml
import json
import logging
from typing import Any, Optional
from pathlib import Path

from newsgrid.sources import SourceConfig
from newsgrid.models.domain import NewsCategory

logger = logging.getLogger(__name__)


DEFAULT_CONFIG: dict[str, Any] = {
    'sources': {
        'headline_api': {
            'enabled': True,
            'source_type': 'json_api',
            'adapter_class': 'HeadlineAPIAdapter',
            'url': 'https://newsapi.org/v2'
        },
        'feed_bridge': {
            'enabled': True,
            'source_type': 'json_api',
            'adapter_class': 'FeedBridgeAdapter',
            'url': 'https://api.rss2json.com/v1/api.json',
            'adapter_config': {
                'max_items': 10
            }
        },
        'hackernews': {
            'enabled': True,
            'source_type': 'hackernews',
            'adapter_class': 'HackerNewsAdapter',
            'url': 'https://hacker-news.firebaseio.com/v0',
            'adapter_config': {
                'max_items': 10
            }
        }
    },
    'feeds': {
        'general': ['https://feeds.bbci.co.uk/news/rss.xml'],
        'business': ['https://feeds.bbci.co.uk/news/business/rss.xml'],
        'entertainment': ['https://feeds.bbci.co.uk/news/entertainment_and_arts/rss.xml'],
        'health': ['https://feeds.bbci.co.uk/news/health/rss.xml'],
        'science': ['https://feeds.bbci.co.uk/news/science_and_environment/rss.xml'],
        'sports': ['https://feeds.bbci.co.uk/sport/rss.xml'],
        'technology': ['https://feeds.bbci.co.uk/news/technology/rss.xml'],
        'world': ['https://feeds.bbci.co.uk/news/world/rss.xml'],
        'politics': ['https://feeds.bbci.co.uk/news/politics/rss.xml']
    }
}

# File suffix -> parser for the sources file
CONFIG_PARSERS = {
    '.yaml': yaml.safe_load,
    '.yml': yaml.safe_load,
    '.json': json.loads
}


class ConfigManager:
    """Holds the source definitions and the category feed map"""

    def __init__(self):
        self.sources: dict[str, SourceConfig] = {}
        self.feeds: dict[str, list[str]] = {}

    def load_from_file(self, file_path: str) -> bool:
        """Read a YAML or JSON sources file; False if it cannot be used"""
        path = Path(file_path)
        if not path.is_file():
            logger.error(f"Configuration file not found: {file_path}")
            return False

        parser = CONFIG_PARSERS.get(path.suffix.lower())
        if parser is None:
            logger.error(f"Unsupported configuration file format: {path.suffix}")
            return False

        try:
            config_data = parser(path.read_text())
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Could not parse {file_path}: {e}")
            return False

        return self.load_from_dict(config_data)

    def load_from_dict(self, config_data: dict[str, Any]) -> bool:
        """Replace the current sources and feeds with the given mapping"""
        if not isinstance(config_data, dict):
            logger.error(f"Configuration must be a mapping, got {type(config_data).__name__}")
            return False

        sources_data = config_data.get('sources') or {}
        feeds_data = config_data.get('feeds') or {}
        if not isinstance(sources_data, dict) or not isinstance(feeds_data, dict):
            logger.error("Configuration 'sources' and 'feeds' must be mappings")
            return False

        sources: dict[str, SourceConfig] = {}
        for source_name, source_data in sources_data.items():
            if source_data is not None and not isinstance(source_data, dict):
                logger.error(f"Ignoring source {source_name}: expected a mapping")
                continue
            sources[source_name] = self._create_source_config(source_name, source_data or {})
            logger.debug(f"Loaded source configuration: {source_name}")

        self.sources = sources
        self.feeds = self._create_feed_map(feeds_data)

        logger.info(f"Loaded {len(self.sources)} sources and feeds for {len(self.feeds)} categories")
        return True

    def load_defaults(self) -> None:
        """Load the built-in source and feed configuration"""
        self.load_from_dict(copy.deepcopy(DEFAULT_CONFIG))

    def _create_source_config(self, name: str, data: dict[str, Any]) -> SourceConfig:
        return SourceConfig(
            name=name,
            enabled=bool(data.get('enabled', True)),
            source_type=data.get('source_type', 'json_api'),
            adapter_class=data.get('adapter_class', 'FeedBridgeAdapter'),
            url=data.get('url') or '',
            headers=data.get('headers'),
            adapter_config=data.get('adapter_config')
        )

    def _create_feed_map(self, data: dict[str, Any]) -> dict[str, list[str]]:
        """Lowercase category keys; a single URL becomes a one-item list"""
        feeds = {}
        for category, urls in data.items():
            if isinstance(urls, str):
                urls = [urls]
            feeds[str(category).lower()] = [url for url in (urls or []) if url]
        return feeds

    def get_source_configs(self) -> list[SourceConfig]:
        return list(self.sources.values())

    def get_enabled_source_configs(self) -> list[SourceConfig]:
        """Sources with enabled: true, in file order"""
        return [source for source in self.sources.values() if source.enabled]

    def get_source_config(self, name: str) -> Optional[SourceConfig]:
        return self.sources.get(name)

    def get_feed_map(self) -> dict[str, list[str]]:
        """Copy of the category -> feed URLs mapping"""
        return {category: list(urls) for category, urls in self.feeds.items()}

    def validate_configs(self, known_adapters: Optional[set[str]] = None) -> list[str]:
        """Describe every problem found; an empty list means the configuration is usable"""
        problems = []

        for name, source in self.sources.items():
            if not source.url:
                problems.append(f"Source {name}: Missing URL")
            if not source.adapter_class:
                problems.append(f"Source {name}: Missing adapter class")
            elif known_adapters is not None and source.adapter_class not in known_adapters:
                problems.append(f"Source {name}: Unknown adapter class {source.adapter_class}")

        for category, urls in self.feeds.items():
            if NewsCategory.parse(category) is None:
                problems.append(f"Feeds: Unknown category {category}")
            if not urls:
                problems.append(f"Feeds: No URLs for category {category}")

        return problems


def load_config_from_file(file_path: str) -> ConfigManager:
    """Load a sources file, raising ValueError if it is missing or malformed"""
    manager = ConfigManager()
    if not manager.load_from_file(file_path):
        raise ValueError(f"Failed to load configuration from {file_path}")
    return manager


def load_config_from_dict(config_data: dict[str, Any]) -> ConfigManager:
    manager = ConfigManager()
    if not manager.load_from_dict(config_data):
        raise ValueError("Failed to load configuration from dictionary")
    return manager

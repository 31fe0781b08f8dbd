#!/usr/bin/env python3
"""
ESearch Configuration
Loads settings from environment and provides defaults
"""

import os
from pathlib import Path
from dotenv import load_dotenv

from .text import slugify

# Load from project root .env
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
load_dotenv(PROJECT_ROOT / '.env')


class ESearchConfig:
    """Central configuration for the search adapter"""

    def __init__(self):
        # Process identity - the index is named after the application
        self.application_name = os.getenv('APPLICATION_NAME', 'application')
        self.index_override = os.getenv('ESEARCH_INDEX', '')

        # Elasticsearch settings
        self.es_host = os.getenv('ELASTICSEARCH_HOST', 'http://localhost:9200')
        self.es_username = os.getenv('ELASTICSEARCH_USERNAME', '')
        self.es_password = os.getenv('ELASTICSEARCH_PASSWORD', '')
        self.request_timeout = int(os.getenv('ESEARCH_REQUEST_TIMEOUT', '30'))

        # Write behaviour
        self.refresh = os.getenv('ESEARCH_REFRESH', '') or None

        # Search defaults
        self.default_size = int(os.getenv('ESEARCH_DEFAULT_SIZE', '20'))

    @property
    def index_name(self) -> str:
        """Index name: explicit override, else the slugified application name."""
        return self.index_override or slugify(self.application_name)

    def get_elasticsearch_config(self) -> dict:
        """Keyword arguments for the Elasticsearch client"""
        es_config = {
            'hosts': [self.es_host],
            'timeout': self.request_timeout,
        }
        if self.es_username and self.es_password:
            es_config['http_auth'] = (self.es_username, self.es_password)
        return es_config

    def get(self, key: str, default=None):
        """Get config value by key"""
        return getattr(self, key, default)

    def __getitem__(self, key: str):
        return getattr(self, key)


# Global config instance
config = ESearchConfig()

__all__ = ['config', 'ESearchConfig']

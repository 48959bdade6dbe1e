"""
Configuration management for the Fantasy Basketball lineup planner.

Loads configuration from environment variables with sensible defaults
for development. Production deployments should set all required
environment variables.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() == 'true'


class Config:
    """Base configuration class."""

    # Flask
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    JSON_SORT_KEYS = False

    # CORS - Allow React frontend
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', 'http://localhost:3000').split(',')
    CORS_SUPPORTS_CREDENTIALS = True

    # Weekly start cap (ESPN default for H2H leagues)
    WEEKLY_STARTS_CAP = int(os.environ.get('WEEKLY_STARTS_CAP', '32'))

    # Injury weighting (OUT players are excluded regardless)
    APPLY_INJURY_MULTIPLIERS = _env_bool('APPLY_INJURY_MULTIPLIERS', 'true')
    DTD_MULTIPLIER = float(os.environ.get('DTD_MULTIPLIER', '0.70'))
    GTD_MULTIPLIER = float(os.environ.get('GTD_MULTIPLIER', '0.85'))

    # Base rating: CRI (false) or wCRI (true)
    USE_WEIGHTED_RATING = _env_bool('USE_WEIGHTED_RATING', 'false')

    # 'greedy' (legacy slot-order fill) or 'matching' (maximum slot fill)
    LINEUP_ASSIGNMENT_STRATEGY = os.environ.get('LINEUP_ASSIGNMENT_STRATEGY', 'greedy')

    # Top-N players by base rating are never recommended for a full bench
    CORE_PLAYER_COUNT = int(os.environ.get('CORE_PLAYER_COUNT', '6'))

    # When today counts as elapsed: 'games_started', 'always' or 'never'
    TODAY_ELAPSED_POLICY = os.environ.get('TODAY_ELAPSED_POLICY', 'games_started')

    # NBA slates run on Eastern time
    SCHEDULE_TIMEZONE = os.environ.get('SCHEDULE_TIMEZONE', 'America/New_York')


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True


class TestingConfig(Config):
    """Testing configuration."""

    TESTING = True
    DEBUG = True
    WEEKLY_STARTS_CAP = 32
    APPLY_INJURY_MULTIPLIERS = True
    DTD_MULTIPLIER = 0.70
    GTD_MULTIPLIER = 0.85
    USE_WEIGHTED_RATING = False
    LINEUP_ASSIGNMENT_STRATEGY = 'greedy'
    CORE_PLAYER_COUNT = 6
    TODAY_ELAPSED_POLICY = 'games_started'


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False

    # Require SECRET_KEY in production
    @property
    def SECRET_KEY(self):
        key = os.environ.get('SECRET_KEY')
        if not key:
            raise ValueError('SECRET_KEY environment variable must be set in production')
        return key


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}


def get_config():
    """Get configuration class based on FLASK_ENV environment variable."""
    env = os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])

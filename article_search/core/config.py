from decouple import config
from typing import List

# Environment
ENVIRONMENT = config("ENVIRONMENT", default="development")

# Application settings
APP_NAME = config("APP_NAME", default="Article Search")
APP_VERSION = config("APP_VERSION", default="0.1.0")
API_PREFIX = config("API_PREFIX", default="/api")
DEBUG = config("DEBUG", default=False, cast=bool)

# Elasticsearch
ELASTICSEARCH_URL = config("ELASTICSEARCH_URL", default="http://localhost:9200")
ELASTICSEARCH_USERNAME = config("ELASTICSEARCH_USERNAME", default="")
ELASTICSEARCH_PASSWORD = config("ELASTICSEARCH_PASSWORD", default="")
ELASTICSEARCH_TIMEOUT = config("ELASTICSEARCH_TIMEOUT", default=30, cast=int)
ARTICLE_INDEX = config("ARTICLE_INDEX", default="articles")

# Search settings
SEARCH_MAX_RESULTS = config("SEARCH_MAX_RESULTS", default=100, cast=int)
CATEGORY_BUCKET_SIZE = config("CATEGORY_BUCKET_SIZE", default=100, cast=int)

# Cache
REDIS_URL = config("REDIS_URL", default="redis://localhost:6379/0")
CACHE_ENABLED = config("CACHE_ENABLED", default=False, cast=bool)
CACHE_TTL_SECONDS = config("CACHE_TTL_SECONDS", default=60, cast=int)

# CORS Settings
CORS_ORIGINS = config("CORS_ORIGINS", default="http://localhost:3000").split(",")
CORS_METHODS = config("CORS_METHODS", default="GET,OPTIONS").split(",")
CORS_HEADERS = config("CORS_HEADERS", default="Content-Type,Accept").split(",")

# Logging Settings
LOG_LEVEL = config("LOG_LEVEL", default="INFO")


# Settings class for FastAPI
class Settings:
    environment: str = ENVIRONMENT
    app_name: str = APP_NAME
    app_version: str = APP_VERSION
    api_prefix: str = API_PREFIX
    debug: bool = DEBUG
    elasticsearch_url: str = ELASTICSEARCH_URL
    elasticsearch_username: str = ELASTICSEARCH_USERNAME
    elasticsearch_password: str = ELASTICSEARCH_PASSWORD
    elasticsearch_timeout: int = ELASTICSEARCH_TIMEOUT
    article_index: str = ARTICLE_INDEX
    search_max_results: int = SEARCH_MAX_RESULTS
    category_bucket_size: int = CATEGORY_BUCKET_SIZE
    redis_url: str = REDIS_URL
    cache_enabled: bool = CACHE_ENABLED
    cache_ttl_seconds: int = CACHE_TTL_SECONDS
    cors_origins: List[str] = CORS_ORIGINS
    cors_methods: List[str] = CORS_METHODS
    cors_headers: List[str] = CORS_HEADERS
    log_level: str = LOG_LEVEL

# Create settings instance
settings = Settings()

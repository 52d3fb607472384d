"""
Configuration management for the record lookup service.
"""

from typing import Optional


class Settings:
    """API server configuration."""

    # Paths
    DB_PATH: str = "data.db"
    CERT_FILE: str = "server.crt"
    KEY_FILE: str = "server.key"

    # Server
    API_TITLE: str = "Record Lookup API"
    API_DESCRIPTION: str = "Looks up records stored in a local SQLite database"
    API_VERSION: str = "1.0.0"
    HOST: str = "0.0.0.0"
    HTTP_PORT: int = 8080   # plaintext, redirect only
    HTTPS_PORT: int = 8443  # TLS, serves the API

    # Interactive docs are off so the listener only exposes the API routes
    DOCS_URL: Optional[str] = None
    REDOC_URL: Optional[str] = None
    OPENAPI_URL: Optional[str] = None

    # Database
    DB_TIMEOUT: int = 30  # SQLite connection timeout in seconds
    SEED_DATA: bool = True

    # Logging
    LOG_FILE: Optional[str] = None


settings = Settings()

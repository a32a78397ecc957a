"""
Configuration management for the Wati integration service.

Loads environment variables from .env file and provides typed access to configuration.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)


class Config:
    """Configuration class for the Wati integration service."""

    # Wati API credentials
    # Endpoint URL as shown in Wati Dashboard -> API Docs (tenant ID included)
    WATI_API_URL = os.getenv("WATI_API_URL", "")
    WATI_ACCESS_TOKEN = os.getenv("WATI_ACCESS_TOKEN", "")
    WATI_HTTP_TIMEOUT = float(os.getenv("WATI_HTTP_TIMEOUT", "30"))

    # Trigger
    WATI_TRIGGER_EVENT = os.getenv("WATI_TRIGGER_EVENT", "all")
    WORKFLOW_WEBHOOK_URL = os.getenv("WORKFLOW_WEBHOOK_URL", "")

    # Service
    AGENT_PORT = int(os.getenv("AGENT_PORT", "8000"))
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def missing(cls) -> list[str]:
        """Names of required settings that are not set or invalid."""
        from transport.wati.schemas import EventFilter

        required = ["WATI_API_URL", "WATI_ACCESS_TOKEN"]
        missing = [key for key in required if not getattr(cls, key)]

        if cls.WATI_TRIGGER_EVENT not in {e.value for e in EventFilter}:
            missing.append("WATI_TRIGGER_EVENT")

        return missing

    @classmethod
    def validate(cls) -> bool:
        """Validate that required configuration is set."""
        return not cls.missing()


if __name__ == "__main__":
    # Test configuration loading
    print("Configuration loaded:")
    print(f"  Wati API URL: {Config.WATI_API_URL or '✗ Missing'}")
    print(f"  Wati Access Token: {'✓ Set' if Config.WATI_ACCESS_TOKEN else '✗ Missing'}")
    print(f"  Trigger Event: {Config.WATI_TRIGGER_EVENT}")
    print(f"  Workflow Webhook URL: {Config.WORKFLOW_WEBHOOK_URL or '(not set)'}")
    print(f"  Environment: {Config.ENVIRONMENT}")
    print(f"  Valid: {Config.validate()}")

"""Configuration for the Chroma connection."""

import os
from urllib.parse import urlparse

from dotenv import load_dotenv

from vectorstudio.constants import DEFAULT_CHROMA_URL, DEFAULT_PERSIST_DIRECTORY

# Load environment variables
load_dotenv()


class ChromaConfig:
    """Configuration class for Chroma connection details."""

    @staticmethod
    def get_url() -> str:
        """Get the Chroma server URL from environment variables.

        Returns:
            str: Chroma server URL (default: http://localhost:8000)
        """
        return os.getenv("CHROMA_URL", DEFAULT_CHROMA_URL)

    @staticmethod
    def get_persist_directory() -> str:
        """Get the persist directory recorded in new collection metadata.

        Returns:
            str: Persist directory (default: ./chroma_db)
        """
        return os.getenv("CHROMA_PERSIST_DIRECTORY", DEFAULT_PERSIST_DIRECTORY)

    @staticmethod
    def get_auth_token() -> str | None:
        """Get the optional bearer token sent to the Chroma server."""
        return os.getenv("CHROMA_AUTH_TOKEN") or None

    @staticmethod
    def parse_url(url: str) -> tuple[str, int, bool]:
        """Split a Chroma URL into host, port and TLS flag.

        Args:
            url: URL such as "http://localhost:8000"

        Returns:
            tuple: (host, port, ssl)
        """
        parsed = urlparse(url if "://" in url else f"http://{url}")
        ssl = parsed.scheme == "https"
        port = parsed.port or (443 if ssl else 8000)
        return parsed.hostname or "localhost", port, ssl

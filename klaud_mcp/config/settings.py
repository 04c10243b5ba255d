"""
Runtime configuration for the Klaud API MCP server.

Everything is read from environment variables so the server can be configured
from the MCP host's settings without code changes.

Environment Variables:
    KLAUD_API_BASE   - Upstream origin (default: https://klaud-api.klaud0x.workers.dev)
    KLAUD_API_KEY    - General API key for content endpoints
    KLAUD_KV_TOKEN   - Key-value store token
    KLAUD_MSG_TOKEN  - Messaging token (also used by registry and tasks)
    KLAUD_LOG_LEVEL  - Logging level name (default: INFO)

Credentials are looked up on every call rather than captured at startup, so a
token exported after launch is picked up by the next invocation.

Usage:
    from klaud_mcp.config.settings import Settings

    settings = Settings.from_env()
    token = settings.credential(CredentialKind.STORE)
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from ..registry.operation_registry import CredentialKind

DEFAULT_API_BASE = "https://klaud-api.klaud0x.workers.dev"
DEFAULT_USER_AGENT = "klaud-api-mcp/1.0"

CREDENTIAL_ENV_VARS: Dict[CredentialKind, str] = {
    CredentialKind.API_KEY: "KLAUD_API_KEY",
    CredentialKind.STORE: "KLAUD_KV_TOKEN",
    CredentialKind.MESSAGING: "KLAUD_MSG_TOKEN",
}


@dataclass
class Settings:
    """Server configuration.

    Attributes:
        api_base: Upstream origin, without trailing slash
        log_level: Logging level name
        user_agent: Fixed client identifier sent with every request
        environ: Mapping credentials are read from (os.environ by default)
    """
    api_base: str = DEFAULT_API_BASE
    log_level: str = "INFO"
    user_agent: str = DEFAULT_USER_AGENT
    environ: Mapping[str, str] = field(default_factory=lambda: os.environ, repr=False)

    def __post_init__(self):
        self.api_base = self.api_base.rstrip("/")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from (default: os.environ)
        """
        env = os.environ if environ is None else environ
        return cls(
            api_base=env.get("KLAUD_API_BASE") or DEFAULT_API_BASE,
            log_level=(env.get("KLAUD_LOG_LEVEL") or "INFO").upper(),
            environ=env,
        )

    def credential(self, kind: CredentialKind) -> Optional[str]:
        """Return the environment-sourced token for ``kind``, or None."""
        value = self.environ.get(CREDENTIAL_ENV_VARS[kind])
        return value or None


def configure_logging(settings: Settings) -> None:
    """Send logs to stderr; stdout carries the MCP stdio transport."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

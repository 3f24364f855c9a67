"""
Main configuration class that composes all configs.
"""

import json
import logging
import os

from dotenv import load_dotenv

from src.core.config.github_config import GitHubConfig
from src.core.config.logging_config import LoggingConfig
from src.core.config.repo_config import OwnersSourceConfig, RegistrySourceConfig
from src.core.config.welcome_config import DEFAULT_FALLBACK_CONTACTS, WelcomeConfig

# Load environment variables from a .env file
load_dotenv()

logger = logging.getLogger(__name__)


def _parse_handles(raw: str | None) -> tuple[str, ...]:
    """Parse a JSON list (or comma-separated string) of handles."""
    if not raw:
        return DEFAULT_FALLBACK_CONTACTS
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        parsed = raw.split(",")
    if isinstance(parsed, str):
        parsed = [parsed]
    handles = tuple(str(h).strip().lstrip("@") for h in parsed if str(h).strip())
    if not handles:
        logger.warning("WELCOME_FALLBACK_CONTACTS is empty, using defaults")
        return DEFAULT_FALLBACK_CONTACTS
    return handles


class Config:
    """Main configuration class."""

    def __init__(self) -> None:
        self.github = GitHubConfig(
            app_name=os.getenv("APP_NAME_GITHUB", ""),
            app_id=os.getenv("APP_CLIENT_ID_GITHUB", ""),
            private_key=os.getenv("PRIVATE_KEY_BASE64_GITHUB", ""),
            webhook_secret=os.getenv("WEBHOOK_SECRET_GITHUB", ""),
            api_base_url=os.getenv("GITHUB_API_BASE_URL", "https://api.github.com"),
        )

        self.registry = RegistrySourceConfig(
            repo=os.getenv("REGISTRY_REPO", "opensourceways/community"),
            path=os.getenv("REGISTRY_PATH", "sig/sigs.yaml"),
            ref=os.getenv("REGISTRY_REF", "master"),
        )

        self.owners = OwnersSourceConfig(
            repo=os.getenv("OWNERS_REPO", "opengauss/tc"),
            path_template=os.getenv("OWNERS_PATH_TEMPLATE", "sigs/{sig}/OWNERS"),
            ref=os.getenv("OWNERS_REF", "master"),
        )

        self.welcome = WelcomeConfig(
            label_prefix=os.getenv("WELCOME_LABEL_PREFIX", "sig/"),
            fallback_contacts=_parse_handles(os.getenv("WELCOME_FALLBACK_CONTACTS")),
            escalation_enabled=os.getenv("WELCOME_ESCALATION_ENABLED", "false").lower() == "true",
            max_escalation_tiers=int(os.getenv("WELCOME_MAX_ESCALATION_TIERS", "3")),
        )

        self.logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            file_path=os.getenv("LOG_FILE_PATH"),
        )

        self.task_queue_workers = int(os.getenv("TASK_QUEUE_WORKERS", "5"))

        # Development settings
        self.debug = os.getenv("DEBUG", "false").lower() == "true"
        self.environment = os.getenv("ENVIRONMENT", "development")

    def validate(self) -> bool:
        """Validate configuration."""
        errors = []

        if not self.github.app_name:
            errors.append("APP_NAME_GITHUB is required")

        if not self.github.app_id:
            errors.append("APP_CLIENT_ID_GITHUB is required")

        if not self.github.private_key:
            errors.append("PRIVATE_KEY_BASE64_GITHUB is required")

        if not self.github.webhook_secret:
            errors.append("WEBHOOK_SECRET_GITHUB is required")

        if "/" not in self.registry.repo:
            errors.append("REGISTRY_REPO must be in 'owner/repo' format")

        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

        return True


# Global config instance
config = Config()

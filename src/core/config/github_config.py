"""
GitHub App configuration.

Credentials the welcome bot uses to verify webhook deliveries, mint
installation tokens and post its replies.
"""

from dataclasses import dataclass


@dataclass
class GitHubConfig:
    """GitHub App identity, webhook secret and API endpoint."""

    app_name: str  # replies authored by `<app_name>[bot]` never trigger a new reply
    app_id: str
    private_key: str
    webhook_secret: str
    api_base_url: str = "https://api.github.com"

"""
Registry loaders package.

Implementations of the RegistryLoader and OwnersLoader interfaces backed by
the GitHub Contents API.
"""

from src.sigs.loaders.github_loader import (
    GitHubOwnersLoader,
    GitHubRegistryLoader,
    decode_content,
    parse_owners,
    parse_registry,
)

__all__ = [
    "GitHubOwnersLoader",
    "GitHubRegistryLoader",
    "decode_content",
    "parse_owners",
    "parse_registry",
]

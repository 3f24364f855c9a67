"""
GitHub-based registry loader.

Loads the SIG ownership registry (and optionally per-SIG OWNERS documents)
from repository files through the Contents API, implementing the
RegistryLoader and OwnersLoader interfaces.
"""

import base64
import binascii
import logging
from typing import Any

import aiohttp
import yaml
from pydantic import ValidationError

from src.core.config import config
from src.core.config.repo_config import OwnersSourceConfig
from src.core.errors import DecodeError, FetchError
from src.integrations.github import GitHubClient
from src.sigs.interface import OwnersLoader, RegistryLoader
from src.sigs.models import OwnersFile, Registry

logger = logging.getLogger(__name__)


def decode_content(content: dict[str, Any] | str) -> bytes:
    """
    Decode the transport encoding of a Contents API object.

    Accepts either the full content object or its bare base64 string.
    GitHub wraps base64 bodies at 60 columns, so whitespace is dropped first.
    """
    if isinstance(content, dict):
        encoding = content.get("encoding") or "base64"
        body = content.get("content")
        if encoding != "base64":
            raise DecodeError(f"Unsupported content encoding: {encoding}")
    else:
        body = content

    if not isinstance(body, str):
        raise DecodeError("Content object has no encoded body")

    try:
        return base64.b64decode("".join(body.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Invalid base64 content: {e}") from e


def _load_yaml_mapping(raw: bytes | str) -> dict[str, Any] | None:
    try:
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
    except UnicodeDecodeError as e:
        raise DecodeError(f"Document is not valid UTF-8: {e}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DecodeError(f"Invalid YAML document: {e}") from e

    if data is None:
        return None
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a mapping at the document root, got {type(data).__name__}")
    return data


def parse_registry(raw: bytes | str) -> Registry:
    """Parse a decoded registry document. An empty document is an empty registry."""
    data = _load_yaml_mapping(raw)
    if data is None:
        return Registry()

    try:
        return Registry.model_validate(data)
    except ValidationError as e:
        raise DecodeError(f"Registry document does not match the expected schema: {e}") from e


def parse_owners(raw: bytes | str) -> OwnersFile:
    data = _load_yaml_mapping(raw)
    if data is None:
        return OwnersFile()

    try:
        return OwnersFile.model_validate(data)
    except ValidationError as e:
        raise DecodeError(f"OWNERS document does not match the expected schema: {e}") from e


async def _fetch_content(client: GitHubClient, repo: str, path: str, ref: str, installation_id: int | None) -> bytes:
    try:
        content = await client.get_path_content(repo, path, ref, installation_id)
    except aiohttp.ClientError as e:
        raise FetchError(f"Failed to fetch {repo}/{path}@{ref}: {e}", path=path, ref=ref) from e

    if not content:
        raise FetchError(f"Content not found: {repo}/{path}@{ref}", path=path, ref=ref)

    try:
        return decode_content(content)
    except DecodeError as e:
        e.path, e.ref = path, ref
        raise


class GitHubRegistryLoader(RegistryLoader):
    """
    Loads the SIG registry from a file in a GitHub repository.

    Nothing is cached: every call reads the document again.
    """

    def __init__(self, client: GitHubClient, installation_id: int | None, repository: str | None = None):
        self.github_client = client
        self.installation_id = installation_id
        self.repository = repository or config.registry.repo

    async def load(self, path: str, ref: str) -> Registry:
        logger.info(f"Fetching SIG registry {self.repository}/{path}@{ref}")
        raw = await _fetch_content(self.github_client, self.repository, path, ref, self.installation_id)

        try:
            registry = parse_registry(raw)
        except DecodeError as e:
            e.path, e.ref = path, ref
            logger.error(f"Error parsing SIG registry {self.repository}/{path}@{ref}: {e}")
            raise

        logger.info(f"Loaded {len(registry.groups)} SIGs from {self.repository}/{path}@{ref}")
        return registry


class GitHubOwnersLoader(OwnersLoader):
    """Loads per-SIG OWNERS documents. Failures are logged and yield None."""

    def __init__(self, client: GitHubClient, installation_id: int | None, source: OwnersSourceConfig | None = None):
        self.github_client = client
        self.installation_id = installation_id
        self.source = source or config.owners

    async def load(self, sig_name: str) -> OwnersFile | None:
        path = self.source.path_for(sig_name)
        try:
            raw = await _fetch_content(self.github_client, self.source.repo, path, self.source.ref, self.installation_id)
            return parse_owners(raw)
        except (FetchError, DecodeError) as e:
            logger.warning(f"OWNERS for SIG '{sig_name}' unavailable: {e}")
            return None

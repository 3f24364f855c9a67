import base64
import logging
import time
from typing import Any

import aiohttp
import jwt
from cachetools import TTLCache
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from src.core.config import config

logger = logging.getLogger(__name__)

PER_PAGE = 100
MAX_FILE_PAGES = 30


class GitHubClient:
    """
    A client for interacting with the GitHub API.

    This client handles the authentication flow for a GitHub App, including
    generating a JWT and exchanging it for an installation access token.
    Tokens are cached to improve performance and avoid rate limiting.
    """

    def __init__(self):
        self._private_key = self._decode_private_key()
        self._app_id = config.github.app_id
        self._session: aiohttp.ClientSession | None = None
        # Cache for installation tokens (TTL: 50 minutes, GitHub tokens expire in 60)
        self._token_cache: TTLCache = TTLCache(maxsize=100, ttl=50 * 60)

    async def _get_auth_headers(
        self,
        installation_id: int | None = None,
        accept: str = "application/vnd.github.v3+json",
    ) -> dict[str, str] | None:
        """Build auth headers from the installation token."""
        if installation_id is None:
            return None
        token = await self.get_installation_access_token(installation_id)
        if not token:
            logger.error(f"Failed to get installation token for {installation_id}")
            return None
        return {"Authorization": f"Bearer {token}", "Accept": accept}

    async def get_installation_access_token(self, installation_id: int) -> str | None:
        """
        Gets an access token for a specific installation of the GitHub App.
        Caches the token to avoid regenerating it for every request.
        """
        if installation_id in self._token_cache:
            logger.debug(f"Using cached installation token for installation_id {installation_id}.")
            return self._token_cache[installation_id]

        jwt_token = self._generate_jwt()
        headers = {
            "Authorization": f"Bearer {jwt_token}",
            "Accept": "application/vnd.github.v3+json",
        }
        url = f"{config.github.api_base_url}/app/installations/{installation_id}/access_tokens"

        session = await self._get_session()
        async with session.post(url, headers=headers) as response:
            if response.status == 201:
                data = await response.json()
                token = data["token"]
                self._token_cache[installation_id] = token
                logger.info(f"Generated new installation token for installation_id {installation_id}.")
                return token
            else:
                error_text = await response.text()
                logger.error(
                    f"Failed to get installation access token for installation {installation_id}. "
                    f"Status: {response.status}, Response: {error_text}"
                )
                return None

    @retry(
        retry=retry_if_exception_type(aiohttp.ClientError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def get_path_content(
        self, repo_full_name: str, path: str, ref: str, installation_id: int | None
    ) -> dict[str, Any] | None:
        """
        Fetches a content object from the Contents API at a given ref.

        The returned dict carries the file body in `content`, encoded as
        described by `encoding` (base64 for regular files). Returns None when
        the object is missing or the request is rejected. Transient network
        errors are retried and re-raised.
        """
        headers = await self._get_auth_headers(installation_id=installation_id)
        if not headers:
            return None
        url = f"{config.github.api_base_url}/repos/{repo_full_name}/contents/{path.lstrip('/')}"

        session = await self._get_session()
        async with session.get(url, headers=headers, params={"ref": ref}) as response:
            if response.status == 200:
                logger.info(f"Successfully fetched '{path}@{ref}' from '{repo_full_name}'.")
                return await response.json()
            elif response.status == 404:
                logger.info(f"Content '{path}@{ref}' not found in '{repo_full_name}'.")
                return None
            else:
                error_text = await response.text()
                logger.error(
                    f"Failed to get content for {repo_full_name}/{path}@{ref}. "
                    f"Status: {response.status}, Response: {error_text}"
                )
                return None

    async def get_pull_request_files(self, repo: str, pr_number: int, installation_id: int) -> list[dict[str, Any]]:
        """
        Get all files changed in a pull request, following pagination.

        Raises aiohttp.ClientError when any page cannot be fetched, so callers
        never act on a partial file list.
        """
        headers = await self._get_auth_headers(installation_id=installation_id)
        if not headers:
            raise aiohttp.ClientError(f"No installation token for {repo} (installation {installation_id})")

        url = f"{config.github.api_base_url}/repos/{repo}/pulls/{pr_number}/files"
        files: list[dict[str, Any]] = []

        session = await self._get_session()
        for page in range(1, MAX_FILE_PAGES + 1):
            async with session.get(url, headers=headers, params={"per_page": PER_PAGE, "page": page}) as response:
                if response.status != 200:
                    error_text = await response.text()
                    logger.error(
                        f"Failed to get files for PR #{pr_number} in {repo}. Status: {response.status}, Response: {error_text}"
                    )
                    response.raise_for_status()
                batch = await response.json()
            files.extend(batch)
            if len(batch) < PER_PAGE:
                break

        logger.info(f"Retrieved {len(files)} files for PR #{pr_number} in {repo}")
        return files

    async def create_pull_request_comment(
        self, repo: str, pr_number: int, comment: str, installation_id: int
    ) -> dict[str, Any]:
        """Create a comment on a pull request."""
        return await self._create_comment(repo, pr_number, comment, installation_id, kind="PR")

    async def create_issue_comment(
        self, repo: str, issue_number: int, comment: str, installation_id: int
    ) -> dict[str, Any]:
        """Create a comment on an issue."""
        return await self._create_comment(repo, issue_number, comment, installation_id, kind="issue")

    async def _create_comment(
        self, repo: str, number: int, comment: str, installation_id: int, kind: str
    ) -> dict[str, Any]:
        # Pull request conversation comments go through the issues endpoint too.
        try:
            headers = await self._get_auth_headers(installation_id=installation_id)
            if not headers:
                return {}

            url = f"{config.github.api_base_url}/repos/{repo}/issues/{number}/comments"
            data = {"body": comment}

            session = await self._get_session()
            async with session.post(url, headers=headers, json=data) as response:
                if response.status == 201:
                    result = await response.json()
                    logger.info(f"Created comment on {kind} #{number} in {repo}")
                    return result
                else:
                    error_text = await response.text()
                    logger.error(
                        f"Failed to create comment on {kind} #{number} in {repo}. Status: {response.status}, Response: {error_text}"
                    )
                    return {}
        except Exception as e:
            logger.error(f"Error creating comment on {kind} #{number} in {repo}: {e}")
            return {}

    async def close(self):
        """Closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Initializes and returns the aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=30))
        return self._session

    def _generate_jwt(self) -> str:
        """Generates a JSON Web Token (JWT) to authenticate as the GitHub App."""
        payload = {
            "iat": int(time.time()),
            "exp": int(time.time()) + (1 * 60),  # X * minutes expiration
            "iss": self._app_id,
        }
        return jwt.encode(payload, self._private_key, algorithm="RS256")

    @staticmethod
    def _decode_private_key() -> str:
        """
        Decodes the base64-encoded private key from the configuration.

        Returns:
            The decoded private key as a string.
        """
        try:
            # Decode the base64-encoded private key
            decoded_key = base64.b64decode(config.github.private_key).decode("utf-8")
            return decoded_key
        except Exception as e:
            logger.error(f"Failed to decode private key: {e}")
            raise ValueError("Invalid private key format. Expected base64-encoded PEM key.") from e


# Global instance
github_client = GitHubClient()

from abc import ABC, abstractmethod

from src.sigs.models import OwnersFile, Registry


class RegistryLoader(ABC):
    """
    Abstract interface for fetching the SIG ownership registry.

    This interface allows us to swap out different registry sources
    (GitHub contents, local files, etc.) without changing the pipeline.
    """

    @abstractmethod
    async def load(self, path: str, ref: str) -> Registry:
        """
        Fetch and parse the registry document.

        Args:
            path: Path of the registry document inside the source repository
            ref: Branch, tag or commit to read

        Returns:
            The parsed Registry

        Raises:
            FetchError: The document could not be retrieved.
            DecodeError: The document could not be decoded or parsed.
        """
        pass


class OwnersLoader(ABC):
    """Abstract interface for fetching per-SIG OWNERS documents."""

    @abstractmethod
    async def load(self, sig_name: str) -> OwnersFile | None:
        """Return the OWNERS document for a SIG, or None when it is unavailable."""
        pass

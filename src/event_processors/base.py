import logging
from abc import ABC, abstractmethod
from enum import Enum

from pydantic import BaseModel, Field

from src.core.config import WelcomeConfig, config
from src.core.config.repo_config import OwnersSourceConfig, RegistrySourceConfig
from src.integrations.github import GitHubClient, github_client
from src.sigs.interface import OwnersLoader, RegistryLoader
from src.sigs.loaders.github_loader import GitHubOwnersLoader, GitHubRegistryLoader
from src.sigs.matchers import build_escalation_tiers
from src.sigs.models import Contact, EscalationTier, Group, Registry
from src.tasks.task_queue import Task

logger = logging.getLogger(__name__)


class ProcessingState(str, Enum):
    """
    Processing state for event processing results.

    - POSTED: The event qualified and a welcome reply was posted
    - SKIPPED: The event did not qualify, nothing was posted
    """

    POSTED = "posted"
    SKIPPED = "skipped"


class ProcessingResult(BaseModel):
    """Result of event processing."""

    state: ProcessingState
    reason: str | None = None
    label: str | None = None
    group: str | None = None
    contacts: list[str] = Field(default_factory=list)
    message: str | None = None
    processing_time_ms: int = 0

    @property
    def posted(self) -> bool:
        return self.state == ProcessingState.POSTED


class BaseEventProcessor(ABC):
    """
    Base class for welcome processors.

    Processors hold only their collaborators and policy; every call to
    `process` loads its own registry and keeps all intermediate state local.
    """

    def __init__(
        self,
        client: GitHubClient | None = None,
        welcome: WelcomeConfig | None = None,
        registry_source: RegistrySourceConfig | None = None,
        owners_source: OwnersSourceConfig | None = None,
    ):
        self.github_client = client or github_client
        self.welcome = welcome or config.welcome
        self.registry_source = registry_source or config.registry
        self.owners_source = owners_source or config.owners

    @abstractmethod
    async def process(self, task: Task) -> ProcessingResult:
        """Process the event task."""
        raise NotImplementedError("Subclasses must implement process")

    @abstractmethod
    def get_event_type(self) -> str:
        """Get the event type this processor handles."""
        raise NotImplementedError("Subclasses must implement get_event_type")

    def _get_registry_loader(self, installation_id: int | None) -> RegistryLoader:
        return GitHubRegistryLoader(self.github_client, installation_id, self.registry_source.repo)

    def _get_owners_loader(self, installation_id: int | None) -> OwnersLoader:
        return GitHubOwnersLoader(self.github_client, installation_id, self.owners_source)

    async def _load_registry(self, installation_id: int | None) -> Registry:
        """Fetch the registry. FetchError and DecodeError propagate to the caller."""
        loader = self._get_registry_loader(installation_id)
        return await loader.load(self.registry_source.path, self.registry_source.ref)

    async def _escalation_tiers(
        self, groups: list[Group], owners: set[Contact], installation_id: int | None
    ) -> list[EscalationTier]:
        """Maintainer and committer tiers for the given groups, when escalation is enabled."""
        if not self.welcome.escalation_enabled or not groups:
            return []

        loader = self._get_owners_loader(installation_id)
        owners_files = []
        for group in sorted(groups, key=lambda g: g.name):
            owners_file = await loader.load(group.name)
            if owners_file is not None:
                owners_files.append(owners_file)

        # The first tier is the direct owners, which the composer renders itself.
        return build_escalation_tiers(owners, owners_files)[1:]

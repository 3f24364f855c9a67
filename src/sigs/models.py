from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _as_list(value: Any) -> Any:
    """Accept a YAML null or a single scalar wherever a list is expected."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return value


class ReplyKind(str, Enum):
    """Which kind of conversation the welcome reply is posted to."""

    ISSUE = "issue"
    PULL_REQUEST = "pull_request"


class Contact(BaseModel):
    """
    A person eligible for notification.

    Two contacts with the same handle are the same person: equality and
    hashing only look at `id`.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("gitee_id", "github_id", "login", "id"),
        description="Platform handle used for @mentions",
    )
    name: str = ""
    organization: str = ""
    email: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def strip_handle(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lstrip("@")
        return value

    @field_validator("name", "organization", "email", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Contact):
            return self.id == other.id
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.id)


class FileRule(BaseModel):
    """Contacts owning an exact set of file paths."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    paths: frozenset[str] = Field(default_factory=frozenset, alias="file")
    contacts: tuple[Contact, ...] = Field(default_factory=tuple, alias="owner")

    @field_validator("paths", "contacts", mode="before")
    @classmethod
    def coerce_lists(cls, value: Any) -> Any:
        return _as_list(value)


class RepoRule(BaseModel):
    """Contacts owning an exact set of repositories."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    repos: frozenset[str] = Field(default_factory=frozenset, alias="repo")
    contacts: tuple[Contact, ...] = Field(default_factory=tuple, alias="owner")

    @field_validator("repos", "contacts", mode="before")
    @classmethod
    def coerce_lists(cls, value: Any) -> Any:
        return _as_list(value)


class Group(BaseModel):
    """A special interest group (SIG) owning files and repositories."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    label: str = Field("", alias="sig_label")
    link: str = Field("", alias="sig_link")
    file_rules: tuple[FileRule, ...] = Field(default_factory=tuple, alias="files")
    repo_rules: tuple[RepoRule, ...] = Field(default_factory=tuple, alias="repos")

    @field_validator("label", "link", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("file_rules", "repo_rules", mode="before")
    @classmethod
    def coerce_lists(cls, value: Any) -> Any:
        return _as_list(value)


class Registry(BaseModel):
    """The SIG ownership registry, in document order."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    groups: tuple[Group, ...] = Field(default_factory=tuple, alias="sigs")

    @field_validator("groups", mode="before")
    @classmethod
    def coerce_lists(cls, value: Any) -> Any:
        return _as_list(value)


class GroupLink(BaseModel):
    """A SIG name and the URL rendered as a markdown link in replies."""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str

    @classmethod
    def from_group(cls, group: Group) -> "GroupLink":
        return cls(name=group.name, url=group.link)


class OwnersFile(BaseModel):
    """Per-SIG OWNERS document listing maintainers and committers by handle."""

    model_config = ConfigDict(frozen=True)

    maintainers: tuple[str, ...] = Field(default_factory=tuple)
    committers: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("maintainers", "committers", mode="before")
    @classmethod
    def coerce_lists(cls, value: Any) -> Any:
        return _as_list(value)


class EscalationTier(BaseModel):
    """An ordered group of contacts, surfaced one after another in replies."""

    model_config = ConfigDict(frozen=True)

    name: str
    handles: tuple[str, ...] = Field(default_factory=tuple)

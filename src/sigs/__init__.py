"""
SIG ownership resolution.

Registry models, label resolution and owner matching used to decide who
should be greeted on an issue or pull request.
"""

from src.sigs.matchers import build_escalation_tiers, owners_for_files, owners_for_repo
from src.sigs.models import Contact, FileRule, Group, GroupLink, Registry, RepoRule
from src.sigs.resolver import groups_for_label, resolve_label

__all__ = [
    "Contact",
    "FileRule",
    "Group",
    "GroupLink",
    "Registry",
    "RepoRule",
    "build_escalation_tiers",
    "groups_for_label",
    "owners_for_files",
    "owners_for_repo",
    "resolve_label",
]

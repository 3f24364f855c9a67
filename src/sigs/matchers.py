"""
Owner matching for files and repositories, plus escalation tiers.
"""

from collections.abc import Iterable, Sequence

from src.sigs.models import Contact, EscalationTier, Group, OwnersFile

OWNERS_TIER = "owners"
MAINTAINERS_TIER = "maintainers"
COMMITTERS_TIER = "committers"


def _path_index(group: Group) -> dict[str, list[Contact]]:
    index: dict[str, list[Contact]] = {}
    for rule in group.file_rules:
        for path in rule.paths:
            index.setdefault(path, []).extend(rule.contacts)
    return index


def owners_for_files(group: Group | None, files: Iterable[str]) -> set[Contact]:
    """
    Collect the contacts owning any of the changed files.

    Paths are compared exactly; there is no glob or directory matching.
    """
    if group is None:
        return set()

    index = _path_index(group)
    owners: set[Contact] = set()
    for path in files:
        owners.update(index.get(path, ()))
    return owners


def owners_for_repo(groups: Iterable[Group], repo_name: str) -> set[Contact]:
    """Collect the contacts owning `repo_name` across the given groups."""
    owners: set[Contact] = set()
    for group in groups:
        for rule in group.repo_rules:
            if repo_name in rule.repos:
                owners.update(rule.contacts)
    return owners


def sorted_handles(contacts: Iterable[Contact]) -> list[str]:
    return sorted({contact.id for contact in contacts})


def build_escalation_tiers(owners: Iterable[Contact], owners_files: Sequence[OwnersFile]) -> list[EscalationTier]:
    """
    Build the ordered escalation tiers: owners, then maintainers, then committers.

    A handle appears only in the first tier that lists it.
    """
    seen: set[str] = set()
    tiers = []

    candidates = [
        (OWNERS_TIER, [contact.id for contact in owners]),
        (MAINTAINERS_TIER, [h for owners_file in owners_files for h in owners_file.maintainers]),
        (COMMITTERS_TIER, [h for owners_file in owners_files for h in owners_file.committers]),
    ]
    for name, handles in candidates:
        unique = sorted({h.strip().lstrip("@") for h in handles if h and h.strip()} - seen)
        seen.update(unique)
        tiers.append(EscalationTier(name=name, handles=tuple(unique)))

    return tiers

"""
Label resolution.

Maps an event label to the SIG that declares it. A label is expected to
belong to exactly one SIG; when the registry declares it more than once the
first SIG in document order wins and the collision is reported.
"""

from collections.abc import Callable

import structlog

from src.sigs.models import Group, Registry

logger = structlog.get_logger()

AmbiguityHook = Callable[[str, list[Group]], None]


def groups_for_label(registry: Registry, label: str) -> list[Group]:
    """Return every group whose label equals `label`, in registry order."""
    return [group for group in registry.groups if group.label == label]


def resolve_label(registry: Registry, label: str, on_ambiguous: AmbiguityHook | None = None) -> Group | None:
    """
    Resolve a label to its owning group.

    Args:
        registry: The loaded SIG registry.
        label: Exact label string from the event.
        on_ambiguous: Called with (label, matches) when several groups match.

    Returns:
        The first matching group, or None when no group declares the label.
    """
    matches = groups_for_label(registry, label)
    if not matches:
        logger.info("sig_label_unmatched", label=label)
        return None

    if len(matches) > 1:
        logger.warning(
            "sig_label_ambiguous",
            label=label,
            groups=[group.name for group in matches],
            selected=matches[0].name,
        )
        if on_ambiguous is not None:
            on_ambiguous(label, matches)

    return matches[0]

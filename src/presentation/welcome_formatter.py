import logging
from collections.abc import Iterable, Sequence

from src.core.config import WelcomeConfig, config
from src.core.config.welcome_config import ISSUE_SUBJECT, PULL_REQUEST_SUBJECT
from src.sigs.models import Contact, EscalationTier, GroupLink, ReplyKind

logger = logging.getLogger(__name__)

SUBJECTS = {
    ReplyKind.ISSUE: ISSUE_SUBJECT,
    ReplyKind.PULL_REQUEST: PULL_REQUEST_SUBJECT,
}


def _handles(contacts: Iterable[Contact | str]) -> list[str]:
    handles = set()
    for contact in contacts:
        handle = contact.id if isinstance(contact, Contact) else str(contact).strip().lstrip("@")
        if handle:
            handles.add(handle)
    return sorted(handles)


def format_group_link(link: GroupLink, welcome: WelcomeConfig | None = None) -> str:
    welcome = welcome or config.welcome
    return welcome.group_link_format.format(name=link.name, url=link.url)


def format_group_links(links: Iterable[GroupLink], welcome: WelcomeConfig | None = None) -> str:
    """Render links sorted by SIG name, one per SIG, concatenated."""
    welcome = welcome or config.welcome
    unique = {(link.name, link.url): link for link in links if link.name}
    return "".join(format_group_link(unique[key], welcome) for key in sorted(unique))


def compose_welcome_message(
    kind: ReplyKind,
    author: str,
    contacts: Iterable[Contact | str],
    group_links: Iterable[GroupLink],
    escalation: Sequence[EscalationTier] = (),
    welcome: WelcomeConfig | None = None,
) -> str:
    """
    Render the welcome reply for an issue or pull request.

    Contacts are listed by handle in sorted order. When no contact was
    resolved, the configured fallback contacts are named instead so the
    reply always points somewhere. Escalation tiers after the owners are
    rendered up to `max_escalation_tiers`, skipping handles already named
    and tiers left empty.

    Args:
        kind: Issue or pull request.
        author: Handle of the issue/pull request author.
        contacts: Direct owners resolved from the registry.
        group_links: Links of the SIGs involved.
        escalation: Further tiers (maintainers, committers) in order.
        welcome: Message policy; defaults to the global configuration.

    Returns:
        The reply text. Identical inputs always produce identical text.
    """
    welcome = welcome or config.welcome

    owners = _handles(contacts)
    if not owners:
        logger.info(f"No owners resolved for {kind.value} by {author}, using fallback contacts")
        owners = _handles(welcome.fallback_contacts)

    lines = [
        welcome.greeting_template.format(author=author),
        welcome.owners_template.format(subject=SUBJECTS[kind], handles=welcome.handle_separator.join(owners)),
    ]

    named = set(owners)
    for tier in escalation[: welcome.max_escalation_tiers - 1]:
        handles = [h for h in _handles(tier.handles) if h not in named]
        if not handles:
            continue
        named.update(handles)
        lines.append(welcome.tier_template.format(tier=tier.name, handles=welcome.handle_separator.join(handles)))

    links = format_group_links(group_links, welcome)
    if links:
        lines.append(welcome.group_links_template.format(links=links))

    return "\n".join(lines)

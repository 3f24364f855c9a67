"""
Welcome message configuration.

Everything the resolver and the message composer treat as policy lives here:
the group label prefix, the issue directive pattern, the reply templates and
the fallback contacts. Instances are immutable and built once at startup.
"""

import re
from dataclasses import dataclass, field

DEFAULT_FALLBACK_CONTACTS: tuple[str, ...] = ("xiangxinyong", "zhangxubo")

ISSUE_SUBJECT = "issue"
PULL_REQUEST_SUBJECT = "pull request"

GREETING_TEMPLATE = "Hi ***{author}***,"
OWNERS_TEMPLATE = (
    "if you want to get quick review about your {subject}, please contact the owner in first: @{handles} ,"
)
TIER_TEMPLATE = "and then any of the {tier}: @{handles} ,"
GROUP_LINKS_TEMPLATE = "if you have any question, please contact the SIG:{links}."
GROUP_LINK_FORMAT = "[{name}]({url})"
HANDLE_SEPARATOR = " , @"


@dataclass(frozen=True)
class WelcomeConfig:
    """Immutable policy for resolving and rendering welcome replies."""

    label_prefix: str = "sig/"
    directive_pattern: re.Pattern[str] = field(default_factory=lambda: re.compile(r"(?m)^/sig\s*(.*?)\s*$"))
    pull_request_actions: frozenset[str] = frozenset({"labeled", "unlabeled"})
    issue_comment_actions: frozenset[str] = frozenset({"created"})
    fallback_contacts: tuple[str, ...] = DEFAULT_FALLBACK_CONTACTS
    escalation_enabled: bool = False
    max_escalation_tiers: int = 3
    greeting_template: str = GREETING_TEMPLATE
    owners_template: str = OWNERS_TEMPLATE
    tier_template: str = TIER_TEMPLATE
    group_links_template: str = GROUP_LINKS_TEMPLATE
    group_link_format: str = GROUP_LINK_FORMAT
    handle_separator: str = HANDLE_SEPARATOR

    def __post_init__(self) -> None:
        if not self.fallback_contacts or not all(h.strip() for h in self.fallback_contacts):
            raise ValueError("fallback_contacts must contain at least one non-empty handle")
        if self.max_escalation_tiers < 1:
            raise ValueError("max_escalation_tiers must be at least 1")
        if isinstance(self.directive_pattern, str):
            object.__setattr__(self, "directive_pattern", re.compile(self.directive_pattern))

    def is_group_label(self, label: str) -> bool:
        return label.startswith(self.label_prefix)

    def matches_directive(self, comment_body: str) -> bool:
        return self.directive_pattern.search(comment_body or "") is not None

import pytest

from src.core.config import WelcomeConfig
from src.presentation.welcome_formatter import compose_welcome_message, format_group_links
from src.sigs.models import Contact, EscalationTier, GroupLink, ReplyKind

STORAGE = GroupLink(name="storage", url="https://example.com/sigs/storage")
NETWORK = GroupLink(name="network", url="https://example.com/sigs/network")


@pytest.fixture
def welcome() -> WelcomeConfig:
    return WelcomeConfig()


def test_pull_request_reply(welcome):
    message = compose_welcome_message(
        ReplyKind.PULL_REQUEST, "bob", {Contact(id="alice")}, [STORAGE], welcome=welcome
    )

    assert message == (
        "Hi ***bob***,\n"
        "if you want to get quick review about your pull request, please contact the owner in first: @alice ,\n"
        "if you have any question, please contact the SIG:[storage](https://example.com/sigs/storage)."
    )


def test_issue_reply_names_issue(welcome):
    message = compose_welcome_message(ReplyKind.ISSUE, "bob", ["dave"], [STORAGE], welcome=welcome)

    assert "about your issue," in message
    assert "@dave" in message


def test_handles_are_sorted_and_unique(welcome):
    contacts = [Contact(id="zed"), Contact(id="alice"), Contact(id="mia"), Contact(id="alice", name="Again")]

    message = compose_welcome_message(ReplyKind.PULL_REQUEST, "bob", contacts, [], welcome=welcome)

    assert "@alice , @mia , @zed ," in message
    assert message.count("@alice") == 1


def test_fallback_contacts_when_nothing_resolved(welcome):
    message = compose_welcome_message(ReplyKind.PULL_REQUEST, "bob", set(), [], welcome=welcome)

    assert "@xiangxinyong , @zhangxubo ," in message


def test_custom_fallback_contacts():
    welcome = WelcomeConfig(fallback_contacts=("triage-bot",))

    message = compose_welcome_message(ReplyKind.ISSUE, "bob", [], [], welcome=welcome)

    assert "@triage-bot ," in message
    assert "xiangxinyong" not in message


def test_links_line_omitted_without_links(welcome):
    message = compose_welcome_message(ReplyKind.ISSUE, "bob", ["dave"], [], welcome=welcome)

    assert "please contact the SIG" not in message
    assert len(message.splitlines()) == 2


def test_group_links_sorted_by_name(welcome):
    assert format_group_links([STORAGE, NETWORK, STORAGE], welcome) == (
        "[network](https://example.com/sigs/network)[storage](https://example.com/sigs/storage)"
    )


def test_output_is_deterministic(welcome):
    first = compose_welcome_message(
        ReplyKind.PULL_REQUEST, "bob", {Contact(id="b"), Contact(id="a")}, [STORAGE, NETWORK], welcome=welcome
    )
    second = compose_welcome_message(
        ReplyKind.PULL_REQUEST, "bob", [Contact(id="a"), Contact(id="b")], [NETWORK, STORAGE], welcome=welcome
    )

    assert first == second


def test_escalation_tiers_follow_owners():
    welcome = WelcomeConfig(escalation_enabled=True, max_escalation_tiers=3)
    tiers = [
        EscalationTier(name="maintainers", handles=("mia", "alice")),
        EscalationTier(name="committers", handles=("cole",)),
    ]

    message = compose_welcome_message(ReplyKind.PULL_REQUEST, "bob", ["alice"], [STORAGE], tiers, welcome)
    lines = message.splitlines()

    assert lines[2] == "and then any of the maintainers: @mia ,"
    assert lines[3] == "and then any of the committers: @cole ,"
    assert lines[4].startswith("if you have any question")


def test_escalation_tiers_limited_and_empty_tiers_skipped():
    welcome = WelcomeConfig(escalation_enabled=True, max_escalation_tiers=2)
    tiers = [
        EscalationTier(name="maintainers", handles=("alice",)),
        EscalationTier(name="committers", handles=("cole",)),
    ]

    message = compose_welcome_message(ReplyKind.PULL_REQUEST, "bob", ["alice"], [], tiers, welcome)

    assert "maintainers" not in message
    assert "committers" not in message

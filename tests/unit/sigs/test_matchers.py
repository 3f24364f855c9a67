from src.sigs.matchers import build_escalation_tiers, owners_for_files, owners_for_repo, sorted_handles
from src.sigs.models import Contact, OwnersFile, Registry
from src.sigs.resolver import resolve_label


def _ids(contacts: set[Contact]) -> set[str]:
    return {c.id for c in contacts}


class TestOwnersForFiles:
    def test_single_file_single_owner(self) -> None:
        registry = Registry.model_validate(
            {
                "sigs": [
                    {
                        "name": "storage",
                        "sig_label": "sig/storage",
                        "files": [{"file": ["a.go"], "owner": [{"gitee_id": "alice"}]}],
                    }
                ]
            }
        )
        group = resolve_label(registry, "sig/storage")

        assert _ids(owners_for_files(group, ["a.go"])) == {"alice"}

    def test_union_across_rules_is_deduplicated(self, registry: Registry) -> None:
        group = resolve_label(registry, "sig/storage")

        owners = owners_for_files(group, ["a.go"])

        assert _ids(owners) == {"alice", "carol"}
        assert len(owners) == 2

    def test_idempotent(self, registry: Registry) -> None:
        group = resolve_label(registry, "sig/storage")
        files = ["a.go", "pkg/disk.go", "unowned.go"]

        assert owners_for_files(group, files) == owners_for_files(group, files)
        assert sorted_handles(owners_for_files(group, files)) == ["alice", "carol"]

    def test_exact_path_match_only(self, registry: Registry) -> None:
        group = resolve_label(registry, "sig/storage")

        assert owners_for_files(group, ["pkg/disk.go.bak", "pkg", "./a.go"]) == set()

    def test_no_group_means_no_owners(self) -> None:
        assert owners_for_files(None, ["a.go"]) == set()

    def test_files_of_other_groups_ignored(self, registry: Registry) -> None:
        group = resolve_label(registry, "sig/storage")

        assert owners_for_files(group, ["net/conn.go"]) == set()


class TestOwnersForRepo:
    def test_matches_repo_name(self, registry: Registry) -> None:
        group = resolve_label(registry, "sig/storage")

        assert _ids(owners_for_repo([group], "storage-engine")) == {"dave"}

    def test_union_across_groups(self, registry: Registry) -> None:
        assert _ids(owners_for_repo(registry.groups, "community")) == {"dave", "frank"}

    def test_no_groups(self) -> None:
        assert owners_for_repo([], "community") == set()

    def test_unknown_repo(self, registry: Registry) -> None:
        assert owners_for_repo(registry.groups, "elsewhere") == set()


class TestEscalationTiers:
    def test_tiers_are_ordered_and_disjoint(self) -> None:
        owners = {Contact(id="alice"), Contact(id="bob")}
        owners_files = [
            OwnersFile(maintainers=("bob", "mia", "max"), committers=("mia", "cole")),
            OwnersFile(maintainers=("@zed",), committers=("cole", "alice")),
        ]

        tiers = build_escalation_tiers(owners, owners_files)

        assert [t.name for t in tiers] == ["owners", "maintainers", "committers"]
        assert tiers[0].handles == ("alice", "bob")
        assert tiers[1].handles == ("max", "mia", "zed")
        assert tiers[2].handles == ("cole",)

    def test_without_owners_files(self) -> None:
        tiers = build_escalation_tiers({Contact(id="alice")}, [])

        assert tiers[0].handles == ("alice",)
        assert tiers[1].handles == ()
        assert tiers[2].handles == ()

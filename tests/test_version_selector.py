"""Tests for modpack.services.version_selector."""

from conftest import make_version

from modpack.services.version_selector import VersionSelector


class TestSelect:
    def setup_method(self):
        self.selector = VersionSelector()

    def test_orders_newest_first_within_group(self):
        old = make_version("old", days=1)
        new = make_version("new", days=5)
        mid = make_version("mid", days=3)

        result = self.selector.select([old, new, mid], ["fabric"], ["1.20.1"])

        assert [v.id for v in result] == ["new", "mid", "old"]

    def test_loader_preference_beats_date(self):
        quilt = make_version("quilt", loaders=["quilt"], days=10)
        fabric = make_version("fabric", loaders=["fabric"], days=1)

        result = self.selector.select([quilt, fabric], ["fabric", "quilt"], ["1.20.1"])

        assert [v.id for v in result] == ["fabric", "quilt"]

    def test_game_version_preference_within_loader(self):
        a = make_version("a", game_versions=["1.20"], days=9)
        b = make_version("b", game_versions=["1.20.1"], days=1)

        result = self.selector.select([a, b], ["fabric"], ["1.20.1", "1.20"])

        assert [v.id for v in result] == ["b", "a"]

    def test_version_matching_several_pairs_appears_once(self):
        both = make_version(
            "both", loaders=["fabric", "quilt"], game_versions=["1.20", "1.20.1"]
        )

        result = self.selector.select([both], ["fabric", "quilt"], ["1.20.1", "1.20"])

        assert [v.id for v in result] == ["both"]

    def test_drops_versions_matching_no_pair(self):
        forge = make_version("forge", loaders=["forge"])
        old_game = make_version("old", game_versions=["1.19"])
        ok = make_version("ok")

        result = self.selector.select([forge, old_game, ok], ["fabric"], ["1.20.1"])

        assert [v.id for v in result] == ["ok"]

    def test_empty_input(self):
        assert self.selector.select([], ["fabric"], ["1.20.1"]) == []

    def test_no_match_diagnostic_only_before_first_match(self, log_messages):
        version = make_version("v", game_versions=["1.20"])

        result = self.selector.select([version], ["fabric"], ["1.20.1", "1.20", "1.19"], "Sodium")

        assert [v.id for v in result] == ["v"]
        diagnostics = [m for m in log_messages if "Sodium" in m]
        assert len(diagnostics) == 1
        assert "1.20.1" in diagnostics[0]

    def test_result_never_contains_non_matching_or_duplicates(self):
        versions = [
            make_version(f"v{i}", loaders=[loader], game_versions=[game], days=i)
            for i, (loader, game) in enumerate(
                [
                    ("fabric", "1.20.1"),
                    ("quilt", "1.20.1"),
                    ("forge", "1.20.1"),
                    ("fabric", "1.19"),
                    ("quilt", "1.20"),
                    ("fabric", "1.20"),
                ]
            )
        ]
        loaders = ["fabric", "quilt"]
        game_versions = ["1.20.1", "1.20"]

        result = self.selector.select(versions, loaders, game_versions)

        ids = [v.id for v in result]
        assert len(ids) == len(set(ids))
        assert all(
            any(v.matches(loader, game) for loader in loaders for game in game_versions)
            for v in result
        )
        assert ids == ["v0", "v5", "v1", "v4"]

"""Unit tests for syncer.filters module."""

from ramws.syncer.filters import FilterRule, FilterRules


class TestFilterRuleMatching:
    """Test cases for individual pattern semantics."""

    def test_unanchored_pattern_matches_at_any_depth(self):
        rule = FilterRule.compile("node_modules", include=False)

        assert rule.matches("node_modules", is_dir=True)
        assert rule.matches("web/node_modules", is_dir=True)
        assert not rule.matches("node_modules_backup", is_dir=True)

    def test_anchored_pattern_only_matches_at_root(self):
        rule = FilterRule.compile("/build", include=False)

        assert rule.matches("build", is_dir=True)
        assert not rule.matches("src/build", is_dir=True)

    def test_single_star_does_not_cross_slash(self):
        rule = FilterRule.compile("/*.txt", include=False)

        assert rule.matches("notes.txt", is_dir=False)
        assert not rule.matches("docs/notes.txt", is_dir=False)

    def test_double_star_crosses_slash(self):
        """'.git/**' covers everything below .git but not .git itself."""
        rule = FilterRule.compile(".git/**", include=False)

        assert rule.matches(".git/HEAD", is_dir=False)
        assert rule.matches(".git/objects/ab/cdef", is_dir=False)
        assert not rule.matches(".git", is_dir=True)

    def test_trailing_slash_matches_directories_only(self):
        rule = FilterRule.compile("out/", include=False)

        assert rule.matches("out", is_dir=True)
        assert not rule.matches("out", is_dir=False)

    def test_triple_star_matches_directory_and_contents(self):
        rule = FilterRule.compile("keep/***", include=True)

        assert rule.matches("keep", is_dir=True)
        assert rule.matches("keep/a/b.txt", is_dir=False)
        assert not rule.matches("keeper", is_dir=True)

    def test_question_mark_and_character_class(self):
        assert FilterRule.compile("file?.log", include=False).matches("file1.log", is_dir=False)
        assert not FilterRule.compile("file?.log", include=False).matches("file12.log", is_dir=False)
        assert FilterRule.compile("*.[oa]", include=False).matches("lib/x.a", is_dir=False)
        assert not FilterRule.compile("*.[!oa]", include=False).matches("x.o", is_dir=False)


class TestFilterRules:
    """Test cases for ordered rule evaluation."""

    def test_no_rules_includes_everything(self):
        assert FilterRules().is_included("anything/at/all", is_dir=False)

    def test_include_wins_over_later_exclude(self):
        """Includes are evaluated before excludes; first match wins."""
        rules = FilterRules(include=["build/keep.txt"], exclude=["build/**"])

        assert rules.is_included("build/keep.txt", is_dir=False)
        assert not rules.is_included("build/out.o", is_dir=False)
        assert rules.is_included("build", is_dir=True)

    def test_default_excludes(self):
        rules = FilterRules(exclude=[".git/**", "build/**", "target/**", "node_modules/**"])

        assert not rules.is_included(".git/config", is_dir=False)
        assert not rules.is_included("web/node_modules/react/index.js", is_dir=False)
        assert rules.is_included("src/main.rs", is_dir=False)

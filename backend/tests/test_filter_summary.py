"""Tests for filter → readable condition text."""
from entity_graph.graph.filter_summary import describe_filter, get_human_summary


class TestDescribeFilter:
    def test_single_clause(self):
        clause = {"test": "is_family", "subject": "other", "value": "player"}
        assert describe_filter(clause) == "other is family player"

    def test_default_subject(self):
        assert describe_filter({"test": "has_target"}) == "self has target"

    def test_negated_operator(self):
        clause = {"test": "is_family", "subject": "other", "operator": "!=", "value": "player"}
        assert describe_filter(clause) == "other is family not player"

    def test_comparison_operator(self):
        clause = {"test": "actor_health", "operator": "<", "value": 5}
        assert describe_filter(clause) == "self actor health less than 5"

    def test_bool_values(self):
        assert describe_filter({"test": "is_baby", "value": True}) == "self is baby"
        assert describe_filter({"test": "is_baby", "value": False}) == "self is baby is false"
        assert describe_filter({"test": "is_baby", "operator": "!=", "value": True}) == "self is baby is false"

    def test_all_of_and_any_of(self):
        all_of = {"all_of": [{"test": "is_baby"}, {"test": "on_ground"}]}
        any_of = {"any_of": [{"test": "is_baby"}, {"test": "on_ground"}]}
        assert describe_filter(all_of) == "(self is baby and self on ground)"
        assert describe_filter(any_of) == "(self is baby or self on ground)"

    def test_single_member_set_not_wrapped(self):
        assert describe_filter({"all_of": [{"test": "is_baby"}]}) == "self is baby"

    def test_none_of(self):
        assert describe_filter({"none_of": [{"test": "is_baby"}]}) == "not (self is baby)"

    def test_list_is_conjunction(self):
        assert describe_filter([{"test": "a"}, {"test": "b"}]) == "(self a and self b)"

    def test_unrecognised(self):
        assert describe_filter(None) is None
        assert describe_filter({"weird": 1}) is None
        assert describe_filter({"test": ""}) is None


class TestGetHumanSummary:
    def test_wraps_text(self):
        assert get_human_summary({"test": "is_baby", "value": True}) == "when self is baby,"

    def test_empty_for_missing_filter(self):
        assert get_human_summary(None) == ""
        assert get_human_summary({}) == ""

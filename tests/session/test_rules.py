"""Tests for exploration rule evaluation and formatting."""

import pytest

from rabbithole.session import ExplorationRule, active_rules, evaluate_trigger, format_rules_text


class TestEvaluateTrigger:
    """Tests for trigger conditions over the step number."""

    @pytest.mark.parametrize(
        "condition,step,expected",
        [
            ("step > 10", 11, True),
            ("step > 10", 10, False),
            ("step >= 20", 20, True),
            ("step % 5 == 0", 10, True),
            ("step % 5 == 0", 11, False),
            ("step % 3 === 1", 4, True),
            ("step != 4", 4, False),
            ("step >= 20 && step % 2 == 0", 22, True),
            ("step >= 20 && step % 2 == 0", 21, False),
            ("step < 3 || step > 10", 12, True),
            ("step < 3 || step > 10", 5, False),
        ],
    )
    def test_conditions(self, condition, step, expected):
        assert evaluate_trigger(condition, step) is expected

    @pytest.mark.parametrize("condition", [None, "", "   "])
    def test_missing_condition_is_active(self, condition):
        assert evaluate_trigger(condition, 1) is True

    @pytest.mark.parametrize(
        "condition",
        ["mood == happy", "step % 0 == 0", "__import__('os').system('ls')", "step > 3 && weather"],
    )
    def test_unparseable_condition_is_active(self, condition):
        assert evaluate_trigger(condition, 1) is True


@pytest.fixture
def rules():
    return [
        ExplorationRule(rule_text="Cite sources", rule_type="constraint", priority=1),
        ExplorationRule(rule_text="Use plain words", rule_type="style", priority=5),
        ExplorationRule(rule_text="Stay on topic", rule_type="constraint", priority=3),
        ExplorationRule(rule_text="Retired rule", rule_type="style", priority=9, is_active=False),
        ExplorationRule(rule_text="Dig into sources", rule_type="method", scope="grounding"),
        ExplorationRule(rule_text="Zoom out", rule_type="method", trigger_condition="step > 10"),
    ]


class TestActiveRules:
    """Tests for rule selection."""

    def test_filters_and_sorts(self, rules):
        selected = active_rules(rules, "exploration", 2)
        assert [r.rule_text for r in selected] == ["Use plain words", "Stay on topic", "Cite sources"]

    def test_scope_and_trigger(self, rules):
        selected = active_rules(rules, "grounding", 11)
        texts = {r.rule_text for r in selected}
        assert "Dig into sources" in texts
        assert "Zoom out" in texts
        assert "Retired rule" not in texts


class TestFormatRulesText:
    """Tests for prompt rendering."""

    def test_grouped_by_type(self, rules):
        text = format_rules_text(rules, "exploration", 2)
        assert text == (
            "\n\n=== EXPLORATION RULES ===\n"
            "\nSTYLE RULES:\n"
            "1. Use plain words\n"
            "\nCONSTRAINT RULES:\n"
            "1. Stay on topic\n"
            "2. Cite sources\n"
            "\nThese rules must be followed throughout your response.\n"
        )

    def test_no_active_rules(self):
        inactive = [ExplorationRule(rule_text="Off", is_active=False)]
        assert format_rules_text(inactive, "exploration", 1) == ""

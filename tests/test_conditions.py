"""Tests for the wizard condition language."""

import pytest

from sitegen.services.conditions import (
    ConditionSyntaxError,
    evaluate_condition,
    is_valid_condition,
    parse_condition,
    tokenize,
)


class TestComparisons:
    def test_and_of_two_comparisons(self):
        assert evaluate_condition("a == 'x' && b > 2", {"a": "x", "b": 3}) is True

    def test_and_fails_when_one_side_fails(self):
        assert evaluate_condition("a == 'x' && b > 2", {"a": "y", "b": 3}) is False

    def test_double_quoted_strings(self):
        assert evaluate_condition('plan == "pro"', {"plan": "pro"}) is True

    def test_not_equal(self):
        assert evaluate_condition("plan != 'free'", {"plan": "pro"}) is True

    def test_numeric_string_coerced_against_number(self):
        assert evaluate_condition("age >= 18", {"age": "21"}) is True
        assert evaluate_condition("age < 18", {"age": "21"}) is False

    def test_loose_equality_across_types(self):
        assert evaluate_condition("count == 5", {"count": "5"}) is True

    def test_negative_and_decimal_literals(self):
        assert evaluate_condition("delta > -1.5", {"delta": -1}) is True

    def test_missing_reference_is_empty_string(self):
        assert evaluate_condition("missing == ''", {}) is True

    def test_missing_reference_is_not_numeric(self):
        assert evaluate_condition("missing > -1", {}) is False

    def test_dotted_reference(self):
        answers = {"contact": {"email": "a@b.com"}}
        assert evaluate_condition("contact.email == 'a@b.com'", answers) is True

    def test_boolean_literals(self):
        assert evaluate_condition("true", {}) is True
        assert evaluate_condition("false", {}) is False
        assert evaluate_condition("agreed == true", {"agreed": True}) is True


class TestTruthiness:
    def test_bare_reference(self):
        assert evaluate_condition("consent", {"consent": "yes"}) is True
        assert evaluate_condition("consent", {"consent": ""}) is False

    def test_empty_list_is_falsy(self):
        assert evaluate_condition("extras", {"extras": []}) is False
        assert evaluate_condition("extras", {"extras": ["a"]}) is True

    def test_zero_is_falsy(self):
        assert evaluate_condition("n", {"n": 0}) is False


class TestIncludes:
    def test_list_membership(self):
        assert evaluate_condition("tags.includes('b')", {"tags": ["a", "b"]}) is True

    def test_list_membership_is_exact(self):
        assert evaluate_condition("tags.includes('b')", {"tags": ["ab"]}) is False

    def test_substring_containment(self):
        assert evaluate_condition("name.includes('ann')", {"name": "Joanna"}) is True

    def test_combined_with_comparison(self):
        answers = {"goals": ["save", "grow"], "budget": 500}
        assert evaluate_condition("goals.includes('grow') && budget >= 300", answers) is True


class TestLogicalOrder:
    def test_or(self):
        assert evaluate_condition("a == 'x' || b == 'y'", {"a": "z", "b": "y"}) is True

    def test_applied_left_to_right(self):
        # ((a || b) && c), not a || (b && c)
        answers = {"a": True, "b": False, "c": False}
        assert evaluate_condition("a || b && c", answers) is False


class TestMalformed:
    def test_unbalanced_parenthesis_is_false(self):
        assert evaluate_condition("(a == 'x'", {"a": "x"}) is False

    def test_unterminated_string_is_false(self):
        assert evaluate_condition("a == 'x", {"a": "x"}) is False

    def test_dangling_operator_is_false(self):
        assert evaluate_condition("a ==", {"a": ""}) is False

    def test_trailing_tokens_are_false(self):
        assert evaluate_condition("a == 'x' b", {"a": "x"}) is False

    def test_empty_condition_is_false(self):
        assert evaluate_condition("", {}) is False

    def test_code_is_never_executed(self):
        assert evaluate_condition("__import__('os')", {}) is False

    def test_parse_raises_syntax_error(self):
        with pytest.raises(ConditionSyntaxError):
            parse_condition("a == ")

    def test_is_valid_condition(self):
        assert is_valid_condition("a == 'x' && b.includes('y')") is True
        assert is_valid_condition("a == 'x' &&") is False


class TestTokenize:
    def test_includes_splits_reference(self):
        kinds = [t.kind for t in tokenize("tags.includes('a')")]
        assert kinds == ["ref", "includes", "lparen", "str", "rparen"]

    def test_integer_and_float_literals(self):
        values = [t.value for t in tokenize("1 2.5")]
        assert values == [1, 2.5]

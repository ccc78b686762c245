"""Tests for wizard navigation, result matching and scoring."""

from sitegen.models.article import (
    ScoreBand,
    ScoreOutcome,
    WizardBranch,
    WizardConfig,
    WizardField,
    WizardResultRule,
    WizardScoring,
    WizardStep,
)
from sitegen.services.scoring import (
    MODE_COPY,
    completion_score,
    compute_score,
    find_band,
    find_outcome,
    match_result_rules,
    mode_copy,
    next_step_index,
    round_half_up,
    step_is_valid,
    weighted_score,
)


def _required(field_id: str) -> WizardField:
    return WizardField(id=field_id, label=field_id.title(), required=True)


def _steps():
    return [
        WizardStep(id="one", title="One", fields=[_required("a"), _required("b")]),
        WizardStep(id="two", title="Two", fields=[_required("c"), _required("d")]),
    ]


class TestCompletionScore:
    def test_three_of_four_required_answered(self):
        answers = {"a": "x", "b": "y", "c": ["z"], "d": ""}
        assert completion_score(_steps(), answers) == 75

    def test_optional_fields_are_ignored(self):
        steps = [WizardStep(id="s", title="S", fields=[_required("a"), WizardField(id="b", label="B")])]
        assert completion_score(steps, {"a": "x"}) == 100

    def test_no_required_fields_scores_full(self):
        assert completion_score([WizardStep(id="s", title="S")], {}) == 100


class TestWeightedScore:
    def _scoring(self):
        return WizardScoring(
            method="weighted",
            weights={"a": 1, "b": 3},
            value_map={"a": {"yes": 100}, "b": {"no": 0}},
        )

    def test_weighted_average(self):
        assert weighted_score(self._scoring(), {"a": "yes", "b": "no"}) == 25

    def test_camel_case_payload(self):
        scoring = WizardScoring.model_validate(
            {"method": "weighted", "weights": {"a": 1}, "valueMap": {"a": {"hi": 80}}}
        )
        assert weighted_score(scoring, {"a": "hi"}) == 80

    def test_unanswered_field_contributes_nothing(self):
        assert weighted_score(self._scoring(), {"a": "yes"}) == 25

    def test_non_positive_weights_are_skipped(self):
        scoring = WizardScoring(method="weighted", weights={"a": 0, "b": 2}, value_map={"b": {"ok": 50}})
        assert weighted_score(scoring, {"a": "x", "b": "ok"}) == 50

    def test_not_weighted_returns_none(self):
        assert weighted_score(WizardScoring(method="completion", weights={"a": 1}), {}) is None
        assert weighted_score(None, {}) is None

    def test_values_are_clamped(self):
        scoring = WizardScoring(method="weighted", weights={"a": 1})
        assert weighted_score(scoring, {"a": 250}) == 100

    def test_compute_score_prefers_weighted(self):
        config = WizardConfig(steps=_steps(), scoring=self._scoring())
        assert compute_score(config, {"a": "yes", "b": "no"}) == 25

    def test_compute_score_falls_back_to_completion(self):
        config = WizardConfig(steps=_steps())
        assert compute_score(config, {"a": "x", "b": "y", "c": "z"}) == 75


class TestRounding:
    def test_halves_round_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(66.5) == 67

    def test_below_half_rounds_down(self):
        assert round_half_up(33.3333) == 33


class TestNavigation:
    def _branching_steps(self):
        return [
            WizardStep(
                id="start",
                title="Start",
                fields=[_required("kind")],
                branches=[
                    WizardBranch(condition="kind == 'home'", go_to="home"),
                    WizardBranch(condition="kind == 'nowhere'", go_to="missing"),
                ],
            ),
            WizardStep(id="car", title="Car"),
            WizardStep(id="home", title="Home", next_step="start"),
        ]

    def test_first_matching_branch_wins(self):
        assert next_step_index(self._branching_steps(), 0, {"kind": "home"}) == 2

    def test_unknown_go_to_is_ignored(self):
        assert next_step_index(self._branching_steps(), 0, {"kind": "nowhere"}) == 1

    def test_next_step_used_without_branches(self):
        assert next_step_index(self._branching_steps(), 2, {}) == 0

    def test_falls_through_to_following_step(self):
        assert next_step_index(self._branching_steps(), 1, {}) == 2

    def test_last_step_leads_to_results(self):
        steps = [WizardStep(id="only", title="Only")]
        assert next_step_index(steps, 0, {}) == 1

    def test_required_fields_block_advance(self):
        step = self._branching_steps()[0]
        assert step_is_valid(step, {}) is False
        assert step_is_valid(step, {"kind": "car"}) is True


class TestResults:
    def test_matching_rules_in_order(self):
        rules = [
            WizardResultRule(condition="budget > 100", title="Premium", body="..."),
            WizardResultRule(condition="budget <= 100", title="Basic", body="..."),
            WizardResultRule(condition="budget > 50", title="Mid", body="..."),
        ]
        matched = match_result_rules(rules, {"budget": "120"})
        assert [r.title for r in matched] == ["Premium", "Mid"]

    def test_band_and_outcome_lookup(self):
        scoring = WizardScoring(
            bands=[ScoreBand(min=0, max=49, label="Low"), ScoreBand(min=50, max=100, label="High")],
            outcomes=[ScoreOutcome(min=50, max=100, title="Great", body="Well done")],
        )
        assert find_band(scoring, 75).label == "High"
        assert find_outcome(scoring, 75).title == "Great"
        assert find_outcome(scoring, 10) is None

    def test_mode_copy_falls_back_to_wizard(self):
        assert mode_copy("unknown") == MODE_COPY["wizard"]
        assert mode_copy("quiz").show_score is True

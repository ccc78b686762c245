"""Wizard-family engine: mode copy, branching, result matching and scoring.

The functions here are the server-side reference for what the generated
page does in the browser; :data:`WIZARD_ENGINE_JS` is the client twin and
follows the same rules.
"""

import math
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence

from sitegen.models.article import (
    ScoreBand,
    ScoreOutcome,
    WizardConfig,
    WizardResultRule,
    WizardScoring,
    WizardStep,
)
from sitegen.services.conditions import evaluate_condition, to_number


class ModeCopy(NamedTuple):
    final_step_label: str
    results_title: str
    restart_label: str
    empty_title: str
    empty_body: str
    lead_title: str
    lead_button: str
    show_answer_summary: bool
    show_score: bool


MODE_COPY: Dict[str, ModeCopy] = {
    "wizard": ModeCopy(
        "See Results", "Your Results", "Start Over",
        "No matching results", "Please try different answers.",
        "Get Your Personalized Report", "Get My Results",
        False, False,
    ),
    "configurator": ModeCopy(
        "Review Configuration", "Your Configuration", "Reconfigure",
        "Configuration ready", "Your current selections are shown below.",
        "Send Me This Configuration", "Save Configuration",
        True, False,
    ),
    "quiz": ModeCopy(
        "See Score", "Your Score", "Retake Quiz",
        "Quiz complete", "You completed the quiz. Review your score below.",
        "Email My Quiz Results", "Send Results",
        False, True,
    ),
    "survey": ModeCopy(
        "Submit Survey", "Thanks for sharing", "Submit Another Response",
        "Submission recorded", "Thank you for completing this survey.",
        "Send Me A Copy", "Email My Response",
        True, False,
    ),
    "assessment": ModeCopy(
        "See Assessment", "Assessment Results", "Retake Assessment",
        "Assessment complete", "Review your outcome and recommendations below.",
        "Email My Assessment", "Send Assessment",
        True, True,
    ),
}


def mode_copy(mode: str) -> ModeCopy:
    return MODE_COPY.get(mode, MODE_COPY["wizard"])


# ── Navigation ──────────────────────────────────────────────────────────────

def is_answered(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return True


def step_is_valid(step: WizardStep, answers: Mapping[str, Any]) -> bool:
    """True when every required field on *step* has an answer."""
    return all(is_answered(answers.get(f.id)) for f in step.fields if f.required)


def next_step_index(steps: Sequence[WizardStep], index: int, answers: Mapping[str, Any]) -> int:
    """Index of the step after *index*.

    The first branch whose condition holds wins, then ``next_step``, then the
    following step.  A ``go_to`` naming an unknown step is ignored.  An
    index equal to ``len(steps)`` means the results panel.
    """
    step = steps[index]
    ids = [s.id for s in steps]
    for branch in step.branches:
        if evaluate_condition(branch.condition, answers) and branch.go_to in ids:
            return ids.index(branch.go_to)
    if step.next_step and step.next_step in ids:
        return ids.index(step.next_step)
    return index + 1


def match_result_rules(rules: Sequence[WizardResultRule], answers: Mapping[str, Any]) -> List[WizardResultRule]:
    return [rule for rule in rules if evaluate_condition(rule.condition, answers)]


# ── Scoring ─────────────────────────────────────────────────────────────────

def round_half_up(value: float) -> int:
    """Round like ``Math.round`` in the browser (halves go up, not to even)."""
    return int(math.floor(value + 0.5))


def completion_score(steps: Sequence[WizardStep], answers: Mapping[str, Any]) -> int:
    required = 0
    answered = 0
    for step in steps:
        for field in step.fields:
            if not field.required:
                continue
            required += 1
            if is_answered(answers.get(field.id)):
                answered += 1
    if required == 0:
        return 100
    return round_half_up(answered / required * 100)


def _to_score_value(field_id: str, value, scoring: WizardScoring) -> Optional[float]:
    if value is None:
        return None
    value_map = scoring.value_map.get(field_id)
    if isinstance(value, bool):
        return 100.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        if value_map and value in value_map:
            return float(value_map[value])
        if not value.strip():
            return None
        number = to_number(value)
        return 100.0 if math.isnan(number) else number
    if isinstance(value, (list, tuple)):
        if not value:
            return 0.0
        if value_map:
            hits = [float(value_map[entry]) for entry in value if entry in value_map]
            if hits:
                return sum(hits) / len(hits)
        return 100.0
    return 100.0


def weighted_score(scoring: Optional[WizardScoring], answers: Mapping[str, Any]) -> Optional[int]:
    """Weighted mean of per-field scores, or ``None`` when no weight is usable."""
    if scoring is None or scoring.method != "weighted" or not scoring.weights:
        return None
    total_weight = 0.0
    achieved = 0.0
    for field_id, weight in scoring.weights.items():
        if not math.isfinite(weight) or weight <= 0:
            continue
        total_weight += weight
        value = _to_score_value(field_id, answers.get(field_id), scoring)
        if value is None:
            continue
        achieved += weight * (max(0.0, min(100.0, value)) / 100)
    if total_weight <= 0:
        return None
    return round_half_up(achieved / total_weight * 100)


def compute_score(config: WizardConfig, answers: Mapping[str, Any]) -> int:
    weighted = weighted_score(config.scoring, answers)
    if weighted is not None:
        return weighted
    return completion_score(config.steps, answers)


def _in_range(low: float, high: float, score: float) -> bool:
    if not (math.isfinite(low) and math.isfinite(high)):
        return False
    return low <= score <= high


def find_band(scoring: Optional[WizardScoring], score: float) -> Optional[ScoreBand]:
    if scoring is None:
        return None
    return next((b for b in scoring.bands if _in_range(b.min, b.max, score)), None)


def find_outcome(scoring: Optional[WizardScoring], score: float) -> Optional[ScoreOutcome]:
    if scoring is None:
        return None
    return next((o for o in scoring.outcomes if _in_range(o.min, o.max, score)), None)


# ── Client twin ─────────────────────────────────────────────────────────────

WIZARD_ENGINE_JS = r"""
  function isAnswered(v){
    if(v===undefined||v===null)return false;
    if(typeof v==='string')return v!=='';
    if(Array.isArray(v))return v.length>0;
    return true;
  }
  function stepIsValid(step){
    return step.fields.every(function(f){return !f.required||isAnswered(answers[f.id])});
  }
  function nextStepIndex(idx){
    var step=steps[idx];
    var ids=steps.map(function(s){return s.id});
    var branches=step.branches||[];
    for(var b=0;b<branches.length;b++){
      if(evalCondition(branches[b].condition,answers)&&ids.indexOf(branches[b].goTo)!==-1){
        return ids.indexOf(branches[b].goTo);
      }
    }
    if(step.nextStep&&ids.indexOf(step.nextStep)!==-1)return ids.indexOf(step.nextStep);
    return idx+1;
  }
  function completionScore(){
    var required=0,answered=0;
    steps.forEach(function(step){
      step.fields.forEach(function(f){
        if(!f.required)return;
        required++;
        if(isAnswered(answers[f.id]))answered++;
      });
    });
    return required>0?Math.round(answered/required*100):100;
  }
  function toScoreValue(fieldId,value){
    if(value===undefined||value===null)return null;
    var valueMap=scoring&&scoring.valueMap?scoring.valueMap[fieldId]:null;
    if(typeof value==='boolean')return 100;
    if(typeof value==='number')return value;
    if(typeof value==='string'){
      if(valueMap&&Object.prototype.hasOwnProperty.call(valueMap,value))return Number(valueMap[value]);
      if(value.trim()==='')return null;
      return looksNumeric(value)?Number(value):100;
    }
    if(Array.isArray(value)){
      if(value.length===0)return 0;
      if(valueMap){
        var sum=0,count=0;
        value.forEach(function(entry){
          if(Object.prototype.hasOwnProperty.call(valueMap,entry)){sum+=Number(valueMap[entry]);count++}
        });
        if(count>0)return sum/count;
      }
      return 100;
    }
    return 100;
  }
  function weightedScore(){
    if(!scoring||scoring.method!=='weighted'||!scoring.weights)return null;
    var total=0,achieved=0;
    Object.keys(scoring.weights).forEach(function(fieldId){
      var weight=Number(scoring.weights[fieldId]);
      if(!isFinite(weight)||weight<=0)return;
      total+=weight;
      var value=toScoreValue(fieldId,answers[fieldId]);
      if(value===null)return;
      achieved+=weight*(Math.max(0,Math.min(100,Number(value)))/100);
    });
    if(total<=0)return null;
    return Math.round(achieved/total*100);
  }
  function computeScore(){
    var weighted=weightedScore();
    return weighted!==null?weighted:completionScore();
  }
  function findInRange(list,score){
    if(!Array.isArray(list))return null;
    for(var k=0;k<list.length;k++){
      var lo=Number(list[k].min),hi=Number(list[k].max);
      if(!isFinite(lo)||!isFinite(hi))continue;
      if(score>=lo&&score<=hi)return list[k];
    }
    return null;
  }
"""

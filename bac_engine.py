"""
BAC Engine - central calculation engine for the BAC Index quiz

All scoring and result derivation lives here. The wizard pages, the
result email and the API only consume what this module returns.

The score is a plain sum over the chosen choices; biological age is
physiological age plus that sum.
"""
from typing import Dict, List, Mapping, Optional, Sequence
from dataclasses import dataclass, field

from bac_questions import Question, Choice, get_factor_label, get_tip


# ============================================
# CONSTANTS
# ============================================

MAX_TOP_FACTORS = 3
MAX_RECOMMENDATIONS = 6

# (upper bound of diff, template, emoji) - first bucket whose bound is >= diff wins
SUMMARY_BUCKETS = [
    (-5, "Your biological age is {abs_diff} years lower — excellent!", "💪😊"),
    (0, "Your biological age matches your physiological age — great balance!", "😄👍"),
    (5, "Your biological age is {diff} years higher — minor tweaks can help.", "🙂"),
    (10, "Your biological age is {diff} years higher — improve sleep, diet, and exercise.", "⚠️😕"),
    (20, "Your biological age is {diff} years higher — take proactive steps.", "🚨😟"),
]
SUMMARY_FALLBACK = ("Your biological age is {diff} years higher — consult a professional.", "💀⚡")


# ============================================
# DATA CLASSES
# ============================================

@dataclass
class Summary:
    """Message and emoji pair for a difference bucket"""
    text: str
    emoji: str


@dataclass
class Factor:
    """A positive-scoring answer that pushed the biological age up"""
    label: str
    score: int

    def to_dict(self) -> Dict:
        return {'label': self.label, 'score': self.score}


@dataclass
class BacResult:
    """Derived quiz result - computed on demand, never stored"""
    phys_age: int
    score: int
    top_factors: List[Factor] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    @property
    def bio_age(self) -> int:
        return self.phys_age + self.score

    @property
    def diff(self) -> int:
        # bio_age - phys_age, kept exact for fractional ages
        return self.score

    @property
    def summary(self) -> Summary:
        return get_summary(self.diff)

    def to_payload(self, details: Mapping[str, str]) -> Dict:
        """Flat payload for the result email (same shape as the API body)"""
        return {
            'name': details.get('name', ''),
            'email': details.get('email', ''),
            'phone': details.get('phone', ''),
            'company': details.get('company', ''),
            'designation': details.get('designation', ''),
            'physAge': self.phys_age,
            'score': self.score,
            'bioAge': self.bio_age,
            'diff': self.diff,
            'topFactors': [f.to_dict() for f in self.top_factors],
            'recommendations': list(self.recommendations),
        }


# ============================================
# ANSWER LOOKUP
# ============================================

def get_chosen_choice(question: Question, choice_index) -> Optional[Choice]:
    """Return the chosen choice, or None for missing/out-of-range indices"""
    if choice_index is None or isinstance(choice_index, bool):
        return None
    try:
        idx = int(choice_index)
    except (TypeError, ValueError):
        return None
    if idx < 0 or idx >= len(question.choices):
        return None
    return question.choices[idx]


def iter_answered(questions: Sequence[Question], answers: Mapping[int, int]):
    """Yield (question, choice) for answered questions in question order"""
    for i, question in enumerate(questions):
        choice = get_chosen_choice(question, answers.get(i))
        if choice is not None:
            yield question, choice


# ============================================
# CALCULATIONS
# ============================================

def compute_score(questions: Sequence[Question], answers: Mapping[int, int]) -> int:
    """
    Sum of the chosen choice scores.

    Unanswered questions and out-of-range choice indices contribute 0.
    """
    return sum(choice.score for _, choice in iter_answered(questions, answers))


def get_top_factors(questions: Sequence[Question], answers: Mapping[int, int]) -> List[Factor]:
    """
    Up to three positive-scoring answers, highest score first.

    sorted() is stable, so equal scores keep question order.
    """
    factors = [
        Factor(get_factor_label(question.key, choice), choice.score)
        for question, choice in iter_answered(questions, answers)
        if choice.score > 0
    ]
    return sorted(factors, key=lambda f: f.score, reverse=True)[:MAX_TOP_FACTORS]


def get_recommendations(questions: Sequence[Question], answers: Mapping[int, int]) -> List[str]:
    """First tip per topic key for positive-scoring answers, in question order"""
    seen = set()
    tips = []
    for question, choice in iter_answered(questions, answers):
        tip = get_tip(question.key)
        if choice.score > 0 and tip and question.key not in seen:
            tips.append(tip)
            seen.add(question.key)
    return tips[:MAX_RECOMMENDATIONS]


def get_summary(diff: int) -> Summary:
    """Bucket the age difference into one of six messages"""
    for upper, template, emoji in SUMMARY_BUCKETS:
        if diff <= upper:
            return Summary(template.format(diff=diff, abs_diff=abs(diff)), emoji)
    template, emoji = SUMMARY_FALLBACK
    return Summary(template.format(diff=diff, abs_diff=abs(diff)), emoji)


def calculate_bmi(weight_kg: float, height_cm: float) -> float:
    """BMI rounded to one decimal (0 when height is missing)"""
    height_m = (height_cm or 0) / 100
    if not height_m:
        return 0.0
    return round(weight_kg / (height_m * height_m), 1)


def calculate_progress(current: int, answers: Mapping[int, int], total: int) -> int:
    """Percent of the quiz reached, counting the current question if answered"""
    if not total:
        return 0
    reached = current + (1 if answers.get(current) is not None else 0)
    return int(reached * 100 / total + 0.5)


def build_result(questions: Sequence[Question], answers: Mapping[int, int],
                 phys_age: int) -> BacResult:
    """Compute the full result for an answer set"""
    return BacResult(
        phys_age=phys_age,
        score=compute_score(questions, answers),
        top_factors=get_top_factors(questions, answers),
        recommendations=get_recommendations(questions, answers),
    )

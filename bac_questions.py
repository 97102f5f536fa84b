"""
BAC Index questions - 15 lifestyle questions (1 per topic key)

Each question has a topic key that groups it with an illustration,
an optional short factor label and an optional recommendation tip.
Choice scores are added to the physiological age, so positive scores
make the biological age older and negative scores younger.
"""
from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Choice:
    """One answer option for a question"""
    text: str
    score: int


@dataclass(frozen=True)
class Question:
    """Static question record"""
    prompt: str
    key: str
    choices: Tuple[Choice, ...]


def _q(prompt: str, key: str, *choices: Tuple[str, int]) -> Question:
    return Question(prompt, key, tuple(Choice(text, score) for text, score in choices))


DEFAULT_QUESTIONS: Tuple[Question, ...] = (
    _q("How active you are", "activity",
       ("Low", 2), ("Moderate", 1), ("High", 0)),
    _q("How many hrs you sleep", "sleep",
       ("<7", 2), ("7-9", 0), (">9", 2)),
    _q("How frequently do you get up during night", "night_wake",
       ("Don’t get up", 0), ("Once", 1), ("2-3 times", 2), ("More than 3 times", 3)),
    _q("In general, which work behavior you relate most to", "work",
       ("Calm and steady, motivated to achieve goals", 0),
       ("Irritable or anxious, trouble focussing, less motivated", 1),
       ("Out of control, unable to focus", 2)),
    _q("Do you have diabetes", "diabetes",
       ("No", 0), ("Yes", 5), ("Don’t Know", 2)),
    _q("Do you have high blood pressure", "blood_pressure",
       ("No", 0), ("Yes", 5), ("Don’t Know", 2)),
    _q("Do you smoke", "smoke",
       ("Yes", 5), ("No", 0), ("Occasionally", 3)),
    _q("Do you consume alcohol", "alcohol",
       ("Yes", 3), ("No", 0), ("Occasionally", 1)),
    _q("Which dietary pattern you most relate to", "diet",
       ("Strict diet", 0), ("Regulated diet", 1), ("Unregulated diet", 2), ("Irregular", 3)),
    _q("Do you regularly take supplements", "supplements",
       ("Yes", 0), ("No", 0)),
    _q("How often do you exercise", "exercise",
       ("Don’t exercise at all", -3), ("<75 min per week", -2),
       ("75-150 min per week", -1), (">150 min a week", 0)),
    _q("How often do you fall ill", "illness",
       ("Rarely", 0), ("Occasionally", 1), ("Frequently", 2)),
    _q("How energetic you feel throughout the day", "energy",
       ("Very high energy throughout till bed time", 0),
       ("High in spurts (morning / evening), tired otherwise", 1),
       ("Tired throughout the day", 2)),
    _q("Do you feel drowsy even after your regular sleep", "drowsy",
       ("Yes", 3), ("No", 0), ("Sometimes", 1), ("Often", 2)),
    _q("How difficult it is for you to concentrate for more than 15 min on one task", "focus",
       ("Extremely difficult", 2), ("Moderately difficult", 1), ("Not difficult at all", 0)),
)

# Emoji illustration per topic key
ILLUSTRATIONS = {
    'activity': ('🏃', 'Activity'),
    'sleep': ('😴', 'Sleep'),
    'night_wake': ('🌙', 'Night wake'),
    'work': ('🧠', 'Work focus'),
    'diabetes': ('🩸', 'Diabetes'),
    'blood_pressure': ('❤️', 'Blood pressure'),
    'smoke': ('🚭', 'Smoking'),
    'alcohol': ('🍷', 'Alcohol'),
    'diet': ('🥗', 'Diet'),
    'supplements': ('💊', 'Supplements'),
    'exercise': ('🏋️', 'Exercise'),
    'illness': ('🤒', 'Illness'),
    'energy': ('⚡', 'Energy'),
    'drowsy': ('🥱', 'Drowsy'),
    'focus': ('🎯', 'Focus'),
}
DEFAULT_ILLUSTRATION = ('❓', 'Health')

# Factor labels for yes/no risk questions
FACTOR_SHORT_LABELS = {
    'diabetes': 'Diabetes',
    'blood_pressure': 'High blood pressure',
    'smoke': 'Smoking',
    'alcohol': 'Alcohol consumption',
}

RECOMMENDATION_TIPS = {
    'activity': 'Move daily; aim for 150+ minutes/week.',
    'sleep': 'Sleep 7–9 hours on a consistent schedule.',
    'night_wake': 'Avoid late caffeine; keep your room cool and dark.',
    'work': 'Use breaks, breathing, and time-blocking to manage stress.',
    'diabetes': 'Monitor glucose and follow a fiber-rich diet.',
    'blood_pressure': 'Reduce sodium and manage stress.',
    'smoke': 'Quit smoking; seek cessation support.',
    'alcohol': 'Keep alcohol minimal.',
    'diet': 'Eat mostly whole foods; limit processed foods.',
    'exercise': 'Add regular strength & cardio workouts.',
    'energy': 'Prioritize sleep and hydration.',
}


def get_questions() -> Tuple[Question, ...]:
    """Return the static question table"""
    return DEFAULT_QUESTIONS


def get_illustration(key: str) -> Dict[str, str]:
    """Emoji and label for a topic key"""
    emoji, label = ILLUSTRATIONS.get(key, DEFAULT_ILLUSTRATION)
    return {'emoji': emoji, 'label': label}


def get_factor_label(key: str, choice: Choice) -> str:
    """Short label for a risk factor, falling back to the choice text"""
    return FACTOR_SHORT_LABELS.get(key, choice.text)


def get_tip(key: str) -> str:
    """Recommendation tip for a topic key ('' when none)"""
    return RECOMMENDATION_TIPS.get(key, '')

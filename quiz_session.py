"""
Wizard state for the BAC Index quiz.

State lives in a mutable mapping - the Flask session in production,
a plain dict in tests. Only JSON-friendly values are stored, so the
answer set is kept with string keys and converted back to int keys
on read.

Steps:
    1 - contact details
    2 - physical info
    3 - questionnaire
    4 - results
"""
import math
from typing import Dict, MutableMapping, Optional

STEP_DETAILS = 1
STEP_PHYSICAL = 2
STEP_QUIZ = 3
STEP_RESULT = 4

SESSION_KEYS = {
    'step': 'bac_step',
    'details': 'bac_details',
    'physical': 'bac_physical',
    'answers': 'bac_answers',
    'current': 'bac_current',
    'email_status': 'bac_email_status',
}

DETAIL_FIELDS = ('name', 'email', 'phone', 'company', 'designation')
DEFAULT_PHYSICAL = {'phys_age': 30, 'weight_kg': 70, 'height_cm': 170}

EMAIL_SENT = 'Email sent successfully ✅'
EMAIL_FAILED = 'Could not send email ❌'


class QuizStateError(ValueError):
    """Invalid input for the current wizard step"""


# ========================================
# STEP NAVIGATION
# ========================================

def get_step(store: MutableMapping) -> int:
    return int(store.get(SESSION_KEYS['step'], STEP_DETAILS))


def go_to_step(store: MutableMapping, step: int):
    if step not in (STEP_DETAILS, STEP_PHYSICAL, STEP_QUIZ, STEP_RESULT):
        raise QuizStateError(f"Unknown step: {step}")
    store[SESSION_KEYS['step']] = step


def allowed_step(store: MutableMapping, step: int, total: int) -> int:
    """
    Return the furthest step the user may see, at most `step`.

    Physical info and the quiz need contact details; the result page
    needs every question answered.
    """
    if step >= STEP_PHYSICAL and not has_details(store):
        return STEP_DETAILS
    if step >= STEP_RESULT and not all_answered(store, total):
        return STEP_QUIZ
    return step


# ========================================
# STEP 1 - CONTACT DETAILS
# ========================================

def get_details(store: MutableMapping) -> Dict[str, str]:
    details = store.get(SESSION_KEYS['details']) or {}
    return {f: details.get(f, '') for f in DETAIL_FIELDS}


def has_details(store: MutableMapping) -> bool:
    details = get_details(store)
    return bool(details['name'] and details['email'])


def save_details(store: MutableMapping, name: str, email: str, phone: str = '',
                 company: str = '', designation: str = '') -> Dict[str, str]:
    """Save contact details and move on to physical info.

    Name and email are required; the step does not advance without them.
    """
    details = {
        'name': (name or '').strip(),
        'email': (email or '').strip(),
        'phone': (phone or '').strip(),
        'company': (company or '').strip(),
        'designation': (designation or '').strip(),
    }
    store[SESSION_KEYS['details']] = details
    if not details['name'] or not details['email']:
        raise QuizStateError('Name and email are required')
    go_to_step(store, STEP_PHYSICAL)
    return details


# ========================================
# STEP 2 - PHYSICAL INFO
# ========================================

def get_physical(store: MutableMapping) -> Dict[str, int]:
    physical = store.get(SESSION_KEYS['physical']) or {}
    return {k: physical.get(k, default) for k, default in DEFAULT_PHYSICAL.items()}


def _to_number(value, default):
    if value is None or value == '':
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise QuizStateError(f"Not a number: {value!r}")
    if not math.isfinite(number):
        raise QuizStateError(f"Not a number: {value!r}")
    return int(number) if number.is_integer() else number


def save_physical(store: MutableMapping, phys_age=None, weight_kg=None,
                  height_cm=None) -> Dict[str, int]:
    physical = {
        'phys_age': _to_number(phys_age, DEFAULT_PHYSICAL['phys_age']),
        'weight_kg': _to_number(weight_kg, DEFAULT_PHYSICAL['weight_kg']),
        'height_cm': _to_number(height_cm, DEFAULT_PHYSICAL['height_cm']),
    }
    store[SESSION_KEYS['physical']] = physical
    return physical


# ========================================
# STEP 3 - QUESTIONNAIRE
# ========================================

def get_answers(store: MutableMapping) -> Dict[int, int]:
    raw = store.get(SESSION_KEYS['answers']) or {}
    return {int(k): int(v) for k, v in raw.items()}


def _save_answers(store: MutableMapping, answers: Dict[int, int]):
    store[SESSION_KEYS['answers']] = {str(k): v for k, v in answers.items()}


def get_current(store: MutableMapping) -> int:
    return int(store.get(SESSION_KEYS['current'], 0))


def _set_current(store: MutableMapping, index: int, total: int):
    store[SESSION_KEYS['current']] = max(0, min(total - 1, index))


def record_answer(store: MutableMapping, choice_index: int, num_choices: int,
                  total: int) -> Dict[int, int]:
    """Store the choice for the current question and advance unless on the last one"""
    try:
        choice_index = int(choice_index)
    except (TypeError, ValueError):
        raise QuizStateError(f"Invalid choice: {choice_index!r}")
    if choice_index < 0 or choice_index >= num_choices:
        raise QuizStateError(f"Choice {choice_index} out of range")

    current = get_current(store)
    answers = get_answers(store)
    answers[current] = choice_index
    _save_answers(store, answers)

    if current < total - 1:
        _set_current(store, current + 1, total)
    return answers


def go_previous(store: MutableMapping, total: int) -> int:
    _set_current(store, get_current(store) - 1, total)
    return get_current(store)


def go_next(store: MutableMapping, total: int) -> int:
    """Move forward; the current question must be answered first"""
    current = get_current(store)
    if current not in get_answers(store):
        raise QuizStateError('Answer the question before moving on')
    _set_current(store, current + 1, total)
    return get_current(store)


def can_finish(store: MutableMapping, total: int) -> bool:
    current = get_current(store)
    return current == total - 1 and current in get_answers(store)


def all_answered(store: MutableMapping, total: int) -> bool:
    answers = get_answers(store)
    return all(i in answers for i in range(total))


# ========================================
# STEP 4 - RESULT
# ========================================

def set_email_status(store: MutableMapping, sent: bool):
    store[SESSION_KEYS['email_status']] = EMAIL_SENT if sent else EMAIL_FAILED


def get_email_status(store: MutableMapping) -> Optional[str]:
    return store.get(SESSION_KEYS['email_status'])


def clear(store: MutableMapping):
    """Forget everything - used by restart"""
    for key in SESSION_KEYS.values():
        store.pop(key, None)

"""
Shared template helper functions for the BAC Index quiz.

These functions are used both in Jinja2 templates (via context processor)
and in Python code (result email) for consistent formatting of the age
difference.
"""

DIFF_COLOR_OLDER = '#c41230'
DIFF_COLOR_YOUNGER = '#008000'


def to_number(value):
    """Coerce a payload value (int, float or numeric string) to a number"""
    if value is None or value == '':
        return 0
    if isinstance(value, (int, float)):
        return value
    number = float(value)
    return int(number) if number.is_integer() else number


def format_diff(diff):
    """Signed difference text: '+7' when older, '-3' / '0' otherwise"""
    diff = to_number(diff)
    return f"+{diff}" if diff > 0 else str(diff)


def get_diff_color(diff):
    """Red when the biological age is older, green otherwise"""
    return DIFF_COLOR_OLDER if to_number(diff) > 0 else DIFF_COLOR_YOUNGER


def get_diff_class(diff):
    """CSS class for the difference on the result page"""
    return 'diff-older' if to_number(diff) > 0 else 'diff-younger'


def get_diff_emoji(diff):
    return '⚠️' if to_number(diff) > 0 else '💪'

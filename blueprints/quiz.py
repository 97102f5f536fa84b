"""
Quiz wizard blueprint - the four BAC Index steps.

Routes:
- /            - redirect to the current step
- /details     - step 1: contact details
- /physical    - step 2: age, weight, height (BMI shown)
- /quiz        - step 3: one question per page
- /result      - step 4: result, top factors, recommendations
- /review      - back to the questionnaire from the result page
- /restart     - clear the session and start over
"""

from flask import Blueprint, render_template, redirect, url_for, session, request, flash

from bac_questions import get_questions, get_illustration
from bac_engine import build_result, calculate_bmi, calculate_progress
from mailjet_integration import send_result_email, EmailDeliveryError
from logging_config import get_logger
import quiz_session as qs

logger = get_logger(__name__)

quiz_bp = Blueprint('quiz', __name__)

STEP_ENDPOINTS = {
    qs.STEP_DETAILS: 'quiz.details',
    qs.STEP_PHYSICAL: 'quiz.physical',
    qs.STEP_QUIZ: 'quiz.question',
    qs.STEP_RESULT: 'quiz.result',
}


def _total():
    return len(get_questions())


def _redirect_to_step(step):
    return redirect(url_for(STEP_ENDPOINTS[step]))


def _guard(step):
    """Redirect when the user has not earned `step` yet, else None"""
    allowed = qs.allowed_step(session, step, _total())
    if allowed != step:
        return _redirect_to_step(allowed)
    return None


@quiz_bp.route('/')
def index():
    """Resume at the step the user was on"""
    step = qs.allowed_step(session, qs.get_step(session), _total())
    return _redirect_to_step(step)


@quiz_bp.route('/details', methods=['GET', 'POST'])
def details():
    """Step 1 - contact details"""
    if request.method == 'POST':
        try:
            qs.save_details(
                session,
                name=request.form.get('name', ''),
                email=request.form.get('email', ''),
                phone=request.form.get('phone', ''),
                company=request.form.get('company', ''),
                designation=request.form.get('designation', ''),
            )
        except qs.QuizStateError as e:
            flash(str(e), 'error')
            return render_template('quiz_details.html', step=qs.STEP_DETAILS,
                                   details=qs.get_details(session)), 400
        return _redirect_to_step(qs.STEP_PHYSICAL)

    qs.go_to_step(session, qs.STEP_DETAILS)
    return render_template('quiz_details.html', step=qs.STEP_DETAILS,
                           details=qs.get_details(session))


@quiz_bp.route('/physical', methods=['GET', 'POST'])
def physical():
    """Step 2 - physical info"""
    redirect_response = _guard(qs.STEP_PHYSICAL)
    if redirect_response:
        return redirect_response

    if request.method == 'POST':
        try:
            qs.save_physical(
                session,
                phys_age=request.form.get('phys_age'),
                weight_kg=request.form.get('weight_kg'),
                height_cm=request.form.get('height_cm'),
            )
        except qs.QuizStateError as e:
            flash(str(e), 'error')
            return _redirect_to_step(qs.STEP_PHYSICAL)

        if request.form.get('action') == 'back':
            qs.go_to_step(session, qs.STEP_DETAILS)
            return _redirect_to_step(qs.STEP_DETAILS)
        qs.go_to_step(session, qs.STEP_QUIZ)
        return _redirect_to_step(qs.STEP_QUIZ)

    qs.go_to_step(session, qs.STEP_PHYSICAL)
    physical_info = qs.get_physical(session)
    return render_template('quiz_physical.html', step=qs.STEP_PHYSICAL,
                           physical=physical_info,
                           bmi=calculate_bmi(physical_info['weight_kg'], physical_info['height_cm']))


@quiz_bp.route('/quiz')
def question():
    """Step 3 - show the current question"""
    redirect_response = _guard(qs.STEP_QUIZ)
    if redirect_response:
        return redirect_response

    qs.go_to_step(session, qs.STEP_QUIZ)
    questions = get_questions()
    total = len(questions)
    current = qs.get_current(session)
    answers = qs.get_answers(session)
    current_q = questions[current]

    return render_template('quiz_question.html',
        step=qs.STEP_QUIZ,
        question=current_q,
        illustration=get_illustration(current_q.key),
        current=current,
        total=total,
        selected=answers.get(current),
        progress=calculate_progress(current, answers, total),
        is_last=current == total - 1,
        can_finish=qs.can_finish(session, total)
    )


@quiz_bp.route('/quiz/answer', methods=['POST'])
def answer():
    """Store the chosen option and move to the next question"""
    redirect_response = _guard(qs.STEP_QUIZ)
    if redirect_response:
        return redirect_response

    questions = get_questions()
    current_q = questions[qs.get_current(session)]
    try:
        qs.record_answer(session, request.form.get('choice'),
                         len(current_q.choices), len(questions))
    except qs.QuizStateError as e:
        flash(str(e), 'error')
    return _redirect_to_step(qs.STEP_QUIZ)


@quiz_bp.route('/quiz/prev', methods=['POST'])
def prev_question():
    qs.go_previous(session, _total())
    return _redirect_to_step(qs.STEP_QUIZ)


@quiz_bp.route('/quiz/next', methods=['POST'])
def next_question():
    try:
        qs.go_next(session, _total())
    except qs.QuizStateError as e:
        flash(str(e), 'error')
    return _redirect_to_step(qs.STEP_QUIZ)


@quiz_bp.route('/quiz/finish', methods=['POST'])
def finish():
    """Compute the result, email it and show step 4"""
    redirect_response = _guard(qs.STEP_QUIZ)
    if redirect_response:
        return redirect_response

    questions = get_questions()
    if not qs.can_finish(session, len(questions)) or not qs.all_answered(session, len(questions)):
        flash('Answer every question before finishing', 'error')
        return _redirect_to_step(qs.STEP_QUIZ)

    result = build_result(questions, qs.get_answers(session),
                          qs.get_physical(session)['phys_age'])
    qs.go_to_step(session, qs.STEP_RESULT)

    try:
        sent = send_result_email(result.to_payload(qs.get_details(session)))
    except EmailDeliveryError:
        logger.exception("Result email could not be sent")
        sent = False
    except Exception:
        logger.exception("Unexpected error while sending result email")
        sent = False
    qs.set_email_status(session, sent)

    return _redirect_to_step(qs.STEP_RESULT)


@quiz_bp.route('/result')
def result():
    """Step 4 - recompute and show the result"""
    redirect_response = _guard(qs.STEP_RESULT)
    if redirect_response:
        return redirect_response

    questions = get_questions()
    bac_result = build_result(questions, qs.get_answers(session),
                              qs.get_physical(session)['phys_age'])
    qs.go_to_step(session, qs.STEP_RESULT)

    return render_template('quiz_result.html',
        step=qs.STEP_RESULT,
        result=bac_result,
        summary=bac_result.summary,
        email_status=qs.get_email_status(session)
    )


@quiz_bp.route('/review', methods=['POST'])
def review():
    """Back to the questionnaire with answers intact"""
    qs.go_to_step(session, qs.STEP_QUIZ)
    return _redirect_to_step(qs.STEP_QUIZ)


@quiz_bp.route('/restart', methods=['POST'])
def restart():
    qs.clear(session)
    return _redirect_to_step(qs.STEP_DETAILS)

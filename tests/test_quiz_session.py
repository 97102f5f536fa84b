"""
Tests for quiz_session.py - wizard state on a plain dict
"""
import pytest

import quiz_session as qs
from quiz_session import QuizStateError, SESSION_KEYS

TOTAL = 15


@pytest.fixture
def store():
    return {}


@pytest.fixture
def store_with_details(store):
    qs.save_details(store, 'Asha Rao', 'asha@example.com')
    return store


class TestDetails:

    def test_save_advances_to_physical(self, store):
        details = qs.save_details(store, ' Asha Rao ', 'asha@example.com', company='Acme')
        assert details['name'] == 'Asha Rao'
        assert details['company'] == 'Acme'
        assert qs.get_step(store) == qs.STEP_PHYSICAL
        assert qs.has_details(store)

    def test_missing_email_rejected(self, store):
        with pytest.raises(QuizStateError):
            qs.save_details(store, 'Asha Rao', '')
        assert qs.get_step(store) == qs.STEP_DETAILS
        # Typed values are kept for the form
        assert qs.get_details(store)['name'] == 'Asha Rao'

    def test_missing_name_rejected(self, store):
        with pytest.raises(QuizStateError):
            qs.save_details(store, '', 'asha@example.com')

    def test_defaults_empty(self, store):
        assert qs.get_details(store) == {
            'name': '', 'email': '', 'phone': '', 'company': '', 'designation': ''
        }


class TestPhysical:

    def test_defaults(self, store):
        assert qs.get_physical(store) == {'phys_age': 30, 'weight_kg': 70, 'height_cm': 170}

    def test_save_parses_form_strings(self, store):
        physical = qs.save_physical(store, '42', '81.5', '180')
        assert physical == {'phys_age': 42, 'weight_kg': 81.5, 'height_cm': 180}

    def test_blank_falls_back_to_default(self, store):
        assert qs.save_physical(store, '', None, '')['phys_age'] == 30

    def test_garbage_rejected(self, store):
        with pytest.raises(QuizStateError):
            qs.save_physical(store, 'forty')

    @pytest.mark.parametrize('value', ['nan', 'inf', '-inf', '1e400'])
    def test_non_finite_rejected(self, store, value):
        with pytest.raises(QuizStateError):
            qs.save_physical(store, value)
        assert SESSION_KEYS['physical'] not in store

    def test_fractional_age_kept(self, store):
        assert qs.save_physical(store, '30.5')['phys_age'] == 30.5


class TestQuestionnaire:

    def test_record_answer_advances(self, store):
        qs.record_answer(store, 1, 3, TOTAL)
        assert qs.get_answers(store) == {0: 1}
        assert qs.get_current(store) == 1

    def test_answers_stored_with_string_keys(self, store):
        qs.record_answer(store, 2, 3, TOTAL)
        assert store[SESSION_KEYS['answers']] == {'0': 2}

    def test_last_question_does_not_advance(self, store):
        store[SESSION_KEYS['current']] = TOTAL - 1
        qs.record_answer(store, 0, 3, TOTAL)
        assert qs.get_current(store) == TOTAL - 1
        assert qs.can_finish(store, TOTAL)

    def test_out_of_range_choice(self, store):
        with pytest.raises(QuizStateError):
            qs.record_answer(store, 3, 3, TOTAL)
        with pytest.raises(QuizStateError):
            qs.record_answer(store, 'a', 3, TOTAL)
        assert qs.get_answers(store) == {}

    def test_next_requires_answer(self, store):
        with pytest.raises(QuizStateError):
            qs.go_next(store, TOTAL)

    def test_prev_clamps_at_zero(self, store):
        assert qs.go_previous(store, TOTAL) == 0

    def test_review_keeps_answers(self, store):
        qs.record_answer(store, 0, 3, TOTAL)
        qs.record_answer(store, 1, 3, TOTAL)
        qs.go_previous(store, TOTAL)
        qs.go_previous(store, TOTAL)
        qs.record_answer(store, 2, 3, TOTAL)
        assert qs.get_answers(store) == {0: 2, 1: 1}
        assert qs.go_next(store, TOTAL) == 2

    def test_can_finish_only_on_last(self, store):
        qs.record_answer(store, 0, 3, TOTAL)
        assert not qs.can_finish(store, TOTAL)


class TestStepGating:

    def test_physical_needs_details(self, store):
        assert qs.allowed_step(store, qs.STEP_PHYSICAL, TOTAL) == qs.STEP_DETAILS

    def test_result_needs_all_answers(self, store_with_details):
        assert qs.allowed_step(store_with_details, qs.STEP_RESULT, TOTAL) == qs.STEP_QUIZ

    def test_result_allowed_when_done(self, store_with_details):
        store_with_details[SESSION_KEYS['answers']] = {str(i): 0 for i in range(TOTAL)}
        assert qs.allowed_step(store_with_details, qs.STEP_RESULT, TOTAL) == qs.STEP_RESULT

    def test_unknown_step(self, store):
        with pytest.raises(QuizStateError):
            qs.go_to_step(store, 5)


class TestEmailStatusAndClear:

    def test_email_status(self, store):
        assert qs.get_email_status(store) is None
        qs.set_email_status(store, True)
        assert qs.get_email_status(store) == qs.EMAIL_SENT
        qs.set_email_status(store, False)
        assert qs.get_email_status(store) == qs.EMAIL_FAILED

    def test_clear(self, store_with_details):
        store_with_details['unrelated'] = 1
        qs.record_answer(store_with_details, 0, 3, TOTAL)
        qs.clear(store_with_details)
        assert store_with_details == {'unrelated': 1}
        assert qs.get_step(store_with_details) == qs.STEP_DETAILS

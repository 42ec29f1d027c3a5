"""
Test Response Selector - ordered response rules

Run with: python3 tests/test_response_selector.py
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from intake.contracts import ConversationSnapshot, TraumaIndicators
from intake.core.question_selector import QuestionSelector, compute_stage
from intake.core.response_selector import ResponseSelector
from intake.core.risk_assessor import RiskLevel
from intake.utils.field_schema import compute_progress
from intake.utils.response_templates import (
    ACKNOWLEDGEMENTS,
    COMPLETION_TEXT,
    DEFAULT_SUPPORTIVE_RESPONSE,
    QUESTION_VARIANTS,
    RESPONSE_TABLE,
    TRANSITION_QUESTIONS,
    ResponseTemplateID,
    render,
)

AGE_TRANSITION = "Thank you Dorothy. How old are you? This helps us provide appropriate support."

FULL = {
    'first_name': 'Dorothy',
    'age': '15',
    'start_day': '14',
    'town_city': 'Camden',
    'incident_narrative': 'Physical contact occurred',
    'have_personal_media': 'No',
    'has_witnesses': 'No',
    'suspect_known': 'unknown',
    'email': 'd@example.com',
}


def make_snapshot(fields, recent=()):
    progress = compute_progress(fields)
    return ConversationSnapshot(
        session_id="test",
        progress=progress,
        stage=compute_stage(progress),
        accumulated=dict(fields),
        recent_questions=tuple(recent),
    )


def select(fields, new_fields=None, intent='general_conversation', text='',
           indicators=None, risk='low', recent=()):
    responder = ResponseSelector(QuestionSelector())
    return responder.select(make_snapshot(fields, recent), new_fields or {}, risk,
                            indicators or TraumaIndicators(), intent, text)


def test_rule_order():
    """Test rules are evaluated in the documented order"""
    assert ResponseSelector.RULE_ORDER == [
        'milestone_transition',
        'incident_probe',
        'narrative_continuation',
        'complex_trauma',
        'minor_alone',
        'next_milestone',
        'risk_fallback',
    ]

    print("✓ Rule order test passed")


def test_milestone_transition():
    """Test completing the name asks for age by name"""
    fields = {'first_name': 'Dorothy'}
    selected = select(fields, fields, 'provide_name', "Hi, I'm Dorothy")
    assert selected.rule == 'milestone_transition'
    assert selected.text == AGE_TRANSITION

    print("✓ Milestone transition test passed")


def test_transition_skipped_when_successor_known():
    """Test no transition when the next milestone is already known"""
    fields = {'first_name': 'Dorothy', 'age': '15'}
    selected = select(fields, {'first_name': 'Dorothy'}, 'provide_name', "Dorothy")
    assert selected.rule == 'next_milestone'
    assert selected.text == QUESTION_VARIANTS['timing'][0]

    print("✓ Transition skip test passed")


def test_recent_transition_falls_through():
    """Test a recently asked transition is not repeated word for word"""
    fields = {'first_name': 'Dorothy'}
    selected = select(fields, fields, 'provide_name', "Dorothy", recent=(AGE_TRANSITION,))
    assert selected.rule == 'next_milestone'
    assert selected.text == render(QUESTION_VARIANTS['age'][1], 'Dorothy')

    print("✓ Recent transition test passed")


def test_incident_probes():
    """Test the probe variant follows what was disclosed"""
    narrative = {'incident_narrative': 'Physical contact occurred'}
    fields = dict(narrative, town_city='Camden')
    selected = select(fields, narrative, 'report_incident', "he grabbed me",
                      TraumaIndicators(has_physical_contact=True, has_perpetrator=True))
    assert selected.rule == 'incident_probe'
    assert selected.text == ACKNOWLEDGEMENTS[ResponseTemplateID.PROBE_PHYSICAL]

    selected = select({'town_city': 'Camden'}, {}, 'incident_narrative', "he said horrible things",
                      TraumaIndicators(has_perpetrator=True))
    assert selected.text == ACKNOWLEDGEMENTS[ResponseTemplateID.PROBE_VERBAL]

    selected = select({'town_city': 'Camden'}, {}, 'report_incident', "a man came up to me",
                      TraumaIndicators(has_incident=True, has_perpetrator=True))
    assert selected.text == ACKNOWLEDGEMENTS[ResponseTemplateID.PROBE_GENERAL]

    print("✓ Incident probe test passed")


def test_probe_needs_location():
    """Test no probe before the location is known"""
    selected = select({}, {}, 'report_incident', "he grabbed me",
                      TraumaIndicators(has_physical_contact=True))
    assert selected.rule == 'next_milestone'
    assert selected.text == QUESTION_VARIANTS['name'][0]

    print("✓ Probe location guard test passed")


def test_narrative_continuation():
    """Test continuation acknowledges then moves to the next unmet question"""
    fields = dict(FULL)
    del fields['has_witnesses']
    del fields['suspect_known']
    del fields['email']

    selected = select(fields, {}, 'continue_incident_narrative', "he said he would find me",
                      TraumaIndicators(has_threat=True, has_perpetrator=True))
    assert selected.rule == 'narrative_continuation'
    expected = (ACKNOWLEDGEMENTS[ResponseTemplateID.CONTINUE_THREATS]
                + " Were there any witnesses to what happened?")
    assert selected.text == expected, selected.text

    print("✓ Narrative continuation test passed")


def test_continuation_asks_evidence_first():
    """Test evidence is asked right after the narrative"""
    fields = {'first_name': 'Dorothy', 'age': '15', 'start_day': '14', 'town_city': 'Camden',
              'incident_narrative': 'I was trapped or prevented from leaving'}
    selected = select(fields, {}, 'continue_incident_narrative', "he hit me",
                      TraumaIndicators(has_physical_contact=True, has_perpetrator=True))
    assert selected.text == (ACKNOWLEDGEMENTS[ResponseTemplateID.CONTINUE_VIOLENCE] + " "
                             + QUESTION_VARIANTS['evidence'][0])

    print("✓ Continuation evidence test passed")


def test_wrapped_question_is_not_repeated():
    """Test a question already asked inside a transition is rephrased"""
    fields = {'first_name': 'Dorothy', 'age': '15'}
    recent = (AGE_TRANSITION, render(TRANSITION_QUESTIONS['timing'], 'Dorothy'))
    selected = select(fields, {}, 'general_conversation', "I don't know", recent=recent)
    assert selected.rule == 'next_milestone'
    assert selected.text == render(QUESTION_VARIANTS['timing'][1], 'Dorothy'), selected.text

    print("✓ Wrapped question test passed")


def test_continuation_rotates_question():
    """Test repeated detail keeps the acknowledgement and changes the question"""
    fields = {'first_name': 'Dorothy', 'age': '15', 'start_day': '14', 'town_city': 'Camden',
              'incident_narrative': 'Physical contact occurred'}
    violence = TraumaIndicators(has_physical_contact=True, has_perpetrator=True)
    ack = ACKNOWLEDGEMENTS[ResponseTemplateID.CONTINUE_VIOLENCE]

    recent = [ack + " " + render(QUESTION_VARIANTS['evidence'][0], 'Dorothy')]
    selected = select(fields, {}, 'continue_incident_narrative', "he hit me", violence, recent=recent)
    assert selected.rule == 'narrative_continuation'
    assert selected.text == ack + " " + render(QUESTION_VARIANTS['evidence'][1], 'Dorothy')

    recent.append(selected.text)
    selected = select(fields, {}, 'continue_incident_narrative', "he kicked me", violence, recent=recent)
    assert selected.rule == 'narrative_continuation'
    assert selected.text == ack + " " + render(QUESTION_VARIANTS['evidence'][2], 'Dorothy')

    print("✓ Continuation rotation test passed")


def test_complex_trauma_acknowledgement():
    """Test stalking gets its own acknowledgement"""
    selected = select({}, {}, 'report_incident', "someone has been following me for weeks",
                      TraumaIndicators(has_complex_trauma=True, has_perpetrator=True))
    assert selected.rule == 'complex_trauma'
    assert selected.text == ACKNOWLEDGEMENTS[ResponseTemplateID.COMPLEX_STALKING]

    print("✓ Complex trauma test passed")


def test_minor_alone_forms():
    """Test the minor-alone long form picks disability and wheelchair wording"""
    base = {'age': '15', 'under18': 'Yes', 'vulnerability_context': 'alone',
            'alone_when_incident': 'Yes'}
    indicators = TraumaIndicators(has_vulnerability=True)

    selected = select(base, {}, 'vulnerability_context', "I was alone", indicators)
    assert selected.rule == 'minor_alone'
    assert selected.text == ACKNOWLEDGEMENTS[ResponseTemplateID.MINOR_ALONE]

    disabled = dict(base, disability='Yes', health_issues_details='I have autism')
    selected = select(disabled, {}, 'vulnerability_context', "I have autism", indicators)
    assert selected.text == ACKNOWLEDGEMENTS[ResponseTemplateID.MINOR_ALONE_DISABLED]

    wheelchair = dict(base, disability='Yes',
                      health_issues_details='I use a wheelchair and I was alone')
    selected = select(wheelchair, {}, 'vulnerability_context',
                      "I use a wheelchair and I was alone", indicators)
    assert selected.text == ACKNOWLEDGEMENTS[ResponseTemplateID.MINOR_ALONE_WHEELCHAIR]

    print("✓ Minor alone test passed")


def test_next_milestone_rotation():
    """Test the next question rotates away from recent phrasings"""
    selected = select({})
    assert selected.text == QUESTION_VARIANTS['name'][0]

    selected = select({}, recent=(QUESTION_VARIANTS['name'][0],))
    assert selected.text == QUESTION_VARIANTS['name'][1]

    print("✓ Next milestone rotation test passed")


def test_contact_completion():
    """Test completing the last milestone offers to add more"""
    selected = select(FULL, {'email': 'd@example.com'}, 'provide_contact', "d@example.com")
    assert selected.rule == 'milestone_transition'
    assert selected.text == COMPLETION_TEXT

    print("✓ Contact completion test passed")


def test_risk_fallback():
    """Test the risk table answers once nothing else applies"""
    recent = (COMPLETION_TEXT,)
    selected = select(FULL, {}, 'request_help', "please help", risk=RiskLevel.HIGH, recent=recent)
    assert selected.rule == 'risk_fallback'
    assert selected.text == RESPONSE_TABLE['request_help']['high']

    selected = select(FULL, {}, 'provide_contact', "ok", risk='low', recent=recent)
    assert selected.text == DEFAULT_SUPPORTIVE_RESPONSE

    print("✓ Risk fallback test passed")


def test_question_selector_validated():
    """Test a collaborator without the needed methods is rejected"""
    try:
        ResponseSelector(object())
        assert False, "Should have raised TypeError"
    except TypeError as e:
        assert "first_unmet_milestone" in str(e)

    print("✓ Collaborator validation test passed")


if __name__ == '__main__':
    print("\n" + "="*60)
    print("TESTING RESPONSE SELECTOR")
    print("="*60 + "\n")

    test_rule_order()
    test_milestone_transition()
    test_transition_skipped_when_successor_known()
    test_recent_transition_falls_through()
    test_incident_probes()
    test_probe_needs_location()
    test_narrative_continuation()
    test_continuation_asks_evidence_first()
    test_wrapped_question_is_not_repeated()
    test_continuation_rotates_question()
    test_complex_trauma_acknowledgement()
    test_minor_alone_forms()
    test_next_milestone_rotation()
    test_contact_completion()
    test_risk_fallback()
    test_question_selector_validated()

    print("\n" + "="*60)
    print("ALL RESPONSE SELECTOR TESTS PASSED ✓")
    print("="*60 + "\n")

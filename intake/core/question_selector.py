"""
Question Selector - Stage computation and next-question selection

Responsibilities:
- Compute the conversation stage from milestone progress
- Return the canonical question for the first unmet milestone
- Choose a paraphrase that was not asked recently

Design principles:
- Stateless (reads snapshots, never writes state)
- Stage is a pure function of progress
- Deterministic variant rotation (no randomness)
"""

import logging
from typing import Dict, Optional, Sequence

from intake.contracts import ConversationSnapshot, QuestionOutput
from intake.utils.conversation_stages import ConversationStage
from intake.utils.field_schema import QUESTION_ORDER, Milestone
from intake.utils.response_templates import COMPLETION_TEXT, QUESTION_VARIANTS, render

logger = logging.getLogger(__name__)

# Stage gates in strict order: a stage is current while any of its milestones is unmet.
# Contact is satisfied by either email or phone (see MILESTONE_FIELDS).
STAGE_GATES = [
    (ConversationStage.PERSONAL_INFO, (Milestone.NAME, Milestone.AGE)),
    (ConversationStage.INCIDENT_DETAILS, (Milestone.TIMING, Milestone.LOCATION, Milestone.NARRATIVE)),
    (ConversationStage.EVIDENCE, (Milestone.EVIDENCE,)),
    (ConversationStage.WITNESSES, (Milestone.WITNESSES,)),
    (ConversationStage.SUSPECT, (Milestone.SUSPECT,)),
    (ConversationStage.CONTACT, (Milestone.CONTACT,)),
]

# Stage each question milestone belongs to
MILESTONE_STAGE: Dict[str, str] = {
    milestone.value: stage.value
    for stage, milestones in STAGE_GATES
    for milestone in milestones
}


def was_asked(question: str, recent_questions: Sequence[str]) -> bool:
    """
    Check whether a question appeared in any recent response

    Responses often wrap a question in an acknowledgement, so containment
    counts, not only equality.

    Examples:
        >>> was_asked("Where did this happen?", ["Thank you. Where did this happen?"])
        True
    """
    return any(question in asked for asked in recent_questions)


def compute_stage(progress: Dict[str, bool]) -> str:
    """
    Compute the conversation stage from milestone progress

    Args:
        progress: Milestone value -> satisfied flag

    Returns:
        Stage value. 'introduction' while nothing at all is known,
        otherwise the first stage with an unmet gate, else 'complete'.

    Examples:
        >>> compute_stage({})
        'introduction'
        >>> compute_stage({'name': True})
        'personal_info'
    """
    if not any(progress.values()):
        return ConversationStage.INTRODUCTION.value
    for stage, milestones in STAGE_GATES:
        if not all(progress.get(m.value, False) for m in milestones):
            return stage.value
    return ConversationStage.COMPLETE.value


class QuestionSelector:
    """
    Selects the next question for a session.

    Usage:
        selector = QuestionSelector()
        question = selector.get_next_question(snapshot)
    """

    def __init__(self, variants: Optional[Dict[str, Sequence[str]]] = None):
        """
        Args:
            variants: Milestone -> paraphrases (index 0 canonical).
                      Defaults to QUESTION_VARIANTS.
        """
        self.variants = variants or QUESTION_VARIANTS
        missing = [m.value for m in QUESTION_ORDER if not self.variants.get(m.value)]
        if missing:
            raise ValueError(f"No question variants for milestones: {missing}")

    # ========================
    # Public API
    # ========================

    def first_unmet_milestone(self, snapshot: ConversationSnapshot) -> Optional[str]:
        for milestone in QUESTION_ORDER:
            if not snapshot.progress.get(milestone.value, False):
                return milestone.value
        return None

    def get_next_question(self, snapshot: ConversationSnapshot) -> QuestionOutput:
        """
        Canonical question for the first unmet milestone

        Args:
            snapshot: Read-only session state

        Returns:
            QuestionOutput. Once every milestone is met, milestone is None
            and the question offers to add anything else.
        """
        name = snapshot.accumulated.get('first_name')
        milestone = self.first_unmet_milestone(snapshot)
        if milestone is None:
            return QuestionOutput(milestone=None, stage=ConversationStage.COMPLETE.value,
                                  question=COMPLETION_TEXT)
        return QuestionOutput(
            milestone=milestone,
            stage=MILESTONE_STAGE.get(milestone, snapshot.stage),
            question=render(self.variants[milestone][0], name),
        )

    def choose_variant(self, milestone: str, recent_questions: Sequence[str],
                       name: Optional[str] = None) -> str:
        """
        Pick a phrasing of a milestone question that was not asked recently

        Returns the first variant (in registry order) not contained in any
        recent response. If all were asked, returns the one asked
        longest ago.

        Args:
            milestone: Milestone value
            recent_questions: Recent responses, oldest first
            name: Stored first name for personalization

        Returns:
            Rendered question text
        """
        rendered = [render(template, name) for template in self.variants[milestone]]
        recent = list(recent_questions)
        for text in rendered:
            if not was_asked(text, recent):
                return text

        # All variants recent: least recently asked wins
        last_asked = {text: max(i for i, asked in enumerate(recent) if text in asked) for text in rendered}
        choice = min(rendered, key=lambda text: last_asked[text])
        logger.debug(f"All variants for '{milestone}' asked recently, reusing oldest")
        return choice

"""
Conversation stage enum for the intake dialogue flow.

Invariants:
- Exactly one stage is active per session
- Stage is a pure function of milestone progress (see question_selector.compute_stage)
- Stages only move forward: progress flags are never cleared within a session

Design:
- ConversationStage is a string-based enum for JSON serialization
- STAGE_ORDER is the single source of truth for stage ordering
- State Manager validates stage strings against VALID_STAGES
"""

from enum import Enum


class ConversationStage(str, Enum):
    """
    Explicit stage tracking for the intake conversation.

    INTRODUCTION:
        Nothing known yet. First turn of a fresh session.

    PERSONAL_INFO:
        Something has been shared but name or age is still missing.

    INCIDENT_DETAILS:
        Name and age known; timing, location or narrative still missing.

    EVIDENCE / WITNESSES / SUSPECT:
        One question block each, in that order.

    CONTACT:
        Email or phone number still missing.

    COMPLETE:
        Every gate satisfied. Only offers to add more.
    """
    INTRODUCTION = "introduction"
    PERSONAL_INFO = "personal_info"
    INCIDENT_DETAILS = "incident_details"
    EVIDENCE = "evidence"
    WITNESSES = "witnesses"
    SUSPECT = "suspect"
    CONTACT = "contact"
    COMPLETE = "complete"


STAGE_ORDER = [
    ConversationStage.INTRODUCTION,
    ConversationStage.PERSONAL_INFO,
    ConversationStage.INCIDENT_DETAILS,
    ConversationStage.EVIDENCE,
    ConversationStage.WITNESSES,
    ConversationStage.SUSPECT,
    ConversationStage.CONTACT,
    ConversationStage.COMPLETE,
]

# Single source of truth for valid stage strings
VALID_STAGES = {stage.value for stage in ConversationStage}


def stage_index(stage):
    """Position of a stage (enum or string) in STAGE_ORDER"""
    return STAGE_ORDER.index(ConversationStage(stage))

"""
Field Schema - Report field registry and milestone classification

Responsibilities:
- Declare every report field the engine can populate
- Map fields to progress milestones
- Single source of truth for milestone ordering

Design principles:
- Pure functions (no state)
- Simple lookup tables
- Easy to update when the report form evolves
"""

from enum import Enum
from typing import Dict, Optional, Set


class Milestone(str, Enum):
    """Progress milestones tracked per session"""
    NAME = "name"
    AGE = "age"
    TIMING = "timing"
    LOCATION = "location"
    NARRATIVE = "narrative"
    DISABILITY = "disability"
    CONTACT = "contact"
    SUSPECT = "suspect"
    WITNESSES = "witnesses"
    EVIDENCE = "evidence"


# Report fields grouped by form section

PERSONAL_FIELDS = {
    'first_name',
    'surname',
    'age',
    'under18',
    'age_group',
    'dob_day',
    'dob_month',
    'dob_year',
}

CONTACT_FIELDS = {
    'email',
    'phone_number',
    'street',
}

TIMING_FIELDS = {
    'start_day',
    'start_month',
    'start_year',
    'start_time',
}

LOCATION_FIELDS = {
    'town_city',
    'incident_location_detail',
}

INCIDENT_FIELDS = {
    'incident_narrative',
    'trauma_type',
}

VULNERABILITY_FIELDS = {
    'disability',
    'health_issues',
    'health_issues_details',
    'vulnerability_context',
    'alone_when_incident',
}

EVIDENCE_FIELDS = {
    'have_personal_media',
    'third_party_video',
    'suspect_left_items',
}

WITNESS_FIELDS = {
    'has_witnesses',
    'wit_first_name',
}

SUSPECT_FIELDS = {
    'suspect_known',
    'sus_first_name',
    'sus_approx_age',
    'sus_in_vehicle',
    'sus_vehicle_reg',
}

TRANSPORT_FIELDS = {
    'public_transport',
    'transport_card_details',
}

REPORT_FIELDS = (
    PERSONAL_FIELDS |
    CONTACT_FIELDS |
    TIMING_FIELDS |
    LOCATION_FIELDS |
    INCIDENT_FIELDS |
    VULNERABILITY_FIELDS |
    EVIDENCE_FIELDS |
    WITNESS_FIELDS |
    SUSPECT_FIELDS |
    TRANSPORT_FIELDS
)

# A milestone is satisfied when any one of its fields is known.
# start_time alone does not satisfy timing; home address does not satisfy location.
MILESTONE_FIELDS: Dict[Milestone, Set[str]] = {
    Milestone.NAME: {'first_name'},
    Milestone.AGE: {'age'},
    Milestone.TIMING: {'start_day', 'start_month', 'start_year'},
    Milestone.LOCATION: {'town_city', 'incident_location_detail'},
    Milestone.NARRATIVE: {'incident_narrative'},
    Milestone.DISABILITY: {'disability'},
    Milestone.CONTACT: {'email', 'phone_number'},
    Milestone.SUSPECT: set(SUSPECT_FIELDS),
    Milestone.WITNESSES: {'has_witnesses'},
    Milestone.EVIDENCE: {'have_personal_media', 'third_party_video'},
}

# Order in which unmet milestones are asked about
QUESTION_ORDER = [
    Milestone.NAME,
    Milestone.AGE,
    Milestone.TIMING,
    Milestone.LOCATION,
    Milestone.NARRATIVE,
    Milestone.EVIDENCE,
    Milestone.WITNESSES,
    Milestone.SUSPECT,
    Milestone.CONTACT,
]


def is_known_field(field_name: str) -> bool:
    """
    Check if a field belongs to the report schema

    Args:
        field_name: Field name to check

    Returns:
        True if field is a report field
    """
    return field_name in REPORT_FIELDS


def classify_field(field_name: str) -> Optional[str]:
    """
    Return the milestone a field counts towards

    Args:
        field_name: Field name to classify

    Returns:
        Milestone value, or None for fields that count towards no milestone

    Examples:
        >>> classify_field('first_name')
        'name'

        >>> classify_field('start_time')
        None
    """
    for milestone, fields in MILESTONE_FIELDS.items():
        if field_name in fields:
            return milestone.value
    return None


def compute_progress(fields: Dict[str, str]) -> Dict[str, bool]:
    """
    Compute milestone flags from a field mapping

    Args:
        fields: Accumulated report fields

    Returns:
        Milestone value -> satisfied flag, for every milestone
    """
    return {
        milestone.value: any(name in fields for name in milestone_fields)
        for milestone, milestone_fields in MILESTONE_FIELDS.items()
    }

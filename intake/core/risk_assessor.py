"""
Risk Assessor - Deterministic risk level from indicators, intent and fields.

Purpose:
    Collapses the per-turn signals into one of three risk levels that
    control the tone of the fallback response.

Scope:
    This module does NOT:
    - Choose responses
    - Write state
    - Inspect raw conversation history

    This module ONLY:
    - Scores (indicators, intent, fields) with a weighted sum
    - Maps the score onto low / medium / high

Design Constraints:
    - Pure, total, deterministic function
    - Weights and thresholds live together in one frozen constant set
      (RiskWeights); they must be tuned together
    - Never raises for well-formed inputs
    - No logging of field values
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from intake.contracts import TraumaIndicators
from intake.utils.intent_templates import Intent


class RiskLevel(str, Enum):
    """
    Assessed risk for the current turn.

    Values:
        LOW: score below the medium threshold
        MEDIUM: score at or above the medium threshold
        HIGH: score at or above the high threshold
    """
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class RiskWeights:
    """
    Weight table and thresholds for risk scoring.

    Attributes:
        incident .. emotional_distress: Per-indicator weights
        report_incident, request_help: Intent bonuses
        keyword: Added once per distinct high-risk keyword in the fields
        no_contact: Added while neither email nor phone is known
        minor: Added when age is known and below 18
        disability: Added when disability is set
        high_threshold: Score at or above which risk is HIGH
        medium_threshold: Score at or above which risk is MEDIUM
        high_risk_keywords: Keywords searched in the serialized fields
    """
    incident: int = 3
    threat: int = 3
    physical_contact: int = 3
    complex_trauma: int = 4
    urgency: int = 2
    vulnerability: int = 2
    emotional_distress: int = 2
    report_incident: int = 3
    request_help: int = 2
    keyword: int = 2
    no_contact: int = 1
    minor: int = 2
    disability: int = 1
    high_threshold: int = 10
    medium_threshold: int = 5
    high_risk_keywords: Tuple[str, ...] = (
        'hurt', 'kill', 'threat', 'trapped', 'helpless', 'stalk', 'violated',
        'violence', 'force', 'following', 'weapon', 'knife',
    )


DEFAULT_RISK_WEIGHTS = RiskWeights()


def score_risk(indicators: TraumaIndicators, intent: str, fields: Dict[str, str],
               weights: RiskWeights = DEFAULT_RISK_WEIGHTS) -> int:
    """
    Compute the raw additive risk score

    Args:
        indicators: Indicators for this utterance
        intent: Resolved intent
        fields: Accumulated fields including this turn's
        weights: Weight table

    Returns:
        Integer score
    """
    score = 0
    if indicators.has_incident:
        score += weights.incident
    if indicators.has_threat:
        score += weights.threat
    if indicators.has_physical_contact:
        score += weights.physical_contact
    if indicators.has_complex_trauma:
        score += weights.complex_trauma
    if indicators.has_urgency:
        score += weights.urgency
    if indicators.has_vulnerability:
        score += weights.vulnerability
    if indicators.has_emotional_distress:
        score += weights.emotional_distress

    if intent == Intent.REPORT_INCIDENT.value:
        score += weights.report_incident
    elif intent == Intent.REQUEST_HELP.value:
        score += weights.request_help

    serialized = json.dumps(fields, sort_keys=True).lower()
    score += weights.keyword * sum(1 for keyword in weights.high_risk_keywords if keyword in serialized)

    if not fields.get('email') and not fields.get('phone_number'):
        score += weights.no_contact

    age = fields.get('age')
    if age is not None and str(age).isdigit() and int(age) < 18:
        score += weights.minor

    if fields.get('disability') == 'Yes':
        score += weights.disability

    return score


def assess_risk(indicators: TraumaIndicators, intent: str, fields: Dict[str, str],
                weights: RiskWeights = DEFAULT_RISK_WEIGHTS) -> RiskLevel:
    """
    Assess risk level for a turn

    Args:
        indicators: Indicators for this utterance
        intent: Resolved intent
        fields: Accumulated fields including this turn's
        weights: Weight table

    Returns:
        RiskLevel

    Examples:
        >>> assess_risk(TraumaIndicators(), 'general_conversation', {'email': 'a@b.com'})
        <RiskLevel.LOW: 'low'>
    """
    score = score_risk(indicators, intent, fields, weights)
    if score >= weights.high_threshold:
        return RiskLevel.HIGH
    if score >= weights.medium_threshold:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW

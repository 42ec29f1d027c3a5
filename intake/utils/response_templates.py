"""
Response Template Registry

Defines every piece of assistant text the engine can emit.

Template Classification:
- QUESTION_VARIANTS: paraphrases per milestone; index 0 is the canonical
  question returned by the Question Selector
- TRANSITION_QUESTIONS: asked when a milestone has just been completed
- Acknowledgements: incident probes, narrative continuation, complex
  trauma and minor-alone long forms
- RESPONSE_TABLE: risk-tiered fallback keyed by (intent, risk level)

Template Text:
- Placeholders use {name} format
- render() drops the placeholder cleanly when no name is known
"""

from enum import Enum
from typing import Dict, Tuple


class ResponseTemplateID(str, Enum):
    """
    Template identifiers for acknowledgements.

    Naming convention: <RULE>_<VARIANT>
    """
    PROBE_PHYSICAL = "probe_physical"
    PROBE_VERBAL = "probe_verbal"
    PROBE_GENERAL = "probe_general"

    CONTINUE_VIOLENCE = "continue_violence"
    CONTINUE_THREATS = "continue_threats"
    CONTINUE_GENERAL = "continue_general"

    COMPLEX_ENTRAPMENT = "complex_entrapment"
    COMPLEX_STALKING = "complex_stalking"
    COMPLEX_THREATS = "complex_threats"

    MINOR_ALONE = "minor_alone"
    MINOR_ALONE_DISABLED = "minor_alone_disabled"
    MINOR_ALONE_WHEELCHAIR = "minor_alone_wheelchair"


# Milestone -> paraphrases. Five per milestone so that rotation never
# repeats a phrasing inside the recent-question window.
QUESTION_VARIANTS: Dict[str, Tuple[str, ...]] = {
    'name': (
        "Can you tell me your name? What would you like me to call you?",
        "What name would you like me to use for you?",
        "Before we go on, what should I call you?",
        "Could you share your first name with me? It's fine to use a name you're comfortable with.",
        "What's your name? You can just give your first name if you'd prefer.",
    ),
    'age': (
        "Thank you {name}. How old are you? This helps us provide appropriate support.",
        "{name}, could you tell me your age? It helps me make sure you get the right support.",
        "How old are you, {name}? You only need to give a number.",
        "Can I ask how old you are? This helps us point you to the right people.",
        "Would you mind telling me your age, {name}?",
    ),
    'timing': (
        "When did this happen? You can say things like 'yesterday', 'last week', 'this morning', or give me a specific date and time.",
        "Can you remember when this took place? Something like 'last night' or a date is fine.",
        "Do you know roughly when it happened? A day or a time is helpful.",
        "When was this, {name}? It's okay if you only know roughly.",
        "Could you tell me what day this happened, and the time if you remember it?",
    ),
    'location': (
        "Where did this happen? Can you tell me the location or area?",
        "Can you tell me where you were when this happened?",
        "Which area or place did this take place in?",
        "Do you remember where this was, {name}? A street, station or area is fine.",
        "Could you describe the place where it happened?",
    ),
    'narrative': (
        "Can you tell me what happened? What did this person do or say?",
        "Whenever you're ready, can you describe what this person did?",
        "In your own words, what happened? Take as much time as you need.",
        "Could you tell me a bit about what they did or said to you, {name}?",
        "What happened next? Share only what you feel comfortable sharing.",
    ),
    'evidence': (
        "Do you have any photos, videos, or other evidence from the incident?",
        "Did you manage to take any pictures or recordings, or do you know of any CCTV nearby?",
        "Is there anything that could help show this, like photos, videos or cameras in the area?",
        "Do you have any evidence at all, {name}? Photos, messages or footage all count.",
        "Were there any cameras around, or did you record anything on your phone?",
    ),
    'witnesses': (
        "Were there any witnesses to what happened?",
        "Did anyone else see what happened?",
        "Was anyone else around who might have seen this?",
        "Do you know if someone nearby saw what happened, {name}?",
        "Were other people there at the time?",
    ),
    'suspect': (
        "Can you tell me about the person who did this? What did they look like?",
        "Do you know who this person was, or can you describe them?",
        "What can you remember about the person, like their age, clothes or anything they were driving?",
        "Is there anything you remember about them, {name}? Any detail can help.",
        "Had you seen this person before, or were they a stranger?",
    ),
    'contact': (
        "How would you prefer to be contacted about next steps? Email or phone?",
        "What's the best way to reach you, by email or phone?",
        "Could you share an email address or phone number so someone can follow up?",
        "How should we get in touch with you about what happens next, {name}?",
        "Is there an email or phone number you're comfortable sharing?",
    ),
}

COMPLETION_TEXT = "Thank you for sharing all of this information. Is there anything else you'd like to add?"

# Asked right after the predecessor milestone is completed
TRANSITION_QUESTIONS: Dict[str, str] = {
    'age': "Thank you {name}. How old are you? This helps us provide appropriate support.",
    'timing': "Thank you. When did this happen? You can say things like 'yesterday', 'last week', 'this morning', or give me a specific date and time.",
    'location': "Thank you for telling me that. Where did this happen? Can you tell me the location or area?",
    'narrative': "Thank you {name}. Can you tell me what happened? What did this person do or say?",
    'evidence': "Thank you for telling me. Do you have any photos, videos, or other evidence from the incident?",
}

ACKNOWLEDGEMENTS: Dict[ResponseTemplateID, str] = {
    ResponseTemplateID.PROBE_PHYSICAL: (
        "I'm so sorry someone touched you without your consent. You didn't deserve that. "
        "Can you tell me more about what they did?"
    ),
    ResponseTemplateID.PROBE_VERBAL: (
        "That sounds really upsetting, and it wasn't okay for them to speak to you like that. "
        "Can you tell me more about what they said?"
    ),
    ResponseTemplateID.PROBE_GENERAL: (
        "I understand someone approached you. Can you tell me what happened when they came up to you? "
        "What did they do or say?"
    ),
    ResponseTemplateID.CONTINUE_VIOLENCE: (
        "I'm so sorry you were hurt. No one has the right to do that to you."
    ),
    ResponseTemplateID.CONTINUE_THREATS: (
        "Thank you for telling me about the threats. That must have been very frightening."
    ),
    ResponseTemplateID.CONTINUE_GENERAL: (
        "Thank you for telling me more. Every detail helps."
    ),
    ResponseTemplateID.COMPLEX_ENTRAPMENT: (
        "It sounds like you were stopped from leaving, and that must have been really frightening. "
        "You're safe to talk here. Can you tell me more about what this person did?"
    ),
    ResponseTemplateID.COMPLEX_STALKING: (
        "Being followed or watched is really distressing, and you were right to reach out. "
        "Can you tell me more about when you first noticed this person?"
    ),
    ResponseTemplateID.COMPLEX_THREATS: (
        "Being threatened is very serious, and I'm glad you're telling me. "
        "Can you tell me more about what they said they would do?"
    ),
    ResponseTemplateID.MINOR_ALONE: (
        "I understand you're young and were alone when something happened. That must have been "
        "really difficult and scary. Can you tell me what occurred when you were by yourself? "
        "You're being very brave by sharing this."
    ),
    ResponseTemplateID.MINOR_ALONE_DISABLED: (
        "I understand you're young, have a disability, and were alone when something happened. "
        "That must have been really difficult and scary. Can you tell me what occurred when you "
        "were by yourself? You're being very brave by sharing this."
    ),
    ResponseTemplateID.MINOR_ALONE_WHEELCHAIR: (
        "I understand you're young, use a wheelchair, and were alone when something happened. "
        "That must have been really difficult and scary. Can you tell me what occurred when you "
        "were by yourself? You're being very brave by sharing this."
    ),
}

FALLBACK_RESPONSE = "I'm here with you. Please feel free to continue whenever you're ready."

DEFAULT_SUPPORTIVE_RESPONSE = (
    "I'm here to listen and help. Can you tell me more about what you'd like to discuss?"
)

# Risk-tiered fallback: intent -> risk level -> text
RESPONSE_TABLE: Dict[str, Dict[str, str]] = {
    'report_incident': {
        'low': "I understand you're sharing something difficult that happened to you. Let's take this step by step.",
        'medium': "I hear you, and I want to help. This is a safe space.",
        'high': "I'm here to listen and support you. You're not alone in this. Are you currently in a safe place?",
    },
    'request_help': {
        'low': "I'm here to help you. What kind of support do you need right now?",
        'medium': "I want to help you get the support you need. Can you tell me more about what happened to you?",
        'high': "You're reaching out for help, and that's very brave. I'm here to support you. Are you safe right now?",
    },
    'provide_name': {
        'low': "Thank you for sharing that.",
        'medium': "Thank you. I'm here to help you through this.",
        'high': "Thank you for trusting me with that information. How are you feeling right now?",
    },
    'provide_age': {
        'low': "Thank you for sharing that.",
        'medium': "Thank you. That helps me understand how best to support you.",
        'high': "Thank you for trusting me with that information. How are you feeling right now?",
    },
    'provide_timing': {
        'low': "Thank you for that information.",
        'medium': "I understand the timing, thank you.",
        'high': "Thank you for sharing when this occurred. Are you okay to continue?",
    },
    'provide_location': {
        'low': "Thank you. That's helpful to know.",
        'medium': "I understand the location, thank you.",
        'high': "Thank you for that detail. Take your time, there's no rush.",
    },
    'provide_suspect': {
        'low': "Thank you for that information.",
        'medium': "I understand. Thank you for describing them.",
        'high': "Thank you for sharing that. How are you holding up?",
    },
    'general_conversation': {
        'low': "I'm here to listen. What would you like to talk about?",
        'medium': "I'm here to support you. What's on your mind?",
        'high': "I'm here for you. This is a safe space to share what you're going through. You don't have to face this alone.",
    },
}


def render(template: str, name: str = None) -> str:
    """
    Fill the {name} placeholder, or drop it cleanly when no name is known

    Args:
        template: Template text
        name: Stored first name, if any

    Returns:
        Rendered text

    Examples:
        >>> render("Thank you {name}. How old are you?", "Dorothy")
        'Thank you Dorothy. How old are you?'

        >>> render("Thank you {name}. How old are you?")
        'Thank you. How old are you?'
    """
    if '{name}' not in template:
        return template
    if name:
        return template.replace('{name}', name)
    text = template.replace(', {name}', '').replace(' {name}', '').replace('{name}, ', '')
    text = text.replace('{name}', '')
    return text[:1].upper() + text[1:] if text else text

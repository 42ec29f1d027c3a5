"""
Intent Template Registry

Defines the intent vocabulary and the curated example phrases used by the
similarity backends.

Template conventions:
- Lower case, no punctuation beyond apostrophes
- Ages are written with digits ("i'm 15"): the tokenizer maps every digit
  run to one shared number token, so any age matches the same template
- Bare single words are avoided for intents other than timing and general
  conversation, since they would match unrelated replies at similarity 1.0

Intent families:
- NARRATIVE_INTENTS: disclosure of what happened
- PERSONAL_INFO_INTENTS: identity details
- INTENT_MILESTONE: which progress milestone an intent answers
"""

from enum import Enum
from typing import Dict, Tuple


class Intent(str, Enum):
    """Intent labels produced by the classifier"""
    PROVIDE_NAME = "provide_name"
    PROVIDE_AGE = "provide_age"
    PROVIDE_TIMING = "provide_timing"
    PROVIDE_LOCATION = "provide_location"
    INCIDENT_NARRATIVE = "incident_narrative"
    CONTINUE_INCIDENT_NARRATIVE = "continue_incident_narrative"
    VULNERABILITY_CONTEXT = "vulnerability_context"
    PROVIDE_CONTACT = "provide_contact"
    PROVIDE_EVIDENCE = "provide_evidence"
    PROVIDE_WITNESSES = "provide_witnesses"
    PROVIDE_SUSPECT = "provide_suspect"
    PROVIDE_PUBLIC_TRANSPORT = "provide_public_transport"
    REPORT_INCIDENT = "report_incident"
    REQUEST_HELP = "request_help"
    GENERAL_CONVERSATION = "general_conversation"


VALID_INTENTS = {intent.value for intent in Intent}

NARRATIVE_INTENTS = {
    Intent.INCIDENT_NARRATIVE.value,
    Intent.CONTINUE_INCIDENT_NARRATIVE.value,
    Intent.REPORT_INCIDENT.value,
}

PERSONAL_INFO_INTENTS = {
    Intent.PROVIDE_NAME.value,
    Intent.PROVIDE_AGE.value,
}

# Intent -> milestone it answers (intents not listed answer none)
INTENT_MILESTONE: Dict[str, str] = {
    Intent.PROVIDE_NAME.value: 'name',
    Intent.PROVIDE_AGE.value: 'age',
    Intent.PROVIDE_TIMING.value: 'timing',
    Intent.PROVIDE_LOCATION.value: 'location',
    Intent.INCIDENT_NARRATIVE.value: 'narrative',
    Intent.PROVIDE_CONTACT.value: 'contact',
    Intent.PROVIDE_EVIDENCE.value: 'evidence',
    Intent.PROVIDE_WITNESSES.value: 'witnesses',
    Intent.PROVIDE_SUSPECT.value: 'suspect',
}

# Stage -> intent a bare yes/no answers
STAGE_REPLY_INTENT: Dict[str, str] = {
    'evidence': Intent.PROVIDE_EVIDENCE.value,
    'witnesses': Intent.PROVIDE_WITNESSES.value,
    'suspect': Intent.PROVIDE_SUSPECT.value,
}


INTENT_TEMPLATES: Dict[Intent, Tuple[str, ...]] = {
    Intent.PROVIDE_NAME: (
        "my name is", "my first name is", "my name's", "call me", "you can call me",
        "i'm called", "i am called", "this is", "people call me", "my surname is",
        "my last name is", "my full name is",
    ),
    Intent.PROVIDE_AGE: (
        "i'm 15", "i am 15", "i'm 15 years old", "i am 15 years old", "15 years old",
        "my age is 15", "age 15", "i'm aged 15", "i just turned 15", "i'll be 15 soon",
        "i'm a teenager", "i'm a minor", "i'm under 18", "i'm over 18",
        "i was born on 1 1 2010",
    ),
    Intent.PROVIDE_TIMING: (
        "yesterday", "today", "last week", "this morning", "last night",
        "this afternoon", "this evening", "tonight", "a few days ago",
        "a couple of days ago", "last month", "two weeks ago", "2 weeks ago",
        "an hour ago", "10 minutes ago", "3 days ago", "recently", "the other day",
        "earlier today", "earlier this week", "day before yesterday",
        "last monday", "last friday", "on saturday", "at 8pm", "around 14 00",
        "it happened yesterday", "it was last night", "it happened this morning",
    ),
    Intent.PROVIDE_LOCATION: (
        "it happened in", "i was in", "the location was", "near the", "at the station",
        "it occurred at", "i was at", "the incident was at", "this took place in",
        "i was walking in", "i was in the park", "outside the shop", "at the bus stop",
        "on the high street", "near the public toilets", "in the shopping centre",
        "at the train station", "in central london", "it was in town",
    ),
    Intent.INCIDENT_NARRATIVE: (
        "he called me", "she said", "they threatened", "someone approached",
        "a person came up", "he touched me", "she grabbed me", "he pushed me",
        "she pulled me", "he threatened me", "he shouted at me", "she yelled at me",
        "he hit me", "she hit me", "he punched me", "he slapped me", "he kicked me",
        "he came up to me", "a man came up to me", "a woman came up to me",
        "a man approached me", "someone grabbed me", "someone touched me",
        "a man said something", "he called me names", "he was following me",
        "he wouldn't let me leave", "he was shouting at me",
    ),
    Intent.CONTINUE_INCIDENT_NARRATIVE: (
        "and then he", "and then she", "after that he", "after that", "he also",
        "she also", "then he", "then she", "and he", "and she", "he kept",
        "he then", "then they", "and then they", "it got worse", "he didn't stop",
        "he started to", "then he started",
    ),
    Intent.VULNERABILITY_CONTEXT: (
        "i was alone", "by myself", "i was on my own", "in a wheelchair",
        "i have a disability", "i'm disabled", "i have mobility issues",
        "i'm vulnerable", "i couldn't move", "i couldn't fight back",
        "without my mum", "no one was around", "i use a wheelchair",
        "i have a learning difficulty",
    ),
    Intent.PROVIDE_CONTACT: (
        "my email is", "my phone number is", "my contact number is",
        "you can reach me at", "my email address is", "my number is",
        "you can contact me at", "email me at", "call me on", "text me on",
        "contact me by email", "phone me",
    ),
    Intent.PROVIDE_EVIDENCE: (
        "i have photos", "i took a video", "i have evidence", "i have pictures",
        "i recorded it", "i have footage", "there's cctv", "security cameras",
        "surveillance footage", "i took pictures", "there are cameras",
        "i have screenshots", "no photos", "i don't have any evidence",
    ),
    Intent.PROVIDE_WITNESSES: (
        "someone else saw", "there were witnesses", "other people saw",
        "people saw what happened", "someone witnessed it", "people were there",
        "no one saw", "nobody saw it", "there were no witnesses",
        "my friend saw it", "a woman saw it",
    ),
    Intent.PROVIDE_SUSPECT: (
        "i know who did it", "i can describe them", "i don't know who it was",
        "his name is", "her name is", "he was about 30", "she was about 30",
        "he was driving", "the car registration", "i recognise him",
        "i've seen him before", "he was a stranger", "he was tall",
        "he was wearing", "he had a beard", "he looked about 40",
    ),
    Intent.PROVIDE_PUBLIC_TRANSPORT: (
        "i was on the bus", "i was on the train", "i was on public transport",
        "i used my oyster card", "i used my contactless card", "i was on the tube",
        "i was on the tram", "i was travelling by bus", "i was travelling by train",
    ),
    Intent.REPORT_INCIDENT: (
        "i want to report something", "i want to report an incident",
        "something happened to me", "i was attacked", "i was assaulted",
        "i was harassed", "i need to report", "someone hurt me",
        "i was followed", "i want to tell someone what happened",
    ),
    Intent.REQUEST_HELP: (
        "i need help", "can you help me", "please help", "help me",
        "i don't know what to do", "what should i do", "i need support",
        "i need someone to talk to", "i'm not safe", "i need advice",
    ),
    Intent.GENERAL_CONVERSATION: (
        "hi", "hello", "hey", "thank you", "thanks", "okay", "ok",
        "good morning", "how are you", "that's fine", "i understand", "sure",
    ),
}


def iter_templates():
    """Yield (intent value, phrase) pairs in registry order"""
    for intent, phrases in INTENT_TEMPLATES.items():
        for phrase in phrases:
            yield intent.value, phrase

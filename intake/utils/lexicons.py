"""
Lexicons - Word lists shared by the classifier, extractor and scorer

Kept in one place so that name heuristics and sentiment scoring
can be tuned without touching control flow.
"""

# Words that can never be a person's name.
# Covers time words, greetings/affirmations, function words and feelings,
# all of which show up as bare replies or after "i'm".
NAME_STOPWORDS = {
    # time
    'yesterday', 'today', 'tonight', 'tomorrow', 'now', 'morning', 'afternoon',
    'evening', 'night', 'week', 'weekend', 'month', 'year', 'years', 'day', 'days',
    'ago', 'earlier', 'recently', 'last', 'fortnight', 'hour', 'hours', 'minutes',
    'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday',
    # greetings and affirmations
    'hi', 'hello', 'hey', 'yes', 'yeah', 'yep', 'no', 'nope', 'ok', 'okay', 'sure',
    'thanks', 'thank', 'please', 'sorry', 'fine', 'good', 'alright', 'well', 'right',
    'bye', 'maybe', 'dunno', 'hmm', 'um', 'uh',
    # function words
    'a', 'an', 'the', 'and', 'or', 'but', 'so', 'not', 'just', 'really', 'very',
    'in', 'on', 'at', 'to', 'from', 'with', 'by', 'of', 'for', 'near', 'about',
    'here', 'there', 'this', 'that', 'it', 'is', 'was', 'am', 'are', 'be', 'been',
    'i', 'me', 'my', 'you', 'he', 'she', 'they', 'him', 'her', 'them', 'we', 'us',
    'what', 'when', 'where', 'who', 'why', 'how', 'still', 'also', 'too', 'going',
    'trying', 'calling', 'writing', 'looking', 'feeling', 'being', 'having', 'doing',
    'someone', 'somebody', 'something', 'nothing', 'anyone', 'nobody',
    # feelings and states
    'scared', 'afraid', 'frightened', 'terrified', 'worried', 'upset', 'sad',
    'angry', 'anxious', 'nervous', 'alone', 'lost', 'confused', 'hurt', 'safe',
    'unsafe', 'stuck', 'trapped', 'helpless', 'shaking', 'crying', 'tired',
    'disabled', 'young', 'old', 'minor', 'teenager', 'pregnant', 'ill', 'sick',
    'hard', 'difficult', 'unsure', 'embarrassed', 'ashamed', 'shocked',
    'home', 'outside', 'inside', 'help', 'wheelchair', 'student',
}

# Words that start a capture but are never a place
NON_LOCATION_WORDS = {
    'wheelchair', 'pain', 'shock', 'tears', 'trouble', 'danger', 'love', 'bed',
    'control', 'charge', 'front', 'touch', 'contact', 'fact', 'case', 'general',
    'public', 'private', 'person', 'my', 'his', 'her', 'their', 'a', 'an',
    'own', 'way', 'phone', 'holiday', 'lunch', 'break', 'bits', 'two', 'minds',
}

# Filler words stripped from the start of a location capture
LOCATION_FILLERS = (
    'i was in', 'i was at', 'i was near', 'the', 'a', 'an', 'central', 'my', 'our',
)

# Sentiment lexicons. HIGH_INTENSITY_WORDS is disjoint from NEGATIVE_WORDS
# so a token is penalised once.
POSITIVE_WORDS = {
    'good', 'fine', 'okay', 'ok', 'better', 'safe', 'thanks', 'thank', 'happy',
    'calm', 'glad', 'relieved', 'great', 'alright', 'supported', 'helped',
    'grateful', 'comfortable', 'hopeful', 'brave',
}

NEGATIVE_WORDS = {
    'bad', 'scared', 'afraid', 'frightened', 'upset', 'hurt', 'sad', 'angry',
    'worried', 'anxious', 'pain', 'crying', 'cried', 'awful', 'horrible',
    'uncomfortable', 'unsafe', 'nervous', 'shaking', 'panic', 'panicked',
    'embarrassed', 'ashamed', 'confused', 'shocked', 'disgusting',
    'creepy', 'weird', 'grabbed', 'touched', 'pushed', 'hit', 'followed',
}

HIGH_INTENSITY_WORDS = {
    'terrified', 'assaulted', 'threatened', 'trapped', 'helpless', 'powerless',
    'violated', 'stalked', 'abused', 'attacked', 'traumatized', 'traumatised',
    'raped', 'petrified', 'molested',
}

# Bare replies
AFFIRMATIVE_REPLIES = {'yes', 'yeah', 'yep', 'yup', 'i do', 'i have', 'there were', 'correct'}
NEGATIVE_REPLIES = {'no', 'nope', 'nah', "i don't", 'i dont', 'none', 'not really', 'no one', 'nobody'}

# Replies that admit not knowing; they answer no question on their own
UNCERTAIN_REPLIES = {
    "i don't know", 'i dont know', 'i do not know', "don't know", 'dont know',
    'not sure', "i'm not sure", 'im not sure', 'i am not sure', 'no idea', 'i have no idea',
    'dunno', 'i dunno', "i can't remember", 'i cant remember', "i don't remember",
    'i dont remember',
}

# Spelled-out numbers used in relative time phrases
WORD_NUMBERS = {
    'a': 1, 'an': 1, 'one': 1, 'two': 2, 'three': 3, 'four': 4, 'five': 5,
    'six': 6, 'seven': 7, 'eight': 8, 'nine': 9, 'ten': 10, 'eleven': 11,
    'twelve': 12, 'couple of': 2, 'a couple of': 2, 'few': 3, 'a few': 3,
}


def is_name_word(token):
    """
    True if a lower-cased token could be a first name or surname

    Rejects stopwords and present participles ("walking", "going"),
    which follow "i'm" far more often than a name does.
    """
    if token in NAME_STOPWORDS:
        return False
    if len(token) > 4 and token.endswith('ing'):
        return False
    return True

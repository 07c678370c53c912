"""
utils/profanities.py
--------------------
Words rejected in usernames and review comments.
"""

PROFANITIES = (
    "asshole",
    "bastard",
    "bitch",
    "bollocks",
    "bullshit",
    "cunt",
    "fuck",
    "motherfucker",
    "nigger",
    "pussy",
    "shit",
    "slut",
    "twat",
    "wanker",
    "whore",
)


def contains_profanity(text: str) -> bool:
    """True if any listed word occurs anywhere in ``text`` (case-insensitive)."""
    lowered = text.lower()
    return any(word in lowered for word in PROFANITIES)

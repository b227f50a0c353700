# Тексты сообщений бота

from typing import Any, Dict, List

WELCOME_NEW = (
    "Welcome to Mingle! 💕\n\n"
    "Find your perfect match!\n\n"
    "Let's create your profile!\n\n"
    "First, how old are you? (Must be 18+)"
)
ASK_AGE_AGAIN = "Please enter a valid age (18-120):"
ASK_NAME = "Great! What's your name?"
ASK_NAME_AGAIN = "Name can't be empty. What's your name?"
ASK_GENDER = "Nice to meet you! What's your gender?"
ASK_GENDER_AGAIN = "Please tell us your gender:"
ASK_BIO = "Tell us about yourself (bio):"
ASK_BIO_AGAIN = "Bio can't be empty. Tell us about yourself:"
ASK_LOCATION = "Where are you located? (City/Area)"
ASK_LOCATION_AGAIN = "Location can't be empty. Where are you located?"
ASK_LOOKING_FOR = "Who are you looking for?"
PROFILE_CREATED = "✅ Profile created successfully!\n\nYou're all set! Start browsing to find your match! 💕"

REGISTER_FIRST = "Please complete registration first with /start"
NO_PROFILES = "No more profiles to show right now! 😔\n\nCheck back later or adjust your preferences."
NO_MATCHES = "You don't have any matches yet! 💔\n\nKeep swiping to find your match!"
LOADING_NEXT = "Loading next profile..."
SOMETHING_WRONG = "⚠️ Something went wrong, please try again."

ACK_MATCH = "It's a match! 🎉"
ACK_LIKED = "Liked! ❤️"
ACK_PASSED = "Passed ❌"
ACK_ALREADY_SWIPED = "You have already decided on this profile."

SOMEONE = "someone"

LOOKING_FOR_LABELS = {"male": "Men", "female": "Women", "both": "Everyone"}


def welcome_back(name: str) -> str:
    return f"Welcome back, {name}! 💕\n\nWhat would you like to do?"


def own_profile(user: Dict[str, Any]) -> str:
    return (
        "👤 Your Profile:\n\n"
        f"Name: {user['name']}\n"
        f"Age: {user['age']}\n"
        f"Gender: {user['gender']}\n"
        f"Bio: {user.get('bio') or 'Not set'}\n"
        f"Location: {user.get('location') or 'Not set'}"
    )


def candidate_card(profile: Dict[str, Any]) -> str:
    return (
        f"{profile['name']}, {profile['age']}\n"
        f"{profile['gender']}\n"
        f"{profile.get('location') or 'Location not set'}\n\n"
        f"{profile.get('bio') or 'No bio yet'}"
    )


def matches_list(partners: List[Dict[str, Any]], total: int) -> str:
    lines = [f"💕 Your Matches ({total}):", ""]
    lines.extend(f"• {p['name']}, {p['age']}" for p in partners)
    return "\n".join(lines)


def its_a_match(other_name: str) -> str:
    return f"🎉 It's a Match!\n\nYou and {other_name} liked each other!"


def settings_summary(prefs: Dict[str, Any]) -> str:
    looking_for = LOOKING_FOR_LABELS.get(prefs["looking_for_gender"], prefs["looking_for_gender"])
    return (
        "⚙️ Your Settings:\n\n"
        f"Looking for: {looking_for}\n"
        f"Age range: {prefs['min_age']}-{prefs['max_age']}"
    )

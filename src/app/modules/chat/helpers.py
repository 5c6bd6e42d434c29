"""
Keyword-based assistant replies.

Topics are checked in order; the first whose keywords appear in the message
wins. Plans with basic AI support get a short acknowledgement and an upgrade
hint instead.
"""

from app.modules.subscriptions.plans import SubscriptionPlan, get_subscription_features

TITLE_LENGTH = 60

TOPIC_RESPONSES: list[tuple[tuple[str, ...], str]] = [
    (
        ("visa", "permit"),
        "Student visas usually require an offer letter, proof of funds, health insurance and a valid "
        "passport. Book a visa consultation and an advisor will walk you through your country's process.",
    ),
    (
        ("scholarship", "funding", "grant"),
        "We list scholarships from governments and universities worldwide. Global plan members get "
        "automatic scholarship matching based on their profile.",
    ),
    # Generic topic, kept after the specific ones
    (
        ("requirement", "need", "eligib"),
        "To study abroad you typically need: 1) a valid passport, 2) academic transcripts, "
        "3) a language test such as IELTS or TOEFL, 4) proof of funds, 5) a statement of purpose.",
    ),
    (
        ("application", "apply"),
        "The application process: 1) choose universities, 2) prepare documents, 3) write your SOP, "
        "4) submit through the platform, 5) track the status from your dashboard.",
    ),
    (
        ("subscription", "plan", "upgrade", "price"),
        "Plans: Asia ($25) and Europe ($50) unlock 5 applications and full university access for their "
        "region; Global ($100) adds unlimited applications, scholarship matching and premium support.",
    ),
    (
        ("document", "transcript", "passport", "cv"),
        "Upload your documents from your profile: PDF, Word, JPEG or PNG up to 10 MB each. You can "
        "attach them to applications when you submit.",
    ),
]

DEFAULT_RESPONSE = (
    'I understand you\'re asking about "{message}". I can help with university selection, '
    "applications, scholarships and visas. What would you like to know?"
)

BASIC_RESPONSE = (
    'Thank you for your question: "{message}". You are using the basic assistant. '
    "Upgrade to a paid plan for detailed guidance."
)


def generate_reply(message: str, plan: SubscriptionPlan) -> str:
    if get_subscription_features(plan).ai_support == "basic":
        return BASIC_RESPONSE.format(message=message)

    lowered = message.lower()
    for keywords, response in TOPIC_RESPONSES:
        if any(keyword in lowered for keyword in keywords):
            return response
    return DEFAULT_RESPONSE.format(message=message)


def conversation_title(message: str) -> str:
    """First line of the opening message, cut at a word boundary."""
    first_line = message.strip().splitlines()[0] if message.strip() else "New conversation"
    if len(first_line) <= TITLE_LENGTH:
        return first_line
    return first_line[:TITLE_LENGTH].rsplit(" ", 1)[0] + "..."

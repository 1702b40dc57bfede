"""Prompt rendering for insight, ranking, rewrite and Q&A calls.

Every call sends the same grounding directive as its system turn, followed by
one task prompt rendered from domain values. Rendering is pure: no I/O, and
identical inputs produce byte-identical prompts.
"""

from typing import Optional, Sequence
from habitus.models.chat import ChatRole, ChatTurn
from habitus.models.property import Property
from habitus.models.search_context import SearchContext
from habitus.models.user_profile import UserProfile

# Bounds prompt size; candidates beyond this are not shown to the model
MAX_RANKING_CANDIDATES = 10
REWRITE_WORD_LIMIT = 100
DEFAULT_BUDGET_MIN = 0
DEFAULT_BUDGET_MAX = 1_000_000

GROUNDING_DIRECTIVE = """You are DreamHomes OS.
You never invent facts about a home.
You only use data provided in context.
If user asks for facts not provided, you say what you need (HOA, flood zone, etc).
Keep outputs short, decisive, and numbered.
For any claim, reference the input fields (price, beds, days_on_market, flood_risk, etc)."""


def _format_count(value: float) -> str:
    """Render 2.0 as "2" and 2.5 as "2.5"."""
    return str(int(value)) if float(value).is_integer() else str(value)


def build_insight_prompt(property: Property) -> str:
    """User prompt asking for a 2-3 sentence insight on one property."""
    flood_risk = property.flood_risk.value if property.flood_risk else "unknown"
    return f"""Generate a brief insight (2-3 sentences) for this property:
Price: {property.formatted_price}
Location: {property.city}, {property.state}
Beds/Baths: {property.bedrooms}/{_format_count(property.bathrooms)}
Days on Market: {property.days_on_market}
Deal Score: {property.deal_score or 0}
Flood Risk: {flood_risk}

Focus on: Why this could be a deal, what to watch out for, or who this fits."""


def _format_candidate(property: Property) -> str:
    return f"""ID: {property.id}
Price: {property.formatted_price}
Location: {property.city}
Beds: {property.bedrooms}
Deal Score: {property.deal_score or 0}
Days on Market: {property.days_on_market}"""


def _format_profile(user_profile: Optional[UserProfile]) -> str:
    if user_profile is None:
        return "User Profile: not provided (rank on the listing data alone)"

    budget_min = user_profile.budget_min if user_profile.budget_min is not None else DEFAULT_BUDGET_MIN
    budget_max = user_profile.budget_max if user_profile.budget_max is not None else DEFAULT_BUDGET_MAX
    lines = [
        f"User Goal: {user_profile.goal.display_name}",
        f"Timeline: {user_profile.timeline.display_name}",
        f"Budget: ${int(budget_min)} - ${int(budget_max)}",
    ]
    if user_profile.preferred_locations:
        lines.append(f"Preferred Locations: {', '.join(user_profile.preferred_locations)}")
    if user_profile.preferred_property_types:
        types = ", ".join(t.display_name for t in user_profile.preferred_property_types)
        lines.append(f"Preferred Property Types: {types}")
    return "\n".join(lines)


def build_ranking_prompt(properties: Sequence[Property], user_profile: Optional[UserProfile] = None) -> str:
    """
    User prompt asking the model to rank the top 3 candidates.
    
    Only the first MAX_RANKING_CANDIDATES properties, in input order, are rendered.
    """
    candidates_info = "\n---\n".join(
        _format_candidate(p) for p in list(properties)[:MAX_RANKING_CANDIDATES]
    )
    return f"""{_format_profile(user_profile)}

Properties to rank:
{candidates_info}

Rank the top 3 properties. For each:
1. Give 2 reasons why it's good
2. Give 1 risk to consider

Format: ID: [id] | Reasons: [r1, r2] | Risk: [risk]"""


def build_rewrite_prompt(original_message: str, property: Property) -> str:
    """User prompt asking for a professional rewrite of an inquiry message."""
    location = property.address or f"{property.city}, {property.state}"
    return f"""Rewrite this message for a property inquiry:
Original: "{original_message}"
Property: {location}, {property.formatted_price}

Make it clear, professional, and effective. Keep it under {REWRITE_WORD_LIMIT} words.
Also suggest 2 follow-up questions the buyer should ask."""


def build_question_prompt(question: str, context: Optional[SearchContext] = None) -> str:
    """User prompt for free-form Q&A with optional browsing context."""
    context_info = ""
    if context is not None:
        context_info = f"""Context:
- Saved properties: {context.saved_property_count}
- Recent searches: {', '.join(context.recent_searches)}
- Preferred locations: {', '.join(context.preferred_locations)}"""

    prompt = f"""{context_info}

User Question: {question}

Answer concisely and reference specific data when available."""
    return prompt.lstrip()


def with_grounding(prompt: str) -> list[ChatTurn]:
    """Wrap a task prompt with the grounding directive."""
    return [
        ChatTurn(role=ChatRole.SYSTEM, content=GROUNDING_DIRECTIVE),
        ChatTurn(role=ChatRole.USER, content=prompt),
    ]


def build_insight_turns(property: Property) -> list[ChatTurn]:
    return with_grounding(build_insight_prompt(property))


def build_ranking_turns(properties: Sequence[Property], user_profile: Optional[UserProfile] = None) -> list[ChatTurn]:
    return with_grounding(build_ranking_prompt(properties, user_profile))


def build_rewrite_turns(original_message: str, property: Property) -> list[ChatTurn]:
    return with_grounding(build_rewrite_prompt(original_message, property))


def build_question_turns(question: str, context: Optional[SearchContext] = None) -> list[ChatTurn]:
    return with_grounding(build_question_prompt(question, context))

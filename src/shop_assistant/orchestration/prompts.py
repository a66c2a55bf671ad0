"""Prompt texts and fixed user-facing messages of the shopping assistant."""

import re
from typing import Optional, Sequence

from shop_assistant.llm_core.models import Product

CONTEXT_PRODUCT_LIMIT = 5

SYSTEM_PROMPT = """You are a helpful AI shopping assistant. Be friendly, conversational, and PROACTIVE.

KEY BEHAVIORS:
- Understand context and remember previous messages in the conversation
- DO NOT ask for confirmations - just search immediately when user mentions products
- When user mentions ANY product, brand, color, model, or specification, SEARCH IMMEDIATELY
- Provide insights and recommendations, not just lists
- Highlight best value, cheapest options, and key differences
- Be enthusiastic about helping users find great deals

CRITICAL TOOL USAGE:
- ALWAYS use search_products when users mention ANY product, brand, or item
- DO NOT ask "what color?", "what model?", "what storage?" - just search with what they gave you
- If user says "iPhone", search for "iPhone" immediately
- If user says "blue iPhone 14 128GB", search for "iPhone 14 128GB blue" immediately
- Use compare_products to compare multiple products
- Use filter_products to narrow results by price or category
- Use get_product_recommendations for AI-powered personalized suggestions based on conversation context
- NEVER make up product information - always use tools first

PROACTIVE SEARCHING:
- User says "iPhone" -> SEARCH "iPhone" immediately (don't ask which model)
- User says "laptop" -> SEARCH "laptop" immediately (don't ask for budget first)
- User says "14 plus blue 128gb" -> SEARCH "iPhone 14 plus 128gb blue" immediately
- User says "yes" after you asked about specs -> SEARCH with those specs immediately
- NEVER say "I'll search for..." and then NOT search - ALWAYS actually call search_products tool

PRODUCT RECOMMENDATIONS:
- When user asks for recommendations/suggestions ('what should I buy', 'recommend me', 'suggest'), use get_product_recommendations tool
- Provide conversationContext parameter summarizing what they're looking for (e.g., 'budget gaming laptop', 'iPhone for photography')
- Include price range if mentioned in conversation (maxPrice, minPrice)
- Recommend MULTIPLE products (3-5 typically) with detailed explanations for EACH
- Explain WHY each product is recommended based on their needs
- Compare the recommended products and help user decide
- Be specific about features, value, and trade-offs

RESPONSE STYLE:
- Start by acknowledging the request and IMMEDIATELY search
- Provide conversational responses with context
- When recommending products, explain each recommendation in detail
- End with helpful follow-up questions AFTER showing results
- Use markdown for formatting
- Be DECISIVE and PROACTIVE - don't ask for permission to search

MANDATORY: When user mentions products (laptop, iPhone, Mac, etc) or says find/look/need/want/show, IMMEDIATELY use search_products tool WITHOUT asking for confirmation."""

EXTRACTION_SYSTEM_PROMPT = (
    "You are a search term extraction assistant. Extract only the essential product keywords from user queries. "
    "Return ONLY the search term, nothing else."
)

COMPARISON_SYSTEM_PROMPT = """You are an expert product comparison assistant.
Your task is to analyze and compare products objectively, highlighting:
- Price differences and value propositions
- Key features and specifications
- Store reliability and availability
- Best overall recommendation

Be concise, clear, and helpful in your comparisons."""

PROVIDER_LABELS = {"gemini": "Gemini", "openai": "OpenAI"}
TOOLS_EXHAUSTED_MESSAGE = "I've processed your request using the available tools. Please see the results above."
NOTHING_TO_SAY_MESSAGE = "I've processed your request. How can I help you further?"
APOLOGY_MESSAGE = (
    "I'm having trouble processing your request right now. Please try rephrasing your question or check your API key "
    "in settings."
)
TOO_FEW_TO_COMPARE_MESSAGE = "Please provide at least 2 products to compare."

_TERM_STRIP_CHARS = "\"'`.!?"


def format_price(price: float) -> str:
    """Whole-number price with thousands separators, e.g. ``349,990``."""
    return f"{price:,.0f}"


def build_system_prompt(context_products: Sequence[Product] = ()) -> str:
    """The assistant persona, followed by up to five of the user's saved products."""
    if not context_products:
        return SYSTEM_PROMPT
    lines = [f"- {p.name}: {format_price(p.price)} {p.currency}" for p in list(context_products)[:CONTEXT_PRODUCT_LIMIT]]
    return SYSTEM_PROMPT + "\n\nCurrent product context (user's saved products):\n" + "\n".join(lines) + "\n"


def narration_prompt(user_message: str) -> str:
    """Prompt for the model turns that follow tool execution."""
    return (
        "Based on the tool results above, provide a helpful conversational response to the user's original "
        f"question: '{user_message}'. Explain what you found in a friendly, natural way, as if you're a shop "
        "assistant talking to a customer. Be specific about the products or information you discovered."
    )


def extraction_prompt(user_message: str) -> str:
    return f"""Extract the product search term from this user query.
Return ONLY the essential product keywords that should be used for searching, without any extra words, verbs, or filler words.

Examples:
- "Find me a laptop under 50000 HUF" -> "laptop"
- "I need smartphones with good camera" -> "smartphone camera"
- "Show me wireless headphones" -> "wireless headphones"
- "Looking for tablets" -> "tablet"
- "I want to buy an iPhone" -> "iPhone"

User query: "{user_message}"

Extract the search term (only the product keywords, 1-3 words max):"""


def clean_search_term(raw: Optional[str]) -> Optional[str]:
    """First non-empty line of the model's answer without quotes or trailing punctuation.

    Returns None when fewer than two characters remain.
    """
    if not raw:
        return None
    stripped = raw.strip().strip(_TERM_STRIP_CHARS)
    lines = [line for line in re.split(r"\r?\n", stripped) if line.strip()]
    if not lines:
        return None
    term = lines[0].strip().strip(_TERM_STRIP_CHARS).strip()
    return term if len(term) >= 2 else None


def build_comparison_prompt(products: Sequence[Product]) -> str:
    lines = ["Please compare the following products in detail:", ""]
    for index, product in enumerate(products, start=1):
        lines.append(f"Product {index}:")
        lines.append(f"  Name: {product.name}")
        lines.append(f"  Price: {format_price(product.price)} {product.currency}")
        if product.store_name:
            lines.append(f"  Store: {product.store_name}")
        lines.append("")
    lines.extend(
        [
            "Please provide a comprehensive comparison including:",
            "- Price comparison and value analysis",
            "- Feature differences (if descriptions are available)",
            "- Store/availability considerations",
            "- Overall recommendation based on the information provided",
        ]
    )
    return "\n".join(lines)


def missing_credentials_message(provider: str = "gemini") -> str:
    return f"Please configure your {PROVIDER_LABELS.get(provider, provider)} API key in Settings to use the AI assistant."


def missing_credentials_compare_message(provider: str = "gemini") -> str:
    return f"Please configure your {PROVIDER_LABELS.get(provider, provider)} API key in Settings to compare products."


MISSING_CREDENTIALS_MESSAGE = missing_credentials_message()
MISSING_CREDENTIALS_COMPARE_MESSAGE = missing_credentials_compare_message()


def products_found_message(count: int) -> str:
    return f"I found {count} product(s) for you! Here are the results:"


def products_addendum(count: int) -> str:
    return f"\n\nI found {count} product(s) that match your request:"


def fallback_search_message(count: int, term: str) -> str:
    return f"I found {count} product(s) for '{term}'. Here are all the results:"


def finalize_text(text: str, product_count: int) -> str:
    """
    Guarantees a non-empty answer that acknowledges the products found.

    Args:
        text: The model's final text, possibly empty.
        product_count: Number of distinct products accumulated during the run.

    Returns:
        The text to return to the caller.
    """
    if not text or not text.strip():
        return products_found_message(product_count) if product_count else NOTHING_TO_SAY_MESSAGE
    if product_count:
        lowered = text.lower()
        if "found" not in lowered and "product" not in lowered:
            return text + products_addendum(product_count)
    return text

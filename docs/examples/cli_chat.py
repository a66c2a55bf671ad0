import asyncio
import os
import random

from dotenv import load_dotenv

from shop_assistant import (
    AssistantSettings,
    ChatRequest,
    InMemoryProductCatalog,
    Product,
    StaticSearchSource,
    build_orchestrator,
    setup_logging,
)

# Load environment variables
load_dotenv()

DEMO_PRODUCTS = [
    Product(id=1, name="Apple iPhone 15 128GB Black", price=349990, store_name="eMAG", user_id="demo"),
    Product(id=2, name="Apple iPhone 15 Pro 256GB", price=499990, store_name="Media Markt", user_id="demo"),
    Product(id=3, name="Apple iPhone 14 128GB Blue", price=289990, store_name="eMAG"),
    Product(id=4, name="Samsung Galaxy S24 256GB", price=319990, store_name="Alza"),
    Product(id=5, name="Lenovo IdeaPad 5 laptop 16GB", price=279990, store_name="Alza"),
    Product(id=6, name="Sony WH-1000XM5 wireless headphones", price=129990, store_name="Media Markt"),
]


async def main() -> None:
    """
    Chat with the shopping assistant over a small in-memory product list.
    """
    print("Welcome to the Shop Assistant CLI!")

    settings = AssistantSettings.from_env()
    key_name = "OPENAI_API_KEY" if settings.provider == "openai" else "GEMINI_API_KEY"
    api_key = os.getenv(key_name)
    if not api_key:
        print(f"Error: {key_name} not found in environment variables.")
        return

    if os.getenv("SHOP_ASSISTANT_DEBUG"):
        setup_logging()

    orchestrator = build_orchestrator(
        StaticSearchSource(DEMO_PRODUCTS), InMemoryProductCatalog(DEMO_PRODUCTS), settings=settings
    )
    conversation_id = random.randint(1, 1_000_000)
    print(f"Using {settings.provider}.")

    print("\nStart chatting! Type 'exit' or 'quit' to stop.")
    while True:
        user_input = input("\nYou: ").strip()
        if user_input.lower() in ["exit", "quit"]:
            print("Goodbye!")
            break

        if not user_input:
            continue

        request = ChatRequest(
            message=user_input, user_id="demo", credentials=api_key, conversation_id=conversation_id
        )
        response = await orchestrator.respond(request)
        print(f"Assistant: {response.text}")
        for product in response.products:
            print(f"  - [{product.id}] {product.name}: {product.price:,.0f} {product.currency} ({product.store_name})")

    await orchestrator.gateway.aclose()


if __name__ == "__main__":
    asyncio.run(main())

"""The tool-calling conversation loop of the shopping assistant."""

import asyncio
from typing import Any, Dict, List, Optional, Sequence

from shop_assistant.llm_core import (
    AssistantSettings,
    ChatRequest,
    ChatTurn,
    ConversationalResponse,
    LLMGateway,
    Product,
    ToolCall,
    ToolExecutionResult,
    ToolExecutor,
    ToolRegistry,
    dedupe_products,
    get_logger,
    products_from_payload,
)
from shop_assistant.memory import ConversationMemory
from .locks import KeyedLock
from .prompts import (
    APOLOGY_MESSAGE,
    COMPARISON_SYSTEM_PROMPT,
    EXTRACTION_SYSTEM_PROMPT,
    TOO_FEW_TO_COMPARE_MESSAGE,
    TOOLS_EXHAUSTED_MESSAGE,
    build_comparison_prompt,
    build_system_prompt,
    clean_search_term,
    extraction_prompt,
    fallback_search_message,
    finalize_text,
    missing_credentials_compare_message,
    missing_credentials_message,
    narration_prompt,
)
from .state import LoopState, Phase

logger = get_logger(__name__)

FALLBACK_MAX_RESULTS = 100


class ConversationOrchestrator:
    """
    Runs one user message through the model, executing requested tools until
    the model answers in plain text or the iteration budget is spent.

    Every failure other than cancellation is turned into a user-facing
    ``ConversationalResponse``; the caller never sees an exception from
    ``respond`` except ``asyncio.CancelledError``.
    """

    def __init__(
        self,
        gateway: LLMGateway,
        executor: ToolExecutor,
        registry: Optional[ToolRegistry] = None,
        memory: Optional[ConversationMemory] = None,
        settings: Optional[AssistantSettings] = None,
        search_tool_name: str = "search_products",
    ):
        """
        Args:
            gateway: The LLM backend.
            executor: Runs tool calls. Its registry supplies the catalog unless ``registry`` is given.
            registry: Tools advertised to the model.
            memory: Conversation store. Without it nothing is loaded or persisted.
            settings: Loop tunables. Defaults apply when omitted.
            search_tool_name: Tool used for the direct-search fallback.
        """
        self.gateway = gateway
        self.executor = executor
        self.registry = registry if registry is not None else executor.registry
        self.memory = memory
        self.settings = settings or AssistantSettings()
        self.search_tool_name = search_tool_name
        self._conversation_locks = KeyedLock()

    async def respond(self, request: ChatRequest, timeout: Optional[float] = None) -> ConversationalResponse:
        """
        Answer a user message.

        Args:
            request: The message, credentials and conversation context.
            timeout: Optional deadline in seconds for the whole run.

        Returns:
            Non-empty text plus the distinct products found while answering.

        Raises:
            asyncio.CancelledError: If the calling task is cancelled.
        """
        if not request.has_credentials:
            logger.warning("Chat request without API key; returning configuration hint.")
            return ConversationalResponse(text=missing_credentials_message(self.settings.provider), products=[])

        try:
            if timeout is None:
                return await self._respond_serialized(request)
            return await asyncio.wait_for(self._respond_serialized(request), timeout=timeout)
        except asyncio.CancelledError:
            raise
        except asyncio.TimeoutError as e:
            if timeout is not None:
                logger.error(f"Conversation run exceeded its deadline of {timeout}s")
                return ConversationalResponse(text=APOLOGY_MESSAGE, products=[])
            logger.error(f"Error in conversational AI: {e}", exc_info=True)
            return await self._recover(request)
        except Exception as e:
            logger.error(f"Error in conversational AI: {e}", exc_info=True)
            return await self._recover(request)

    async def _respond_serialized(self, request: ChatRequest) -> ConversationalResponse:
        if request.conversation_id is None:
            return await self._respond(request)
        async with self._conversation_locks.hold(request.conversation_id):
            return await self._respond(request)

    async def _respond(self, request: ChatRequest) -> ConversationalResponse:
        logger.info(f"Processing chat message for user {request.user_id or 'anonymous'}: {request.message}")
        history = await self._load_history(request.conversation_id)
        system_prompt = build_system_prompt(request.context_products)
        tool_catalog = self.registry.function_declarations()

        state = await self.run_loop(request.message, history, system_prompt, tool_catalog, request.credentials)

        products = dedupe_products(state.product_list)
        text = finalize_text(state.final_text, len(products))
        logger.info(
            f"Final AI response: {len(text)} chars, {len(products)} products, {state.iteration} iterations"
        )

        await self._persist(request, text, products)
        return ConversationalResponse(text=text, products=products)

    async def run_loop(
        self,
        message: str,
        history: Sequence[ChatTurn],
        system_prompt: str,
        tool_catalog: List[Dict[str, Any]],
        credentials: Optional[str],
    ) -> LoopState:
        """
        Alternate model calls and tool execution.

        Each iteration sends the growing history to the model. A reply without
        tool calls ends the run with its text. Otherwise the requested tools are
        executed, their results appended, and the model is asked to narrate them.
        Tools requested on the last allowed iteration are still executed.

        Args:
            message: The user's message.
            history: Prior plain-text turns of the conversation.
            system_prompt: Persona plus product context.
            tool_catalog: Function declarations advertised to the model.
            credentials: Provider API key.

        Returns:
            The final loop state, with ``final_text`` possibly empty.

        Raises:
            UpstreamUnavailableError: If a model call fails.
        """
        state = LoopState(history=list(history))
        state.history.append(ChatTurn.user(message))
        max_iterations = self.settings.max_iterations

        while state.phase is not Phase.DONE:
            state.iteration += 1
            prompt = message if state.iteration == 1 else narration_prompt(message)
            logger.debug(f"Model call {state.iteration}/{max_iterations}")

            reply = await self.gateway.generate(prompt, system_prompt, state.history, tool_catalog, credentials)
            state.history.append(ChatTurn.model(reply.text, reply.tool_calls))

            if not reply.has_tool_calls:
                state.final_text = reply.text
                state.phase = Phase.DONE
                break

            if reply.text.strip():
                state.final_text = reply.text

            state.phase = Phase.EXECUTING_TOOLS
            await self._execute_tools(state, reply.tool_calls)

            if state.iteration >= max_iterations:
                logger.warning(f"Reached maximum of {max_iterations} model calls with tools still requested")
                state.exhausted = True
                state.final_text = reply.text if reply.text.strip() else TOOLS_EXHAUSTED_MESSAGE
                state.phase = Phase.DONE
            else:
                state.phase = Phase.AWAITING_MODEL

        return state

    async def _execute_tools(self, state: LoopState, calls: Sequence[ToolCall]) -> None:
        budget = self.settings.tool_time_budget
        logger.info(f"AI requested {len(calls)} tool call(s): {', '.join(c.name for c in calls)}")

        if self.settings.parallel_tools and len(calls) > 1:
            results = await self.executor.execute_many(calls, budget)
            for call, result in zip(calls, results):
                self._record_result(state, call, result)
            return

        for call in calls:
            result = await self.executor.execute(call, budget)
            self._record_result(state, call, result)

    @staticmethod
    def _record_result(state: LoopState, call: ToolCall, result: ToolExecutionResult) -> None:
        if result.success and isinstance(result.result, dict) and "products" in result.result:
            found = products_from_payload(result.result["products"])
            state.add_products(found)
            logger.info(f"Tool {call.name} returned {len(found)} products")
        elif not result.success:
            logger.warning(f"Tool {call.name} failed: {result.error_message}")
        state.history.append(ChatTurn.tool(call.name, result.to_payload(), call.call_id))

    async def _load_history(self, conversation_id: Optional[int]) -> List[ChatTurn]:
        if self.memory is None or conversation_id is None:
            return []
        try:
            turns = await self.memory.get_history(conversation_id, self.settings.history_limit)
        except Exception as e:
            logger.warning(f"Failed to load conversation history for {conversation_id}: {e}")
            return []
        history = [turn for turn in turns if turn.is_plain_text]
        logger.debug(f"Loaded {len(history)} history turns for conversation {conversation_id}")
        return history

    async def _persist(self, request: ChatRequest, text: str, products: Sequence[Product]) -> None:
        if self.memory is None or request.conversation_id is None:
            return
        try:
            saved = await self.memory.save_turn(
                request.conversation_id, ChatTurn.user(request.message), user_id=request.user_id
            )
            if not saved:
                logger.info("Skipped duplicate user message")
            await self.memory.save_turn(
                request.conversation_id, ChatTurn.model(text), user_id=request.user_id, products=products
            )
        except Exception as e:
            logger.error(f"Failed to save conversation messages: {e}", exc_info=True)

    async def _recover(self, request: ChatRequest) -> ConversationalResponse:
        """Direct product search on the extracted search term, or an apology."""
        try:
            term = await self._extract_search_term(request.message, request.credentials)
            if term:
                products = await self._search(term)
                if products:
                    logger.info(f"Fallback search found {len(products)} products for '{term}'")
                    return ConversationalResponse(text=fallback_search_message(len(products), term), products=products)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Fallback search failed: {e}", exc_info=True)
        return ConversationalResponse(text=APOLOGY_MESSAGE, products=[])

    async def _extract_search_term(self, message: str, credentials: Optional[str]) -> Optional[str]:
        if not credentials or not credentials.strip():
            return None
        try:
            reply = await self.gateway.generate(extraction_prompt(message), EXTRACTION_SYSTEM_PROMPT, [], [], credentials)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Error extracting search term: {e}")
            return None
        term = clean_search_term(reply.text)
        logger.info(f"Extracted search term '{term}' from query '{message}'")
        return term

    async def _search(self, term: str) -> List[Product]:
        call = ToolCall(name=self.search_tool_name, arguments={"query": term, "maxResults": FALLBACK_MAX_RESULTS})
        result = await self.executor.execute(call, self.settings.tool_time_budget)
        if not result.success or not isinstance(result.result, dict):
            logger.warning(f"Direct search for '{term}' failed: {result.error_message}")
            return []
        return dedupe_products(products_from_payload(result.result.get("products")))

    async def search_products_from_query(self, query: str, credentials: Optional[str]) -> List[Product]:
        """
        Search the catalog using the product keywords the model extracts from ``query``.

        Returns:
            The matching products, or an empty list when nothing could be extracted or searched.
        """
        try:
            term = await self._extract_search_term(query, credentials)
            if not term:
                return []
            return await self._search(term)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Error searching products from query: {e}", exc_info=True)
            return []

    async def compare_products(self, products: Sequence[Product], credentials: Optional[str]) -> str:
        """Ask the model for a written comparison of the given products."""
        if len(products) < 2:
            return TOO_FEW_TO_COMPARE_MESSAGE
        if not credentials or not credentials.strip():
            return missing_credentials_compare_message(self.settings.provider)
        try:
            reply = await self.gateway.generate(
                build_comparison_prompt(products), COMPARISON_SYSTEM_PROMPT, [], [], credentials
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Error comparing products: {e}", exc_info=True)
            return (
                f"I encountered an error while comparing products: {e}. Please try again or check your API key."
            )
        return reply.text

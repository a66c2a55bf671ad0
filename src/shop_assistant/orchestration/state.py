"""State carried through one orchestrator run."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List

from shop_assistant.llm_core.messages import ChatTurn
from shop_assistant.llm_core.models import Product


class Phase(str, Enum):
    AWAITING_MODEL = "awaiting_model"
    EXECUTING_TOOLS = "executing_tools"
    DONE = "done"


@dataclass
class LoopState:
    """
    Accumulators of a single run.

    Attributes:
        iteration: Model calls made so far.
        history: Turns sent to the model, growing in causal order.
        products: Products collected from tool results, keyed by id.
        final_text: Current candidate for the answer text.
        phase: Where the run currently is.
        exhausted: True when the iteration budget ran out while tools were still requested.
    """

    history: List[ChatTurn] = field(default_factory=list)
    iteration: int = 0
    products: Dict[int, Product] = field(default_factory=dict)
    final_text: str = ""
    phase: Phase = Phase.AWAITING_MODEL
    exhausted: bool = False

    def add_products(self, products: Iterable[Product]) -> None:
        for product in products:
            self.products[product.id] = product

    @property
    def product_list(self) -> List[Product]:
        return list(self.products.values())

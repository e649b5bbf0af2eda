# token budgeting for analysis prompts
# selects as many ranked items as fit the model's per-request token allowance

from typing import Any, Optional

from journal_brain.common.logging.logger import logger

DEFAULT_MAX_TOKENS_PER_REQUEST = 30000
DEFAULT_RESERVED_TOKENS = 2000 # system prompt + expected response
ITEM_BASE_OVERHEAD = 50 # metadata + JSON structure per item

# share of the request budget each analysis op may spend on context
OPERATION_BUDGET_FRACTIONS: dict[str, float] = {
    "lifelong_patterns": 0.9, # needs the most history
    "decision_matrix": 0.8,
    "action_synthesis": 0.4, # recent entries only
}
DEFAULT_BUDGET_FRACTION = 0.7

class TokenBudgetManager():
    """
    Char-based token estimates (1 token ~ 4 chars), reporting/budgeting only.
    """

    def __init__(self, max_tokens_per_request: int = DEFAULT_MAX_TOKENS_PER_REQUEST):
        self.max_tokens_per_request = max_tokens_per_request if max_tokens_per_request > 0 else DEFAULT_MAX_TOKENS_PER_REQUEST

    @staticmethod
    def estimate_tokens(text: str) -> int:
        return len(text) // 4

    @classmethod
    def estimate_item_tokens(cls, item: dict[str, Any]) -> int:
        tokens = ITEM_BASE_OVERHEAD
        text = item.get("text")
        if isinstance(text, str):
            tokens += cls.estimate_tokens(text)
        date = item.get("date")
        if isinstance(date, str):
            tokens += cls.estimate_tokens(date)
        return tokens

    @classmethod
    def select_entries(
        cls,
        items: list[dict[str, Any]],
        target_token_budget: int,
        reserved_tokens: int = DEFAULT_RESERVED_TOKENS,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        Greedily takes items in ranked order until the next one would exceed the budget.

        Returns:
            (selected items, estimated total tokens including the reserved overhead)
        """
        selected: list[dict[str, Any]] = []
        total = reserved_tokens
        for item in items:
            item_tokens = cls.estimate_item_tokens(item)
            if total + item_tokens > target_token_budget:
                break
            selected.append(item)
            total += item_tokens
        return selected, total

    def recommended_budget(self, operation: str, user_limit: Optional[int] = None) -> int:
        limit = user_limit if user_limit is not None else self.max_tokens_per_request
        fraction = OPERATION_BUDGET_FRACTIONS.get(operation, DEFAULT_BUDGET_FRACTION)
        return int(limit * fraction)

    @staticmethod
    def log_budget_info(operation: str, total_items: int, selected_items: int, estimated_tokens: int, budget: int) -> None:
        utilization = int(estimated_tokens / budget * 100) if budget > 0 else 0
        logger.debug(
            f"[{operation}] token budget: selected {selected_items}/{total_items} items, "
            f"est. {estimated_tokens}/{budget} tokens ({utilization}%)"
        )

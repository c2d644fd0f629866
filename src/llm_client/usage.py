"""Approximate cost accounting for provider calls."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ModelCost:
    """USD per million tokens. Cached input is not tracked."""
    input: float
    output: float


MODEL_COSTS = {
    "gpt-4o-mini": ModelCost(input=0.15, output=0.6),
    "gpt-4o": ModelCost(input=2.5, output=10),
    "o1": ModelCost(input=15, output=60),
    "o1-mini": ModelCost(input=1.1, output=4.4),
    "o3-mini": ModelCost(input=1.1, output=4.4),
    "text-embedding-ada-002": ModelCost(input=0.10, output=0),
    "text-embedding-3-small": ModelCost(input=0.02, output=0),
    "text-embedding-3-large": ModelCost(input=0.13, output=0),
}


@dataclass
class TokenUsage:
    prompt: int = 0
    completion: int = 0

    def add(self, prompt: int, completion: int) -> None:
        self.prompt += prompt
        self.completion += completion


class UsageTracker:
    """Running token totals per model."""

    def __init__(self, costs: dict[str, ModelCost] = MODEL_COSTS) -> None:
        self.costs = costs
        self.usage: dict[str, TokenUsage] = {}

    def add(self, model: str, prompt_tokens: int | None, completion_tokens: int | None) -> None:
        self.usage.setdefault(model, TokenUsage()).add(prompt_tokens or 0, completion_tokens or 0)

    def total_cost(self) -> float:
        """Approximate USD spent so far. Models missing from the price table count as free."""
        total = 0.0
        for model, used in self.usage.items():
            cost = self.costs.get(model)
            if cost is None:
                continue
            total += used.prompt / 1_000_000 * cost.input
            total += used.completion / 1_000_000 * cost.output
        return total

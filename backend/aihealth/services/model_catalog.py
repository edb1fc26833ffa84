"""Chat models the user can pick from, with list prices for cost estimates."""

from dataclasses import dataclass
from typing import Any, Optional

# Assumed size of the model's answer when estimating a request's cost
ESTIMATED_COMPLETION_TOKENS = 450


@dataclass(frozen=True)
class ModelPricing:
    """USD per 1K tokens."""

    input_per_1k: float
    output_per_1k: float

    def cost(self, input_tokens: int, output_tokens: int) -> float:
        return input_tokens / 1000 * self.input_per_1k + output_tokens / 1000 * self.output_per_1k


@dataclass(frozen=True)
class ChatModel:
    id: str
    display_name: str
    context_window: int
    pricing: ModelPricing
    description: str

    def cost(self, input_tokens: int, output_tokens: int = ESTIMATED_COMPLETION_TOKENS) -> float:
        return self.pricing.cost(input_tokens, output_tokens)

    def cost_for_requests(
        self, count: int, input_tokens: int, output_tokens: int = ESTIMATED_COMPLETION_TOKENS
    ) -> float:
        return self.cost(input_tokens, output_tokens) * count

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "context_window": self.context_window,
            "input_per_1k": self.pricing.input_per_1k,
            "output_per_1k": self.pricing.output_per_1k,
            "description": self.description,
        }


MODEL_CATALOG: list[ChatModel] = [
    ChatModel(
        id="gpt-4o-mini",
        display_name="GPT-4o mini",
        context_window=128_000,
        pricing=ModelPricing(input_per_1k=0.00015, output_per_1k=0.0006),
        description="Fast and cheap, good for iterating on prompts.",
    ),
    ChatModel(
        id="gpt-4o",
        display_name="GPT-4o",
        context_window=128_000,
        pricing=ModelPricing(input_per_1k=0.005, output_per_1k=0.015),
        description="General-purpose model with good quality and speed.",
    ),
    ChatModel(
        id="gpt-4.1-mini",
        display_name="GPT-4.1 Mini",
        context_window=128_000,
        pricing=ModelPricing(input_per_1k=0.003, output_per_1k=0.015),
        description="Price/quality balance in the GPT-4.1 line.",
    ),
    ChatModel(
        id="gpt-4.1",
        display_name="GPT-4.1",
        context_window=128_000,
        pricing=ModelPricing(input_per_1k=0.015, output_per_1k=0.06),
        description="Flagship model with stronger reasoning.",
    ),
    ChatModel(
        id="o1-mini",
        display_name="o1 Mini",
        context_window=128_000,
        pricing=ModelPricing(input_per_1k=0.003, output_per_1k=0.012),
        description="Reasoning model at a moderate price.",
    ),
    ChatModel(
        id="o1-preview",
        display_name="o1 Preview",
        context_window=128_000,
        pricing=ModelPricing(input_per_1k=0.015, output_per_1k=0.06),
        description="Highest-quality reasoning model.",
    ),
    ChatModel(
        id="gpt-3.5-turbo-0125",
        display_name="GPT-3.5 Turbo",
        context_window=16_000,
        pricing=ModelPricing(input_per_1k=0.0005, output_per_1k=0.0015),
        description="Budget option for simple prompts.",
    ),
]

DEFAULT_MODEL_ID = MODEL_CATALOG[0].id


def find_model(model_id: str) -> Optional[ChatModel]:
    return next((model for model in MODEL_CATALOG if model.id == model_id), None)


def get_model(model_id: Optional[str]) -> ChatModel:
    """Catalog entry for ``model_id``, or the first model when unknown."""
    return find_model(model_id or "") or MODEL_CATALOG[0]

"""Models for food identification results."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FoodIdentification:
    """Model-generated description of the food in a meal."""

    description: str
    ingredients: list[str] = field(default_factory=list)

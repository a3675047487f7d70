"""Spoonacular recipe and product search client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class RecipeSearchClient(Protocol):
    """Interface for recipe database lookups."""

    async def search_recipes(self, query: str, number: int = 1) -> dict[str, object]:
        """Search recipes with nutrition data and return raw API data."""


class ProductSearchClient(Protocol):
    """Interface for packaged product database lookups."""

    async def search_products(self, query: str, number: int = 1) -> dict[str, object]:
        """Search grocery products and return raw API data."""


@dataclass
class HttpxSpoonacularClient(RecipeSearchClient, ProductSearchClient):
    """HTTPX-backed Spoonacular client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxSpoonacularClient":
        """Create a Spoonacular client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(
                headers={
                    "Accept": "application/json",
                    "User-Agent": "CalorieCanvas/1.0",
                }
            ),
        )

    async def search_recipes(self, query: str, number: int = 1) -> dict[str, object]:
        """Run a complex recipe search with nutrition attached."""
        response = await self.http_client.get(
            f"{self.base_url}/recipes/complexSearch",
            params={
                "apiKey": self.api_key,
                "query": query,
                "addRecipeNutrition": "true",
                "number": number,
            },
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def search_products(self, query: str, number: int = 1) -> dict[str, object]:
        """Search grocery products."""
        response = await self.http_client.get(
            f"{self.base_url}/food/products/search",
            params={"apiKey": self.api_key, "query": query, "number": number},
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

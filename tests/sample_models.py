"""Models shared by the test modules."""

from __future__ import annotations

from typing import Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Item(BaseModel):
    """A catalogue item."""

    sku: str
    quantity: int = Field(gt=0)
    note: Optional[str] = None


class Order(BaseModel):
    """An order with nested items."""

    id: int
    status: Literal["open"]
    items: list[Item]
    gift: Optional[Item] = None


class Page(BaseModel, Generic[T]):
    """A page of results."""

    results: list[T]
    total: int


class ItemPage(BaseModel):
    """Wrapper around a parametrized generic model."""

    page: Page[Item]


class Opaque:
    """A plain class pydantic cannot describe."""

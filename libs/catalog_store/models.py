"""Typed records exchanged with the search engine.

``Product`` is the only document shape the catalog stores. The envelope
models describe the part of a search response the decoder relies on so a
malformed body fails validation instead of yielding partial data.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """A catalog product.

    Fields missing from a stored document stay at their zero value and
    unknown fields are ignored. Document identity belongs to the engine and
    is intentionally absent here.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field("", description="Product name")
    price: int = Field(0, description="Price, no currency semantics")
    tag: str = Field("", description="Free-form category label")
    description: str = Field("", description="Free-form description")


SAMPLE_PRODUCT = Product(
    name="Iphone 14 Pro",
    price=1000000,
    tag="Smartphone",
    description="Iphone 14 Pro with 1TB storage",
)


class SearchHit(BaseModel):
    """One entry of ``hits.hits``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    source: Optional[Any] = Field(None, alias="_source")
    score: Optional[float] = Field(None, alias="_score")
    index: Optional[str] = Field(None, alias="_index")


class SearchHits(BaseModel):
    """The ``hits`` section of a search response."""

    model_config = ConfigDict(extra="ignore")

    total: Optional[Any] = None
    max_score: Optional[float] = None
    hits: List[SearchHit]


class SearchEnvelope(BaseModel):
    """Top level of a search response."""

    model_config = ConfigDict(extra="ignore")

    hits: SearchHits

from __future__ import annotations

from pydantic import BaseModel, Field


class TransactionPayload(BaseModel):
    """Body of ``POST /transactions`` and ``PUT /transactions/{id}``.

    Fields are optional so that a missing value reaches the store as NULL and
    the schema's NOT NULL constraints decide. ``amount`` must be finite since
    stored infinities cannot be rendered back as JSON.
    """

    type: str | None = None
    category: str | None = None
    amount: float | None = Field(default=None, allow_inf_nan=False)
    date: str | None = None
    description: str | None = None

    def as_row(self) -> tuple:
        return (self.type, self.category, self.amount, self.date, self.description)

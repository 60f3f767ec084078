"""Pydantic domain models for the options journal."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from options_journal.core.dates import parse_date
from options_journal.core.enums import OTHER_OPTION_TYPE, OptionType, TradeStatus


class KnownOptionType(BaseModel):
    kind: Literal["known"] = "known"
    value: OptionType

    @property
    def effective(self) -> str:
        return self.value.value


class CustomOptionType(BaseModel):
    kind: Literal["custom"] = "custom"
    label: str

    @property
    def effective(self) -> str:
        return self.label


OptionTypeChoice = Annotated[KnownOptionType | CustomOptionType, Field(discriminator="kind")]


def option_type_choice(
    value: str, custom_option_type: str | None = None
) -> OptionTypeChoice:
    """Classify a submitted option type, unwrapping the ``Other`` sentinel."""
    value = (value or "").strip()
    if value == OTHER_OPTION_TYPE:
        label = (custom_option_type or "").strip()
        if not label:
            raise ValueError("A custom option type is required when 'Other' is selected")
        value = label
    if not value:
        raise ValueError("Option type is required")
    try:
        return KnownOptionType(value=OptionType(value))
    except ValueError:
        return CustomOptionType(label=value)


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class TradeRecord(BaseModel):
    """One option position in the journal."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    owner_id: str
    ticker: str
    account: str = ""
    option_type: str
    contracts: int = Field(default=1, ge=1)
    cost: float = Field(default=0.0, ge=0)
    strike_price: float = Field(default=0.0, ge=0)
    price_at_purchase: float = 0.0
    trading_date: date = Field(default_factory=date.today)
    expiration_date: date | None = None
    closed_date: date | None = None
    status: TradeStatus = TradeStatus.OPEN
    realized_pl: float | None = None
    unrealized_pl: float | None = None
    pmcc_calc: float | None = None
    expected_return: float | None = None
    audited: bool = False
    exercised: bool = False

    @field_validator("ticker")
    @classmethod
    def _upper_ticker(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("Ticker is required")
        return v

    @field_validator("account")
    @classmethod
    def _strip_account(cls, v: str) -> str:
        return v.strip()

    @field_validator("option_type")
    @classmethod
    def _effective_option_type(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Option type is required")
        if v == OTHER_OPTION_TYPE:
            raise ValueError("'Other' must be resolved to a custom option type")
        return v

    @field_validator("trading_date", "expiration_date", "closed_date", mode="before")
    @classmethod
    def _parse_dates(cls, v):
        v = _blank_to_none(v)
        if isinstance(v, str):
            return parse_date(v)
        return v

    @field_validator("realized_pl", "unrealized_pl", "pmcc_calc", "expected_return", mode="before")
    @classmethod
    def _blank_numbers(cls, v):
        return _blank_to_none(v)

    @model_validator(mode="after")
    def _closed_date_matches_status(self) -> TradeRecord:
        if self.status == TradeStatus.CLOSED and self.closed_date is None:
            raise ValueError("closed_date is required when status is closed")
        if self.status == TradeStatus.OPEN and self.closed_date is not None:
            raise ValueError("closed_date must be empty while status is open")
        return self

    @property
    def is_open(self) -> bool:
        return self.status == TradeStatus.OPEN

    @property
    def overall_pl(self) -> float:
        return (self.realized_pl or 0.0) + (self.unrealized_pl or 0.0)

    @property
    def is_known_type(self) -> bool:
        return self.option_type in OptionType._value2member_map_


class TradeDraft(BaseModel):
    """Fields a user submits when logging a new trade."""

    ticker: str
    account: str
    option_type: str
    custom_option_type: str | None = None
    contracts: int = Field(default=1, ge=1)
    cost: float | None = Field(default=None, ge=0)
    strike_price: float = Field(default=0.0, ge=0)
    price_at_purchase: float = 0.0
    expiration_date: date | None = None
    unrealized_pl: float | None = None

    @field_validator("expiration_date", mode="before")
    @classmethod
    def _parse_expiration(cls, v):
        v = _blank_to_none(v)
        if isinstance(v, str):
            return parse_date(v)
        return v


class TradesChanged(BaseModel):
    """Notification published after the trade collection of an owner changes."""

    owner_id: str
    action: str
    trade_ids: list[str] = Field(default_factory=list)

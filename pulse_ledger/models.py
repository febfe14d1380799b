from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, model_validator


class EntryKind(str, Enum):
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"


class Category(str, Enum):
    MICRO = "Micro"
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"
    WHALE = "Whale"


class Entry(BaseModel):
    id: int = Field(..., ge=0)
    kind: EntryKind
    signed_amount: int
    absolute_amount: int = Field(..., gt=0)
    label: str = ""
    recorded_at: datetime
    account: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @model_validator(mode="after")
    def _check_sign(self) -> "Entry":
        expected = self.absolute_amount if self.kind == EntryKind.CREDIT else -self.absolute_amount
        if self.signed_amount != expected:
            raise ValueError(
                f"{self.kind.value} entry must carry signed amount {expected}, got {self.signed_amount}"
            )
        return self


class Transaction(BaseModel):
    hash: str = Field(..., min_length=64, max_length=64)
    sender: str = Field(..., min_length=1)
    receiver: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0)
    recorded_at: datetime
    category: Category

    model_config = ConfigDict(frozen=True, from_attributes=True)


class PulseScore(BaseModel):
    total_transactions: int = 0
    total_volume: int = 0
    score: int = 0
    reputation: int = 0
    last_update: Optional[datetime] = None

    model_config = ConfigDict(frozen=True, from_attributes=True)


class SystemStats(BaseModel):
    total_transactions: int
    total_volume: int

    model_config = ConfigDict(frozen=True)


class EntryRecorded(BaseModel):
    account: str
    entry_id: int
    kind: EntryKind
    absolute_amount: int
    new_balance: int
    label: str
    timestamp: datetime

    model_config = ConfigDict(frozen=True)


class OwnershipTransferred(BaseModel):
    previous_owner: str
    new_owner: str

    model_config = ConfigDict(frozen=True)


class TransactionRecorded(BaseModel):
    tx_hash: str
    sender: str
    receiver: str
    amount: int

    model_config = ConfigDict(frozen=True)


class ScoreUpdated(BaseModel):
    identity: str
    new_score: int
    new_reputation: int

    model_config = ConfigDict(frozen=True)

import os
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict, model_validator

# Smallest unit whose default tier thresholds (unit/100 and up) are all positive.
MIN_UNIT = 100
# One unit is 10**18 base units, like wei to ether.
DEFAULT_UNIT = 10**18


class ScoringPolicy(BaseModel):
    """Tier thresholds and score weights.

    Thresholds are in base units and are exclusive upper bounds of their tier:
    below ``micro_threshold`` is MICRO, below ``small_threshold`` is SMALL and
    so on; anything at or above ``large_threshold`` is WHALE.
    """

    unit: int = Field(default=DEFAULT_UNIT, ge=MIN_UNIT)
    micro_threshold: Optional[int] = Field(default=None, gt=0)
    small_threshold: Optional[int] = Field(default=None, gt=0)
    medium_threshold: Optional[int] = Field(default=None, gt=0)
    large_threshold: Optional[int] = Field(default=None, gt=0)
    transaction_weight: int = Field(default=10, ge=0)
    reputation_divisor: int = Field(default=10, gt=0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _default_thresholds(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        unit = data.get("unit")
        if unit is None:
            unit = DEFAULT_UNIT
        try:
            unit = int(unit)
        except (TypeError, ValueError):
            # Field validation reports it.
            return data
        if unit < MIN_UNIT:
            raise ValueError(f"unit must be at least {MIN_UNIT} base units, got {unit}")
        defaults = {
            "micro_threshold": unit // 100,
            "small_threshold": unit // 10,
            "medium_threshold": unit,
            "large_threshold": unit * 10,
        }
        for key, value in defaults.items():
            if data.get(key) is None:
                data[key] = value
        return data

    @model_validator(mode="after")
    def _check_ordering(self) -> "ScoringPolicy":
        thresholds = self.thresholds()
        if any(lower >= upper for lower, upper in zip(thresholds, thresholds[1:])):
            raise ValueError(f"Tier thresholds must be strictly increasing, got {thresholds}")
        return self

    def thresholds(self) -> tuple[int, int, int, int]:
        return (
            self.micro_threshold,
            self.small_threshold,
            self.medium_threshold,
            self.large_threshold,
        )


class LedgerSettings(BaseModel):
    scoring: ScoringPolicy = Field(default_factory=ScoringPolicy)
    log_level: str = "INFO"
    log_format: str = "json"

    model_config = ConfigDict(frozen=True)


def _int_env(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return int(raw.strip())


def load_settings() -> LedgerSettings:
    scoring = {}
    for key, env_name in (
        ("unit", "PULSE_LEDGER_UNIT"),
        ("transaction_weight", "PULSE_LEDGER_TX_WEIGHT"),
        ("reputation_divisor", "PULSE_LEDGER_REPUTATION_DIVISOR"),
    ):
        value = _int_env(env_name)
        if value is not None:
            scoring[key] = value

    return LedgerSettings(
        scoring=ScoringPolicy(**scoring),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        log_format=os.getenv("LOG_FORMAT", "json").strip().lower(),
    )

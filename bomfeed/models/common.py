"""Common types and helpers shared across models."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import TypeAlias

AreaCode: TypeAlias = str
WmoId: TypeAlias = str


class StateCode(StrEnum):
    VIC = "VIC"
    NSW = "NSW"
    ACT = "ACT"
    QLD = "QLD"
    SA = "SA"
    WA = "WA"
    TAS = "TAS"
    NT = "NT"


def state_from_area_code(area_code: AreaCode) -> StateCode | None:
    """Derive the state from an area code prefix, e.g. 'VIC_PT042' -> VIC."""
    prefix = area_code.split("_", 1)[0].upper()
    try:
        return StateCode(prefix)
    except ValueError:
        return None


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_iso() -> str:
    return utc_now().isoformat()

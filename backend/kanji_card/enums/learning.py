"""
Learning System Enums

Defines the review stages a card set moves through and the older
three-stage model still used by some clients.
"""

from datetime import timedelta
from enum import Enum
from typing import Optional


class SetStage(str, Enum):
    """
    Review stage of a card set.

    Stage transitions (one step per promotion):
    - INTAKE → DAY_1 → DAY_2 → DAY_3 → DAY_5 → DAY_7 → DAY_10
    - DAY_10 → DAY_10 (terminal, absorbing)

    Only INTAKE sets accept new cards. Reaching DAY_10 releases the
    set's cards into the archive.
    """

    INTAKE = "intake"  # Collecting words, not yet studied
    DAY_1 = "day_1"
    DAY_2 = "day_2"
    DAY_3 = "day_3"
    DAY_5 = "day_5"
    DAY_7 = "day_7"
    DAY_10 = "day_10"  # Graduated

    @classmethod
    def _missing_(cls, value: object) -> Optional["SetStage"]:
        # Names written by earlier deployments
        if isinstance(value, str):
            return _LEGACY_NAMES.get(value)
        return None

    @property
    def is_terminal(self) -> bool:
        return self is SetStage.DAY_10

    @property
    def review_offset(self) -> timedelta:
        """Delay after entering this stage before the set is due again."""
        return _REVIEW_OFFSETS[self]

    def next(self) -> "SetStage":
        """The stage a promotion moves to; DAY_10 promotes to itself."""
        if self.is_terminal:
            return self
        return _STAGE_ORDER[_STAGE_ORDER.index(self) + 1]


_STAGE_ORDER: list[SetStage] = list(SetStage)

_REVIEW_OFFSETS: dict[SetStage, timedelta] = {
    SetStage.INTAKE: timedelta(0),
    SetStage.DAY_1: timedelta(days=1),
    SetStage.DAY_2: timedelta(days=2),
    SetStage.DAY_3: timedelta(days=3),
    SetStage.DAY_5: timedelta(days=5),
    SetStage.DAY_7: timedelta(days=7),
    SetStage.DAY_10: timedelta(days=10),
}

_LEGACY_NAMES: dict[str, SetStage] = {
    "Tobe": SetStage.INTAKE,
    "Current": SetStage.DAY_1,
    "OneDay": SetStage.DAY_1,
    "TwoDay": SetStage.DAY_2,
    "ThreeDay": SetStage.DAY_3,
    "FiveDay": SetStage.DAY_5,
    "SevenDay": SetStage.DAY_7,
    "TenDay": SetStage.DAY_10,
}


class LegacyStage(str, Enum):
    """
    Three-stage model used before the day-based schedule existed.

    Kept as its own type; SetStage is the source of truth and maps onto
    it with to_legacy_stage().
    """

    INTAKE = "intake"
    ACTIVE = "active"
    GRADUATED = "graduated"


def to_legacy_stage(stage: SetStage) -> LegacyStage:
    """Collapse a day-based stage onto the three-stage model."""
    if stage is SetStage.INTAKE:
        return LegacyStage.INTAKE
    if stage.is_terminal:
        return LegacyStage.GRADUATED
    return LegacyStage.ACTIVE


def stages_for_legacy(legacy: LegacyStage) -> list[SetStage]:
    """All day-based stages that collapse onto the given legacy stage."""
    return [stage for stage in SetStage if to_legacy_stage(stage) is legacy]

"""Phase enums, one per exercise. The first member of each is the rest phase."""

from enum import Enum


class SquatPhase(str, Enum):
    STANDING = "standing"
    DESCENDING = "descending"
    BOTTOM = "bottom"
    ASCENDING = "ascending"


class PushupPhase(str, Enum):
    UP = "up"
    DESCENDING = "descending"
    BOTTOM = "bottom"
    ASCENDING = "ascending"


class ArmCurlPhase(str, Enum):
    DOWN = "down"
    CURLING = "curling"
    TOP = "top"
    LOWERING = "lowering"


class SideRaisePhase(str, Enum):
    DOWN = "down"
    RAISING = "raising"
    TOP = "top"
    LOWERING = "lowering"


class ShoulderPressPhase(str, Enum):
    DOWN = "down"
    PRESSING = "pressing"
    TOP = "top"
    LOWERING = "lowering"

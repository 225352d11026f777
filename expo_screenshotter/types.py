"""Enums for expo-screenshotter."""

from enum import StrEnum


class InteractionType(StrEnum):
    TYPE = "type"
    CLICK = "click"
    WAIT = "wait"


class DeviceType(StrEnum):
    IPHONE = "iphone"
    ANDROID = "android"


class AndroidSize(StrEnum):
    COMPACT = "compact"
    MEDIUM = "medium"


class AndroidColor(StrEnum):
    BLACK = "black"
    SILVER = "silver"

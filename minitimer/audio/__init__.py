"""Audio package."""

from .alarm import AlarmPlayer, DEFAULT_VOLUME
from .sources import (
    ALARM_SOURCES,
    DEFAULT_SOURCE,
    AlarmSource,
    AudioLoadFailure,
    lookup_source,
    resolve_source,
)
from .voice import AlarmVoice

__all__ = [
    "AlarmPlayer",
    "AlarmVoice",
    "AlarmSource",
    "AudioLoadFailure",
    "ALARM_SOURCES",
    "DEFAULT_SOURCE",
    "DEFAULT_VOLUME",
    "lookup_source",
    "resolve_source",
]

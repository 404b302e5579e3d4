"""Presentation support: timers and sound cues."""
from .timers import ScheduledCallback, Countdown, InvalidMoveHighlight
from .audio import AudioCues, CLICK, SUCCESS, FAIL

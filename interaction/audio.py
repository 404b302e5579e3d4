"""Sound cues driven by engine notifications."""

from typing import Callable

from engine.board import SessionState
from engine.events import InvalidMove, Placed, StateChanged


CLICK = "click"
SUCCESS = "success"
FAIL = "fail"


class AudioCues:
    """
    Engine listener that turns notifications into cue names.

    `play` receives one of CLICK, SUCCESS or FAIL; actual playback belongs
    to the caller (the GUI rings the Tk bell).
    """

    def __init__(self, play: Callable[[str], None]):
        self.play = play

    def __call__(self, event) -> None:
        if isinstance(event, Placed):
            self.play(CLICK)
        elif isinstance(event, InvalidMove):
            self.play(FAIL)
        elif isinstance(event, StateChanged):
            if event.state is SessionState.SOLVED:
                self.play(SUCCESS)
            elif event.state is SessionState.MISFILLED:
                self.play(FAIL)

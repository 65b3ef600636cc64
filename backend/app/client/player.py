"""
Audio playback for the review client.

Only one row plays at a time: starting a row pauses whichever row was
playing before it.
"""

import shlex
import subprocess
from typing import Callable, List, Optional

from app.utils.logger import get_logger

logger = get_logger(__name__)


class AudioPlayer:
    """Plays one audio source."""

    def play(self) -> None:
        raise NotImplementedError

    def pause(self) -> None:
        raise NotImplementedError

    @property
    def playing(self) -> bool:
        raise NotImplementedError


class SubprocessPlayer(AudioPlayer):
    """Plays a file or URL with an external command such as ffplay."""

    def __init__(self, source: str, command: str) -> None:
        self.source = source
        self.command: List[str] = shlex.split(command)
        self._process: Optional[subprocess.Popen] = None

    def play(self) -> None:
        if self.playing:
            return
        logger.debug("Starting playback", source=self.source, command=self.command[0])
        self._process = subprocess.Popen(
            self.command + [self.source],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )

    def pause(self) -> None:
        if self._process is None:
            return
        if self._process.poll() is None:
            self._process.terminate()
            self._process.wait()
        self._process = None

    @property
    def playing(self) -> bool:
        return self._process is not None and self._process.poll() is None


class PlaybackCoordinator:
    """
    Tracks the currently playing row.

    Args:
        player_factory: Builds a player for an audio source
    """

    def __init__(self, player_factory: Callable[[str], AudioPlayer]) -> None:
        self.player_factory = player_factory
        self.current: Optional[AudioPlayer] = None
        self.current_source: Optional[str] = None

    def play(self, source: str) -> AudioPlayer:
        """Pause the previous row, then start playing ``source``."""
        if self.current is not None:
            self.current.pause()

        player = self.player_factory(source)
        player.play()

        self.current = player
        self.current_source = source
        return player

    def stop(self) -> None:
        if self.current is not None:
            self.current.pause()
        self.current = None
        self.current_source = None

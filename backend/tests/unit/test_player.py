"""
Tests for audio playback coordination.
"""

from unittest.mock import Mock, patch

from app.client.player import PlaybackCoordinator, SubprocessPlayer


class TestPlaybackCoordinator:
    """Test that only one row plays at a time."""

    def test_play_pauses_previous(self) -> None:
        players = {}

        def factory(source: str) -> Mock:
            players[source] = Mock()
            return players[source]

        coordinator = PlaybackCoordinator(factory)

        coordinator.play("a.wav")
        coordinator.play("b.wav")

        players["a.wav"].pause.assert_called_once()
        players["b.wav"].play.assert_called_once()
        assert coordinator.current is players["b.wav"]
        assert coordinator.current_source == "b.wav"

    def test_stop(self) -> None:
        player = Mock()
        coordinator = PlaybackCoordinator(lambda source: player)
        coordinator.play("a.wav")

        coordinator.stop()

        player.pause.assert_called_once()
        assert coordinator.current is None

    def test_stop_without_playback(self) -> None:
        PlaybackCoordinator(Mock()).stop()


class TestSubprocessPlayer:
    """Test SubprocessPlayer with a mocked process."""

    @patch("app.client.player.subprocess.Popen")
    def test_play_and_pause(self, mock_popen: Mock) -> None:
        process = Mock()
        process.poll.return_value = None
        mock_popen.return_value = process

        player = SubprocessPlayer("http://localhost:8000/api/static/wavs/a.wav", "ffplay -nodisp -autoexit")
        player.play()

        args = mock_popen.call_args[0][0]
        assert args == ["ffplay", "-nodisp", "-autoexit", "http://localhost:8000/api/static/wavs/a.wav"]
        assert player.playing

        player.pause()

        process.terminate.assert_called_once()
        assert not player.playing

    @patch("app.client.player.subprocess.Popen")
    def test_play_twice_starts_once(self, mock_popen: Mock) -> None:
        mock_popen.return_value.poll.return_value = None

        player = SubprocessPlayer("a.wav", "aplay")
        player.play()
        player.play()

        mock_popen.assert_called_once()

    @patch("app.client.player.subprocess.Popen")
    def test_pause_finished_process(self, mock_popen: Mock) -> None:
        mock_popen.return_value.poll.return_value = 0

        player = SubprocessPlayer("a.wav", "aplay")
        player.play()
        player.pause()

        mock_popen.return_value.terminate.assert_not_called()

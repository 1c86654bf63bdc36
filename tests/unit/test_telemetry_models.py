import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))

from loopfetch_telemetry.media import parse_player_line
from loopfetch_telemetry.models import MediaPlayer, TelemetrySnapshot, or_sentinel, select_active_media


class MediaSelectionTests(unittest.TestCase):
    def test_spotify_outranks_vlc(self):
        players = [MediaPlayer(name="vlc"), MediaPlayer(name="spotify")]
        self.assertEqual(select_active_media(players), 1)

    def test_no_match_picks_first(self):
        self.assertEqual(select_active_media([MediaPlayer(name="browser-x")]), 0)

    def test_empty_list_selects_nothing(self):
        self.assertIsNone(select_active_media([]))

    def test_first_entry_wins_among_equal_rank(self):
        players = [MediaPlayer(name="mpv.instance1"), MediaPlayer(name="mpv.instance2")]
        self.assertEqual(select_active_media(players), 0)

    def test_substring_match(self):
        players = [MediaPlayer(name="chromium"), MediaPlayer(name="firefox.instance_1_42")]
        self.assertEqual(select_active_media(players), 1)

    def test_snapshot_active_media(self):
        snap = TelemetrySnapshot(media=(MediaPlayer(name="vlc"), MediaPlayer(name="spotify")))
        self.assertEqual(snap.active_media().name, "spotify")
        self.assertIsNone(TelemetrySnapshot().active_media())


class SentinelTests(unittest.TestCase):
    def test_defaults_are_non_empty(self):
        snap = TelemetrySnapshot()
        self.assertEqual(snap.user, "user")
        self.assertEqual(snap.host, "host")
        self.assertEqual(snap.editor, "none")
        self.assertEqual(snap.kernel, "unknown")

    def test_or_sentinel(self):
        self.assertEqual(or_sentinel(None), "unknown")
        self.assertEqual(or_sentinel("   "), "unknown")
        self.assertEqual(or_sentinel(" arch "), "arch")


class PlayerLineTests(unittest.TestCase):
    def test_parse_full_line(self):
        line = "Spotify\tPlaying\tSong\tA, B\tAlbum\thttps://art\t61000000\t180500000"
        player = parse_player_line(line)
        self.assertIsNotNone(player)
        self.assertEqual(player.name, "spotify")
        self.assertEqual(player.artist, "A, B")
        self.assertEqual(player.elapsed, 61)
        self.assertEqual(player.length, 180)
        self.assertFalse(player.paused)

    def test_missing_fields_use_sentinels(self):
        player = parse_player_line("vlc\t\t\t\t\t\t\t")
        self.assertEqual(player.song, "unknown")
        self.assertEqual(player.artist, "unknown")
        self.assertEqual(player.elapsed, 0)
        self.assertTrue(player.paused)

    def test_rejects_malformed_line(self):
        self.assertIsNone(parse_player_line("no tabs here"))


if __name__ == "__main__":
    unittest.main()

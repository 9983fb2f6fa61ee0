from __future__ import annotations

import unittest

from mpdqueue.models import PlaybackStatus, PlayState, Subsystem, Track, format_seconds


class TrackTests(unittest.TestCase):
    def test_from_mpd_record(self) -> None:
        track = Track.from_mpd(
            {
                "file": "a/b.flac",
                "id": "12",
                "title": "Song",
                "artist": ["One", "Two"],
                "album": "Record",
                "date": "1999",
                "duration": "241.5",
            }
        )
        self.assertEqual(track.file, "a/b.flac")
        self.assertEqual(track.id, 12)
        self.assertEqual(track.artist, "One, Two")
        self.assertEqual(track.duration, 241.5)
        self.assertEqual(
            track.tag_lines(),
            ["Title: Song", "Album: Record", "Artist: One, Two", "Release Date: 1999"],
        )

    def test_search_result_has_no_id(self) -> None:
        track = Track.from_mpd({"file": "x.mp3", "time": "30"})
        self.assertIsNone(track.id)
        self.assertEqual(track.duration, 30.0)
        self.assertEqual(track.display_title, "Untitled")
        self.assertEqual(track.tag_lines(), [])


class PlaybackStatusTests(unittest.TestCase):
    def test_from_mpd_status(self) -> None:
        status = PlaybackStatus.from_mpd(
            {"state": "play", "elapsed": "30.0", "duration": "120.0", "songid": "4", "volume": "80"}
        )
        self.assertTrue(status.playing)
        self.assertEqual(status.song_id, 4)
        self.assertEqual(status.volume, 80)
        self.assertAlmostEqual(status.ratio, 0.25)

    def test_legacy_time_field(self) -> None:
        status = PlaybackStatus.from_mpd({"state": "pause", "time": "15:60"})
        self.assertTrue(status.paused)
        self.assertEqual(status.elapsed, 15.0)
        self.assertEqual(status.duration, 60.0)

    def test_unknown_state_and_missing_volume(self) -> None:
        status = PlaybackStatus.from_mpd({"state": "bogus", "volume": "-1"})
        self.assertIs(status.state, PlayState.STOP)
        self.assertIsNone(status.volume)
        self.assertEqual(status.ratio, 0.0)

    def test_ratio_is_clamped(self) -> None:
        self.assertEqual(PlaybackStatus(elapsed=500.0, duration=100.0).ratio, 1.0)

    def test_equal_records_give_equal_snapshots(self) -> None:
        record = {"state": "play", "elapsed": "1.0", "duration": "2.0", "songid": "1"}
        self.assertEqual(PlaybackStatus.from_mpd(record), PlaybackStatus.from_mpd(dict(record)))


class SubsystemTests(unittest.TestCase):
    def test_parse_many_drops_unknown(self) -> None:
        self.assertEqual(
            Subsystem.parse_many(["player", "frobnicate", "playlist"]),
            [Subsystem.PLAYER, Subsystem.PLAYLIST],
        )
        self.assertEqual(Subsystem.parse_many("mixer"), [Subsystem.MIXER])
        self.assertEqual(Subsystem.parse_many(None), [])

    def test_classification(self) -> None:
        self.assertTrue(Subsystem.STORED_PLAYLIST.changes_queue)
        self.assertTrue(Subsystem.MIXER.changes_player)
        self.assertFalse(Subsystem.DATABASE.changes_queue)
        self.assertFalse(Subsystem.DATABASE.changes_player)


class FormatSecondsTests(unittest.TestCase):
    def test_formats(self) -> None:
        self.assertEqual(format_seconds(None), "--:--")
        self.assertEqual(format_seconds(5), "0:05")
        self.assertEqual(format_seconds(125.9), "2:05")
        self.assertEqual(format_seconds(3725), "1:02:05")


if __name__ == "__main__":
    unittest.main()

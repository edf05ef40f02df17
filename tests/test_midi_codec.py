"""
Tests for the mido-backed MIDI codec.
"""

from fractions import Fraction
from pathlib import Path

import mido
import pytest

from chuk_midi_transform.codec import (
    load_sequence,
    save_sequence,
    sequence_from_midi,
    sequence_to_midi,
)
from chuk_midi_transform.core.rhythm import Time
from chuk_midi_transform.models import (
    ControlChange,
    MidiSequence,
    NoteOff,
    NoteOn,
    SetTempo,
    TimeSignature,
)


class TestSequenceToMidi:
    """Tests for writing sequences."""

    def test_single_track(self, melody: MidiSequence) -> None:
        """Output is one track ending with end_of_track."""
        mid = sequence_to_midi(melody)
        assert mid.ticks_per_beat == 480
        assert len(mid.tracks) == 1
        assert mid.tracks[0][-1].type == "end_of_track"

    def test_delta_times(self, melody: MidiSequence) -> None:
        """Absolute beats become tick deltas."""
        track = sequence_to_midi(melody).tracks[0]
        assert [m.time for m in track[:4]] == [0, 480, 0, 480]

    def test_sorted_by_time(self) -> None:
        """Messages are written in time order, stable for ties."""
        seq = MidiSequence(
            [
                NoteOff(0, 60, 0, Time(1)),
                NoteOn(0, 60, 100, Time(0)),
                ControlChange(0, 7, 100, Time(0)),
            ]
        )
        track = sequence_to_midi(seq).tracks[0]
        assert [m.type for m in track] == [
            "note_on",
            "control_change",
            "note_off",
            "end_of_track",
        ]

    def test_tempo_written_as_microseconds(self) -> None:
        """BPM is converted to microseconds per beat."""
        track = sequence_to_midi(MidiSequence([SetTempo(120, Time(0))])).tracks[0]
        assert track[0].type == "set_tempo"
        assert track[0].tempo == 500000

    def test_absent_meta_time_at_start(self) -> None:
        """Meta events with no time go at tick 0."""
        seq = MidiSequence([NoteOn(0, 60, 100, Time(2)), TimeSignature(3, 4)])
        track = sequence_to_midi(seq).tracks[0]
        assert track[0].type == "time_signature"
        assert track[0].time == 0

    def test_negative_time_rejected(self) -> None:
        """A file cannot hold events before its start."""
        seq = MidiSequence([NoteOn(0, 60, 100, Time(-1))])
        with pytest.raises(ValueError, match="before the start"):
            sequence_to_midi(seq)

    def test_non_positive_tempo_rejected(self) -> None:
        """Tempo 0 cannot be written."""
        with pytest.raises(ValueError, match="Tempo must be positive"):
            sequence_to_midi(MidiSequence([SetTempo(0, Time(0))]))

    def test_deterministic(self, every_kind: MidiSequence) -> None:
        """Same sequence, same file."""
        a = sequence_to_midi(every_kind)
        b = sequence_to_midi(every_kind)
        assert list(a.tracks[0]) == list(b.tracks[0])


class TestSequenceFromMidi:
    """Tests for reading MIDI files."""

    def test_round_trip(self, every_kind: MidiSequence) -> None:
        """Every modelled kind survives writing and reading."""
        assert sequence_from_midi(sequence_to_midi(every_kind)) == every_kind

    def test_fractional_beats(self) -> None:
        """Tick positions become exact beat fractions."""
        seq = MidiSequence([NoteOn(0, 60, 100, Time(Fraction(1, 3)))])
        result = sequence_from_midi(sequence_to_midi(seq))
        assert result[0].time == Time(Fraction(1, 3))

    def test_velocity_zero_note_on_is_note_off(self) -> None:
        """Running-status note-offs read as NoteOff."""
        mid = mido.MidiFile(ticks_per_beat=480)
        track = mido.MidiTrack()
        track.append(mido.Message("note_on", note=60, velocity=100, time=0))
        track.append(mido.Message("note_on", note=60, velocity=0, time=240))
        mid.tracks.append(track)

        seq = sequence_from_midi(mid)
        assert list(seq) == [
            NoteOn(0, 60, 100, Time(0)),
            NoteOff(0, 60, 0, Time(Fraction(1, 2))),
        ]

    def test_unmodelled_messages_skipped(self) -> None:
        """Markers and sysex are not part of a sequence."""
        mid = mido.MidiFile(ticks_per_beat=480)
        track = mido.MidiTrack()
        track.append(mido.MetaMessage("marker", text="A", time=0))
        track.append(mido.Message("sysex", data=[1, 2, 3], time=0))
        track.append(mido.Message("note_on", note=62, velocity=80, time=480))
        mid.tracks.append(track)

        seq = sequence_from_midi(mid)
        assert list(seq) == [NoteOn(0, 62, 80, Time(1))]

    def test_fractional_tempo(self) -> None:
        """Tempos that do not divide evenly are kept exact."""
        mid = mido.MidiFile(ticks_per_beat=480)
        track = mido.MidiTrack()
        track.append(mido.MetaMessage("set_tempo", tempo=700000, time=0))
        mid.tracks.append(track)

        seq = sequence_from_midi(mid)
        assert seq[0].tempo == Fraction(600, 7)

    def test_merges_tracks(self) -> None:
        """All tracks are merged by default; one can be selected."""
        mid = mido.MidiFile(ticks_per_beat=480)
        first = mido.MidiTrack()
        first.append(mido.Message("note_on", note=60, velocity=100, time=0))
        second = mido.MidiTrack()
        second.append(mido.Message("note_on", channel=1, note=48, velocity=100, time=480))
        mid.tracks.extend([first, second])

        assert len(sequence_from_midi(mid)) == 2
        assert list(sequence_from_midi(mid, track=1)) == [NoteOn(1, 48, 100, Time(1))]


class TestFiles:
    """Tests for load_sequence and save_sequence."""

    def test_save_and_load(self, melody: MidiSequence, temp_midi_path: Path) -> None:
        """A saved sequence loads back equal."""
        written = save_sequence(melody, temp_midi_path)
        assert written.exists()
        assert load_sequence(written) == melody

    def test_creates_parent_dirs(self, melody: MidiSequence, temp_dir: Path) -> None:
        """Missing output directories are created."""
        path = temp_dir / "nested" / "deeper" / "out.mid"
        save_sequence(melody, path)
        assert path.exists()

    def test_custom_resolution(self, melody: MidiSequence, temp_midi_path: Path) -> None:
        """Resolution is configurable and does not change beat times."""
        save_sequence(melody, temp_midi_path, ticks_per_beat=96)
        assert mido.MidiFile(str(temp_midi_path)).ticks_per_beat == 96
        assert load_sequence(temp_midi_path) == melody

from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from chunkscribe.components.chunking import ChunkWindow, plan_chunk_windows, prepare_recording
from chunkscribe.contracts.errors import FfmpegError, InputValidationError


class _FakeFfmpeg:
    def __init__(self, *, encoded_size: int, duration_s: float = 0.0, produce_chunks: bool = True) -> None:
        self.encoded_size = encoded_size
        self.duration_s = duration_s
        self.produce_chunks = produce_chunks
        self.encode_calls: list[tuple[Path, Path]] = []
        self.extract_calls: list[tuple[str, float, float]] = []

    def encode_mp3(self, input_path, output_path) -> None:  # type: ignore[no-untyped-def]
        self.encode_calls.append((Path(input_path), Path(output_path)))
        Path(output_path).write_bytes(b"x" * self.encoded_size)

    def extract_window(self, input_path, output_path, start_s, duration_s) -> None:  # type: ignore[no-untyped-def]
        self.extract_calls.append((Path(output_path).name, start_s, duration_s))
        if self.produce_chunks:
            Path(output_path).write_bytes(f"{start_s}:{duration_s}".encode("utf-8"))

    def probe_duration_s(self, input_path) -> float:  # type: ignore[no-untyped-def]
        return self.duration_s


class PlanChunkWindowsTests(unittest.TestCase):
    def test_windows_overlap_after_the_first(self) -> None:
        windows = plan_chunk_windows(650.0, chunk_seconds=300, overlap_seconds=2.0)

        self.assertEqual(
            windows,
            [
                ChunkWindow(index=0, start_s=0.0, duration_s=300.0, has_leading_overlap=False),
                ChunkWindow(index=1, start_s=298.0, duration_s=302.0, has_leading_overlap=True),
                ChunkWindow(index=2, start_s=598.0, duration_s=52.0, has_leading_overlap=True),
            ],
        )

    def test_zero_overlap_never_flags_overlap(self) -> None:
        windows = plan_chunk_windows(90.0, chunk_seconds=30, overlap_seconds=0.0)
        self.assertEqual(len(windows), 3)
        self.assertFalse(any(w.has_leading_overlap for w in windows))

    def test_rejects_invalid_parameters(self) -> None:
        with self.assertRaises(InputValidationError):
            plan_chunk_windows(10.0, chunk_seconds=0)
        with self.assertRaises(InputValidationError):
            plan_chunk_windows(10.0, chunk_seconds=5, overlap_seconds=5)
        with self.assertRaises(InputValidationError):
            plan_chunk_windows(0.0, chunk_seconds=5)


class PrepareRecordingTests(unittest.TestCase):
    def test_small_recording_is_sent_as_single_payload(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            source = root / "meeting.wav"
            source.write_bytes(b"wav")
            ffmpeg = _FakeFfmpeg(encoded_size=100)

            recording = prepare_recording(source, root / "work", ffmpeg, threshold_bytes=100)

            self.assertFalse(recording.is_chunked)
            self.assertEqual(recording.payload, b"x" * 100)
            self.assertEqual(recording.chunks, [])
            self.assertEqual(ffmpeg.encode_calls, [(source, root / "work" / "recording.mp3")])
            self.assertEqual(ffmpeg.extract_calls, [])

    def test_large_recording_is_split_into_overlapping_chunks(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            source = root / "meeting.wav"
            source.write_bytes(b"wav")
            ffmpeg = _FakeFfmpeg(encoded_size=101, duration_s=70.0)

            recording = prepare_recording(
                source,
                root / "work",
                ffmpeg,
                threshold_bytes=100,
                chunk_seconds=30,
                overlap_seconds=2.0,
            )

            self.assertTrue(recording.is_chunked)
            self.assertEqual([c.index for c in recording.chunks], [0, 1, 2])
            self.assertEqual([c.has_leading_overlap for c in recording.chunks], [False, True, True])
            self.assertEqual(
                ffmpeg.extract_calls,
                [
                    ("chunk_0000.mp3", 0.0, 30.0),
                    ("chunk_0001.mp3", 28.0, 32.0),
                    ("chunk_0002.mp3", 58.0, 12.0),
                ],
            )
            self.assertEqual(recording.chunks[1].payload, b"28.0:32.0")

    def test_rejects_missing_input(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            with self.assertRaises(InputValidationError):
                prepare_recording(root / "missing.wav", root / "work", _FakeFfmpeg(encoded_size=1))

    def test_rejects_non_empty_work_dir(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            source = root / "meeting.wav"
            source.write_bytes(b"wav")
            work = root / "work"
            work.mkdir()
            (work / "leftover.mp3").write_bytes(b"old")

            with self.assertRaises(InputValidationError):
                prepare_recording(source, work, _FakeFfmpeg(encoded_size=1))

    def test_missing_chunk_output_raises_ffmpeg_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            source = root / "meeting.wav"
            source.write_bytes(b"wav")
            ffmpeg = _FakeFfmpeg(encoded_size=10, duration_s=60.0, produce_chunks=False)

            with self.assertRaises(FfmpegError):
                prepare_recording(source, root / "work", ffmpeg, threshold_bytes=5, chunk_seconds=30)


if __name__ == "__main__":
    unittest.main()

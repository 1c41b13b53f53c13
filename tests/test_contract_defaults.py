import unittest

from chunkscribe.contracts.artifacts import Chunk, ChunkOutcome, Provider, Transcript, TranscriptionRequest
from chunkscribe.contracts.errors import InputValidationError, TransportError


class ContractDefaultsTests(unittest.TestCase):
    def test_chunk_defaults_and_filename(self) -> None:
        chunk = Chunk(index=7, payload=b"mp3")
        self.assertFalse(chunk.has_leading_overlap)
        self.assertEqual(chunk.filename, "audio_chunk_7.mp3")

    def test_chunk_rejects_negative_index(self) -> None:
        with self.assertRaises(InputValidationError):
            Chunk(index=-1, payload=b"mp3")

    def test_outcome_constructors(self) -> None:
        ok = ChunkOutcome.success(1, "hi", has_leading_overlap=True)
        self.assertTrue(ok.ok)
        self.assertIsNone(ok.cause)
        self.assertTrue(ok.has_leading_overlap)

        cause = TransportError("down")
        failed = ChunkOutcome.failure(2, cause)
        self.assertFalse(failed.ok)
        self.assertIs(failed.cause, cause)
        self.assertIsNone(failed.text)

    def test_provider_parse_is_case_insensitive(self) -> None:
        self.assertIs(Provider.parse("OpenAI"), Provider.OPENAI)
        self.assertIs(Provider.parse(" mistral "), Provider.MISTRAL)
        self.assertIs(Provider.parse(Provider.MISTRAL), Provider.MISTRAL)
        self.assertEqual(str(Provider.OPENAI), "openai")
        with self.assertRaisesRegex(InputValidationError, "Unknown provider: groq"):
            Provider.parse("groq")

    def test_request_normalizes_provider_and_language(self) -> None:
        request = TranscriptionRequest(provider="mistral", api_key="secret-value", language_hint=" DE ")
        self.assertIs(request.provider, Provider.MISTRAL)
        self.assertEqual(request.language_hint, "de")
        self.assertNotIn("secret-value", repr(request))

    def test_request_validation(self) -> None:
        with self.assertRaises(InputValidationError):
            TranscriptionRequest(provider=Provider.OPENAI, api_key="  ")
        with self.assertRaises(InputValidationError):
            TranscriptionRequest(provider=Provider.OPENAI, api_key="sk-x", language_hint="english")

    def test_transcript_fields(self) -> None:
        transcript = Transcript(text="hi", provider="openai", model="whisper-1", chunk_count=1)
        self.assertEqual(transcript.chunk_count, 1)


if __name__ == "__main__":
    unittest.main()

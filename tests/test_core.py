import sys
import unittest
from dataclasses import replace
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config import settings  # noqa: E402
from app.core.cors import cors_options  # noqa: E402
from app.core.errors import (  # noqa: E402
    DecoderError,
    ExtractionError,
    error_info_from_exception,
    sanitize_error_message,
)
from app.core.rate_limit import rate_limit  # noqa: E402


class ErrorHandlingTests(unittest.TestCase):
    def test_sanitize_redacts_contact_details(self):
        cleaned = sanitize_error_message("Failed for jane@example.com at +1 (555) 123-4567\n today")
        self.assertEqual(cleaned, "Failed for [email] at [phone] today")

    def test_long_messages_are_truncated(self):
        cleaned = sanitize_error_message("x" * 500)
        self.assertEqual(len(cleaned), 300)
        self.assertTrue(cleaned.endswith("..."))

    def test_error_info_codes(self):
        self.assertEqual(error_info_from_exception(DecoderError("bad file")).code, "decoder_error")
        self.assertEqual(error_info_from_exception(ExtractionError("no job")).code, "extraction_error")
        self.assertEqual(error_info_from_exception(ValueError("nope")).code, "invalid_input")
        self.assertEqual(error_info_from_exception(KeyError("k")).code, "internal_error")
        self.assertEqual(ExtractionError("x", status_code=502).status_code, 502)


class CorsOptionsTests(unittest.TestCase):
    def test_configured_origins(self):
        options = cors_options()
        self.assertEqual(options["allow_origins"], list(settings.cors_allowed_origins))
        self.assertIn("POST", options["allow_methods"])

    def test_wildcard_origin_drops_credentials(self):
        wildcard = replace(settings, cors_allowed_origins=("*",), cors_allow_credentials=True)
        with patch("app.core.cors.settings", wildcard):
            self.assertFalse(cors_options()["allow_credentials"])
        explicit = replace(settings, cors_allowed_origins=("https://app.example.com",), cors_allow_credentials=True)
        with patch("app.core.cors.settings", explicit):
            self.assertTrue(cors_options()["allow_credentials"])


class RateLimitTests(unittest.TestCase):
    def test_disabled_rate_limit_is_identity(self):
        def endpoint():
            return "ok"

        with patch("app.core.rate_limit.settings", replace(settings, rate_limit_enabled=False)):
            self.assertIs(rate_limit()(endpoint), endpoint)


if __name__ == "__main__":
    unittest.main()

"""
Unit tests for settings, errors, random sources, context names and request adapters.
"""
import asyncio
import unittest
from pydantic import ValidationError
from src.core.config import TokenSettings, load_settings, get_settings, set_settings, DEFAULT_ALPHABET
from src.core.errors import UserError, InvalidTokenError, ERROR_INVALID_TOKEN
from src.core.types import TokenField
from src.formtoken.context import ContextVarNameProvider, StaticNameProvider, use_context_name
from src.formtoken.random_source import SecretRandomSource, SeededRandomSource
from src.formtoken.request import MappingRequest

class TestSettings(unittest.TestCase):
    def tearDown(self):
        set_settings(None)

    def test_defaults(self):
        settings = TokenSettings()
        self.assertEqual(settings.token_length, 16)
        self.assertEqual(settings.token_limit, 10)
        self.assertEqual(settings.max_usage, 1)
        self.assertEqual(len(settings.alphabet), 62)

    def test_rejects_non_positive(self):
        for field in ("token_length", "token_limit", "max_usage"):
            with self.assertRaises(ValidationError):
                TokenSettings(**{field: 0})

    def test_rejects_single_char_alphabet(self):
        with self.assertRaises(ValidationError):
            TokenSettings(alphabet="aaaa")

    def test_load_from_environ(self):
        settings = load_settings({
            "FORM_TOKEN_LENGTH": "24",
            "FORM_TOKEN_LIMIT": "5",
            "FORM_TOKEN_MAX_USAGE": "2",
        })
        self.assertEqual((settings.token_length, settings.token_limit, settings.max_usage), (24, 5, 2))
        self.assertEqual(settings.alphabet, DEFAULT_ALPHABET)

    def test_load_invalid_environ(self):
        with self.assertRaises(ValidationError):
            load_settings({"FORM_TOKEN_LIMIT": "none"})

    def test_process_wide_override(self):
        custom = TokenSettings(token_limit=4)
        set_settings(custom)
        self.assertIs(get_settings(), custom)

class TestErrors(unittest.TestCase):
    def test_invalid_token_error(self):
        error = InvalidTokenError("billing")
        self.assertIsInstance(error, UserError)
        self.assertEqual(error.code, ERROR_INVALID_TOKEN)
        self.assertEqual(str(error), "invalidFormToken")
        self.assertEqual(error.domain, "billing")

class TestTokenField(unittest.TestCase):
    def test_html_escaped(self):
        field = TokenField(name='token_a"b', value="<x>")
        self.assertEqual(field.to_html(), '<input type="hidden" name="token_a&quot;b" value="&lt;x&gt;" />')

    def test_frozen(self):
        field = TokenField(name="token_a", value="v")
        with self.assertRaises(ValidationError):
            field.value = "w"

class TestRandomSources(unittest.TestCase):
    def test_secret_source(self):
        source = SecretRandomSource()
        values = {source.generate(16) for _ in range(50)}
        self.assertEqual(len(values), 50)
        for value in values:
            self.assertEqual(len(value), 16)
            self.assertTrue(set(value) <= set(DEFAULT_ALPHABET))

    def test_custom_alphabet(self):
        value = SecretRandomSource("xy").generate(40)
        self.assertTrue(set(value) <= {"x", "y"})

    def test_rejects_degenerate_alphabet(self):
        with self.assertRaises(ValueError):
            SecretRandomSource("z")

    def test_seeded_reproducibility(self):
        first = SeededRandomSource(seed=12345)
        second = SeededRandomSource(seed=12345)
        for _ in range(20):
            self.assertEqual(first.generate(16), second.generate(16))
        self.assertEqual(first.get_seed(), 12345)

class TestContextNames(unittest.TestCase):
    def test_static(self):
        self.assertEqual(StaticNameProvider("login").current_name(), "login")

    def test_context_var_scoping(self):
        provider = ContextVarNameProvider()
        self.assertIsNone(provider.current_name())
        with use_context_name("outer"):
            with use_context_name("inner"):
                self.assertEqual(provider.current_name(), "inner")
            self.assertEqual(provider.current_name(), "outer")
        self.assertIsNone(provider.current_name())

    def test_context_var_per_task(self):
        provider = ContextVarNameProvider()

        async def handle(name):
            with use_context_name(name):
                await asyncio.sleep(0)
                return provider.current_name()

        async def run():
            return await asyncio.gather(handle("a"), handle("b"))

        self.assertEqual(asyncio.run(run()), ["a", "b"])

class TestMappingRequest(unittest.TestCase):
    def test_values(self):
        request = MappingRequest({"token_a": "x", "multi": ["first", "second"], "empty": [], "num": 5})
        self.assertEqual(request.get_input_value("token_a"), "x")
        self.assertEqual(request.get_input_value("multi"), "first")
        self.assertIsNone(request.get_input_value("empty"))
        self.assertIsNone(request.get_input_value("missing"))
        self.assertEqual(request.get_input_value("num"), "5")

if __name__ == '__main__':
    unittest.main()

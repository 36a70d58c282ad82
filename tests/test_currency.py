import unittest
from engines.currency import coerce_number, format_currency, format_percent, parse_currency_string


class TestFormatCurrency(unittest.TestCase):
    def test_thousands_round_to_whole_k(self):
        self.assertEqual(format_currency(5467.5), "$5K")
        self.assertEqual(format_currency(45_000), "$45K")

    def test_millions_keep_one_decimal(self):
        self.assertEqual(format_currency(1_234_567), "$1.2M")
        self.assertEqual(format_currency(1_000_000), "$1.0M")

    def test_below_thousand(self):
        self.assertEqual(format_currency(999), "$999")
        self.assertEqual(format_currency(0), "$0")

    def test_just_below_million_stays_in_thousands(self):
        self.assertEqual(format_currency(999_999), "$1000K")

    def test_ties_round_away_from_zero(self):
        self.assertEqual(format_currency(2.5), "$3")
        self.assertEqual(format_currency(-2.5), "$-3")
        self.assertEqual(format_currency(-2500), "$-3K")
        self.assertEqual(format_currency(-1_250_000), "$-1.3M")
        self.assertEqual(format_currency(1_250_000), "$1.3M")

    def test_negative_thresholds_use_magnitude(self):
        self.assertEqual(format_currency(-45_000), "$-45K")
        self.assertEqual(format_currency(-2_000_000), "$-2.0M")

    def test_negative_zero(self):
        self.assertEqual(format_currency(-0.0), "$0")

    def test_garbage_formats_as_zero(self):
        self.assertEqual(format_currency(None), "$0")
        self.assertEqual(format_currency("n/a"), "$0")


class TestFormatPercent(unittest.TestCase):
    def test_fraction_to_percent(self):
        self.assertEqual(format_percent(0.123), "12.3%")
        self.assertEqual(format_percent(4.6667), "466.7%")
        self.assertEqual(format_percent(0), "0.0%")


class TestParseCurrencyString(unittest.TestCase):
    def test_suffixes(self):
        self.assertAlmostEqual(parse_currency_string("$5K"), 5_000)
        self.assertAlmostEqual(parse_currency_string("$1.2M"), 1_200_000)
        self.assertAlmostEqual(parse_currency_string("$2B"), 2_000_000_000)
        self.assertAlmostEqual(parse_currency_string("1.5K"), 1_500)

    def test_commas_and_whitespace(self):
        self.assertAlmostEqual(parse_currency_string("$1,234"), 1_234)
        self.assertAlmostEqual(parse_currency_string(" $ 12,500 "), 12_500)

    def test_negative(self):
        self.assertAlmostEqual(parse_currency_string("$-2"), -2)

    def test_lenient_prefix(self):
        self.assertAlmostEqual(parse_currency_string("12abc"), 12)

    def test_unparsable_is_zero(self):
        for value in ("garbage", "", "$", None, "K"):
            self.assertEqual(parse_currency_string(value), 0.0)

    def test_numbers_pass_through(self):
        self.assertEqual(parse_currency_string(42), 42.0)
        self.assertEqual(parse_currency_string(float('nan')), 0.0)

    def test_parse_of_format_is_close(self):
        for x in (830, 45_000, 1_250_000, 7_890_123):
            with self.subTest(x=x):
                back = parse_currency_string(format_currency(x))
                self.assertLessEqual(abs(back - x), max(1.0, abs(x) * 0.05))


class TestCoerceNumber(unittest.TestCase):
    def test_coerce(self):
        self.assertEqual(coerce_number("7.5"), 7.5)
        self.assertEqual(coerce_number(None, 3.0), 3.0)
        self.assertEqual(coerce_number("", 3.0), 3.0)
        self.assertEqual(coerce_number(True, 1.0), 1.0)
        self.assertEqual(coerce_number(float('inf'), 2.0), 2.0)

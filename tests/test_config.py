import unittest

from prizewheel.config import WheelSettings, parse_ordinals, parse_weights
from prizewheel.contact import DEFAULT_CONTACT_URI_TEMPLATE
from prizewheel.db.engine import DEFAULT_SQLITE_URL, ROOT_DIR
from prizewheel.wheel.catalog import DEFAULT_ALLOWED_ORDINALS


class ParseHelperTests(unittest.TestCase):
    def test_parse_ordinals(self):
        self.assertEqual(parse_ordinals("1, 2,4,,9"), (1, 2, 4, 9))
        with self.assertRaises(ValueError):
            parse_ordinals("1,two")
        with self.assertRaises(ValueError):
            parse_ordinals(" , ")

    def test_parse_weights(self):
        self.assertEqual(parse_weights("1:5, 2:0.5"), {1: 5.0, 2: 0.5})
        self.assertEqual(parse_weights(""), {})
        with self.assertRaises(ValueError):
            parse_weights("1=5")
        with self.assertRaises(ValueError):
            parse_weights("1:lots")


class WheelSettingsTests(unittest.TestCase):
    def test_defaults_from_empty_environment(self):
        settings = WheelSettings.from_env({})
        self.assertEqual(settings.database_url, DEFAULT_SQLITE_URL)
        self.assertEqual(settings.allowed_ordinals, DEFAULT_ALLOWED_ORDINALS)
        self.assertEqual(settings.draw_strategy, "uniform")
        self.assertEqual(settings.prize_weights, {})
        self.assertFalse(settings.collect_phone)
        self.assertEqual(settings.national_id_max_length, 8)
        self.assertEqual(settings.phone_max_length, 15)
        self.assertTrue(settings.redemption_enabled)
        self.assertEqual(settings.redemption_minutes, 10)
        self.assertFalse(settings.persist_losses)
        self.assertEqual(settings.contact_uri_template, DEFAULT_CONTACT_URI_TEMPLATE)

    def test_values_from_environment(self):
        settings = WheelSettings.from_env(
            {
                "DB_URL": "postgresql+psycopg://wheel@localhost/wheel",
                "WHEEL_ALLOWED_ORDINALS": "1,9",
                "WHEEL_DRAW_STRATEGY": "weighted",
                "WHEEL_PRIZE_WEIGHTS": "1:1,9:3",
                "WHEEL_COLLECT_PHONE": "yes",
                "WHEEL_NATIONAL_ID_MAX_LENGTH": "12",
                "WHEEL_REDEMPTION_ENABLED": "off",
                "WHEEL_REDEMPTION_MINUTES": "5",
                "WHEEL_PERSIST_LOSSES": "TRUE",
                "WHEEL_CONTACT_URI_TEMPLATE": "https://wa.me/51999999999?text={text}",
            }
        )
        self.assertEqual(settings.database_url, "postgresql+psycopg://wheel@localhost/wheel")
        self.assertEqual(settings.allowed_ordinals, (1, 9))
        self.assertEqual(settings.draw_strategy, "weighted")
        self.assertEqual(settings.prize_weights, {1: 1.0, 9: 3.0})
        self.assertTrue(settings.collect_phone)
        self.assertEqual(settings.national_id_max_length, 12)
        self.assertFalse(settings.redemption_enabled)
        self.assertEqual(settings.redemption_minutes, 5)
        self.assertTrue(settings.persist_losses)
        self.assertTrue(settings.contact_uri_template.startswith("https://wa.me/"))

    def test_relative_sqlite_url_resolves_against_repo_root(self):
        settings = WheelSettings.from_env({"DB_URL": "sqlite:///./data/wheel.db"})
        expected = f"sqlite:///{(ROOT_DIR / 'data/wheel.db').resolve()}"
        self.assertEqual(settings.database_url, expected)

    def test_malformed_values_are_rejected(self):
        cases = [
            {"WHEEL_COLLECT_PHONE": "maybe"},
            {"WHEEL_REDEMPTION_MINUTES": "ten"},
            {"WHEEL_REDEMPTION_MINUTES": "0"},
            {"WHEEL_NATIONAL_ID_MAX_LENGTH": "-1"},
            {"WHEEL_ALLOWED_ORDINALS": "1;2"},
            {"WHEEL_CONTACT_URI_TEMPLATE": "whatsapp://send"},
        ]
        for environ in cases:
            with self.subTest(environ=environ):
                with self.assertRaises(ValueError):
                    WheelSettings.from_env(environ)

    def test_prize_weights_checked_at_load_time(self):
        cases = [
            {"WHEEL_DRAW_STRATEGY": "weighted", "WHEEL_PRIZE_WEIGHTS": "3:5"},
            {"WHEEL_ALLOWED_ORDINALS": "1,2", "WHEEL_PRIZE_WEIGHTS": "1:-1"},
            {"WHEEL_ALLOWED_ORDINALS": "1,2", "WHEEL_PRIZE_WEIGHTS": "1:0,2:0"},
        ]
        for environ in cases:
            with self.subTest(environ=environ):
                with self.assertRaises(ValueError):
                    WheelSettings.from_env(environ)

        settings = WheelSettings.from_env(
            {"WHEEL_ALLOWED_ORDINALS": "1,2", "WHEEL_PRIZE_WEIGHTS": "1:0"}
        )
        self.assertEqual(settings.prize_weights, {1: 0.0})

    def test_unknown_draw_strategy_rejected_at_load_time(self):
        with self.assertRaises(ValueError):
            WheelSettings.from_env({"WHEEL_DRAW_STRATEGY": "bogus"})

    def test_length_limits_fit_the_columns(self):
        self.assertEqual(
            WheelSettings(national_id_max_length=20).national_id_max_length, 20
        )
        with self.assertRaises(ValueError):
            WheelSettings(national_id_max_length=21)
        with self.assertRaises(ValueError):
            WheelSettings.from_env({"WHEEL_PHONE_MAX_LENGTH": "25"})

    def test_zero_minutes_allowed_when_redemption_disabled(self):
        settings = WheelSettings(redemption_enabled=False, redemption_minutes=0)
        self.assertFalse(settings.redemption_enabled)


if __name__ == "__main__":
    unittest.main()

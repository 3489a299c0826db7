import unittest
from urllib.parse import unquote

from prizewheel.contact import build_contact_link, build_contact_message


class ContactLinkTests(unittest.TestCase):
    def test_message_mentions_winner_and_prize(self):
        message = build_contact_message("Ana Perez", "12345678", "MOCHILA")
        self.assertIn("Ana Perez", message)
        self.assertIn("12345678", message)
        self.assertIn("MOCHILA", message)

    def test_uri_carries_encoded_message(self):
        link = build_contact_link(
            "Ana Perez", "12345678", "S/150.00 DESCT EN TU PROXIMO CURSO"
        )
        prefix = "whatsapp://send?text="
        self.assertTrue(link.uri.startswith(prefix))
        encoded = link.uri[len(prefix):]
        for char in " /&?":
            self.assertNotIn(char, encoded)
        self.assertEqual(unquote(encoded), link.message)

    def test_custom_templates(self):
        link = build_contact_link(
            "Ana",
            "1",
            "X",
            uri_template="https://wa.me/51999999999?text={text}",
            message_template="{name}|{national_id}|{prize}",
        )
        self.assertEqual(link.message, "Ana|1|X")
        self.assertEqual(link.uri, "https://wa.me/51999999999?text=Ana%7C1%7CX")

    def test_template_without_placeholder_is_rejected(self):
        with self.assertRaises(ValueError):
            build_contact_link("Ana", "1", "X", uri_template="whatsapp://send")


if __name__ == "__main__":
    unittest.main()

import site
import pathlib

test_dir = pathlib.Path(__file__).resolve().parent
root_path = test_dir.parent.parent
site.addsitedir(root_path)

import re
import unittest

from jhu_csse_collector.slug import generate_country_slug


class TestGenerateCountrySlug(unittest.TestCase):
    def test_examples(self):
        examples = {
            "United Kingdom": "united-kingdom",
            "Korea": "korea",
            "Saint Kitts and Nevis": "saint-kitts-and-nevis",
            "^&%(test %country*[]": "test-country",
            "Korea, South": "korea-south",
            "Guinea-Bissau": "guinea-bissau",
            "Cote d'Ivoire": "cote-divoire",
            "": "",
        }

        for country, expected in examples.items():
            with self.subTest(country=country):
                self.assertEqual(generate_country_slug(country), expected)

    def test_consecutive_spaces_are_not_collapsed(self):
        self.assertEqual(generate_country_slug("Bosnia  and Herzegovina"), "bosnia--and-herzegovina")
        self.assertEqual(generate_country_slug(" Spaced "), "-spaced-")

    def test_non_ascii_letters_are_removed(self):
        self.assertEqual(generate_country_slug("Curaçao"), "curaao")
        self.assertEqual(generate_country_slug("Réunion 2"), "runion-")

    def test_output_alphabet(self):
        names = [
            "Congo (Brazzaville)",
            "Summer Olympics 2020",
            "MS Zaandam",
            "Taiwan*",
            "Diamond Princess [ship]",
        ]

        for name in names:
            with self.subTest(name=name):
                self.assertRegex(generate_country_slug(name), re.compile(r"^[a-z\-]*$"))

    def test_idempotent(self):
        for name in ["United Kingdom", "Korea, South", "^&%(test %country*[]"]:
            slug = generate_country_slug(name)
            with self.subTest(name=name):
                self.assertEqual(generate_country_slug(slug), slug)


if __name__ == '__main__':
    unittest.main()

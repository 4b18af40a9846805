"""Tests for the display normalizer: headers and bullets from the model are cleaned up before rendering."""

import unittest

from taste_test.chat.markdown import normalize_markdown


class NormalizeMarkdownTests(unittest.TestCase):
    def test_header_stripped_and_bullet_spaced(self) -> None:
        self.assertEqual(normalize_markdown("# Title\n- item"), "Title\n\nitem")

    def test_deeper_headers_stripped_at_line_start_only(self) -> None:
        self.assertEqual(normalize_markdown("### Drinks\nHouse #1 lager"), "Drinks\nHouse #1 lager")

    def test_bullet_list_gets_blank_lines(self) -> None:
        text = "Top picks:\n- Ramen\n- Gyoza\n- Mochi"
        self.assertEqual(normalize_markdown(text), "Top picks:\n\nRamen\n\nGyoza\n\nMochi")

    def test_leading_bullet_has_no_blank_line_before_it(self) -> None:
        self.assertEqual(normalize_markdown("- Ramen\n- Gyoza"), "Ramen\n\nGyoza")

    def test_excess_newlines_collapsed(self) -> None:
        self.assertEqual(normalize_markdown("Ramen\n\n\n\nGyoza"), "Ramen\n\nGyoza")

    def test_existing_blank_line_before_bullet_not_doubled(self) -> None:
        self.assertEqual(normalize_markdown("Picks:\n\n- Ramen"), "Picks:\n\nRamen")

    def test_one_trailing_newline_stripped(self) -> None:
        self.assertEqual(normalize_markdown("Ramen\n"), "Ramen")
        self.assertEqual(normalize_markdown("Ramen\n\n"), "Ramen\n")

    def test_plain_text_untouched(self) -> None:
        self.assertEqual(normalize_markdown("Try the ramen."), "Try the ramen.")

    def test_second_pass_is_stable(self) -> None:
        once = normalize_markdown("## Best\n- Ramen\n\n\n- Gyoza\n")
        self.assertEqual(normalize_markdown(once), once)

    def test_hash_without_space_is_not_a_header(self) -> None:
        self.assertEqual(normalize_markdown("#1 Ramen\n#2 Gyoza"), "#1 Ramen\n#2 Gyoza")

    def test_bare_header_marker_line_stripped(self) -> None:
        self.assertEqual(normalize_markdown("#\nRamen"), "\nRamen")

    def test_dash_without_space_is_not_a_bullet(self) -> None:
        self.assertEqual(normalize_markdown("Deals:\n-5% off"), "Deals:\n-5% off")
        self.assertEqual(normalize_markdown("a\n---\nb"), "a\n---\nb")

    def test_empty(self) -> None:
        self.assertEqual(normalize_markdown(""), "")


if __name__ == "__main__":
    unittest.main()

import unittest

from phetch import keys
from phetch.action import Keypress, NoOp, Redraw
from phetch.text import Text, clean_lines
from phetch.wrap import wrap_line

URL = "gopher://example.org/0/file.txt"


def words(n: int) -> str:
    return " ".join(["word"] * n)


class CleanLinesTests(unittest.TestCase):
    def test_line_endings_and_terminator(self):
        self.assertEqual(clean_lines("one\r\ntwo\rthree\n.\r\n"), ["one", "two", "three"])

    def test_tabs_and_control_chars(self):
        self.assertEqual(clean_lines("a\tb\x1b[31mc\n"), ["a    b\\x1b[31mc"])

    def test_inner_dot_lines_are_kept(self):
        self.assertEqual(clean_lines(".\nafter\n"), [".", "after"])

    def test_empty(self):
        self.assertEqual(clean_lines(""), [])


class WrapTests(unittest.TestCase):
    def test_breaks_at_spaces(self):
        rows = wrap_line(words(30), 20)
        self.assertTrue(all(len(row) <= 20 for row in rows))
        self.assertEqual(" ".join(rows), words(30))

    def test_hard_split_without_spaces(self):
        self.assertEqual(wrap_line("x" * 25, 10), ["x" * 10, "x" * 10, "x" * 5])

    def test_short_and_empty_lines(self):
        self.assertEqual(wrap_line("short", 20), ["short"])
        self.assertEqual(wrap_line("", 20), [""])


class TextViewTests(unittest.TestCase):
    def test_long_lines_wrap_to_77_columns(self):
        text = Text(URL, "x" * 100 + "\n")
        text.resize(120, 24)
        self.assertEqual(len(text.wrapped()), 2)
        self.assertEqual(len(text.wrapped()[0]), 77)

    def test_wide_mode_does_not_wrap(self):
        text = Text(URL, "x" * 100 + "\n", wide=True)
        text.resize(120, 24)
        self.assertEqual(text.wrapped(), ["x" * 100])
        self.assertIn("x" * 100, text.render())

    def test_narrow_terminal_wraps_to_its_width(self):
        text = Text(URL, words(20) + "\n")
        text.resize(40, 24)
        self.assertTrue(all(len(row) <= 40 for row in text.wrapped()))

    def test_resize_rewraps(self):
        text = Text(URL, words(40) + "\n")
        text.resize(100, 24)
        before = len(text.wrapped())
        text.resize(30, 24)
        self.assertGreater(len(text.wrapped()), before)

    def test_toggling_wide_rewraps(self):
        text = Text(URL, "x" * 100 + "\n")
        text.resize(120, 24)
        self.assertEqual(len(text.wrapped()), 2)
        text.set_wide(True)
        self.assertEqual(len(text.wrapped()), 1)

    def test_scroll_clamps(self):
        text = Text(URL, "\n".join(f"line {i}" for i in range(100)))
        text.resize(80, 24)
        self.assertEqual(text.respond(keys.UP), NoOp())
        self.assertEqual(text.respond(keys.DOWN), Redraw())
        self.assertEqual(text.scroll, 1)
        self.assertEqual(text.respond(keys.PGDN), Redraw())
        self.assertEqual(text.scroll, 16)
        text.respond(keys.END)
        self.assertEqual(text.scroll, 100 - 23)
        self.assertEqual(text.respond(" "), NoOp())
        text.respond(keys.HOME)
        self.assertEqual(text.scroll, 0)

    def test_short_document_does_not_scroll(self):
        text = Text(URL, "one\ntwo\n")
        self.assertEqual(text.respond(keys.DOWN), NoOp())
        self.assertEqual(text.respond(keys.END), NoOp())

    def test_shrinking_the_screen_keeps_scroll_valid(self):
        text = Text(URL, "\n".join(f"line {i}" for i in range(30)))
        text.resize(80, 10)
        text.respond(keys.END)
        text.resize(80, 40)
        self.assertEqual(text.scroll, 0)

    def test_other_keys_go_to_the_ui(self):
        text = Text(URL, "hi\n")
        self.assertEqual(text.respond("g"), Keypress("g"))
        self.assertEqual(text.respond(keys.LEFT), Keypress(keys.LEFT))
        self.assertEqual(text.respond(keys.TAB), NoOp())

    def test_html_is_shown_as_plain_text(self):
        text = Text("gopher://example.org/h/page.html", "<html><body>Hi</body></html>\n")
        self.assertIn("<html><body>Hi</body></html>", text.render())

    def test_render_fills_the_screen(self):
        text = Text(URL, "hi\n")
        text.resize(80, 10)
        self.assertEqual(text.render().count("\r\n"), 9)

    def test_raw_is_kept(self):
        raw = "one\r\ntwo\r\n.\r\n"
        self.assertEqual(Text(URL, raw).raw(), raw)


if __name__ == "__main__":
    unittest.main()

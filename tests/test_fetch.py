import threading
import unittest

from gopherlib import NetworkError
from phetch import color, fetch
from phetch.errors import FatalError


class FetchTests(unittest.TestCase):
    def test_run_returns_the_result(self):
        self.assertEqual(fetch.run(lambda: 42), 42)

    def test_run_reraises_worker_errors(self):
        def work():
            raise NetworkError("Connection refused by example.org:70")

        with self.assertRaises(NetworkError) as cm:
            fetch.run(work)
        self.assertEqual(cm.exception.message, "Connection refused by example.org:70")

    def test_spinner_draws_until_the_work_is_done(self):
        frames = []
        release = threading.Event()

        def draw(s):
            frames.append(s)
            release.set()

        def work():
            release.wait(5)
            return "done"

        result = fetch.run_with_spinner(work, "Loading", 24, draw, interval=0.01)
        self.assertEqual(result, "done")
        self.assertTrue(frames)
        self.assertIn("Loading", frames[0])

        # the spinner has been joined, so nothing draws after return
        count = len(frames)
        threading.Event().wait(0.05)
        self.assertEqual(len(frames), count)

    def test_spinner_stops_on_error(self):
        frames = []

        def work():
            raise NetworkError("Timeout connecting to example.org:70")

        with self.assertRaises(NetworkError):
            fetch.run_with_spinner(work, "", 24, frames.append, interval=0.01)
        count = len(frames)
        threading.Event().wait(0.05)
        self.assertEqual(len(frames), count)

    def test_broken_terminal_stops_only_the_spinner(self):
        def draw(s):
            raise FatalError("terminal went away")

        self.assertEqual(fetch.run_with_spinner(lambda: "ok", "", 24, draw, interval=0.01), "ok")

    def test_spinner_frames(self):
        self.assertTrue(fetch.spinner_frame("Loading", 3, 10).endswith(color.RESET))
        self.assertIn("Loading...", fetch.spinner_frame("Loading", 3, 10))
        self.assertIn("\x1b[10;1H", fetch.spinner_frame("", 0, 10))


if __name__ == "__main__":
    unittest.main()

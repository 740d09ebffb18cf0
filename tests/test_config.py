import os
import tempfile
import unittest
from unittest import mock

import main
from phetch import config
from phetch.errors import ConfigError, PhetchError


class ParseTests(unittest.TestCase):
    def test_defaults(self):
        conf = config.parse("")
        self.assertEqual(conf.start, config.DEFAULT_START)
        self.assertFalse(conf.tls)
        self.assertFalse(conf.tor)
        self.assertFalse(conf.wide)
        self.assertFalse(conf.emoji)

    def test_full_file(self):
        conf = config.parse(
            "# phetch.conf\n"
            "start gopher://example.org/1/\n"
            "\n"
            "tls yes\n"
            "wide true\n"
            "emoji no\n"
            "downloads /tmp/gopher\n"
        )
        self.assertEqual(conf.start, "gopher://example.org/1/")
        self.assertTrue(conf.tls)
        self.assertTrue(conf.wide)
        self.assertFalse(conf.emoji)
        self.assertEqual(conf.downloads, "/tmp/gopher")

    def test_unknown_key(self):
        with self.assertRaises(ConfigError) as cm:
            config.parse("colour yes\n")
        self.assertIn("line 1", cm.exception.message)

    def test_duplicate_key(self):
        with self.assertRaises(ConfigError) as cm:
            config.parse("tls yes\ntls no\n")
        self.assertIn("line 2", cm.exception.message)

    def test_bad_boolean(self):
        with self.assertRaises(ConfigError):
            config.parse("wide sometimes\n")

    def test_tls_and_tor_conflict(self):
        with self.assertRaises(ConfigError):
            config.parse("tls yes\ntor yes\n")


class LoadTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        patcher = mock.patch.dict(os.environ, {"PHETCH_DIR": self.tmp.name})
        patcher.start()
        self.addCleanup(patcher.stop)

    def write_conf(self, text: str) -> str:
        path = os.path.join(self.tmp.name, config.FILENAME)
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(text)
        return path

    def test_missing_default_file_means_defaults(self):
        self.assertEqual(config.load().start, config.DEFAULT_START)

    def test_reads_phetch_dir(self):
        self.write_conf("start gopher://example.org/1/phlog\n")
        self.assertEqual(config.load().start, "gopher://example.org/1/phlog")

    def test_missing_explicit_file_is_an_error(self):
        with self.assertRaises(ConfigError):
            config.load(os.path.join(self.tmp.name, "nope.conf"))

    def test_flags_override_the_file(self):
        self.write_conf("wide yes\ntls yes\n")
        args = main.build_parser().parse_args(["-T", "-e"])
        conf = main.load_config(args)
        self.assertTrue(conf.wide)
        self.assertFalse(conf.tls)
        self.assertTrue(conf.emoji)

    def test_no_config_ignores_the_file(self):
        self.write_conf("wide yes\n")
        conf = main.load_config(main.build_parser().parse_args(["-C"]))
        self.assertFalse(conf.wide)

    def test_tls_and_tor_flags_conflict(self):
        with self.assertRaises(PhetchError):
            main.load_config(main.build_parser().parse_args(["-t", "-o"]))

    def test_bad_config_exits_with_an_error(self):
        self.write_conf("bogus\n")
        with mock.patch("sys.stderr") as stderr:
            self.assertEqual(main.run(["-r", "gopher://example.org/"]), 2)
        stderr.write.assert_called_once()


if __name__ == "__main__":
    unittest.main()

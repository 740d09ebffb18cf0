import os
import socket
import tempfile
import unittest
from unittest import mock

import gopherlib
from gopherlib import ItemType, NetworkError, Security, parse_menu
from localgopher import item_type_for, start_local_gopher


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class LocalServerTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.tmp = tempfile.TemporaryDirectory()
        root = os.path.join(cls.tmp.name, "site")
        os.mkdir(root)
        # a sibling whose name shares the root's prefix
        os.mkdir(os.path.join(cls.tmp.name, "site2"))
        with open(os.path.join(cls.tmp.name, "site2", "secret.txt"), "w", encoding="utf-8") as fh:
            fh.write("TOPSECRET\n")
        with open(os.path.join(root, "hello.txt"), "w", encoding="utf-8") as fh:
            fh.write("Hello, gopherspace!\nSecond line\n")
        with open(os.path.join(root, "blob.bin"), "wb") as fh:
            fh.write(bytes(range(256)) * 4)
        os.mkdir(os.path.join(root, "phlog"))
        with open(os.path.join(root, "phlog", "gophermap"), "w", encoding="utf-8") as fh:
            fh.write("iMy phlog\t\tfake\t0\n0First post\t/phlog/first.txt\tlocalhost\t70\n")

        cls.server = start_local_gopher(root, port=0)
        cls.base = f"gopher://127.0.0.1:{cls.server.port}"

    @classmethod
    def tearDownClass(cls):
        cls.server.shutdown()
        cls.server.server_close()
        cls.tmp.cleanup()

    def test_root_listing(self):
        security, body = gopherlib.fetch_url(self.base + "/1/")
        self.assertIs(security, Security.PLAIN)
        lines = parse_menu(body)
        by_name = {line.text: line for line in lines}
        self.assertIs(by_name["hello.txt"].type, ItemType.TEXT)
        self.assertIs(by_name["blob.bin"].type, ItemType.BINARY)
        self.assertIs(by_name["phlog"].type, ItemType.MENU)
        self.assertEqual(by_name["hello.txt"].url(), self.base + "/0/hello.txt")

    def test_gophermap_is_served_verbatim(self):
        _, body = gopherlib.fetch_url(self.base + "/1/phlog")
        lines = parse_menu(body)
        self.assertEqual(lines[0].text, "My phlog")
        self.assertEqual(lines[1].selector, "/phlog/first.txt")

    def test_text_file(self):
        _, body = gopherlib.fetch_url(self.base + "/0/hello.txt")
        self.assertTrue(body.startswith("Hello, gopherspace!\r\nSecond line\r\n"))
        self.assertTrue(body.endswith(".\r\n"))

    def test_search_sends_query_after_tab(self):
        _, body = gopherlib.fetch_url(self.base + "/7/?hel")
        names = [line.text for line in parse_menu(body) if not line.type.is_info()]
        self.assertEqual(names, ["hello.txt"])

    def test_missing_selector_is_an_error_line(self):
        _, body = gopherlib.fetch_url(self.base + "/0/nope.txt")
        self.assertIs(parse_menu(body)[0].type, ItemType.ERROR)

    def test_escaping_the_root_is_refused(self):
        _, body = gopherlib.fetch_url(self.base + "/0/../../etc/passwd")
        self.assertIs(parse_menu(body)[0].type, ItemType.ERROR)

    def test_sibling_directory_with_the_same_prefix_is_refused(self):
        _, body = gopherlib.fetch_url(self.base + "/0/../site2/secret.txt")
        self.assertNotIn("TOPSECRET", body)
        self.assertIs(parse_menu(body)[0].type, ItemType.ERROR)

    def test_download_writes_unique_files(self):
        with tempfile.TemporaryDirectory() as out:
            path, size = gopherlib.download_url(self.base + "/9/blob.bin", out)
            self.assertEqual(path, os.path.join(out, "blob.bin"))
            self.assertEqual(size, 1024)
            with open(path, "rb") as fh:
                self.assertEqual(fh.read(), bytes(range(256)) * 4)

            second, _ = gopherlib.download_url(self.base + "/9/blob.bin", out)
            self.assertEqual(second, os.path.join(out, "blob.bin.1"))


class ConnectionErrorTests(unittest.TestCase):
    def test_connection_refused(self):
        port = _free_port()
        with self.assertRaises(NetworkError) as cm:
            gopherlib.fetch_url(f"gopher://127.0.0.1:{port}/1/")
        self.assertIn("127.0.0.1", cm.exception.message)

    def test_missing_host(self):
        with self.assertRaises(NetworkError):
            gopherlib.fetch_url("gopher:///1/")

    def test_failed_download_leaves_no_file(self):
        port = _free_port()
        with tempfile.TemporaryDirectory() as out:
            with self.assertRaises(NetworkError):
                gopherlib.download_url(f"gopher://127.0.0.1:{port}/9/x.bin", out)
            self.assertEqual(os.listdir(out), [])

    def test_invalid_host_names(self):
        for host in ("a..b", "x" * 64 + ".example.org"):
            with self.assertRaises(NetworkError) as cm:
                gopherlib.fetch_url(f"gopher://{host}/1/")
            self.assertEqual(cm.exception.message, f"Error getting address for {host}")

    def test_invalid_host_through_tor(self):
        proxy = mock.Mock()
        proxy.recv.return_value = b"\x05\x00"
        with mock.patch("gopherlib.socket.create_connection", return_value=proxy):
            with self.assertRaises(NetworkError):
                gopherlib.request("a..b", 70, "/", tor=True)
        proxy.close.assert_called_once()

    def test_write_error_removes_the_partial_file(self):
        sock = mock.Mock()

        def chunks(_sock):
            yield b"partial"
            raise OSError(28, "No space left on device")

        with tempfile.TemporaryDirectory() as out:
            with mock.patch("gopherlib.request", return_value=(sock, Security.PLAIN)), \
                    mock.patch("gopherlib._iter_chunks", chunks):
                with self.assertRaises(gopherlib.GopherError) as cm:
                    gopherlib.download_url("gopher://example.org/9/big.iso", out)
            self.assertIn("No space left on device", cm.exception.message)
            self.assertEqual(os.listdir(out), [])


class FilenameTests(unittest.TestCase):
    def test_download_filename(self):
        self.assertEqual(gopherlib.download_filename(gopherlib.parse_url("gopher://h/9/files/a b.zip")), "a_b.zip")
        self.assertEqual(gopherlib.download_filename(gopherlib.parse_url("gopher://h/9/")), "download")
        self.assertEqual(gopherlib.download_filename(gopherlib.parse_url("gopher://h/9/.hidden")), "hidden")

    def test_item_type_for(self):
        with tempfile.TemporaryDirectory() as root:
            self.assertEqual(item_type_for(root), "1")
            self.assertEqual(item_type_for(os.path.join(root, "notes.txt")), "0")
            self.assertEqual(item_type_for(os.path.join(root, "pic.png")), "p")
            self.assertEqual(item_type_for(os.path.join(root, "pic.gif")), "g")
            self.assertEqual(item_type_for(os.path.join(root, "page.html")), "h")
            self.assertEqual(item_type_for(os.path.join(root, "thing.unknownext")), "9")


if __name__ == "__main__":
    unittest.main()

import datetime
import os
import pathlib
import tempfile
import unittest as ut
import zipfile

from unifs import FileSystem, FileType, parse_name, SELECT_ALL, SELECT_FILES
from unifs.exc import ReadOnlyError, ProviderIOError, UnsupportedOperationError, ConfigError
from unifs.providers import LocalFileProvider, ZipFileProvider
from .helpers import memory_file_system


class TestLocalProvider(ut.TestCase):

    def setUp(self):
        self._temp_dir = tempfile.TemporaryDirectory()
        self.base = pathlib.Path(self._temp_dir.name)
        self.provider = LocalFileProvider(self.base)
        self.fs = FileSystem(parse_name("file:///"), self.provider)
        (self.base / "a").mkdir()
        with open(self.base / "a" / "b.txt", "wb") as h:
            h.write(b"local content")

    def tearDown(self):
        self.fs.close()
        self._temp_dir.cleanup()

    def test_folder_with_one_file(self):
        root = self.fs.get_root()
        children = root.get_child("a").get_children()
        self.assertEqual([x.name.base_name for x in children], ["b.txt"])
        file = root.resolve_file("a/b.txt")
        self.assertTrue(file.exists())
        file.delete()
        self.assertFalse(file.exists())
        self.assertFalse((self.base / "a" / "b.txt").exists())
        self.assertTrue(root.resolve_file("a").exists())

    def test_types(self):
        self.assertEqual(self.fs.resolve_file("/a").get_type(), FileType.FOLDER)
        self.assertEqual(self.fs.resolve_file("/a/b.txt").get_type(), FileType.FILE)
        self.assertEqual(self.fs.resolve_file("/a/nope").get_type(), FileType.IMAGINARY)

    def test_local_path(self):
        name = parse_name("file:///a/b.txt")
        self.assertEqual(self.provider.local_path(name), self.base.absolute() / "a" / "b.txt")
        if os.name != "nt":
            self.assertEqual(LocalFileProvider().local_path(name), pathlib.Path("/a/b.txt"))

    def test_create_and_write(self):
        file = self.fs.resolve_file("/x/y/z.bin")
        file.get_content().write_bytes(b"\x01\x02")
        self.assertTrue((self.base / "x" / "y").is_dir())
        with open(self.base / "x" / "y" / "z.bin", "rb") as h:
            self.assertEqual(h.read(), b"\x01\x02")
        self.fs.resolve_file("/x/folder").create_folder()
        self.assertTrue((self.base / "x" / "folder").is_dir())

    def test_copy_tree(self):
        write_to = self.base / "src" / "sub"
        write_to.mkdir(parents=True)
        (self.base / "src" / "x.txt").write_bytes(b"xx")
        (write_to / "y.txt").write_bytes(b"yy")
        dest = self.fs.resolve_file("/dst")
        dest.copy_from(self.fs.resolve_file("/src"), SELECT_ALL)
        self.assertEqual((self.base / "dst" / "x.txt").read_bytes(), b"xx")
        self.assertEqual((self.base / "dst" / "sub" / "y.txt").read_bytes(), b"yy")

    def test_delete_files_keeps_folders(self):
        (self.base / "a" / "deeper").mkdir()
        (self.base / "a" / "deeper" / "c.txt").write_bytes(b"c")
        self.assertEqual(self.fs.resolve_file("/a").delete(SELECT_FILES), 2)
        self.assertTrue((self.base / "a" / "deeper").is_dir())
        self.assertEqual(list((self.base / "a").rglob("*.txt")), [])

    def test_metadata(self):
        content = self.fs.resolve_file("/a/b.txt").get_content()
        self.assertEqual(content.get_size(), 13)
        modified = content.get_last_modified()
        self.assertEqual(modified.utcoffset(), datetime.timedelta(0))

    def test_writeable(self):
        self.assertTrue(self.fs.resolve_file("/new/deep/file").is_writeable())

    def test_errors_are_wrapped(self):
        with self.assertRaises(ProviderIOError):
            self.provider.open_read(parse_name("file:///missing.txt"))
        with self.assertRaises(ProviderIOError):
            self.provider.make_folder(parse_name("file:///a"))

    def test_build(self):
        provider = LocalFileProvider.build(parse_name("file:///"), {"base_dir": str(self.base)})
        self.assertEqual(provider.local_path(parse_name("file:///q")), self.base.absolute() / "q")


class TestZipProvider(ut.TestCase):

    def setUp(self):
        self._temp_dir = tempfile.TemporaryDirectory()
        self.archive = pathlib.Path(self._temp_dir.name) / "test.zip"
        with zipfile.ZipFile(self.archive, "w") as zf:
            zf.writestr("docs/readme.txt", b"zipped text")
            zf.writestr("docs/sub/", b"")
            zf.writestr("data/values.csv", b"a,b\n1,2\n")
        self.provider = ZipFileProvider(self.archive)
        self.fs = FileSystem(parse_name("zip:///"), self.provider)

    def tearDown(self):
        self.fs.close()
        self._temp_dir.cleanup()

    def test_structure(self):
        root = self.fs.get_root()
        self.assertEqual([x.name.base_name for x in root.get_children()], ["docs", "data"])
        docs = root.get_child("docs")
        self.assertEqual([x.name.base_name for x in docs.get_children()], ["readme.txt", "sub"])
        self.assertEqual(docs.get_child("sub").get_type(), FileType.FOLDER)
        self.assertEqual(root.get_child("data").get_type(), FileType.FOLDER)
        self.assertIsNone(root.get_child("nothing"))

    def test_read(self):
        content = self.fs.resolve_file("/docs/readme.txt").get_content()
        self.assertEqual(content.read_bytes(), b"zipped text")
        self.assertEqual(content.get_size(), 11)
        modified = content.get_last_modified()
        self.assertIsInstance(modified, datetime.datetime)
        self.assertEqual(modified.utcoffset(), datetime.timedelta(0))

    def test_read_only(self):
        with self.assertRaises(ReadOnlyError):
            self.fs.resolve_file("/docs/readme.txt").delete()
        with self.assertRaises(ReadOnlyError):
            self.fs.resolve_file("/new").create_folder()
        with self.assertRaises(ReadOnlyError):
            self.fs.resolve_file("/docs/new.txt").get_content().write_bytes(b"x")
        with self.assertRaises(UnsupportedOperationError):
            self.provider.open_write(parse_name("zip:///docs/new.txt"))

    def test_copy_out_of_archive(self):
        mem_fs, _ = memory_file_system()
        dest = mem_fs.resolve_file("/extracted")
        self.assertEqual(dest.copy_from(self.fs.get_root(), SELECT_ALL), 6)
        self.assertEqual(mem_fs.resolve_file("/extracted/data/values.csv").get_content().read_bytes(), b"a,b\n1,2\n")
        self.assertEqual(mem_fs.resolve_file("/extracted/docs/sub").get_type(), FileType.FOLDER)

    def test_reopen_after_close(self):
        file = self.fs.resolve_file("/docs/readme.txt")
        self.assertTrue(file.exists())
        self.fs.close()
        self.assertEqual(file.get_content().read_bytes(), b"zipped text")

    def test_bad_archive(self):
        not_a_zip = pathlib.Path(self._temp_dir.name) / "bad.zip"
        not_a_zip.write_bytes(b"not a zip file")
        fs = FileSystem(parse_name("zip://bad/"), ZipFileProvider(not_a_zip))
        with self.assertRaises(ProviderIOError):
            fs.get_root().exists()

    def test_build(self):
        provider = ZipFileProvider.build(parse_name("zip:///"), {"archive": str(self.archive)})
        self.assertEqual(provider.archive_path, self.archive)
        with self.assertRaises(ConfigError):
            ZipFileProvider.build(parse_name("zip:///"), {})

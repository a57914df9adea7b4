"""Tests for mac_tidy.services.archive_service."""
import os
import shutil
import tarfile
import tempfile
import unittest

from mac_tidy.core.errors import ExecError
from mac_tidy.services.archive_service import ArchiveBuilder, tar_path_for
from mac_tidy.services.compression import BackendSelector, CompressionBackend
from mac_tidy.services.shell import Shell

from tests.fakes import FakeShell

HAVE_TOOLS = shutil.which("tar") is not None and shutil.which("gzip") is not None

GZIP = CompressionBackend("gzip", command=lambda t: ["gzip", "-k", t])
BROKEN = CompressionBackend("broken", command=lambda t: ["false", t])

FILES = {
    "a.txt": b"hello\n",
    "nested/b.bin": bytes(range(256)) * 40,
    "nested/deeper/c.txt": b"x" * 10000,
}


class TestTarPath(unittest.TestCase):
    def test_names(self) -> None:
        self.assertEqual(tar_path_for(["project/"]), "project.tar")
        self.assertEqual(tar_path_for(["a", "b"]), "archive.tar")
        self.assertEqual(tar_path_for(["a"], output="out"), "out.tar")
        self.assertEqual(tar_path_for(["a"], output="out.tar"), "out.tar")
        self.assertEqual(tar_path_for(["a"], output="backup.tar.gz"), "backup.tar")
        self.assertEqual(tar_path_for(["a"], output="backup.gz"), "backup.tar")
        self.assertEqual(tar_path_for(["/"]), "archive.tar")

    def test_dot_source_is_named_after_its_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            cwd = os.getcwd()
            os.makedirs(os.path.join(tmp, "proj"))
            os.chdir(os.path.join(tmp, "proj"))
            try:
                here = os.getcwd()
                expected = os.path.join(os.path.dirname(here), "proj.tar")
                self.assertEqual(tar_path_for(["."]), expected)
                self.assertEqual(tar_path_for(["sub/.."]), expected)
            finally:
                os.chdir(cwd)


class ArchiveCase(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.cwd = os.getcwd()
        os.chdir(self.tmp.name)
        for rel, data in FILES.items():
            os.makedirs(os.path.dirname(os.path.join("src", rel)), exist_ok=True)
            with open(os.path.join("src", rel), "wb") as f:
                f.write(data)
        for junk in ("src/.DS_Store", "src/nested/.DS_Store", "src/._a.txt"):
            with open(junk, "wb") as f:
                f.write(b"junk")

    def tearDown(self) -> None:
        os.chdir(self.cwd)
        self.tmp.cleanup()


@unittest.skipUnless(HAVE_TOOLS, "tar and gzip are required")
class TestArchiveRoundTrip(ArchiveCase):
    def test_round_trip_matches_input(self) -> None:
        job = ArchiveBuilder(Shell(), BackendSelector([GZIP])).build(["src"])
        self.assertEqual(job.archive_path, "src.tar.gz")
        self.assertEqual(job.backend.name, "gzip")
        self.assertFalse(os.path.exists("src.tar"))
        self.assertGreater(job.original_size_bytes, 0)
        self.assertEqual(job.compressed_size_bytes, os.path.getsize("src.tar.gz"))
        self.assertAlmostEqual(job.ratio, job.compressed_size_bytes / job.original_size_bytes)

        with tarfile.open("src.tar.gz", "r:gz") as tar:
            contents = {
                m.name: tar.extractfile(m).read()
                for m in tar.getmembers()
                if m.isfile()
            }
        self.assertEqual(contents, {f"src/{rel}": data for rel, data in FILES.items()})

    def test_compression_failure_keeps_tar_and_raises(self) -> None:
        with self.assertRaises(ExecError):
            ArchiveBuilder(Shell(), BackendSelector([BROKEN])).build(["src"])
        self.assertTrue(os.path.isfile("src.tar"))
        self.assertFalse(os.path.exists("src.tar.gz"))

    def test_existing_archive_is_not_overwritten(self) -> None:
        with open("src.tar.gz", "wb") as f:
            f.write(b"previous")
        with self.assertRaises(ExecError):
            ArchiveBuilder(Shell(), BackendSelector([GZIP])).build(["src"])
        with open("src.tar.gz", "rb") as f:
            self.assertEqual(f.read(), b"previous")
        self.assertFalse(os.path.exists("src.tar"))

    def test_dot_source_archives_beside_the_directory(self) -> None:
        os.chdir("src")
        job = ArchiveBuilder(Shell(), BackendSelector([GZIP])).build(["."])
        self.assertEqual(os.path.basename(job.archive_path), "src.tar.gz")
        self.assertTrue(os.path.isfile(os.path.join("..", "src.tar.gz")))
        self.assertFalse([n for n in os.listdir(".") if ".tar" in n])


class BundleFails(FakeShell):
    def run(self, args, need_sudo=False, check=True, timeout=None, env=None):
        if args[0] == "tar":
            with open(args[2], "wb") as f:
                f.write(b"partial")
            self.fail.append([str(a) for a in args])
        return super().run(args, need_sudo, check, timeout, env)


class TestArchiveFailures(ArchiveCase):
    def test_bundling_failure_leaves_no_output(self) -> None:
        shell = BundleFails()
        with self.assertRaises(ExecError):
            ArchiveBuilder(shell, BackendSelector([GZIP])).build(["src"])
        self.assertFalse(os.path.exists("src.tar"))
        self.assertEqual(len(shell.calls), 1)

    def test_bundle_excludes_metadata(self) -> None:
        shell = FakeShell()
        ArchiveBuilder(shell).bundle(["src"], "src.tar")
        self.assertIn("--exclude=.DS_Store", shell.calls[0])
        self.assertIn("--exclude=._*", shell.calls[0])
        self.assertEqual(shell.calls[0][-2:], ["--", "src"])

    def test_missing_source(self) -> None:
        shell = FakeShell()
        with self.assertRaises(ExecError):
            ArchiveBuilder(shell).build(["does-not-exist"])
        self.assertEqual(shell.calls, [])

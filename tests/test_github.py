import tempfile
import unittest
from pathlib import Path

from helpers import FakeGitHub, StaticCredentials

from repo_ready.config import RepoRef
from repo_ready.github import GitHubClient, GitHubError, NotAFileError, NotFoundError, fetch_file


class FetchFileTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)
        self.github = FakeGitHub()
        self.client = GitHubClient(StaticCredentials("gho_abc"), session=self.github)
        self.ref = RepoRef("acme", "templates", "main")

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_writes_decoded_content(self) -> None:
        content = "# Issue\n\nDescribe the bug. ✨\n" * 40
        self.github.add_file("acme", "templates", "main", ".github/ISSUE_TEMPLATE.md", content)
        target = self.root / ".github" / "ISSUE_TEMPLATE.md"

        fetch_file(self.client, self.ref, ".github/ISSUE_TEMPLATE.md", str(target))

        self.assertEqual(target.read_text(encoding="utf-8"), content)

    def test_binary_content_is_byte_identical(self) -> None:
        data = bytes(range(256)) * 3
        self.github.add_file("acme", "templates", "main", "bin/blob", data)
        target = self.root / "blob"
        fetch_file(self.client, self.ref, "bin/blob", str(target))
        self.assertEqual(target.read_bytes(), data)

    def test_overwrites_existing_file(self) -> None:
        self.github.add_file("acme", "templates", "main", "README.md", "new")
        target = self.root / "README.md"
        target.write_text("old content that is longer")
        fetch_file(self.client, self.ref, "README.md", str(target))
        self.assertEqual(target.read_text(), "new")

    def test_uses_branch_and_token(self) -> None:
        self.github.add_file("acme", "templates", "dev", "a.txt", "dev")
        fetch_file(self.client, RepoRef("acme", "templates", "dev"), "a.txt", str(self.root / "a.txt"))
        call = self.github.calls[-1]
        self.assertEqual(call["params"], {"ref": "dev"})
        self.assertEqual(call["headers"]["Authorization"], "Bearer gho_abc")

    def test_directory_is_rejected_without_writing(self) -> None:
        self.github.dirs.add(("acme", "templates", "main", ".github"))
        target = self.root / "out" / ".github"
        with self.assertRaises(NotAFileError):
            fetch_file(self.client, self.ref, ".github", str(target))
        self.assertFalse(target.exists())
        self.assertFalse((self.root / "out").exists())

    def test_missing_path_names_path_and_branch(self) -> None:
        with self.assertRaises(NotFoundError) as ctx:
            fetch_file(self.client, self.ref, "nope.md", str(self.root / "nope.md"))
        self.assertEqual(ctx.exception.status, 404)
        self.assertIn("nope.md", str(ctx.exception))
        self.assertIn("main", str(ctx.exception))
        self.assertFalse((self.root / "nope.md").exists())

    def test_large_file_is_fetched_raw(self) -> None:
        data = bytes(range(256)) * 5000
        self.github.add_file("acme", "templates", "main", "assets/logo.psd", data)
        self.github.large.add(("acme", "templates", "main", "assets/logo.psd"))
        target = self.root / "assets" / "logo.psd"

        written = fetch_file(self.client, self.ref, "assets/logo.psd", str(target))

        self.assertEqual(written, len(data))
        self.assertEqual(target.read_bytes(), data)
        raw_call = self.github.calls[-1]
        self.assertEqual(raw_call["headers"]["Accept"], "application/vnd.github.raw")
        self.assertEqual(raw_call["params"], {"ref": "main"})

    def test_short_raw_body_is_rejected_without_writing(self) -> None:
        key = ("acme", "templates", "main", "big.bin")
        self.github.add_file(*key, b"x" * 4096)
        self.github.large.add(key)
        self.github.truncated.add(key)
        target = self.root / "out" / "big.bin"
        with self.assertRaises(GitHubError):
            fetch_file(self.client, self.ref, "big.bin", str(target))
        self.assertFalse((self.root / "out").exists())

    def test_reserved_characters_in_path_are_quoted(self) -> None:
        self.github.add_file("acme", "templates", "main", "docs/a#b?.md", "hash")
        target = self.root / "a.md"
        fetch_file(self.client, self.ref, "docs/a#b?.md", str(target))
        self.assertEqual(target.read_text(), "hash")
        self.assertIn("/contents/docs/a%23b%3F.md", self.github.calls[-1]["url"])


if __name__ == "__main__":
    unittest.main()

"""
CLI tests: argument validation, output modes and the trash hand-off.
Nothing is ever sent to the real trash here; FileService.move_to_trash is mocked.
"""
import json
import sys
from unittest import mock

import pytest

from dupsense.cli import CLIApplication
from dupsense.services.file_service import FileService


def run_cli(*argv):
    CLIApplication().run(list(argv))


@pytest.fixture
def workspace(make_file, temp_dir):
    content = bytes(range(250)) * 2
    make_file("a/doc.txt", content, age_days=0)
    make_file("b/doc_copy.txt", content, age_days=40)
    make_file("c/unique.txt", b"u" * 500)
    # Tie: neither copy is a clear leader
    make_file("x/y/one.bin", b"t" * 700, age_days=15)
    make_file("x/z/two.bin", b"t" * 700, age_days=15)
    return temp_dir


class TestValidation:

    def test_force_requires_trash_recommended(self, workspace, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run_cli("-i", str(workspace), "--force")

        assert exc_info.value.code == 1
        assert "--force can only be used with --trash-recommended" in capsys.readouterr().err

    def test_json_and_trash_are_exclusive(self, workspace, capsys):
        with pytest.raises(SystemExit):
            run_cli("-i", str(workspace), "--json", "--trash-recommended", "--force")

        assert "--json cannot be combined" in capsys.readouterr().err

    def test_trash_without_force_needs_a_terminal(self, workspace, capsys):
        with mock.patch.object(sys.stdin, "isatty", return_value=False):
            with pytest.raises(SystemExit):
                run_cli("-i", str(workspace), "--trash-recommended")

        assert "non-interactive session" in capsys.readouterr().err

    @pytest.mark.parametrize("flag, value, message", [
        ("--workers", "0", "--workers must be at least 1"),
        ("--max-groups", "-1", "--max-groups cannot be negative"),
        ("--min-size", "abc", "Invalid size format"),
    ])
    def test_bad_values(self, workspace, capsys, flag, value, message):
        with pytest.raises(SystemExit):
            run_cli("-i", str(workspace), flag, value)

        assert message in capsys.readouterr().err

    def test_max_below_min(self, workspace, capsys):
        with pytest.raises(SystemExit):
            run_cli("-i", str(workspace), "-m", "1MB", "-M", "1KB")

        assert "Maximum size cannot be less than minimum size" in capsys.readouterr().err

    def test_unknown_hash_is_rejected_by_argparse(self, workspace):
        with pytest.raises(SystemExit) as exc_info:
            run_cli("-i", str(workspace), "--hash", "crc32")

        assert exc_info.value.code == 2

    def test_missing_root_exits_with_error(self, temp_dir, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run_cli("-i", str(temp_dir / "nope"))

        assert exc_info.value.code == 1
        assert "Directory does not exist" in capsys.readouterr().err


class TestOutput:

    def test_text_output(self, workspace, capsys):
        run_cli("-i", str(workspace), "-m", "100")

        out = capsys.readouterr().out
        assert f"Scanning directory: {workspace}" in out
        assert "Duplicate groups: 2" in out
        assert "[KEEP] a/doc.txt" in out
        assert "Review manually - no clear leader" in out

    def test_json_output(self, workspace, capsys):
        run_cli("-i", str(workspace), "-m", "100", "--json")

        data = json.loads(capsys.readouterr().out)
        assert data["total_groups"] == 2
        assert data["groups"][0]["recommended_keep"] == "a/doc.txt"
        assert data["total_wasted_bytes"] == 500 + 700

    def test_workspace_relative_input(self, workspace, capsys):
        run_cli("-w", str(workspace), "-i", "x", "-m", "100", "--json")

        data = json.loads(capsys.readouterr().out)
        assert [f["path"] for f in data["groups"][0]["files"]] == ["x/y/one.bin", "x/z/two.bin"]

    def test_extension_filter(self, workspace, capsys):
        run_cli("-i", str(workspace), "-m", "100", "-x", ".bin", "--json")

        data = json.loads(capsys.readouterr().out)
        assert data["total_groups"] == 1
        assert data["stats"]["skipped_by_extension"] == 3

    def test_quiet_prints_nothing(self, workspace, capsys):
        run_cli("-i", str(workspace), "-q")

        assert capsys.readouterr().out == ""


class TestTrashRecommended:

    def test_only_clear_leader_groups_are_trashed(self, workspace):
        with mock.patch.object(FileService, "move_to_trash") as mock_trash:
            run_cli("-i", str(workspace), "-m", "100", "--trash-recommended", "--force")

        trashed = [call.args[0] for call in mock_trash.call_args_list]
        assert trashed == [str(workspace / "b" / "doc_copy.txt")]

    def test_nothing_to_trash(self, temp_dir, make_file, capsys):
        make_file("x/y/one.bin", b"t" * 700)
        make_file("x/z/two.bin", b"t" * 700)

        with mock.patch.object(FileService, "move_to_trash") as mock_trash:
            run_cli("-i", str(temp_dir), "-m", "100", "--trash-recommended", "--force")

        mock_trash.assert_not_called()
        assert "No files are recommended for deletion." in capsys.readouterr().out

    def test_failures_are_reported_and_do_not_stop(self, workspace, capsys):
        with mock.patch.object(FileService, "move_to_trash", side_effect=RuntimeError("Failed to move to trash: busy")):
            run_cli("-i", str(workspace), "-m", "100", "--trash-recommended", "--force")

        assert "Partial success: 0/1 files moved to trash." in capsys.readouterr().out

    def test_user_can_decline(self, workspace, capsys):
        with mock.patch.object(sys.stdin, "isatty", return_value=True), \
                mock.patch.object(sys.stdout, "isatty", return_value=True), \
                mock.patch("builtins.input", return_value="n"), \
                mock.patch.object(FileService, "move_to_trash") as mock_trash:
            run_cli("-i", str(workspace), "-m", "100", "--trash-recommended")

        mock_trash.assert_not_called()
        assert "Deletion cancelled by user." in capsys.readouterr().out


class TestArgumentParsing:

    def test_defaults(self):
        args = CLIApplication.parse_args([])

        assert args.input == "."
        assert args.workspace is None
        assert args.min_size == "1KB"
        assert args.hash == "xxh128"
        assert args.order == "discovery"
        assert args.workers == 1
        assert args.max_groups == 5
        assert not args.json and not args.trash_recommended and not args.force

    def test_create_params_maps_aliases(self, temp_dir):
        app = CLIApplication()
        args = app.parse_args([
            "-i", str(temp_dir), "-m", "2KB", "-M", "1MB", "-x", "jpg", ".PNG",
            "--hash", "sha256", "--order", "waste", "--workers", "3",
        ])

        params = app.create_params(args)

        assert params.min_size_bytes == 2048
        assert params.max_size_bytes == 1024 * 1024
        assert params.extensions == [".jpg", ".png"]
        assert params.algorithm.value == "sha256"
        assert params.order.value == "waste"
        assert params.workers == 3

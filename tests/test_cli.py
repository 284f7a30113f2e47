"""Tests for the command line — flags, exit codes and end-to-end runs."""

import json
from pathlib import Path

import pytest

from meeting_dice import cli
from meeting_dice.config import get_settings
from meeting_dice.service import SAVED_MESSAGE


def _run(path: Path, *argv: str, answers: tuple = ("y",)) -> tuple[int, list[str]]:
    script = iter(answers)
    out: list[str] = []

    def read_line() -> str:
        try:
            return next(script)
        except StopIteration:
            raise EOFError from None

    code = cli.main(
        ["--data-file", str(path), *argv],
        read_line=read_line,
        write=out.append,
    )
    return code, out


class TestParser:
    def test_single_and_batch_flags_conflict(self) -> None:
        parser = cli.build_parser()
        for flag in ("add", "remove", "hide"):
            with pytest.raises(SystemExit):
                parser.parse_args([f"--{flag}-member", "Ana", f"--{flag}-members", "Ben"])

    def test_invocation_from_single_flags(self) -> None:
        args = cli.build_parser().parse_args(
            ["--add-member", "Ana", "--hide-member", "Ben", "--remove-member", "Cleo"],
        )
        invocation = cli.invocation_from_args(args)
        assert invocation.add == ["Ana"]
        assert invocation.hide == ["Ben"]
        assert invocation.remove == ["Cleo"]
        assert not invocation.run

    def test_invocation_from_batch_flags(self) -> None:
        args = cli.build_parser().parse_args(
            ["--add-members", "Ana", "Ben", "--run", "--note-taker", "--list"],
        )
        invocation = cli.invocation_from_args(args)
        assert invocation.add == ["Ana", "Ben"]
        assert invocation.run and invocation.note_taker and invocation.list_members


class TestMain:
    def test_first_run_creates_state(self, tmp_path: Path) -> None:
        path = tmp_path / "data.json"
        code, out = _run(path, "--list")
        assert code == cli.EXIT_OK
        assert out == ["The members list is empty.", SAVED_MESSAGE]
        assert json.loads(path.read_text(encoding="utf-8"))["members"] == []

    def test_add_and_run(self, tmp_path: Path) -> None:
        path = tmp_path / "data.json"
        code, out = _run(
            path, "--add-members", "Ana", "Ben", "--last-chair", "Ana",
            answers=("n", "maybe", "yes"),
        )
        # --last-chair is validated against the roster before the adds.
        assert code == cli.EXIT_USAGE
        assert json.loads(path.read_text(encoding="utf-8"))["members"] == []

        code, _ = _run(path, "--add-members", "Ana", "Ben")
        assert code == cli.EXIT_OK
        code, out = _run(path, "--last-chair", "Ana", "--run", answers=("n", "maybe", "yes"))
        assert code == cli.EXIT_OK
        assert out.count("The new chair is Ben") == 2
        assert json.loads(path.read_text(encoding="utf-8"))["last_chair"] == "Ben"

    def test_unknown_last_chair_exit_code(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        code, _ = _run(tmp_path / "data.json", "--last-chair", "Zed")
        assert code == cli.EXIT_USAGE
        assert "Zed doesn't exist" in capsys.readouterr().err

    def test_end_of_input_aborts_without_saving(self, tmp_path: Path) -> None:
        path = tmp_path / "data.json"
        _run(path, "--add-members", "Ana", "Ben")
        before = path.read_text(encoding="utf-8")
        code, _ = _run(path, "--remove-member", "Ana", "--run", answers=())
        assert code == cli.EXIT_FAILURE
        assert path.read_text(encoding="utf-8") == before

    def test_corrupt_state_file(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        path = tmp_path / "data.json"
        path.write_text("[", encoding="utf-8")
        code, _ = _run(path, "--list")
        assert code == cli.EXIT_FAILURE
        assert "not valid JSON" in capsys.readouterr().err

    def test_unknown_last_chair_reported_once(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        _run(tmp_path / "data.json", "--last-chair", "Zed")
        assert capsys.readouterr().err.count("Zed doesn't exist") == 1

    @pytest.mark.parametrize("data", [
        {"last_chair": 5, "members": ["Ana"]},
        {"members": "Ana"},
    ])
    def test_mistyped_state_file(self, tmp_path: Path, capsys: pytest.CaptureFixture, data: dict) -> None:
        path = tmp_path / "data.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        code, _ = _run(path, "--list")
        assert code == cli.EXIT_FAILURE
        assert "error: State file" in capsys.readouterr().err

    def test_non_utf8_state_file(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        path = tmp_path / "data.json"
        path.write_bytes(b'{"members": ["\xff\xfe"]}')
        code, _ = _run(path, "--list")
        assert code == cli.EXIT_FAILURE
        assert "not valid UTF-8" in capsys.readouterr().err

    def test_invalid_log_level_setting(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
                                       capsys: pytest.CaptureFixture) -> None:
        monkeypatch.setenv("MEETING_DICE_LOG_LEVEL", "loud")
        get_settings.cache_clear()
        try:
            code, _ = _run(tmp_path / "data.json", "--list")
        finally:
            get_settings.cache_clear()
        assert code == cli.EXIT_USAGE
        assert "invalid settings" in capsys.readouterr().err

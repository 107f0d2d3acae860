import builtins

import pytest

from pipeshell.cli import main


def test_cli_exec_outputs(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["exec", "echo hi"])
    assert exc.value.code == 0
    captured = capsys.readouterr()
    assert "hi" in captured.out


def test_cli_exec_propagates_status(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["exec", "--no-external", "zzz"])
    assert exc.value.code == 127
    assert "zzz: command not found" in capsys.readouterr().err


def test_cli_shell_repl(monkeypatch, capsys):
    inputs = iter(["GREETING=hello", 'echo "$GREETING"', "exit 4", "echo unreachable"])
    prompts: list[str] = []

    def fake_input(prompt: str) -> str:
        prompts.append(prompt)
        return next(inputs)

    monkeypatch.setattr(builtins, "input", fake_input)
    with pytest.raises(SystemExit) as exc:
        main(["shell", "--clean-env"])
    assert exc.value.code == 4
    captured = capsys.readouterr()
    assert "hello" in captured.out
    assert "unreachable" not in captured.out
    assert prompts == ["$ ", "$ ", "$ "]


def test_cli_shell_uses_ps1_and_stops_on_eof(monkeypatch, capsys):
    inputs = iter(["PS1='> '", "grep x missing.txt"])
    prompts: list[str] = []

    def fake_input(prompt: str) -> str:
        prompts.append(prompt)
        try:
            return next(inputs)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr(builtins, "input", fake_input)
    with pytest.raises(SystemExit) as exc:
        main(["shell", "--clean-env"])
    assert exc.value.code == 2
    assert prompts == ["$ ", "> ", "> "]

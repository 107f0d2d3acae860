import os

from conftest import PYTHON, make_session

from pipeshell import Shell


def py(code: str) -> str:
    return f"'{PYTHON}' -c \"{code}\""


def test_assignment_only_line_sets_variable(session):
    result, out, _ = session.run("GREETING=hello")
    assert result.exit_code == 0
    assert out == ""
    assert session.shell.store.get("GREETING") == "hello"
    _, out, _ = session.run('echo "$GREETING, world"')
    assert out == "hello, world\n"


def test_prefix_assignment_is_stage_scoped(session):
    session.run("NAME=standing")
    result, out, _ = session.run(
        "NAME=temp " + py("import os; print(os.environ['NAME'])")
    )
    assert result.exit_code == 0
    assert out == "temp\n"
    assert session.shell.store.get("NAME") == "standing"


def test_prefix_assignment_does_not_affect_expansion_of_same_stage(session):
    session.run("X=old")
    _, out, _ = session.run("X=new echo $X")
    assert out == "old\n"


def test_single_quotes_block_substitution(session):
    session.run("HOME=/somewhere")
    _, out, _ = session.run("echo '$HOME' \"$HOME\"")
    assert out == "$HOME /somewhere\n"


def test_unset_variable_keeps_argument(session):
    _, out, _ = session.run("echo a $PIPESHELL_UNSET b")
    assert out == "a  b\n"


def test_pipeline_status_is_last_stage(session):
    result, _, _ = session.run("cat missing.txt | echo done")
    assert result.stage_statuses[0] == 1
    assert result.exit_code == 0
    result, _, _ = session.run("echo hi | grep zzz")
    assert result.exit_code == 1


def test_builtin_pipeline(session, tmp_path):
    (tmp_path / "log.txt").write_text("error one\ninfo\nERROR two\n")
    result, out, _ = session.run("cat log.txt | grep -i error | wc -l")
    assert result.exit_code == 0
    assert out == "2\n"


def test_external_in_pipeline(session):
    upper = py("import sys; sys.stdout.write(sys.stdin.read().upper())")
    result, out, _ = session.run(f"echo hello | {upper} | grep HELLO")
    assert result.exit_code == 0
    assert out == "HELLO\n"


def test_external_reads_session_stdin(session):
    result, out, _ = session.run(py("import sys; print(len(sys.stdin.read()))"), stdin=b"abcd")
    assert result.exit_code == 0
    assert out == "4\n"


def test_external_stderr_is_forwarded(session):
    _, out, err = session.run(py("import sys; sys.stderr.write('oops')"))
    assert out == ""
    assert err == "oops"


def test_external_exit_status(session):
    result, _, _ = session.run(py("import sys; sys.exit(5)"))
    assert result.exit_code == 5


def test_signal_terminated_process(session):
    result, _, _ = session.run(py("import os, signal; os.kill(os.getpid(), signal.SIGTERM)"))
    assert result.exit_code == 128 + 15


def test_unknown_command_is_127_and_session_continues(session):
    result, _, err = session.run("zzz")
    assert result.exit_code == 127
    assert "zzz: command not found" in err
    result, out, _ = session.run("echo still here")
    assert out == "still here\n"


def test_missing_file_does_not_end_session(session):
    result, _, _ = session.run("cat missing.txt")
    assert result.exit_code != 0
    assert not result.should_exit
    result, out, _ = session.run("echo next")
    assert result.exit_code == 0


def test_parse_errors_abort_line_only(session):
    result, _, err = session.run("echo 'oops")
    assert result.exit_code == 2
    assert err == "pipeshell: unterminated quote: '\n"
    result, _, err = session.run("echo hi |")
    assert result.exit_code == 2
    assert err.startswith("pipeshell: syntax error")
    _, out, _ = session.run("echo fine")
    assert out == "fine\n"


def test_blank_line_is_noop(session):
    result, out, err = session.run("   ")
    assert result.exit_code == 0
    assert out == err == ""


def test_external_commands_disabled(tmp_path):
    session = make_session(str(tmp_path), external_commands=False)
    result, _, err = session.run("ls")
    assert result.exit_code == 127
    assert "ls: command not found" in err


def test_clean_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("PIPESHELL_LEAK", "1")
    session = make_session(str(tmp_path), inherit_env=False, env={"ONLY": "this"})
    assert session.shell.store.get("PIPESHELL_LEAK") is None
    _, out, _ = session.run("echo $ONLY")
    assert out == "this\n"


def test_registered_command_joins_pipeline(session):
    def shout(ctx, args):
        ctx.stdout.write(ctx.stdin.read().upper())
        return 0

    session.shell.register_command("shout", shout)
    _, out, _ = session.run("echo quiet | shout")
    assert out == "QUIET\n"


def test_exec_runs_lines_until_exit(tmp_path):
    session = make_session(str(tmp_path))
    result = session.shell.exec("A=1\necho $A\nexit 3\necho never")
    assert result.should_exit
    assert result.exit_code == 3
    assert session.stdout.getvalue() == b"1\n"


def test_last_status_tracks_lines(session):
    session.run("grep x missing.txt")
    assert session.shell.last_status == 2
    session.run("echo ok")
    assert session.shell.last_status == 0


def test_default_cwd_is_process_cwd():
    shell = Shell(stdin=None, stdout=None, stderr=None, inherit_env=False)
    assert shell.cwd == os.getcwd()

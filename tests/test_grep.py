import pytest


@pytest.fixture
def shell(session, tmp_path):
    (tmp_path / "file.txt").write_text("foo\nFoo bar\nFOO\nfoobar\nnothing\n")
    (tmp_path / "ctx.txt").write_text("0\n1\nMATCH\n3\n4\n")
    (tmp_path / "dup.txt").write_text("a\nMATCH\nMATCH\nd\n")
    return session


def test_grep_plain(shell):
    result, out, _ = shell.run("grep foo file.txt")
    assert result.exit_code == 0
    assert out == "foo\nfoobar\n"


def test_grep_case_insensitive(shell):
    _, out, _ = shell.run('grep -i "foo" file.txt')
    assert out == "foo\nFoo bar\nFOO\nfoobar\n"


def test_grep_whole_word_rejects_substrings(shell):
    _, out, _ = shell.run('grep -w "foo" file.txt')
    assert out == "foo\n"


def test_grep_combined_flags(shell):
    _, out, _ = shell.run("grep -iw foo file.txt")
    assert out == "foo\nFoo bar\nFOO\n"


def test_grep_after_context(shell):
    _, out, _ = shell.run("grep -A 1 MATCH ctx.txt")
    assert out == "MATCH\n3\n"
    _, out, _ = shell.run("grep -A2 MATCH ctx.txt")
    assert out == "MATCH\n3\n4\n"


def test_grep_after_context_does_not_duplicate(shell):
    _, out, _ = shell.run("grep -A 1 MATCH dup.txt")
    assert out == "MATCH\nMATCH\nd\n"


def test_grep_no_match_is_one(shell):
    result, out, _ = shell.run("grep zzz file.txt")
    assert result.exit_code == 1
    assert out == ""


def test_grep_reads_input(shell):
    result, out, _ = shell.run("grep bar", stdin=b"foo\nbar\n")
    assert result.exit_code == 0
    assert out == "bar\n"


def test_grep_multiple_files_prefixes(shell):
    _, out, _ = shell.run("grep MATCH ctx.txt dup.txt")
    assert out == "ctx.txt:MATCH\ndup.txt:MATCH\ndup.txt:MATCH\n"


def test_grep_missing_file_is_two(shell):
    result, out, err = shell.run("grep MATCH ctx.txt missing.txt")
    assert result.exit_code == 2
    assert "ctx.txt:MATCH" in out
    assert err.startswith("grep: missing.txt:")


@pytest.mark.parametrize(
    "line, message",
    [
        ("grep", "usage"),
        ("grep '[' file.txt", "invalid regex"),
        ("grep -A", "requires an argument"),
        ("grep -A x foo file.txt", "invalid context length"),
        ("grep -q foo file.txt", "invalid option"),
    ],
)
def test_grep_usage_errors(shell, line, message):
    result, _, err = shell.run(line)
    assert result.exit_code == 2
    assert message in err


def test_grep_pattern_after_double_dash(shell):
    _, out, _ = shell.run("grep -- -x", stdin=b"a-x\nb\n")
    assert out == "a-x\n"


def test_grep_whole_word_ignores_empty_matches(shell, tmp_path):
    (tmp_path / "blank.txt").write_text("\n  \nword\n")
    result, out, _ = shell.run("grep -w '' blank.txt")
    assert result.exit_code == 1
    assert out == ""


def test_grep_whole_word_checks_every_occurrence(shell, tmp_path):
    (tmp_path / "later.txt").write_text("foobar foo\nfoobar\n")
    _, out, _ = shell.run("grep -w foo later.txt")
    assert out == "foobar foo\n"


def test_grep_whole_word_accepts_inline_flags(shell):
    result, out, _ = shell.run("grep -w '(?i)foo' file.txt")
    assert result.exit_code == 0
    assert out == "foo\nFoo bar\nFOO\n"

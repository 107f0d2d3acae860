import io
import sys
from dataclasses import dataclass

import pytest

from pipeshell import CommandResult, Shell

PYTHON = sys.executable


@dataclass
class Session:
    shell: Shell
    stdin: io.BytesIO
    stdout: io.BytesIO
    stderr: io.BytesIO

    def run(self, line: str, *, stdin: bytes = b"") -> tuple[CommandResult, str, str]:
        self.stdin.seek(0)
        self.stdin.truncate()
        self.stdin.write(stdin)
        self.stdin.seek(0)
        for stream in (self.stdout, self.stderr):
            stream.seek(0)
            stream.truncate()
        result = self.shell.run_line(line)
        return result, self.stdout.getvalue().decode(), self.stderr.getvalue().decode()


def make_session(cwd: str, **kwargs) -> Session:
    stdin, stdout, stderr = io.BytesIO(), io.BytesIO(), io.BytesIO()
    shell = Shell(cwd=cwd, stdin=stdin, stdout=stdout, stderr=stderr, **kwargs)
    return Session(shell, stdin, stdout, stderr)


@pytest.fixture
def session(tmp_path) -> Session:
    return make_session(str(tmp_path))

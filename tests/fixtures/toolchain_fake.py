"""Stand-in for the ``git`` and ``go`` executables used by the pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence

from socle.process import CommandResult

STARTER_FILES: dict[str, str] = {
    ".git/HEAD": "ref: refs/heads/main\n",
    ".git/config": "[core]\n\trepositoryformatversion = 0\n",
    "Makefile.mac": "## unix build helper\nbuild:\n\tgo build -o bin/app .\n",
    "Makefile.windows": "## windows build helper\nbuild:\n\tgo build -o bin/app.exe .\n",
    "go.mod": "module myapp\n\ngo 1.22\n",
    "main.go": 'package main\n\nimport (\n\t"myapp/handlers"\n\t"myappextra/x"\n)\n',
    "handlers/handlers.go": 'package handlers\n\nimport "myapp/data"\n',
    "vendor/lib/lib.go": 'package lib\n\nimport "myapp/data"\n',
    "README.md": "# starter\n",
}


def command_key(argv: Sequence[str]) -> str:
    """Return ``"git clone"``, ``"go get"`` or ``"go mod tidy"`` for ``argv``."""

    program = Path(argv[0]).name
    if len(argv) > 2 and argv[1] == "mod":
        return f"{program} mod {argv[2]}"
    return f"{program} {argv[1]}" if len(argv) > 1 else program


class FakeToolchain:
    """Record commands and fake a successful clone of :data:`STARTER_FILES`."""

    def __init__(self, files: Mapping[str, str] | None = None) -> None:
        self.files = dict(STARTER_FILES if files is None else files)
        self.calls: list[tuple[tuple[str, ...], Path | None, float | None]] = []
        self._failures: dict[str, CommandResult | BaseException] = {}

    def fail(self, key: str, *, returncode: int = 1, stderr: str = "boom") -> None:
        self._failures[key] = CommandResult(argv=(), returncode=returncode, stderr=stderr)

    def raise_on(self, key: str, exc: BaseException) -> None:
        self._failures[key] = exc

    @property
    def commands(self) -> list[str]:
        return [command_key(argv) for argv, _cwd, _timeout in self.calls]

    def __call__(
        self,
        argv: Sequence[str],
        *,
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        argv = tuple(argv)
        self.calls.append((argv, cwd, timeout))
        key = command_key(argv)

        failure = self._failures.get(key)
        if isinstance(failure, BaseException):
            raise failure
        if failure is not None:
            return CommandResult(argv=argv, returncode=failure.returncode, stderr=failure.stderr)

        if key.endswith(" clone"):
            destination = Path(argv[-1])
            destination.mkdir(parents=True)
            for relative, content in self.files.items():
                path = destination / relative
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(content, encoding="utf-8")
        return CommandResult(argv=argv, returncode=0)

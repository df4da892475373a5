"""
TypeSpec compiler backend.

Runs the `tsp` command line compiler over specification content and turns
its diagnostic output into Diagnostic objects.

apianalyzer/src/apianalyzer/compiler.py
"""

import logging
import re
import shlex
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional, Protocol, Union

from .config import CompilerConfig
from .diagnostics import Diagnostic, Position, Range

logger = logging.getLogger(__name__)

__all__ = [
    "Compiler",
    "CompilerError",
    "TypeSpecCompiler",
    "parse_compiler_output",
]

MAIN_FILE_NAME = "main.tsp"

# Exit codes tsp uses for "compiled" (0) and "compiled with error diagnostics" (1)
_COMPLETED_EXIT_CODES = (0, 1)

_LOCATED_LINE = re.compile(
    r"^(?P<path>.+?):(?P<line>\d+):(?P<column>\d+)\s+-\s+"
    r"(?P<severity>error|warning)\s+(?P<code>[^\s:]+):\s?(?P<message>.*)$"
)
_UNLOCATED_LINE = re.compile(
    r"^(?P<severity>error|warning)\s+(?P<code>[^\s:]+):\s?(?P<message>.*)$"
)


class CompilerError(Exception):
    """The compiler could not be run or crashed."""


class Compiler(Protocol):
    """Any static-analysis backend producing diagnostics for specification content."""

    analyzer_name: str

    def compile_from_file(
        self, content: str, ruleset_path: Optional[Union[str, Path]] = None
    ) -> List[Diagnostic]:
        """Compile content and return its diagnostics in emission order."""
        ...


def parse_compiler_output(output: str) -> List[Diagnostic]:
    """Parse `tsp compile --pretty=false` output into diagnostics.

    The tool reports 1-based lines and columns; diagnostics use 0-based
    positions. Only a start position is printed, so the range is empty.
    Indented lines following a diagnostic extend its message.
    """
    diagnostics: List[Diagnostic] = []
    pending: Optional[dict] = None

    def flush() -> None:
        if pending is not None:
            position = Position(pending["line"], pending["character"])
            diagnostics.append(
                Diagnostic(
                    message=pending["message"].strip(),
                    code=pending["code"],
                    severity=pending["severity"],
                    range=Range(start=position, end=position),
                )
            )

    for raw_line in output.splitlines():
        line = raw_line.rstrip()
        if not line:
            continue

        located = _LOCATED_LINE.match(line)
        unlocated = None if located else _UNLOCATED_LINE.match(line)
        match = located or unlocated

        if match:
            flush()
            pending = {
                "severity": match.group("severity"),
                "code": match.group("code"),
                "message": match.group("message"),
                "line": max(int(match.group("line")) - 1, 0) if located else 0,
                "character": max(int(match.group("column")) - 1, 0) if located else 0,
            }
        elif pending is not None and raw_line[:1].isspace():
            pending["message"] += "\n" + line.strip()
        else:
            # Banner and summary lines such as "Found 2 errors."
            flush()
            pending = None

    flush()
    return diagnostics


class TypeSpecCompiler:
    """Compiles TypeSpec source with the `tsp` CLI without emitting output."""

    analyzer_name = "typespec"

    def __init__(self, config: Optional[CompilerConfig] = None):
        self.config = config or CompilerConfig()

    def build_command(self, main_file: Path, ruleset_path: Optional[Path] = None) -> List[str]:
        cmd = shlex.split(self.config.command) + [
            "compile",
            str(main_file),
            "--no-emit",
            "--pretty=false",
        ]
        if ruleset_path is not None:
            cmd.extend(["--config", str(ruleset_path)])
        return cmd

    def compile_from_file(
        self, content: str, ruleset_path: Optional[Union[str, Path]] = None
    ) -> List[Diagnostic]:
        """Write content to a scratch directory and compile it.

        The scratch directory is created inside `project_dir` when configured,
        so imports and linter rulesets resolve against that project's
        installed TypeSpec libraries.

        Raises:
            CompilerError: if `tsp` is missing, times out, or exits abnormally.
        """
        if ruleset_path is None and self.config.ruleset:
            ruleset_path = self.config.ruleset
        resolved_ruleset = Path(ruleset_path).resolve() if ruleset_path is not None else None

        # Libraries resolve from node_modules above the main file
        project_dir = self.config.project_dir
        if project_dir is not None and not Path(project_dir).is_dir():
            raise CompilerError(f"TypeSpec project directory not found: {project_dir}")

        with tempfile.TemporaryDirectory(prefix="apianalyzer-", dir=project_dir) as tmpdir:
            workdir = Path(tmpdir)
            main_file = workdir / MAIN_FILE_NAME
            main_file.write_text(content, encoding="utf-8")

            cmd = self.build_command(main_file, resolved_ruleset)
            logger.debug(f"Running compiler: {' '.join(cmd)}")

            try:
                result = subprocess.run(
                    cmd,
                    cwd=workdir,
                    capture_output=True,
                    text=True,
                    timeout=self.config.timeout_seconds,
                    check=False,
                )
            except FileNotFoundError as e:
                raise CompilerError(
                    f"TypeSpec compiler '{self.config.command}' not found. "
                    "Hint: Try running: npm install -g @typespec/compiler"
                ) from e
            except subprocess.TimeoutExpired as e:
                raise CompilerError(
                    f"TypeSpec compiler timed out after {self.config.timeout_seconds}s"
                ) from e

        if result.returncode not in _COMPLETED_EXIT_CODES:
            logger.error(f"tsp exited with {result.returncode}: {result.stderr}")
            raise CompilerError(
                f"TypeSpec compiler failed with exit code {result.returncode}: "
                f"{result.stderr.strip() or result.stdout.strip()}"
            )

        diagnostics = parse_compiler_output(result.stdout + "\n" + result.stderr)
        if result.returncode != 0 and not diagnostics:
            raise CompilerError(
                "TypeSpec compiler reported failure without diagnostics: "
                f"{result.stderr.strip() or result.stdout.strip()}"
            )
        logger.debug(f"Compiler reported {len(diagnostics)} diagnostics")
        return diagnostics

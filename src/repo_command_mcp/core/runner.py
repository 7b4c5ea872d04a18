from __future__ import annotations

import logging
import os
import signal
import subprocess
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from .errors import (
    CommandExecutionError,
    CommandSpawnError,
    CommandTimeoutError,
    ProcessInterruptedError,
)
from .models import CommandResult
from .security import resolve_working_dir
from .shell import ShellConfig, host_shell

logger = logging.getLogger(__name__)

TIMEOUT_ENV = "REPO_COMMAND_MCP_TIMEOUT_S"
JOIN_TIMEOUT_ENV = "REPO_COMMAND_MCP_JOIN_TIMEOUT_S"


def _kill_process_tree_windows(pid: int) -> None:
    """
    Kill a process tree on Windows (CMD spawns git, git may spawn helpers).
    """
    subprocess.run(
        ["taskkill", "/PID", str(pid), "/T", "/F"],
        capture_output=True,
        text=True,
    )


def _kill_process_group_posix(p: subprocess.Popen) -> None:
    """
    Kill the whole process group (the shell plus everything in its pipeline).
    Falls back to p.kill() when the group is already gone.
    """
    try:
        os.killpg(p.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
    except OSError:
        p.kill()


def _optional_float(name: str) -> float | None:
    raw = os.environ.get(name, "").strip()
    return float(raw) if raw else None


@dataclass(frozen=True)
class RunnerConfig:
    """
    Runner configuration.
    timeout_s=None means no deadline: a command runs until it exits.
    """
    timeout_s: float | None = None
    join_timeout_s: float | None = None

    # Keeps git from ever waiting on a terminal prompt or a pager.
    env: tuple[tuple[str, str], ...] = (
        ("GIT_TERMINAL_PROMPT", "0"),
        ("GCM_INTERACTIVE", "Never"),
        ("GIT_PAGER", "cat"),
    )

    @classmethod
    def from_env(cls) -> RunnerConfig:
        return cls(
            timeout_s=_optional_float(TIMEOUT_ENV),
            join_timeout_s=_optional_float(JOIN_TIMEOUT_ENV),
        )


class StreamReader(threading.Thread):
    """
    Drains one pipe until end-of-stream into a private buffer.
    The buffer is read by the owner only after join().
    """

    def __init__(self, stream: IO[str], name: str) -> None:
        super().__init__(name=name, daemon=True)
        self._stream = stream
        self._lines: list[str] = []
        self.error: BaseException | None = None

    def run(self) -> None:
        try:
            for line in iter(self._stream.readline, ""):
                self._lines.append(line if line.endswith("\n") else line + "\n")
        except (OSError, ValueError) as e:
            self.error = e
        finally:
            self._stream.close()

    @property
    def value(self) -> str:
        return "".join(self._lines)


class ShellCommandRunner:
    """
    Runs command strings through a shell in a given working directory:
      - stdout and stderr drained concurrently, started before waiting on exit
      - non-zero exit raises with command, directory and stderr
      - optional hard deadline; kills the process group (POSIX) / tree (Windows)
      - no retries
    """

    def __init__(self, shell: ShellConfig | None = None, config: RunnerConfig | None = None) -> None:
        self.shell = shell or host_shell()
        self.config = config or RunnerConfig()

    def run(self, root: str | Path, command: str) -> str:
        """Return stdout of `command`, or raise CommandExecutionError."""
        res = self.execute(root, command)
        if res.timed_out:
            raise CommandTimeoutError(res.command, res.root, res.stderr, res.exit_code)
        if res.exit_code != 0:
            raise CommandExecutionError(res.command, res.root, res.stderr, res.exit_code)
        return res.stdout

    def execute(self, root: str | Path, command: str) -> CommandResult:
        """Run `command` and return the full record; a non-zero exit is not raised."""
        cwd = resolve_working_dir(root)
        logger.debug("Running %r in %s", command, cwd)

        start = time.perf_counter()
        p = self._spawn(cwd, command)

        out_reader = StreamReader(p.stdout, name="stdout-reader")
        err_reader = StreamReader(p.stderr, name="stderr-reader")
        out_reader.start()
        err_reader.start()

        exit_code, timed_out = self._wait(p, command)
        self._join(command, out_reader, err_reader)
        duration_ms = int((time.perf_counter() - start) * 1000)

        logger.debug("Command %r exited with %d after %d ms", command, exit_code, duration_ms)
        return CommandResult(
            command=command,
            root=str(cwd),
            stdout=out_reader.value,
            stderr=err_reader.value,
            exit_code=exit_code,
            duration_ms=duration_ms,
            timed_out=timed_out,
        )

    def _build_env(self) -> dict[str, str]:
        merged_env = dict(os.environ)
        merged_env.update(dict(self.config.env))
        return merged_env

    def _spawn(self, cwd: Path, command: str) -> subprocess.Popen:
        # POSIX: own session so a timeout can take down the whole pipeline
        popen_kwargs: dict = {}
        if os.name != "nt":
            popen_kwargs["start_new_session"] = True

        try:
            return subprocess.Popen(
                self.shell.spawn_args(command),
                cwd=str(cwd),
                env=self._build_env(),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                **popen_kwargs,
            )
        except FileNotFoundError as e:
            raise CommandSpawnError(f"Shell executable not found: {self.shell.program}") from e
        except OSError as e:
            raise CommandSpawnError(f"Failed to spawn {command!r}: {type(e).__name__}: {e}") from e

    def _wait(self, p: subprocess.Popen, command: str) -> tuple[int, bool]:
        try:
            return p.wait(timeout=self.config.timeout_s), False
        except subprocess.TimeoutExpired:
            logger.warning("Command %r exceeded %ss, killing it", command, self.config.timeout_s)
            self._kill(p)
            return p.wait(), True
        except KeyboardInterrupt:
            self._kill(p)
            raise

    def _kill(self, p: subprocess.Popen) -> None:
        if os.name == "nt":
            _kill_process_tree_windows(p.pid)
        else:
            _kill_process_group_posix(p)

    def _join(self, command: str, *readers: StreamReader) -> None:
        # every reader gets its join before the first failure is reported
        for reader in readers:
            reader.join(timeout=self.config.join_timeout_s)
        for reader in readers:
            if reader.is_alive():
                raise ProcessInterruptedError(
                    f"{reader.name} did not finish draining output of {command!r}."
                )
            if reader.error is not None:
                raise ProcessInterruptedError(
                    f"{reader.name} failed while draining output of {command!r}: {reader.error}"
                ) from reader.error

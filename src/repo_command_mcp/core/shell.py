from __future__ import annotations

import re
import shutil
import sys
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal


ShellFamily = Literal["posix", "windows"]

# Characters bash still interprets inside double quotes.
_POSIX_DQUOTE_SPECIAL = re.compile(r'(["\\$`])')
# A run of backslashes followed by a quote (or the end of the token) needs doubling
# under the MSVCRT argument rules git for Windows is parsed with.
_WINDOWS_BACKSLASHES_BEFORE_QUOTE = re.compile(r'(\\*)("|\Z)')


@dataclass(frozen=True)
class ShellConfig:
    """
    The interpreter a command string is handed to.

    Built once and injected into the runner; nothing reads host state after that.
    """
    program: str
    flag: str
    family: ShellFamily = "posix"

    def spawn_args(self, command: str) -> list[str] | str:
        """
        Arguments for subprocess.Popen.
        CMD re-parses its own command line, so on Windows the command is passed
        through untouched as a single string instead of being list2cmdline-quoted.
        """
        if self.family == "windows":
            return f"{self.program} {self.flag} {command}"
        return [self.program, self.flag, command]

    def quote(self, value: str) -> str:
        """Wrap `value` in double quotes as a single shell token."""
        if self.family == "windows":
            escaped = _WINDOWS_BACKSLASHES_BEFORE_QUOTE.sub(
                lambda m: m.group(1) * 2 + ('\\"' if m.group(2) else ""),
                value,
            )
            return f'"{escaped}"'
        return '"' + _POSIX_DQUOTE_SPECIAL.sub(r"\\\1", value) + '"'


WINDOWS_SHELL = ShellConfig(program="CMD", flag="/c", family="windows")
POSIX_SHELL = ShellConfig(program="bash", flag="-c", family="posix")


def detect_shell(platform: str | None = None) -> ShellConfig:
    """
    Pick the shell for a host platform name (sys.platform style).
    Windows hosts get CMD; everything else gets bash, or /bin/sh where bash is missing.
    """
    name = (platform if platform is not None else sys.platform).lower()
    if name.startswith("win"):
        return WINDOWS_SHELL
    if shutil.which("bash") is None:
        return ShellConfig(program="/bin/sh", flag="-c", family="posix")
    return POSIX_SHELL


@lru_cache(maxsize=1)
def host_shell() -> ShellConfig:
    return detect_shell()

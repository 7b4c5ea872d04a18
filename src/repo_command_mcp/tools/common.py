from __future__ import annotations

from ..core.runner import RunnerConfig, ShellCommandRunner


def make_runner(config: RunnerConfig | None = None) -> ShellCommandRunner:
    """Runner for one operation; without `config` the environment is read on each call."""
    return ShellCommandRunner(config=config or RunnerConfig.from_env())

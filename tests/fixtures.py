import json
from pathlib import Path
from typing import Callable, List, Optional

from npminstall.exceptions import ExecutionError
from npminstall.process.executor import Execution


class FakeExecutable:
    """
    Deterministic stand-in for npm.

    Records every execution, writes the scripted output to the supplied sinks
    and fails with the scripted exit code. An optional side effect can create
    files, e.g. to mimic npm populating node_modules.
    """

    def __init__(
        self,
        output: str = "",
        exit_code: int = 0,
        side_effect: Optional[Callable[[Execution], None]] = None,
    ):
        self.output = output
        self.exit_code = exit_code
        self.side_effect = side_effect
        self.executions: List[Execution] = []

    @property
    def calls(self) -> int:
        return len(self.executions)

    @property
    def last(self) -> Execution:
        return self.executions[-1]

    def execute(self, execution: Execution) -> None:
        self.executions.append(execution)
        if self.side_effect is not None:
            self.side_effect(execution)
        if self.output and execution.stdout is not None:
            execution.stdout.write(self.output)
        if self.exit_code != 0:
            raise ExecutionError(self.exit_code)


def install_package(name: str = "leftpad") -> Callable[[Execution], None]:
    """Side effect writing a package into node_modules, as npm would."""

    def _install(execution: Execution) -> None:
        package_dir = Path(execution.dir) / "node_modules" / name
        package_dir.mkdir(parents=True, exist_ok=True)
        (package_dir / "index.js").write_text("module.exports = {}\n")

    return _install


def make_project(
    root: Path,
    lockfile: bool = False,
    vendored: bool = False,
    lock_content: str = '{"lockfileVersion": 3}\n',
) -> Path:
    """Create a minimal npm project under root."""
    root.mkdir(parents=True, exist_ok=True)
    (root / "package.json").write_text(
        json.dumps({"name": "app", "version": "1.0.0"}) + "\n"
    )
    if lockfile:
        (root / "package-lock.json").write_text(lock_content)
    if vendored:
        vendored_pkg = root / "node_modules" / "vendored"
        vendored_pkg.mkdir(parents=True)
        (vendored_pkg / "index.js").write_text("module.exports = 1\n")
    return root

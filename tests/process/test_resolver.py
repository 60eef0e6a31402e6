"""Tests for installation process selection."""

import itertools

import pytest

from npminstall.constants import ProcessKind
from npminstall.process.resolver import BuildSignals, ProcessResolver, select_process

from tests.fixtures import make_project


def signals(node_modules=False, npm_cache=False, package_lock=False):
    return BuildSignals(
        node_modules=node_modules, npm_cache=npm_cache, package_lock=package_lock
    )


@pytest.mark.short
class TestSelectProcess:
    def test_lockfile_only_selects_ci(self):
        selection = select_process(signals(package_lock=True))
        assert selection.kind is ProcessKind.CI
        assert selection.reproducible

    def test_nothing_present_selects_install(self):
        selection = select_process(signals())
        assert selection.kind is ProcessKind.INSTALL
        assert not selection.reproducible

    def test_cache_without_lockfile_selects_install(self):
        selection = select_process(signals(npm_cache=True))
        assert selection.kind is ProcessKind.INSTALL
        assert not selection.reproducible

    def test_lockfile_with_cache_selects_install(self):
        selection = select_process(signals(npm_cache=True, package_lock=True))
        assert selection.kind is ProcessKind.INSTALL
        assert selection.reproducible

    @pytest.mark.parametrize(
        "npm_cache,package_lock",
        list(itertools.product([False, True], repeat=2)),
    )
    def test_vendored_modules_always_reused(self, npm_cache, package_lock):
        selection = select_process(
            signals(node_modules=True, npm_cache=npm_cache, package_lock=package_lock)
        )
        assert selection.kind is ProcessKind.REUSE

    def test_every_combination_selects_exactly_one_process(self):
        for combo in itertools.product([False, True], repeat=3):
            selection = select_process(signals(*combo))
            assert selection.kind in set(ProcessKind)

    def test_trace_lists_inputs(self):
        selection = select_process(signals(package_lock=True))

        assert selection.trace[:4] == [
            "Process inputs:",
            '  node_modules      -> "Not found"',
            '  npm-cache         -> "Not found"',
            '  package-lock.json -> "Found"',
        ]
        assert "Selected NPM build process: 'npm ci'" in selection.trace

    def test_trace_flags_unlocked_install(self):
        selection = select_process(signals())

        assert "Selected NPM build process: 'npm install'" in selection.trace
        assert any("not reproducible" in line for line in selection.trace)

    def test_trace_does_not_flag_locked_install(self):
        selection = select_process(signals(npm_cache=True, package_lock=True))
        assert not any("not reproducible" in line for line in selection.trace)


@pytest.mark.short
class TestBuildSignals:
    def test_empty_project(self, working_dir, cache_dir):
        assert BuildSignals.inspect(working_dir, cache_dir) == signals()

    def test_lockfile_and_vendored(self, tmp_path, cache_dir):
        project = make_project(tmp_path / "p", lockfile=True, vendored=True)

        result = BuildSignals.inspect(project, cache_dir)

        assert result == signals(node_modules=True, package_lock=True)

    def test_empty_cache_dir_is_not_a_cache(self, working_dir, cache_dir):
        cache_dir.mkdir()
        assert not BuildSignals.inspect(working_dir, cache_dir).npm_cache

    def test_populated_cache_dir(self, working_dir, cache_dir):
        (cache_dir / "_cacache").mkdir(parents=True)
        assert BuildSignals.inspect(working_dir, cache_dir).npm_cache

    def test_node_modules_symlink_is_not_vendored(self, working_dir, tmp_path, cache_dir):
        target = tmp_path / "layer" / "node_modules"
        target.mkdir(parents=True)
        (working_dir / "node_modules").symlink_to(target)

        assert not BuildSignals.inspect(working_dir, cache_dir).node_modules

    def test_node_modules_file_is_not_vendored(self, working_dir, cache_dir):
        (working_dir / "node_modules").write_text("")
        assert not BuildSignals.inspect(working_dir, cache_dir).node_modules


@pytest.mark.short
class TestProcessResolver:
    def test_resolve_logs_trace(self, locked_dir, cache_dir, capture_logs):
        selection = ProcessResolver().resolve(locked_dir, cache_dir)

        assert selection.kind is ProcessKind.CI
        logs = capture_logs.getvalue()
        assert "Resolving installation process" in logs
        assert '    package-lock.json -> "Found"' in logs
        assert "  Selected NPM build process: 'npm ci'" in logs

    def test_resolve_warns_without_lockfile(self, working_dir, cache_dir, capture_logs):
        selection = ProcessResolver().resolve(working_dir, cache_dir)

        assert selection.kind is ProcessKind.INSTALL
        assert "Installing without package-lock.json" in capture_logs.getvalue()

    def test_resolve_reads_signals_fresh(self, working_dir, cache_dir):
        resolver = ProcessResolver()
        assert resolver.resolve(working_dir, cache_dir).kind is ProcessKind.INSTALL

        (working_dir / "package-lock.json").write_text("{}")

        assert resolver.resolve(working_dir, cache_dir).kind is ProcessKind.CI

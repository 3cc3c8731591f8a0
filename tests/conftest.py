"""Test configuration."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from herfiles.core.compare import FileComparator
from herfiles.core.config import Config
from herfiles.core.environment import Environment
from herfiles.core.modules import ModuleContext
from herfiles.core.templating import PathTemplater

from fakes import FakeEditor, FakeFonts, FakePackages, FakePrograms, ScriptedPrompter


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a throwaway home directory and point HOME at it."""
    home = tmp_path / "home" / "ada"
    home.mkdir(parents=True)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)
    return home


@pytest.fixture
def environment(home: Path) -> Environment:
    """Resolve an environment rooted at the throwaway home."""
    return Environment.resolve(environ={}, home=home)


@pytest.fixture
def config(home: Path) -> Config:
    """Create the default configuration (no config file exists under the test home)."""
    return Config()


@pytest.fixture
def console() -> Console:
    """Create a console that records output instead of printing it."""
    return Console(file=io.StringIO(), record=True, width=120)


@pytest.fixture
def prompter(console: Console) -> ScriptedPrompter:
    return ScriptedPrompter(console)


@pytest.fixture
def programs() -> FakePrograms:
    return FakePrograms()


@pytest.fixture
def packages(programs: FakePrograms) -> FakePackages:
    return FakePackages(programs)


@pytest.fixture
def editor() -> FakeEditor:
    return FakeEditor()


@pytest.fixture
def fonts() -> FakeFonts:
    return FakeFonts()


@pytest.fixture
def context(
    config: Config,
    environment: Environment,
    console: Console,
    prompter: ScriptedPrompter,
    programs: FakePrograms,
    packages: FakePackages,
    editor: FakeEditor,
    fonts: FakeFonts,
) -> ModuleContext:
    """Create a module context wired to in-memory fakes."""
    return ModuleContext(
        config=config,
        environment=environment,
        console=console,
        templater=PathTemplater(environment),
        comparator=FileComparator(console),
        prompter=prompter,
        programs=programs,
        packages=packages,
        editor=editor,
        fonts=fonts,
    )


@pytest.fixture
def snapshot_dir(tmp_path: Path) -> Path:
    """Return a snapshot root outside the home directory."""
    return tmp_path / "snapshot"

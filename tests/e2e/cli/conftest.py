"""Fixtures for running the ``shortener`` command in-process."""

import logging

import click
import pytest
from click.testing import CliRunner

from shortener.entrypoints.cli.main import shortener


@click.command()
def log_demo():
    """Log one message per level, on our logger and on a foreign one."""
    own = logging.getLogger("shortener.demo")
    foreign = logging.getLogger("some.thirdparty")

    own.debug("This is a debug-level test message.")
    own.info("This is an info-level test message.")
    own.warning("This is a warning-level test message.")
    own.error("This is an error-level test message.")
    own.critical("This is a critical-level test message.")
    foreign.debug("This is a debug-level third-party test message.")
    foreign.info("This is an info-level third-party test message.")
    foreign.warning("This is a warning-level third-party test message.")
    # stays in the flight recorder buffer unless force-flushed
    own.debug("This is a final debug-level test message.")


def _unregister(group: click.Group, name: str) -> None:
    group.commands.pop(name, None)
    # click-extra keeps its own per-section listings of subcommands
    sections = [getattr(group, "_default_section", None), *getattr(group, "_sections", [])]
    for section in filter(None, sections):
        getattr(section, "commands", {}).pop(name, None)


@pytest.fixture
def registered_log_demo():
    """Make ``shortener log-demo`` available for one test."""
    shortener.add_command(log_demo, name="log-demo")
    yield
    _unregister(shortener, "log-demo")


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def fs(runner):  # pylint: disable=redefined-outer-name
    """Run the test inside an empty temporary working directory."""
    with runner.isolated_filesystem():
        yield


@pytest.fixture
def cli(runner, fs):  # pylint: disable=redefined-outer-name, unused-argument
    """Invoke ``shortener`` with ``snapshot.json`` in the working directory.

    The flight recorder is off so no log file is written.
    """

    def _invoke(*args, **kwargs):
        return runner.invoke(
            shortener,
            ["--snapshot-path", "snapshot.json", "--no-flight-recorder", *args],
            **kwargs,
        )

    return _invoke

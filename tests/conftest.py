# topmark:header:start
#
#   project      : Faultline
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the Faultline test suite.

This file sets up global fixtures and customizes the logging configuration for test runs,
ensuring consistent and verbose logging output during testing.

Notes:
    Tests should respect the immutable/mutable configuration split:

    - Build configs using `faultline.config.MutableDebugConfig` (mutable), then
      `freeze()` into a `faultline.config.DebugConfig` before handing them to
      `Debug.configure()`.
    - Do **not** mutate a frozen `DebugConfig`. If you need to tweak one,
      call `DebugConfig.thaw()`, edit the returned `MutableDebugConfig`,
      then `freeze()` again.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pytest

from faultline.config import DebugConfig, MutableDebugConfig, logging
from faultline.constants import ENV_ASSERTION_LEVEL, ENV_DEBUGGING, ENV_LOG_LEVEL
from faultline.core.levels import LogLevel
from faultline.debug import debug

if TYPE_CHECKING:
    from collections.abc import Iterator

F = TypeVar("F", bound=Callable[..., object])

# This defines the type for the decorator function itself:
# It takes a Callable (F) and returns the same Callable (F).
DecoratorType = Callable[[F], F]


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type.

    Args:
        mark (Any): A pytest mark decorator such as `pytest.mark.stack`.

    Returns:
        DecoratorType[Any]: A decorator that preserves the wrapped function's type.
    """

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.mark.parametrize`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.mark.parametrize`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    mark: pytest.MarkDecorator = pytest.mark.parametrize(*args, **kwargs)
    return as_typed_mark(mark)


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.hookimpl`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.hookimpl`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    return as_typed_mark(pytest.hookimpl(*args, **kwargs))


class RecordingHost:
    """`LoggingHost` that records every ``(level, message)`` it receives."""

    def __init__(self) -> None:
        self.records: list[tuple[LogLevel, str]] = []

    def log(self, level: LogLevel, message: str) -> None:
        self.records.append((level, message))

    @property
    def messages(self) -> list[str]:
        """Return the recorded messages in arrival order."""
        return [message for _, message in self.records]


@pytest.fixture(autouse=True)
def isolate_debug_service(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep the process-wide `debug` service and environment pristine per test.

    Clears ``FAULTLINE_*`` overrides the developer may have exported, and restores
    the singleton's configuration (and debug-info flag) after each test.

    Args:
        monkeypatch (pytest.MonkeyPatch): Pytest monkeypatch fixture used to manipulate
            environment variables.

    Yields:
        None: Control to the test.
    """
    for name in (ENV_LOG_LEVEL, ENV_ASSERTION_LEVEL, ENV_DEBUGGING):
        monkeypatch.delenv(name, raising=False)
    saved: DebugConfig = debug.config
    saved_debug_info: bool = debug.is_debug_info_enabled
    yield
    debug.configure(saved)
    debug._debug_info_enabled = saved_debug_info  # pyright: ignore[reportPrivateUsage]


@pytest.fixture
def host() -> RecordingHost:
    """Return a fresh recording host."""
    return RecordingHost()


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Configure Faultline's internal logging at TRACE for the test suite.

    Args:
        config (pytest.Config): The pytest configuration object.
    """
    logging.setup_logging(level=logging.TRACE_LEVEL)


def make_config(**overrides: Any) -> DebugConfig:
    """Return a frozen `DebugConfig` built from defaults and overrides.

    Args:
        **overrides (Any): Field values applied to a default `MutableDebugConfig`.

    Returns:
        DebugConfig: The frozen configuration.
    """
    draft: MutableDebugConfig = MutableDebugConfig()
    for key, value in overrides.items():
        setattr(draft, key, value)
    return draft.freeze()

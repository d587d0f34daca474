# topmark:header:start
#
#   project      : Faultline
#   file         : assertions.py
#   file_relpath : src/faultline/assertions.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Fail-fast assertion engine.

All checks funnel into a single raise point,
[`AssertionEngine.fail`][faultline.assertions.AssertionEngine.fail], which raises
[`DebugFailure`][faultline.errors.DebugFailure] with a ``"Debug Failure."`` prefix and
an attribution point (the first frame outside the assertion wrapper).

Gating:
    The node validators (``assert_node``, ``assert_optional_node``,
    ``assert_optional_token``, ``assert_missing_node``, ``assert_each_node``) require
    `AssertionLevel.NORMAL`. They are bound once, when the engine is built: below that
    level they are bound to a no-op, so the predicate is never evaluated. Changing the
    strictness means building a new engine (see
    [`Debug.configure`][faultline.debug.Debug.configure]).

    The boolean, equality and ordering checks are always active.

Labels:
    Messages about domain nodes describe the node's categorical tag (``node.kind``)
    through the configured ``category_label`` (for instance
    [`enum_labeler`][faultline.enums.enum_labeler]). Without one, the raw tag is used.
"""

from __future__ import annotations

import inspect
import json
from traceback import FrameSummary
from typing import TYPE_CHECKING, Any, NoReturn, TypeVar

from faultline.config.logging import FaultlineLogger, get_logger
from faultline.constants import (
    DEBUG_FAILURE_PREFIX,
    FALSE_EXPRESSION,
    ILLEGAL_VALUE,
    UNEXPECTED_NODE,
    VERBOSE_DEBUG_INFO_SEPARATOR,
)
from faultline.core.levels import AssertionLevel
from faultline.errors import DebugFailure
from faultline.utils.introspection import get_function_name

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from types import FrameType

    from faultline.logger import DiagnosticLogger

logger: FaultlineLogger = get_logger(__name__)

_T = TypeVar("_T")
_S = TypeVar("_S", bound="Sequence[Any]")


def _noop(*_args: object, **_kwargs: object) -> None:
    """Stand-in for assertion categories disabled by the current strictness."""
    return None


def _code_of(mark: object) -> object:
    func: object = getattr(mark, "__func__", mark)
    return getattr(func, "__code__", None)


def _attribution_point(stack_crawl_mark: object) -> FrameSummary | None:
    """Return the frame that called ``stack_crawl_mark``.

    Walks outwards from the caller of this helper. If ``stack_crawl_mark`` is not on
    the stack, the caller of the function that invoked this helper is used.
    """
    frame: FrameType | None = inspect.currentframe()
    try:
        origin: FrameType | None = frame.f_back if frame is not None else None
        code: object = _code_of(stack_crawl_mark)
        target: FrameType | None = origin
        while target is not None and target.f_code is not code:
            target = target.f_back
        caller: FrameType | None = target if target is not None else origin
        caller = caller.f_back if caller is not None else None
        if caller is None:
            return None
        return FrameSummary(caller.f_code.co_filename, caller.f_lineno, caller.f_code.co_name)
    finally:
        del frame


def _dump(value: object) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return repr(value)


class AssertionEngine:
    """Assertion helpers bound to a strictness level.

    Args:
        level (AssertionLevel): Strictness; gates the node validators.
        category_label (Callable[[object], str] | None): Turns a node's categorical tag
            into a readable label.
        diagnostics (DiagnosticLogger | None): Leveled logger that receives failure
            messages at `LogLevel.VERBOSE` before they are raised.
    """

    assert_node: Callable[..., None]
    assert_optional_node: Callable[..., None]
    assert_optional_token: Callable[..., None]
    assert_missing_node: Callable[..., None]
    assert_each_node: Callable[..., None]

    def __init__(
        self,
        level: AssertionLevel = AssertionLevel.NONE,
        category_label: Callable[[object], str] | None = None,
        diagnostics: DiagnosticLogger | None = None,
    ) -> None:
        self.level: AssertionLevel = level
        self.category_label: Callable[[object], str] | None = category_label
        self.diagnostics: DiagnosticLogger | None = diagnostics

        if self.should_assert(AssertionLevel.NORMAL):
            self.assert_node = self._assert_node
            self.assert_optional_node = self._assert_optional_node
            self.assert_optional_token = self._assert_optional_token
            self.assert_missing_node = self._assert_missing_node
            self.assert_each_node = self._assert_each_node
        else:
            self.assert_node = _noop
            self.assert_optional_node = _noop
            self.assert_optional_token = _noop
            self.assert_missing_node = _noop
            self.assert_each_node = _noop
        logger.trace("AssertionEngine bound at level %s", level.name)

    def should_assert(self, level: AssertionLevel) -> bool:
        """Return True if assertions requiring ``level`` are active."""
        return self.level >= level

    # ------------------------------------------------------------------ labels

    def describe_kind(self, kind: object) -> str:
        """Return the readable label of a categorical tag."""
        if self.category_label is not None:
            return self.category_label(kind)
        return str(kind)

    def describe_node(self, node: object) -> str:
        """Return the readable label of a domain node (its ``kind``, or its type)."""
        if hasattr(node, "kind"):
            return self.describe_kind(getattr(node, "kind"))
        return type(node).__name__

    # ------------------------------------------------------------- raise point

    def fail(
        self,
        message: str | None = None,
        stack_crawl_mark: Callable[..., Any] | None = None,
        *,
        error_cls: type[DebugFailure] = DebugFailure,
    ) -> NoReturn:
        """Raise a fatal `DebugFailure`.

        Args:
            message (str | None): Failure detail, appended to ``"Debug Failure."``.
            stack_crawl_mark (Callable[..., Any] | None): Wrapper whose own frame is
                hidden from the attribution point; defaults to ``fail`` itself.
            error_cls (type[DebugFailure]): Concrete failure type to raise.

        Raises:
            DebugFailure: Always (or the requested subclass).
        """
        __tracebackhide__ = True
        text: str = f"{DEBUG_FAILURE_PREFIX} {message}" if message else DEBUG_FAILURE_PREFIX
        caller: FrameSummary | None = _attribution_point(stack_crawl_mark or AssertionEngine.fail)
        if self.diagnostics is not None:
            self.diagnostics.trace(text)
        raise error_cls(text, caller=caller)

    # ------------------------------------------------------------ value checks

    def assert_(
        self,
        expression: object,
        message: str | None = None,
        verbose_debug_info: str | Callable[[], str] | None = None,
        stack_crawl_mark: Callable[..., Any] | None = None,
    ) -> None:
        """Fail with ``"False expression: <message>"`` if ``expression`` is falsy.

        Args:
            expression (object): The condition.
            message (str | None): Optional message.
            verbose_debug_info (str | Callable[[], str] | None): Extra detail; callables
                are only invoked on failure.
            stack_crawl_mark (Callable[..., Any] | None): See `fail`.
        """
        __tracebackhide__ = True
        if expression:
            return
        text: str = f"{FALSE_EXPRESSION}: {message}" if message else f"{FALSE_EXPRESSION}."
        if verbose_debug_info:
            info: str = (
                verbose_debug_info if isinstance(verbose_debug_info, str) else verbose_debug_info()
            )
            text += VERBOSE_DEBUG_INFO_SEPARATOR + info
        self.fail(text, stack_crawl_mark or AssertionEngine.assert_)

    def assert_equal(
        self, a: object, b: object, msg: str | None = None, msg2: str | None = None
    ) -> None:
        """Fail unless ``a`` and ``b`` are strictly equal (identical, or same type and ``==``)."""
        __tracebackhide__ = True
        if a is b or (type(a) is type(b) and a == b):
            return
        message: str = (f"{msg} {msg2}" if msg2 else msg) if msg else ""
        self.fail(f"Expected {a} === {b}. {message}", AssertionEngine.assert_equal)

    def assert_less_than(self, a: float, b: float, msg: str | None = None) -> None:
        """Fail unless ``a < b``."""
        __tracebackhide__ = True
        if a >= b:
            self.fail(f"Expected {a} < {b}. {msg or ''}", AssertionEngine.assert_less_than)

    def assert_less_than_or_equal(self, a: float, b: float) -> None:
        """Fail unless ``a <= b``."""
        __tracebackhide__ = True
        if a > b:
            self.fail(f"Expected {a} <= {b}", AssertionEngine.assert_less_than_or_equal)

    def assert_greater_than_or_equal(self, a: float, b: float) -> None:
        """Fail unless ``a >= b``."""
        __tracebackhide__ = True
        if a < b:
            self.fail(f"Expected {a} >= {b}", AssertionEngine.assert_greater_than_or_equal)

    def assert_defined(self, value: _T | None, message: str | None = None) -> _T:
        """Fail if ``value`` is None; otherwise return it (narrowed to non-optional)."""
        __tracebackhide__ = True
        if value is None:
            self.fail(message, AssertionEngine.assert_defined)
        return value

    def assert_each_defined(self, values: _S, message: str | None = None) -> _S:
        """Apply `assert_defined` to every element; return ``values`` unchanged."""
        __tracebackhide__ = True
        for value in values:
            if value is None:
                self.fail(message, AssertionEngine.assert_each_defined)
        return values

    def assert_never(self, value: object, message: str = ILLEGAL_VALUE) -> NoReturn:
        """Exhaustiveness guard: always fail, describing ``value``.

        Domain nodes (values with ``kind`` and ``pos`` attributes) are described by
        their label when a ``category_label`` is configured; anything else is dumped
        as JSON, or with ``repr`` when it is not JSON-serializable.
        """
        __tracebackhide__ = True
        if self.category_label is not None and hasattr(value, "kind") and hasattr(value, "pos"):
            detail: str = "Kind: " + self.describe_kind(getattr(value, "kind"))
        else:
            detail = _dump(value)
        self.fail(f"{message} {detail}", AssertionEngine.assert_never)

    def fail_bad_kind(self, node: object, message: str | None = None) -> NoReturn:
        """Fail because ``node`` has an unexpected kind."""
        __tracebackhide__ = True
        self.fail(
            f"{message or UNEXPECTED_NODE}\r\nNode {self.describe_node(node)} was unexpected.",
            AssertionEngine.fail_bad_kind,
        )

    # ---------------------------------------------------- gated node validators

    def _assert_each_node(
        self,
        nodes: Iterable[Any],
        test: Callable[[Any], bool] | None,
        message: str | None = None,
    ) -> None:
        __tracebackhide__ = True
        self.assert_(
            test is None or all(test(node) for node in nodes),
            message or UNEXPECTED_NODE,
            lambda: f"Node array did not pass test '{get_function_name(test)}'.",
            AssertionEngine._assert_each_node,
        )

    def _assert_node(
        self,
        node: Any,
        test: Callable[[Any], bool] | None,
        message: str | None = None,
    ) -> None:
        __tracebackhide__ = True
        self.assert_(
            test is None or test(node),
            message or UNEXPECTED_NODE,
            lambda: (
                f"Node {self.describe_node(node)} did not pass test '{get_function_name(test)}'."
            ),
            AssertionEngine._assert_node,
        )

    def _assert_optional_node(
        self,
        node: Any,
        test: Callable[[Any], bool] | None,
        message: str | None = None,
    ) -> None:
        __tracebackhide__ = True
        self.assert_(
            test is None or node is None or test(node),
            message or UNEXPECTED_NODE,
            lambda: (
                f"Node {self.describe_node(node)} did not pass test '{get_function_name(test)}'."
            ),
            AssertionEngine._assert_optional_node,
        )

    def _assert_optional_token(self, node: Any, kind: object, message: str | None = None) -> None:
        __tracebackhide__ = True
        self.assert_(
            kind is None or node is None or getattr(node, "kind", None) == kind,
            message or UNEXPECTED_NODE,
            lambda: (
                f"Node {self.describe_node(node)} was not a '{self.describe_kind(kind)}' token."
            ),
            AssertionEngine._assert_optional_token,
        )

    def _assert_missing_node(self, node: Any, message: str | None = None) -> None:
        __tracebackhide__ = True
        self.assert_(
            node is None,
            message or UNEXPECTED_NODE,
            lambda: f"Node {self.describe_node(node)} was unexpected.",
            AssertionEngine._assert_missing_node,
        )

"""
Expression wrapping entry points.

``WrapExpressions`` parses a program, plans a wrap pair for the outermost
expression ending on each line, and splices the caller's hook text into
the source around those expressions and around the program body.

Usage:
    rewritten = wrap(
        "a = 1\\nputs a",
        before_each=lambda line: "record(%d, (" % line,
        after_each=lambda line: "))",
    )
"""

import time
from typing import Callable, Optional

from inline_values.config import settings
from inline_values.models import (
    BufferRegions,
    EditKind,
    ParseFailure,
    Rewritten,
    UnknownNodeKindError,
    WrapHooks,
    WrapOutcome,
)
from inline_values.transform.patcher import TextPatcher
from inline_values.transform.planner import WrapPlanner
from inline_values.utils.logging import get_logger, log_error_with_context, log_rewrite

logger = get_logger(__name__)


class WrapSyntaxError(Exception):
    """Raised by wrap() when the source does not parse."""

    def __init__(self, failure: ParseFailure):
        self.failure = failure
        super().__init__(str(failure))


class WrapExpressions:
    """One wrapping of one source buffer."""

    def __init__(self, source: str, hooks: Optional[WrapHooks] = None, parser=None):
        """
        Args:
            source: Program text
            hooks: Text producers for the wrap markers; defaults to empty text
            parser: SourceParser to use; defaults to the configured language
        """
        self.source = source
        self.hooks = hooks or WrapHooks()
        self.parser = parser

    def call(self) -> WrapOutcome:
        """
        Rewrite the source.

        Returns:
            Rewritten on success, ParseFailure if the source is malformed
        """
        started = time.perf_counter()
        parser = self.parser or self._default_parser()

        try:
            tree = parser.parse(self.source)
        except UnknownNodeKindError as e:
            log_error_with_context(logger, "Parser produced an unknown node kind", e, language=parser.language_name)
            raise

        if isinstance(tree, ParseFailure):
            logger.info(
                f"Not wrapping unparseable source: {tree}",
                extra={"language": parser.language_name, "line": tree.line}
            )
            return tree

        before_all = self.hooks.before_all()
        planner = WrapPlanner(self.source, self.hooks, fault_injection=settings.fault_injection)
        try:
            edits = planner.plan(tree)
        except UnknownNodeKindError as e:
            log_error_with_context(logger, "Wrap planning failed", e, language=parser.language_name, line=e.line)
            raise
        after_all = self.hooks.after_all()

        text = TextPatcher(self.source, BufferRegions.locate(tree)).apply(edits, before_all, after_all)
        wrap_count = sum(1 for edit in edits if edit.kind == EditKind.OPEN)

        log_rewrite(
            logger,
            parser.language_name,
            wrap_count,
            self.source.count("\n") + 1,
            (time.perf_counter() - started) * 1000
        )
        return Rewritten(text=text, wrap_count=wrap_count)

    @staticmethod
    def _default_parser():
        from parsers.manager import get_parser_manager

        language = settings.default_language
        manager = get_parser_manager()
        parser = manager.get_parser(language)
        if parser is None:
            available = ", ".join(manager.list_supported_languages())
            raise ValueError(f"No parser registered for language '{language}' (available: {available})")
        return parser


def wrap_expressions(source: str, hooks: Optional[WrapHooks] = None, parser=None) -> WrapOutcome:
    """Rewrite source, returning Rewritten or ParseFailure."""
    return WrapExpressions(source, hooks, parser).call()


def wrap(
    source: str,
    before_all: Optional[Callable[[], str]] = None,
    after_all: Optional[Callable[[], str]] = None,
    before_each: Optional[Callable[[int], str]] = None,
    after_each: Optional[Callable[[int], str]] = None,
    parser=None
) -> str:
    """
    Rewrite source and return the new text.

    Any hook left as None produces empty text.

    Raises:
        WrapSyntaxError: If the source does not parse
    """
    given = {
        "before_all": before_all,
        "after_all": after_all,
        "before_each": before_each,
        "after_each": after_each,
    }
    hooks = WrapHooks(**{name: hook for name, hook in given.items() if hook is not None})

    outcome = wrap_expressions(source, hooks, parser)
    if isinstance(outcome, ParseFailure):
        raise WrapSyntaxError(outcome)
    return outcome.text

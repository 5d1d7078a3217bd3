"""
Text patching.

Splices planned edits into the original source in a single left-to-right
scan. All edits are expressed against offsets of the original buffer, so
no offset is ever shifted by an earlier insertion.
"""

from typing import Iterable, List, Tuple

from inline_values.models import BufferRegions, EditKind, WrapEdit
from inline_values.utils.logging import get_logger

logger = get_logger(__name__, phase="patch")


def edit_order(edit: WrapEdit) -> Tuple[int, int, int, int]:
    """
    Sort key placing edits that share an offset in nesting order.

    Closes of non-empty spans come first (innermost first, the body close
    last), then opens (the body open first, then outermost first), then
    replacements, then closes of empty spans.
    """
    if edit.kind == EditKind.CLOSE:
        if edit.span_end > edit.span_start:
            return (edit.offset, 0, int(edit.body), -edit.span_start)
        return (edit.offset, 3, int(edit.body), 0)
    if edit.kind == EditKind.OPEN:
        return (edit.offset, 1, int(not edit.body), -edit.span_end)
    return (edit.offset, 2, 0, 0)


class TextPatcher:
    """Applies wrap edits to one source buffer."""

    def __init__(self, source: str, regions: BufferRegions):
        """
        Args:
            source: Original source text
            regions: Body and data segment regions of the source
        """
        self._source = source
        self._regions = regions

    def apply(self, edits: Iterable[WrapEdit], before_all: str = "", after_all: str = "") -> str:
        """
        Produce the rewritten text.

        Args:
            edits: Per-expression edits from the planner
            before_all: Text placed at the start of the body
            after_all: Text placed at the end of the body

        Returns:
            The source with every edit applied and the data segment copied verbatim

        Raises:
            ValueError: If an edit lies beyond the start of the data segment
        """
        regions = self._regions
        all_edits: List[WrapEdit] = [
            WrapEdit(
                offset=regions.body_start,
                text=before_all,
                kind=EditKind.OPEN,
                span_start=regions.body_start,
                span_end=regions.body_end,
                body=True,
            ),
            *edits,
            WrapEdit(
                offset=regions.body_end,
                text=after_all,
                kind=EditKind.CLOSE,
                span_start=regions.body_start,
                span_end=regions.body_end,
                body=True,
            ),
        ]

        limit = regions.data_start if regions.data_start is not None else len(self._source)
        for edit in all_edits:
            if edit.offset + edit.length > limit:
                raise ValueError(
                    f"Edit at offset {edit.offset} lies beyond the end of the code region ({limit})"
                )

        pieces: List[str] = []
        cursor = 0
        for edit in sorted(all_edits, key=edit_order):
            if edit.offset > cursor:
                pieces.append(self._source[cursor:edit.offset])
                cursor = edit.offset
            pieces.append(edit.text)
            if edit.kind == EditKind.REPLACE:
                cursor = edit.offset + edit.length
        pieces.append(self._source[cursor:limit])

        text = "".join(pieces)
        if regions.data_start is not None:
            if text and not text.endswith("\n"):
                text += "\n"
            text += self._source[regions.data_start:]

        logger.debug(f"Applied {len(all_edits)} edits", extra={"length": len(text)})
        return text

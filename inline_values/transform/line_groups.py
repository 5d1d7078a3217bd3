"""
Per-line grouping of wrap candidates.

Each physical line gets at most one wrap pair. Heredoc bodies are text
displaced below the line that declares them, so no candidate may begin or
end inside one.
"""

from typing import Dict, Iterable, List, Sequence, Set, Tuple

from inline_values.models import LineGroup, WrapCandidate
from inline_values.utils.logging import get_logger

logger = get_logger(__name__, phase="group")


class LineGrouper:
    """Groups candidates by the line their span ends on."""

    def __init__(
        self,
        heredoc_bodies: Sequence[Tuple[int, int]] = (),
        heredoc_lines: Iterable[int] = ()
    ):
        """
        Args:
            heredoc_bodies: (start_offset, end_offset) of every heredoc body
            heredoc_lines: Lines holding at least one heredoc declaration
        """
        self._heredoc_bodies = list(heredoc_bodies)
        self._heredoc_lines: Set[int] = set(heredoc_lines)

    def group(self, candidates: Iterable[WrapCandidate]) -> List[LineGroup]:
        """
        Group candidates into lines, in ascending line order.

        Candidates touching the inside of a heredoc body are dropped.
        """
        groups: Dict[int, LineGroup] = {}
        for candidate in sorted(candidates, key=lambda c: c.order):
            if self._inside_heredoc_body(candidate):
                logger.debug(
                    f"Dropping candidate at offset {candidate.start_offset} inside a heredoc body",
                    extra={"line": candidate.end_line}
                )
                continue

            line = candidate.end_line
            if line not in groups:
                groups[line] = LineGroup(line=line, has_heredoc=line in self._heredoc_lines)
            groups[line].candidates.append(candidate)

        return [groups[line] for line in sorted(groups)]

    def _inside_heredoc_body(self, candidate: WrapCandidate) -> bool:
        for body_start, body_end in self._heredoc_bodies:
            if body_start < candidate.start_offset < body_end:
                return True
            if body_start < candidate.end_offset < body_end:
                return True
        return False

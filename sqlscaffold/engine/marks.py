"""Marker-delimited deletion of skeleton code blocks.

Skeleton files carry regions that only make sense for a variant that is not
being generated (an RPC transport, example entity fields, ...). Each region
is wrapped in a start/end marker comment pair::

    // delete the templates code start
    ...
    // delete the templates code end

A ``MarkSpan`` names the file and marker pair. Spans are resolved once per
pass against the pristine skeleton text and turned into structural
substitution rules that replace the region, markers included, with nothing.
A file that holds no complete marker pair resolves to no rules, so deletion
is a no-op on text that has already been stripped.
"""

from __future__ import annotations

import logging

from .models import DeletionPolicy, MarkSpan, SubstitutionRule

logger = logging.getLogger(__name__)

START_MARK = "// delete the templates code start"
END_MARK = "// delete the templates code end"
WELL_START_MARK = "# delete the templates code start"
WELL_END_MARK = "# delete the templates code end"


def find_spans(text: str, start_marker: str, end_marker: str, policy: DeletionPolicy) -> list[str]:
    """Return the exact text of each deletable span in *text*.

    A span runs from the start marker through the first end marker after it,
    plus the newline that terminates the end-marker line. Indentation in
    front of a start marker that opens its line belongs to the span. Markers
    do not nest. An unterminated start marker ends the search.
    """
    spans: list[str] = []
    pos = 0
    while True:
        start = text.find(start_marker, pos)
        if start < 0:
            break
        end = text.find(end_marker, start + len(start_marker))
        if end < 0:
            break
        line_start = text.rfind("\n", 0, start) + 1
        if line_start >= pos and not text[line_start:start].strip():
            start = line_start
        stop = end + len(end_marker)
        if text.startswith("\r\n", stop):
            stop += 2
        elif text.startswith("\n", stop):
            stop += 1
        spans.append(text[start:stop])
        if policy is DeletionPolicy.FIRST:
            break
        pos = stop
    return spans


def delete_spans(text: str, start_marker: str, end_marker: str, policy: DeletionPolicy) -> str:
    """Remove the spans ``find_spans`` would report from *text*."""
    for span in find_spans(text, start_marker, end_marker, policy):
        text = text.replace(span, "", 1)
    return text


def resolve_mark_rules(mark: MarkSpan, text: str | None) -> list[SubstitutionRule]:
    """Turn *mark* into deletion rules for the given file content.

    *text* is ``None`` when the file is missing from the skeleton; that is
    logged and yields no rules.
    """
    if text is None:
        logger.debug("mark file %s not found in skeleton, skipped", mark.file)
        return []
    spans = find_spans(text, mark.start_marker, mark.end_marker, mark.policy)
    if not spans:
        logger.debug("no marker pair in %s", mark.file)
    return [SubstitutionRule(pattern=span, replacement="", case_sensitive=True) for span in spans]

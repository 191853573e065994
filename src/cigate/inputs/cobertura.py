"""Rate-based (Cobertura-style XML) coverage summaries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from defusedxml import DefusedXmlException, ElementTree

from cigate.core.coverage import RateBasedReport
from cigate.errors import InvalidCoverageReportError

if TYPE_CHECKING:
    from xml.etree.ElementTree import Element


def _local_name(tag: str | None) -> str:
    return (tag or "").split("}")[-1]  # tolerate namespaces


def _rate(element: Element, attr: str, *, source: str) -> float | None:
    raw = element.get(attr)
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        msg = f"{source}: invalid {attr!r} value {raw!r}"
        raise InvalidCoverageReportError(msg) from exc
    if not 0.0 <= value <= 1.0:
        msg = f"{source}: {attr!r} out of range: {value}"
        raise InvalidCoverageReportError(msg)
    return value


def parse_cobertura_xml(text: str, *, source: str = "<xml>") -> RateBasedReport:
    """Read ``line-rate``/``branch-rate`` from a coverage XML document.

    Rates come from the first ``metrics`` element when present, else from the
    ``coverage`` root element itself.
    """
    try:
        root = ElementTree.fromstring(text)
    except (ElementTree.ParseError, DefusedXmlException) as exc:
        msg = f"{source}: failed to parse coverage XML: {exc}"
        raise InvalidCoverageReportError(msg) from exc

    if _local_name(root.tag).lower() != "coverage":
        msg = f"{source}: unexpected root tag {root.tag!r}"
        raise InvalidCoverageReportError(msg)

    holder = root
    for element in root.iter():
        if element is not root and _local_name(element.tag) == "metrics":
            holder = element
            break

    line_rate = _rate(holder, "line-rate", source=source)
    if line_rate is None:
        msg = f"{source}: missing 'line-rate' attribute"
        raise InvalidCoverageReportError(msg)
    return RateBasedReport(line_rate=line_rate, branch_rate=_rate(holder, "branch-rate", source=source))


__all__ = ["parse_cobertura_xml"]

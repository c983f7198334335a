"""Turn a raw chart payload into a :class:`DailyAnalysis`."""

from __future__ import annotations

from datetime import date

from pydantic import ValidationError

from quoterecorder.core.data.ingestion.classifier import classify_sessions
from quoterecorder.core.data.ingestion.validator import validate_chart
from quoterecorder.core.exceptions import ParseError
from quoterecorder.core.models.analysis import DailyAnalysis
from quoterecorder.core.models.chart import ChartEnvelope


def decode_chart(raw: bytes | str, *, market: str, code: str, day: date | None = None) -> ChartEnvelope:
    """Decode ``raw`` JSON into the chart envelope.

    Raises:
        ParseError: the payload is not well-formed JSON or a field has an
            incompatible type.
    """

    try:
        return ChartEnvelope.model_validate_json(raw)
    except ValidationError as exc:
        first = exc.errors()[0] if exc.error_count() else {}
        raise ParseError(
            f"failed to decode chart payload: {first.get('msg', exc)}",
            market,
            code,
            day,
            details={
                "error_type": first.get("type"),
                "location": ".".join(str(part) for part in first.get("loc", ())),
            },
        ) from exc


def parse_daily_chart(company_code: str, market: str, day: date, raw: bytes | str) -> DailyAnalysis:
    """Parse, validate and classify one day of minute quotes.

    A payload that decodes but fails validation is returned as an analysis
    with ``error=True``; only undecodable payloads raise.
    """

    envelope = decode_chart(raw, market=market, code=company_code, day=day)

    analysis = DailyAnalysis(code=company_code, market=market, date=day)

    issue = validate_chart(envelope)
    if issue is not None:
        analysis.mark_invalid(issue.message)
        return analysis

    return classify_sessions(analysis, envelope.chart.result[0])


__all__ = ["decode_chart", "parse_daily_chart"]

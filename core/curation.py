# =============================================================================
# core/curation.py  —  Curation Dispatcher
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Composes the primitives (normalizer, projector, summarizer, capper) into
#   the final payload for each tool family.  Every function here takes raw
#   JSON and returns one of:
#
#     dict / list  → serialized by the tool layer as pretty-printed JSON
#     str          → a one-line "no data" sentence, returned verbatim
#
# FAMILIES:
#   single entity      profile, quote, rating, DCF
#   metric dictionary  TTM ratios, TTM key metrics
#   series             historical prices, technical indicators
#   collection         search, news, earnings, dividends, statements,
#                      enterprise values, insider trades, SEC filings,
#                      IPO calendar, stock screener
#   composite          analyst estimates (+ price-target summary)
#
# Nothing in here performs I/O or raises for missing data.
# =============================================================================

from typing import Any, Optional, Union

from core.capping import cap
from core.fmp_client import ProviderError
from core.models import CurationPolicy, DetailTier, RawRecord
from core.normalizer import first_record, normalize
from core.policies import (
    DCF_POLICY,
    DIVIDEND_POLICY,
    EARNINGS_BRIEF_POLICY,
    EARNINGS_DETAIL_POLICY,
    ENTERPRISE_VALUE_POLICY,
    ESTIMATE_POLICY,
    INSIDER_TRADE_POLICY,
    IPO_POLICY,
    NEWS_POLICY,
    PRICE_TARGET_POLICY,
    SCREENER_POLICY,
    SEARCH_POLICY,
    SEC_FILING_POLICY,
)
from core.projection import project, project_all
from core.series import recent_values, sort_by_date, summarize_series

Payload = Union[dict, list, str]

SEARCH_MAX_RESULTS = 5
NEWS_SUMMARY_COUNT = 3
NEWS_FULL_COUNT = 10
EARNINGS_MAX_RESULTS = 10
STATEMENT_SUMMARY_COUNT = 4
STATEMENT_FULL_COUNT = 12
EVENT_SUMMARY_COUNT = 10
EVENT_FULL_COUNT = 25
SCREENER_SUMMARY_COUNT = 10
SCREENER_FULL_COUNT = 25
RECENT_ESTIMATES_COUNT = 2


# =============================================================================
# Single-entity families
# =============================================================================
def curate_single(raw: Any, policy: CurationPolicy, not_found: str) -> Payload:
    """First record, projected.  No envelope; `not_found` if there is none."""
    record = first_record(raw)
    if not record:
        return not_found
    projected = project(record, policy)
    return projected if projected else not_found


def curate_dcf(raw: Any, symbol: str) -> Payload:
    """DCF valuation plus the derived upside/downside versus the stock price."""
    record = first_record(raw)
    not_found = (
        f"No DCF valuation data found for {symbol}. This might be due to data "
        "availability or the company type."
    )
    if not record:
        return not_found

    fields = project(record, DCF_POLICY)
    dcf_value = fields.get("dcfValue")
    if dcf_value is None:
        return not_found

    stock_price = fields.get("stockPrice")
    upside = potential_upside_percent(dcf_value, stock_price)

    if upside is None:
        message = "Could not calculate potential upside."
    elif upside > 0:
        message = f"DCF suggests a potential upside of {upside:.2f}%."
    else:
        message = f"DCF suggests a potential downside of {abs(upside):.2f}%."

    return {
        "symbol": fields.get("symbol", symbol),
        "date": fields.get("date"),
        "stockPrice": stock_price,
        "dcfValue": dcf_value,
        "currency": "USD",
        "potentialUpsidePercent": upside,
        "message": message,
    }


def potential_upside_percent(dcf_value: Any, stock_price: Any) -> Optional[float]:
    """(dcf - price) / price * 100 rounded to 2 dp; None unless price > 0."""
    numeric = (int, float)
    if isinstance(dcf_value, bool) or isinstance(stock_price, bool):
        return None
    if not isinstance(dcf_value, numeric) or not isinstance(stock_price, numeric):
        return None
    if stock_price <= 0:
        return None
    return round((dcf_value - stock_price) / stock_price * 100, 2)


# =============================================================================
# Dictionary-of-metrics families
# =============================================================================
def curate_metric_dictionary(
    raw: Any,
    policy: CurationPolicy,
    symbol: str,
    section: str,
    noun: str,
    not_found: str,
) -> Payload:
    """Project one wide TTM record onto a curated list of metrics."""
    record = first_record(raw)
    if not record:
        return not_found

    curated = project(record, policy)
    return {
        "symbol": record.get("symbol") or symbol,
        "date": record.get("date"),
        "sourceMessage": (
            f"Showing {len(curated)} of {len(record)} {noun} (curated TTM list)."
        ),
        section: curated,
    }


# =============================================================================
# Series families
# =============================================================================
def curate_price_history(raw: Any, detail: DetailTier) -> Payload:
    points = normalize(raw, wrapper_key="historical")
    if points.is_empty:
        return "No historical data found for the given parameters."
    return summarize_series(points, detail)


def curate_indicator(raw: Any, indicator: str, symbol: str, period: int, interval: str) -> Payload:
    points = normalize(raw)
    if points.is_empty:
        return (
            f"No {indicator} data found for {symbol} with period {period} "
            f"on {interval} interval."
        )
    return recent_values(points, indicator)


# =============================================================================
# Collection families
# =============================================================================
def curate_search(raw: Any) -> Payload:
    results = normalize(raw)
    if results.is_empty:
        return "No symbols found matching your query."

    capped = cap(
        results, DetailTier.SUMMARY, SEARCH_MAX_RESULTS, SEARCH_MAX_RESULTS,
        SEARCH_POLICY, noun="symbols",
        hint="Be more specific if your target is not listed.",
    )
    if not capped.truncated:
        return capped.items
    return {"message": capped.message, "matches": capped.items}


def curate_news(raw: Any, detail: DetailTier) -> Payload:
    articles = normalize(raw)
    if articles.is_empty:
        return "No news found for the given symbol(s)."

    capped = cap(
        articles, detail, NEWS_SUMMARY_COUNT, NEWS_FULL_COUNT, NEWS_POLICY,
        noun="articles", sort_key="publishedDate",
    )
    return {"message": capped.message, "articles": capped.items}


def curate_earnings_calendar(raw: Any, symbol: Optional[str], limit: int) -> Payload:
    """Earnings events; a hard cap of 10 applies on every tier.

    A market-wide calendar longer than the cap keeps only the brief fields,
    and the model is told how to narrow the query.  A symbol's calendar, or
    a short one, keeps the reported figures.
    """
    events = normalize(raw)
    if events.is_empty:
        return "No earnings calendar data found for the given parameters."
    events.records = events.records[:limit]

    if not symbol and len(events) > EARNINGS_MAX_RESULTS:
        capped = cap(
            events, DetailTier.SUMMARY, EARNINGS_MAX_RESULTS, EARNINGS_MAX_RESULTS,
            EARNINGS_BRIEF_POLICY, noun="earnings events",
            hint="Specify a symbol or a tighter date range for more targeted results.",
        )
    else:
        noun = f"earnings events for {symbol}" if symbol else "earnings events"
        capped = cap(
            events, DetailTier.SUMMARY, EARNINGS_MAX_RESULTS, EARNINGS_MAX_RESULTS,
            EARNINGS_DETAIL_POLICY, noun=noun,
        )
    return {"message": capped.message, "earningsEvents": capped.items}


def curate_dividends(raw: Any, symbol: str, limit: int) -> Payload:
    dividends = normalize(raw, wrapper_key="historical")
    if dividends.is_empty:
        return (
            f"No dividend data found for {symbol}. The company may not pay "
            "dividends or data may be unavailable."
        )

    capped = cap(
        dividends, DetailTier.SUMMARY, limit, limit, DIVIDEND_POLICY,
        noun=f"dividend records for {symbol}", sort_key="date",
    )
    return {"message": capped.message, "dividends": capped.items}


def curate_statements(
    raw: Any,
    policy: CurationPolicy,
    symbol: str,
    period: str,
    detail: DetailTier,
    noun: str,
) -> Payload:
    """Income / balance-sheet / cash-flow periods, most recent first."""
    statements = normalize(raw)
    if statements.is_empty:
        return f"No {noun} found for {symbol} ({period})."

    capped = cap(
        statements, detail, STATEMENT_SUMMARY_COUNT, STATEMENT_FULL_COUNT, policy,
        noun=f"{period} {noun}", sort_key="date",
    )
    return {
        "symbol": symbol,
        "period": period,
        "message": capped.message,
        "statements": capped.items,
    }


def curate_enterprise_values(raw: Any, symbol: str, period: str, detail: DetailTier) -> Payload:
    """Enterprise value bridge (market cap, cash, debt) per period, newest first."""
    values = normalize(raw)
    if values.is_empty:
        return f"No enterprise value data found for {symbol} ({period})."

    capped = cap(
        values, detail, STATEMENT_SUMMARY_COUNT, STATEMENT_FULL_COUNT,
        ENTERPRISE_VALUE_POLICY, noun=f"{period} enterprise value records", sort_key="date",
    )
    return {
        "symbol": symbol,
        "period": period,
        "message": capped.message,
        "enterpriseValues": capped.items,
    }


def curate_insider_trades(raw: Any, symbol: str, detail: DetailTier) -> Payload:
    trades = normalize(raw)
    if trades.is_empty:
        return f"No insider trading activity found for {symbol}."

    capped = cap(
        trades, detail, EVENT_SUMMARY_COUNT, EVENT_FULL_COUNT, INSIDER_TRADE_POLICY,
        noun="insider transactions", sort_key="transactionDate",
    )
    return {"symbol": symbol, "message": capped.message, "trades": capped.items}


def curate_sec_filings(raw: Any, symbol: str, detail: DetailTier) -> Payload:
    filings = normalize(raw)
    if filings.is_empty:
        return f"No SEC filings found for {symbol}."

    capped = cap(
        filings, detail, EVENT_SUMMARY_COUNT, EVENT_FULL_COUNT, SEC_FILING_POLICY,
        noun="filings", sort_key="fillingDate",
    )
    return {"symbol": symbol, "message": capped.message, "filings": capped.items}


def curate_ipo_calendar(raw: Any, detail: DetailTier) -> Payload:
    ipos = normalize(raw)
    if ipos.is_empty:
        return "No IPOs found for the given date range."

    capped = cap(
        ipos, detail, EVENT_SUMMARY_COUNT, EVENT_FULL_COUNT, IPO_POLICY, noun="IPOs",
    )
    return {"message": capped.message, "ipos": capped.items}


def curate_screener(raw: Any, detail: DetailTier) -> Payload:
    """Screener matches in upstream order (FMP ranks them by market cap)."""
    matches = normalize(raw)
    if matches.is_empty:
        return "No stocks matched the screening criteria."

    capped = cap(
        matches, detail, SCREENER_SUMMARY_COUNT, SCREENER_FULL_COUNT, SCREENER_POLICY,
        noun="matching stocks",
    )
    return {"message": capped.message, "stocks": capped.items}


# =============================================================================
# Composite family: analyst estimates
# =============================================================================
# Two upstream calls feed one payload.  Each sub-source arrives either as raw
# JSON or as the ProviderError its fetch raised.  A missing or failed half is
# left out (and named under "unavailable"); only when BOTH halves are empty
# is the result a "no data" sentence.
# =============================================================================
def curate_analyst_estimates(
    symbol: str,
    estimates: Union[Any, ProviderError],
    price_target: Union[Any, ProviderError],
) -> Payload:
    unavailable: dict[str, str] = {}

    estimate_records: list[RawRecord] = []
    if isinstance(estimates, ProviderError):
        unavailable["recentEstimates"] = estimates.message
    else:
        estimate_records = sort_by_date(normalize(estimates).records)

    target: Optional[RawRecord] = None
    if isinstance(price_target, ProviderError):
        unavailable["priceTargetSummary"] = price_target.message
    else:
        target = first_record(price_target)

    if not estimate_records and not target:
        if len(unavailable) == 2:
            details = "; ".join(f"{k}: {v}" for k, v in unavailable.items())
            return f"Error in analyst_estimates: {details}"
        return "No analyst estimates or price target data found for the symbol."

    summary: dict[str, Any] = {
        "symbol": symbol,
        "sourceMessage": (
            "Summarized analyst estimates. More historical/detailed data might "
            "be available via direct API."
        ),
    }
    if target:
        summary["priceTargetSummary"] = project(target, PRICE_TARGET_POLICY)
    if estimate_records:
        summary["recentEstimates"] = project_all(
            estimate_records[:RECENT_ESTIMATES_COUNT], ESTIMATE_POLICY
        )
        summary["recommendationInfo"] = (
            "Detailed buy/hold/sell counts are not part of this summary. FMP has "
            "separate recommendation endpoints."
        )
    if unavailable:
        summary["unavailable"] = unavailable
    return summary

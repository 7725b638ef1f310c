# =============================================================================
# tools/handlers.py  —  One async handler per MCP tool
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Each handler follows the same four steps:
#     1. Build the FMP path + query from the (already validated) arguments
#     2. Fetch through the client (the only suspension point)
#     3. Hand the raw JSON to core/curation.py
#     4. Render the payload as ONE text block
#
# THE TEXT CONTRACT:
#   Every handler returns a str: pretty-printed JSON, or a one-line sentence
#   for "no data" and provider errors.  Nothing is raised to the transport;
#   a failed upstream call is reported as content so the model can react.
#
# WHY SEPARATE FROM mcp_server.py?
#   The FastMCP decorator wraps functions in its own Tool objects.  Keeping
#   the logic here as plain coroutines means tests can drive them directly
#   with a fake client and no MCP session.
# =============================================================================

import asyncio
import json
import logging
from typing import Any, Callable, Mapping, Optional
import urllib.parse

from core.curation import (
    STATEMENT_FULL_COUNT,
    Payload,
    curate_analyst_estimates,
    curate_dcf,
    curate_dividends,
    curate_earnings_calendar,
    curate_enterprise_values,
    curate_indicator,
    curate_insider_trades,
    curate_ipo_calendar,
    curate_metric_dictionary,
    curate_news,
    curate_price_history,
    curate_screener,
    curate_search,
    curate_sec_filings,
    curate_single,
    curate_statements,
)
from core.fmp_client import ProviderError
from core.models import DetailTier
from core.policies import (
    BALANCE_SHEET_POLICY,
    CASH_FLOW_POLICY,
    INCOME_STATEMENT_POLICY,
    KEY_METRICS_TTM_POLICY,
    PROFILE_POLICY,
    QUOTE_POLICY,
    RATING_POLICY,
    RATIOS_TTM_POLICY,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Logging helpers
# =============================================================================
# Everything goes to STDERR (configured in main.py): STDOUT carries the MCP
# protocol, and a stray log line there would corrupt it.
#   CYAN   → incoming tool call + params
#   YELLOW → intermediate status
#   GREEN  → response preview
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

_RESPONSE_PREVIEW_CHARS = 300


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, text: str) -> str:
    """Log a one-line preview of the response text in GREEN, then return it."""
    preview = " ".join(text.split())
    if len(preview) > _RESPONSE_PREVIEW_CHARS:
        preview = preview[:_RESPONSE_PREVIEW_CHARS] + "…"
    logger.info(f"{_GREEN}  ← {tool_name} response ({len(text)} chars): {preview}{_RESET}")
    return text


def render(payload: Payload) -> str:
    """Serialize a curated payload as the tool's single text result."""
    if isinstance(payload, str):
        return payload
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _segment(value: Any) -> str:
    return urllib.parse.quote(str(value), safe="")


async def _fetch_and_curate(
    client,
    tool_name: str,
    path: str,
    query: Optional[Mapping[str, Any]],
    curate: Callable[[Any], Payload],
    error_prefix: Optional[str] = None,
) -> str:
    """Fetch, curate, render; a ProviderError becomes the text result."""
    try:
        raw = await client.afetch(path, query)
    except ProviderError as e:
        logger.warning("%s failed (status=%s): %s", tool_name, e.status, e.message)
        prefix = error_prefix or f"Error in {tool_name}"
        return _log_response(tool_name, f"{prefix}: {e.message}")

    _log_status(f"Fetched {_describe(raw)} from {path}")
    return _log_response(tool_name, render(curate(raw)))


def _describe(raw: Any) -> str:
    if isinstance(raw, list):
        return f"{len(raw)} records"
    if isinstance(raw, dict):
        return f"object with {len(raw)} keys"
    return "empty response"


# =============================================================================
# Single-entity tools
# =============================================================================
async def search_symbol(client, query: str, limit: int = 10) -> str:
    _log_request("search_symbol", query=query, limit=limit)
    return await _fetch_and_curate(
        client, "search_symbol", "/search", {"query": query, "limit": limit}, curate_search,
    )


async def company_profile(client, symbol: str) -> str:
    _log_request("company_profile", symbol=symbol)
    return await _fetch_and_curate(
        client, "company_profile", f"/profile/{_segment(symbol)}", None,
        lambda raw: curate_single(raw, PROFILE_POLICY, "No company profile data found for the symbol."),
    )


async def quote(client, symbol: str) -> str:
    _log_request("quote", symbol=symbol)
    return await _fetch_and_curate(
        client, "quote", f"/quote/{_segment(symbol)}", None,
        lambda raw: curate_single(raw, QUOTE_POLICY, "No quote data found for the symbol."),
    )


async def ratings(client, symbol: str) -> str:
    _log_request("ratings", symbol=symbol)
    return await _fetch_and_curate(
        client, "ratings", f"/rating/{_segment(symbol)}", None,
        lambda raw: curate_single(raw, RATING_POLICY, f"No rating data found for {symbol}."),
    )


async def dcf_valuation(client, symbol: str) -> str:
    _log_request("dcf_valuation", symbol=symbol)
    return await _fetch_and_curate(
        client, "dcf_valuation", f"/discounted-cash-flow/{_segment(symbol)}", None,
        lambda raw: curate_dcf(raw, symbol),
        error_prefix=f"Error fetching DCF for {symbol}",
    )


# =============================================================================
# Metric dictionaries
# =============================================================================
async def financial_ratios_ttm(client, symbol: str) -> str:
    _log_request("financial_ratios_ttm", symbol=symbol)
    return await _fetch_and_curate(
        client, "financial_ratios_ttm", f"/ratios-ttm/{_segment(symbol)}", None,
        lambda raw: curate_metric_dictionary(
            raw, RATIOS_TTM_POLICY, symbol, section="ratios", noun="ratios",
            not_found="No TTM financial ratios found for the symbol.",
        ),
    )


async def key_metrics_ttm(client, symbol: str) -> str:
    _log_request("key_metrics_ttm", symbol=symbol)
    return await _fetch_and_curate(
        client, "key_metrics_ttm", f"/key-metrics-ttm/{_segment(symbol)}", None,
        lambda raw: curate_metric_dictionary(
            raw, KEY_METRICS_TTM_POLICY, symbol, section="metrics", noun="metrics",
            not_found="No TTM key metrics found for the symbol.",
        ),
    )


# =============================================================================
# Series
# =============================================================================
DEFAULT_DAILY_POINTS = 90
DEFAULT_INTRADAY_POINTS = 100


def history_request(
    symbol: str,
    interval: str = "daily",
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
    timeseries: Optional[int] = None,
) -> tuple[str, dict[str, Any]]:
    """Pick the daily or intraday endpoint and its query parameters.

    With no date range, daily requests default to the last 90 bars and
    intraday requests to the last 100.
    """
    has_range = bool(from_date or to_date)
    query: dict[str, Any] = {"from": from_date, "to": to_date}

    if interval.lower() == "daily":
        path = f"/historical-price-full/{_segment(symbol)}"
        if not has_range:
            query["timeseries"] = timeseries or DEFAULT_DAILY_POINTS
    else:
        path = f"/historical-chart/{_segment(interval)}/{_segment(symbol)}"
        if not has_range:
            query["last"] = timeseries or DEFAULT_INTRADAY_POINTS

    return path, {k: v for k, v in query.items() if v is not None}


async def historical_stock_data(
    client,
    symbol: str,
    interval: str = "daily",
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
    timeseries: Optional[int] = None,
    detail: str = "summary",
) -> str:
    _log_request("historical_stock_data", symbol=symbol, interval=interval,
                 from_date=from_date, to_date=to_date, timeseries=timeseries, detail=detail)
    tier = DetailTier.parse(detail)
    path, query = history_request(symbol, interval, from_date, to_date, timeseries)
    return await _fetch_and_curate(
        client, "historical_stock_data", path, query,
        lambda raw: curate_price_history(raw, tier),
        error_prefix="Error fetching historical_stock_data",
    )


async def technical_indicator(
    client,
    symbol: str,
    interval: str,
    indicator_type: str,
    period: int,
) -> str:
    _log_request("technical_indicator", symbol=symbol, interval=interval,
                 indicator_type=indicator_type, period=period)
    return await _fetch_and_curate(
        client, "technical_indicator",
        f"/technical_indicator/{_segment(interval)}/{_segment(symbol)}",
        {"type": indicator_type, "period": period},
        lambda raw: curate_indicator(raw, indicator_type, symbol, period, interval),
    )


# =============================================================================
# Collections
# =============================================================================
async def stock_news(client, symbol: str, limit: int = 15, detail: str = "summary") -> str:
    _log_request("stock_news", symbol=symbol, limit=limit, detail=detail)
    tier = DetailTier.parse(detail)
    return await _fetch_and_curate(
        client, "stock_news", "/stock_news", {"tickers": symbol, "limit": limit},
        lambda raw: curate_news(raw, tier),
        error_prefix="Error fetching stock_news",
    )


async def earnings_calendar(
    client,
    symbol: Optional[str] = None,
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
    limit: int = 50,
) -> str:
    _log_request("earnings_calendar", symbol=symbol, from_date=from_date,
                 to_date=to_date, limit=limit)
    query = {"symbol": symbol, "from": from_date, "to": to_date}
    return await _fetch_and_curate(
        client, "earnings_calendar", "/earning_calendar", query,
        lambda raw: curate_earnings_calendar(raw, symbol, limit),
    )


async def dividend_calendar(client, symbol: str, limit: int = 10) -> str:
    _log_request("dividend_calendar", symbol=symbol, limit=limit)
    return await _fetch_and_curate(
        client, "dividend_calendar",
        f"/historical-price-full/stock_dividend/{_segment(symbol)}", None,
        lambda raw: curate_dividends(raw, symbol, limit),
        error_prefix=f"Error fetching dividend data for {symbol}",
    )


_STATEMENTS = {
    "income_statement": ("/income-statement", INCOME_STATEMENT_POLICY, "income statements"),
    "balance_sheet": ("/balance-sheet-statement", BALANCE_SHEET_POLICY, "balance sheets"),
    "cash_flow": ("/cash-flow-statement", CASH_FLOW_POLICY, "cash flow statements"),
}


async def financial_statement(
    client,
    statement: str,
    symbol: str,
    period: str = "quarter",
    detail: str = "summary",
) -> str:
    """Shared handler for income_statement, balance_sheet and cash_flow."""
    _log_request(statement, symbol=symbol, period=period, detail=detail)
    endpoint, policy, noun = _STATEMENTS[statement]
    tier = DetailTier.parse(detail)
    return await _fetch_and_curate(
        client, statement, f"{endpoint}/{_segment(symbol)}",
        {"period": period, "limit": STATEMENT_FULL_COUNT},
        lambda raw: curate_statements(raw, policy, symbol, period, tier, noun),
    )


async def enterprise_value(client, symbol: str, period: str = "quarter", detail: str = "summary") -> str:
    _log_request("enterprise_value", symbol=symbol, period=period, detail=detail)
    tier = DetailTier.parse(detail)
    return await _fetch_and_curate(
        client, "enterprise_value", f"/enterprise-values/{_segment(symbol)}",
        {"period": period, "limit": STATEMENT_FULL_COUNT},
        lambda raw: curate_enterprise_values(raw, symbol, period, tier),
    )


async def insider_trades(client, symbol: str, detail: str = "summary") -> str:
    _log_request("insider_trades", symbol=symbol, detail=detail)
    tier = DetailTier.parse(detail)
    return await _fetch_and_curate(
        client, "insider_trades", "/insider-trading", {"symbol": symbol},
        lambda raw: curate_insider_trades(raw, symbol, tier),
    )


async def sec_filings(client, symbol: str, detail: str = "summary") -> str:
    _log_request("sec_filings", symbol=symbol, detail=detail)
    tier = DetailTier.parse(detail)
    return await _fetch_and_curate(
        client, "sec_filings", f"/sec_filings/{_segment(symbol)}", None,
        lambda raw: curate_sec_filings(raw, symbol, tier),
    )


async def ipo_calendar(
    client,
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
    detail: str = "summary",
) -> str:
    _log_request("ipo_calendar", from_date=from_date, to_date=to_date, detail=detail)
    tier = DetailTier.parse(detail)
    return await _fetch_and_curate(
        client, "ipo_calendar", "/ipo_calendar", {"from": from_date, "to": to_date},
        lambda raw: curate_ipo_calendar(raw, tier),
    )


async def stock_screener(
    client,
    market_cap_more_than: Optional[float] = None,
    sector: Optional[str] = None,
    price_more_than: Optional[float] = None,
    price_less_than: Optional[float] = None,
    exchange: Optional[str] = None,
    limit: int = 100,
    detail: str = "summary",
) -> str:
    _log_request("stock_screener", market_cap_more_than=market_cap_more_than, sector=sector,
                 price_more_than=price_more_than, price_less_than=price_less_than,
                 exchange=exchange, limit=limit, detail=detail)
    tier = DetailTier.parse(detail)
    query = {
        "marketCapMoreThan": market_cap_more_than,
        "sector": sector,
        "priceMoreThan": price_more_than,
        "priceLessThan": price_less_than,
        "exchange": exchange,
        "limit": limit,
    }
    return await _fetch_and_curate(
        client, "stock_screener", "/stock-screener", query,
        lambda raw: curate_screener(raw, tier),
    )


# =============================================================================
# Composite: analyst estimates
# =============================================================================
# The two fetches have no ordering dependency, so they run concurrently.
# return_exceptions=True keeps one failure from cancelling the other; the
# curation step decides what a half-failed result looks like.
# =============================================================================
async def analyst_estimates(client, symbol: str, period: str = "quarter") -> str:
    _log_request("analyst_estimates", symbol=symbol, period=period)

    estimates, price_target = await asyncio.gather(
        client.afetch(f"/analyst-estimates/{_segment(symbol)}", {"period": period}),
        client.afetch(f"/price-target-summary/{_segment(symbol)}", None),
        return_exceptions=True,
    )
    for label, result in (("estimates", estimates), ("price targets", price_target)):
        if isinstance(result, ProviderError):
            logger.warning("analyst_estimates: %s fetch failed: %s", label, result.message)
        elif isinstance(result, BaseException):
            raise result

    payload = curate_analyst_estimates(symbol, estimates, price_target)
    return _log_response("analyst_estimates", render(payload))

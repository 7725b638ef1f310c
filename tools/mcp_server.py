# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Declares every MCP tool the model can call.  Each tool is a thin wrapper
#   around a coroutine in tools/handlers.py, which fetches from FMP and hands
#   the raw JSON to core/curation.py.
#
# HOW IT WORKS (the flow):
#   1. The model decides it needs data (e.g., a quote)
#   2. It calls a tool by name via MCP (e.g., "quote")
#   3. FastMCP validates the arguments against the signature below
#   4. The handler fetches, curates, and returns ONE text block
#
# DECLARED PARAMETERS:
#   The signatures ARE the parameter contract: FastMCP turns the type hints,
#   Field constraints and defaults into the JSON schema the model sees, and
#   rejects bad arguments before a handler runs.
#
#   Tools are registered with output_schema=None: the result is the single
#   text block and nothing else, with no structuredContent alongside it.
#
# KEEPING THE CONTEXT WINDOW SMALL:
#   No tool returns the raw FMP payload.  Long lists are capped, long series
#   are summarized, and wide records are projected onto a curated allow-list.
#
# RUNNING THIS SERVER:
#   python main.py   (stdio transport; see main.py)
# =============================================================================

from typing import Annotated, Literal, Optional

from fastmcp import FastMCP
from pydantic import Field

from core.fmp_client import FMPClient
from tools import handlers

SERVER_NAME = "fmp"

Symbol = Annotated[str, Field(min_length=1, description="Stock symbol (e.g., AAPL)")]
Detail = Annotated[
    Literal["summary", "full"],
    Field(description="Output detail: 'summary' (default) or 'full' (more records, still capped)."),
]
DateParam = Annotated[Optional[str], Field(description="Date (YYYY-MM-DD).")]
Period = Annotated[str, Field(description="Fiscal period: 'quarter' or 'annual'.")]


def create_server(client: FMPClient) -> FastMCP:
    """Build the FastMCP server with every tool bound to `client`."""
    mcp = FastMCP(SERVER_NAME)

    # =========================================================================
    # Lookup & single-entity tools
    # =========================================================================
    @mcp.tool(output_schema=None)
    async def search_symbol(
        query: Annotated[str, Field(min_length=1, description="Company name or symbol to search for")],
        limit: Annotated[int, Field(gt=0, description="Results to fetch from the API. A smaller summary is returned.")] = 10,
    ) -> str:
        """Search for a stock symbol by company name or symbol. Returns the top 5 matches."""
        return await handlers.search_symbol(client, query, limit)

    @mcp.tool(output_schema=None)
    async def company_profile(symbol: Symbol) -> str:
        """Get a curated company profile: sector, industry, CEO, market cap, a short description."""
        return await handlers.company_profile(client, symbol)

    @mcp.tool(output_schema=None)
    async def quote(symbol: Symbol) -> str:
        """Get a concise real-time quote: price, change, day/year range, volume, EPS, P/E."""
        return await handlers.quote(client, symbol)

    @mcp.tool(output_schema=None)
    async def ratings(symbol: Symbol) -> str:
        """Get FMP's financial health rating and its per-factor recommendations."""
        return await handlers.ratings(client, symbol)

    @mcp.tool(output_schema=None)
    async def dcf_valuation(symbol: Symbol) -> str:
        """Get the Discounted Cash Flow (DCF) value and the implied upside/downside versus price."""
        return await handlers.dcf_valuation(client, symbol)

    # =========================================================================
    # Metric dictionaries
    # =========================================================================
    @mcp.tool(output_schema=None)
    async def financial_ratios_ttm(symbol: Symbol) -> str:
        """Get a curated list of key Trailing Twelve Months (TTM) financial ratios."""
        return await handlers.financial_ratios_ttm(client, symbol)

    @mcp.tool(output_schema=None)
    async def key_metrics_ttm(symbol: Symbol) -> str:
        """Get a curated list of key Trailing Twelve Months (TTM) per-share and valuation metrics."""
        return await handlers.key_metrics_ttm(client, symbol)

    # =========================================================================
    # Series
    # =========================================================================
    @mcp.tool(output_schema=None)
    async def historical_stock_data(
        symbol: Symbol,
        interval: Annotated[str, Field(description="'daily' (default) or an intraday interval such as '1min', '5min', '1hour'.")] = "daily",
        from_date: DateParam = None,
        to_date: DateParam = None,
        timeseries: Annotated[Optional[int], Field(gt=0, description="Number of past points when no date range is given (default 90 daily, 100 intraday).")] = None,
        detail: Detail = "summary",
    ) -> str:
        """Get historical OHLCV prices (daily or intraday).

        'summary' returns period statistics (start/end price, high/low, % change)
        plus the 5 most recent bars when more than 60 points were fetched.
        'full' returns up to 150 bars, newest first.
        """
        return await handlers.historical_stock_data(
            client, symbol, interval, from_date, to_date, timeseries, detail,
        )

    @mcp.tool(output_schema=None)
    async def technical_indicator(
        symbol: Symbol,
        interval: Annotated[str, Field(description="Data interval (e.g., '1min', '15min', '1hour', '4hour', 'daily').")],
        indicator_type: Annotated[str, Field(min_length=1, description="Indicator type (e.g., 'SMA', 'EMA', 'RSI', 'ADX').")],
        period: Annotated[int, Field(gt=0, description="Indicator period (e.g., 14 for RSI, 50 for SMA).")],
    ) -> str:
        """Get the 3 most recent values of a technical indicator for a symbol."""
        return await handlers.technical_indicator(client, symbol, interval, indicator_type, period)

    # =========================================================================
    # Collections
    # =========================================================================
    @mcp.tool(output_schema=None)
    async def stock_news(
        symbol: Annotated[str, Field(min_length=1, description="Stock symbol or comma-separated symbols (e.g., AAPL or AAPL,MSFT).")],
        limit: Annotated[int, Field(gt=0, description="Articles to fetch from the API.")] = 15,
        detail: Detail = "summary",
    ) -> str:
        """Get recent news articles: 3 most recent on 'summary', up to 10 on 'full'."""
        return await handlers.stock_news(client, symbol, limit, detail)

    @mcp.tool(output_schema=None)
    async def earnings_calendar(
        symbol: Annotated[Optional[str], Field(description="Stock symbol (optional).")] = None,
        from_date: DateParam = None,
        to_date: DateParam = None,
        limit: Annotated[int, Field(gt=0, description="Max records considered from the API.")] = 50,
    ) -> str:
        """Get earnings announcements by symbol and/or date range (at most 10 returned)."""
        return await handlers.earnings_calendar(client, symbol, from_date, to_date, limit)

    @mcp.tool(output_schema=None)
    async def dividend_calendar(
        symbol: Symbol,
        limit: Annotated[int, Field(gt=0, description="Max number of recent dividend records to return.")] = 10,
    ) -> str:
        """Get historical dividend payments for a symbol, most recent first."""
        return await handlers.dividend_calendar(client, symbol, limit)

    @mcp.tool(output_schema=None)
    async def income_statement(symbol: Symbol, period: Period = "quarter", detail: Detail = "summary") -> str:
        """Get curated income statements: 4 most recent periods on 'summary', 12 on 'full'."""
        return await handlers.financial_statement(client, "income_statement", symbol, period, detail)

    @mcp.tool(output_schema=None)
    async def balance_sheet(symbol: Symbol, period: Period = "quarter", detail: Detail = "summary") -> str:
        """Get curated balance sheets: 4 most recent periods on 'summary', 12 on 'full'."""
        return await handlers.financial_statement(client, "balance_sheet", symbol, period, detail)

    @mcp.tool(output_schema=None)
    async def cash_flow(symbol: Symbol, period: Period = "quarter", detail: Detail = "summary") -> str:
        """Get curated cash flow statements: 4 most recent periods on 'summary', 12 on 'full'."""
        return await handlers.financial_statement(client, "cash_flow", symbol, period, detail)

    @mcp.tool(output_schema=None)
    async def enterprise_value(symbol: Symbol, period: Period = "quarter", detail: Detail = "summary") -> str:
        """Get enterprise value (market cap + debt - cash) per period: 4 most recent on 'summary', 12 on 'full'."""
        return await handlers.enterprise_value(client, symbol, period, detail)

    @mcp.tool(output_schema=None)
    async def insider_trades(symbol: Symbol, detail: Detail = "summary") -> str:
        """Get recent insider transactions: 10 on 'summary', up to 25 on 'full'."""
        return await handlers.insider_trades(client, symbol, detail)

    @mcp.tool(output_schema=None)
    async def sec_filings(symbol: Symbol, detail: Detail = "summary") -> str:
        """Get recent SEC filings with links: 10 on 'summary', up to 25 on 'full'."""
        return await handlers.sec_filings(client, symbol, detail)

    @mcp.tool(output_schema=None)
    async def ipo_calendar(from_date: DateParam = None, to_date: DateParam = None, detail: Detail = "summary") -> str:
        """Get upcoming IPOs in a date range: 10 on 'summary', up to 25 on 'full'."""
        return await handlers.ipo_calendar(client, from_date, to_date, detail)

    @mcp.tool(output_schema=None)
    async def stock_screener(
        market_cap_more_than: Annotated[Optional[float], Field(ge=0, description="Minimum market cap (USD).")] = None,
        sector: Annotated[Optional[str], Field(description="Sector (e.g., 'Technology').")] = None,
        price_more_than: Annotated[Optional[float], Field(ge=0, description="Minimum share price.")] = None,
        price_less_than: Annotated[Optional[float], Field(gt=0, description="Maximum share price.")] = None,
        exchange: Annotated[Optional[str], Field(description="Exchange (e.g., 'NASDAQ', 'NYSE').")] = None,
        limit: Annotated[int, Field(gt=0, description="Matches to fetch from the API.")] = 100,
        detail: Detail = "summary",
    ) -> str:
        """Screen stocks by market cap, sector, price and exchange: 10 matches on 'summary', up to 25 on 'full'."""
        return await handlers.stock_screener(
            client, market_cap_more_than, sector, price_more_than, price_less_than,
            exchange, limit, detail,
        )

    # =========================================================================
    # Composite
    # =========================================================================
    @mcp.tool(output_schema=None)
    async def analyst_estimates(
        symbol: Symbol,
        period: Annotated[str, Field(description="Fiscal period: 'quarter' (default) or 'annual'.")] = "quarter",
    ) -> str:
        """Get a summary of analyst estimates (revenue, EPS) and the price-target consensus."""
        return await handlers.analyst_estimates(client, symbol, period)

    return mcp

# =============================================================================
# core/policies.py  —  Curated-Field Tables
# =============================================================================
#
# One CurationPolicy per data family.  Each is an explicit allow-list: if a
# field is not named here, the model never sees it.
#
# Aliases (FieldRule.aliases) record every spelling FMP is known to use for
# the same quantity, so that no tool needs its own `a or b or c` chain.
#
# These objects are frozen and built once at import time.
# =============================================================================

from core.models import CurationPolicy, FieldRule

DESCRIPTION_MAX_LENGTH = 300
SNIPPET_MAX_LENGTH = 200

# --- Series ------------------------------------------------------------------
OHLCV_POLICY = CurationPolicy.of(
    "ohlcv", "date", "open", "high", "low", "close", "volume",
)

# --- Single entities ---------------------------------------------------------
SEARCH_POLICY = CurationPolicy.of(
    "search",
    "symbol",
    "name",
    "currency",
    FieldRule("exchangeShortName", aliases=("exchange",)),
)

PROFILE_POLICY = CurationPolicy.of(
    "profile",
    "symbol",
    "companyName",
    "price",
    "currency",
    FieldRule("exchangeShortName", aliases=("exchange",)),
    "industry",
    "sector",
    "website",
    FieldRule("description", max_length=DESCRIPTION_MAX_LENGTH),
    "ceo",
    FieldRule("marketCap", aliases=("mktCap",)),
    "beta",
    FieldRule("volAvg", aliases=("averageVolume",)),
    FieldRule("lastDiv", aliases=("lastDividend",)),
    "range",                    # 52-week range
    "isActivelyTrading",
)

QUOTE_POLICY = CurationPolicy.of(
    "quote",
    "symbol",
    "name",
    "price",
    FieldRule("changesPercentage", aliases=("changePercentage",)),
    "change",
    "dayLow",
    "dayHigh",
    "yearHigh",
    "yearLow",
    "marketCap",
    "priceAvg50",
    "priceAvg200",
    "volume",
    "avgVolume",
    "open",
    "previousClose",
    "eps",
    "pe",
    "timestamp",
)

RATING_POLICY = CurationPolicy.of(
    "rating",
    "symbol",
    "date",
    "rating",
    "ratingScore",
    "ratingRecommendation",
    "ratingDetailsDCFRecommendation",
    "ratingDetailsROERecommendation",
    "ratingDetailsROARecommendation",
    "ratingDetailsDERecommendation",
    "ratingDetailsPERecommendation",
    "ratingDetailsPBRecommendation",
)

DCF_POLICY = CurationPolicy.of(
    "dcf",
    "symbol",
    "date",
    FieldRule("stockPrice", aliases=("Stock Price", "price")),
    FieldRule("dcfValue", aliases=("dcf",)),
)

# --- Dictionaries of metrics -------------------------------------------------
RATIOS_TTM_POLICY = CurationPolicy.of(
    "ratios_ttm",
    FieldRule("peRatioTTM", aliases=("priceToEarningsRatioTTM",)),
    "priceToSalesRatioTTM",
    FieldRule("priceToBookRatioTTM", aliases=("priceBookValueRatioTTM",)),
    FieldRule("priceEarningsToGrowthRatioTTM", aliases=("priceToEarningsGrowthRatioTTM",)),
    "currentRatioTTM",
    "quickRatioTTM",
    FieldRule("debtToEquityTTM", aliases=("debtEquityRatioTTM", "debtToEquityRatioTTM")),
    FieldRule("debtToAssetsTTM", aliases=("debtRatioTTM", "debtToAssetsRatioTTM")),
    "returnOnEquityTTM",
    "returnOnAssetsTTM",
    "grossProfitMarginTTM",
    "operatingProfitMarginTTM",
    "netProfitMarginTTM",
    "dividendYieldTTM",
    "payoutRatioTTM",
    "assetTurnoverTTM",
    "inventoryTurnoverTTM",
    "priceFairValueTTM",
)

KEY_METRICS_TTM_POLICY = CurationPolicy.of(
    "key_metrics_ttm",
    "revenuePerShareTTM",
    "netIncomePerShareTTM",
    "operatingCashFlowPerShareTTM",
    "freeCashFlowPerShareTTM",
    "marketCapTTM",
    "enterpriseValueTTM",
    "peRatioTTM",
    "priceToSalesRatioTTM",
    "pocfratioTTM",
    "pfcfRatioTTM",
    "pbRatioTTM",
    "ptbRatioTTM",
    "evToSalesTTM",
    FieldRule("enterpriseValueOverEBITDATTM", aliases=("evToEBITDATTM",)),
    "debtToEquityTTM",
    "debtToAssetsTTM",
    "netDebtToEBITDATTM",
    "currentRatioTTM",
    "dividendYieldTTM",
    "payoutRatioTTM",
    FieldRule("roeTTM", aliases=("returnOnEquityTTM",)),
    FieldRule("roicTTM", aliases=("returnOnInvestedCapitalTTM",)),
    "bookValuePerShareTTM",
)

# --- Collections -------------------------------------------------------------
NEWS_POLICY = CurationPolicy.of(
    "news",
    "title",
    "publishedDate",
    FieldRule("site", aliases=("publisher",)),
    "url",
    FieldRule("snippet", aliases=("text",), max_length=SNIPPET_MAX_LENGTH),
)

EARNINGS_BRIEF_POLICY = CurationPolicy.of(
    "earnings_brief", "date", "symbol", "epsEstimated", "time",
)

EARNINGS_DETAIL_POLICY = CurationPolicy.of(
    "earnings_detail",
    "date",
    "symbol",
    FieldRule("eps", aliases=("epsActual",)),
    "epsEstimated",
    FieldRule("revenue", aliases=("revenueActual",)),
    "revenueEstimated",
    "time",
    "fiscalDateEnding",
)

DIVIDEND_POLICY = CurationPolicy.of(
    "dividend",
    "date",
    "label",
    "dividend",
    "adjDividend",
    "recordDate",
    "paymentDate",
    "declarationDate",
)

IPO_POLICY = CurationPolicy.of(
    "ipo",
    "date",
    "symbol",
    FieldRule("company", aliases=("name",)),
    "exchange",
    "actions",
    "shares",
    FieldRule("priceRange", aliases=("price",)),
    "marketCap",
)

INSIDER_TRADE_POLICY = CurationPolicy.of(
    "insider_trade",
    "transactionDate",
    "filingDate",
    "reportingName",
    FieldRule("typeOfOwner", aliases=("relationship",)),
    "transactionType",
    FieldRule("acquisitionOrDisposition", aliases=("acquistionOrDisposition",)),
    "securitiesTransacted",
    "price",
    "securitiesOwned",
    "link",
)

SEC_FILING_POLICY = CurationPolicy.of(
    "sec_filing",
    "type",
    FieldRule("fillingDate", aliases=("filingDate",)),
    "acceptedDate",
    FieldRule("finalLink", aliases=("link",)),
)

# --- Composite: analyst estimates -------------------------------------------
ESTIMATE_POLICY = CurationPolicy.of(
    "estimate",
    "date",
    "estimatedRevenueAvg",
    "estimatedRevenueLow",
    "estimatedRevenueHigh",
    "estimatedEpsAvg",
    "estimatedEpsLow",
    "estimatedEpsHigh",
    "numberAnalystsEstimatedEps",
)

PRICE_TARGET_POLICY = CurationPolicy.of(
    "price_target",
    "lastUpdated",
    "targetHigh",
    "targetLow",
    "targetConsensus",
    "targetMedian",
    "numberOfAnalysts",
    "lastMonthAvgPriceTarget",
    "lastQuarterAvgPriceTarget",
    "lastYearAvgPriceTarget",
)

# --- Financial statements ----------------------------------------------------
_STATEMENT_HEADER = (
    "date",
    "period",
    FieldRule("calendarYear", aliases=("fiscalYear",)),
    "reportedCurrency",
)

INCOME_STATEMENT_POLICY = CurationPolicy.of(
    "income_statement",
    *_STATEMENT_HEADER,
    "revenue",
    "costOfRevenue",
    "grossProfit",
    "researchAndDevelopmentExpenses",
    "operatingExpenses",
    "operatingIncome",
    "ebitda",
    "interestExpense",
    "incomeTaxExpense",
    "netIncome",
    "eps",
    FieldRule("epsdiluted", aliases=("epsDiluted",)),
    FieldRule("weightedAverageShsOutDil", aliases=("weightedAverageShsOutDiluted",)),
)

BALANCE_SHEET_POLICY = CurationPolicy.of(
    "balance_sheet",
    *_STATEMENT_HEADER,
    "cashAndCashEquivalents",
    "cashAndShortTermInvestments",
    "totalCurrentAssets",
    "totalAssets",
    "totalCurrentLiabilities",
    "totalLiabilities",
    "longTermDebt",
    "totalDebt",
    "netDebt",
    "totalStockholdersEquity",
    "retainedEarnings",
)

CASH_FLOW_POLICY = CurationPolicy.of(
    "cash_flow",
    *_STATEMENT_HEADER,
    "netIncome",
    FieldRule("operatingCashFlow", aliases=("netCashProvidedByOperatingActivities",)),
    "capitalExpenditure",
    "freeCashFlow",
    FieldRule("netCashUsedForInvestingActivites", aliases=("netCashProvidedByInvestingActivities",)),
    FieldRule("netCashUsedProvidedByFinancingActivities", aliases=("netCashProvidedByFinancingActivities",)),
    "dividendsPaid",
    "commonStockRepurchased",
    "netChangeInCash",
)

ENTERPRISE_VALUE_POLICY = CurationPolicy.of(
    "enterprise_value",
    "date",
    "symbol",
    FieldRule("stockPrice", aliases=("price",)),
    "numberOfShares",
    FieldRule("marketCapitalization", aliases=("marketCap",)),
    "minusCashAndCashEquivalents",
    "addTotalDebt",
    "enterpriseValue",
)

# --- Screener ----------------------------------------------------------------
SCREENER_POLICY = CurationPolicy.of(
    "screener",
    "symbol",
    "companyName",
    "marketCap",
    "price",
    "sector",
    "industry",
    "beta",
    "volume",
    "lastAnnualDividend",
    "exchangeShortName",
    "country",
)

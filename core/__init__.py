# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL curation logic for the FMP tool server.
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or any transport.  The curation
#   modules (normalizer, projection, series, capping, policies, curation) are
#   pure functions over decoded JSON: give them a list of dicts, get back a
#   bounded payload.  Only fmp_client.py touches the network.
#
# That keeps the engine testable with canned JSON and no API key.
# =============================================================================

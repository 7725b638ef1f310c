# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool layer.
#
# ARCHITECTURAL ROLE:
#   tools/ is the "translation layer" between MCP and core/:
#     - mcp_server.py declares each tool's name, docstring and parameters
#     - handlers.py builds the FMP request, fetches, curates, and renders
#       the result as a single text block
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT decide which fields survive (core/policies.py does)
#   - They do NOT raise to the transport; failures become text content
#
# TOOL CONTRACT QUALITY:
#   The docstring is what the model reads to decide WHEN to call a tool, and
#   the typed parameters tell it WHAT to pass.  Keep both specific.
# =============================================================================

# =============================================================================
# POLYMARKET WINDOW TRACKER - TEST SUITE
# =============================================================================
#
# Layout:
#   tests/
#     unit/           - Unit tests (parser, scorer, selector, loop, display,
#                       CLI adapter, config, preflight, logging)
#     integration/    - Integration tests (discovery -> loop -> display,
#                       cockpit.py and python -m collector)
#     mock_data.py    - Fake CLI, clocks and search payloads
#
# Usage:
#   pytest                               # All tests
#   pytest tests/unit/                   # Unit tests only
#   python run_tests.py --quick          # Smoke test
#
# =============================================================================

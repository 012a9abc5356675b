"""LifeOS Test Suite

Test organization:
- unit/: Unit tests for individual modules
  - momentum/: Streak engine, repositories, task list and toggle
  - roadmap/: Prompt building, model call and fallback plan
  - pathfinder/: Search client and the degradation ladder
  - vault/: Blob storage and per-user document metadata
  - finance/: Profile, accounts and transaction import
  - security/: Dashboard sessions
- integration/: Dashboard API end to end

Running tests:
    # All tests
    pytest

    # Specific module
    pytest tests/unit/momentum/
"""

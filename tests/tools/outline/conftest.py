"""Pytest fixtures for outline tool tests."""

import pytest


@pytest.fixture
def root_level_doc() -> str:
    """A completed root-level task above an open one, with a populated log."""
    return "## Todo\n- [x] Buy groceries\n- [ ] Other\n\n## Log\n- Did something"


@pytest.fixture
def nested_doc() -> str:
    """A parent task whose nested child was completed."""
    return """## Todo
- [ ] Parent
  - [x] Child
  - [ ] Sibling
- [ ] Next

## Log
"""


@pytest.fixture
def future_block_doc() -> str:
    """A log section with a blank-separated block of upcoming items."""
    return """## Todo
- [x] Ship it

## Log
- Earlier

- Future item
"""


@pytest.fixture
def daily_note() -> str:
    """A daily note with nested sections and a mix of task states."""
    return """# 2026-10-16
## Todo
- [ ] Write report
- [x] Review PR
  - left comments on [[Projects/API|the API]]
### Errands
- [/] Groceries
## Log
- [x] Standup
"""

"""Global test configuration for unweaver tests."""

import pytest
import structlog

from unweaver.core.ids import SequentialIdGenerator
from unweaver.core.models import DocumentKind, SourceDocument


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Keep log output off stdout so CLI tests can parse chunk streams."""
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("LOG_FORMAT", "plain")
    yield
    structlog.reset_defaults()


@pytest.fixture
def ids():
    """Deterministic id source: 0000, 0001, ..."""
    return SequentialIdGenerator()


@pytest.fixture
def make_doc():
    """Build a SourceDocument directly, bypassing classification."""

    def _make(content, name="doc.md", kind=DocumentKind.MARKDOWN, doc_id="d1", headers=None):
        return SourceDocument(id=doc_id, name=name, content=content, kind=kind, table_headers=headers)

    return _make


SURVEY_CSV = """RespondentID,Department,Comments,Score
101,Sales,"The onboarding process was confusing, and took far too long to complete.",4
102,Engineering,Great mentorship from the team; I felt supported from day one.,5
103,Sales,,3
"""


@pytest.fixture
def survey_csv():
    return SURVEY_CSV

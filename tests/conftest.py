"""
PyTest Configuration and Fixtures
=================================

Shared fixtures and configuration for BlogChecker tests.

No test touches the network: HTTP sessions, S3 clients and sleeps are
mocked or injected.
"""

import importlib
import pytest
import os
import sys
from pathlib import Path
from unittest.mock import Mock

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Set test environment variables before any imports
os.environ["TECHWORDS_PATH"] = str(FIXTURES_DIR / "techwords.txt")
os.environ["BLOGCHECKER_FETCH__PRE_FETCH_DELAY"] = "0"
os.environ["BLOGCHECKER_LOGGING__CONSOLE_LOGGING"] = "false"


TECHWORDS = [
    "Python",
    "Go",
    "Docker",
    "Kubernetes",
    "AWS",
    "Ruby",
    "Rails",
    "C++",
    "機械学習",
    "TypeScript",
]


# Six entries; exactly 1, 3, 5 and 6 carry three or more techwords
HATENABLOG_ATOM_FEED = '''<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom" xml:lang="ja">
  <title>onk's blog</title>
  <link href="https://onk.hatenablog.com/"/>
  <id>hatenablog://blog/1</id>
  <updated>2024-09-07T00:00:00+09:00</updated>
  <entry>
    <title>Docker and Kubernetes on AWS</title>
    <link href="https://onk.hatenablog.com/entry/1"/>
    <id>hatenablog://entry/1</id>
    <updated>2024-09-06T00:00:00+09:00</updated>
    <content type="html">&lt;p&gt;notes&lt;/p&gt;</content>
  </entry>
  <entry>
    <title>Lunch diary</title>
    <link href="https://onk.hatenablog.com/entry/2"/>
    <id>hatenablog://entry/2</id>
    <updated>2024-09-05T00:00:00+09:00</updated>
    <content type="html">&lt;p&gt;Went to a ramen shop.&lt;/p&gt;</content>
  </entry>
  <entry>
    <title>Ruby meetup</title>
    <link href="https://onk.hatenablog.com/entry/3"/>
    <id>hatenablog://entry/3</id>
    <updated>2024-09-04T00:00:00+09:00</updated>
    <content type="html">&lt;p&gt;Talked about &lt;b&gt;Rails&lt;/b&gt; and Python.&lt;/p&gt;</content>
  </entry>
  <entry>
    <title>Weekend</title>
    <link href="https://onk.hatenablog.com/entry/4"/>
    <id>hatenablog://entry/4</id>
    <updated>2024-09-03T00:00:00+09:00</updated>
    <content type="html">I wrote some Go. Golang is fun.</content>
  </entry>
  <entry>
    <title>機械学習入門</title>
    <link href="https://onk.hatenablog.com/entry/5"/>
    <id>hatenablog://entry/5</id>
    <updated>2024-09-02T00:00:00+09:00</updated>
    <summary>TypeScriptとPythonで機械学習</summary>
  </entry>
  <entry>
    <title>C++ tips</title>
    <link href="https://onk.hatenablog.com/entry/6"/>
    <id>hatenablog://entry/6</id>
    <updated>2024-09-01T00:00:00+09:00</updated>
    <content type="html">&lt;p&gt;C++ と Python と Go&lt;/p&gt;</content>
  </entry>
</feed>'''.encode("utf-8")

HATENABLOG_KEPT = [
    {"title": "Docker and Kubernetes on AWS", "url": "https://onk.hatenablog.com/entry/1"},
    {"title": "Ruby meetup", "url": "https://onk.hatenablog.com/entry/3"},
    {"title": "機械学習入門", "url": "https://onk.hatenablog.com/entry/5"},
    {"title": "C++ tips", "url": "https://onk.hatenablog.com/entry/6"},
]


def make_response(status_code=200, content=b"", headers=None, url=None, reason="OK"):
    """Build a mock requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.content = content
    response.text = content.decode("utf-8", errors="replace") if isinstance(content, bytes) else content
    response.headers = headers or {}
    response.url = url
    response.reason = reason
    return response


@pytest.fixture(autouse=True)
def reset_global_state():
    """Drop cached settings and the process-wide techword provider."""
    import blogchecker.config.settings as settings_module
    handler_module = importlib.import_module("blogchecker.api.handler")

    settings_module._settings = None
    handler_module.reset_pattern_provider(None)
    yield
    settings_module._settings = None
    handler_module.reset_pattern_provider(None)


@pytest.fixture
def test_settings():
    """Settings with no pre-fetch delay and the fixture word list."""
    from blogchecker.config.settings import BlogCheckerSettings, FetchSettings

    return BlogCheckerSettings(
        fetch=FetchSettings(pre_fetch_delay=0.0),
        techwords_path=str(FIXTURES_DIR / "techwords.txt"),
    )


@pytest.fixture
def techwords():
    return list(TECHWORDS)


@pytest.fixture
def pattern_provider(techwords):
    from blogchecker.processing.techwords import TechwordPatternProvider

    return TechwordPatternProvider.from_words(techwords)


@pytest.fixture
def mock_session():
    """requests.Session stand-in; set ``get.return_value`` or ``get.side_effect``."""
    session = Mock()
    session.headers = {}
    return session


@pytest.fixture
def response_factory():
    return make_response


@pytest.fixture
def hatenablog_feed():
    return HATENABLOG_ATOM_FEED


@pytest.fixture
def hatenablog_kept():
    return [dict(entry) for entry in HATENABLOG_KEPT]

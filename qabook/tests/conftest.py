from __future__ import annotations

"""Shared pytest fixtures and test environment defaults."""

import os
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("QABOOK_LOG_LEVEL", "WARNING")
os.environ.pop("QABOOK_TITLE", None)
os.environ.pop("QABOOK_FORMAT", None)
os.environ.pop("QABOOK_SECTION_LEVEL", None)
os.environ.pop("QABOOK_QUESTION_LEVEL", None)
os.environ.pop("QABOOK_HTML_TOC", None)

SPRING_IOC = """\
# IoC

## What is Inversion of Control?

The container creates objects and wires their dependencies instead of the
objects creating them.

## What is the IoC container? {#container}

Tags: core, container

The `ApplicationContext` is the central interface.

```java
ApplicationContext ctx = new AnnotationConfigApplicationContext(AppConfig.class);
```
"""

SPRING_DI = """\
# DI

## What is constructor injection?

Dependencies are passed through the constructor.

## What is setter injection?

Dependencies are set through setter methods after construction.
"""


@pytest.fixture
def ioc_doc(tmp_path) -> Path:
    path = tmp_path / "ioc.md"
    path.write_text(SPRING_IOC, encoding="utf-8")
    return path


@pytest.fixture
def di_doc(tmp_path) -> Path:
    path = tmp_path / "di.md"
    path.write_text(SPRING_DI, encoding="utf-8")
    return path


@pytest.fixture
def write_doc(tmp_path):
    """Write a document into the temp dir and return its path."""
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write

"""Shared fixtures for tests."""

import pytest

from prompt_bridge.models import PackageMetadata


CLAUDE_SKILL = """---
name: code-review
description: Review pull requests for correctness and style
tools: Read, Grep, Bash
model: sonnet
---

# 🔍 Code Review

You are Rex, a meticulous senior reviewer.

Your communication style is direct, concise.

Areas of expertise:
- Python
- API design

## Guidelines

- Keep functions small
  *Small functions are easier to test*
- Name things clearly
  Example: `user_count`

## Examples

### ✓ Early return

```python
if not user:
    return None
```

### ❌ Deep nesting

```python
if user:
    if user.active:
        return user
```

## Background

This repository powers the billing service.
"""

# Rules, examples and context only: every dialect can carry this without loss.
STANDARDS_BODY = """# Testing Standards

## Rules

- Write a test for every bug fix
  *Regressions stay fixed*
- Prefer fixtures over globals

## Examples

### ✓ Use a fixture

```python
def test_user(user):
    assert user.active
```

## Background

The suite runs on every push.
"""

FENCE_FIXTURE = """# Guide

## Setup

Install the tools.

```bash
# fake header
## fake section
echo done
```

## Usage

Run it.
"""


@pytest.fixture
def metadata():
    return PackageMetadata(id="code-review")


@pytest.fixture
def standards_metadata():
    return PackageMetadata(id="testing-standards")


@pytest.fixture
def claude_skill():
    return CLAUDE_SKILL


@pytest.fixture
def standards_body():
    return STANDARDS_BODY


@pytest.fixture
def fence_fixture():
    return FENCE_FIXTURE


@pytest.fixture
def claude_package(claude_skill, metadata):
    from prompt_bridge.converters import from_claude

    return from_claude(claude_skill, metadata)


@pytest.fixture
def tmp_project(tmp_path):
    """A project with a valid Claude skill and a header-less markdown file."""
    (tmp_path / "code-review.md").write_text(CLAUDE_SKILL, encoding="utf-8")
    (tmp_path / "broken.md").write_text("# No header here\n", encoding="utf-8")
    return tmp_path

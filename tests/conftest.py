"""Test configuration for pytest."""

import pytest

from foglio.utils.auth import StaticTokenSource
from foglio.utils.template_utils import parse_template

POST_TEMPLATE = """---
title: [[ name ]]
description: [[ description ]]
---
![Preview]([[ smallSizeLink ]])
[Full size]([[ largeSizeLink ]])
"""


@pytest.fixture
def post_template():
    """Compiled post template."""
    return parse_template(POST_TEMPLATE)


@pytest.fixture
def output_dir(tmp_path):
    """Directory receiving generated posts."""
    directory = tmp_path / "posts"
    directory.mkdir()
    return directory


@pytest.fixture
def token_source():
    """Token source that never prompts."""
    return StaticTokenSource("test_token")

"""Shared pytest fixtures for rulescope tests."""
import os
import re
import tempfile
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, Generator

import pytest
import yaml

from rulescope.infrastructure.config_manager import ConfigManager, set_global_config
from rulescope.infrastructure.logger import set_global_logger
from rulescope.rules.ruleset import RuleSet


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def rule_tree() -> SimpleNamespace:
    """Two pre-phase rules followed by a oneOf set of four rules.

    Built fresh for every test since inserts mutate it.
    """
    pre_js = {"test": re.compile(r"\.js$"), "phase": "pre"}
    pre_css = {"test": re.compile(r"\.css"), "phase": "pre"}
    js = {"test": re.compile(r"\.js$"), "processor": "/path/to/babel-loader"}
    image = {
        "test": [re.compile(r"\.bmp$"), re.compile(r"\.gif$"), re.compile(r"\.jpe?g$"),
                 re.compile(r"\.png$")],
        "processor": "/path/to/url-loader",
    }
    css = {
        "test": re.compile(r"\.css"),
        "use": [
            "/path/to/style-loader",
            "/path/to/css-loader",
            "/path/to/postcss-loader",
        ],
    }
    default = {
        "exclude": [re.compile(r"\.js$"), re.compile(r"\.html$"), re.compile(r"\.json$")],
        "processor": "/path/to/file-loader",
    }
    loaders = {"oneOf": [js, image, css, default]}
    roots = [pre_js, pre_css, loaders]

    return SimpleNamespace(
        pre_js=pre_js,
        pre_css=pre_css,
        js=js,
        image=image,
        css=css,
        default=default,
        loaders=loaders,
        roots=roots,
    )


@pytest.fixture
def ruleset(rule_tree: SimpleNamespace) -> RuleSet:
    """RuleSet over the fixture tree with the reference normalizer."""
    return RuleSet(rule_tree.roots)


@pytest.fixture
def new_rule() -> Dict[str, Any]:
    """A rule to insert."""
    return {"test": re.compile("foo"), "processor": "rule-to-add"}


@pytest.fixture
def rules_file(temp_dir: Path) -> Path:
    """YAML file holding a rule list under a ``rules`` key."""
    path = temp_dir / "rules.yaml"
    data = {
        "rules": [
            {"test": "**/*.js", "phase": "pre", "processor": "eslint-loader"},
            {
                "oneOf": [
                    {"test": "**/*.js", "processor": "babel-loader"},
                    {"test": "**/*.css", "use": ["style-loader", {"processor": "css-loader"}]},
                    {"processor": "file-loader"},
                ]
            },
        ]
    }
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Isolate tests from RULESCOPE_* variables and global instances."""
    for key in list(os.environ):
        if key.startswith("RULESCOPE_"):
            monkeypatch.delenv(key, raising=False)
    set_global_config(ConfigManager(load_environment=False))
    set_global_logger(None)
    yield
    set_global_config(None)
    set_global_logger(None)

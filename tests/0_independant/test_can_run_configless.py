# tests/0_independant/test_can_run_configless.py

from argparse import Namespace

import modconcat.config as mod_config


def test_can_run_configless_with_entry_and_out() -> None:
    """Both positionals given: no config file is needed."""
    args = Namespace(entry="index.js", out="dist/out.js")
    assert mod_config.can_run_configless(args) is True


def test_cannot_run_configless_with_entry_only() -> None:
    args = Namespace(entry="index.js", out=None)
    assert mod_config.can_run_configless(args) is False


def test_cannot_run_configless_without_positionals() -> None:
    args = Namespace(entry=None, out=None)
    assert mod_config.can_run_configless(args) is False


def test_can_run_configless_tolerates_missing_attrs() -> None:
    """Namespaces built by other tools may lack the attributes entirely."""
    assert mod_config.can_run_configless(Namespace()) is False

"""
Tape arena, convenience gradients, graph dumps and configuration.
"""

import logging

import pytest

from microdiff import (
    Value, Tape, use_tape, grad, grads, grads_list, value,
    get_config, set_config, configure, EngineConfig,
)
from microdiff.core import tape as tape_mod
from microdiff.core.graph_utils import get_graph_stats, print_graph_summary, format_graph
from microdiff.logger import setup_logger


def _build(xv=2.0, yv=3.0, zv=0.0):
    x, y, z = Value(xv, name="x"), Value(yv, name="y"), Value(zv, name="z")
    return x, y, z, x * y + z.sigmoid()


# ---------------------------------- tape ---------------------------------- #
def test_use_tape_records_and_restores():
    outer = tape_mod.global_tape
    with use_tape() as t:
        assert tape_mod.global_tape is t
        x = Value(1.0)
        y = x * 2.0
        z = y + x
        assert len(t) == 2
        assert (y._tape_idx, z._tape_idx) == (0, 1)
        assert x._tape_idx is None  # leaves are not recorded
    assert tape_mod.global_tape is outer


def test_use_tape_with_given_tape_and_reset():
    t = Tape()
    with use_tape(t):
        y = Value(1.0) + 1.0
    assert t.values == [y]
    t.reset()
    assert len(t) == 0
    assert y._tape_idx is None


def test_tape_restored_after_error():
    outer = tape_mod.global_tape
    with pytest.raises(ZeroDivisionError):
        with use_tape():
            Value(1.0) / 0.0
    assert tape_mod.global_tape is outer


# ---------------------------------- seeds --------------------------------- #
def test_grad_single_input():
    assert grad(lambda x: x * x, 3.0) == 6.0
    assert grad(lambda x: x.sigmoid(), 0.0) == 0.25


def test_grads_dict():
    g = grads(lambda v: v["a"] * v["b"] + v["a"], {"a": 2.0, "b": 5.0})
    assert list(g) == ["a", "b"]
    assert g == {"a": 6.0, "b": 2.0}


def test_grads_list_example():
    assert grads_list(lambda xs: xs[0] * xs[0] + 3 * xs[1], [2.0, 4.0]) == [4.0, 3.0]


def test_grads_of_constant_function_are_zero():
    assert grads_list(lambda xs: 1.0, [2.0, 4.0]) == [0.0, 0.0]


def test_seeds_do_not_touch_active_tape():
    with use_tape() as t:
        grad(lambda x: x * x * x, 1.0)
        assert len(t) == 0


def test_value_helper():
    assert value(Value(2.5)) == 2.5
    assert value(7) == 7


# ------------------------------ graph utils ------------------------------- #
def test_graph_stats():
    with use_tape() as t:
        _build()
        stats = get_graph_stats(t)
    assert stats["nodes"] == 3
    assert stats["edges"] == 5
    assert stats["max_fan_in"] == 2
    assert stats["max_fan_out"] == 1
    assert stats["operations"] == {"mul": 1, "sigmoid": 1, "add": 1}


def test_graph_stats_empty():
    assert get_graph_stats(Tape())["nodes"] == 0


def test_print_graph_summary(capsys):
    with use_tape():
        _build()
        print_graph_summary()
    out = capsys.readouterr().out
    assert "COMPUTATION GRAPH SUMMARY" in out
    assert "sigmoid" in out


def test_format_graph():
    x, y, z, root = _build()
    root.backward()
    lines = format_graph(root).splitlines()
    assert len(lines) == 6
    assert lines[0].startswith("#0 leaf:x")
    assert lines[-1].startswith("#5 add")
    assert lines[-1].endswith("<- [#2, #4]")
    assert "grad=   3.0000" in lines[0]

    short = format_graph(root, max_nodes=2).splitlines()
    assert short[-1] == "... (4 more nodes)"


# --------------------------------- config --------------------------------- #
def test_configure_overrides_and_restores():
    before = get_config()
    with configure(check_cycles=False) as cfg:
        assert cfg.check_cycles is False
        assert get_config() is cfg
    assert get_config() is before


def test_configure_rejects_unknown_option():
    with pytest.raises(TypeError):
        with configure(no_such_option=True):
            pass


def test_set_config():
    before = get_config()
    try:
        set_config(EngineConfig(log_graph_size=True))
        assert get_config().log_graph_size is True
    finally:
        set_config(before)
    with pytest.raises(TypeError):
        set_config({"check_cycles": False})


def test_setup_logger_is_idempotent():
    log = setup_logger("microdiff.test_logger", level=logging.DEBUG)
    again = setup_logger("microdiff.test_logger")
    assert log is again
    assert len(log.handlers) == 1

import logging

import pytest

from deltri.core.config import TriangulatorConfig
from deltri.core.constants import EPS_INCIRCLE
from deltri.core.stats import TriangulationStats, format_stats_table
from deltri.core.logging_utils import get_logger, configure_logging


def test_config_defaults():
    cfg = TriangulatorConfig()
    assert cfg.locator == 'linear'
    assert cfg.degenerate_policy == 'raise'
    assert cfg.incircle_tolerance == EPS_INCIRCLE
    assert cfg.validate is False


@pytest.mark.parametrize("kwargs", [
    {'locator': 'kdtree'},
    {'degenerate_policy': 'ignore'},
    {'incircle_tolerance': -1.0},
    {'max_walk_steps': 0},
])
def test_config_rejects_bad_values(kwargs):
    with pytest.raises(ValueError):
        TriangulatorConfig(**kwargs)


def test_stats_dict_and_totals():
    s = TriangulationStats(inserted=4, flips=6, time_insert=0.5, time_hull=0.25)
    d = s.to_dict()
    assert d['time_total'] == pytest.approx(0.75)
    assert d['flips_per_point'] == pytest.approx(1.5)
    assert TriangulationStats().to_dict()['flips_per_point'] == 0.0


def test_format_stats_table():
    table = format_stats_table(TriangulationStats(inserted=12, hull_fills=3))
    lines = table.splitlines()
    assert lines[0].split() == ['counter', 'value']
    assert any(line.split() == ['inserted', '12'] for line in lines)
    assert any(line.split() == ['hull_fills', '3'] for line in lines)
    assert format_stats_table({}) == "<no stats>"


def test_logger_family_is_isolated():
    log = get_logger('deltri.test')
    assert log.level == logging.NOTSET
    root = logging.getLogger('deltri')
    assert root.propagate is False
    assert any(not isinstance(h, logging.NullHandler) for h in root.handlers)


def test_configure_logging_sets_level():
    root = logging.getLogger('deltri')
    prev = root.level
    try:
        configure_logging('WARNING')
        assert root.level == logging.WARNING
        configure_logging(logging.DEBUG)
        assert root.level == logging.DEBUG
        assert get_logger('deltri.test', level='ERROR').level == logging.ERROR
    finally:
        root.setLevel(prev)

import io
import logging
import datetime
import pathlib

import numpy as np
import pytest


LOG_DIR = pathlib.Path(__file__).parent / "test-logs"


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    # Attach the TestReport to the item so fixtures can see the outcome in teardown.
    outcome = yield
    rep = outcome.get_result()
    setattr(item, "rep_" + rep.when, rep)


@pytest.fixture(autouse=True)
def capture_deltri_logs(request):
    """Buffer the 'deltri' logger family per test and keep it only on failure.

    The 'deltri' logger does not propagate to the root logger, so the
    capture handler is attached to it directly.
    """
    log = logging.getLogger('deltri')
    prev_level = log.level
    buf = io.StringIO()
    handler = logging.StreamHandler(buf)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    log.addHandler(handler)
    log.setLevel(logging.DEBUG)
    try:
        yield buf
    finally:
        log.removeHandler(handler)
        log.setLevel(prev_level)
        rep = getattr(request.node, "rep_call", None)
        if rep is not None and rep.outcome == "failed":
            LOG_DIR.mkdir(exist_ok=True)
            nodeid = request.node.nodeid.replace("::", "__").replace("/", "_")
            ts = datetime.datetime.now().strftime("%Y%m%dT%H%M%S")
            (LOG_DIR / f"{nodeid}__{ts}.log").write_text(
                f"=== Test: {request.node.nodeid}\n\n{buf.getvalue()}", encoding="utf-8")


@pytest.fixture
def rng():
    return np.random.RandomState(12345)


@pytest.fixture
def square_with_center():
    return [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0), (0.5, 0.5)]

import io
import logging

import pytest

from brepjoin.assemble import join_segments
from brepjoin.logging_config import setup_logging
from brepjoin.segments import Line
from brepjoin.trace import (
    RecordingTracer,
    describe_point,
    describe_segment,
    ensure_tracer,
    logging_tracer,
    null_tracer,
)


def _square():
    pts = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]
    return [Line(a, b) for a, b in zip(pts, pts[1:] + pts[:1])]


def test_join_emits_events_in_order():
    tracer = RecordingTracer()
    join_segments(_square(), tracer=tracer)
    assert tracer.names() == [
        "graph.built",
        "graph.classified",
        "assemble.start",
        "assemble.step",
        "assemble.step",
        "assemble.step",
        "assemble.done",
    ]
    (built,) = tracer.of("graph.built")
    assert built["node_count"] == 4
    assert built["termini"] == 0
    assert tracer.of("graph.classified") == [{"kind": "closed", "termini": 0}]
    assert tracer.of("assemble.done") == [{"count": 4, "closed": True}]
    assert [step["remaining"] for step in tracer.of("assemble.step")] == [2, 1, 0]


def test_ensure_tracer():
    assert ensure_tracer(None) is null_tracer
    tracer = RecordingTracer()
    assert ensure_tracer(tracer) is tracer
    null_tracer("anything", value=1)


def test_describe_point_and_segment():
    assert describe_point((1, 2.5, -3)) == \
        "X:1.000000000000, Y:2.500000000000, Z:-3.000000000000"
    text = describe_segment(Line((0, 0, 0), (1, 0, 0)))
    assert text.startswith("Line Start: X:0.000000000000")
    assert text.endswith("End: X:1.000000000000, Y:0.000000000000, Z:0.000000000000")


def test_logging_tracer(caplog):
    logger = logging.getLogger("brepjoin.tests.trace")
    tracer = logging_tracer(logger)
    with caplog.at_level(logging.DEBUG, logger="brepjoin.tests.trace"):
        tracer("assemble.start", segment=Line((0, 0, 0), (1, 0, 0)), index=0)
    (record,) = caplog.records
    assert record.levelno == logging.DEBUG
    assert record.getMessage().startswith("assemble.start segment=[Line Start:")
    assert record.getMessage().endswith("index=0")


def test_logging_tracer_respects_level(caplog):
    logger = logging.getLogger("brepjoin.tests.quiet")
    tracer = logging_tracer(logger)
    with caplog.at_level(logging.INFO, logger="brepjoin.tests.quiet"):
        tracer("graph.built", node_count=1)
    assert caplog.records == []


@pytest.fixture
def package_logger():
    logger = logging.getLogger("brepjoin")
    yield logger
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


def test_setup_logging(tmp_path, package_logger):
    log_file = tmp_path / "brepjoin.log"
    stream = io.StringIO()
    logger = setup_logging(logging.DEBUG, log_file=str(log_file), stream=stream)
    assert logger is package_logger
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2

    logging.getLogger("brepjoin.assemble").debug("hello from assemble")
    for handler in logger.handlers:
        handler.flush()
    assert "hello from assemble" in stream.getvalue()
    assert "brepjoin.assemble" in log_file.read_text(encoding="utf-8")


def test_setup_logging_replaces_only_its_own_handlers(package_logger):
    own = logging.NullHandler()
    package_logger.addHandler(own)

    setup_logging(logging.DEBUG, stream=io.StringIO())
    logger = setup_logging(logging.INFO, stream=io.StringIO())

    assert own in logger.handlers
    assert len(logger.handlers) == 2
    assert logger.level == logging.INFO

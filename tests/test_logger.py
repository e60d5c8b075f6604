import json
import logging

from hopcrawler.utils.config import LoggingConfig
from hopcrawler.utils.logger import JSONFormatter, get_crawler_logger, setup_logging


def test_hop_event_message(caplog):
    caplog.set_level(logging.INFO)
    logger = get_crawler_logger("hopcrawler.test", run="r1")

    logger.log_hop_event(logging.INFO, 2, "Visited", "http://a.test/\tFound 4 URLs", links_found=4)

    record = caplog.records[-1]
    assert record.getMessage() == "HOP 2\tVisited http://a.test/\tFound 4 URLs"
    assert record.extra_fields == {
        'run': 'r1', 'event_type': 'hop_event', 'hop': 2, 'action': 'Visited', 'links_found': 4
    }


def test_json_formatter_includes_fields():
    record = logging.LogRecord("hopcrawler", logging.WARNING, __file__, 10, "HOP %d", (1,), None)
    record.extra_fields = {'hop': 1, 'status_code': 503}

    entry = json.loads(JSONFormatter().format(record))

    assert entry['message'] == "HOP 1"
    assert entry['level'] == "WARNING"
    assert entry['status_code'] == 503


def test_setup_logging_with_file(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    log_file = tmp_path / "logs" / "crawler.log"
    try:
        setup_logging(LoggingConfig(level='debug', file=str(log_file), json=True))

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert log_file.parent.is_dir()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

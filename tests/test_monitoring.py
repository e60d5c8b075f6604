from unittest.mock import patch

from hopcrawler.utils.monitoring import CrawlerMonitor, MetricsCollector, initialize_monitoring


def test_collectors_use_private_registries():
    first = CrawlerMonitor(MetricsCollector())
    second = CrawlerMonitor(MetricsCollector())

    first.record_page_visited(0.25)
    first.record_error('transport')
    first.update_sizes(frontier_size=4, visited_size=2)

    values = first.get_summary()['metrics']
    assert values['crawler_pages_visited_total'] == 1
    assert values['crawler_response_time_seconds_count'] == 1
    assert values['crawler_errors_total{error_type=transport}'] == 1
    assert values['crawler_frontier_size'] == 4
    assert second.get_summary()['metrics']['crawler_pages_visited_total'] == 0


@patch('hopcrawler.utils.monitoring.start_http_server')
def test_initialize_monitoring_starts_server(mock_start):
    monitor = initialize_monitoring(True, 9123)

    mock_start.assert_called_once_with(9123, registry=monitor.metrics.registry)


@patch('hopcrawler.utils.monitoring.start_http_server')
def test_server_disabled_by_default(mock_start):
    initialize_monitoring()

    mock_start.assert_not_called()

"""
HTTP API over the analytics core.

Every response body is an envelope (see envelope.py). The app holds no
global state: create_app receives the repository and builds its own
pipelines.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Query

from messmass.aggregation import Aggregator, HashtagFilter, partner_summary
from messmass.benchmarks import build_distributions
from messmass.charts import (
    ChartConfiguration,
    calculate_active_charts,
    calculate_charts,
    calculation_summary,
    validate_chart_with_stats,
)
from messmass.insights import InsightConfig, InsightPipeline, InsightReport, snapshot_history
from messmass.metrics import MetricsPipeline, summarize_event
from messmass.records import EventDocument
from messmass.storage import EventRepository

from .envelope import NotFoundError, install_exception_handlers, success
from .schemas import ChartCalculationRequest, ChartValidationRequest
from .serializers import aggregate_to_api, distributions_to_api, event_metrics_to_api, partner_summary_to_api

logger = logging.getLogger(__name__)

BENCHMARK_POOL_SIZE = 500
DEFAULT_BATCH_LIMIT = 10


def _split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(',') if part.strip()]


def create_app(repository: EventRepository, insight_config: Optional[InsightConfig] = None,
               metrics_pipeline: Optional[MetricsPipeline] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        repository: Source of events and chart configurations.
        insight_config: Insight settings; the packaged config.yaml when omitted.
        metrics_pipeline: Pipeline used to derive per-event metrics.
    """
    app = FastAPI(title="MessMass Analytics API", version="0.1.0")
    install_exception_handlers(app)

    metrics_pipeline = metrics_pipeline or MetricsPipeline()
    insight_pipeline = InsightPipeline(config=insight_config or InsightConfig())
    aggregator = Aggregator(repository)

    app.state.repository = repository
    app.state.insight_pipeline = insight_pipeline

    def _event_or_404(event_id: str) -> EventDocument:
        event = repository.get_event(event_id)
        if event is None:
            raise NotFoundError(f"Event not found: {event_id}")
        return event

    def _insight_inputs(event: EventDocument):
        history: List[EventDocument] = []
        if event.partner_id:
            history = repository.partner_history(
                event.partner_id, event.event_date, limit=insight_pipeline.config.max_history,
            )
        return snapshot_history(event, history, metrics_pipeline)

    @app.get("/health")
    def health():
        return success({"status": "ok"})

    @app.get("/api/hashtags/filter")
    def filter_by_hashtags(hashtags: str = Query(""), match: str = Query("and")):
        predicate = HashtagFilter(hashtags, match)
        aggregate = aggregator.aggregate(predicate)
        if aggregate is None:
            qualifier = "all" if predicate.match == "and" else "any of"
            raise NotFoundError(f"No events found with {qualifier} hashtags: {', '.join(predicate.terms)}")
        return success(aggregate_to_api(aggregate))

    @app.get("/api/analytics/partner/{partner_id}")
    def partner_analytics(partner_id: str):
        events = repository.list_events(partner_id=partner_id)
        summary = partner_summary(partner_id, [summarize_event(e, metrics_pipeline) for e in events])
        if summary is None:
            raise NotFoundError(f"No events found for partner: {partner_id}")
        return success(partner_summary_to_api(summary))

    @app.get("/api/analytics/event/{event_id}")
    def event_analytics(event_id: str):
        event = _event_or_404(event_id)
        return success(event_metrics_to_api(event, metrics_pipeline.run(event.stats)))

    @app.get("/api/analytics/benchmarks")
    def benchmarks(metrics: Optional[str] = Query(None)):
        events = repository.list_events(limit=BENCHMARK_POOL_SIZE)
        summaries = [summarize_event(e, metrics_pipeline) for e in events]
        distributions = build_distributions(summaries, _split_csv(metrics) or None)
        return success(distributions_to_api(distributions, len(summaries)))

    @app.get("/api/analytics/insights/{event_id}")
    def event_insights(event_id: str):
        current, history = _insight_inputs(_event_or_404(event_id))
        return success(insight_pipeline.report(current, history).to_dict())

    @app.get("/api/analytics/insights")
    def batch_insights(limit: int = Query(DEFAULT_BATCH_LIMIT, ge=1)):
        limit = min(limit, insight_pipeline.config.max_events_per_request)
        items = [_insight_inputs(event) for event in repository.list_events(limit=limit)]
        batch = insight_pipeline.run_batch(items)

        reports: List[Dict[str, Any]] = []
        for current, _ in items:
            result = batch.results.get(current.event_id)
            if result is None:
                continue
            report = InsightReport(event_id=current.event_id, event_date=current.event_date, insights=result.insights)
            reports.append(report.to_dict())
        return success({
            "evaluated": len(batch.results),
            "failed": sorted(batch.failures),
            "reports": reports,
        })

    @app.post("/api/charts/calculate")
    def charts_calculate(request: ChartCalculationRequest):
        if request.event_id is not None:
            event = _event_or_404(request.event_id)
            stats = event.stats
            source: Dict[str, Any] = {"type": "event", "eventId": event.event_id, "eventName": event.name}
        else:
            predicate = HashtagFilter(request.hashtags, request.match)
            aggregate = aggregator.aggregate(predicate)
            if aggregate is None:
                raise NotFoundError(f"No events found with hashtags: {', '.join(predicate.terms)}")
            stats = aggregate.stats
            source = {"type": "aggregate", "eventCount": aggregate.event_count,
                      "hashtags": list(aggregate.filter_terms), "dateRange": aggregate.date_range_label}

        if request.charts is not None:
            results = calculate_charts([ChartConfiguration.from_dict(c) for c in request.charts], stats)
        else:
            results = calculate_active_charts(repository.list_chart_configurations(), stats)
        return success({
            "source": source,
            "charts": [result.to_dict() for result in results],
            "summary": calculation_summary(results),
        })

    @app.post("/api/chart-config/validate")
    def chart_config_validate(request: ChartValidationRequest):
        config = ChartConfiguration.from_dict(request.configuration)
        report = validate_chart_with_stats(config, request.stats) if request.stats is not None else None
        return success({
            "valid": report.is_valid if report else True,
            "configuration": config.to_dict(),
            "validation": report.to_dict() if report else None,
        })

    return app

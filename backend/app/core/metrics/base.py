from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.metrics import Meter, NoOpMeterProvider
from opentelemetry.sdk.metrics import MeterProvider as SdkMeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource

from app.settings import Settings

EXPORT_INTERVAL_MILLIS = 10000


class BaseMetrics:
    """Owns one meter; subclasses declare their instruments in ``_create_instruments``.

    Export goes over OTLP/gRPC when an endpoint is configured. Tests, disabled
    telemetry and a missing endpoint all get a NoOp meter, so recording is always safe.
    """

    def __init__(self, settings: Settings, meter_name: str | None = None):
        self._meter = self._create_meter(settings, meter_name or self.__class__.__name__)
        self._create_instruments()

    @staticmethod
    def _create_meter(settings: Settings, meter_name: str) -> Meter:
        endpoint = settings.OTEL_EXPORTER_OTLP_ENDPOINT
        if settings.TESTING or not settings.ENABLE_TRACING or not endpoint:
            return NoOpMeterProvider().get_meter(meter_name)

        resource = Resource.create(
            {
                "service.name": settings.SERVICE_NAME,
                "service.version": settings.SERVICE_VERSION,
                "deployment.environment": settings.ENVIRONMENT,
                "meter.name": meter_name,
            }
        )
        reader = PeriodicExportingMetricReader(
            exporter=OTLPMetricExporter(endpoint=endpoint),
            export_interval_millis=EXPORT_INTERVAL_MILLIS,
        )
        return SdkMeterProvider(resource=resource, metric_readers=[reader]).get_meter(meter_name)

    def _create_instruments(self) -> None:
        pass

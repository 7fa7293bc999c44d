from __future__ import annotations

import time
from contextlib import nullcontext
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from azprovider import registry
from azprovider.arm.clients import close_all, get_clients
from azprovider.core.config import Settings, get_settings
from azprovider.core.exceptions import BaseApplicationException, record_error
from azprovider.core.logging import configure_logging, get_logger
from azprovider.sdk import OPERATIONS, ProviderMeta, ResourceData, ResourceHandler

logger = get_logger(__name__)
tracer = trace.get_tracer(__name__)


class Provider:
    def __init__(self, meta: ProviderMeta) -> None:
        self.meta = meta
        registry.ensure_resources_loaded()

    @classmethod
    async def configure(
        cls, settings: Settings | None = None, subscription_id: str | None = None
    ) -> Provider:
        settings = settings or get_settings()
        obs = settings.observability
        configure_logging(
            level=obs.log_level,
            fmt=obs.log_format,
            log_file=obs.log_file,
            max_bytes=obs.log_rotation_size_mb * 1024 * 1024,
            retention=obs.log_retention_days,
            context={"service": obs.otel_service_name},
        )
        clients = await get_clients(subscription_id, settings)
        registry.ensure_resources_loaded()
        logger.info(
            "provider.configured",
            subscription_id=clients.subscription_id,
            resources=[r.type_name for r in registry.list_resources()],
        )
        return cls(ProviderMeta(clients=clients, settings=settings))

    def resource(self, type_name: str) -> ResourceHandler[Any]:
        handler = registry.get_resource(type_name)
        if handler is None:
            raise KeyError(f"unknown resource type {type_name!r}")
        return handler

    def new_data(self, type_name: str, values: dict[str, Any] | None = None, **kwargs: Any) -> ResourceData[Any]:
        return self.resource(type_name).new_data(values, **kwargs)

    async def apply(self, type_name: str, operation: str, d: ResourceData[Any]) -> ResourceData[Any]:
        if operation not in OPERATIONS:
            raise ValueError(f"unsupported operation {operation!r}; expected one of {OPERATIONS}")
        handler = self.resource(type_name)
        start = time.perf_counter()
        if self.meta.settings.observability.enable_tracing:
            scope = tracer.start_as_current_span(f"resource.{type_name}.{operation}")
        else:
            scope = nullcontext(trace.INVALID_SPAN)
        with scope as span:
            span.set_attributes(
                {
                    "resource.type": type_name,
                    "resource.operation": operation,
                    "resource.id": d.id,
                    "resource.new": d.is_new_resource(),
                }
            )
            try:
                await getattr(handler, operation)(d, self.meta)
            except Exception as exc:
                record_error(exc, resource_type=type_name, operation=operation)
                span.record_exception(exc)
                span.set_status(Status(StatusCode.ERROR, str(exc)))
                logger.error(
                    "resource.operation.failed",
                    type_name=type_name,
                    operation=operation,
                    resource_id=d.id,
                    **(
                        exc.to_dict()
                        if isinstance(exc, BaseApplicationException)
                        else {"error_type": type(exc).__name__, "error_message": str(exc)}
                    ),
                )
                raise
            span.set_attribute("resource.id_after", d.id)
        logger.info(
            "resource.operation.completed",
            type_name=type_name,
            operation=operation,
            resource_id=d.id,
            duration_ms=(time.perf_counter() - start) * 1000.0,
        )
        return d

    def import_state(self, type_name: str, resource_id: str) -> ResourceData[Any]:
        return self.resource(type_name).import_state(resource_id)

    def stop(self) -> None:
        self.meta.stop_event.set()

    async def close(self) -> None:
        await close_all()

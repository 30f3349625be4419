from datetime import datetime
from typing import Callable

from booking_backend.services.models import Identity
from booking_backend.services.ports import DataService
from booking_backend.utils.dates import utc_now


class RequestContext:
    """Per-request state handed explicitly to every action handler.

    The data service is opened on first use so a handler can turn a
    ``ConfigurationError`` into its own response, and is closed by whoever
    created the context.
    """

    def __init__(
        self,
        service_factory: Callable[[], DataService],
        access_token: str | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._service_factory = service_factory
        self._service: DataService | None = None
        self._caller: Identity | None = None
        self._caller_resolved = False
        self.access_token = access_token
        self.clock = clock

    def data_service(self) -> DataService:
        if self._service is None:
            self._service = self._service_factory()
        return self._service

    def caller(self) -> Identity | None:
        if not self._caller_resolved:
            self._caller = self.data_service().get_user(self.access_token)
            self._caller_resolved = True
        return self._caller

    def close(self) -> None:
        if self._service is not None:
            self._service.close()
            self._service = None

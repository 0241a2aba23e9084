"""Error taxonomy — every failure the adapter raises maps to one JSON body."""

from typing import Any


class FlightSearchError(Exception):
    """Base class for adapter failures surfaced to HTTP callers."""

    status_code = 500
    error = "Internal server error"

    def to_body(self) -> dict[str, Any]:
        return {"error": self.error, "message": str(self)}


class ValidationError(FlightSearchError):
    """Required request fields are missing."""

    status_code = 400
    error = "Missing required parameters"

    def __init__(self, missing: list[str], required: list[str] | None = None):
        super().__init__(f"Missing: {', '.join(missing)}")
        self.missing = missing
        self.required = required or missing

    def to_body(self) -> dict[str, Any]:
        return {"error": self.error, "required": self.required, "missing": self.missing}


class InvalidParameterError(FlightSearchError):
    """Request parameters are present but malformed (bad date, unknown enum value)."""

    status_code = 400
    error = "Invalid request parameters"

    def __init__(self, details: list[dict[str, Any]]):
        super().__init__("; ".join(f"{d['field']}: {d['message']}" for d in details))
        self.details = details

    def to_body(self) -> dict[str, Any]:
        return {"error": self.error, "details": self.details}


class ConfigurationError(FlightSearchError):
    """Operator configuration is missing or invalid (API key, provider id)."""

    status_code = 500
    error = "API key not configured"


class ResolutionError(FlightSearchError):
    """An airport code could not be resolved to upstream identifiers."""

    status_code = 502
    error = "Airport not found"

    def __init__(self, code: str, upstream_status: int | None = None):
        super().__init__(f"Could not resolve airport code '{code}'")
        self.code = code
        self.upstream_status = upstream_status

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error, "code": self.code}
        if self.upstream_status is not None:
            body["status"] = self.upstream_status
        return body


class UpstreamError(FlightSearchError):
    """Upstream returned a non-success status; status and payload pass through."""

    error = "API request failed"

    def __init__(self, status_code: int, payload: Any):
        super().__init__(f"Upstream responded with {status_code}")
        self.status_code = status_code
        self.payload = payload

    def to_body(self) -> dict[str, Any]:
        return {"error": self.error, "details": self.payload, "status": self.status_code}


class UnsupportedOperationError(FlightSearchError):
    status_code = 501
    error = "Operation not supported by provider"

    def __init__(self, provider: str, operation: str):
        super().__init__(f"{provider} does not support {operation}")
        self.provider = provider

    def to_body(self) -> dict[str, Any]:
        return {"error": self.error, "provider": self.provider, "message": str(self)}


class NetworkError(FlightSearchError):
    """Transport failure talking to the upstream (DNS, timeout, reset)."""

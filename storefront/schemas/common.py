"""
Service-level schemas: root index, health and the 422 error body.
"""
from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, Field


class RootResponse(BaseModel):
    """Index of the API."""
    message: str
    version: str
    docs: str = "/docs"
    health: str = "/health"
    resources: Dict[str, str] = Field(..., description="Resource name -> URL prefix")
    timestamp: datetime


class HealthCheckResponse(BaseModel):
    status: str = Field(..., description="Always 'healthy' while the process serves requests")
    service: str
    database_name: str
    database: str = Field(..., description="'connected', 'disconnected' or 'error: <reason>'")
    version: str
    timestamp: datetime


class ValidationErrorDetail(BaseModel):
    field: str = Field(..., description="Dotted location, e.g. 'items.0.quantity' or 'query.limit'")
    message: str
    input_value: Any = None


class ValidationErrorResponse(BaseModel):
    """Body returned with every 422."""
    error: str = "validation_error"
    message: str
    details: List[ValidationErrorDetail]

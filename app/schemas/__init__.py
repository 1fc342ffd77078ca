"""
Schemas Module
==============

This module provides Pydantic models for request validation.
"""

from app.schemas.device import CoordinatesModel, CreateDeviceRequest, UpdateDeviceRequest
from app.schemas.logs import LogFiltersQuery
from app.schemas.readings import CreateReadingRequest, EvaluateRequest, ReadingsQuery, UpdateReadingRequest
from app.schemas.session import SessionUserSchema

__all__ = [
    "CoordinatesModel",
    "CreateDeviceRequest",
    "UpdateDeviceRequest",
    "LogFiltersQuery",
    "CreateReadingRequest",
    "EvaluateRequest",
    "ReadingsQuery",
    "UpdateReadingRequest",
    "SessionUserSchema",
]

"""Tenant factory for test data generation."""

from polyfactory import Use

from src.hourtracker.models import Tenant
from tests.factories.base import BaseFactory, generate_uuid, utc_now


class TenantFactory(BaseFactory):
    """Factory for generating Tenant test data."""

    __model__ = Tenant

    id = Use(generate_uuid)
    name = Use(lambda: f"Test Tenant {generate_uuid().hex[-8:]}")
    plan = "free"
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

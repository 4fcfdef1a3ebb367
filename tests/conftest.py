"""
Pytest configuration and fixtures for retail-cleanse tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
import os
import shutil
from collections.abc import Callable
from typing import Any, Generator

import pytest

from retail_cleanse.core.config import CleaningConfig


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that require Spark or Docker containers"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that test the full pipeline"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 5 seconds to run"
    )


# =======================
# RECORD FIXTURES
# =======================

@pytest.fixture
def make_row() -> Callable[..., dict[str, Any]]:
    """
    Factory for source rows as a CSV reader would produce them.

    Every field defaults to a clean string value; pass keyword overrides
    to inject dirt.
    """
    def _make_row(**overrides) -> dict[str, Any]:
        row = {
            "order_id": "1001",
            "order_date": "2023-03-05",
            "customer_name": "Jane doe",
            "country": "United States",
            "product_id": "P-118",
            "product_name": "Denim Jacket",
            "category": "Apparel",
            "quantity": "2",
            "unit_price": "49.99",
            "discount_code": "SPRING10",
            "sales_rep": "Alex",
            "payment_method": "Card",
            "order_source": "Online",
            "email": "jane@example.com",
        }
        row.update(overrides)
        return row

    return _make_row


@pytest.fixture
def cleaning_config() -> CleaningConfig:
    """Built-in cleaning tables"""
    return CleaningConfig()


# =======================
# SPARK FIXTURES
# =======================

@pytest.fixture(scope="session")
def spark_session():
    """
    Create a Spark session for testing with local mode

    Skips when no Java runtime is available.

    Yields:
        SparkSession configured for local testing
    """
    if not os.getenv("JAVA_HOME") and shutil.which("java") is None:
        pytest.skip("Java runtime not available for Spark")

    from pyspark.sql import SparkSession

    spark = (
        SparkSession.builder
        .appName("retail-cleanse-test")
        .master("local[2]")
        .config("spark.sql.shuffle.partitions", "2")
        .config("spark.driver.memory", "1g")
        .config("spark.ui.enabled", "false")  # Disable UI for tests
        .config("spark.sql.session.timeZone", "UTC")
        .getOrCreate()
    )

    # Set log level to WARN to reduce test output noise
    spark.sparkContext.setLogLevel("WARN")

    yield spark

    spark.stop()


@pytest.fixture
def test_data_dir() -> str:
    """
    Get path to test data fixtures directory

    Returns:
        Path to tests/fixtures directory
    """
    return os.path.join(os.path.dirname(__file__), "fixtures")


# =======================
# DATABASE FIXTURES (Testcontainers)
# =======================

@pytest.fixture(scope="session")
def postgres_container():
    """
    Start PostgreSQL container for integration tests

    Skips when Docker is not reachable.

    Yields:
        PostgresContainer instance
    """
    from testcontainers.postgres import PostgresContainer

    container = PostgresContainer(
        image="postgres:16.2-alpine",
        username="test_pipeline",
        password="test_password",
        dbname="test_retail"
    )
    try:
        container.start()
    except Exception as e:
        pytest.skip(f"Docker not available for PostgreSQL container: {e}")

    try:
        yield container
    finally:
        container.stop()


@pytest.fixture
def warehouse_pool(postgres_container) -> Generator:
    """
    Open a connection pool against the container with empty output tables

    Yields:
        Open DatabaseConnectionPool
    """
    from retail_cleanse.warehouse.connection import DatabaseConnectionPool
    from retail_cleanse.warehouse.schema_mgmt import TABLES, SchemaManager

    pool = DatabaseConnectionPool(
        host=postgres_container.get_container_host_ip(),
        port=int(postgres_container.get_exposed_port(5432)),
        database="test_retail",
        user="test_pipeline",
        password="test_password",
    )
    pool.open()
    SchemaManager(pool).create_tables()
    for table in TABLES:
        pool.execute_command(f"TRUNCATE TABLE {table}")

    try:
        yield pool
    finally:
        pool.close()

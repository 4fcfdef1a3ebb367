"""
Command-line interface for batch cleaning.

Usage:
    retail-cleanse process --source <source_id> --input <file_path> [options]
    retail-cleanse audit --source <source_id> --order-id <order_id> [options]
    retail-cleanse summary --source <source_id> [options]
"""

import argparse
import sys
from pathlib import Path

from pyspark.sql import SparkSession

from retail_cleanse.batch.pipeline import BatchPipeline
from retail_cleanse.core.config import load_cleaning_config
from retail_cleanse.core.errors import CleaningError
from retail_cleanse.observability.logger import get_logger
from retail_cleanse.observability.metrics import start_metrics_server
from retail_cleanse.warehouse.audit import query_audit_logs_by_order
from retail_cleanse.warehouse.connection import DatabaseConnectionPool
from retail_cleanse.warehouse.schema_mgmt import SchemaManager
from retail_cleanse.warehouse.upsert import RejectionLedgerWriter

logger = get_logger(__name__)


def create_spark_session(app_name: str = "RetailCleanse") -> SparkSession:
    """
    Create Spark session for batch processing.

    Args:
        app_name: Application name

    Returns:
        SparkSession
    """
    spark = SparkSession.builder \
        .appName(app_name) \
        .master("local[*]") \
        .config("spark.sql.adaptive.enabled", "true") \
        .config("spark.sql.session.timeZone", "UTC") \
        .getOrCreate()

    return spark


def create_pool(args) -> DatabaseConnectionPool:
    """Open a connection pool from CLI flags, falling back to DB_* env vars."""
    pool = DatabaseConnectionPool(
        host=args.db_host,
        port=args.db_port,
        database=args.db_name,
        user=args.db_user,
        password=args.db_password
    )
    pool.open()
    return pool


def process_command(args):
    """
    Execute batch cleaning command.

    Exits with status 1 if the run fails or does not reconcile.

    Args:
        args: Command-line arguments
    """
    logger.info(f"Starting batch cleaning for source: {args.source}")

    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {args.input}")
        sys.exit(1)

    try:
        config = load_cleaning_config(args.rules)
    except (FileNotFoundError, CleaningError) as e:
        logger.error(f"Cannot load cleaning rules: {e}")
        sys.exit(1)

    if args.metrics_port:
        start_metrics_server(args.metrics_port)

    spark = create_spark_session(f"RetailCleanse-{args.source}")

    pool = None
    try:
        if args.write_warehouse and not args.dry_run:
            logger.info("Initializing database connection...")
            pool = create_pool(args)

        pipeline = BatchPipeline(spark=spark, pool=pool, config=config)
        result = pipeline.process_file(
            file_path=str(input_path),
            source_id=args.source,
            file_format=args.format,
            output_dir=args.output_dir,
            output_format=args.output_format,
            dry_run=args.dry_run,
        )

    except Exception as e:
        logger.error(f"Error during batch cleaning: {e}", exc_info=True)
        sys.exit(1)
    finally:
        if pool is not None:
            pool.close()
        spark.stop()

    for line in result.report.summary_lines():
        print(line)

    if not result.report.is_balanced:
        logger.error("Reconciliation report is unbalanced")
        sys.exit(1)


def audit_command(args):
    """
    Print the audit trail of one order.

    Args:
        args: Command-line arguments
    """
    pool = create_pool(args)
    try:
        entries = query_audit_logs_by_order(pool, args.source, args.order_id)
    finally:
        pool.close()

    if not entries:
        print(f"No audit entries for order {args.order_id} in {args.source}")
        return

    for entry in entries:
        print(
            f"[{entry['origin_index']}] {entry['transformation_type']} "
            f"{entry['field_name'] or '-'}: {entry['old_value']!r} -> {entry['new_value']!r} "
            f"({entry['rule_applied']})"
        )


def summary_command(args):
    """
    Print warehouse row counts and the rejection breakdown for a source.

    Args:
        args: Command-line arguments
    """
    pool = create_pool(args)
    try:
        counts = SchemaManager(pool).table_counts(args.source)
        ledger = RejectionLedgerWriter(pool).get_summary(args.source)
    finally:
        pool.close()

    print(f"\nWarehouse summary for {args.source}:")
    for table, count in counts.items():
        print(f"  {table}: {count}")

    if ledger:
        print("\nRejections:")
        for row in ledger:
            print(f"  {row['stage']}/{row['reason_code']}: {row['count']}")


def add_db_arguments(parser: argparse.ArgumentParser) -> None:
    """Database connection arguments; unset values come from DB_* env vars."""
    parser.add_argument("--db-host", default=None, help="Database host (env DB_HOST)")
    parser.add_argument("--db-port", type=int, default=None, help="Database port (env DB_PORT)")
    parser.add_argument("--db-name", default=None, help="Database name (env DB_NAME)")
    parser.add_argument("--db-user", default=None, help="Database user (env DB_USER)")
    parser.add_argument("--db-password", default=None, help="Database password (env DB_PASSWORD)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="retail-cleanse",
        description="Retail transaction cleaning pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Clean a CSV export and write the outputs as CSV
  retail-cleanse process --source q1_orders --input data/orders.csv --output-dir out/

  # Report only, nothing written
  retail-cleanse process --source q1_orders --input data/orders.csv --dry-run

  # Clean with custom rules and load into PostgreSQL
  retail-cleanse process --source q1_orders --input data/orders.csv \\
      --rules config/cleaning_rules.yaml --write-warehouse

  # Show how an order was modified
  retail-cleanse audit --source q1_orders --order-id 1042

  # Row counts and rejection breakdown in the warehouse
  retail-cleanse summary --source q1_orders
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    process_parser = subparsers.add_parser("process", help="Clean a data file")
    process_parser.add_argument("--source", required=True, help="Data source ID")
    process_parser.add_argument("--input", required=True, help="Path to input file")
    process_parser.add_argument(
        "--format",
        default="csv",
        choices=["csv", "json", "parquet"],
        help="Input file format (default: csv)"
    )
    process_parser.add_argument(
        "--rules",
        default=None,
        help="Path to cleaning rules YAML file (env CLEANING_RULES_PATH)"
    )
    process_parser.add_argument("--output-dir", default=None, help="Directory for output files")
    process_parser.add_argument(
        "--output-format",
        default="csv",
        choices=["csv", "json", "parquet"],
        help="Output file format (default: csv)"
    )
    process_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Clean and report without writing any output"
    )
    process_parser.add_argument(
        "--write-warehouse",
        action="store_true",
        help="Write outputs to PostgreSQL"
    )
    process_parser.add_argument(
        "--metrics-port",
        type=int,
        default=None,
        help="Expose Prometheus metrics on this port"
    )
    add_db_arguments(process_parser)

    audit_parser = subparsers.add_parser("audit", help="Show the audit trail of an order")
    audit_parser.add_argument("--source", required=True, help="Data source ID")
    audit_parser.add_argument("--order-id", required=True, help="Canonical order id")
    add_db_arguments(audit_parser)

    summary_parser = subparsers.add_parser("summary", help="Show warehouse counts for a source")
    summary_parser.add_argument("--source", required=True, help="Data source ID")
    add_db_arguments(summary_parser)

    return parser


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "process":
        process_command(args)
    elif args.command == "audit":
        audit_command(args)
    elif args.command == "summary":
        summary_command(args)


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Main entry point for the shuttle reconciliation pipeline.

Reads the ticket, service and validation exports listed in a JSON config,
reconciles them and writes the combined records and KPIs.
"""

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional
import platform

from shuttle_recon import FilterSpec, PipelineOutput, ShuttleDataProcessor
from shuttle_recon.config import USER_TYPE_FILTER_ALL
from shuttle_recon.finalize import finalize_records

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def process_data_files(
    file_paths: Dict[str, List[str]],
    output_path: Optional[str] = None,
    kpis_path: Optional[str] = None,
    filters: Optional[FilterSpec] = None,
    analysis_path: Optional[str] = None,
) -> PipelineOutput:
    """
    Process data files through the pipeline.

    Args:
        file_paths: Dictionary mapping category names to lists of file paths
        output_path: Optional CSV path for the (filtered) combined records
        kpis_path: Optional JSON path for the KPI summary of the same view
        filters: Optional filter applied before writing
        analysis_path: Optional JSON path for the route, user and weekday series
    """
    logger.info("Starting reconciliation pipeline")
    logger.info(f"Python version: {platform.python_version()}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Files to process: {sum(len(p) for p in file_paths.values())}")

    processor = ShuttleDataProcessor()
    output = processor.process_files(file_paths)

    for error in output.file_errors:
        logger.warning(error)

    if not output.ok:
        logger.error(output.error_message)
        if output.backup is not None:
            for category in output.backup.categories():
                _, total = output.backup.preview(category)
                logger.info(f"Backup kept for {category}: rows={total}")
        return output

    if output.combined_records is None:
        logger.warning("No data loaded, nothing to reconcile")
        return output

    view = processor.view(output.combined_records, filters)
    logger.info(
        f"Processing complete. Records={len(output.combined_records)}, "
        f"in view={len(view.records)}, tickets sold={output.tickets_sold}"
    )
    logger.info(f"Available years: {output.available_years}, months: {output.available_months}")

    if output_path:
        finalize_records(view.records).write_csv(output_path)
        logger.info(f"Results saved to {output_path}")

    if kpis_path:
        with open(kpis_path, "w", encoding="utf-8") as f:
            json.dump(view.kpis.to_dict(), f, ensure_ascii=False, indent=2)
        logger.info(f"KPIs saved to {kpis_path}")
    else:
        logger.info(f"KPIs: {view.kpis.to_dict()}")

    if analysis_path:
        with open(analysis_path, "w", encoding="utf-8") as f:
            json.dump(processor.analyze(view.records), f, ensure_ascii=False, indent=2)
        logger.info(f"Analysis saved to {analysis_path}")

    return output


def create_sample_config() -> Dict[str, List[str]]:
    """Create sample configuration for testing."""
    return {
        "tickets": ["data/tickets.xlsx"],
        "services": ["data/servicios.xlsx"],
        "validations": ["data/validaciones.xlsx"],
    }


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Shuttle Reconciliation Pipeline")
    parser.add_argument(
        "--config", type=str, help="Configuration file path (JSON: category -> list of files)"
    )
    parser.add_argument(
        "--output", type=str, help="Output CSV path for the combined records"
    )
    parser.add_argument(
        "--kpis-json", type=str, help="Output JSON path for the KPI summary"
    )
    parser.add_argument(
        "--analysis-json", type=str, help="Output JSON path for the chart series"
    )
    parser.add_argument("--year", type=str, default="all", help="Year filter (e.g. 2024)")
    parser.add_argument("--month", type=str, default="all", help="Month filter (1-12)")
    parser.add_argument(
        "--user-type",
        type=str,
        default=USER_TYPE_FILTER_ALL,
        help="User type filter (Estudiante, Colaborador)",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate configuration without processing",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable verbose logging"
    )

    args = parser.parse_args()

    # Configure logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        # Load configuration
        if args.config:
            with open(args.config, "r", encoding="utf-8") as f:
                config = json.load(f)
        else:
            logger.info("No config file provided, using sample configuration")
            config = create_sample_config()

        config = {k: [v] if isinstance(v, str) else list(v) for k, v in config.items()}

        # Validate configuration if requested
        if args.validate:
            logger.info("Validating configuration...")

            # Check file paths
            missing_files = []
            for category, paths in config.items():
                for path in paths:
                    if not Path(path).exists():
                        missing_files.append(f"{category}: {path}")

            if missing_files:
                logger.error("Missing files:")
                for missing in missing_files:
                    logger.error(f"  {missing}")
                return 1
            logger.info("All files found, configuration valid")
            return 0

        filters = FilterSpec(year=args.year, month=args.month, user_type=args.user_type)
        output = process_data_files(config, args.output, args.kpis_json, filters, args.analysis_json)
        if not output.ok:
            return 2

        logger.info("Data processing completed successfully")
        return 0

    except Exception as e:
        logger.error(f"Application failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    exit(main())

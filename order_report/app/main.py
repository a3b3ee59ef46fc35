"""
Run unique : CSV -> base -> résumés de commandes -> order_totals.csv

    $ order-report
    $ python -m order_report.app.main

Code retour : 0 si OK, 1 sur toute erreur non récupérée.
"""

from __future__ import annotations

import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from order_report.app.db.load import load_tables, reset_schema
from order_report.app.db.session import get_engine, get_session_factory
from order_report.app.settings import Settings, get_settings
from order_report.services.aggregation import summarize_orders
from order_report.services.errors import OrderReportError
from order_report.services.orders import fetch_order_batches
from order_report.services.rates import load_rate_table
from order_report.services.report import build_report, emit_report

logger = logging.getLogger("order_report")


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def run(settings: Settings) -> int:
    """Exécute un run complet et retourne le nombre de lignes du rapport."""
    # 1) Taux TVA : fatal avant de toucher à la base
    rates = load_rate_table(settings.tax_rules_path)

    engine = get_engine(settings.database_url)
    SessionLocal = get_session_factory(engine)
    try:
        # 2) DROP/CREATE + chargement des CSV : une seule transaction
        with SessionLocal.begin() as db:
            reset_schema(db.connection())
            load_tables(db, settings.data_dir)

        # 3) Lecture commandes + lignes
        with SessionLocal() as db:
            batches = fetch_order_batches(db)
        logger.info("Found %d orders", len(batches))

        # 4) Calcul
        summaries = summarize_orders(
            batches,
            rates,
            policy=settings.error_policy,
            max_workers=settings.workers,
        )
    finally:
        engine.dispose()

    # 5) Export
    rows = build_report(summaries)
    emit_report(rows, settings.report_path)
    return len(rows)


def main() -> int:
    try:
        settings = get_settings()
    except OrderReportError as e:
        setup_logging()
        logger.error("%s", e)
        return 1

    setup_logging(settings.log_level)

    try:
        count = run(settings)
    except (OrderReportError, SQLAlchemyError, OSError):
        logger.exception("Report run failed")
        return 1

    logger.info("Done: %d orders written to %s", count, settings.report_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())

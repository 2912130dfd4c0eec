"""Execution of the music store reporting queries.

:class:`ReportingQuerySet` runs named entries of :data:`queries.QUERIES`
against a SQLAlchemy engine.  Every call acquires its own connection, issues
one read-only statement and releases the connection again, so instances can
be shared between threads.  Database errors are logged and re-raised
unchanged; an empty result is an empty list, never an error.  A query
marked ``single_row`` that returns more than one row raises
:class:`ReportingError`.
"""

import time
import functools
import traceback
from collections import Counter
from typing import List, Dict, Any, Optional, Tuple

from loguru import logger as default_logger
from sqlalchemy import Engine, text

from data_models import (
    QueryLevel,
    QuerySpecModel,
    QueryResultModel,
    DataDictionaryModel,
)
from config import Settings, build_engine
from db_knowledge import music_store_notes, required_schema
from queries import QUERIES
from utils import extract_data_dictionary, find_schema_gaps


class ReportingError(Exception):
    pass


class UnknownQueryError(ReportingError, KeyError):
    def __init__(self, query_name: str):
        super().__init__(query_name)
        self.query_name = query_name

    def __str__(self) -> str:
        return f"Unknown query: {self.query_name!r}"


class SchemaMismatchError(ReportingError):
    def __init__(self, missing: List[str]):
        super().__init__(f"Store is missing required columns: {', '.join(missing)}")
        self.missing = missing


def measure_query_time(query_fn):
    """
    Decorator to log execution time of queries using logger.debug().
    """
    @functools.wraps(query_fn)
    def wrapper(self, spec: QuerySpecModel, *args, **kwargs):
        start = time.time()
        result = query_fn(self, spec, *args, **kwargs)
        elapsed = time.time() - start
        self.logger.debug(f"Query [{spec.name}] executed in {elapsed:.3f} seconds.")
        return result
    return wrapper

def log_query_errors(query_fn):
    """
    Decorator that logs a failed query with its traceback and re-raises
    the original exception.
    """
    @functools.wraps(query_fn)
    def wrapper(self, spec: QuerySpecModel, *args, **kwargs):
        try:
            return query_fn(self, spec, *args, **kwargs)
        except Exception as e:
            tb = traceback.format_exc()
            self.logger.error(f"[{spec.name}] Error: {e}\n{tb}")
            raise
    return wrapper


class ReportingQuerySet:

    def __init__(
            self,
            engine: Engine,
            logger=None,
            catalog: Optional[Dict[str, QuerySpecModel]] = None,
            max_rows: int = 30,
            ) -> None:

        self.engine = engine
        self.max_rows = max_rows
        self.logger = logger or default_logger
        self.catalog = catalog if catalog is not None else QUERIES

    @classmethod
    def from_settings(cls, settings: Settings, logger=None, **engine_kwargs) -> "ReportingQuerySet":
        return cls(
            build_engine(settings, **engine_kwargs),
            logger=logger,
            max_rows=settings.max_rows,
        )

    def list_queries(self, level: Optional[QueryLevel] = None) -> List[str]:
        if level is None:
            return list(self.catalog)
        level = QueryLevel(level)
        return [name for name, spec in self.catalog.items() if spec.level == level]

    def describe(self, query_name: str) -> QuerySpecModel:
        try:
            return self.catalog[query_name]
        except KeyError:
            raise UnknownQueryError(query_name) from None

    def alternatives(self, query_name: str) -> List[str]:
        """
        Names of every formulation of the question answered by query_name,
        the primary formulation first.
        """
        spec = self.describe(query_name)
        primary = spec.alternative_of or spec.name
        return [primary] + [
            name for name, other in self.catalog.items() if other.alternative_of == primary
        ]

    @measure_query_time
    @log_query_errors
    def _execute(self, spec: QuerySpecModel) -> Tuple[List[str], List[Dict[str, Any]]]:
        with self.engine.connect() as conn:
            result = conn.execute(text(spec.sql))
            columns = list(result.keys())
            rows = [dict(row._mapping) for row in result.fetchall()]
        self.logger.debug(f"[{spec.name}] Retrieved {len(rows)} rows.")
        if spec.single_row and len(rows) > 1:
            raise ReportingError(
                f"[{spec.name}] Expected at most one row, got {len(rows)}"
            )
        return columns, rows

    def run(self, query_name: str) -> List[Dict[str, Any]]:
        spec = self.describe(query_name)
        _, rows = self._execute(spec)
        return rows

    def run_report(self, query_name: str) -> QueryResultModel:
        spec = self.describe(query_name)
        start = time.time()
        columns, rows = self._execute(spec)
        return QueryResultModel(
            name=spec.name,
            question=spec.question,
            sql=spec.sql.strip(),
            columns=columns,
            rows=rows,
            row_count=len(rows),
            elapsed=time.time() - start,
            max_rows=self.max_rows,
        )

    def run_all(self, level: Optional[QueryLevel] = None) -> Dict[str, QueryResultModel]:
        """
        Run every catalog query, or those of one level, in catalog order.
        The first failing query stops the run with its original error.
        """
        start = time.time()
        reports = {name: self.run_report(name) for name in self.list_queries(level)}
        self.logger.info(f"Ran {len(reports)} queries in {time.time() - start:.3f} seconds.")
        return reports

    def check_equivalence(self, query_name: str) -> bool:
        """
        Run every formulation of a question and compare their rows as
        multisets, projected onto the columns all formulations share.
        """
        names = self.alternatives(query_name)
        reports = [self.run_report(name) for name in names]

        shared = [c for c in reports[0].columns if all(c in r.columns for r in reports[1:])]
        if not shared:
            raise ReportingError(f"Formulations of {names[0]!r} share no columns")

        def canonical(report: QueryResultModel) -> Counter:
            return Counter(tuple(row[c] for c in shared) for row in report.rows)

        expected = canonical(reports[0])
        for report in reports[1:]:
            if canonical(report) != expected:
                self.logger.warning(
                    f"[check_equivalence] {report.name} disagrees with {names[0]} on {shared}"
                )
                return False
        self.logger.info(f"[check_equivalence] {len(names)} formulations of {names[0]} agree.")
        return True

    def verify_schema(self, sample_rows: int = 3) -> DataDictionaryModel:
        data_dictionary = extract_data_dictionary(
            self.engine,
            db_label=self.engine.dialect.name,
            sample_rows=sample_rows,
            tables=required_schema.keys(),
        )
        data_dictionary.notes = music_store_notes
        missing = find_schema_gaps(data_dictionary, required_schema)
        if missing:
            self.logger.error(f"[verify_schema] Missing columns: {missing}")
            raise SchemaMismatchError(missing)
        self.logger.debug(f"[verify_schema] {len(data_dictionary.tables)} tables verified.")
        return data_dictionary

    def describe_schema(self, sample_rows: int = 3) -> str:
        data_dictionary = self.verify_schema(sample_rows=sample_rows)
        return data_dictionary.as_text()

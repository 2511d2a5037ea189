"""
scoring/batch.py
----------------
Batch scoring of many assessments held in a pandas DataFrame.

One row per assessment: an identifier column plus one numeric column per
input name.  Empty cells are treated as *unanswered* (the key is left out of
the answers map), so a rule that needs them fails closed with
``MISSING_ANSWER`` instead of silently scoring zero.

Usage
-----
::

    connector = AnswersCSVConnector("answers.csv")
    connector.connect()
    frame = score_frame(connector.fetch(), config, algorithm_version="v1.0.0")
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

import pandas as pd

from riskworkup.core.config import ScoringSettings
from riskworkup.scoring.calculator import RiskBundleInput, compute_risk_bundle
from riskworkup.scoring.rules import RiskCalculationConfig

logger = logging.getLogger(__name__)

DEFAULT_ID_COLUMN = "assessment_id"
DEFAULT_VERSION_COLUMN = "algorithm_version"


class AnswersCSVConnector:
    """
    Loads an answers CSV from the local filesystem into a DataFrame.

    Args:
        filepath:  Path to the CSV file.
        encoding:  File encoding (default ``'utf-8-sig'`` handles BOM).
        delimiter: Column delimiter.
        id_column: Column holding the assessment identifier; read as string.
    """

    def __init__(
        self,
        filepath: str,
        encoding: str = "utf-8-sig",
        delimiter: str = ",",
        id_column: str = DEFAULT_ID_COLUMN,
    ) -> None:
        self.filepath = filepath
        self.encoding = encoding
        self.delimiter = delimiter
        self.id_column = id_column
        self._connected: bool = False

    def connect(self) -> None:
        """
        Validate that the CSV file exists and is readable.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError:        If the path points to a directory.
        """
        if not os.path.exists(self.filepath):
            raise FileNotFoundError(f"CSV file not found: {self.filepath!r}")
        if os.path.isdir(self.filepath):
            raise ValueError(f"Expected a file path, got a directory: {self.filepath!r}")
        self._connected = True

    def fetch(self) -> pd.DataFrame:
        """
        Read the CSV file.

        Raises:
            RuntimeError: If :meth:`connect` was not called first.
            ValueError:   If the identifier column is absent.
        """
        if not self._connected:
            raise RuntimeError("Call connect() before fetch().")
        df = pd.read_csv(
            self.filepath,
            encoding=self.encoding,
            sep=self.delimiter,
            dtype={self.id_column: str, DEFAULT_VERSION_COLUMN: str},
        )
        if self.id_column not in df.columns:
            raise ValueError(
                f"CSV {self.filepath!r} has no {self.id_column!r} column; "
                f"found {list(df.columns)}"
            )
        return df

    def __repr__(self) -> str:
        return f"AnswersCSVConnector(filepath={self.filepath!r}, connected={self._connected})"


def _row_answers(row: pd.Series, skip: List[str], where: str) -> Dict[str, float]:
    answers: Dict[str, float] = {}
    for column, value in row.items():
        if column in skip or pd.isna(value):
            continue
        try:
            answers[str(column)] = float(value)
        except (TypeError, ValueError):
            logger.warning("%s: non-numeric value %r in column %r ignored", where, value, column)
    return answers


def score_frame(
    df: pd.DataFrame,
    config: RiskCalculationConfig,
    algorithm_version: Optional[str] = None,
    id_column: str = DEFAULT_ID_COLUMN,
    settings: Optional[ScoringSettings] = None,
) -> pd.DataFrame:
    """
    Compute a risk bundle for every row of *df*.

    Args:
        df:                One row per assessment.
        config:            Scoring configuration applied to every row.
        algorithm_version: Version string stamped on each bundle.  When omitted
                           the ``algorithm_version`` column is used, falling
                           back to ``config.version``.
        id_column:         Column holding the assessment identifier.
        settings:          Optional scoring settings.

    Returns:
        DataFrame with columns ``assessment_id``, ``success``, ``overall``,
        ``risk_level``, one ``factor:<key>`` column per factor rule,
        ``error_code`` and ``error``.  Row order follows *df*.

    Raises:
        KeyError: If *id_column* is not in *df*.
    """
    if id_column not in df.columns:
        raise KeyError(f"Identifier column {id_column!r} not found in DataFrame.")

    skip = [id_column, DEFAULT_VERSION_COLUMN]
    factor_keys = [rule.key for rule in config.factor_rules]
    records: List[Dict[str, Any]] = []

    for position, (_, row) in enumerate(df.iterrows()):
        assessment_id = str(row[id_column])
        version = algorithm_version
        if version is None:
            row_version = row.get(DEFAULT_VERSION_COLUMN)
            version = config.version if row_version is None or pd.isna(row_version) else str(row_version)

        answers = _row_answers(row, skip, f"Row {position} ({assessment_id})")
        result = compute_risk_bundle(
            RiskBundleInput(assessment_id=assessment_id, answers=answers, algorithm_version=version),
            config,
            settings,
        )

        record: Dict[str, Any] = {"assessment_id": assessment_id, "success": result.success}
        if result.success:
            score = result.data.risk_score
            record["overall"] = score.overall
            record["risk_level"] = score.risk_level.value
            for factor in score.factors:
                record[f"factor:{factor.key}"] = factor.score
            record["error_code"] = None
            record["error"] = None
        else:
            record["overall"] = None
            record["risk_level"] = None
            for key in factor_keys:
                record[f"factor:{key}"] = None
            record["error_code"] = result.error.code
            record["error"] = result.error.message
        records.append(record)

    columns = (
        ["assessment_id", "success", "overall", "risk_level"]
        + [f"factor:{k}" for k in factor_keys]
        + ["error_code", "error"]
    )
    failed = sum(1 for r in records if not r["success"])
    if failed:
        logger.warning("%d of %d assessments could not be scored", failed, len(records))
    return pd.DataFrame.from_records(records, columns=columns)

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import requests
from google.cloud import bigquery

from .schemas import LocationFinancialDefaults

logger = logging.getLogger(__name__)


class CensusACSClient:
    """Thin wrapper around the Census API for ACS pulls."""

    BASE_URL = "https://api.census.gov/data"
    GEO_KEY = "metropolitan statistical area/micropolitan statistical area"

    # All medians; real estate taxes are reported per year
    ACS_METRICS: Dict[str, str] = {
        "median_income": "B19013_001E",
        "median_rent": "B25064_001E",
        "median_home_value": "B25077_001E",
        "real_estate_taxes": "B25103_001E",
    }

    def __init__(
        self,
        api_key: Optional[str],
        dataset: str = "acs/acs5",
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.dataset = dataset
        self.session = session or requests.Session()

    def fetch_housing_metrics(self, cbsa: str, *, year: int = 2023) -> Dict[str, float]:
        columns = ["NAME"] + sorted(self.ACS_METRICS.values())
        params = {
            "get": ",".join(columns),
            "for": f"{self.GEO_KEY}:{cbsa}",
        }
        if self.api_key:
            params["key"] = self.api_key

        url = f"{self.BASE_URL}/{year}/{self.dataset}"
        logger.info("Fetching ACS %s metrics for CBSA %s", year, cbsa)
        response = self.session.get(url, params=params, timeout=30)
        response.raise_for_status()
        data = response.json()
        if len(data) < 2:
            raise RuntimeError(f"ACS query returned no rows for CBSA {cbsa}")

        row = dict(zip(data[0], data[1]))

        metrics: Dict[str, float] = {"name": row.get("NAME", f"CBSA {cbsa}")}
        for key, column in self.ACS_METRICS.items():
            raw_value = _to_float(row.get(column))
            # ACS uses large negative sentinels for suppressed estimates
            if raw_value is None or raw_value < 0:
                logger.warning("ACS %s missing for CBSA %s", column, cbsa)
                metrics[key] = 0.0
            else:
                metrics[key] = raw_value

        return metrics


class HMDAClient:
    """Pull median property / loan metrics from the public HMDA BigQuery tables."""

    def __init__(
        self,
        *,
        table: str,
        client: Optional[bigquery.Client] = None,
        project: Optional[str] = None,
    ) -> None:
        if client is None:
            self.client = bigquery.Client(project=project)
        else:
            self.client = client
        self.table = table

    def fetch_cbsa_summary(self, cbsa: str, *, year: int = 2023) -> Dict[str, float]:
        # home-purchase (loan_purpose 1), owner-occupied (occupancy_type 1) loans only
        query = f"""
            SELECT
              CAST(derived_msa_md AS STRING) AS cbsa,
              ANY_VALUE(derived_msa_md_name) AS cbsa_name,
              APPROX_QUANTILES(CAST(property_value AS FLOAT64), 2)[OFFSET(1)] AS median_property_value,
              APPROX_QUANTILES(CAST(loan_amount AS FLOAT64), 2)[OFFSET(1)] AS median_loan_amount,
              APPROX_QUANTILES(CAST(interest_rate AS FLOAT64), 2)[OFFSET(1)] AS median_interest_rate,
              COUNT(*) AS loan_count
            FROM `{self.table}`
            WHERE as_of_year = @year
              AND CAST(derived_msa_md AS STRING) = @cbsa
              AND CAST(loan_purpose AS STRING) = '1'
              AND CAST(occupancy_type AS STRING) = '1'
              AND SAFE_CAST(property_value AS FLOAT64) > 0
              AND SAFE_CAST(loan_amount AS FLOAT64) > 0
              AND SAFE_CAST(interest_rate AS FLOAT64) IS NOT NULL
            GROUP BY cbsa
        """
        job_config = bigquery.QueryJobConfig(
            query_parameters=[
                bigquery.ScalarQueryParameter("year", "INT64", year),
                bigquery.ScalarQueryParameter("cbsa", "STRING", cbsa),
            ]
        )
        logger.info("Querying %s for CBSA %s (%s)", self.table, cbsa, year)
        query_job = self.client.query(query, job_config=job_config)
        result = list(query_job.result())
        if not result:
            raise RuntimeError(f"No HMDA results for CBSA {cbsa} in {self.table}")
        row = result[0]
        logger.debug("HMDA sample for CBSA %s: %s loans", cbsa, row["loan_count"])
        return {
            "cbsa": row["cbsa"],
            "name": row["cbsa_name"],
            "property_value": row["median_property_value"] or 0.0,
            "loan_amount": row["median_loan_amount"] or 0.0,
            "interest_rate": row["median_interest_rate"] or 0.0,
        }


@dataclass
class LocationDataAssembler:
    """Combine ACS and HMDA pulls into a single defaults object."""

    acs_client: CensusACSClient
    hmda_client: HMDAClient

    def build_defaults(
        self,
        cbsa: str,
        *,
        acs_year: int = 2023,
        hmda_year: int = 2023,
    ) -> LocationFinancialDefaults:
        acs_metrics = self.acs_client.fetch_housing_metrics(cbsa, year=acs_year)
        hmda_metrics = self.hmda_client.fetch_cbsa_summary(cbsa, year=hmda_year)

        name = hmda_metrics.get("name") or acs_metrics.get("name") or f"CBSA {cbsa}"
        # HMDA reflects recent purchases; ACS value is the fallback
        property_value = hmda_metrics.get("property_value") or acs_metrics.get(
            "median_home_value", 0.0
        )
        loan_amount = hmda_metrics.get("loan_amount", 0.0)
        if property_value and loan_amount > property_value:
            logger.warning(
                "Median loan exceeds median value for CBSA %s; assuming no down payment",
                cbsa,
            )
            loan_amount = property_value

        return LocationFinancialDefaults(
            cbsa=cbsa,
            name=name,
            median_income=acs_metrics.get("median_income", 0.0),
            median_rent=acs_metrics.get("median_rent", 0.0),
            property_value=property_value,
            loan_amount=loan_amount,
            interest_rate=hmda_metrics.get("interest_rate", 0.0),
            annual_taxes=acs_metrics.get("real_estate_taxes", 0.0),
        )


def _to_float(value: Optional[str]) -> Optional[float]:
    if value in (None, "", "null"):
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"Could not convert ACS value '{value}' to float") from exc

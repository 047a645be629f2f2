"""
CSV file source for the CRM and ERP exports
"""

import pandas as pd
from typing import List, Dict, Any, Mapping, Optional
from pathlib import Path
from core.exceptions import CSVExtractionError, SourceUnavailableError
from warehouse.sources.base import (
    IngestionSource,
    CRM_CUSTOMERS,
    CRM_PRODUCTS,
    CRM_SALES,
    ERP_CUSTOMERS,
    ERP_LOCATIONS,
    ERP_CATEGORIES,
)
import logging

logger = logging.getLogger(__name__)

DEFAULT_FILES = {
    CRM_CUSTOMERS: "source_crm/cust_info.csv",
    CRM_PRODUCTS: "source_crm/prd_info.csv",
    CRM_SALES: "source_crm/sales_details.csv",
    ERP_CUSTOMERS: "source_erp/cust_az12.csv",
    ERP_LOCATIONS: "source_erp/loc_a101.csv",
    ERP_CATEGORIES: "source_erp/px_cat_g1v2.csv",
}


class CSVSource(IngestionSource):
    """
    Read source batches from CSV exports.

    Supports:
    - One file per batch, relative to a data directory
    - Header normalization (the ERP exports use upper-case headers)
    - Empty cells as None
    """

    def __init__(self, data_dir: str, files: Optional[Mapping[str, str]] = None):
        self.data_dir = Path(data_dir)
        self.files = dict(files or DEFAULT_FILES)

    def path_for(self, batch_id: str) -> Path:
        if batch_id not in self.files:
            raise SourceUnavailableError(
                f"No file configured for source batch {batch_id}",
                context={"batch_id": batch_id}
            )
        return self.data_dir / self.files[batch_id]

    async def fetch(self, batch_id: str) -> List[Dict[str, Any]]:
        """
        Read one batch file.

        Every cell is read as text; typing happens when rows are parsed
        into raw records, where unreadable values become None.
        """
        file_path = self.path_for(batch_id)
        if not file_path.exists():
            raise SourceUnavailableError(
                f"CSV file not found: {file_path}",
                context={"batch_id": batch_id, "file_path": str(file_path)}
            )

        logger.info(f"Reading CSV from {file_path}")

        try:
            df = pd.read_csv(file_path, dtype=str)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise CSVExtractionError(
                f"Failed to parse CSV file {file_path}",
                context={"batch_id": batch_id, "file_path": str(file_path)},
                original_exception=e
            )

        # Normalize column names (strip whitespace, lowercase)
        df.columns = df.columns.str.strip().str.lower().str.replace(' ', '_')

        # NaN -> None
        df = df.astype(object).where(df.notna(), None)

        records = df.to_dict(orient="records")

        logger.info(f"Read {len(records)} records from CSV")
        return records

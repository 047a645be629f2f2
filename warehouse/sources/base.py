"""
Abstract ingestion source and the source batches the pipeline reads
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Sequence
import logging

from core.exceptions import SourceUnavailableError

logger = logging.getLogger(__name__)

# Source batch identifiers, one per source table
CRM_CUSTOMERS = "crm_cust_info"
CRM_PRODUCTS = "crm_prd_info"
CRM_SALES = "crm_sales_details"
ERP_CUSTOMERS = "erp_cust_az12"
ERP_LOCATIONS = "erp_loc_a101"
ERP_CATEGORIES = "erp_px_cat_g1v2"

SOURCE_BATCHES = (
    CRM_CUSTOMERS,
    CRM_PRODUCTS,
    CRM_SALES,
    ERP_CUSTOMERS,
    ERP_LOCATIONS,
    ERP_CATEGORIES,
)


class IngestionSource(ABC):
    """
    Abstract base class for ingestion sources.

    A source hands over the already parsed rows of one source table per
    call. Rows use source-native column names and types and are not
    validated; cleansing happens downstream.
    """

    @abstractmethod
    async def fetch(self, batch_id: str) -> List[Dict[str, Any]]:
        """
        Retrieve every row of one source batch.

        Raises:
            SourceUnavailableError: If the batch cannot be retrieved
        """
        pass


class InMemorySource(IngestionSource):
    """Serves batches from a mapping of batch id to rows"""

    def __init__(self, batches: Mapping[str, Sequence[Mapping[str, Any]]]):
        self.batches = {batch_id: [dict(row) for row in rows] for batch_id, rows in batches.items()}

    async def fetch(self, batch_id: str) -> List[Dict[str, Any]]:
        if batch_id not in self.batches:
            raise SourceUnavailableError(
                f"Source batch {batch_id} is not available",
                context={"batch_id": batch_id}
            )
        # Copies, so stages can never alter the source
        return [dict(row) for row in self.batches[batch_id]]

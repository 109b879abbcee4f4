"""
Supabase Catalog Store for Groundwork Estimator

Fetches the external catalogs a calculation needs (task templates,
material prices, excavators and carriers, mortar mix ratios) and hands
them to the engine as one read-only EstimationCatalog snapshot.
"""

import logging
import os
from typing import Any, Dict, List, Optional

from supabase import create_client, Client

from estimator.models import Carrier, EstimationCatalog, MaterialPrice, TaskTemplate

logger = logging.getLogger(__name__)

# Supabase configuration
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY", "")

TEMPLATES_TABLE = "event_tasks_with_dynamic_estimates"
MATERIALS_TABLE = "materials"
EQUIPMENT_TABLE = "setup_digging"
MIX_RATIOS_TABLE = "mortar_mix_ratios"

EXCAVATOR_TYPE = "excavator"
CARRIER_TYPE = "barrows_dumpers"

# Initialize Supabase client (will be None if no credentials)
supabase: Optional[Client] = None


def get_supabase_client() -> Optional[Client]:
    """Get or create Supabase client."""
    global supabase
    if supabase is None and SUPABASE_URL and SUPABASE_SERVICE_KEY:
        supabase = create_client(SUPABASE_URL, SUPABASE_SERVICE_KEY)
    return supabase


class SupabaseCatalogStore:
    """Catalog store backed by Supabase tables, scoped by company."""

    def __init__(self, client: Optional[Client] = None):
        self.client = client or get_supabase_client()
        if not self.client:
            logger.warning("Supabase client not initialized. Check SUPABASE_URL and SUPABASE_SERVICE_KEY.")

    def _select(self, table: str, company_id: Optional[str], **filters) -> List[Dict[str, Any]]:
        if not self.client:
            return []
        try:
            query = self.client.table(table).select("*")
            if company_id:
                query = query.eq("company_id", company_id)
            for column, value in filters.items():
                query = query.eq(column, value)
            result = query.execute()
            return result.data or []
        except Exception as e:
            logger.error("Error loading %s: %s", table, e)
            return []

    # =========================================================================
    # Catalogs
    # =========================================================================

    def load_templates(self, company_id: Optional[str]) -> List[TaskTemplate]:
        """Task time templates with their current estimated hours."""
        return [TaskTemplate.from_row(row) for row in self._select(TEMPLATES_TABLE, company_id)]

    def load_prices(self, company_id: Optional[str]) -> List[MaterialPrice]:
        return [MaterialPrice.from_row(row) for row in self._select(MATERIALS_TABLE, company_id)]

    def load_excavators(self, company_id: Optional[str]) -> List[Carrier]:
        rows = self._select(EQUIPMENT_TABLE, company_id, type=EXCAVATOR_TYPE)
        return [Carrier.from_row(row) for row in rows]

    def load_carriers(self, company_id: Optional[str]) -> List[Carrier]:
        rows = self._select(EQUIPMENT_TABLE, company_id, type=CARRIER_TYPE)
        return [Carrier.from_row(row) for row in rows]

    def load_mix_ratios(self, company_id: Optional[str]) -> Dict[str, str]:
        """Mortar mix ratio per mortar type, e.g. {"brick": "1:4"}."""
        ratios = {}
        for row in self._select(MIX_RATIOS_TABLE, company_id):
            if row.get("type") and row.get("mortar_mix_ratio"):
                ratios[row["type"]] = row["mortar_mix_ratio"]
        return ratios

    def load_catalog(self, company_id: Optional[str]) -> EstimationCatalog:
        """
        Snapshot of every catalog for one company.

        Args:
            company_id: Company scope of the catalogs

        Returns:
            EstimationCatalog; tables that fail to load are empty, so the
            engine runs on its fallbacks
        """
        return EstimationCatalog(
            templates=self.load_templates(company_id),
            prices=self.load_prices(company_id),
            carriers=self.load_carriers(company_id),
            excavators=self.load_excavators(company_id),
            mix_ratios=self.load_mix_ratios(company_id),
        )


# Global instance
catalog_store = SupabaseCatalogStore()

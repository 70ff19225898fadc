"""
Agent service: partner records, performance and commissions.
"""

import logging
from typing import Any, Iterable, Optional

from scuba_admin.models.agent import Agent, AgentPerformance
from scuba_admin.models.base import Page
from scuba_admin.services.base import ResourceService

logger = logging.getLogger(__name__)


class AgentService(ResourceService[Agent]):
    """Agents under ``/agents``."""

    path = "/agents"
    record_model = Agent

    def list(
        self,
        page: int = 1,
        per_page: Optional[int] = None,
        search: Optional[str] = None,
        status: Optional[str] = None,
        agent_type: Optional[str] = None,
        country: Optional[str] = None,
    ) -> Page:
        return self._list(
            {
                "page": page,
                "per_page": per_page,
                "search": search,
                "status": status,
                "agent_type": agent_type,
                "country": country,
            }
        )

    def performance(self, agent_id: int) -> AgentPerformance:
        """Referral and revenue metrics for one agent."""
        payload = self.client.get(f"{self._item_path(agent_id)}/performance")
        return AgentPerformance.model_validate(payload or {})

    def commissions(
        self,
        agent_id: int,
        page: int = 1,
        per_page: Optional[int] = None,
        search: Optional[str] = None,
    ) -> Page:
        """Commission records earned by an agent, one page at a time."""
        payload = self.client.get(
            f"{self._item_path(agent_id)}/commissions",
            params={"page": page, "per_page": per_page, "search": search},
        )
        return Page[dict].model_validate(payload or {})

    def calculate_commissions(
        self, agent_id: int, invoice_ids: Optional[Iterable[int]] = None
    ) -> Any:
        """
        Have the server (re)calculate commissions.

        Args:
            agent_id: Agent to calculate for
            invoice_ids: Limit to these invoices; all eligible invoices when None
        """
        ids = list(invoice_ids) if invoice_ids else None
        result = self.client.post(
            f"{self._item_path(agent_id)}/commissions/calculate",
            json={"invoice_ids": ids},
        )
        logger.info(f"Calculated commissions for agent {agent_id}")
        return result

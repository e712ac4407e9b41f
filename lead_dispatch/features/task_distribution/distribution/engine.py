"""
Distribution engine.

Splits an ordered batch of leads across an ordered roster in contiguous
blocks. Every agent gets ``N // k`` leads and the first ``N % k`` agents get
one extra, so quotas never differ by more than one. The engine only looks at
the incoming batch; tasks already assigned to the roster do not affect it.
"""

from collections.abc import Sequence

from lead_dispatch.infrastructure.observability.logging import get_logger

from ..domain.errors import EmptyInputError
from ..domain.models import Agent, Assignment, DistributionPlan, ValidatedLead

logger = get_logger(__name__)


def compute_quotas(total: int, roster_size: int) -> list[int]:
    """
    Number of leads each roster slot receives, in roster order.

    >>> compute_quotas(12, 5)
    [3, 3, 2, 2, 2]
    >>> compute_quotas(3, 5)
    [1, 1, 1, 0, 0]
    """
    if roster_size <= 0:
        raise ValueError("roster_size must be positive")
    if total < 0:
        raise ValueError("total must not be negative")

    base, remainder = divmod(total, roster_size)
    return [base + 1 if index < remainder else base for index in range(roster_size)]


def distribute(leads: Sequence[ValidatedLead], agents: Sequence[Agent]) -> DistributionPlan:
    """
    Pair every lead with an agent.

    The first ``quota[0]`` leads go to ``agents[0]``, the next ``quota[1]``
    to ``agents[1]`` and so on, keeping the original lead order.
    """
    if not leads:
        raise EmptyInputError()
    if not agents:
        raise ValueError("Cannot distribute leads to an empty roster")

    roster_size = len(agents)
    quotas = compute_quotas(len(leads), roster_size)
    base, remainder = divmod(len(leads), roster_size)

    assignments: list[Assignment] = []
    position = 0
    for agent, quota in zip(agents, quotas):
        for lead in leads[position : position + quota]:
            assignments.append(Assignment(lead=lead, agent_id=agent.id, position=position))
            position += 1

    logger.info(
        "Distribution computed",
        total_leads=len(leads),
        roster_size=roster_size,
        base=base,
        remainder=remainder,
        quotas=quotas,
    )

    return DistributionPlan(
        roster_size=roster_size,
        base=base,
        remainder=remainder,
        quotas=quotas,
        assignments=assignments,
    )

"""
approval_chain.py — request approval routed Manager -> VP -> CEO.

Each approver either decides the request or lets it go up the chain.
The CEO always decides (denies), so this chain never ends Unhandled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from chain_dispatch.dispatcher import Chain, Handler, build_chain

__all__ = [
    "ApprovalRequest",
    "Decision",
    "ApprovalPolicy",
    "Manager",
    "VP",
    "CEO",
    "build_approval_chain",
    "route_approval",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ApprovalRequest:
    """
    :param amount: Amount requested (days, money... domain-specific).
    :param type: Request kind, e.g. "PTO" or "promote".
    """
    amount: int
    type: str


@dataclass(frozen=True, slots=True)
class Decision:
    """
    :param approved: Whether the request was granted.
    :param approver: Name of the deciding handler.
    :param reason: Short explanation of the decision.
    :param verdict: Wording used when printed; derived from `approved` when empty.
    """
    approved: bool
    approver: str
    reason: str = ""
    verdict: str = ""

    def __str__(self) -> str:
        if self.approved:
            return f"{self.verdict or 'approved!'} By {self.approver}"
        return f"{self.verdict or 'denied'} by {self.approver}"


@dataclass(frozen=True)
class ApprovalPolicy:
    """
    Thresholds used by the approvers.

    :param manager_limit: Manager approves any request with amount strictly below this.
    :param vp_promotion_limit: VP approves promotions with amount strictly below this.
    """
    manager_limit: int = 10
    vp_promotion_limit: int = 50


class _Approver(Handler[ApprovalRequest, Decision]):
    refusal = "denied"

    def __init__(self, policy: Optional[ApprovalPolicy] = None) -> None:
        self._policy = policy or ApprovalPolicy()

    def _decide(self, approved: bool, reason: str) -> Decision:
        decision = Decision(approved, self.name, reason, "" if approved else self.refusal)
        logger.info("%s (%s)", decision, reason)
        return decision


class Manager(_Approver):
    """Approves small requests of any type."""

    def handle(self, request: ApprovalRequest) -> Optional[Decision]:
        if request.amount < self._policy.manager_limit:
            return self._decide(True, f"amount {request.amount} below {self._policy.manager_limit}")
        return None


class VP(_Approver):
    """Rejects PTO outright; approves modest promotions."""

    refusal = "reject!"

    def handle(self, request: ApprovalRequest) -> Optional[Decision]:
        if request.type == "PTO":
            return self._decide(False, "PTO above manager limit")
        if request.type == "promote" and request.amount < self._policy.vp_promotion_limit:
            return self._decide(True, f"promotion below {self._policy.vp_promotion_limit}")
        return None


class CEO(_Approver):
    """Last resort: denies whatever reached this far."""

    refusal = "deny"

    def handle(self, request: ApprovalRequest) -> Optional[Decision]:
        return self._decide(False, "escalated to the top")


def build_approval_chain(policy: Optional[ApprovalPolicy] = None) -> Chain[ApprovalRequest, Decision]:
    """
    Builds Manager -> VP -> CEO sharing one policy.

    :param policy: Thresholds; defaults to ApprovalPolicy().
    :return: The approval chain.
    """
    policy = policy or ApprovalPolicy()
    return build_chain([Manager(policy), VP(policy), CEO(policy)])


def route_approval(
    request: ApprovalRequest, chain: Optional[Chain[ApprovalRequest, Decision]] = None
) -> Decision:
    """
    Dispatches a request through the approval chain.

    :param request: Request to decide.
    :param chain: Chain to use; defaults to `build_approval_chain()`.
    :return: The deciding approver's Decision.
    :raises UnhandledRequestError: If a custom chain has no approver that decides.
    """
    if chain is None:
        chain = build_approval_chain()
    return chain.dispatch(request).unwrap()


def main() -> None:
    """Prints the decisions for a few sample requests."""
    approvals = build_approval_chain()
    for req in (ApprovalRequest(5, "PTO"), ApprovalRequest(10, "PTO"), ApprovalRequest(60, "protooooo")):
        print(route_approval(req, approvals))


if __name__ == "__main__":
    main()

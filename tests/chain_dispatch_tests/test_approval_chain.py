import logging

import pytest
from chain_dispatch.approval_chain import ApprovalPolicy, ApprovalRequest, Decision, Manager, VP,\
    build_approval_chain, main, route_approval
from chain_dispatch.dispatcher import UnhandledRequestError, build_chain


@pytest.mark.unit
@pytest.mark.parametrize("amount, kind, approved, approver", [
    (5, "PTO", True, "Manager"),
    (10, "PTO", False, "VP"),
    (30, "promote", True, "VP"),
    (50, "promote", False, "CEO"),
    (60, "protooooo", False, "CEO"),
])
def test_default_routing(amount, kind, approved, approver):
    decision = route_approval(ApprovalRequest(amount, kind))
    assert decision.approved is approved and decision.approver == approver


@pytest.mark.unit
def test_decision_text():
    assert str(route_approval(ApprovalRequest(5, "PTO"))) == "approved! By Manager"
    assert str(route_approval(ApprovalRequest(60, "other"))) == "deny by CEO"


@pytest.mark.unit
def test_policy_changes_thresholds():
    chain = build_approval_chain(ApprovalPolicy(manager_limit=100, vp_promotion_limit=200))
    assert chain.dispatch(ApprovalRequest(60, "promote")).handler == "Manager"
    assert chain.dispatch(ApprovalRequest(150, "promote")).handler == "VP"


@pytest.mark.unit
def test_chain_without_ceo_can_leave_request_unhandled():
    chain = build_chain([Manager(), VP()])
    outcome = chain.dispatch(ApprovalRequest(60, "other"))
    assert not outcome
    with pytest.raises(UnhandledRequestError):
        route_approval(ApprovalRequest(60, "other"), chain)


@pytest.mark.unit
def test_decision_is_logged(caplog):
    with caplog.at_level(logging.INFO, logger="chain_dispatch.approval_chain"):
        route_approval(ApprovalRequest(10, "PTO"))
    assert "reject! by VP" in caplog.text


@pytest.mark.unit
def test_decision_carries_reason():
    decision = route_approval(ApprovalRequest(3, "anything"))
    assert decision == Decision(True, "Manager", "amount 3 below 10")


@pytest.mark.unit
def test_demo_prints_reference_decisions(capsys):
    main()
    assert capsys.readouterr().out.splitlines() == [
        "approved! By Manager",
        "reject! by VP",
        "deny by CEO",
    ]

import pytest
from chain_dispatch.transmission_chain import Delivery, LocalTransmitter, Message, TransmissionPolicy,\
    build_transmission_chain, main, transmit
from chain_dispatch.dispatcher import build_chain


@pytest.mark.unit
@pytest.mark.parametrize("recipient, subject, route", [
    ("alice@mycompany.com", "Hello", "remotely"),
    ("joe@example.com", "Free for lunch?", "locally"),
    ("alice@mycompany.com", "Priority: All-Hands Meeting", "as priority"),
    ("joe@example.com", "Priority: outage", "as priority"),
])
def test_default_routing(recipient, subject, route):
    delivery = transmit(Message("bob@example.com", recipient, subject))
    assert delivery == Delivery(route, recipient)


@pytest.mark.unit
def test_delivery_text():
    delivery = transmit(Message("bob@example.com", "joe@example.com", "Hi"))
    assert str(delivery) == "Message to joe@example.com sent locally"


@pytest.mark.unit
def test_policy_overrides_domain_and_prefix():
    chain = build_transmission_chain(TransmissionPolicy(local_domain="@corp.local", priority_prefix="URGENT"))
    assert transmit(Message("a", "joe@example.com", "Priority: x"), chain).route == "remotely"
    assert transmit(Message("a", "joe@corp.local", "hi"), chain).route == "locally"
    assert transmit(Message("a", "joe@example.com", "URGENT fix"), chain).route == "as priority"


@pytest.mark.unit
def test_local_only_chain_leaves_remote_messages_unhandled():
    chain = build_chain([LocalTransmitter()])
    assert not chain.dispatch(Message("a", "alice@mycompany.com", "Hello"))
    assert chain.dispatch(Message("a", "joe@example.com", "Hello")).value.route == "locally"


@pytest.mark.unit
def test_demo_prints_each_route(capsys):
    main()
    assert capsys.readouterr().out.splitlines() == [
        "Message to alice@mycompany.com sent remotely",
        "Message to joe@example.com sent locally",
        "Message to alice@mycompany.com sent as priority",
    ]

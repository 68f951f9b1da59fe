"""
transmission_chain.py — message delivery routed Priority -> Local -> Remote.

Transmitters pick a route by subject prefix or recipient domain; the remote
transmitter accepts anything left over.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from chain_dispatch.dispatcher import Chain, Handler, build_chain

__all__ = [
    "Message",
    "Delivery",
    "TransmissionPolicy",
    "PriorityTransmitter",
    "LocalTransmitter",
    "RemoteTransmitter",
    "build_transmission_chain",
    "transmit",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Message:
    sender: str
    recipient: str
    subject: str


@dataclass(frozen=True, slots=True)
class Delivery:
    """
    :param route: How the message went out ("as priority", "locally", "remotely").
    :param recipient: Recipient address.
    """
    route: str
    recipient: str

    def __str__(self) -> str:
        return f"Message to {self.recipient} sent {self.route}"


@dataclass(frozen=True)
class TransmissionPolicy:
    """
    :param local_domain: Recipient suffix delivered without leaving the local network.
    :param priority_prefix: Subject prefix that marks a message as priority.
    """
    local_domain: str = "@example.com"
    priority_prefix: str = "Priority"


class _Transmitter(Handler[Message, Delivery]):
    route = ""

    def __init__(self, policy: Optional[TransmissionPolicy] = None) -> None:
        self._policy = policy or TransmissionPolicy()

    def _send(self, message: Message) -> Delivery:
        delivery = Delivery(self.route, message.recipient)
        logger.info("%s", delivery)
        return delivery


class PriorityTransmitter(_Transmitter):
    route = "as priority"

    def handle(self, message: Message) -> Optional[Delivery]:
        if message.subject.startswith(self._policy.priority_prefix):
            return self._send(message)
        return None


class LocalTransmitter(_Transmitter):
    route = "locally"

    def handle(self, message: Message) -> Optional[Delivery]:
        if message.recipient.endswith(self._policy.local_domain):
            return self._send(message)
        return None


class RemoteTransmitter(_Transmitter):
    route = "remotely"

    def handle(self, message: Message) -> Optional[Delivery]:
        return self._send(message)


def build_transmission_chain(policy: Optional[TransmissionPolicy] = None) -> Chain[Message, Delivery]:
    """
    Builds Priority -> Local -> Remote sharing one policy.

    :param policy: Routing rules; defaults to TransmissionPolicy().
    :return: The transmission chain.
    """
    policy = policy or TransmissionPolicy()
    return build_chain([PriorityTransmitter(policy), LocalTransmitter(policy), RemoteTransmitter(policy)])


def transmit(message: Message, chain: Optional[Chain[Message, Delivery]] = None) -> Delivery:
    """
    Sends a message through the first transmitter that accepts it.

    :param message: Message to deliver.
    :param chain: Chain to use; defaults to `build_transmission_chain()`.
    :return: The Delivery record.
    :raises UnhandledRequestError: If a custom chain has no transmitter that accepts it.
    """
    if chain is None:
        chain = build_transmission_chain()
    return chain.dispatch(message).unwrap()


def main() -> None:
    """Prints the route taken by a few sample messages."""
    transmitters = build_transmission_chain()
    for msg in (
        Message("bob@example.com", "alice@mycompany.com", "Hello"),
        Message("bob@example.com", "joe@example.com", "Free for lunch?"),
        Message("bob@example.com", "alice@mycompany.com", "Priority: All-Hands Meeting"),
    ):
        print(transmit(msg, transmitters))


if __name__ == "__main__":
    main()

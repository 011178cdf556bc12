"""Client address derivation behind reverse proxies.

Each proxy in front of the server appends the address it received the
request from to ``X-Forwarded-For``. Walking the chain from the server
outward, the first *trusted_hops* addresses belong to our own proxies;
the next one is the client. Trusting too few hops makes every client look
like the proxy; trusting too many lets clients pick their own identity by
forging the header.
"""

from collections.abc import Sequence

UNKNOWN_CLIENT = "unknown"


def client_address(
    remote_addr: str | None,
    forwarded_for: Sequence[str],
    trusted_hops: int,
) -> str:
    """Return the address of the client as seen through *trusted_hops* proxies.

    The candidate chain is the socket peer followed by the forwarded
    addresses, nearest first. With ``trusted_hops=0`` the socket peer is
    the client. When the chain is shorter than the hop count, the
    outermost address is used.

    Examples::

        client_address("10.0.0.2", ["203.0.113.7"], 0)            -> "10.0.0.2"
        client_address("10.0.0.2", ["203.0.113.7"], 1)            -> "203.0.113.7"
        client_address("10.0.0.3", ["203.0.113.7", "10.0.0.2"], 1) -> "10.0.0.2"
        client_address("10.0.0.3", ["203.0.113.7", "10.0.0.2"], 2) -> "203.0.113.7"
    """
    if trusted_hops < 0:
        msg = f"trusted_hops must not be negative, got {trusted_hops}"
        raise ValueError(msg)
    chain = [remote_addr or UNKNOWN_CLIENT, *reversed(forwarded_for)]
    return chain[min(trusted_hops, len(chain) - 1)]

"""Record types read from the link-of-trust contract.

Identity:
    Base58 text of the SHA-256 hash of an account id. Used as the key of
    every node, edge and sub-map entry.

TokenAmount:
    Amount in the smallest unit of the native token, kept as a decimal digit
    string so it never goes through a float.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

Identity = str
TokenAmount = str


@dataclass(frozen=True)
class PendingRequest:
    """A trust request waiting for an answer: deposit locked until expiry."""

    deposit: TokenAmount
    expiry: int  # u64 timestamp

    def to_dict(self) -> dict[str, Any]:
        return {"deposit": self.deposit, "expiry": self.expiry}


@dataclass(frozen=True)
class UserRecord:
    """One identity as stored by the contract.

    Produced fresh by every fetch or decode and never mutated. Only the
    first four fields are needed to build trust graphs; the remaining
    collections are filled when the source provides them.

    ``collection_headers`` holds the raw sub-collection headers of a record
    decoded from a storage dump (see ``wire.state.decode_fixed_record``).
    """

    id: Identity
    requested_trust_cost: TokenAmount = "0"
    profile: str = ""
    trust_relations: tuple[tuple[Identity, float], ...] = ()
    private_profile: tuple[tuple[Identity, str], ...] = ()
    trust_requests: tuple[tuple[Identity, PendingRequest], ...] = ()
    blocked_requests: tuple[tuple[Identity, TokenAmount], ...] = ()
    accepted_deposits: tuple[tuple[Identity, TokenAmount], ...] = ()
    collection_headers: dict[str, bytes] = field(default_factory=dict, repr=False)

    def trusted(self) -> list[Identity]:
        """Targets of relations with a strictly positive weight, in order."""
        return [target for target, weight in self.trust_relations if weight > 0]

    @classmethod
    def from_view(cls, data: dict[str, Any]) -> UserRecord:
        """Build from the contract's ``get_user_data`` JSON view."""
        requests = []
        for target, request in data.get("trust_requests") or []:
            deposit, expiry = request
            requests.append((target, PendingRequest(deposit=str(deposit), expiry=int(expiry))))

        return cls(
            id=data["hashed_user_id"],
            requested_trust_cost=str(data.get("requested_trust_cost", "0")),
            profile=data.get("public_profile", ""),
            trust_relations=tuple((t, float(w)) for t, w in data.get("trust_network") or []),
            private_profile=tuple((k, v) for k, v in data.get("private_profile") or []),
            trust_requests=tuple(requests),
            blocked_requests=tuple((k, str(v)) for k, v in data.get("blocked_requests") or []),
            accepted_deposits=tuple((k, str(v)) for k, v in data.get("accepted_deposits") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the same shape as the contract view."""
        return {
            "hashed_user_id": self.id,
            "requested_trust_cost": self.requested_trust_cost,
            "public_profile": self.profile,
            "trust_network": [[t, w] for t, w in self.trust_relations],
            "private_profile": [[k, v] for k, v in self.private_profile],
            "trust_requests": [[k, [r.deposit, r.expiry]] for k, r in self.trust_requests],
            "blocked_requests": [[k, v] for k, v in self.blocked_requests],
            "accepted_deposits": [[k, v] for k, v in self.accepted_deposits],
        }

"""Wire format of the link-of-trust contract storage.

``codec`` holds the binary primitives (little-endian integers and floats,
length-prefixed text and blobs); ``state`` applies them to a full storage
dump.

Example usage:
    from linkoftrust.wire import ContractViewState, decode_contract_state

    view_state = ContractViewState.from_rpc(rpc_result)
    state = decode_contract_state(view_state)
    for identity, record in state.users.items():
        print(identity, record.profile)
"""

from .codec import (
    U32_MAX,
    U64_MAX,
    read_bytes,
    read_f32_le,
    read_text,
    read_u32_le,
    read_u64_le,
    write_bytes,
    write_f32_le,
    write_text,
    write_u32_le,
    write_u64_le,
)
from .state import (
    USER_COLLECTIONS,
    ContractState,
    ContractViewState,
    decode_accepted_deposits,
    decode_blocked_requests,
    decode_contract_state,
    decode_fixed_record,
    decode_pending_request_value,
    decode_private_profiles,
    decode_sub_map,
    decode_text_value,
    decode_token_value,
    decode_trust_network,
    decode_trust_requests,
    decode_user_records,
    decode_weight_value,
    encode_fixed_record,
    sub_map_key,
)

__all__ = [
    # Codec
    "U32_MAX",
    "U64_MAX",
    "read_u32_le",
    "read_u64_le",
    "read_f32_le",
    "read_text",
    "read_bytes",
    "write_u32_le",
    "write_u64_le",
    "write_f32_le",
    "write_text",
    "write_bytes",
    # State
    "USER_COLLECTIONS",
    "ContractState",
    "ContractViewState",
    "decode_fixed_record",
    "encode_fixed_record",
    "decode_user_records",
    "decode_sub_map",
    "sub_map_key",
    "decode_text_value",
    "decode_weight_value",
    "decode_token_value",
    "decode_pending_request_value",
    "decode_private_profiles",
    "decode_trust_network",
    "decode_trust_requests",
    "decode_blocked_requests",
    "decode_accepted_deposits",
    "decode_contract_state",
]

from .encoder import encode_checkpoint_call, encode_uint256, payload_hex

__all__ = ["encode_checkpoint_call", "encode_uint256", "payload_hex"]

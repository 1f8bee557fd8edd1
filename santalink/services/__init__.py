from santalink.services.assignment import (
    Assignment,
    AssignmentError,
    GenerationError,
    ValidationError,
    generate_assignments,
    lookup_assignment,
)
from santalink.services.state_codec import DecodeResult, SessionState, decode_state, encode_state

__all__ = [
    "Assignment",
    "AssignmentError",
    "GenerationError",
    "ValidationError",
    "generate_assignments",
    "lookup_assignment",
    "DecodeResult",
    "SessionState",
    "decode_state",
    "encode_state",
]

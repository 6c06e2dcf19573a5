"""
Bene Transaction Context

The full input of one validator evaluation: the campaign box being spent
(SELF), the ordered candidate outputs, the ordered consumed inputs and the
current ledger height.

Positional access is always guarded: ``output(i)`` and ``input(i)`` return
None instead of raising when the index does not exist.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .box import Box, _mapping, _sequence


@dataclass(frozen=True)
class TransactionContext:
    """
    Transaction context for a single validation.

    ``inputs`` includes SELF at position 0, as on the ledger. An empty
    ``inputs`` is filled with SELF alone.
    """
    self_box: Box
    outputs: Sequence[Box]
    inputs: Sequence[Box] = field(default_factory=tuple)
    height: int = 0

    def __post_init__(self):
        object.__setattr__(self, "outputs", tuple(self.outputs))
        inputs = tuple(self.inputs) or (self.self_box,)
        if inputs[0] != self.self_box:
            raise ValueError("inputs must start with SELF")
        object.__setattr__(self, "inputs", inputs)
        if isinstance(self.height, bool) or not isinstance(self.height, int):
            raise ValueError("height must be an integer")

    def output(self, index: int) -> Optional[Box]:
        if 0 <= index < len(self.outputs):
            return self.outputs[index]
        return None

    def input(self, index: int) -> Optional[Box]:
        if 0 <= index < len(self.inputs):
            return self.inputs[index]
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "self": self.self_box.to_dict(),
            "outputs": [b.to_dict() for b in self.outputs],
            "inputs": [b.to_dict() for b in self.inputs],
            "height": self.height,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TransactionContext':
        data = _mapping(data, "transaction")
        required = ["self", "outputs", "height"]
        missing = [f for f in required if f not in data]
        if missing:
            raise ValueError(f"Missing required fields: {missing}")

        return cls(
            self_box=Box.from_dict(data["self"]),
            outputs=[Box.from_dict(b) for b in _sequence(data["outputs"], "outputs")],
            inputs=[Box.from_dict(b) for b in _sequence(data.get("inputs", []), "inputs")],
            height=data["height"],
        )


def create_context(
    self_box: Box,
    outputs: List[Box],
    height: int,
    extra_inputs: Optional[List[Box]] = None
) -> TransactionContext:
    """
    Factory function to create a transaction context.

    Args:
        self_box: The campaign box being spent
        outputs: Candidate outputs, successor campaign box first
        height: Current ledger height
        extra_inputs: Inputs spent alongside SELF (funding boxes etc.)

    Returns:
        TransactionContext with SELF prepended to the inputs
    """
    return TransactionContext(
        self_box=self_box,
        outputs=outputs,
        inputs=[self_box] + list(extra_inputs or []),
        height=height,
    )

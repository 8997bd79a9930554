"""Record approval gate."""

from .approval_gate import ApprovalGate, GateContext
from .gate_builder import build_gate

__all__ = ["ApprovalGate", "GateContext", "build_gate"]

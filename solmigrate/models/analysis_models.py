"""
Analysis Data Models — Structured representations of a Solidity source file.

These models are the output of the analyzer and the input to the mapping-rule
engine, the Anchor skeleton generator, the cost estimator and the checklist.
Every model is frozen: one AnalysisResult is a read-only snapshot of one pass.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ContractKind(str, Enum):
    CONTRACT = "contract"
    INTERFACE = "interface"
    LIBRARY = "library"


class Complexity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class _Record(BaseModel):
    model_config = {"frozen": True}


class Parameter(_Record):
    """A function, constructor or modifier parameter."""

    name: str = Field(default="", description="Parameter name, empty when unnamed")
    type_name: str = Field(..., description="Raw Solidity type text")


class EventParameter(_Record):
    """An event parameter."""

    name: str = ""
    type_name: str
    indexed: bool = False


class StateVariable(_Record):
    """A contract-level storage declaration."""

    name: str
    type_name: str = Field(
        ..., description="Raw type, e.g. 'mapping(address => uint256)' or 'uint256'"
    )
    visibility: str = Field(default="internal", description="public | private | internal")
    constant: bool = False
    immutable: bool = False

    @property
    def is_mapping(self) -> bool:
        return self.type_name.startswith("mapping")


class FunctionDef(_Record):
    """A function, constructor, fallback/receive or modifier signature."""

    name: str = Field(
        ..., description="'constructor' for constructors, 'fallback' for unnamed functions"
    )
    visibility: str = "public"
    state_mutability: str = Field(
        default="nonpayable", description="pure | view | payable | nonpayable"
    )
    parameters: tuple[Parameter, ...] = ()
    return_parameters: tuple[Parameter, ...] = ()
    is_constructor: bool = False
    is_modifier: bool = False

    @property
    def is_entrypoint(self) -> bool:
        """True for callable public/external functions (what becomes an instruction)."""
        return (
            not self.is_constructor
            and not self.is_modifier
            and self.visibility in ("public", "external")
        )


class EventDef(_Record):
    """An event declaration."""

    name: str
    parameters: tuple[EventParameter, ...] = ()


class ContractDef(_Record):
    """A contract, interface or library declaration."""

    name: str
    kind: ContractKind = ContractKind.CONTRACT
    is_abstract: bool = False
    base_contracts: tuple[str, ...] = Field(
        default=(), description="Base names as written, not resolved"
    )
    state_variables: tuple[StateVariable, ...] = ()
    functions: tuple[FunctionDef, ...] = ()
    events: tuple[EventDef, ...] = ()


class AnalysisResult(_Record):
    """Complete analysis of one Solidity source text."""

    contracts: tuple[ContractDef, ...] = ()
    pragma_version: str = Field(default="unknown", description="Version expression or 'unknown'")
    imports: tuple[str, ...] = ()
    is_erc20: bool = False
    is_erc721: bool = False
    has_ownable: bool = False
    has_access_control: bool = False
    has_mappings: bool = False
    has_events: bool = False
    complexity: Complexity = Complexity.LOW
    line_count: int = 0
    errors: tuple[str, ...] = Field(
        default=(), description="Non-fatal diagnostics; data is best-effort when present"
    )

    @property
    def main_contract(self) -> ContractDef | None:
        """First non-abstract contract, else the first contract, else any declaration."""
        candidates = [c for c in self.contracts if c.kind == ContractKind.CONTRACT]
        for contract in candidates:
            if not contract.is_abstract:
                return contract
        if candidates:
            return candidates[0]
        return self.contracts[0] if self.contracts else None

    @property
    def mapping_variables(self) -> list[StateVariable]:
        return [
            var
            for contract in self.contracts
            for var in contract.state_variables
            if var.is_mapping
        ]

    @property
    def token_standard(self) -> str:
        if self.is_erc20:
            return "ERC-20"
        if self.is_erc721:
            return "ERC-721"
        return "Custom"

"""
Deployment Models
Request/result records and compiled contract artifacts
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class DeploymentRequest:
    """One contract instance to create"""

    contract_name: str
    constructor_args: Tuple[Any, ...] = ()
    label: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.label or self.contract_name


@dataclass(frozen=True)
class DeploymentResult:
    """A confirmed contract creation"""

    contract_address: str
    transaction_hash: str
    transaction_receipt: Mapping[str, Any]
    network: str

    @property
    def gas_used(self) -> int:
        return self.transaction_receipt['gasUsed']

    @property
    def block_number(self) -> int:
        return self.transaction_receipt['blockNumber']


@dataclass(frozen=True)
class ContractArtifact:
    """
    Hardhat compilation artifact (hh-sol-artifact-1)

    The fields mirror the JSON file written under
    artifacts/<sourceName>/<contractName>.json
    """

    contract_name: str
    source_name: str
    abi: List[Dict[str, Any]]
    bytecode: str
    path: str
    link_references: Dict[str, Any] = field(default_factory=dict)

    @property
    def fully_qualified_name(self) -> str:
        return f"{self.source_name}:{self.contract_name}"

    @property
    def constructor_inputs(self) -> List[Dict[str, Any]]:
        for entry in self.abi:
            if entry.get('type') == 'constructor':
                return entry.get('inputs', [])
        return []

    @property
    def debug_path(self) -> str:
        return self.path[:-len('.json')] + '.dbg.json'

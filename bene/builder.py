"""
Bene Script Builder Boundary

Compiling a campaign contract to proposition bytes and rendering its address
are done by an external compiler. This module only fixes the interface:
a ``BuildRequest`` goes in, a ``CompiledContract`` comes out, and the
minting guard is wired to the compiled fingerprint.
"""

import json
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from .constants import CampaignConstants, ConfigurationError, Network
from .hashing import content_hash, script_hash
from .minting import MintGuard
from .variants import ContractVersion, resolve_variant


@dataclass(frozen=True)
class BuildRequest:
    """Constants plus contract generation: everything a compiler needs."""
    constants: CampaignConstants
    version: ContractVersion

    def __post_init__(self):
        variant = resolve_variant(self.version)
        variant.check_constants(self.constants)
        object.__setattr__(self, "version", variant.version)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version.value,
            "constants": self.constants.to_dict(),
        }

    def get_hash(self) -> str:
        return content_hash(self.to_dict())


@dataclass(frozen=True)
class CompiledContract:
    """Compiler output for one build request."""
    ergo_tree: bytes
    address: str
    network: Network

    @property
    def fingerprint(self) -> str:
        """blake2b-256 of the proposition bytes, as committed by the minting guard."""
        return script_hash(self.ergo_tree)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ergo_tree": self.ergo_tree.hex(),
            "address": self.address,
            "network": self.network.value,
            "fingerprint": self.fingerprint,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CompiledContract':
        try:
            return cls(
                ergo_tree=bytes.fromhex(data["ergo_tree"]),
                address=data["address"],
                network=Network(data.get("network", Network.MAINNET.value)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid compiled contract entry: {e}")


class ScriptBuilder(ABC):
    """Abstract interface for the contract compiler."""

    @abstractmethod
    def build(self, request: BuildRequest) -> CompiledContract:
        """
        Compile the campaign contract for a request.

        Raises:
            ConfigurationError: the request cannot be compiled
        """
        pass


class StaticScriptBuilder(ScriptBuilder):
    """
    Serves pre-compiled contracts keyed by build request hash.

    Used offline and in tests, where the compiler is not available.
    """

    def __init__(self, contracts: Optional[Dict[str, CompiledContract]] = None):
        self._contracts: Dict[str, CompiledContract] = dict(contracts or {})
        self._lock = threading.RLock()

    def register(self, request: BuildRequest, contract: CompiledContract) -> None:
        if contract.network != request.constants.network:
            raise ConfigurationError(
                f"Contract built for {contract.network.value}, "
                f"request targets {request.constants.network.value}"
            )
        with self._lock:
            self._contracts[request.get_hash()] = contract

    def build(self, request: BuildRequest) -> CompiledContract:
        request_hash = request.get_hash()
        with self._lock:
            contract = self._contracts.get(request_hash)
        if contract is None:
            raise ConfigurationError(f"No compiled contract for request {request_hash}")
        return contract

    @classmethod
    def from_json_file(cls, path: str) -> 'StaticScriptBuilder':
        """Load ``{request_hash: {ergo_tree, address, network}}``."""
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise ConfigurationError(f"{path} must hold a JSON object")
        return cls({k: CompiledContract.from_dict(v) for k, v in raw.items()})


def mint_guard_for(compiled: Union[CompiledContract, bytes]) -> MintGuard:
    """Minting guard committed to a compiled contract (or its raw proposition bytes)."""
    if isinstance(compiled, CompiledContract):
        return MintGuard(compiled.fingerprint)
    return MintGuard(script_hash(compiled))

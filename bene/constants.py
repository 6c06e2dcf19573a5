"""
Bene Campaign Constants

The compile-time constants a campaign contract is built with, as an explicit
configuration structure instead of values interpolated into a script
template. The same object parameterizes the Python validator and is handed
to the script builder.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from .hashing import content_hash


# Deducted from every withdrawal so the owner does not need native funds to pay it
MINER_FEE = 1_100_000

TOKEN_ID_LENGTH = 32
SCRIPT_HASH_LENGTH = 32


class ConfigurationError(ValueError):
    """Invalid campaign configuration. Fatal, not retryable."""


class Network(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"


class AssetMode(str, Enum):
    """Which asset buys and refunds settle in."""
    NATIVE = "NATIVE"
    DESIGNATED = "DESIGNATED"


def _hex_field(data: Dict[str, Any], name: str, default: str = None) -> bytes:
    value = data.get(name, default)
    if value is None:
        raise ConfigurationError(f"Missing required constant: {name}")
    try:
        return bytes.fromhex(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a hex string")


@dataclass(frozen=True)
class CampaignConstants:
    """
    Compile-time constants of one campaign contract.

    - owner_condition: serialized authorization condition of the project owner
    - dev_fee_script_hash: blake2b-256 of the developer-fee recipient script
    - dev_fee_percent: developer share of each withdrawal, in percent
    - proof_of_funding_token_id: expected id of token 1
    - designated_asset_id: settlement asset id, empty for the native asset
    - network: target network of the built address
    """
    owner_condition: bytes
    dev_fee_script_hash: bytes
    dev_fee_percent: int
    proof_of_funding_token_id: bytes
    designated_asset_id: bytes = b""
    network: Network = Network.MAINNET

    def __post_init__(self):
        object.__setattr__(self, "network", self._coerce_network(self.network))
        self._validate()

    @staticmethod
    def _coerce_network(network) -> Network:
        try:
            return Network(network)
        except ValueError:
            raise ConfigurationError(
                f"Invalid network '{network}': must be one of {[n.value for n in Network]}"
            )

    def _validate(self):
        if not isinstance(self.owner_condition, bytes) or len(self.owner_condition) < 2:
            raise ConfigurationError("owner_condition must be a serialized condition")

        if len(self.dev_fee_script_hash) != SCRIPT_HASH_LENGTH:
            raise ConfigurationError(
                f"dev_fee_script_hash must be {SCRIPT_HASH_LENGTH} bytes, "
                f"got {len(self.dev_fee_script_hash)}"
            )

        if isinstance(self.dev_fee_percent, bool) or not isinstance(self.dev_fee_percent, int):
            raise ConfigurationError("dev_fee_percent must be an integer")
        if not 0 <= self.dev_fee_percent <= 100:
            raise ConfigurationError(f"dev_fee_percent must be within 0..100, got {self.dev_fee_percent}")

        if len(self.proof_of_funding_token_id) != TOKEN_ID_LENGTH:
            raise ConfigurationError(
                f"proof_of_funding_token_id must be {TOKEN_ID_LENGTH} bytes"
            )

        if self.designated_asset_id and len(self.designated_asset_id) != TOKEN_ID_LENGTH:
            raise ConfigurationError(
                f"designated_asset_id must be empty or {TOKEN_ID_LENGTH} bytes"
            )

    @property
    def asset_mode(self) -> AssetMode:
        return AssetMode.DESIGNATED if self.designated_asset_id else AssetMode.NATIVE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner_condition": self.owner_condition.hex(),
            "dev_fee_script_hash": self.dev_fee_script_hash.hex(),
            "dev_fee_percent": self.dev_fee_percent,
            "proof_of_funding_token_id": self.proof_of_funding_token_id.hex(),
            "designated_asset_id": self.designated_asset_id.hex(),
            "network": self.network.value,
        }

    def get_hash(self) -> str:
        return content_hash(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CampaignConstants':
        if not isinstance(data, dict):
            raise ConfigurationError("Constants must be a JSON object")
        if "dev_fee_percent" not in data:
            raise ConfigurationError("Missing required constant: dev_fee_percent")

        return cls(
            owner_condition=_hex_field(data, "owner_condition"),
            dev_fee_script_hash=_hex_field(data, "dev_fee_script_hash"),
            dev_fee_percent=data["dev_fee_percent"],
            proof_of_funding_token_id=_hex_field(data, "proof_of_funding_token_id"),
            designated_asset_id=_hex_field(data, "designated_asset_id", ""),
            network=data.get("network", Network.MAINNET.value),
        )

"""
Bene Contract Variants

The three shipped contract generations share one validator core. A variant
records only what differs between them:

- v1_0: native settlement, LEGACY replication check
- v1_1: native settlement, CORRECTED replication check
- v1_2: native or designated settlement asset, CORRECTED replication check,
        [rate, asset id length] pricing descriptor
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .codec import RegisterLayout
from .constants import AssetMode, CampaignConstants, ConfigurationError
from .hashing import content_hash
from .replication import ReplicationShape


class UnknownVariantError(ConfigurationError):
    """Requested contract version is not registered."""


class ContractVersion(str, Enum):
    V1_0 = "v1_0"
    V1_1 = "v1_1"
    V1_2 = "v1_2"


ACTION_IDS: Tuple[str, ...] = (
    "buy_tokens",
    "refund_tokens",
    "withdraw_funds",
    "withdraw_unsold_tokens",
    "add_tokens",
    "exchange_funding_tokens",
)


@dataclass(frozen=True)
class ContractVariant:
    """
    One validator rule-set.

    ``actions`` lists the action gates OR-ed together by the dispatcher, in
    evaluation order.
    """
    version: ContractVersion
    replication_shape: ReplicationShape
    register_layout: RegisterLayout
    supports_designated_asset: bool = False
    actions: Tuple[str, ...] = field(default=ACTION_IDS)
    description: str = ""

    def check_constants(self, constants: CampaignConstants) -> None:
        """Reject constants this generation cannot honour."""
        if constants.asset_mode == AssetMode.DESIGNATED and not self.supports_designated_asset:
            raise ConfigurationError(
                f"Contract {self.version.value} settles in the native asset only; "
                "designated_asset_id must be empty"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version.value,
            "replication_shape": self.replication_shape.value,
            "register_layout": self.register_layout.value,
            "supports_designated_asset": self.supports_designated_asset,
            "actions": list(self.actions),
            "description": self.description,
        }

    def get_hash(self) -> str:
        return content_hash(self.to_dict())


class VariantRegistry:
    """Registry of contract variants keyed by version."""

    def __init__(self):
        self._variants: Dict[ContractVersion, ContractVariant] = {}

    def register(self, variant: ContractVariant) -> None:
        self._variants[variant.version] = variant

    def get(self, version) -> Optional[ContractVariant]:
        try:
            return self._variants.get(ContractVersion(version))
        except ValueError:
            return None

    def resolve(self, version) -> ContractVariant:
        """Like ``get`` but fails fast on unknown versions."""
        variant = self.get(version)
        if variant is None:
            known = [v.value for v in self._variants]
            raise UnknownVariantError(f"Invalid contract version '{version}': must be one of {known}")
        return variant

    def list_versions(self) -> List[str]:
        return [v.value for v in self._variants]

    def latest(self) -> ContractVariant:
        return self._variants[max(self._variants, key=lambda v: v.value)]


def create_default_registry() -> VariantRegistry:
    """Registry holding the three shipped generations."""
    registry = VariantRegistry()
    registry.register(ContractVariant(
        version=ContractVersion.V1_0,
        replication_shape=ReplicationShape.LEGACY,
        register_layout=RegisterLayout.SINGLE_RATE,
        description="Native settlement, original replication check",
    ))
    registry.register(ContractVariant(
        version=ContractVersion.V1_1,
        replication_shape=ReplicationShape.CORRECTED,
        register_layout=RegisterLayout.SINGLE_RATE,
        description="Native settlement, replication check without the vacuous token clause",
    ))
    registry.register(ContractVariant(
        version=ContractVersion.V1_2,
        replication_shape=ReplicationShape.CORRECTED,
        register_layout=RegisterLayout.RATE_AND_ASSET,
        supports_designated_asset=True,
        description="Native or designated settlement asset",
    ))
    return registry


DEFAULT_REGISTRY = create_default_registry()


def resolve_variant(version) -> ContractVariant:
    """Resolve a version string against the shipped generations."""
    return DEFAULT_REGISTRY.resolve(version)

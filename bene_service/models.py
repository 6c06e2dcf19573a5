from pydantic import BaseModel, ConfigDict, Field, StrictInt
from typing import List, Optional

# Byte fields travel as lowercase hex strings; amounts must be JSON integers.

class TokenModel(BaseModel):
    id: str
    amount: StrictInt

class RegistersModel(BaseModel):
    block_limit: StrictInt
    minimum_threshold: StrictInt
    counters: List[StrictInt]
    pricing: List[StrictInt]
    owner_details: str = ""
    project_metadata: str = ""

class BoxModel(BaseModel):
    value: StrictInt
    script: str
    tokens: List[TokenModel] = Field(default_factory=list)
    registers: Optional[RegistersModel] = None

    def to_dict(self):
        return self.model_dump(exclude_none=True)

class TransactionModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    self_box: BoxModel = Field(alias="self")
    outputs: List[BoxModel]
    inputs: List[BoxModel] = Field(default_factory=list)
    height: StrictInt

    def to_dict(self):
        return self.model_dump(by_alias=True, exclude_none=True)

class ConstantsModel(BaseModel):
    owner_condition: str
    dev_fee_script_hash: str
    dev_fee_percent: StrictInt
    proof_of_funding_token_id: str
    designated_asset_id: str = ""
    network: str = "mainnet"

class ValidateRequest(BaseModel):
    tx: TransactionModel
    constants: Optional[ConstantsModel] = None
    version: Optional[str] = None
    mode: str = "EXHAUSTIVE"

class MintValidateRequest(BaseModel):
    tx: TransactionModel
    committed_script_hash: str

class RegistersDecodeRequest(BaseModel):
    data: str
    layout: str

from fastapi import FastAPI, HTTPException, Request

from bene.box import CampaignRegisters
from bene.codec import RegisterLayout, decode_registers, encode_registers, layout_of
from bene.constants import CampaignConstants, ConfigurationError
from bene.context import TransactionContext
from bene.evaluator import CampaignValidator, EvaluationMode
from bene.logging_config import audit_log, configure_logging, get_request_id, set_request_id
from bene.minting import MintGuard
from bene.variants import DEFAULT_REGISTRY

from .config import (
    CONTRACT_VERSION,
    ENV,
    LOG_JSON,
    LOG_LEVEL,
    is_debug,
    is_production,
    load_default_constants,
    validate_config,
)
from .models import MintValidateRequest, RegistersDecodeRequest, RegistersModel, ValidateRequest

app = FastAPI(title="Bene Campaign Validator")


@app.on_event("startup")
def _startup():
    configure_logging(LOG_LEVEL, json_format=LOG_JSON)


@app.middleware("http")
async def _request_id(request: Request, call_next):
    request_id = set_request_id(request.headers.get("x-request-id"))
    response = await call_next(request)
    response.headers["x-request-id"] = request_id
    return response


def _constants_for(req: ValidateRequest) -> CampaignConstants:
    if req.constants is not None:
        return CampaignConstants.from_dict(req.constants.model_dump())
    try:
        return load_default_constants()
    except FileNotFoundError:
        raise HTTPException(400, "NO_CONSTANTS")


def _context_for(tx) -> TransactionContext:
    try:
        return TransactionContext.from_dict(tx.to_dict())
    except ValueError as e:
        raise HTTPException(422, f"INVALID_TRANSACTION: {e}")


@app.get("/health")
def health():
    return {
        "status": "ok",
        "env": ENV,
        "production": is_production(),
        "debug": is_debug(),
        "contract_version": CONTRACT_VERSION,
        "config": validate_config(),
    }


@app.get("/variants")
def variants():
    return [DEFAULT_REGISTRY.get(v).to_dict() for v in DEFAULT_REGISTRY.list_versions()]


@app.post("/validate")
def validate_transaction(req: ValidateRequest):
    version = req.version or CONTRACT_VERSION
    try:
        constants = _constants_for(req)
        mode = EvaluationMode(req.mode)
        validator = CampaignValidator(constants, version, mode=mode)
    except ValueError as e:
        # ConfigurationError / UnknownVariantError / unknown mode
        audit_log.configuration_error(str(e), version=version)
        raise HTTPException(400, f"INVALID_CONFIGURATION: {e}")

    tx = _context_for(req.tx)
    audit_log.validation_request(validator.variant.version.value, constants.get_hash(), tx.height)

    result = validator.evaluate(tx)
    audit_log.validation_decision(
        result.version.value,
        result.decision.value,
        result.matched_actions,
        None if result.structure.passed() else result.structure.to_dict()
    )

    body = result.to_dict()
    body["valid"] = result.accepted()
    body["constants_hash"] = constants.get_hash()
    body["request_id"] = get_request_id()
    return body


@app.post("/mint/validate")
def validate_mint(req: MintValidateRequest):
    try:
        guard = MintGuard(req.committed_script_hash)
    except ConfigurationError as e:
        audit_log.configuration_error(str(e))
        raise HTTPException(400, f"INVALID_CONFIGURATION: {e}")

    evaluation = guard.evaluate(_context_for(req.tx))
    decision = "ACCEPT" if evaluation.passed() else "REJECT"
    audit_log.mint_decision(guard.committed_script_hash.hex(), decision)

    body = evaluation.to_dict()
    body["valid"] = evaluation.passed()
    return body


@app.post("/registers/encode")
def registers_encode(req: RegistersModel):
    try:
        registers = CampaignRegisters.from_dict(req.model_dump())
        data = encode_registers(registers)
    except ValueError as e:
        raise HTTPException(422, f"INVALID_REGISTERS: {e}")
    return {"data": data.hex(), "layout": layout_of(registers).value}


@app.post("/registers/decode")
def registers_decode(req: RegistersDecodeRequest):
    try:
        registers = decode_registers(bytes.fromhex(req.data), RegisterLayout(req.layout))
    except ValueError as e:
        raise HTTPException(422, f"INVALID_REGISTERS: {e}")
    return registers.to_dict()

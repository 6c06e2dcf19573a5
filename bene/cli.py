#!/usr/bin/env python3
"""
Bene Command Line Interface

Usage:
    bene validate --constants <file> --tx <file> [--version v1_2]
    bene mint-check --tx <file> --script-hash <hex>
    bene registers encode --file <file>
    bene registers decode --hex <hex> --layout RATE_AND_ASSET
    bene variants
    bene hash-script --hex <script hex>

Exit codes: 0 accepted, 1 rejected, 2 configuration or input error.
"""

import argparse
import json
import sys

EXIT_ACCEPTED = 0
EXIT_REJECTED = 1
EXIT_ERROR = 2


def load_json(path: str) -> dict:
    """Load JSON from file."""
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def save_json(data: dict, path: str):
    """Save JSON to file."""
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)


def _emit(data: dict, output: str = None):
    if output:
        save_json(data, output)
        print(f"Result saved to: {output}", file=sys.stderr)
    else:
        print(json.dumps(data, indent=2))


def cmd_validate(args) -> int:
    """Validate a transaction against a campaign box."""
    from bene import CampaignConstants, CampaignValidator, EvaluationMode, TransactionContext
    from bene.logging_config import audit_log

    constants = CampaignConstants.from_dict(load_json(args.constants))
    tx = TransactionContext.from_dict(load_json(args.tx))
    mode = EvaluationMode.FIRST_MATCH if args.first_match else EvaluationMode.EXHAUSTIVE

    validator = CampaignValidator(constants, args.version, mode=mode)
    audit_log.validation_request(validator.variant.version.value, constants.get_hash(), tx.height)
    result = validator.evaluate(tx)
    audit_log.validation_decision(
        result.version.value,
        result.decision.value,
        result.matched_actions,
        None if result.structure.passed() else result.structure.to_dict()
    )

    _emit(result.to_dict(), args.output)

    if result.accepted():
        print(f"\n✓ ACCEPT ({', '.join(result.matched_actions)})", file=sys.stderr)
        return EXIT_ACCEPTED

    print("\n✗ REJECT", file=sys.stderr)
    if not result.structure.passed():
        print(f"  - structure: {result.structure.failure_code.value}", file=sys.stderr)
    for evaluation in result.actions:
        code = evaluation.failure_code.value if evaluation.failure_code else "FAIL"
        print(f"  - {evaluation.gate_id}: {code}", file=sys.stderr)
    return EXIT_REJECTED


def cmd_mint_check(args) -> int:
    """Validate a spend of the identity-token carrier."""
    from bene import MintGuard, TransactionContext
    from bene.logging_config import audit_log

    guard = MintGuard(args.script_hash)
    tx = TransactionContext.from_dict(load_json(args.tx))
    evaluation = guard.evaluate(tx)
    decision = "ACCEPT" if evaluation.passed() else "REJECT"
    audit_log.mint_decision(guard.committed_script_hash.hex(), decision)

    _emit(evaluation.to_dict(), args.output)
    return EXIT_ACCEPTED if evaluation.passed() else EXIT_REJECTED


def cmd_registers(args) -> int:
    """Encode or decode campaign registers."""
    from bene import CampaignRegisters, RegisterLayout, decode_registers, encode_registers

    if args.registers_command == "encode":
        registers = CampaignRegisters.from_dict(load_json(args.file))
        print(encode_registers(registers).hex())
    else:
        registers = decode_registers(bytes.fromhex(args.hex), RegisterLayout(args.layout))
        print(json.dumps(registers.to_dict(), indent=2))
    return EXIT_ACCEPTED


def cmd_variants(args) -> int:
    """List the shipped contract generations."""
    from bene.variants import DEFAULT_REGISTRY

    variants = [DEFAULT_REGISTRY.get(v).to_dict() for v in DEFAULT_REGISTRY.list_versions()]
    print(json.dumps(variants, indent=2))
    return EXIT_ACCEPTED


def cmd_hash_script(args) -> int:
    """Print the blake2b-256 fingerprint of a script."""
    from bene import script_hash

    print(script_hash(bytes.fromhex(args.hex)))
    return EXIT_ACCEPTED


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bene",
        description="Bene campaign validator CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bene validate -c constants.json -t tx.json -V v1_1
  bene mint-check -t mint_tx.json -s 3f2a...
  bene registers encode -f registers.json
  bene registers decode -x 00000064... -l SINGLE_RATE
  bene hash-script -x 0008cd02...
        """
    )
    parser.add_argument("--log-level", default="WARNING", help="Log level")
    parser.add_argument("--log-json", action="store_true", help="Structured JSON logs")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # validate
    validate_parser = subparsers.add_parser("validate", help="Validate a campaign transaction")
    validate_parser.add_argument("-c", "--constants", required=True, help="Campaign constants JSON file")
    validate_parser.add_argument("-t", "--tx", required=True, help="Transaction context JSON file")
    validate_parser.add_argument("-V", "--version", default="v1_2", help="Contract version")
    validate_parser.add_argument("--first-match", action="store_true", help="Stop at the first passing action")
    validate_parser.add_argument("-o", "--output", help="Output file for the result")

    # mint-check
    mint_parser = subparsers.add_parser("mint-check", help="Validate an identity-token carrier spend")
    mint_parser.add_argument("-t", "--tx", required=True, help="Transaction context JSON file")
    mint_parser.add_argument("-s", "--script-hash", required=True, help="Committed contract fingerprint (hex)")
    mint_parser.add_argument("-o", "--output", help="Output file for the result")

    # registers
    registers_parser = subparsers.add_parser("registers", help="Register wire codec")
    registers_sub = registers_parser.add_subparsers(dest="registers_command", required=True)
    encode_parser = registers_sub.add_parser("encode", help="Typed registers JSON to wire hex")
    encode_parser.add_argument("-f", "--file", required=True, help="Registers JSON file")
    decode_parser = registers_sub.add_parser("decode", help="Wire hex to typed registers JSON")
    decode_parser.add_argument("-x", "--hex", required=True, help="Encoded registers (hex)")
    decode_parser.add_argument("-l", "--layout", required=True, help="SINGLE_RATE or RATE_AND_ASSET")

    # variants
    subparsers.add_parser("variants", help="List contract versions")

    # hash-script
    hash_parser = subparsers.add_parser("hash-script", help="blake2b-256 of a script")
    hash_parser.add_argument("-x", "--hex", required=True, help="Script bytes (hex)")

    return parser


COMMANDS = {
    "validate": cmd_validate,
    "mint-check": cmd_mint_check,
    "registers": cmd_registers,
    "variants": cmd_variants,
    "hash-script": cmd_hash_script,
}


def main(argv=None) -> int:
    from bene.logging_config import audit_log, configure_logging

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command not in COMMANDS:
        parser.print_help()
        return EXIT_ERROR

    try:
        configure_logging(args.log_level, json_format=args.log_json, stream=sys.stderr)
        return COMMANDS[args.command](args)
    except (OSError, KeyError, ValueError) as e:
        # ConfigurationError, CodecError and malformed JSON are ValueErrors
        audit_log.configuration_error(str(e), command=args.command)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())

"""Command-line interface for sd-jwt-codec."""

import argparse
import json
import sys
from collections.abc import Sequence
from typing import Any, Optional

from . import __version__
from .config import CodecSettings
from .credential import decode_sd_jwt_report
from .digest import SUPPORTED_HASH_ALGS, digest
from .disclosure import parse_disclosures
from .errors import DigestComputationFailure
from .issuer import issue_sd_jwt, load_claims_file
from .jwt_utils import parse_jwt, split_sd_jwt
from .logging_setup import setup_logging
from .presentation import rebuild_sd_jwt
from .signers import ES256Signer


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sd-jwt-codec",
        description="Decode, inspect and reduce SD-JWT verifiable credentials",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add_token_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("token", nargs="?", default="-", help="Compact SD-JWT, or - for stdin")
        sub.add_argument("--file", "-f", help="Read the token from a file")

    # Decode subcommand
    decode_parser = subparsers.add_parser("decode", help="Decode an SD-JWT credential")
    add_token_args(decode_parser)
    decode_parser.add_argument(
        "--warnings", action="store_true", help="Include parse warnings in the output"
    )

    # Disclosures subcommand
    disclosures_parser = subparsers.add_parser("disclosures", help="List disclosures and digests")
    add_token_args(disclosures_parser)

    # Present subcommand
    present_parser = subparsers.add_parser("present", help="Create selective disclosure")
    add_token_args(present_parser)
    present_parser.add_argument(
        "--claims", "-c", nargs="*", default=[], help="Claims to disclose"
    )

    # Digest subcommand
    digest_parser = subparsers.add_parser("digest", help="Digest one disclosure segment")
    digest_parser.add_argument("segment", help="Base64Url disclosure segment")
    digest_parser.add_argument(
        "--alg", choices=sorted(SUPPORTED_HASH_ALGS), default=None, help="Hash algorithm"
    )

    # Issue subcommand
    issue_parser = subparsers.add_parser("issue", help="Issue an SD-JWT from a JSON request")
    issue_parser.add_argument(
        "--input", "-i", required=True,
        help='JSON file: {"vc": {...}, "disclosable": {...}, "exp": 0}',
    )
    issue_parser.add_argument("--key", help="Hex ES256 private key (unsigned if omitted)")
    issue_parser.add_argument("--alg", choices=sorted(SUPPORTED_HASH_ALGS), default=None)

    return parser


def _read_token(args: argparse.Namespace) -> str:
    if args.file:
        with open(args.file, encoding="utf-8") as f:
            return f.read().strip()
    if args.token == "-":
        return sys.stdin.read().strip()
    return args.token.strip()


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _cmd_decode(args: argparse.Namespace, settings: CodecSettings) -> int:
    report = decode_sd_jwt_report(_read_token(args), settings)
    if report.credential is None:
        for warning in report.warnings:
            print(f"Error: {warning.message}", file=sys.stderr)
        return 1

    output = report.credential.to_dict()
    if args.warnings:
        output["warnings"] = [w.to_dict() for w in report.warnings]
    _print_json(output)
    return 0


def _cmd_disclosures(args: argparse.Namespace, settings: CodecSettings) -> int:
    token = _read_token(args)
    payload = parse_jwt(split_sd_jwt(token).jwt) or {}
    hash_alg = str(payload.get("_sd_alg") or settings.DEFAULT_HASH_ALG)

    rows = []
    for disclosure in parse_disclosures(token):
        try:
            disclosure_digest = digest(disclosure, hash_alg)
        except DigestComputationFailure as exc:
            disclosure_digest = None
            print(f"Warning: {exc}", file=sys.stderr)
        rows.append({
            "key": disclosure.key,
            "value": disclosure.value,
            "salt": disclosure.salt,
            "digest": disclosure_digest,
        })
    _print_json(rows)
    return 0


def _cmd_present(args: argparse.Namespace, settings: CodecSettings) -> int:
    print(rebuild_sd_jwt(_read_token(args), args.claims))
    return 0


def _cmd_digest(args: argparse.Namespace, settings: CodecSettings) -> int:
    try:
        print(digest(args.segment.strip(), args.alg or settings.DEFAULT_HASH_ALG))
    except DigestComputationFailure as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def _cmd_issue(args: argparse.Namespace, settings: CodecSettings) -> int:
    request = load_claims_file(args.input)
    signer = ES256Signer(bytes.fromhex(args.key)) if args.key else None
    issued = issue_sd_jwt(
        request.get("vc", {}),
        request.get("disclosable", {}),
        signer=signer,
        hash_alg=args.alg or settings.DEFAULT_HASH_ALG,
        exp=request.get("exp"),
    )
    print(issued.token)
    return 0


_COMMANDS = {
    "decode": _cmd_decode,
    "disclosures": _cmd_disclosures,
    "present": _cmd_present,
    "digest": _cmd_digest,
    "issue": _cmd_issue,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    settings = CodecSettings.from_env()
    setup_logging(verbose=args.verbose, level=settings.LOG_LEVEL)
    try:
        return _COMMANDS[args.command](args, settings)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

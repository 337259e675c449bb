"""
NTAG 424 DNA SDM 인증 CLI.

Usage:
    ntag424-sdm -p <picc_data_hex> -c <cmac_hex> [-k <sdm_key_hex>] [-v]

SDM 키를 지정하지 않으면 NTAG424_SDM_KEY 환경 변수를 사용합니다.
인증 성공 시 종료 코드 0, 실패 또는 오류 시 1을 반환합니다.
"""

import argparse
import logging
import re
import sys
from typing import List, Optional

from .config import get_env_sdm_key_hex
from .constants import SDM_KEY_ENV_VAR
from .verify import verify_sdm_auth

_HEX_RE = re.compile(r"^[0-9A-Fa-f]+$")

EPILOG = f"""\
environment variables:
  {SDM_KEY_ENV_VAR}          default SDM key (32-character hex string)

examples:
  ntag424-sdm -p EF963FF7828658A599F3041510671E88 -c 94EED9EE65337086 -k 00000000000000000000000000000000
  {SDM_KEY_ENV_VAR}=00000000000000000000000000000000 ntag424-sdm -p EF963FF7828658A599F3041510671E88 -c 94EED9EE65337086 -v

exit codes:
  0  authentication successful
  1  authentication failed or error occurred
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ntag424-sdm",
        description="NTAG 424 DNA SDM (SUN) authentication",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-p", "--picc-data", required=True, metavar="HEX",
                        help="encrypted PICC data as hex string")
    parser.add_argument("-c", "--cmac", required=True, metavar="HEX",
                        help="SDM MAC from the tag URL as hex string")
    parser.add_argument("-k", "--sdm-key", metavar="HEX",
                        help=f"SDM key as hex string (default: ${SDM_KEY_ENV_VAR})")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="show detailed output")
    return parser


def _is_hex(value: str) -> bool:
    return bool(_HEX_RE.match(value))


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    # 입력값 검증
    for value, name in ((args.picc_data, "PICC data"), (args.cmac, "CMAC")):
        if not _is_hex(value):
            print(f"Error: {name} must be a valid hex string", file=sys.stderr)
            return 1
    if args.sdm_key and not _is_hex(args.sdm_key):
        print("Error: SDM key must be a valid hex string", file=sys.stderr)
        return 1

    if not args.sdm_key and not get_env_sdm_key_hex():
        print(f"Error: SDM key not provided and {SDM_KEY_ENV_VAR} environment variable not set",
              file=sys.stderr)
        print(f"Use --sdm-key option or set {SDM_KEY_ENV_VAR} environment variable", file=sys.stderr)
        return 1

    if args.verbose:
        key_source = "--sdm-key" if args.sdm_key else SDM_KEY_ENV_VAR
        print("=== NTAG 424 DNA SDM Authentication ===")
        print("Input:")
        print(f"  PICC Data: {args.picc_data.upper()}")
        print(f"  CMAC:      {args.cmac.upper()}")
        print(f"  SDM Key:   (from {key_source})")
        print()

    result = verify_sdm_auth(args.picc_data, args.cmac, args.sdm_key)

    if args.verbose:
        print("Result:")
        print(f"  Success: {result.success}")
        print(f"  UID:     {result.uid}")
        print(f"  Counter: {result.counter}")
        if result.success:
            print(f"  Method:  {result.method}")
        else:
            print(f"  Error:   {result.error}")
        print()
        print("CMAC Comparison:")
        print(f"  Calculated: {result.calculated_cmac}")
        print(f"  Provided:   {result.provided_cmac}")
        print(f"  Match:      {result.calculated_cmac == result.provided_cmac}")
    elif result.success:
        print("✅ Authentication successful")
        print(f"UID: {result.uid}, Counter: {result.counter}")
    else:
        print("❌ Authentication failed")
        if result.error:
            print(f"Error: {result.error}")
        else:
            print(f"CMAC mismatch (calculated {result.calculated_cmac}, provided {result.provided_cmac})")

    return 0 if result.success else 1

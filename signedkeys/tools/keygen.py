# MIT License © 2025 Motohiro Suzuki
"""
tools/keygen.py

Command line front end.

    signedkeys generate [--config FILE] [--encoding hex] [-n COUNT]
    signedkeys verify KEY [--config FILE] [--encoding hex]
    signedkeys keypair

Without --config the generator is built from SIGNEDKEYS_* environment
variables. Keys are printed as text, so the effective encoding must not be
identity.

Exit code:
- 0 ok / key valid
- 1 key invalid
- 2 configuration error
"""

from __future__ import annotations

import argparse
import base64
import logging
import sys

import yaml

from signedkeys.crypto.codecs import IdentityCodec
from signedkeys.crypto.sig_backends import ed25519_keypair
from signedkeys.protocol.config import (
    GeneratorConfig,
    config_from_env,
    load_config,
    with_encoding,
)
from signedkeys.protocol.errors import ConfigurationError, SignedKeysError
from signedkeys.protocol.generator import Generator


def _fail(msg: str, code: int = 2) -> int:
    print(f"[FAIL] {msg}", file=sys.stderr)
    return code


def _build_generator(args: argparse.Namespace) -> Generator:
    cfg = load_config(args.config) if args.config else config_from_env()
    if args.encoding:
        cfg = GeneratorConfig.build(with_encoding(args.encoding), base=cfg)
    return Generator(config=cfg)


def _cmd_generate(args: argparse.Namespace) -> int:
    gen = _build_generator(args)
    if isinstance(gen.config.codec, IdentityCodec):
        return _fail("identity encoding produces binary keys; set an encoding (hex, base64)")
    if args.count <= 0:
        return _fail("--count must be greater than zero")

    for _ in range(args.count):
        print(gen.generate_key().decode("ascii"))
    return 0


def _cmd_verify(args: argparse.Namespace) -> int:
    gen = _build_generator(args)
    result = gen.inspect(args.key.strip())
    if result.valid:
        print("valid")
        return 0
    print(f"invalid: {result.code.value}")
    return 1


def _cmd_keypair(args: argparse.Namespace) -> int:
    kp = ed25519_keypair()
    doc = {
        "signature": {
            "alg": "ed25519",
            "private_key_b64": base64.b64encode(kp.secret_key).decode("ascii"),
            "public_key_b64": base64.b64encode(kp.public_key).decode("ascii"),
        }
    }
    print(yaml.safe_dump(doc, sort_keys=False), end="")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="signedkeys",
        description="Generate and verify signed random keys",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")

    sub = parser.add_subparsers(dest="command")

    def _config_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--config", default=None, help="YAML config file (default: environment)")
        p.add_argument("--encoding", default=None, help="Override encoding (hex, base64)")

    generate = sub.add_parser("generate", help="Generate keys")
    _config_args(generate)
    generate.add_argument("-n", "--count", type=int, default=1, help="Number of keys (default: 1)")

    verify = sub.add_parser("verify", help="Verify a key's signature")
    _config_args(verify)
    verify.add_argument("key", help="Encoded key")

    sub.add_parser("keypair", help="Print a fresh ed25519 key pair as a config snippet")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "generate": _cmd_generate,
        "verify": _cmd_verify,
        "keypair": _cmd_keypair,
    }
    try:
        return commands[args.command](args)
    except ConfigurationError as e:
        return _fail(str(e))
    except SignedKeysError as e:
        return _fail(str(e), code=1)


if __name__ == "__main__":
    raise SystemExit(main())

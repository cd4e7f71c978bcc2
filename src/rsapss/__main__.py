"""The Command Line Interface for the utility.

Generates PEM key pairs, signs messages with RSASSA-PSS and verifies such signatures. Signatures travel as base64
text. A message starting with `P:` is read from the file at the path that follows.

Typical usage example:

    rsapss keygen -P key.pem -p key.pub
    rsapss sign -P key.pem --message "Hi there!"
    OR
    python -m rsapss verify -p key.pub --message "Hi there!" -S <signature>
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import base64
import binascii
import logging
import pathlib
import sys

import rsapss
from rsapss import rsa

logger = logging.getLogger("rsapss")

pubkey = argparse.ArgumentParser(add_help=False)
pubkey.add_argument("--public_key", "-p", type=pathlib.Path, required=True, help="Location of the public key file.")
privkey = argparse.ArgumentParser(add_help=False)
privkey.add_argument("--private_key", "-P", type=pathlib.Path, required=True, help="Location of the private key file.")
payloads = argparse.ArgumentParser(add_help=False)
payloads.add_argument("--message",
                      required=True,
                      help="Message or path to file containing payload. If Path start with `P:`")
payloads.add_argument("--encoding",
                      "-e",
                      choices=["utf-8", "utf-16", "ascii"],
                      default="utf-8",
                      help="Payload encoding.")
sha = argparse.ArgumentParser(add_help=False)
sha.add_argument("--sha", "-s", choices=list(rsa.HASH_TLL), default=rsa.DEFAULT_HASH, help="SHA algorithm to use.")

corep = argparse.ArgumentParser(prog="rsapss")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {rsapss.__version__}")
corep.add_argument("--verbose", action="store_true", help="Log debugging details to stderr.")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands", required=True)

keygen = commands.add_parser("keygen", parents=[privkey, pubkey], help="Key generation utility.")
keygen.add_argument("--keysize", choices=["1024", "2048", "3072", "4096"], default="2048", help="Key size (in bits).")
keygen.add_argument("--random-exponent",
                    action="store_true",
                    help="Draw a random public exponent instead of using 65537.")
keygen.add_argument("--overwrite", "-o", action="store_true", help="Overwrite destination files if they exist.")
minikey = commands.add_parser("minikey", help="Toy 64-bit key generation. Warning! Unsecure.")
sign = commands.add_parser("sign", parents=[privkey, payloads, sha], help="Signing utility.")
verify = commands.add_parser("verify", parents=[pubkey, payloads, sha], help="Signature verification utility.")
verify.add_argument("--signature", "-S", required=True, help="The base64 signature to validate.")


def check_message(mess: str, enc: str) -> bytes:
    """Parse message for path-notice and encode it."""
    if mess.startswith("P:"):
        with open(mess[2:], "rb") as f:
            return f.read()
    return mess.encode(enc)


def main(argv: list[str] | None = None) -> int:
    """Core Command Line Interface."""
    args = corep.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    match args.subcommand:
        case "keygen":
            if (args.private_key.exists() or args.public_key.exists()) and not args.overwrite:
                print("Destination private or public key already exists!", file=sys.stderr)
                return 1
            mode = rsapss.KeyMode.RANDOM_EXPONENT if args.random_exponent else rsapss.KeyMode.FIXED_EXPONENT
            rpk = rsa.RSAPrivKey.generate(int(args.keysize), mode)
            rpk.export(args.private_key)
            rpk.pub.export(args.public_key)
            logger.info("Wrote %s and %s", args.private_key, args.public_key)
            print("Key pair generated!")
        case "minikey":
            e, d, n = rsapss.generate_key_mini()
            print(f"e = {e}\nd = {d}\nn = {n}")
        case "sign":
            message = check_message(args.message, args.encoding)
            rpk = rsa.RSAPrivKey.import_key(args.private_key)
            try:
                signature = rpk.sign(message, args.sha)
            except rsapss.RSAError as exc:
                print(f"Signing failed: {exc.code.name}", file=sys.stderr)
                return 1
            print(base64.b64encode(signature).decode("ascii"))
        case "verify":
            message = check_message(args.message, args.encoding)
            rpu = rsa.RSAPubKey.import_key(args.public_key)
            try:
                signature = base64.b64decode(args.signature, validate=True)
            except binascii.Error:
                print("Signature is not valid base64!", file=sys.stderr)
                return 1
            e = rsa.integer_to_bytes(rpu.expo, rpu.bsize)
            n = rsa.integer_to_bytes(rpu.mod, rpu.bsize)
            try:
                rsapss.pss_verify(message, e, n, signature, args.sha)
            except rsapss.RSAError as exc:
                logger.debug("Verification failed with %s", exc.code.name)
                print("Signature Verification Failed!")
                return 1
            print("Signature Verified!")
    return 0


if __name__ == "__main__":
    sys.exit(main())

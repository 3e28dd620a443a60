# -*- coding: utf-8 -*-
# rhcrypto/apps/cli.py
# Command line entry point: key generation, account/holdings dumps, cost basis report.

import argparse
import json
import sys

from rhcrypto.configs.account_reader import AccountReader, CredentialProvider
from rhcrypto.configs.config_reader import ConfigReader
from rhcrypto.core.runtime.CostBasisEngine import summaries_to_frame
from rhcrypto.drivers.robinhood.driver import init_RobinhoodDriver
from rhcrypto.drivers.robinhood.exceptions import RobinhoodCryptoError
from rhcrypto.drivers.robinhood.signer import derive_public_key, generate_keypair
from rhcrypto.utils.logger import setup_logger


def _print_json(data, out):
    out.write(json.dumps(data, indent=2, default=str) + "\n")


def do_keygen(args, out):
    pair = generate_keypair()
    out.write(f"private_key: {pair.private_key}\n")
    out.write(f"public_key:  {pair.public_key}\n")


def do_pubkey(args, out):
    _, private_key = CredentialProvider(account=args.account, reader=AccountReader(args.config_dir)).get()
    out.write(derive_public_key(private_key) + "\n")


def _driver(args):
    return init_RobinhoodDriver(account=args.account, config_dir=args.config_dir,
                                base_url=args.base_url, timeout=args.timeout)


def do_account(args, out):
    _print_json(_driver(args).get_account(), out)


def do_holdings(args, out):
    _print_json(_driver(args).get_holdings(*args.assets), out)


def do_cost_basis(args, out):
    summaries = _driver(args).compute_cost_basis(args.assets or None)
    if args.json:
        _print_json([s.to_dict() for s in summaries], out)
        return
    if not summaries:
        out.write("no holdings\n")
        return
    out.write(summaries_to_frame(summaries).to_string(index=False) + "\n")


def build_parser():
    ap = argparse.ArgumentParser(prog="rhcrypto", description="Robinhood crypto trading API client.")
    ap.add_argument("--config-dir", help="directory holding account.yaml / settings.yaml (default ~/.rhcrypto)", default=None)
    ap.add_argument("--account", help="account name under accounts.robinhood", default="main")
    ap.add_argument("--base-url", help="API base URL (overrides settings.yaml)", default=None)
    ap.add_argument("--timeout", help="request timeout in seconds", type=float, default=None)
    ap.add_argument("--log-level", help="DEBUG, INFO, WARNING ...", default=None)
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("keygen", help="generate a new Ed25519 key pair").set_defaults(func=do_keygen)
    sub.add_parser("pubkey", help="print the public key of the configured private key").set_defaults(func=do_pubkey)
    sub.add_parser("account", help="print the trading account").set_defaults(func=do_account)

    p = sub.add_parser("holdings", help="print holdings")
    p.add_argument("assets", nargs="*", help="asset codes, e.g. BTC ETH")
    p.set_defaults(func=do_holdings)

    p = sub.add_parser("cost-basis", help="FIFO cost basis of current holdings")
    p.add_argument("assets", nargs="*", help="asset codes, e.g. BTC ETH (default: all held)")
    p.add_argument("--json", help="print JSON instead of a table", action="store_true")
    p.set_defaults(func=do_cost_basis)
    return ap


def main(argv=None, out=None):
    args = build_parser().parse_args(argv)
    out = out or sys.stdout

    try:
        log_settings = ConfigReader(args.config_dir).get_settings()["logging"]
        setup_logger("rhcrypto", log_dir=log_settings["dir"], level=args.log_level or log_settings["level"])
        args.func(args, out)
    except (RobinhoodCryptoError, ValueError) as e:
        sys.stderr.write(f"error: {e}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

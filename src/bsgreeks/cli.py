"""Command-line front end: single valuations, parity check, CSV books, MC.

Examples
--------
    bsgreeks price --spot 100 --strike 105 --expiry 1 --rate 0.05 --vol 0.1985
    bsgreeks price --spot 100 --strike 105 --expiry 1 --rate 0.05 --vol 0.1985 --kind put --json
    bsgreeks parity --spot 100 --strike 105 --expiry 1 --rate 0.05 --vol 0.1985
    bsgreeks batch --input book.csv --output prices.json
    bsgreeks mc --spot 100 --strike 100 --expiry 1 --rate 0.05 --vol 0.2 --seed 7

Batch CSV format
----------------
    id,spot,strike,expiry,rate,vol,kind
    1,100,105,1.0,0.05,0.1985,call
    2,100,105,1.0,0.05,0.1985,put

Exit status: 0 on success, 1 if any batch row failed, 2 for invalid
parameters, 3 for numeric overflow, 4 when an input or output file
cannot be opened.
"""

from __future__ import annotations
import argparse
import csv
import json
import logging
import sys
from pathlib import Path

from . import __version__
from .black_scholes import value, discount_factor
from .config import PricingConfig
from .core import OptionContract, CALL, PUT, normalize_kind
from .errors import BSGreeksError, InvalidParameter, NumericOverflow
from .monte_carlo import euro_price_mc

logger = logging.getLogger("bsgreeks.cli")

_OUTPUTS = ("price", "delta", "gamma", "theta", "vega", "rho")
_BATCH_FIELDS = ("id", "kind") + _OUTPUTS + ("error",)

EXIT_OK, EXIT_ROW_FAILED, EXIT_INVALID, EXIT_OVERFLOW, EXIT_IO = 0, 1, 2, 3, 4


def _kind(s: str):
    try:
        return normalize_kind(s)
    except InvalidParameter:
        raise argparse.ArgumentTypeError("kind must be 'call' or 'put'") from None


def _decimals(s: str) -> int:
    try:
        n = int(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {s!r}") from None
    if n < 0:
        raise argparse.ArgumentTypeError("decimals must be >= 0")
    return n


def add_common(parser: argparse.ArgumentParser):
    parser.add_argument("--spot", type=float, required=True)
    parser.add_argument("--strike", type=float, required=True)
    parser.add_argument("--expiry", type=float, required=True, help="years")
    parser.add_argument("--rate", type=float, required=True, help="cont. risk-free")
    parser.add_argument("--vol", type=float, required=True, help="annualised, e.g. 0.2")


def _contract(args, kind=None) -> OptionContract:
    return OptionContract(args.spot, args.strike, args.expiry, args.rate, args.vol,
                          kind or args.kind)


def _fmt(x: float, decimals: int) -> str:
    return f"{x:.{decimals}f}"


# ---------------------------------------------------------------------------
# Sub-commands
# ---------------------------------------------------------------------------
def cmd_price(args):
    opt = _contract(args)
    v = value(opt)
    if args.json:
        print(json.dumps({"option_type": opt.option_type, **v.as_dict()}))
        return EXIT_OK
    for name in _OUTPUTS:
        print(f"{name + ':':<7}{_fmt(getattr(v, name), args.decimals)}")
    return EXIT_OK


def cmd_parity(args):
    call = value(_contract(args, CALL))
    put  = value(_contract(args, PUT))
    print(f"{'':<7}{'call':>16}{'put':>16}")
    for name in _OUTPUTS:
        print(f"{name:<7}{_fmt(getattr(call, name), args.decimals):>16}"
              f"{_fmt(getattr(put, name), args.decimals):>16}")
    forward = args.spot - args.strike * discount_factor(args.rate, args.expiry)
    residual = (call.price - put.price) - forward
    print(f"parity residual: {residual:.3e}")
    return EXIT_OK


def _price_row(row: dict) -> dict:
    """Value one book row; raises on a bad row."""
    opt = OptionContract(
        spot=float(row["spot"]),
        strike=float(row["strike"]),
        time_to_expiry=float(row["expiry"]),
        risk_free_rate=float(row["rate"]),
        volatility=float(row["vol"]),
        option_type=row.get("kind") or CALL,
    )
    return {"kind": opt.option_type, **value(opt).as_dict()}


def _row_kind(row: dict) -> str:
    raw = row.get("kind") or CALL
    try:
        return normalize_kind(raw)
    except InvalidParameter:
        return raw


def cmd_batch(args):
    with open(args.input, newline="") as f:
        rows = list(csv.DictReader(f))
    logger.info("pricing %d positions from %s", len(rows), args.input)

    results = []
    for i, row in enumerate(rows):
        rid = row.get("id", "")
        try:
            res = {"id": rid, **_price_row(row)}
        except (KeyError, TypeError, ValueError, BSGreeksError) as e:
            msg = f"missing column {e}" if isinstance(e, KeyError) else str(e)
            logger.error("row %d (id=%s): %s", i, rid or "?", msg)
            res = {"id": rid, "kind": _row_kind(row), "error": msg}
        results.append(res)

    output_path = Path(args.output)
    if output_path.suffix == ".json":
        with open(output_path, "w") as f:
            json.dump(results, f, indent=2)
    else:
        with open(output_path, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=_BATCH_FIELDS)
            writer.writeheader()
            for res in results:
                writer.writerow({k: (_fmt(v, args.decimals) if isinstance(v, float) else v)
                                 for k, v in res.items()})

    failed = sum(1 for r in results if "error" in r)
    logger.info("priced %d | failed %d -> %s", len(results) - failed, failed, output_path)
    return EXIT_ROW_FAILED if failed else EXIT_OK


def cmd_mc(args):
    opt = _contract(args)
    px, se = euro_price_mc(
        opt,
        n_paths=args.n_paths,
        seed=args.seed,
        antithetic=not args.no_antithetic,
        control_variate=not args.no_cv,
    )
    exact = value(opt).price
    z = (px - exact) / se if se > 0 else float("nan")
    print(f"mc:     {_fmt(px, args.decimals)}  (stderr {_fmt(se, args.decimals)})")
    print(f"exact:  {_fmt(exact, args.decimals)}")
    print(f"z:      {z:.2f}")
    return EXIT_OK


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------
def build_parser(cfg: PricingConfig) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="bsgreeks",
                                description="Black-Scholes price and Greeks for European options")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("-v", "--verbose", action="count", default=0,
                   help="more logging (-v info, -vv debug)")
    p.add_argument("--log-level", default=None, type=str.upper,
                   choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                   help="explicit log level (overrides -v)")
    p.add_argument("--decimals", type=_decimals, default=cfg.decimals,
                   help=f"fixed-point places in output (default {cfg.decimals})")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_price = sub.add_parser("price", help="price and Greeks of one contract")
    add_common(p_price)
    p_price.add_argument("--kind", type=_kind, default=CALL, help="call|put")
    p_price.add_argument("--json", action="store_true", help="emit JSON")
    p_price.set_defaults(func=cmd_price)

    p_par = sub.add_parser("parity", help="call and put side by side with parity residual")
    add_common(p_par)
    p_par.set_defaults(func=cmd_parity)

    p_batch = sub.add_parser("batch", help="value a CSV book")
    p_batch.add_argument("--input", required=True, help="Path to book CSV")
    p_batch.add_argument("--output", required=True, help="Output path (.csv or .json)")
    p_batch.set_defaults(func=cmd_batch)

    p_mc = sub.add_parser("mc", help="Monte Carlo cross-check (GBM)")
    add_common(p_mc)
    p_mc.add_argument("--kind", type=_kind, default=CALL, help="call|put")
    p_mc.add_argument("--n-paths", dest="n_paths", type=int, default=cfg.mc_paths)
    p_mc.add_argument("--seed", type=int, default=cfg.mc_seed)
    p_mc.add_argument("--no-antithetic", action="store_true")
    p_mc.add_argument("--no-cv", action="store_true", help="disable control variate")
    p_mc.set_defaults(func=cmd_mc)

    return p


def _setup_logging(args, cfg: PricingConfig):
    if args.log_level:
        level = args.log_level
    elif args.verbose:
        level = "DEBUG" if args.verbose > 1 else "INFO"
    else:
        level = cfg.log_level
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("bsgreeks").setLevel(level)


def main(argv=None) -> int:
    try:
        cfg = PricingConfig.from_env()
    except InvalidParameter as e:
        print(f"bsgreeks: error: {e}", file=sys.stderr)
        return EXIT_INVALID

    args = build_parser(cfg).parse_args(argv)
    _setup_logging(args, cfg)

    try:
        return args.func(args)
    except InvalidParameter as e:
        print(f"bsgreeks: error: {e}", file=sys.stderr)
        return EXIT_INVALID
    except NumericOverflow as e:
        print(f"bsgreeks: error: {e}", file=sys.stderr)
        return EXIT_OVERFLOW
    except OSError as e:
        print(f"bsgreeks: error: {e}", file=sys.stderr)
        return EXIT_IO


if __name__ == "__main__":
    sys.exit(main())

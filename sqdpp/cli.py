# --*-- conding:utf-8 --*--
# @time:10/19/26 13:48
# @File:cli.py

from __future__ import annotations
import argparse
from typing import Optional, Sequence

import numpy as np

from .context import RunContext, build_arg_parser, configure_logging
from .io import read_counts
from .pipeline import RecoveryPipeline
from .sampling import counts_to_bit_matrix, subsample


def main(argv: Optional[Sequence[str]] = None) -> int:
    p = argparse.ArgumentParser(description="SQD configuration post-processing CLI")
    build_arg_parser(p)
    p.add_argument("--input", type=str, required=True, help="Counts file (CSV bitstring,count or JSON sample report)")
    p.add_argument("--num-elec", type=int, required=True, help="Electrons per sector (Hartree-Fock reference)")
    p.add_argument("--max-configs", type=int, required=True, help="Maximum configurations kept per iteration")
    p.add_argument("--norb", type=int, default=None, help="Spatial orbitals; inferred from bitstring width if omitted")
    p.add_argument("--out-dir", type=str, default=".", help="Directory for the .bin artifacts")
    p.add_argument("--open-shell", action="store_true", help="Keep separate sector alphabets")
    p.add_argument("--reserve-hf", action="store_true", help="Keep the HF reference through truncation")
    p.add_argument("--seed", type=int, default=None, help="RNG seed for batch subsampling")
    args = p.parse_args(argv)

    ctx = RunContext.from_namespace(args)
    configure_logging(ctx.verbose)
    if ctx.verbose:
        print(ctx.summary(), end="")

    bit_matrix, probs = counts_to_bit_matrix(read_counts(args.input))
    norb = args.norb if args.norb is not None else bit_matrix.shape[1] // 2
    rng = np.random.default_rng(args.seed)

    def batch_source(i_recovery, previous):
        return subsample(bit_matrix, probs, ctx.samples_per_batch, num_batches=1, rng=rng)[0]

    pipeline = RecoveryPipeline(
        ctx,
        out_dir=args.out_dir,
        open_shell=args.open_shell,
        reserve_reference=args.reserve_hf,
    )
    results = pipeline.run(batch_source, norb=norb, num_elec=args.num_elec, max_configs=args.max_configs)

    sectors = ("a", "b") if args.open_shell else ("a",)
    for res in results:
        for s in sectors:
            print(f"[written] iter {res.i_recovery} sector {s.upper()}: "
                  f"{res.paths['sector_' + s]} ({res.counts['kept_' + s]} configs)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

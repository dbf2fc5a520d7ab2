# tools/preview_wheel.py
import argparse
import random
from pathlib import Path

from dotenv import load_dotenv

from prizewheel.constants import MIN_WHEEL_SIZE
from prizewheel.engine import configure, configure_from_env
from prizewheel.render import WHEEL_SIZE, layout_key, render_spin_gif

OUT = Path(__file__).resolve().parents[1] / "preview" / "spin.gif"


def run(spins: int, out: Path, seed: int | None = None, mode: str | None = None, size: int = WHEEL_SIZE) -> list:
    engine = configure_from_env(rng=random.Random(seed))
    if mode:
        # rebuild with the requested tie-break, keeping everything else from the env
        engine = configure(
            engine.segments, engine.rules, engine.pointer_angle, mode,
            min_full_turns=engine.solver.min_full_turns,
            reveal_delay=engine.reveal_delay,
            rng=random.Random(seed),
        )

    outcomes = []
    for _ in range(spins):
        outcome = engine.request_spin()
        rule, _ = engine.policy.rule_for(outcome.spin_number)
        print(f"spin {outcome.spin_number:>3}  {rule:<8}  #{outcome.segment_index:<2} "
              f"{outcome.prize_label:<24} {outcome.start_rotation:>10.2f} -> {outcome.target_rotation:>10.2f}")
        engine.complete_spin(outcome.generation)
        outcomes.append(outcome)

    if outcomes:
        last = outcomes[-1]
        out.parent.mkdir(parents=True, exist_ok=True)
        buf = render_spin_gif(layout_key(engine.segments), last.start_rotation, last.target_rotation,
                              engine.pointer_angle, size=size)
        out.write_bytes(buf.getvalue())
        print(f"GIF of spin {last.spin_number} -> {out} ({len(buf.getvalue()) / 1024:.1f} KB)")
    return outcomes


def _wheel_size(raw: str) -> int:
    size = int(raw)
    if size < MIN_WHEEL_SIZE:
        raise argparse.ArgumentTypeError(f"size must be at least {MIN_WHEEL_SIZE}px")
    return size


def main(argv=None):
    load_dotenv()
    parser = argparse.ArgumentParser(description="Simulate wheel spins and write a GIF of the last one.")
    parser.add_argument("--spins", type=int, default=10)
    parser.add_argument("--out", type=Path, default=OUT)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--mode", choices=["deterministic", "random"], default=None)
    parser.add_argument("--size", type=_wheel_size, default=WHEEL_SIZE)
    args = parser.parse_args(argv)
    run(args.spins, args.out, seed=args.seed, mode=args.mode, size=args.size)


if __name__ == "__main__":
    main()

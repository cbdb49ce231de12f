"""Render one example image per CLI option under ``examples/cli-options``."""

from __future__ import annotations

import subprocess
from pathlib import Path

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--width", "160", "--height", "120"]

# (name, output file, extra arguments)
EXAMPLES: list[tuple[str, str, list[str]]] = [
    ("standard", "mandelbrot.ppm", ["--preset", "standard"]),
    ("zoomed", "mandelbrot_zoomed.ppm", ["--preset", "zoomed", "--backend", "tensor"]),
    ("max-iterations", "high-iterations.ppm", [*BASE_ARGS, "--max-iterations", "400"]),
    ("width", "wide.ppm", [*BASE_ARGS, "--width", "240"]),
    ("height", "short.ppm", [*BASE_ARGS, "--height", "60"]),
    ("zoom", "closer.ppm", [*BASE_ARGS, "--zoom", "0.25"]),
    ("offset-x", "panned-right.ppm", [*BASE_ARGS, "--zoom", "0.5", "--offset-x", "0.75"]),
    ("offset-y", "panned-up.ppm", [*BASE_ARGS, "--zoom", "0.5", "--offset-y", "-0.6"]),
    ("lock-aspect", "locked.ppm", [*BASE_ARGS, "--width", "256", "--lock-aspect"]),
    ("coloring-wrap", "wrap.ppm", [*BASE_ARGS, "--coloring", "wrap"]),
    ("coloring-colormap", "inferno.ppm", [*BASE_ARGS, "--coloring", "inferno"]),
    ("backend", "tensor.ppm", [*BASE_ARGS, "--backend", "tensor"]),
    ("format", "exported.png", [*BASE_ARGS, "--format", "png"]),
    ("verbose", "diagnostic.ppm", [*BASE_ARGS, "--verbose"]),
]


def _check_output(path: Path) -> None:
    if not path.is_file():
        raise RuntimeError(f"Expected file {path} was not created")
    if path.suffix == ".ppm":
        with path.open() as handle:
            magic = handle.readline().strip()
        if magic != "P3":
            raise RuntimeError(f"{path} starts with {magic!r} instead of a P3 header")


def main() -> None:
    for name, filename, args in EXAMPLES:
        print(f"\n[cli-example] {name}")
        target = EXAMPLES_ROOT / name / filename
        target.parent.mkdir(parents=True, exist_ok=True)
        target.unlink(missing_ok=True)
        subprocess.run(["python", "render.py", *args, "--output", str(target)], check=True)
        _check_output(target)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()

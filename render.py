import os
import sys
import warnings
from dataclasses import dataclass
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    # stdout may carry the image itself, so diagnostics go to stderr.
    if VERBOSE:
        kwargs.setdefault("file", sys.stderr)
        print(message, *args, **kwargs)


import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")

import PIL.Image

from mandelbrot import (
    BACKENDS,
    ConfigurationError,
    OutputError,
    RenderParameters,
    available_strategies,
    render_frame,
    validate_parameters,
    write_image,
    write_ppm,
)

from argparse import ArgumentParser

# Acceleration hardware is never used; renders are pinned to the host CPU.
DEVICE = "/CPU:0"

PRESETS = {
    "standard": {
        "width": 800,
        "height": 600,
        "max_iterations": 100,
        "zoom": 1.0,
        "offset_x": 0.0,
        "offset_y": 0.0,
    },
    "zoomed": {
        "width": 800,
        "height": 600,
        "max_iterations": 500,
        "zoom": 0.001,
        "offset_x": -0.7436,
        "offset_y": 0.1318,
    },
}

STDOUT = "-"

_FORMAT_ALIASES = {"jpg": "jpeg", "tif": "tiff"}


@dataclass(frozen=True)
class OutputConfig:
    path: Path | None
    image_format: str

    @property
    def to_stdout(self) -> bool:
        return self.path is None


def build_parser():
    parser = ArgumentParser(description="Render the Mandelbrot set to a plain-text PPM image.")

    parser.add_argument('--preset', choices=sorted(PRESETS), default='standard',
                        help='starting values for every viewport option that is not given explicitly')

    parser.add_argument('--width', type=int,
                        dest='width', help='width of the image in pixels (at least 2)',
                        metavar='WIDTH')

    parser.add_argument('--height', type=int,
                        dest='height', help='height of the image in pixels (at least 2)',
                        metavar='HEIGHT')

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='maximum number of times to iterate z = z*z + c per pixel',
                        metavar='MAX_ITERATIONS')

    parser.add_argument('--zoom', type=float,
                        dest='zoom', help='scale of the viewport; 1.0 shows the standard view, smaller values zoom in',
                        metavar='ZOOM')

    parser.add_argument('--offset-x', type=float,
                        dest='offset_x', help='horizontal pan, subtracted from the real bounds of the view',
                        metavar='OFFSET_X')

    parser.add_argument('--offset-y', type=float,
                        dest='offset_y', help='vertical pan, subtracted from the imaginary bounds of the view',
                        metavar='OFFSET_Y')

    parser.add_argument('--lock-aspect', action='store_true',
                        help='Resize the imaginary range to height/width times the real range to avoid stretching.')

    parser.add_argument('--coloring', type=str, default='reference',
                        help='coloring scheme: %s, or any matplotlib colormap name (e.g. "viridis")'
                        % ', '.join(available_strategies()),
                        metavar='COLORING')

    parser.add_argument('--backend', choices=BACKENDS, default='scalar',
                        help='"scalar" evaluates pixel by pixel; "tensor" evaluates the whole grid with TensorFlow.')

    parser.add_argument('--output', dest='output', type=str, default='mandelbrot.ppm',
                        help='Destination image file. Use "-" to write the PPM image to standard output.')

    parser.add_argument('--format', type=str,
                        dest='format', help='file format of the output. "ppm" writes plain-text P3; any other '
                        'extension supported by Pillow is exported through Pillow. Default: taken from --output.',
                        metavar='FORMAT')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow diagnostics.')

    return parser


def resolve_render_parameters(opt, parser: ArgumentParser) -> RenderParameters:
    values = dict(PRESETS[opt.preset])
    for name in values:
        explicit = getattr(opt, name, None)
        if explicit is not None:
            values[name] = explicit

    params = RenderParameters(
        coloring=opt.coloring,
        lock_aspect=bool(opt.lock_aspect),
        backend=opt.backend,
        **values,
    )
    try:
        validate_parameters(params)
    except ConfigurationError as exc:
        parser.error(str(exc))
    return params


def resolve_output_config(opt, parser: ArgumentParser) -> OutputConfig:
    output_arg = opt.output
    image_format = (opt.format or "").lower().lstrip(".")

    if output_arg == STDOUT:
        if image_format not in ("", "ppm"):
            parser.error("only the ppm format can be written to standard output.")
        return OutputConfig(path=None, image_format="ppm")

    if output_arg.endswith(tuple(filter(None, {os.sep, os.altsep}))):
        parser.error("--output must be a file path.")
    output_path = Path(output_arg).expanduser()

    suffix = output_path.suffix.lower().lstrip(".")
    if not image_format:
        image_format = suffix or "ppm"
    if suffix:
        if _FORMAT_ALIASES.get(suffix, suffix) != _FORMAT_ALIASES.get(image_format, image_format):
            parser.error(f"--output extension .{suffix} does not match --format {image_format}.")
    else:
        output_path = output_path.with_suffix(f".{image_format}")

    if image_format != "ppm" and f".{image_format}" not in PIL.Image.registered_extensions():
        parser.error(f"unsupported image format '{image_format}'.")

    return OutputConfig(path=output_path, image_format=image_format)


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    params = resolve_render_parameters(opt, parser)
    output_config = resolve_output_config(opt, parser)

    log("TensorFlow version: %s" % tf.__version__)
    log("Rendering %dx%d, %d iterations, zoom %g, offset (%g, %g), %s backend"
        % (params.width, params.height, params.max_iterations, params.zoom,
           params.offset_x, params.offset_y, params.backend))

    result = render_frame(params, device=DEVICE)
    viewport = result.viewport
    log("Viewport: real [%.6g, %.6g], imag [%.6g, %.6g]"
        % (viewport.real_min, viewport.real_max, viewport.imag_min, viewport.imag_max))

    try:
        if output_config.to_stdout:
            write_ppm(result.pixels, sys.stdout)
            sys.stdout.flush()
            return 0
        if output_config.image_format == "ppm":
            write_ppm(result.pixels, output_config.path)
        else:
            write_image(result.pixels, output_config.path, output_config.image_format)
    except OutputError as exc:
        print("Error: Could not open file %s for writing." % exc.destination, file=sys.stderr)
        log(str(exc))
        return 1

    print("Mandelbrot image saved to %s" % output_config.path)
    return 0


if __name__ == '__main__':
    sys.exit(main())

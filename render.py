import os
import sys
import time
from argparse import ArgumentParser
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])

if not _cli_verbose and os.environ.get("TF_CPP_MIN_LOG_LEVEL") is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


from mandelfield import (
    ITERMAX,
    FiniteDifferenceBailout,
    MobiusTransform,
    Palette,
    RenderParameters,
    ViewWindow,
    default_filename,
    greyscale_colorizer,
    palette_colorizer,
    render_field,
    to_image,
    write_single_image,
)
from mandelfield.compute import EXECUTORS


def build_parser():
    parser = ArgumentParser(description="Render an escape-time image of the Mandelbrot set.")

    parser.add_argument('--width', type=int, dest='width', metavar='WIDTH', default=1920,
                        help='number of samples along the real axis')
    parser.add_argument('--height', type=int, dest='height', metavar='HEIGHT', default=1080,
                        help='number of samples along the imaginary axis')
    parser.add_argument('--threshold', type=float, dest='threshold', metavar='THRESHOLD', default=300.0,
                        help='magnitude at which a sample counts as escaped')
    parser.add_argument('--max-iterations', type=int, dest='max_iterations', metavar='MAX_ITERATIONS',
                        default=ITERMAX, help='iteration cap per sample')

    parser.add_argument('--top', type=float, default=None,
                        help='half-height of the view window (default: 3 / aspect, i.e. a +/-3 real span)')
    parser.add_argument('--right', type=float, default=None,
                        help='half-width of the view window before aspect scaling (default: same as --top)')
    parser.add_argument('--x-center', type=float, dest='x_center', default=0.0,
                        help='real coordinate of the window center')
    parser.add_argument('--y-center', type=float, dest='y_center', default=0.0,
                        help='imaginary coordinate of the window center')
    parser.add_argument('--exact', action='store_true',
                        help='build the sample grid with exact rational arithmetic')

    parser.add_argument('--mobius', action='store_true',
                        help='translate, rotate and invert every sample before iterating')
    parser.add_argument('--shift', type=complex, default=0.25,
                        help='translation applied before the Mobius rotation, e.g. --shift=0.25 or --shift=-1+0.5j')
    parser.add_argument('--quarter-turns', type=int, dest='quarter_turns', default=1,
                        help='number of quarter turns in the Mobius rotation')

    parser.add_argument('--palette', choices=['default', 'grey'], default='default',
                        help='built-in color ramp')
    parser.add_argument('--stop', dest='stops', action='append', metavar='POS:#RRGGBB',
                        help='custom palette stop. May be repeated; replaces --palette.')
    parser.add_argument('--colormap', type=str, default=None,
                        help='sample the palette from a matplotlib colormap (e.g. "viridis")')

    parser.add_argument('--executor', choices=list(EXECUTORS), default='process',
                        help='how rows are scheduled across cores')
    parser.add_argument('--workers', type=int, default=None,
                        help='number of worker threads/processes (default: cpu count)')
    parser.add_argument('--bailout-tolerance', type=float, dest='bailout_tolerance', default=None,
                        help='end orbits early once their finite differences fall below this value')

    parser.add_argument('--output', type=str, default=None,
                        help='output image path (default: mandelbrot{width}x{height}.{format})')
    parser.add_argument('--format', type=str, dest='format', metavar='FORMAT', default='png',
                        help='image format understood by Pillow. Default: "png".')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging.')

    return parser


def _hex_color(hex_color):
    hex_color = hex_color.lstrip('#')
    if len(hex_color) != 6:
        raise ValueError('colors must be in the form #RRGGBB.')
    try:
        return tuple(int(hex_color[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError as exc:
        raise ValueError('colors must contain only hexadecimal digits.') from exc


def parse_stop(text):
    position, sep, color = text.partition(':')
    if not sep:
        raise ValueError(f"palette stop '{text}' must look like POS:#RRGGBB.")
    try:
        position = float(position)
    except ValueError as exc:
        raise ValueError(f"palette stop position '{position}' is not a number.") from exc
    return position, _hex_color(color)


def resolve_palette(opt, parser):
    if opt.stops and opt.colormap:
        parser.error("--stop cannot be combined with --colormap.")
    try:
        if opt.stops:
            return Palette.from_stops(parse_stop(text) for text in opt.stops)
        if opt.colormap:
            return Palette.from_colormap(opt.colormap)
    except (KeyError, ValueError) as exc:
        parser.error(str(exc))
    if opt.palette == 'grey':
        return None
    return Palette.default()


def resolve_parameters(opt, parser):
    if opt.width <= 0 or opt.height <= 0:
        parser.error("--width and --height must be positive.")
    if opt.threshold <= 0:
        parser.error("--threshold must be positive.")
    if opt.max_iterations < 0:
        parser.error("--max-iterations must not be negative.")

    aspect = opt.width / opt.height
    top = opt.top if opt.top is not None else 3.0 / aspect
    window = ViewWindow(top=top, right=opt.right, x_center=opt.x_center, y_center=opt.y_center)

    transform = MobiusTransform(shift=opt.shift, quarter_turns=opt.quarter_turns) if opt.mobius else None
    bailout = None
    if opt.bailout_tolerance is not None:
        bailout = FiniteDifferenceBailout(tolerance=opt.bailout_tolerance, enabled=True)

    return RenderParameters(
        width=opt.width,
        height=opt.height,
        threshold=opt.threshold,
        itermax=opt.max_iterations,
        window=window,
        exact=bool(opt.exact),
        transform=transform,
        bailout=bailout,
    )


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    params = resolve_parameters(opt, parser)
    if opt.executor == 'tensorflow' and params.bailout is not None:
        parser.error("--bailout-tolerance is not supported by the tensorflow executor.")
    palette = resolve_palette(opt, parser)

    image_format = (opt.format or 'png').lower().lstrip('.') or 'png'
    output_path = Path(opt.output) if opt.output else Path(default_filename(params.width, params.height, image_format))
    output_path = output_path.expanduser().resolve()

    log("rendering {0}x{1}, threshold {2}, cap {3}, executor {4}".format(
        params.width, params.height, params.threshold, params.itermax, opt.executor))

    def progress(done, total):
        log("row {0} out of {1}".format(done, total), end='\r')

    started = time.perf_counter()
    result = render_field(params, executor=opt.executor, workers=opt.workers, progress=progress)
    log("\ncomputed field in {0:.2f}s".format(time.perf_counter() - started))

    if palette is None:
        color_fn = greyscale_colorizer(result.itermax)
    else:
        color_fn = palette_colorizer(palette, result.itermax)

    image = to_image(result.velocities, color_fn, result.itermax)
    write_single_image(image, output_path, image_format)
    log("wrote {0}".format(output_path))
    return output_path


if __name__ == '__main__':
    main()

from __future__ import annotations
import sys
import os
import logging
from config import RenderConfig, OUTPUT_FILE_NAME
from errors import VectorRenderError
from pipeline import convert_file

LOGGER = logging.getLogger(__name__)

def print_usage():
    print("Vector drawable to PNG converter")
    print("Usage: python main.py <vector.xml> [options]")
    print("\nOptions:")
    print("  -o, --output DIR      Output directory (default: current directory)")
    print(f"  -n, --name NAME       Output file name (default: {OUTPUT_FILE_NAME})")
    print("  -d, --density D       Display density, pixels per dp (default: 1.0)")
    print("  -w, --width DP        Default width in dp when the document has none (default: 128)")
    print("  -h, --height DP       Default height in dp when the document has none (default: 128)")
    print("  -j, --workers N       Rasterize shapes on N threads (default: 1)")
    print("  -v, --verbose         Print detailed information")
    print("\nExamples:")
    print("  python main.py ic_launcher.xml")
    print("  python main.py ic_launcher.xml -d 2.75 -o out")

def _take_value(args: list[str], i: int, option: str, convert, check, message: str):
    if i + 1 >= len(args):
        print(f"Error: {option} requires a value")
        return None
    try:
        value = convert(args[i + 1])
    except ValueError:
        print(f"Error: {message}")
        return None
    if not check(value):
        print(f"Error: {message}")
        return None
    return value

def main(argv: list[str] = None) -> int:
    args = sys.argv[1:] if argv is None else argv

    if len(args) == 0:
        print_usage()
        return 2

    verbose = False
    output_dir = os.curdir
    options = {}
    sources = []

    value_options = {
        '-n': ('output_name', str, lambda v: bool(v.strip()), "Name must not be empty"),
        '--name': ('output_name', str, lambda v: bool(v.strip()), "Name must not be empty"),
        '-d': ('density', float, lambda v: v > 0, "Density must be a positive number"),
        '--density': ('density', float, lambda v: v > 0, "Density must be a positive number"),
        '-w': ('default_width_dp', int, lambda v: v > 0, "Width must be a positive integer"),
        '--width': ('default_width_dp', int, lambda v: v > 0, "Width must be a positive integer"),
        '-h': ('default_height_dp', int, lambda v: v > 0, "Height must be a positive integer"),
        '--height': ('default_height_dp', int, lambda v: v > 0, "Height must be a positive integer"),
        '-j': ('workers', int, lambda v: v > 0, "Workers must be a positive integer"),
        '--workers': ('workers', int, lambda v: v > 0, "Workers must be a positive integer"),
    }

    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ['-v', '--verbose']:
            verbose = True
        elif arg in ['-o', '--output']:
            if i + 1 < len(args):
                output_dir = args[i + 1]
                i += 1
            else:
                print("Error: -o/--output requires a path argument")
                return 2
        elif arg in value_options:
            field, convert, check, message = value_options[arg]
            value = _take_value(args, i, arg, convert, check, message)
            if value is None:
                return 2
            options[field] = value
            i += 1
        elif arg.startswith('-'):
            print(f"Unknown option: {arg}")
            return 2
        else:
            sources.append(arg)
        i += 1

    if len(sources) != 1:
        print("Error: Exactly one vector file must be specified")
        return 2

    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    source = sources[0]
    config = RenderConfig(**options)

    if verbose:
        print(f"Processing: {source}")
        print(f"Default size: {config.default_width_dp}x{config.default_height_dp}dp at density {config.density}")

    try:
        output_path = convert_file(source, output_dir, config)
    except VectorRenderError as e:
        LOGGER.error("Export failed: %s", e)
        print(f"Error: {source}: {e}")
        return 1

    print(f"[OK] {source} -> {output_path}")
    return 0

if __name__ == "__main__":
    sys.exit(main())

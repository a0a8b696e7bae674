"""
Command-line entry point for plateplus.
"""
import argparse
import sys

from plateplus.core.data.models import PlateLayout
from plateplus.core.data.parser import import_plate_layout
from plateplus.core.data.plate_map import ORDERS, create_plate_map
from plateplus.core.data.positions import convert_position
from plateplus.core.errors import PlateLayoutError
from plateplus.core.visualization.plots import create_multi_plate_figure, create_plate_figure
from plateplus.modules.config import Config
from plateplus.modules.exporter import export_plate_layout
from plateplus.utils.logger import setup_logging


def build_parser():
    parser = argparse.ArgumentParser(prog="plateplus", description="Reshape and convert microplate layouts.")
    parser.add_argument("--config-dir", help="Directory holding plateplus_config.json")
    parser.add_argument("--log-dir", help="Directory for log files")
    parser.add_argument("--log-level", help="Console log level (DEBUG, INFO, WARNING, ALL)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    imp = subparsers.add_parser("import", help="Normalize a CSV/TSV/XLSX plate table")
    imp.add_argument("file_path")
    imp.add_argument("--plate-size", type=int)
    imp.add_argument("--format", dest="position_format")
    imp.add_argument("--value-column")
    imp.add_argument("--position-column")
    imp.add_argument("--row-column", nargs=2, metavar=("ROW", "COLUMN"))
    row_kind = imp.add_mutually_exclusive_group()
    row_kind.add_argument("--row-is-numeric", dest="row_is_numeric", action="store_true", default=None)
    row_kind.add_argument("--row-is-letter", dest="row_is_numeric", action="store_false")
    imp.add_argument("--plate-column")
    imp.add_argument("--sheet", default=0)
    imp.add_argument("--output", help="Write the normalized table to this file")
    imp.add_argument("--split-position", action="store_true", help="Add plate_row/plate_column to the output")
    imp.add_argument("--figure", help="Write an HTML heatmap of the plate(s) to this file")

    plate_map = subparsers.add_parser("map", help="Generate a plate map template")
    plate_map.add_argument("plate_size", type=int)
    plate_map.add_argument("--start", default="A1")
    plate_map.add_argument("--format", dest="position_format")
    plate_map.add_argument("--order", choices=ORDERS, default="row")
    plate_map.add_argument("--subset", action="store_true", help="Stop at the last well instead of wrapping")
    plate_map.add_argument("--output")

    convert = subparsers.add_parser("convert", help="Convert positions between notations")
    convert.add_argument("values", nargs="+")
    convert.add_argument("--from", dest="from_format", required=True)
    convert.add_argument("--to", dest="to_format", required=True)
    convert.add_argument("--plate-size", type=int)
    return parser


def _sheet(value):
    return int(value) if str(value).isdigit() else value


def run_import(args, config):
    plate_size = args.plate_size or config.default_plate_size
    position_format = args.position_format or config.default_position_format
    df = import_plate_layout(
        args.file_path,
        plate_size=plate_size,
        value_column=args.value_column,
        position_format=position_format,
        position_column=args.position_column,
        row_column=args.row_column,
        row_is_numeric=args.row_is_numeric,
        plate_column=args.plate_column,
        sheet=_sheet(args.sheet),
        candidates=config.column_candidates(),
    )
    config.add_recent_file(args.file_path)

    if args.output:
        export_plate_layout(df, args.output, split_position=args.split_position,
                            position_format=position_format, plate_size=plate_size)
    else:
        print(df.to_string(index=False))

    if args.figure:
        layout = PlateLayout(df, plate_size=plate_size, position_format=position_format)
        if layout.is_multi_plate:
            fig = create_multi_plate_figure(layout, title=args.file_path)
        else:
            fig = create_plate_figure(layout, title=args.file_path)
        fig.write_html(args.figure)


def run_map(args, config):
    position_format = args.position_format or config.default_position_format
    df = create_plate_map(args.plate_size, start_position=args.start, position_format=position_format,
                          include_all=not args.subset, order=args.order)
    if args.output:
        df.to_csv(args.output, index=False)
    else:
        print(df.to_string(index=False))


def run_convert(args, config):
    plate_size = args.plate_size or config.default_plate_size
    for value in args.values:
        print(convert_position(value, args.from_format, args.to_format, plate_size))


COMMANDS = {
    "import": run_import,
    "map": run_map,
    "convert": run_convert,
}


def main(argv=None):
    """Main function to run the command line interface."""
    args = build_parser().parse_args(argv)
    config = Config(args.config_dir)
    config.load()
    if args.log_level:
        config.log_level = args.log_level
    logger = setup_logging(config, log_dir=args.log_dir)

    try:
        COMMANDS[args.command](args, config)
    except PlateLayoutError as e:
        logger.error(str(e))
        return 1
    finally:
        config.save_if_dirty()
    return 0


if __name__ == "__main__":
    sys.exit(main())

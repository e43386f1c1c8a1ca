#!python
"""CLI for mrmselect.

The CLI only reads the feature table and the config, all selection logic lives in `mrmselect.selection`
so that the selection behaves the same from the CLI or a jupyter notebook.
"""

import argparse
import json
import logging
import os
from pathlib import Path

from mrmselect import __version__
from mrmselect.constants.keys import ConfigKeys

logger = logging.getLogger()

EXIT_CODE_USER_ERROR = 1
EXIT_CODE_WRONG_CLI_PARAM = 126
EXIT_CODE_UNKNOWN_ERROR = 127

epilog = "Parameters passed via CLI will overwrite parameters from the config file."

parser = argparse.ArgumentParser(
    description="Select one feature per transition group of targeted (MRM) assays",
    epilog=epilog,
)
parser.add_argument(
    "--version",
    "-v",
    action="store_true",
    help="Print version and exit",
)
parser.add_argument(
    "--input",
    "-i",
    type=str,
    help="Path to the flat feature table (.tsv, .csv or .parquet).",
    nargs="?",
    default=None,
)
parser.add_argument(
    "--output",
    "-o",
    type=str,
    help="Path the selected features are written to (.tsv, .csv or .parquet).",
    nargs="?",
    default=None,
)
parser.add_argument(
    "--config",
    "-c",
    type=str,
    help="Path to config yaml file which will be used to update the default config.",
    nargs="?",
    default=None,
)
parser.add_argument(
    "--config-dict",
    type=str,
    help="Python dictionary which will be used to update the default config. Keys and string values need to be surrounded by "
    'escaped double quotes, e.g. "{\\"strategy\\": \\"qmip\\"}".',
    nargs="?",
    default="{}",
)
parser.add_argument(
    "--strategy",
    type=str,
    choices=["score", "qmip"],
    help="Optimization strategy, overwrites the value from the config.",
    nargs="?",
    default=None,
)
parser.add_argument(
    "--figure",
    type=str,
    help="Path to save a plot of the selected retention times to.",
    nargs="?",
    default=None,
)
parser.add_argument(
    "--log-folder",
    type=str,
    help="Folder to write log.txt to.",
    nargs="?",
    default=None,
)


def read_table(path: str):
    import pandas as pd

    from mrmselect.validation.schemas import ID_COLUMNS, ID_DTYPE

    suffix = Path(path).suffix.lower()
    if suffix == ".parquet":
        return pd.read_parquet(path)

    # ids are parsed directly as integers, the default parser reads columns with empty cells as float
    dtype = dict.fromkeys(ID_COLUMNS, ID_DTYPE)
    if suffix == ".csv":
        return pd.read_csv(path, dtype=dtype)
    return pd.read_csv(path, sep="\t", dtype=dtype)


def write_table(df, path: str) -> None:
    suffix = Path(path).suffix.lower()
    if suffix == ".parquet":
        df.to_parquet(path, index=False)
    elif suffix == ".csv":
        df.to_csv(path, index=False)
    else:
        df.to_csv(path, sep="\t", index=False)


def _get_user_configs(args: argparse.Namespace) -> list[str | dict]:
    """Collect the config updates in the order they are applied: config file, config dict, CLI parameters."""
    user_configs = []
    if args.config is not None:
        user_configs.append(args.config)

    if args.config_dict:
        user_configs.append(json.loads(args.config_dict))

    if args.strategy is not None:
        user_configs.append({ConfigKeys.STRATEGY: args.strategy})

    return user_configs


def run(argv: list[str] | None = None):
    args, unknown = parser.parse_known_args(argv)

    if unknown:
        print(f"Unknown arguments: {unknown}")
        parser.print_help()
        return EXIT_CODE_WRONG_CLI_PARAM

    if args.version:
        print(f"{__version__}")
        return

    if args.input is None or args.output is None:
        parser.print_help()
        print("No input or output specified.")
        return EXIT_CODE_WRONG_CLI_PARAM

    # load modules only here to speed up -v and -h commands
    import matplotlib

    from mrmselect.config import SelectorConfig
    from mrmselect.exceptions import CustomError
    from mrmselect.reporting import logging as reporting
    from mrmselect.selection.selector import FeatureSelector

    reporting.init_logging(args.log_folder)
    reporting.print_logo()
    reporting.print_environment()

    logger.info(f"Input: {Path(args.input).absolute()}, cwd: {os.getcwd()}.")

    # important to suppress matplotlib output
    matplotlib.use("Agg")

    try:
        config = SelectorConfig.from_yaml(*_get_user_configs(args))

        features_df = read_table(args.input)
        selected_df = FeatureSelector(config).select_df(features_df)
        write_table(selected_df, args.output)
        logger.progress(f"Selected features written to {args.output}")

        if args.figure is not None:
            from mrmselect.plotting import plot_selection

            plot_selection(features_df, selected_df, figure_path=args.figure)

    except Exception as e:
        if isinstance(e, CustomError):
            exit_code = EXIT_CODE_USER_ERROR
        else:
            import traceback

            logger.info(traceback.format_exc())
            exit_code = EXIT_CODE_UNKNOWN_ERROR

        logger.error(e)
        return exit_code


if __name__ == "__main__":
    run()

"""Command line interface for laketherm."""

import logging
from pathlib import Path

import click

from laketherm import __version__
from laketherm.config import load_config
from laketherm.idealized import run_idealized_lake
from laketherm.workflows.methods import flatten_config

CONFIG_DEFAULT = Path("laketherm.yml")


def create_logger(fp: Path, console_level: int | str = logging.DEBUG) -> logging.Logger:
    """Create logger with console and file handler.

    Args:
        fp: Path to the log file.
        console_level: Level of the console handler. The file handler logs everything.

    Returns:
        Logger instance.
    """
    logger = logging.getLogger("laketherm")
    # remove any previous handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")

    ch = logging.StreamHandler()
    ch.setLevel(console_level)
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    Path(fp).parent.mkdir(exist_ok=True, parents=True)
    fh = logging.FileHandler(fp)
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(formatter)
    logger.addHandler(fh)
    return logger


@click.group()
@click.version_option(__version__, message="laketherm version: %(version)s")
@click.pass_context
def cli(context: click.core.Context) -> None:
    """Command line interface for laketherm.

    Args:
        context: Click context. (Auto-filled by click)
    """
    if context.obj is None:
        context.obj = {}


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(path_type=Path),
    default=CONFIG_DEFAULT,
    help=f"Path of the configuration file. Defaults to '{CONFIG_DEFAULT}'.",
)
@click.option(
    "--steps",
    type=int,
    default=None,
    help="Number of timesteps to run. Overrides the configuration file.",
)
@click.option(
    "--timing",
    is_flag=True,
    default=False,
    help="Log the time taken by each stage of a step.",
)
def run(config: Path, steps: int | None, timing: bool) -> None:
    """Run an idealized lake described by a configuration file.

    Args:
        config: Path of the configuration file.
        steps: Number of timesteps, overrides the configuration file when given.
        timing: Log the time taken by each stage of a step.
    """
    model_config = load_config(config)
    if steps is not None:
        model_config.idealized.n_steps = steps
    if timing:
        model_config.logging.timing = True

    logger = create_logger(
        Path(model_config.logging.logfile), model_config.logging.loglevel
    )
    logger.info("laketherm %s", __version__)
    for key, value in flatten_config(model_config.model_dump()).items():
        logger.debug("%s: %s", key, value)

    history = run_idealized_lake(model_config)
    logger.info(
        "Finished %d steps, final ice thickness %.4f m",
        model_config.idealized.n_steps,
        history["lake_ice_thickness_m"][-1].max(),
    )

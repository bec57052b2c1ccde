"""Typer-based CLI application for gitinfo."""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer

from gitinfo import __version__
from gitinfo.core.config import DEFAULT_FILENAME, DEFAULT_GIT_BIN, GitInfoConfig
from gitinfo.core.errors import GitInfoError
from gitinfo.core.sidecar import SidecarStore
from gitinfo.utils.paths import list_subdirs

app = typer.Typer(
    name="gitinfo",
    help="Save git repository metadata to a JSON sidecar file",
    add_completion=False,
)

logger = logging.getLogger(__name__)


class OutputFormat(str, Enum):
    """Output format for the show command."""

    JSON = "json"
    YAML = "yaml"


def validate_out(value: str) -> str:
    """Reject sidecar filenames that are empty or contain directories."""
    if not value or value in (".", "..") or Path(value).name != value:
        raise typer.BadParameter(f"must be a plain file name, got {value!r}")
    return value


OutOption = Annotated[
    str,
    typer.Option(
        "--out",
        envvar="GITINFO_FILE",
        callback=validate_out,
        help="Sidecar filename",
    ),
]
GitBinOption = Annotated[
    str,
    typer.Option("--git-bin", envvar="GITINFO_GIT_BIN", help="Git binary name"),
]
RootOption = Annotated[
    str,
    typer.Option(
        "--root",
        envvar="GITINFO_ROOT",
        help="Directory that relative paths are resolved against",
    ),
]
DebugOption = Annotated[
    bool,
    typer.Option("--debug", envvar="GITINFO_DEBUG", help="Show debug data"),
]
LogLevelOption = Annotated[
    str,
    typer.Option(
        help="Logging level (debug, info, warn, error)",
        case_sensitive=False,
        hidden=True,  # Hide from --help
    ),
]


def version_callback(value: bool):
    """Display version and exit."""
    if value:
        typer.echo(f"gitinfo v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True),
    ] = None,
):
    """Gitinfo - git provenance metadata for build artifacts.

    Writes the current tag, origin URL and last commit time of a working
    copy to a small JSON file that can be embedded into a build.
    """
    pass


def configure_logging(debug: bool, log_level: str) -> None:
    """Configure logging from --debug and the hidden --log-level option.

    Raises:
        typer.Exit: If log level is not recognized
    """
    log_level_upper = "DEBUG" if debug else log_level.upper()
    if log_level_upper not in ["DEBUG", "INFO", "WARN", "WARNING", "ERROR"]:
        typer.echo(
            f"❌ Invalid log level: {log_level}. "
            "Must be debug, info, warn, or error.",
            err=True,
        )
        raise typer.Exit(1)

    # Map WARN to WARNING for Python logging
    if log_level_upper == "WARN":
        log_level_upper = "WARNING"

    logging.basicConfig(
        level=getattr(logging, log_level_upper),
        format="%(message)s",
    )


def expand_targets(raw: str, config: GitInfoConfig) -> list[str]:
    """Expand a CLI path into the directories to process.

    A path ending with a separator is a batch: every immediate subdirectory
    (or symlink to one) is returned. Any other path is returned as is.

    Args:
        raw: Path as given on the command line
        config: Config whose root the path is relative to

    Returns:
        List of directory paths (relative to config.root when set)
    """
    if not raw.endswith(("/", os.sep)):
        return [raw]
    return [
        os.path.join(raw, subdir.name)
        for subdir in list_subdirs(config.join_root(raw))
    ]


@app.command()
def write(
    paths: Annotated[
        list[str],
        typer.Argument(
            help="Repository dir(s); a trailing '/' processes each subdirectory"
        ),
    ],
    out: OutOption = DEFAULT_FILENAME,
    git_bin: GitBinOption = DEFAULT_GIT_BIN,
    root: RootOption = "",
    skip_existing: Annotated[
        bool,
        typer.Option(
            "--skip-existing", help="Leave directories that already have the file"
        ),
    ] = False,
    debug: DebugOption = False,
    log_level: LogLevelOption = "info",
):
    """Write the sidecar file into each repository directory.

    Exit codes: 0 on success or when help is shown, 1 on runtime errors
    (invalid path, unwritable file), 2 on bad arguments.
    """
    configure_logging(debug, log_level)
    if debug:
        logger.debug("gitinfo %s", __version__)

    config = GitInfoConfig(debug=debug, file=out, git_bin=git_bin, root=root)
    store = SidecarStore(config)

    written = 0
    skipped = 0
    for raw in paths:
        try:
            targets = expand_targets(raw, store.config)
        except OSError as e:
            typer.echo(f"❌ Cannot list directory {raw}: {e}", err=True)
            raise typer.Exit(1) from e

        for target in targets:
            if skip_existing and store.exists(target):
                typer.echo(f"⏭️  Skipping {target}: {out} exists")
                skipped += 1
                continue

            logger.debug("Looking in %s", target)
            try:
                sidecar = store.write(target)
            except GitInfoError as e:
                typer.echo(f"❌ {e}", err=True)
                if e.__cause__ is not None:
                    logger.debug("Caused by: %s", e.__cause__)
                raise typer.Exit(1) from e
            typer.echo(f"✅ Wrote {sidecar}")
            written += 1

    if skipped:
        typer.echo(f"📄 {written} written, {skipped} skipped")


@app.command()
def show(
    path: Annotated[str, typer.Argument(help="Repository directory")],
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", help="Output format", case_sensitive=False),
    ] = OutputFormat.JSON,
    out: OutOption = DEFAULT_FILENAME,
    git_bin: GitBinOption = DEFAULT_GIT_BIN,
    root: RootOption = "",
    debug: DebugOption = False,
    log_level: LogLevelOption = "warn",
):
    """Print metadata from the sidecar file, or from git if there is none."""
    configure_logging(debug, log_level)

    config = GitInfoConfig(debug=debug, file=out, git_bin=git_bin, root=root)
    store = SidecarStore(config)

    try:
        metadata = store.read_or_make(path)
    except GitInfoError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1) from e

    if output_format == OutputFormat.YAML:
        typer.echo(metadata.to_yaml(), nl=False)
    else:
        typer.echo(metadata.to_json())

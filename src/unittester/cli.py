from __future__ import annotations

from pathlib import Path
import runpy
import traceback

import typer

app = typer.Typer(name="unittester", help="Run immediate-mode unit test scripts")


def _exit_status(exc: SystemExit) -> int:
    # Mirrors the interpreter: None is success, other non-ints print and fail
    if exc.code is None:
        return 0
    if isinstance(exc.code, int):
        return exc.code
    typer.echo(str(exc.code), err=True)
    return 1


@app.command()
def run(
    script: str = typer.Argument(help="Python test script to execute"),
    config: str | None = typer.Option(
        None, "--config", "-c", help="Path to a unittester YAML config"
    ),
    only: list[str] | None = typer.Option(
        None, "--only", help="Run only tests whose id matches this glob (repeatable)"
    ),
    exclude: list[str] | None = typer.Option(
        None, "--exclude", help="Skip tests whose id matches this glob (repeatable)"
    ),
    color: bool | None = typer.Option(
        None, "--color/--no-color", help="Enable or disable ANSI colors"
    ),
    hide_pass: bool | None = typer.Option(
        None,
        "--hide-pass/--show-pass",
        help="Only print failing tests and the summary, or print every test",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
    debug_log: str | None = typer.Option(
        None, "--debug-log", help="Also write debug output to this file"
    ),
):
    """Run a test script with a session bound to the global name `test`."""
    import yaml

    from unittester.config import SessionConfig, load_config
    from unittester.session import UnitTester
    from unittester.verbose import setup_logger

    script_path = Path(script)
    if not script_path.is_file():
        typer.echo(f"Error: test script not found: {script}", err=True)
        raise typer.Exit(1)

    session_config = SessionConfig()
    if config is not None:
        config_path = Path(config)
        if not config_path.exists():
            typer.echo(f"Error: config file not found: {config}", err=True)
            raise typer.Exit(1)
        try:
            session_config = load_config(config_path)
        except (ValueError, yaml.YAMLError) as e:
            typer.echo(f"Error: invalid config {config}: {e}", err=True)
            raise typer.Exit(1)

    # Command-line options take precedence over the config file
    overrides: dict = {}
    if only:
        overrides["only"] = list(only)
    if exclude:
        overrides["exclude"] = list(exclude)
    if color is not None:
        overrides["color"] = color
    if hide_pass is not None:
        overrides["hide_pass"] = hide_pass
    session_config = SessionConfig.model_validate(
        {**session_config.model_dump(), **overrides}
    )

    if verbose or debug_log is not None:
        logger = setup_logger(
            Path(debug_log) if debug_log is not None else None, verbose=verbose
        )
        logger.debug(f"Running {script_path}")

    tester = UnitTester().configure(session_config)

    try:
        runpy.run_path(
            str(script_path), init_globals={"test": tester}, run_name="__main__"
        )
    except SystemExit as e:
        tester.summary()
        status = _exit_status(e)
        raise typer.Exit(max(tester.exit_code, status))
    except Exception:
        tester.summary()
        typer.echo(traceback.format_exc(), err=True)
        typer.echo(f"Error: {script} stopped with an exception", err=True)
        raise typer.Exit(1)

    tester.summary()
    raise typer.Exit(tester.exit_code)


@app.command()
def init(
    dir: str = typer.Option(
        "unittester", "--dir", help="Directory to write the example files into"
    ),
):
    """Write an example config and test script."""
    project_dir = Path(dir)
    project_dir.mkdir(parents=True, exist_ok=True)

    config_file = project_dir / "unittester.yaml"
    script_file = project_dir / "example_tests.py"
    if config_file.exists() or script_file.exists():
        typer.echo(f"Example files already exist in {dir}, skipping.")
        return

    config_file.write_text("""\
color: true
hide_pass: false
# Glob patterns over test ids; ${VAR:-default} reads the environment
only:
  - "${UNITTESTER_ONLY:-*}"
exclude: []
""")

    script_file.write_text("""\
# Run with: unittester run example_tests.py --config unittester.yaml
# The runner binds a unittester.UnitTester session to the name `test`.

test("1+1 equals 2").expect_value(2, lambda: 1 + 1)
test("one third").expect_in_range(0.333, 0.334, lambda: 1 / 3)
test("empty list is falsy").expect_false(lambda: [])
test("int('x') raises").expect_exception(ValueError, lambda: int("x"))
""")

    typer.echo(f"Initialized example in {dir}:")
    typer.echo("  unittester.yaml   - session config")
    typer.echo("  example_tests.py  - example test script")

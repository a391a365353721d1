from __future__ import annotations

import importlib.metadata as md
import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .apps.lab import LabPipeline, render_worksheet
from .config import LabConfig, load_config, resolve_config_path
from .core.confirm import AlwaysNo, AlwaysYes, Confirmer, confirmer_for
from .core.errors import ArtifactWriteError, LabError
from .domain.models import AttackKind, HashAlgorithm, OverwritePolicy
from .infrastructure.cracking.runner import InvocationResult, InvocationStatus, RunnerStats
from .infrastructure.storage.artifact_store import ArtifactWrite

# Typer application: tests import this
app = typer.Typer(no_args_is_help=True, add_completion=False, help="Offline password-cracking practice lab")
console = Console()
logger = logging.getLogger("pwlab.cli")

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"

ConfigOption = typer.Option(None, "--config", "-c", help="YAML config file")
WorkdirOption = typer.Option(None, "--workdir", "-w", help="Lab directory (overrides config)")
YesOption = typer.Option(False, "--yes", "-y", help="Answer yes to every prompt")
NoOption = typer.Option(False, "--assume-no", "-n", help="Answer no to every prompt (headless)")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Debug logging")


def _configure_logging(cfg: LabConfig, verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, cfg.logging.level)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    log_file = cfg.log_file
    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
        except OSError as exc:
            raise ArtifactWriteError(log_file, exc.strerror or str(exc)) from exc
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )
    logging.getLogger("pwlab").setLevel(level)


def _load(config: Path | None, workdir: Path | None, verbose: bool = False) -> LabConfig:
    if config is not None and not Path(config).expanduser().exists():
        console.print(f"[red]Config not found:[/red] {config}")
        raise typer.Exit(code=1)
    resolved = resolve_config_path(config)
    try:
        cfg = load_config(resolved)
    except ValueError as exc:
        console.print(f"[red]Config validation failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    if workdir is not None:
        cfg = cfg.model_copy(update={"workdir": Path(workdir).expanduser()})
    try:
        _configure_logging(cfg, verbose)
    except ArtifactWriteError as exc:
        console.print(f"[red]Cannot open log file:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    logger.debug("Using config %s, workdir %s", resolved, cfg.workdir)
    return cfg


def _confirmer(cfg: LabConfig, yes: bool, assume_no: bool) -> Confirmer:
    if yes and assume_no:
        console.print("[red]--yes and --assume-no are mutually exclusive[/red]")
        raise typer.Exit(code=2)
    if yes:
        return AlwaysYes()
    if assume_no:
        return AlwaysNo()
    return confirmer_for(cfg.tools.confirm, console)


def _report(message: str) -> None:
    console.print(f"\n[bold]==> {message}[/bold]")


def _print_writes(writes: list[ArtifactWrite]) -> None:
    table = Table(title="Lab files")
    table.add_column("File")
    table.add_column("Lines", justify="right")
    table.add_column("Status")
    for w in writes:
        table.add_row(str(w.path), str(w.lines), "written" if w.written else "[yellow]kept[/yellow]")
    console.print(table)


_STATUS_STYLE = {
    InvocationStatus.COMPLETED: "green",
    InvocationStatus.FAILED: "red",
    InvocationStatus.INTERRUPTED: "red",
    InvocationStatus.DECLINED: "yellow",
    InvocationStatus.SKIPPED: "yellow",
    InvocationStatus.PENDING: "white",
}


def _print_results(results: list[InvocationResult], stats: RunnerStats) -> None:
    if not results:
        console.print("No cracking jobs were run.")
        return
    table = Table(title="Cracking jobs")
    table.add_column("Job")
    table.add_column("Status")
    table.add_column("Details")
    for r in results:
        style = _STATUS_STYLE[r.status]
        table.add_row(r.invocation.description, f"[{style}]{r.status.value}[/{style}]", r.reason)
    console.print(table)
    console.print(stats.summary())


def _print_commands(pipeline: LabPipeline) -> None:
    invocations = pipeline.recommended()
    for tool in pipeline.enabled_tools:
        tool_invs = [inv for inv in invocations if inv.tool == tool]
        if not tool_invs:
            continue
        console.print(f"\n[bold]{tool}[/bold]")
        for inv in tool_invs:
            console.print(f"# {inv.description}")
            console.print(inv.command, markup=False, highlight=False, soft_wrap=True)
    console.print("\nShow cracked results: pwlab show --tool <john|hashcat> --algorithm <md5|sha256|sha512crypt>")


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """Entry point for `pwlab` command."""
    if ctx.invoked_subcommand is None:
        console.print("pwlab - use `pwlab --help` to see commands.")
        raise typer.Exit(code=0)


@app.command()
def version() -> None:
    """Print version information."""
    try:
        dist_version = md.version("pwlab")
    except md.PackageNotFoundError:
        from . import __version__

        dist_version = __version__
    console.print(f"pwlab {dist_version}")


@app.command(name="config-validate")
def config_validate(path: Path = typer.Argument(Path("configs/pwlab.yml"))) -> None:
    """Validate and show resolved configuration."""
    resolved = resolve_config_path(path)
    console.print(f"Using config: {resolved}")
    try:
        cfg = load_config(resolved)
    except ValueError as exc:
        console.print(f"Config validation failed: {exc}")
        raise typer.Exit(code=1) from exc
    console.print("Config OK. Key paths:")
    console.print(f"- workdir: {cfg.workdir}")
    console.print(f"- hashcat potfile: {cfg.hashcat_potfile}")
    console.print(f"- overwrite policy: {cfg.artifacts.overwrite.value}")


@app.command(name="config-which")
def config_which(path: Path | None = typer.Option(None, "--config", "-c")) -> None:
    """Print resolved config path by priority rules."""
    console.print(str(resolve_config_path(path)))


@app.command()
def doctor(
    config: Path | None = ConfigOption,
    workdir: Path | None = WorkdirOption,
    verbose: bool = VerboseOption,
) -> None:
    """Show which cracking tools and wordlists are available."""
    cfg = _load(config, workdir, verbose)
    pipeline = LabPipeline(cfg, AlwaysNo())
    table = Table(title="Cracking tools")
    table.add_column("Tool")
    table.add_column("Available")
    table.add_column("Path / reason")
    for tool in pipeline.enabled_tools:
        status = pipeline.capabilities.get_status(tool)
        ok = bool(status and status.available)
        detail = (status.path if ok else status.reason) if status else "disabled"
        table.add_row(tool, "[green]yes[/green]" if ok else "[red]no[/red]", detail or "")
    console.print(table)
    if pipeline.capabilities.missing:
        console.print("Run `pwlab install` to install missing tools.")

    wordlists = pipeline.wordlists()
    if not wordlists:
        console.print("No larger wordlists found; the small wordlist will be used.")
        return
    table = Table(title="Wordlists")
    table.add_column("Name")
    table.add_column("Words", justify="right")
    table.add_column("Size (MB)", justify="right")
    table.add_column("Path")
    for wl in wordlists:
        table.add_row(wl.name, str(wl.word_count), f"{wl.size_mb:.2f}", str(wl.path))
    console.print(table)


@app.command()
def install(
    config: Path | None = ConfigOption,
    yes: bool = YesOption,
    assume_no: bool = NoOption,
    verbose: bool = VerboseOption,
) -> None:
    """Install missing cracking tools (asks before each install)."""
    cfg = _load(config, None, verbose)
    pipeline = LabPipeline(cfg, _confirmer(cfg, yes, assume_no))
    for outcome in pipeline.install():
        if outcome.already_present:
            console.print(f"{outcome.tool}: already installed")
        elif outcome.installed:
            console.print(f"[green]{outcome.tool}: installed[/green]")
        elif outcome.declined:
            console.print(f"[yellow]{outcome.tool}: skipped; its exercises will be skipped[/yellow]")
        else:
            console.print(f"[red]{outcome.tool}: {outcome.error}[/red]")


@app.command()
def generate(
    corpus: Path | None = typer.Option(None, "--corpus", help="Password list to use instead of the sample"),
    overwrite: OverwritePolicy | None = typer.Option(None, "--overwrite", help="keep | overwrite | ask"),
    config: Path | None = ConfigOption,
    workdir: Path | None = WorkdirOption,
    yes: bool = YesOption,
    assume_no: bool = NoOption,
    verbose: bool = VerboseOption,
) -> None:
    """Write the password list, hash files and wordlist."""
    cfg = _load(config, workdir, verbose)
    pipeline = LabPipeline(cfg, _confirmer(cfg, yes, assume_no), overwrite=overwrite)
    try:
        run = pipeline.generate(corpus)
    except LabError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    _print_writes(run.writes)
    console.print(f"{len(run.corpus)} passwords in {pipeline.store.root}")


@app.command()
def commands(
    config: Path | None = ConfigOption,
    workdir: Path | None = WorkdirOption,
    verbose: bool = VerboseOption,
) -> None:
    """Print the recommended cracking commands without running them."""
    cfg = _load(config, workdir, verbose)
    _print_commands(LabPipeline(cfg, AlwaysNo()))


@app.command()
def crack(
    tool: list[str] | None = typer.Option(None, "--tool", "-t", help="john and/or hashcat"),
    algorithm: list[HashAlgorithm] | None = typer.Option(None, "--algorithm", "-a"),
    attack: list[AttackKind] | None = typer.Option(None, "--attack"),
    full: bool = typer.Option(False, "--all", help="Run every exercise, not just the quick set"),
    config: Path | None = ConfigOption,
    workdir: Path | None = WorkdirOption,
    yes: bool = YesOption,
    assume_no: bool = NoOption,
    verbose: bool = VerboseOption,
) -> None:
    """Run cracking exercises against the lab files (asks before each job)."""
    cfg = _load(config, workdir, verbose)
    pipeline = LabPipeline(cfg, _confirmer(cfg, yes, assume_no))
    results = pipeline.crack(tools=tool, algorithms=algorithm, attacks=attack, full=full)
    _print_results(results, pipeline.stats)


@app.command()
def show(
    tool: str = typer.Option("john", "--tool", "-t"),
    algorithm: HashAlgorithm = typer.Option(HashAlgorithm.MD5, "--algorithm", "-a"),
    config: Path | None = ConfigOption,
    workdir: Path | None = WorkdirOption,
    verbose: bool = VerboseOption,
) -> None:
    """Show passwords a tool has already cracked."""
    cfg = _load(config, workdir, verbose)
    pipeline = LabPipeline(cfg, AlwaysNo())
    try:
        cracked = pipeline.show(tool, algorithm)
    except LabError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    if not cracked:
        console.print("Nothing cracked yet.")
        return
    table = Table(title=f"{tool}: {algorithm.value}")
    table.add_column("Hash / label")
    table.add_column("Password")
    for c in cracked:
        table.add_row(c.label, c.password)
    console.print(table)


@app.command()
def worksheet(
    config: Path | None = ConfigOption,
    workdir: Path | None = WorkdirOption,
) -> None:
    """Print the lab worksheet."""
    cfg = _load(config, workdir)
    console.print(render_worksheet(LabPipeline(cfg, AlwaysNo()).store), markup=False, highlight=False, soft_wrap=True)


@app.command()
def lab(
    corpus: Path | None = typer.Option(None, "--corpus", help="Password list to use instead of the sample"),
    overwrite: OverwritePolicy | None = typer.Option(None, "--overwrite", help="keep | overwrite | ask"),
    skip_install: bool = typer.Option(False, "--skip-install"),
    no_crack: bool = typer.Option(False, "--no-crack", help="Only generate files and print commands"),
    config: Path | None = ConfigOption,
    workdir: Path | None = WorkdirOption,
    yes: bool = YesOption,
    assume_no: bool = NoOption,
    verbose: bool = VerboseOption,
) -> None:
    """Run the whole lab: tools, files, commands, cracking, worksheet."""
    cfg = _load(config, workdir, verbose)
    pipeline = LabPipeline(cfg, _confirmer(cfg, yes, assume_no), overwrite=overwrite)
    _report("Password lab starting. Everything stays offline and local.")

    if not skip_install:
        _report("Checking cracking tools")
        for outcome in pipeline.install():
            if not (outcome.already_present or outcome.installed):
                console.print(f"[yellow]{outcome.tool} unavailable; its exercises will be skipped[/yellow]")

    _report(f"Working directory: {pipeline.store.root}")
    try:
        run = pipeline.generate(corpus)
    except LabError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    _print_writes(run.writes)

    _report("Recommended commands")
    _print_commands(pipeline)

    if not no_crack:
        _report("Cracking (each job asks first)")
        run.results = pipeline.crack()
        _print_results(run.results, pipeline.stats)

    _report("LAB WORKSHEET: copy these answers into a notebook or save to a file.")
    console.print(render_worksheet(pipeline.store), markup=False, highlight=False, soft_wrap=True)
    _report(f"Finished. Files are in {pipeline.store.root}")
    console.print(" - For a bigger dictionary, place rockyou.txt in the lab directory and set tools.wordlist: rockyou")
    console.print(f" - To remove all lab files: rm -rf {pipeline.store.root} (only if you are sure)")


def launch() -> None:
    """Entry point when executed as a module/script."""
    cli()  # use the prepared Click command


# Click command export (entrypoint)
cli = typer.main.get_command(app)

__all__ = ["app", "cli"]

if __name__ == "__main__":
    launch()

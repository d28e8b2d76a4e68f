"""
Command implementations for wavpeek CLI
"""
from pathlib import Path
from typing import List, Optional
from rich.console import Console
from rich.table import Table
from wavpeek.utils.config import ConfigManager, WavpeekConfig
from wavpeek.utils.logger import get_logger
from wavpeek.utils.progress import ProgressTracker
from wavpeek.wave import ReadyState, WaveLoader, WaveParser, WaveValidator, read_wave

console = Console()
logger = get_logger()


def _load(file_path: str, config: WavpeekConfig):
    """Read and parse a file, printing read errors"""
    try:
        return read_wave(Path(file_path), config)
    except OSError as e:
        console.print(f"[red]Error:[/red] Cannot read {file_path}: {e}")
        return None


def _report_failure(file_path: str, wave) -> bool:
    if wave.state == ReadyState.UNSUPPORTED_FORMAT:
        console.print(f"[red]✗[/red] {file_path}: unsupported format ({wave.error})")
        return True
    return False


def show_info(file_path: str, config: WavpeekConfig) -> bool:
    """
    Print the parsed header of a WAVE file

    Args:
        file_path: Path to WAVE file
        config: Parser settings

    Returns:
        True if the file parsed successfully
    """
    wave = _load(file_path, config)
    if wave is None:
        return False

    table = Table(title=str(file_path))
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")

    for key, value in wave.to_dict().items():
        table.add_row(key, '-' if value is None else str(value))

    console.print(table)

    if _report_failure(file_path, wave):
        return False

    if wave.samples is None:
        console.print(f"[yellow]⚠[/yellow] No samples decoded for {wave.bits_per_sample}-bit data")

    return True


def show_chunks(file_path: str, config: WavpeekConfig) -> bool:
    """
    Print the subchunk table of a WAVE file

    Args:
        file_path: Path to WAVE file
        config: Parser settings

    Returns:
        True if the file parsed successfully
    """
    wave = _load(file_path, config)
    if wave is None:
        return False

    if not wave.chunks:
        console.print("[yellow]No subchunks found[/yellow]")
    else:
        table = Table(title="Subchunks")
        table.add_column("Tag", style="cyan")
        table.add_column("Header", style="magenta", justify="right")
        table.add_column("Payload", style="magenta", justify="right")
        table.add_column("Length", style="white", justify="right")

        for chunk in sorted(wave.chunks.values(), key=lambda c: c.offset):
            table.add_row(repr(chunk.tag), str(chunk.header_offset), str(chunk.offset), str(chunk.length))

        console.print(table)

    return not _report_failure(file_path, wave)


def show_samples(
    file_path: str,
    config: WavpeekConfig,
    start: int = 0,
    count: int = 16
) -> bool:
    """
    Print a range of raw sample values

    Args:
        file_path: Path to WAVE file
        config: Parser settings
        start: First sample index
        count: Number of samples to print

    Returns:
        True if samples were available
    """
    wave = _load(file_path, config)
    if wave is None or _report_failure(file_path, wave):
        return False

    if wave.samples is None:
        console.print(f"[red]Error:[/red] {wave.bits_per_sample}-bit samples are not supported")
        return False

    window = wave.slice(start, start + count)
    console.print(
        f"[bold]{wave.encoding.name}[/bold] samples "
        f"{start}..{start + len(window)} of {wave.samples.size}"
    )
    console.print(' '.join(str(int(v)) for v in window))
    return True


def validate_files(files: List[str], config: WavpeekConfig) -> bool:
    """
    Validate audio quality of several WAVE files

    Files are read in the background and checked as each load finishes.

    Args:
        files: Paths to WAVE files
        config: Parser and validation settings

    Returns:
        True if every file is valid
    """
    validator = WaveValidator.from_config(config)
    parser = WaveParser(config)
    results = {}

    with WaveLoader(parser) as loader, ProgressTracker(console) as tracker:
        task = tracker.add_task("Validating...", total=len(files))
        loads = [(path, loader.load(Path(path))) for path in files]

        for path, load in loads:
            try:
                wave = load.result()
            except OSError as e:
                results[path] = {'valid': False, 'issues': [f"Failed to read file: {e}"], 'warnings': []}
            else:
                results[path] = validator.validate_wave(wave)
            tracker.update(task)

    table = Table(title="Validation")
    table.add_column("File", style="cyan")
    table.add_column("Status", style="magenta")
    table.add_column("Details", style="white")

    for path, result in results.items():
        status = "[green]✓[/]" if result['valid'] else "[red]✗[/]"
        details = result['issues'] + result['warnings']
        table.add_row(path, status, "; ".join(details) or "OK")

    console.print(table)

    valid = sum(1 for r in results.values() if r['valid'])
    console.print(f"\n{valid}/{len(results)} file(s) valid")
    return valid == len(results)


def init_config(config_path: Optional[str] = None, force: bool = False) -> bool:
    """
    Write a default configuration file

    Args:
        config_path: Destination (default: ~/.wavpeek.yaml)
        force: Overwrite an existing file

    Returns:
        True if the file was written
    """
    manager = ConfigManager(config_path)

    if manager.exists() and not force:
        console.print(f"[yellow]⚠[/yellow] Config already exists at {manager.config_path}")
        console.print("Use [cyan]--force[/cyan] to overwrite it")
        return False

    manager.create_default()
    console.print(f"[green]✓[/green] Wrote default config to {manager.config_path}")
    return True

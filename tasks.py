# tasks.py  ── invoke ≥2.2
from invoke import task, Context  # type: ignore
from typing import Optional

import pathlib


BASE_ENV = pathlib.Path(__file__).parent


def _first_free_port(start: int = 8501) -> int:
    """Return the first TCP port >= *start* that is unused on localhost."""
    import socket
    import contextlib
    for port in range(start, 65535):
        with contextlib.closing(socket.socket()) as s:
            if s.connect_ex(("127.0.0.1", port)):
                return port
    raise RuntimeError("No free port found")


@task(
    help={
        "raw_dir": "Directory holding NBA_PBP_<season>.csv files (default: data/raw)",
        "output_dir": "Where tables and figures are written (default: output)",
        "top_k": "Leaderboard size (default: config.TOP_K)",
        "jobs": "Parallel workers for per-player fits",
    }
)
def analyze(c: Context, raw_dir: Optional[str] = None, output_dir: Optional[str] = None,
            top_k: Optional[int] = None, jobs: int = 1) -> None:
    """Run the full clutch analysis and write tables + figures."""
    from nba_clutch_analysis.config import config
    from nba_clutch_analysis.eda import configure_logging, run_full_analysis

    configure_logging()
    run_full_analysis(
        config.season_files(pathlib.Path(raw_dir)) if raw_dir else None,
        output_dir=output_dir or config.OUTPUT_DIR,
        top_k=int(top_k) if top_k is not None else None,
        n_jobs=int(jobs),
    )


@task(help={"k": "Only run tests matching this expression"})
def test(c: Context, k: Optional[str] = None) -> None:
    """Run the pytest suite."""
    cmd = "pytest -q"
    if k:
        cmd += f" -k '{k}'"
    c.run(cmd, pty=False)


@task(help={"port": "Streamlit port (default: first free from 8501)"})
def app(c: Context, port: Optional[str] = None) -> None:
    """Serve the Streamlit dashboard."""
    port_int = int(port) if port else _first_free_port()
    print(f"🚀 Streamlit on http://localhost:{port_int}")
    c.run(f"streamlit run {BASE_ENV / 'app.py'} --server.port {port_int}", pty=False)

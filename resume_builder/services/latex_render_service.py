import logging
import os
import shutil
import subprocess
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

PDFLATEX_TIMEOUT_SECONDS = 45
_FALLBACK_BINARIES = (
    "/Library/TeX/texbin/pdflatex",
    "/usr/texbin/pdflatex",
    "/usr/local/bin/pdflatex",
)


def _resolve_pdflatex_binary() -> str | None:
    binary = shutil.which("pdflatex")
    if binary:
        return binary
    # Service PATH can miss TeX installs (macOS TeX Live, custom images).
    for candidate in _FALLBACK_BINARIES:
        if Path(candidate).exists():
            return candidate
    return None


def _failure_detail(proc: subprocess.CompletedProcess, log_path: Path) -> str:
    if log_path.exists():
        return log_path.read_text(encoding="utf-8", errors="ignore")[-2000:]
    return (proc.stderr or proc.stdout or "")[-2000:]


def render_latex_to_pdf_bytes(latex: str, jobname: str = "resume") -> bytes:
    """
    Compile a LaTeX document into PDF bytes using the local pdflatex.
    Raises RuntimeError if pdflatex is unavailable or compilation fails.
    """
    pdflatex_bin = _resolve_pdflatex_binary()
    if not pdflatex_bin:
        raise RuntimeError("pdflatex is not installed on the server")

    with tempfile.TemporaryDirectory(prefix="resume_pdf_") as tmpdir:
        tmp = Path(tmpdir)
        tex_path = tmp / f"{jobname}.tex"
        pdf_path = tmp / f"{jobname}.pdf"
        log_path = tmp / f"{jobname}.log"
        tex_path.write_text(latex or "", encoding="utf-8")

        cmd = [
            pdflatex_bin,
            "-interaction=nonstopmode",
            "-halt-on-error",
            "-output-directory",
            str(tmp),
            str(tex_path),
        ]
        env = os.environ.copy()
        env["PATH"] = f"{Path(pdflatex_bin).parent}:{env.get('PATH', '')}"
        logger.debug("Running pdflatex for %s", tex_path.name)
        proc = subprocess.run(
            cmd,
            cwd=str(tmp),
            capture_output=True,
            text=True,
            timeout=PDFLATEX_TIMEOUT_SECONDS,
            env=env,
        )

        if proc.returncode != 0 or not pdf_path.exists():
            raise RuntimeError(f"LaTeX compile failed. {_failure_detail(proc, log_path)}".strip())

        return pdf_path.read_bytes()

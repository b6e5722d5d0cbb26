import logging
import shutil
from pathlib import Path

from tutorial_videos.exceptions import BuildError

logger = logging.getLogger(__name__)


def build_widgets(source_dir: Path, output_dir: Path) -> list[Path]:
    """Copy every widget page from `source_dir` into `output_dir`."""
    source_dir = Path(source_dir)
    output_dir = Path(output_dir)
    if not source_dir.is_dir():
        raise BuildError(f"Widget source directory not found: {source_dir}")

    output_dir.mkdir(parents=True, exist_ok=True)
    pages = sorted(p for p in source_dir.iterdir() if p.suffix == ".html" and p.is_file())
    logger.info(f"Found {len(pages)} widget(s) to build")

    built = []
    for page in pages:
        target = output_dir / page.name
        shutil.copyfile(page, target)
        logger.info(f"  Built: {page.name}")
        built.append(target)
    return built

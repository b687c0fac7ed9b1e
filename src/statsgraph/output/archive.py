"""
Archival of generated graphs.

Each run's outputs and its input report are copied to
`<output>/archive/<build hash>/`, building a history of graphs that can be
compared (or regenerated) across builds. `archive/index.html` lists every
archived build.
"""

import html
import logging
import shutil
from pathlib import Path
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

ARCHIVE_DIRNAME = "archive"
INDEX_FILENAME = "index.html"
STATS_FILENAME = "stats.json"
UNKNOWN_HASH = "unknown"

# Files linked from the index, when present in a build folder
INDEX_LINKS = ("interactive.html", "graph.svg", "graph.pdf", "graph.dot", STATS_FILENAME)

INDEX_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>statsgraph archive</title>
    <style>
        body {{ font-family: sans-serif; margin: 2em; }}
        td {{ padding: 0.2em 1em 0.2em 0; }}
        .hash {{ font-family: monospace; }}
    </style>
</head>
<body>
    <h2>Archived builds</h2>
    <table>
{rows}
    </table>
</body>
</html>
"""

INDEX_ROW_TEMPLATE = '        <tr><td class="hash">{build}</td><td>{links}</td></tr>'


def archive_directory(output_dir: Path, build_hash: str) -> Path:
    return output_dir / ARCHIVE_DIRNAME / (build_hash or UNKNOWN_HASH)


def archive_outputs(
    files: Iterable[Path],
    output_dir: Path,
    build_hash: str,
    stats_file: Optional[Path] = None,
) -> List[Path]:
    """
    Copy existing output files into the archive folder for `build_hash`.

    Missing files (e.g. a format that failed to render) are skipped. The
    input report, when given, is stored as `stats.json`. The archive index
    is rewritten afterwards.

    Returns:
        List[Path]: The archived copies.
    """
    target = archive_directory(output_dir, build_hash)
    target.mkdir(parents=True, exist_ok=True)
    logger.info("Writing archive files to %s", target)

    copies = [(source, target / source.name) for source in files]
    if stats_file is not None:
        copies.append((stats_file, target / STATS_FILENAME))

    archived = []
    for source, destination in copies:
        if not source.exists():
            logger.debug("Skipping missing output %s", source)
            continue
        shutil.copy2(source, destination)
        archived.append(destination)

    write_archive_index(output_dir / ARCHIVE_DIRNAME)
    return archived


def archive_index_html(archive_root: Path) -> str:
    """Index page of every build folder under `archive_root`, newest first."""
    builds = sorted(
        (d for d in archive_root.iterdir() if d.is_dir()),
        key=lambda d: (d.stat().st_mtime, d.name),
        reverse=True,
    )

    rows = []
    for build in builds:
        name = html.escape(build.name)
        links = " ".join(
            f'<a href="{name}/{filename}">{filename}</a>'
            for filename in INDEX_LINKS
            if (build / filename).exists()
        )
        rows.append(INDEX_ROW_TEMPLATE.format(build=name, links=links))
    return INDEX_TEMPLATE.format(rows="\n".join(rows))


def write_archive_index(archive_root: Path) -> Path:
    index_file = archive_root / INDEX_FILENAME
    index_file.write_text(archive_index_html(archive_root), encoding="utf-8")
    logger.debug("Updated archive index %s", index_file)
    return index_file

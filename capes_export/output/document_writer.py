"""Writes finished export documents to disk."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class DocumentWriter:
    """Saves export documents into an output directory."""

    def __init__(self, output_dir: Path):
        """Initialize the writer.

        Args:
            output_dir: Directory receiving the files. Created on first write.
        """
        self._output_dir = output_dir

    @property
    def output_dir(self) -> Path:
        """Get the output directory path."""
        return self._output_dir

    def write(self, content: str, filename: str) -> Path:
        """Write a document as UTF-8.

        Args:
            content: Document text.
            filename: Bare filename; any directory part is discarded.

        Returns:
            Path of the written file.
        """
        self._output_dir.mkdir(parents=True, exist_ok=True)
        path = self._output_dir / Path(filename).name

        # Binary mode keeps RIS CRLF terminators byte-exact on every platform
        with open(path, "wb") as f:
            f.write(content.encode("utf-8"))

        logger.info(f"Wrote {len(content)} characters to {path}")
        return path

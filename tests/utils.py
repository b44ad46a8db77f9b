from __future__ import annotations

from pathlib import Path

from prose_reflow.models import Document

SAMPLE_INFO = """\
1.2 Getting Started
===================

This manual describes how to
configure the program.  Read it
carefully.

   * Menu:
* Intro::          Introduction.
* Usage::          How to use it.

     (setq foo-enable t)
     (foo-mode 1)
"""

SAMPLE_INFO_REFLOWED = """\
1.2 Getting Started
===================

This manual describes how to configure the program.  Read it carefully.

   * Menu:
* Intro::          Introduction.
* Usage::          How to use it.

     (setq foo-enable t)
     (foo-mode 1)
"""

SAMPLE_HELPFUL = """\
Signature
(foo-frobnicate ARG &optional FORCE)

Documentation

Frobnicate ARG, a value that
was wrapped by the panel.

Source Code
;; Defined in ~/foo/foo.el
"""


class FlakyDocument(Document):
    """Document whose edits start failing after a number of successful replaces."""

    def __init__(self, text: str, fail_after: int = 0) -> None:
        super().__init__(text)
        self.fail_after = fail_after
        self.replaces = 0

    def replace(self, begin: int, end: int, new_text: str) -> None:
        if self.replaces >= self.fail_after:
            raise RuntimeError("buffer went away")
        self.replaces += 1
        super().replace(begin, end, new_text)


def write_sample_docs(root: Path) -> Path:
    """Create a small directory of documents to reflow."""
    docs_dir = root / "docs"
    (docs_dir / "nested").mkdir(parents=True)
    (docs_dir / "manual.info").write_text(SAMPLE_INFO, encoding="utf-8")
    (docs_dir / "nested" / "notes.txt").write_text(
        "A short note that\nwraps once.\n", encoding="utf-8"
    )
    (docs_dir / "image.png").write_bytes(b"\x89PNG")
    return docs_dir

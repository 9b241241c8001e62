"""Arranque en desarrollo sin instalar el paquete: `python main.py [opciones]`.

Instalado, el mismo CLI es el script `domain-searcher`.
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
    src = Path(__file__).resolve().parent / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

    # Las tablas Rich usan caracteres fuera de cp1252 (consolas Windows).
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()

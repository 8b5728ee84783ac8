"""Entry point de desarrollo (sin instalar el paquete).

Permite ejecutar la CLI con `python -m main generate --passwords 5` desde la
raíz del repo: añade `src/` al path y delega en `cli.main`.
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
    project_root = Path(__file__).resolve().parent
    src = project_root / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()

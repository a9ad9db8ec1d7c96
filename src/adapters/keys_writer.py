"""Escritura del fichero de keys del enrollment.

Por qué bytes crudos:
- La suite Android lee `keys.json` tal cual lo devolvió el server
  (`client_id`, `client_secret`, ...); no se reformatea ni se valida.
"""

from __future__ import annotations

from pathlib import Path

from core.domain.errors import OutputWriteError


def write_enrollment_keys(*, body: bytes, output_path: Path) -> Path:
    """Escribe `body` en `output_path` (crea/trunca) y devuelve la ruta."""

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("wb") as fh:
            fh.write(body)
    except OSError as exc:
        raise OutputWriteError(f"ERROR writing enrollment keys to {output_path}: {exc}") from exc
    return output_path
